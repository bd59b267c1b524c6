"""Utility helpers for the Vision Analyzer package."""

from .logs import configure_logging

__all__ = ["configure_logging"]
