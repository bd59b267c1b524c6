"""Top-level package for the Vision Analyzer library."""

from .config import AppConfig
from .errors import (
    AnalysisError,
    ErrorKind,
    ImageNotFoundError,
    ImageProcessingError,
    InvalidImageError,
    UnsupportedModelError,
    VisionError,
)
from .services.analyzer import ImageAnalysisService, build_service
from .settings_store import SettingsStore

__all__ = [
    "AnalysisError",
    "AppConfig",
    "ErrorKind",
    "ImageAnalysisService",
    "ImageNotFoundError",
    "ImageProcessingError",
    "InvalidImageError",
    "SettingsStore",
    "UnsupportedModelError",
    "VisionError",
    "build_service",
]
