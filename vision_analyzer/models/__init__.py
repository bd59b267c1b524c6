"""Result types and remote vision backends."""

from .base import AnalysisResult, TokenUsage, VisionModel
from .openrouter import DEFAULT_PROMPT, OpenRouterVisionClient

__all__ = [
    "AnalysisResult",
    "DEFAULT_PROMPT",
    "OpenRouterVisionClient",
    "TokenUsage",
    "VisionModel",
]
