"""Service layer coordinating loading, analysis and the tool boundary."""

from .analyzer import ImageAnalysisService, build_service
from .controller import AnalyzeImageRequest, ImageAnalysisController
from .tools import ToolDispatcher

__all__ = [
    "AnalyzeImageRequest",
    "ImageAnalysisController",
    "ImageAnalysisService",
    "ToolDispatcher",
    "build_service",
]
