"""Core service orchestrating image loading and remote analysis."""

from __future__ import annotations

import logging

import requests
from requests import Session

from ..config import AppConfig
from ..errors import AnalysisError, ImageProcessingError, VisionError
from ..images.inspector import ImageInspector
from ..images.loader import ImageLoader
from ..images.transcoder import ImageTranscoder
from ..models.base import AnalysisResult, VisionModel
from ..models.openrouter import OpenRouterVisionClient

logger = logging.getLogger(__name__)


class ImageAnalysisService:
    """Runs one load-then-analyze request at a time; holds no per-request state."""

    def __init__(self, loader: ImageLoader, model: VisionModel) -> None:
        self.loader = loader
        self.model = model

    def execute(
        self,
        source: str,
        model: str | None = None,
        prompt: str | None = None,
    ) -> AnalysisResult:
        """Load ``source`` and describe it with the remote model.

        Only :class:`~vision_analyzer.errors.VisionError` subclasses escape;
        anything unexpected is wrapped in :class:`AnalysisError`.
        """
        logger.debug("Analyzing %s", source)
        try:
            image_source = self.loader.load(source)
            if not image_source.data:
                raise ImageProcessingError("Failed to load image data")
            return self.model.analyze(image_source, model, prompt)
        except VisionError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while analyzing %s", source)
            raise AnalysisError("Unexpected error during vision analysis") from exc

    def get_default_model(self) -> str:
        return self.model.get_default_model()


def build_service(config: AppConfig, *, session: Session | None = None) -> ImageAnalysisService:
    """Wire the default component graph around a single HTTP session."""
    http = session or requests.Session()
    inspector = ImageInspector(config)
    transcoder = ImageTranscoder(config)
    loader = ImageLoader(config, inspector=inspector, session=http)
    client = OpenRouterVisionClient(config, transcoder=transcoder, session=http)
    return ImageAnalysisService(loader, client)
