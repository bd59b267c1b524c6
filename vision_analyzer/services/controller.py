"""Boundary layer translating tool arguments and domain errors into stable responses."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ErrorKind, VisionError
from ..models.base import AnalysisResult
from .analyzer import ImageAnalysisService

logger = logging.getLogger(__name__)

INVALID_REQUEST = "INVALID_REQUEST"
INTERNAL_ERROR = "INTERNAL_ERROR"


class AnalyzeImageRequest(BaseModel):
    """Validated arguments of an ``analyze_image`` call."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    source: str = Field(min_length=1, description="Image source: file path or URL.")
    model: str | None = Field(default=None, description="Remote model identifier.")
    prompt: str | None = Field(default=None, description="Custom analysis prompt.")

    @field_validator("source")
    @classmethod
    def _strip_source(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Image source is required")
        return stripped

    @field_validator("model", "prompt")
    @classmethod
    def _blank_as_missing(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @classmethod
    def from_arguments(cls, arguments: Any) -> AnalyzeImageRequest:
        if not isinstance(arguments, Mapping):
            raise ValueError("Invalid arguments provided")
        try:
            return cls.model_validate(dict(arguments))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
                for error in exc.errors()
            )
            raise ValueError(problems) from exc


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def result_payload(result: AnalysisResult) -> dict[str, Any]:
    metadata = result.metadata or result.source.metadata
    return {
        "id": result.id,
        "analysis": result.analysis,
        "model": result.model,
        "timestamp": result.timestamp.isoformat(),
        "metadata": metadata.as_dict() if metadata is not None else None,
        "source": {"type": result.source.kind.value, "path": result.source.locator},
        "usage": result.usage.as_dict() if result.usage is not None else None,
    }


class ImageAnalysisController:
    """Validates untrusted requests and maps every outcome to a tagged dictionary."""

    def __init__(self, service: ImageAnalysisService) -> None:
        self.service = service

    def analyze_image(self, arguments: Any) -> dict[str, Any]:
        logger.info("Processing vision request")
        try:
            request = AnalyzeImageRequest.from_arguments(arguments)
        except ValueError as exc:
            logger.warning("Rejected analyze_image request: %s", exc)
            return error_response(INVALID_REQUEST, str(exc))

        try:
            result = self.service.execute(request.source, request.model, request.prompt)
        except VisionError as exc:
            logger.error("Vision analysis failed: %s", exc)
            return self._domain_error(exc)
        except Exception as exc:
            logger.exception("Unexpected failure in analyze_image")
            return error_response(
                INTERNAL_ERROR,
                "An unexpected error occurred during vision analysis",
                {"originalError": str(exc)},
            )

        logger.info("Vision analysis completed successfully")
        return {"success": True, "data": result_payload(result)}

    def list_models(self) -> dict[str, Any]:
        """Any remote model identifier is accepted, so only the default is reported."""
        return {"models": [], "default": self.service.get_default_model()}

    @staticmethod
    def _domain_error(exc: VisionError) -> dict[str, Any]:
        details = None
        if exc.kind in {ErrorKind.PROCESSING, ErrorKind.ANALYSIS} and exc.cause is not None:
            details = {"cause": str(exc.cause)}
        return error_response(exc.code, str(exc), details)
