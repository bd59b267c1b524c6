"""Closed set of failures raised by the analysis pipeline."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Machine-readable failure categories exposed to callers."""

    NOT_FOUND = "IMAGE_NOT_FOUND"
    INVALID = "INVALID_IMAGE"
    PROCESSING = "IMAGE_PROCESSING_ERROR"
    ANALYSIS = "ANALYSIS_ERROR"
    UNSUPPORTED_MODEL = "UNSUPPORTED_MODEL"


class VisionError(RuntimeError):
    """Base class for every failure that may cross the service boundary."""

    kind: ClassVar[ErrorKind]
    prefix: ClassVar[str] = ""

    def __init__(self, message: str) -> None:
        super().__init__(f"{self.prefix}{message}")

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def cause(self) -> BaseException | None:
        """Exception this error was raised from, if any."""
        return self.__cause__


class ImageNotFoundError(VisionError):
    """Raised when a file does not exist or a URL answers with an error status."""

    kind = ErrorKind.NOT_FOUND
    prefix = "Image not found: "


class InvalidImageError(VisionError):
    """Raised when loaded bytes fail the format, size or dimension policy."""

    kind = ErrorKind.INVALID
    prefix = "Invalid image: "


class ImageProcessingError(VisionError):
    """Raised on decode/encode failures and unexpected I/O errors."""

    kind = ErrorKind.PROCESSING
    prefix = "Image processing failed: "


class AnalysisError(VisionError):
    """Raised when the remote model call fails or returns unusable output."""

    kind = ErrorKind.ANALYSIS
    prefix = "Vision analysis failed: "

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


class UnsupportedModelError(VisionError):
    """Reserved for model allow-lists; any remote identifier is accepted today."""

    kind = ErrorKind.UNSUPPORTED_MODEL

    def __init__(self, model: str) -> None:
        super().__init__(f"Model '{model}' is not supported")
        self.model = model
