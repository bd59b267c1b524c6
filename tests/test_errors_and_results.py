"""Tests for the error taxonomy, result types and logging setup."""

from __future__ import annotations

import logging

import pytest

from vision_analyzer.errors import (
    AnalysisError,
    ErrorKind,
    ImageNotFoundError,
    ImageProcessingError,
    InvalidImageError,
    UnsupportedModelError,
    VisionError,
)
from vision_analyzer.images.source import ImageMetadata, ImageSource, SourceKind
from vision_analyzer.models.base import AnalysisResult, TokenUsage
from vision_analyzer.utils.logs import configure_logging


@pytest.mark.parametrize(
    ("error", "kind", "message"),
    [
        (ImageNotFoundError("a.png"), ErrorKind.NOT_FOUND, "Image not found: a.png"),
        (InvalidImageError("bad"), ErrorKind.INVALID, "Invalid image: bad"),
        (ImageProcessingError("x"), ErrorKind.PROCESSING, "Image processing failed: x"),
        (AnalysisError("y"), ErrorKind.ANALYSIS, "Vision analysis failed: y"),
        (UnsupportedModelError("m"), ErrorKind.UNSUPPORTED_MODEL, "Model 'm' is not supported"),
    ],
)
def test_error_kinds_and_messages(error, kind, message):
    assert isinstance(error, VisionError)
    assert error.kind is kind
    assert error.code == kind.value
    assert str(error) == message
    assert error.cause is None


def test_cause_is_chained_exception():
    with pytest.raises(ImageProcessingError) as excinfo:
        try:
            raise OSError("disk")
        except OSError as exc:
            raise ImageProcessingError("read") from exc
    assert isinstance(excinfo.value.cause, OSError)


def test_token_usage_from_payload():
    assert TokenUsage.from_payload({"prompt_tokens": 1, "completion_tokens": 2, "total_tokens": 3})
    assert TokenUsage.from_payload({"prompt_tokens": 1}) is None
    assert TokenUsage.from_payload(None) is None
    assert TokenUsage.from_payload({"prompt_tokens": True, "completion_tokens": 1, "total_tokens": 2}) is None


def test_analysis_result_create_generates_id_and_timestamp():
    source = ImageSource(kind=SourceKind.URL, locator="https://h/x.png", data=b"x")
    first = AnalysisResult.create(source, "m", "text")
    second = AnalysisResult.create(source, "m", "text")

    assert first.id != second.id
    assert first.timestamp.tzinfo is not None
    assert first.is_from_url()
    assert not first.is_from_file()
    assert AnalysisResult.create(source, "m", "text", id="remote").id == "remote"


def test_analysis_result_requires_text():
    source = ImageSource(kind=SourceKind.FILE, locator="a", data=b"x")
    with pytest.raises(ValueError):
        AnalysisResult.create(source, "m", "")


def test_metadata_as_dict_omits_unknown_fields():
    metadata = ImageMetadata(width=2, height=1, format="png", size=10)
    assert metadata.as_dict() == {
        "width": 2,
        "height": 1,
        "format": "png",
        "size": 10,
        "has_alpha": False,
    }


def test_source_repr_hides_bytes():
    source = ImageSource(kind=SourceKind.FILE, locator="a.png", data=b"\x00" * 50)
    assert "bytes=50" in repr(source)


def test_configure_logging_is_idempotent():
    configure_logging("debug")
    configure_logging("error")
    logger = logging.getLogger("vision_analyzer")

    marked = [h for h in logger.handlers if getattr(h, "_vision_analyzer", False)]
    assert len(marked) == 1
    assert logger.level == logging.ERROR
