"""Tests for the boundary controller and tool dispatcher."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from vision_analyzer.errors import (
    AnalysisError,
    ImageNotFoundError,
    ImageProcessingError,
    InvalidImageError,
)
from vision_analyzer.images.source import ImageMetadata, ImageSource, SourceKind
from vision_analyzer.models.base import AnalysisResult, TokenUsage
from vision_analyzer.services.controller import AnalyzeImageRequest, ImageAnalysisController
from vision_analyzer.services.tools import ToolDispatcher


def _result(model: str = "default/model") -> AnalysisResult:
    metadata = ImageMetadata(width=4, height=3, format="png", size=99)
    source = ImageSource(kind=SourceKind.URL, locator="https://h/x.png", data=b"x", metadata=metadata)
    return AnalysisResult(
        id="gen-9",
        source=source,
        model=model,
        analysis="Looks like a test pattern.",
        timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        usage=TokenUsage(1, 2, 3),
        metadata=metadata,
    )


class DummyService:
    def __init__(self, outcome=None) -> None:
        self.outcome = outcome
        self.calls: list[tuple] = []

    def execute(self, source, model=None, prompt=None):
        self.calls.append((source, model, prompt))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome or _result(model or "default/model")

    def get_default_model(self) -> str:
        return "default/model"


def test_request_validation_accepts_minimal_arguments():
    request = AnalyzeImageRequest.from_arguments({"source": " photo.jpg ", "model": "", "extra": 1})
    assert request.source == "photo.jpg"
    assert request.model is None
    assert request.prompt is None


@pytest.mark.parametrize(
    "arguments",
    [
        None,
        "photo.jpg",
        {},
        {"source": ""},
        {"source": "   "},
        {"source": 42},
        {"source": "a.png", "model": 3},
        {"source": "a.png", "prompt": ["list"]},
    ],
)
def test_invalid_arguments_produce_invalid_request(arguments):
    service = DummyService()
    response = ImageAnalysisController(service).analyze_image(arguments)

    assert response["success"] is False
    assert response["error"]["code"] == "INVALID_REQUEST"
    assert service.calls == []


def test_successful_analysis_response_shape():
    service = DummyService()
    response = ImageAnalysisController(service).analyze_image(
        {"source": "https://h/x.png", "model": "other/model", "prompt": "Describe"}
    )

    assert service.calls == [("https://h/x.png", "other/model", "Describe")]
    assert response["success"] is True
    data = response["data"]
    assert data["id"] == "gen-9"
    assert data["model"] == "other/model"
    assert data["analysis"] == "Looks like a test pattern."
    assert data["timestamp"] == "2024-01-02T03:04:05+00:00"
    assert data["source"] == {"type": "url", "path": "https://h/x.png"}
    assert data["metadata"]["width"] == 4
    assert data["usage"] == {"prompt_tokens": 1, "completion_tokens": 2, "total_tokens": 3}


def _raise_from(error, cause):
    try:
        raise error from cause
    except type(error) as exc:
        return exc


@pytest.mark.parametrize(
    ("error", "code", "has_cause"),
    [
        (ImageNotFoundError("File not found: x"), "IMAGE_NOT_FOUND", False),
        (InvalidImageError("Invalid file: x"), "INVALID_IMAGE", False),
        (_raise_from(ImageProcessingError("bad"), OSError("disk")), "IMAGE_PROCESSING_ERROR", True),
        (_raise_from(AnalysisError("remote"), ValueError("json")), "ANALYSIS_ERROR", True),
    ],
)
def test_domain_errors_map_to_codes(error, code, has_cause):
    response = ImageAnalysisController(DummyService(error)).analyze_image({"source": "x"})

    assert response["success"] is False
    assert response["error"]["code"] == code
    assert response["error"]["message"] == str(error)
    assert ("details" in response["error"]) is has_cause
    if has_cause:
        assert response["error"]["details"]["cause"]


def test_unexpected_errors_become_internal_error():
    response = ImageAnalysisController(DummyService(RuntimeError("oops"))).analyze_image(
        {"source": "x"}
    )
    assert response["error"]["code"] == "INTERNAL_ERROR"
    assert "Traceback" not in json.dumps(response)


def test_list_models_reports_default():
    assert ImageAnalysisController(DummyService()).list_models() == {
        "models": [],
        "default": "default/model",
    }


def test_dispatcher_lists_tools():
    dispatcher = ToolDispatcher(ImageAnalysisController(DummyService()))
    tools = dispatcher.list_tools()

    assert [tool["name"] for tool in tools] == ["analyze_image", "list_models"]
    assert tools[0]["inputSchema"]["required"] == ["source"]


def test_dispatcher_analyze_image_success():
    dispatcher = ToolDispatcher(ImageAnalysisController(DummyService()))
    response = dispatcher.call_tool("analyze_image", {"source": "https://h/x.png"})

    assert response["isError"] is False
    payload = json.loads(response["content"][0]["text"])
    assert payload["analysis"] == "Looks like a test pattern."
    assert payload["model"] == "default/model"
    assert "id" not in payload


def test_dispatcher_analyze_image_error():
    service = DummyService(ImageNotFoundError("File not found: x"))
    dispatcher = ToolDispatcher(ImageAnalysisController(service))
    response = dispatcher.call_tool("analyze_image", {"source": "x"})

    assert response["isError"] is True
    assert response["content"][0]["text"] == "Error: Image not found: File not found: x"


def test_dispatcher_list_models():
    dispatcher = ToolDispatcher(ImageAnalysisController(DummyService()))
    payload = json.loads(dispatcher.call_tool("list_models")["content"][0]["text"])

    assert payload == {"available_models": [], "default_model": "default/model", "total_count": 0}


def test_dispatcher_unknown_tool():
    dispatcher = ToolDispatcher(ImageAnalysisController(DummyService()))
    with pytest.raises(KeyError):
        dispatcher.call_tool("delete_everything", {})
