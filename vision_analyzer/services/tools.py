"""Tool definitions and dispatch for protocol front-ends."""

from __future__ import annotations

import json
import logging
from typing import Any

from .controller import ImageAnalysisController

logger = logging.getLogger(__name__)

ANALYZE_IMAGE_TOOL: dict[str, Any] = {
    "name": "analyze_image",
    "description": "Analyze an image using AI vision models. Supports file paths and URLs.",
    "inputSchema": {
        "type": "object",
        "properties": {
            "source": {
                "type": "string",
                "description": "Image source: file path or URL",
            },
            "model": {
                "type": "string",
                "description": (
                    "AI model to use for analysis (optional, uses the configured default "
                    "if not specified). Any model available on OpenRouter can be used."
                ),
            },
            "prompt": {
                "type": "string",
                "description": "Custom analysis prompt (optional, uses default if not specified)",
            },
        },
        "required": ["source"],
    },
}

LIST_MODELS_TOOL: dict[str, Any] = {
    "name": "list_models",
    "description": "Get list of available AI vision models for vision analysis",
    "inputSchema": {"type": "object", "properties": {}},
}


def _text_content(text: str, *, is_error: bool = False) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


class ToolDispatcher:
    """Maps tool names to controller calls and renders their results as text content."""

    def __init__(self, controller: ImageAnalysisController) -> None:
        self.controller = controller

    def list_tools(self) -> list[dict[str, Any]]:
        return [ANALYZE_IMAGE_TOOL, LIST_MODELS_TOOL]

    def call_tool(self, name: str, arguments: Any = None) -> dict[str, Any]:
        logger.info("Tool called: %s", name)
        if name == "analyze_image":
            return self._analyze_image(arguments)
        if name == "list_models":
            return self._list_models()
        available = ", ".join(tool["name"] for tool in self.list_tools())
        raise KeyError(f"Unknown tool '{name}'. Available: {available}")

    def _analyze_image(self, arguments: Any) -> dict[str, Any]:
        result = self.controller.analyze_image(arguments)
        if not result["success"]:
            return _text_content(f"Error: {result['error']['message']}", is_error=True)
        data = result["data"]
        payload = {
            "analysis": data["analysis"],
            "model": data["model"],
            "timestamp": data["timestamp"],
            "metadata": data["metadata"],
            "source": data["source"],
            "usage": data["usage"],
        }
        return _text_content(json.dumps(payload, indent=2))

    def _list_models(self) -> dict[str, Any]:
        try:
            models = self.controller.list_models()
        except Exception:
            logger.exception("Failed to list models")
            return _text_content("Error: Failed to retrieve available models", is_error=True)
        payload = {
            "available_models": models["models"],
            "default_model": models["default"],
            "total_count": len(models["models"]),
        }
        return _text_content(json.dumps(payload, indent=2))
