"""Vision-language model integration via the OpenRouter chat completions API."""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests import Response, Session

from ..config import AppConfig
from ..errors import AnalysisError, VisionError
from ..images.source import ImageSource
from ..images.transcoder import ImageTranscoder
from .base import AnalysisResult, TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Analyze this image and describe what you see in detail."


class OpenRouterVisionClient:
    """Sends one image plus a prompt to an OpenAI-compatible vision endpoint."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        transcoder: ImageTranscoder | None = None,
        session: Session | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._transcoder = transcoder or ImageTranscoder(self._config)
        self._session = session

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def endpoint(self) -> str:
        return f"{self._config.base_url}/chat/completions"

    def get_default_model(self) -> str:
        return self._config.default_model

    def analyze(
        self,
        source: ImageSource,
        model: str | None = None,
        prompt: str | None = None,
    ) -> AnalysisResult:
        selected_model = model or self._config.default_model
        logger.info("Starting vision analysis with model: %s", selected_model)
        try:
            if not source.data:
                raise AnalysisError("Image data is required for analysis")
            data_url = self._transcoder.to_data_url(source.data)
            payload = self._build_payload(data_url, prompt or DEFAULT_PROMPT, selected_model)
            response = self._post(payload)
            data = self._parse_response(response)
            analysis = self._extract_content(data)
        except VisionError as exc:
            logger.error("Vision analysis failed: %s", exc)
            raise
        except Exception as exc:
            logger.error("Vision analysis failed: %s", exc)
            raise AnalysisError(f"OpenRouter API call failed: {exc}") from exc

        logger.info("Vision analysis completed successfully")
        remote_id = data.get("id")
        return AnalysisResult.create(
            source,
            selected_model,
            analysis,
            usage=TokenUsage.from_payload(data.get("usage")),
            metadata=source.metadata,
            id=remote_id if isinstance(remote_id, str) and remote_id else None,
        )

    # ----- Request construction --------------------------------------------

    def _build_payload(self, data_url: str, prompt: str, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": data_url}},
                    ],
                }
            ],
            "max_tokens": self._config.max_tokens,
        }

    def _headers(self) -> dict[str, str]:
        if not self._config.api_key:
            raise AnalysisError("No API key configured; set OPENROUTER_API_KEY")
        return {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self._config.http_referer,
            "X-Title": self._config.app_title,
        }

    # ----- HTTP helpers ----------------------------------------------------

    def _post(self, payload: dict[str, Any]) -> Response:
        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers=self._headers(),
                timeout=self._config.timeout_seconds,
            )
        except requests.exceptions.Timeout as exc:
            raise AnalysisError(
                f"Request timeout after {self._config.timeout_ms}ms", timed_out=True
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise AnalysisError(f"Failed to contact OpenRouter API: {exc}") from exc
        if response.status_code >= 400:
            raise AnalysisError(f"OpenRouter API error ({response.status_code}): {response.text}")
        return response

    # ----- Response handling -----------------------------------------------

    @staticmethod
    def _parse_response(response: Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise AnalysisError("OpenRouter API returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise AnalysisError("OpenRouter API returned an unexpected payload")
        return data

    @staticmethod
    def _extract_content(data: dict[str, Any]) -> str:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise AnalysisError("No choices returned from API")
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise AnalysisError("No analysis content received from API")
        return content
