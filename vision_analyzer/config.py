"""Application-wide configuration models and persistence helpers."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

LOG_LEVELS = ("debug", "info", "warning", "error")

# Environment variable -> AppConfig field.
ENV_VARIABLES: dict[str, str] = {
    "OPENROUTER_API_KEY": "api_key",
    "OPENROUTER_BASE_URL": "base_url",
    "OPENROUTER_DEFAULT_MODEL": "default_model",
    "OPENROUTER_TIMEOUT": "timeout_ms",
    "OPENROUTER_MAX_TOKENS": "max_tokens",
    "OPENROUTER_HTTP_REFERER": "http_referer",
    "OPENROUTER_APP_TITLE": "app_title",
    "IMAGE_FETCH_TIMEOUT": "fetch_timeout_ms",
    "MAX_IMAGE_SIZE": "max_image_bytes",
    "IMAGE_QUALITY": "image_quality",
    "LOG_LEVEL": "log_level",
}


class AppConfig(BaseModel):
    """Validates and stores runtime settings for the application."""

    api_key: str | None = Field(
        default=None,
        description="Bearer credential forwarded to the remote vision API.",
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenAI-compatible chat completions API.",
    )
    default_model: str = Field(
        default="anthropic/claude-3.5-sonnet",
        min_length=1,
        description="Model identifier used when a request does not name one.",
    )
    timeout_ms: int = Field(
        default=30000,
        ge=1,
        le=600000,
        description="Timeout (milliseconds) for the remote analysis call.",
    )
    fetch_timeout_ms: int = Field(
        default=30000,
        ge=1,
        le=600000,
        description="Timeout (milliseconds) for downloading images by URL.",
    )
    max_tokens: int = Field(
        default=1000,
        ge=1,
        le=32768,
        description="Maximum number of output tokens requested from the model.",
    )
    http_referer: str = Field(
        default="http://localhost",
        description="Value sent in the HTTP-Referer header to identify the client.",
    )
    app_title: str = Field(
        default="Vision Analyzer",
        description="Value sent in the X-Title header to identify the client.",
    )
    max_image_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Largest accepted image payload in bytes.",
    )
    supported_formats: list[str] = Field(
        default_factory=lambda: ["jpeg", "jpg", "png", "gif", "bmp", "webp"],
        description="Image formats accepted by the validator.",
    )
    image_quality: int = Field(
        default=85,
        ge=1,
        le=100,
        description="Quality used when converting or optimizing JPEG and WebP output.",
    )
    log_level: str = Field(
        default="info",
        description="Logging threshold: debug, info, warning or error.",
    )

    @field_validator("supported_formats")
    @classmethod
    def _normalise_formats(cls, value: list[str]) -> list[str]:
        formats = [item.strip().lstrip(".").lower() for item in value if item.strip()]
        if not formats:
            raise ValueError("At least one supported image format is required.")
        return formats

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level == "warn":
            level = "warning"
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def _normalise_remote_settings(self) -> AppConfig:
        base = self.base_url.strip()
        if not base:
            raise ValueError("Remote base URL must not be empty.")
        if "://" not in base:
            raise ValueError(
                "Remote base URL must include a scheme such as https://openrouter.ai/api/v1."
            )
        self.base_url = base.rstrip("/")
        if self.api_key is not None:
            self.api_key = self.api_key.strip() or None
        return self

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def fetch_timeout_seconds(self) -> float:
        return self.fetch_timeout_ms / 1000.0

    def require_api_key(self) -> str:
        """Return the configured credential or fail with a helpful message."""
        if not self.api_key:
            raise ValueError("OPENROUTER_API_KEY environment variable is required")
        return self.api_key

    def as_dict(self) -> dict[str, Any]:
        """Serialize the configuration to primitive Python types."""
        return self.model_dump(mode="json")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        base: AppConfig | None = None,
    ) -> AppConfig:
        """Overlay environment variables on ``base`` (or the defaults)."""
        env = os.environ if environ is None else environ
        data = base.as_dict() if base is not None else {}
        for variable, field_name in ENV_VARIABLES.items():
            value = env.get(variable)
            if value is not None and value != "":
                data[field_name] = value
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid environment configuration: {exc}") from exc

    @classmethod
    def load(cls, path: Path) -> AppConfig:
        """Load configuration from a YAML or JSON file."""
        data = _read_config_file(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:  # pragma: no cover - pass through details
            raise ValueError(f"Invalid configuration file at {path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Persist configuration to a YAML or JSON file."""
        _write_config_file(path, self.as_dict())


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _write_config_file(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        yaml_text = yaml.safe_dump(
            data,
            allow_unicode=False,
            sort_keys=False,
        )
        path.write_text(yaml_text, encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
