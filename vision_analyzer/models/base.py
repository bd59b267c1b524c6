"""Result types and the interface implemented by remote vision backends."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from ..images.source import ImageMetadata, ImageSource


@dataclass(frozen=True, slots=True)
class TokenUsage:
    """Token counters reported by the remote API."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    @classmethod
    def from_payload(cls, payload: Any) -> TokenUsage | None:
        if not isinstance(payload, dict):
            return None
        values = [
            payload.get("prompt_tokens"),
            payload.get("completion_tokens"),
            payload.get("total_tokens"),
        ]
        if not all(isinstance(value, int) and not isinstance(value, bool) for value in values):
            return None
        return cls(*values)

    def as_dict(self) -> dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Outcome of one successful analysis request."""

    id: str
    source: ImageSource
    model: str
    analysis: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    usage: TokenUsage | None = None
    metadata: ImageMetadata | None = None

    @classmethod
    def create(
        cls,
        source: ImageSource,
        model: str,
        analysis: str,
        *,
        usage: TokenUsage | None = None,
        metadata: ImageMetadata | None = None,
        id: str | None = None,
    ) -> AnalysisResult:
        if not analysis:
            raise ValueError("analysis text must not be empty")
        return cls(
            id=id or str(uuid.uuid4()),
            source=source,
            model=model,
            analysis=analysis,
            usage=usage,
            metadata=metadata,
        )

    def is_from_file(self) -> bool:
        return self.source.is_file

    def is_from_url(self) -> bool:
        return self.source.is_url


class VisionModel(Protocol):
    """Interface every remote vision backend must satisfy."""

    def get_default_model(self) -> str:
        """Return the model identifier used when none is requested."""

    def analyze(
        self,
        source: ImageSource,
        model: str | None = None,
        prompt: str | None = None,
    ) -> AnalysisResult:
        """Describe ``source`` using the remote model."""
