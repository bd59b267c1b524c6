"""Value objects describing a loaded image and its properties."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SourceKind(str, Enum):
    """Where an image was loaded from."""

    FILE = "file"
    URL = "url"


@dataclass(frozen=True, slots=True)
class ImageMetadata:
    """Properties sniffed from image bytes. Unknown values stay ``None``."""

    width: int
    height: int
    format: str | None
    size: int
    has_alpha: bool = False
    color_space: str | None = None
    density: int | None = None

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "width": self.width,
            "height": self.height,
            "format": self.format,
            "size": self.size,
            "has_alpha": self.has_alpha,
        }
        if self.color_space is not None:
            payload["color_space"] = self.color_space
        if self.density is not None:
            payload["density"] = self.density
        return payload


@dataclass(frozen=True, slots=True)
class ImageSource:
    """Raw image bytes plus provenance, valid for a single analysis request."""

    kind: SourceKind
    locator: str
    data: bytes
    metadata: ImageMetadata | None = None

    @property
    def is_file(self) -> bool:
        return self.kind is SourceKind.FILE

    @property
    def is_url(self) -> bool:
        return self.kind is SourceKind.URL

    def __repr__(self) -> str:
        return (
            f"ImageSource(kind={self.kind.value!r}, locator={self.locator!r}, "
            f"bytes={len(self.data)})"
        )
