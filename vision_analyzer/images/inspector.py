"""Format sniffing, policy validation and metadata extraction for image bytes."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable

from PIL import Image

from ..config import AppConfig
from ..errors import ImageProcessingError
from .source import ImageMetadata

logger = logging.getLogger(__name__)

# Pillow reports multi-picture camera JPEGs as MPO.
_FORMAT_ALIASES = {"mpo": "jpeg", "jpg": "jpeg"}

_COLOR_SPACES = {
    "1": "b-w",
    "L": "b-w",
    "LA": "b-w",
    "I": "b-w",
    "I;16": "b-w",
    "F": "b-w",
    "P": "srgb",
    "PA": "srgb",
    "RGB": "srgb",
    "RGBA": "srgb",
    "RGBX": "srgb",
    "CMYK": "cmyk",
    "YCbCr": "ycbcr",
    "LAB": "lab",
    "HSV": "hsv",
}


def normalize_format(name: str | None) -> str | None:
    if not name:
        return None
    lowered = name.lower()
    return _FORMAT_ALIASES.get(lowered, lowered)


class ImageInspector:
    """Applies the configured image policy and reads image properties."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._supported = self._normalize_supported(self._config.supported_formats)

    @property
    def max_bytes(self) -> int:
        return self._config.max_image_bytes

    @property
    def supported_formats(self) -> frozenset[str]:
        return self._supported

    def detect_format(self, data: bytes) -> str | None:
        """Return the normalized format name, or ``None`` if unrecognized."""
        if not data:
            return None
        try:
            with Image.open(io.BytesIO(data)) as image:
                return normalize_format(image.format)
        except Exception as exc:  # Pillow raises several unrelated types for junk input
            logger.debug("Format detection failed: %s", exc)
            return None

    def validate(self, data: bytes) -> bool:
        """Return True when ``data`` satisfies the format, size and dimension policy."""
        if not data:
            return False
        if len(data) > self.max_bytes:
            logger.debug("Image rejected: %d bytes exceeds limit of %d", len(data), self.max_bytes)
            return False
        try:
            with Image.open(io.BytesIO(data)) as image:
                fmt = normalize_format(image.format)
                if fmt is None or fmt not in self._supported:
                    logger.debug("Image rejected: unsupported format %r", image.format)
                    return False
                width, height = image.size
                if width < 1 or height < 1:
                    logger.debug("Image rejected: invalid dimensions %dx%d", width, height)
                    return False
                image.load()
        except Exception as exc:  # decode failures of any kind mean "not valid"
            logger.debug("Image validation failed: %s", exc)
            return False
        return True

    def inspect(self, data: bytes) -> ImageMetadata:
        """Extract metadata from ``data``."""
        try:
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
                return ImageMetadata(
                    width=width,
                    height=height,
                    format=normalize_format(image.format),
                    size=len(data),
                    has_alpha=_has_alpha(image),
                    color_space=_COLOR_SPACES.get(image.mode),
                    density=_density(image.info),
                )
        except Exception as exc:
            raise ImageProcessingError("Failed to extract image metadata") from exc

    @staticmethod
    def _normalize_supported(formats: Iterable[str]) -> frozenset[str]:
        normalized: set[str] = set()
        for item in formats:
            value = normalize_format(item.strip().lstrip("."))
            if value:
                normalized.add(value)
        return frozenset(normalized)


def _has_alpha(image: Image.Image) -> bool:
    if "A" in image.getbands():
        return True
    return "transparency" in image.info


def _density(info: dict) -> int | None:
    dpi = info.get("dpi")
    if isinstance(dpi, (tuple, list)) and dpi:
        try:
            value = float(dpi[0])
        except (TypeError, ValueError):
            return None
        if value > 0:
            return int(round(value))
    return None
