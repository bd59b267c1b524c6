"""Re-encoding helpers: submission normalization, conversion and optimization."""

from __future__ import annotations

import base64
import io
import logging

from PIL import Image

from ..config import AppConfig
from ..errors import ImageProcessingError
from .inspector import normalize_format

logger = logging.getLogger(__name__)

MAX_DIMENSION = 1024
TRANSPORT_QUALITY = 80

_PILLOW_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
    "bmp": "BMP",
}


def bounded_size(width: int, height: int, limit: int = MAX_DIMENSION) -> tuple[int, int]:
    """Scale ``(width, height)`` so the longer side equals ``limit`` if it exceeds it."""
    longer = max(width, height)
    if longer <= limit:
        return width, height
    if width >= height:
        return limit, max(1, round(height * limit / width))
    return max(1, round(width * limit / height)), limit


def fit_inside(
    width: int,
    height: int,
    max_width: int | None = None,
    max_height: int | None = None,
) -> tuple[int, int]:
    """Shrink ``(width, height)`` to fit the given bounds without ever enlarging."""
    scale = 1.0
    if max_width:
        scale = min(scale, max_width / width)
    if max_height:
        scale = min(scale, max_height / height)
    if scale >= 1.0:
        return width, height
    return max(1, round(width * scale)), max(1, round(height * scale))


_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    return image.convert("RGB")


def _to_storable(image: Image.Image, modes: set[str]) -> Image.Image:
    """Convert colour spaces the target encoder cannot write (CMYK, YCbCr, LAB...)."""
    if image.mode in modes:
        return image
    return image.convert("RGBA" if "A" in image.getbands() else "RGB")


class ImageTranscoder:
    """Produces submission-ready and general-purpose encodings of image bytes."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()

    @property
    def quality(self) -> int:
        return self._config.image_quality

    # ----- Submission path -------------------------------------------------

    def transcode(self, data: bytes) -> bytes:
        """Bound the longer side to ``MAX_DIMENSION`` and recompress as JPEG."""
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                target = bounded_size(*image.size)
                working = _to_rgb(image)
                if target != image.size:
                    logger.debug("Resizing %sx%s to %sx%s", *image.size, *target)
                    working = working.resize(target, Image.Resampling.LANCZOS)
                buffer = io.BytesIO()
                working.save(buffer, format="JPEG", quality=TRANSPORT_QUALITY)
        except Exception as exc:
            raise ImageProcessingError("Failed to prepare image for analysis") from exc
        return buffer.getvalue()

    def to_data_url(self, data: bytes) -> str:
        """Return the transcoded image as a ``data:image/jpeg;base64`` URL."""
        encoded = base64.b64encode(self.transcode(data)).decode("ascii")
        return f"data:image/jpeg;base64,{encoded}"

    # ----- General-purpose path --------------------------------------------

    def convert(self, data: bytes, target_format: str | None = None) -> str:
        """Return ``data`` as base64, re-encoded to ``target_format`` when requested.

        ``None`` or ``"original"`` keep the original bytes. Targets other than
        jpeg, png and webp also keep the original bytes.
        """
        target = normalize_format(target_format) if target_format else None
        if target is None or target == "original":
            return base64.b64encode(data).decode("ascii")
        if target not in {"jpeg", "png", "webp"}:
            logger.debug("Unsupported conversion target %r; keeping original bytes", target_format)
            return base64.b64encode(data).decode("ascii")

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                buffer = io.BytesIO()
                if target == "jpeg":
                    _to_rgb(image).save(buffer, format="JPEG", quality=self.quality)
                elif target == "png":
                    _to_storable(image, _PNG_MODES).save(buffer, format="PNG")
                else:
                    _to_storable(image, {"RGB", "RGBA"}).save(
                        buffer, format="WEBP", quality=self.quality
                    )
        except Exception as exc:
            raise ImageProcessingError("Failed to convert image to base64") from exc
        return base64.b64encode(buffer.getvalue()).decode("ascii")

    def optimize(
        self,
        data: bytes,
        max_width: int | None = None,
        max_height: int | None = None,
    ) -> bytes:
        """Resize to fit the bounds (never enlarging) and recompress in the same format."""
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                fmt = normalize_format(image.format)
                working: Image.Image = image
                if max_width or max_height:
                    target = fit_inside(*image.size, max_width=max_width, max_height=max_height)
                    if target != image.size:
                        working = image.resize(target, Image.Resampling.LANCZOS)
                return self._encode_optimized(working, fmt)
        except ImageProcessingError:
            raise
        except Exception as exc:
            raise ImageProcessingError("Failed to optimize image") from exc

    def _encode_optimized(self, image: Image.Image, fmt: str | None) -> bytes:
        buffer = io.BytesIO()
        if fmt == "jpeg":
            image.save(
                buffer,
                format="JPEG",
                quality=self.quality,
                progressive=True,
                optimize=True,
            )
        elif fmt == "png":
            image.save(buffer, format="PNG", compress_level=9, optimize=True)
        elif fmt == "webp":
            image.save(buffer, format="WEBP", quality=self.quality)
        else:
            pillow_format = _PILLOW_FORMATS.get(fmt or "")
            if pillow_format is None:
                raise ImageProcessingError(f"Cannot re-encode format {fmt!r}")
            image.save(buffer, format=pillow_format)
        return buffer.getvalue()
