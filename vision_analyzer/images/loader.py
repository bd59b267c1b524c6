"""Resolve a locator (local path or HTTP(S) URL) into validated image bytes."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests
from requests import Session

from ..config import AppConfig
from ..errors import (
    ImageNotFoundError,
    ImageProcessingError,
    InvalidImageError,
    VisionError,
)
from .inspector import ImageInspector
from .source import ImageSource, SourceKind

logger = logging.getLogger(__name__)


def is_url(locator: str) -> bool:
    """Return True for absolute ``http``/``https`` URLs."""
    try:
        parsed = urlparse(locator)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class ImageLoader:
    """Loads images from disk or over HTTP and validates them before returning."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        inspector: ImageInspector | None = None,
        session: Session | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._inspector = inspector or ImageInspector(self._config)
        self._session = session

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def load(self, locator: str) -> ImageSource:
        logger.debug("Loading image from source: %s", locator)
        try:
            if is_url(locator):
                return self._load_from_url(locator)
            return self._load_from_file(locator)
        except VisionError as exc:
            logger.error("Failed to load image: %s", exc)
            raise
        except Exception as exc:
            logger.error("Failed to load image: %s", exc)
            raise ImageProcessingError(f"Failed to load image from source: {locator}") from exc

    def _load_from_file(self, locator: str) -> ImageSource:
        path = Path(locator).expanduser()
        if not path.exists():
            raise ImageNotFoundError(f"File not found: {locator}")
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise ImageNotFoundError(f"File not found: {locator}") from exc
        except OSError as exc:
            raise ImageProcessingError(f"Failed to load file: {locator}") from exc
        return self._build_source(SourceKind.FILE, locator, data)

    def _load_from_url(self, url: str) -> ImageSource:
        timeout = self._config.fetch_timeout_seconds
        try:
            response = self.session.get(url, timeout=timeout)
        except requests.exceptions.Timeout as exc:
            raise ImageProcessingError(
                f"Image download timed out after {self._config.fetch_timeout_ms}ms: {url}"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise ImageProcessingError(f"Failed to load image from URL: {url}") from exc
        if response.status_code >= 400:
            raise ImageNotFoundError(f"{url} (HTTP {response.status_code})")
        return self._build_source(SourceKind.URL, url, response.content)

    def _build_source(self, kind: SourceKind, locator: str, data: bytes) -> ImageSource:
        if not self._inspector.validate(data):
            label = "file" if kind is SourceKind.FILE else "image from URL"
            raise InvalidImageError(f"Invalid {label}: {locator}")
        metadata = self._inspector.inspect(data)
        logger.debug(
            "Loaded %s image %s (%dx%d, %d bytes)",
            metadata.format,
            locator,
            metadata.width,
            metadata.height,
            metadata.size,
        )
        return ImageSource(kind=kind, locator=locator, data=data, metadata=metadata)
