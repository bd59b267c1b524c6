"""Image acquisition, validation and transcoding."""

from .inspector import ImageInspector
from .loader import ImageLoader, is_url
from .source import ImageMetadata, ImageSource, SourceKind
from .transcoder import MAX_DIMENSION, TRANSPORT_QUALITY, ImageTranscoder

__all__ = [
    "ImageInspector",
    "ImageLoader",
    "ImageMetadata",
    "ImageSource",
    "ImageTranscoder",
    "MAX_DIMENSION",
    "SourceKind",
    "TRANSPORT_QUALITY",
    "is_url",
]
