"""Result types returned by the batched generation functions.

A :class:`GeneratedImage` wraps one raw provider image. Providers hand back
either base64 text or raw bytes (or an http URL for hosted outputs); the
wrapper keeps whichever form it was given and derives the other one on first
access, caching it. Instances are never mutated after construction apart from
that cache.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from lunasdk.core.types import CallWarning
from lunasdk.providers.utils import convert_base64_to_bytes, convert_bytes_to_base64

logger = logging.getLogger(__name__)

# Same type as CallWarning, used for GenerationResult.warnings.
GenerationWarning = CallWarning


class GeneratedImage:
    """One generated image with lazy base64 / bytes views.

    Args:
        image: Base64 text (optionally a ``data:`` URL) or raw bytes. For
            URL-backed images this is the URL string itself.
        url: Remote location of the image, when the provider returned one.

    Examples
    --------
        >>> img = GeneratedImage(b"\\x89PNG...")
        >>> img.base64  # computed on first access
        'iVBORy4uLg=='
        >>> GeneratedImage("https://cdn.example/a.png", url="https://cdn.example/a.png").url
        'https://cdn.example/a.png'
    """

    def __init__(self, image: str | bytes, url: str | None = None) -> None:
        if isinstance(image, (bytes, bytearray, memoryview)):
            self._base64: str | None = None
            self._bytes: bytes | None = bytes(image)
        else:
            self._base64 = image
            self._bytes = None
        self._url = url

    @classmethod
    def from_provider_output(cls, image: str | bytes) -> GeneratedImage:
        """Wrap a raw provider entry, keeping http strings as URL-backed images."""
        if isinstance(image, str) and image.startswith("http"):
            return cls(image, url=image)
        return cls(image)

    @property
    def base64(self) -> str:
        if self._base64 is None:
            self._base64 = convert_bytes_to_base64(self._bytes)
        return self._base64

    @property
    def bytes(self) -> bytes:
        """Decoded image bytes.

        Raises:
            ValueError: For URL-backed images, which carry no inline data.
        """
        if self._bytes is None:
            if self.is_url:
                raise ValueError(f"Image is only available by URL: {self._url}")
            self._bytes = convert_base64_to_bytes(self._base64)
        return self._bytes

    # Alias of bytes.
    uint8_array = bytes

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def is_url(self) -> bool:
        return self._url is not None and self._base64 == self._url

    @property
    def media_type(self) -> str | None:
        """MIME type sniffed from the image data, or None if it is not a known format."""
        if self.is_url:
            return None
        try:
            with Image.open(io.BytesIO(self.bytes)) as img:
                return Image.MIME.get(img.format or "")
        except UnidentifiedImageError:
            return None

    def to_pil(self) -> Image.Image:
        """Decode into a PIL image (fully loaded, detached from the buffer)."""
        img = Image.open(io.BytesIO(self.bytes))
        img.load()
        return img

    def save(self, path: str | Path) -> Path:
        """Write the raw image bytes to ``path`` and return it."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.bytes)
        logger.info(f"Saved generated image to: {path}")
        return path

    def __repr__(self) -> str:
        if self.is_url:
            return f"GeneratedImage(url={self._url!r})"
        size = len(self._bytes) if self._bytes is not None else len(self._base64)
        return f"GeneratedImage(<{size} {'bytes' if self._bytes is not None else 'base64 chars'}>)"


class GenerationResult:
    """Aggregated output of a batched generation request.

    Attributes:
        images: Images in call order, then within-call order.
        warnings: Provider warnings, concatenated in the same order.
    """

    def __init__(self, images: list[GeneratedImage], warnings: list[CallWarning]) -> None:
        self.images = images
        self.warnings = warnings

    @property
    def image(self) -> GeneratedImage | None:
        """The first generated image, or None if the providers returned nothing."""
        return self.images[0] if self.images else None

    def __repr__(self) -> str:
        return f"GenerationResult(images={len(self.images)}, warnings={len(self.warnings)})"
