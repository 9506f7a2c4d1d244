"""Decode raw image payloads into RGBA raster buffers."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError

from ..errors import DecodeError
from ..io.models import RasterImage

try:  # pragma: no cover - optional dependency
    import cairosvg  # type: ignore
except Exception:  # pragma: no cover - optional dependency
    cairosvg = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

_SVG_MIME_TYPES = {"image/svg+xml", "image/svg", "text/svg"}


def decode_image(image_bytes: bytes, mime_hint: str | None = None) -> RasterImage:
    """Return *image_bytes* as an RGBA :class:`RasterImage`, rasterizing SVG when possible."""
    if not image_bytes:
        raise DecodeError("Empty image payload cannot be decoded")

    data = bytes(image_bytes)
    mime = (mime_hint or "").lower()
    if mime in _SVG_MIME_TYPES or _looks_like_svg(data):
        data = _rasterize_svg(data)

    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            logger.debug("Decoded %s image %sx%s (mode %s)", img.format, *img.size, img.mode)
            return RasterImage.from_pil(img)
    except (
        UnidentifiedImageError,
        DecompressionBombError,
        OSError,
        EOFError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise DecodeError(f"Unreadable image payload: {exc}") from exc


def load_image(path: str | Path) -> RasterImage:
    """Read and decode the image stored at *path*."""
    image_path = Path(path)
    try:
        payload = image_path.read_bytes()
    except OSError as exc:
        raise DecodeError(f"Failed to read {image_path}: {exc}") from exc
    mime_hint = "image/svg+xml" if image_path.suffix.lower() == ".svg" else None
    return decode_image(payload, mime_hint)


def _rasterize_svg(data: bytes) -> bytes:
    if cairosvg is None:
        raise DecodeError("SVG input requires the optional cairosvg dependency")
    try:
        return cairosvg.svg2png(bytestring=data)  # type: ignore[attr-defined]
    except Exception as exc:  # noqa: BLE001 - cairosvg raises a variety of parser errors
        raise DecodeError(f"Failed to rasterize SVG: {exc}") from exc


def _looks_like_svg(image_bytes: bytes) -> bool:
    snippet = image_bytes[:1024].lstrip().lower()
    return snippet.startswith(b"<svg") or (
        snippet.startswith(b"<?xml") and b"<svg" in snippet
    )
