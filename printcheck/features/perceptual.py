"""Perceptual hashing used to derive stable design identifiers."""

from __future__ import annotations

import imagehash
from PIL import Image

from ..io.models import RasterImage

_HASH_SIZE = 8
_ID_PREFIX = "PF-"
_ID_LENGTH = 6
_PREVIEW_BG_RGBA = (255, 255, 255, 255)


def compute_phash(image: RasterImage) -> str:
    """Return the perceptual hash of *image* composited on white, as hex."""
    rgba = image.to_pil()
    background = Image.new("RGBA", rgba.size, _PREVIEW_BG_RGBA)
    composite = Image.alpha_composite(background, rgba)
    work_img = composite.convert("RGB")
    try:
        return str(imagehash.phash(work_img, hash_size=_HASH_SIZE))
    finally:
        work_img.close()
        composite.close()
        background.close()
        rgba.close()


def design_id(image: RasterImage) -> str:
    """Return a ``PF-XXXXXX`` identifier that is identical for identical artwork."""
    return _ID_PREFIX + compute_phash(image)[:_ID_LENGTH].upper()
