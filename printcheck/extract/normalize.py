"""Trim artwork to its foreground and center it on a square canvas."""

from __future__ import annotations

import numpy as np
from PIL import Image

from ..config import DEFAULT_CONFIG, PipelineConfig
from ..errors import DegenerateBoundsError, EmptyForegroundError
from ..io.models import BoundingBox, RasterImage


def foreground_bbox(image: RasterImage) -> BoundingBox | None:
    """Return the inclusive bounding box of pixels with alpha > 0, if any."""
    alpha = Image.fromarray(np.ascontiguousarray(image.alpha))
    try:
        bbox = alpha.getbbox()
    finally:
        alpha.close()
    if bbox is None:
        return None
    left, upper, right, lower = bbox
    return BoundingBox(min_x=left, min_y=upper, max_x=right - 1, max_y=lower - 1)


def canvas_side(bbox: BoundingBox, padding: float) -> int:
    """Return the square canvas side for *bbox* scaled by *padding*."""
    content = max(bbox.width, bbox.height)
    return max(content, _round_half_up(content * padding))


def trim_and_square(image: RasterImage, config: PipelineConfig = DEFAULT_CONFIG) -> tuple[RasterImage, BoundingBox]:
    """Copy the foreground region onto a centered, transparent square canvas.

    With ``target_size`` set, the cropped content is scaled by
    ``target_size / side`` and centered on a canvas of that size, so margins
    stay balanced at the output resolution. Returns the new image and the
    source bounding box. Raises :class:`EmptyForegroundError` when nothing is
    visible and :class:`DegenerateBoundsError` for a single row or column of
    content.
    """
    bbox = foreground_bbox(image)
    if bbox is None:
        raise EmptyForegroundError("No foreground pixels to normalize")
    if bbox.is_degenerate:
        raise DegenerateBoundsError(bbox.width, bbox.height)

    region = RasterImage(
        image.pixels[bbox.min_y : bbox.max_y + 1, bbox.min_x : bbox.max_x + 1].copy()
    )
    side = canvas_side(bbox, config.canvas_padding)
    if config.target_size is not None and config.target_size != side:
        scale = config.target_size / side
        region = resize_nearest(
            region,
            max(1, _round_half_up(bbox.width * scale)),
            max(1, _round_half_up(bbox.height * scale)),
        )
        side = config.target_size

    offset_x = (side - region.width) // 2
    offset_y = (side - region.height) // 2
    canvas = np.zeros((side, side, 4), dtype=np.uint8)
    canvas[offset_y : offset_y + region.height, offset_x : offset_x + region.width] = region.pixels
    return RasterImage(canvas), bbox


def resize_nearest(image: RasterImage, width: int, height: int | None = None) -> RasterImage:
    """Return *image* resized to width-by-height without introducing new colors.

    *height* defaults to *width*.
    """
    height = width if height is None else height
    if width <= 0 or height <= 0:
        raise ValueError("Size must be a positive integer")

    source = image.to_pil()
    try:
        resized = source.resize((width, height), Image.Resampling.NEAREST)
    finally:
        source.close()
    try:
        return RasterImage.from_pil(resized)
    finally:
        resized.close()


def margins(image: RasterImage) -> tuple[int, int, int, int]:
    """Return (left, top, right, bottom) transparent margins around the foreground."""
    bbox = foreground_bbox(image)
    if bbox is None:
        raise EmptyForegroundError("No foreground pixels to measure")
    return (
        bbox.min_x,
        bbox.min_y,
        image.width - 1 - bbox.max_x,
        image.height - 1 - bbox.max_y,
    )


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))
