"""Background removal and edge sharpening prior to quantization."""

from __future__ import annotations

import logging

import numpy as np

from ..config import DEFAULT_CONFIG, PipelineConfig
from ..errors import EmptyForegroundError
from ..io.models import RasterImage

logger = logging.getLogger(__name__)


def has_transparency(image: RasterImage) -> bool:
    """Return True when any pixel of *image* is not fully opaque."""
    return bool(np.any(image.alpha < 255))


def background_mask(image: RasterImage, config: PipelineConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Return a boolean mask that is True for background pixels.

    Images carrying transparency are segmented by alpha alone. Fully opaque
    images take the top-left pixel as the background color and treat every
    pixel within ``bg_distance_threshold`` (Euclidean RGB) of it as background.
    """
    alpha = image.alpha
    if has_transparency(image):
        return alpha < config.transparent_alpha_threshold

    rgb = image.rgb.astype(np.int32)
    bg_color = rgb[0, 0]
    distance = np.sqrt(np.sum((rgb - bg_color) ** 2, axis=2))
    return (distance < config.bg_distance_threshold) | (alpha < config.opaque_alpha_threshold)


def boost_contrast(rgb: np.ndarray, config: PipelineConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Push channels to 255 above the midpoint and darken the rest."""
    values = rgb.astype(np.int16)
    darkened = np.maximum(0, values - config.contrast_shadow_shift)
    return np.where(values > config.contrast_midpoint, 255, darkened).astype(np.uint8)


def segment_background(image: RasterImage, config: PipelineConfig = DEFAULT_CONFIG) -> int:
    """Clear background pixels to transparent black in place and return the foreground count."""
    background = background_mask(image, config)
    foreground = ~background
    count = int(np.count_nonzero(foreground))
    logger.debug(
        "Segmented %sx%s image: %s foreground pixels", image.width, image.height, count
    )
    if count == 0:
        raise EmptyForegroundError("Segmentation left no foreground pixels")

    pixels = image.pixels
    pixels[background] = 0
    pixels[foreground, 3] = 255
    if config.contrast_boost:
        pixels[foreground, :3] = boost_contrast(pixels[foreground, :3], config)
    return count
