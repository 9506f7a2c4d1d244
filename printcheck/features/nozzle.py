"""Thin-feature scan against a fixed extrusion nozzle width."""

from __future__ import annotations

import logging
import math

import cv2
import numpy as np

from ..config import DEFAULT_CONFIG, PipelineConfig
from ..io.models import RasterImage
from .sampling import SampleGrid

logger = logging.getLogger(__name__)


def nozzle_radius(width: int, config: PipelineConfig = DEFAULT_CONFIG) -> int:
    """Return the nozzle width in pixels when *width* spans ``print_width_mm``."""
    pixels = round(width * config.nozzle_mm / config.print_width_mm, 6)
    return max(config.min_nozzle_radius, int(math.floor(pixels)))


def window_counts(mask: np.ndarray, radius: int) -> np.ndarray:
    """Return, per pixel, the number of foreground pixels in its square window."""
    size = 2 * radius + 1
    return cv2.boxFilter(
        mask.astype(np.float32),
        cv2.CV_32F,
        (size, size),
        normalize=False,
        borderType=cv2.BORDER_CONSTANT,
    )


def count_thin_features(image: RasterImage, config: PipelineConfig = DEFAULT_CONFIG) -> int:
    """Count sampled foreground pixels whose neighborhood is too sparse to extrude.

    A sample is thin when fewer than ``thin_fraction`` of the pixels in its
    ``(2r + 1)``-sided window are foreground. The count is an ordinal risk
    signal; it is reproducible for a given image and config but does not
    locate every thin region.
    """
    radius = nozzle_radius(image.width, config)
    grid = SampleGrid(image.width, image.height, config.nozzle_stride, margin=radius)
    xs, ys = grid.coordinates()
    if xs.size == 0:
        return 0

    mask = image.foreground_mask()
    sampled = mask[ys, xs]
    if not np.any(sampled):
        return 0

    counts = window_counts(mask, radius)[ys[sampled], xs[sampled]]
    area = (2 * radius + 1) ** 2
    thin = int(np.count_nonzero(counts < config.thin_fraction * area))
    logger.debug(
        "Nozzle radius %spx, %s of %s sampled foreground pixels thin",
        radius,
        thin,
        int(np.count_nonzero(sampled)),
    )
    return thin
