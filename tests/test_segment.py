"""Tests for background segmentation."""

import numpy as np
import pytest

from printcheck.config import PipelineConfig
from printcheck.errors import EmptyForegroundError
from printcheck.extract.segment import (
    background_mask,
    boost_contrast,
    has_transparency,
    segment_background,
)
from printcheck.io.models import RasterImage


@pytest.mark.parametrize("color", [(255, 255, 255), (0, 0, 0), (12, 200, 99)])
def test_solid_opaque_image_has_no_foreground(canvas, color) -> None:
    """A uniform image matches its own corner color everywhere."""
    image = RasterImage(canvas(32, 24, color))
    with pytest.raises(EmptyForegroundError, match="no foreground"):
        segment_background(image)


def test_solid_image_is_left_untouched_on_failure(canvas) -> None:
    image = RasterImage(canvas(8, 8, (40, 40, 40)))
    with pytest.raises(EmptyForegroundError):
        segment_background(image)
    assert np.all(image.alpha == 255)


def test_red_square_foreground(red_square) -> None:
    count = segment_background(red_square)

    assert count == 100 * 100
    assert red_square.alpha[0, 0] == 0
    assert red_square.alpha[100, 100] == 255
    assert tuple(red_square.rgb[100, 100]) == (255, 0, 0)
    assert int(np.count_nonzero(red_square.alpha)) == 100 * 100


def test_colors_close_to_background_are_removed(canvas) -> None:
    pixels = canvas(10, 10, (200, 200, 200))
    pixels[2:5, 2:5, :3] = (225, 220, 210)  # distance ~33
    pixels[6:9, 6:9, :3] = (100, 100, 100)
    image = RasterImage(pixels)

    segment_background(image)

    assert np.all(image.alpha[2:5, 2:5] == 0)
    assert np.all(image.alpha[6:9, 6:9] == 255)


def test_boost_contrast_pushes_channels_apart() -> None:
    rgb = np.array([[100, 200, 50], [20, 128, 127]], dtype=np.uint8)
    boosted = boost_contrast(rgb)
    assert boosted.tolist() == [[70, 255, 20], [0, 255, 97]]


def test_contrast_boost_can_be_disabled(canvas) -> None:
    pixels = canvas(10, 10, (255, 255, 255))
    pixels[3:7, 3:7, :3] = (100, 150, 200)
    image = RasterImage(pixels)

    segment_background(image, PipelineConfig(contrast_boost=False))

    assert tuple(image.rgb[5, 5]) == (100, 150, 200)


def test_transparency_mode_uses_alpha_only() -> None:
    pixels = np.zeros((12, 12, 4), dtype=np.uint8)
    pixels[:, :, :3] = 255
    pixels[2:6, 2:6] = (255, 255, 255, 255)  # same color as the transparent area
    pixels[8, 8] = (0, 0, 0, 10)
    pixels[9, 9] = (0, 0, 0, 50)
    image = RasterImage(pixels)
    assert has_transparency(image)

    segment_background(image)

    assert np.all(image.alpha[2:6, 2:6] == 255)
    assert image.alpha[8, 8] == 0
    assert image.alpha[9, 9] == 255
    assert image.alpha[0, 0] == 0


def test_background_mask_thresholds_are_configurable(canvas) -> None:
    pixels = canvas(6, 6, (0, 0, 0))
    pixels[3, 3, :3] = (30, 30, 30)  # distance ~52
    image = RasterImage(pixels)

    assert not background_mask(image)[3, 3]
    assert background_mask(image, PipelineConfig(bg_distance_threshold=60))[3, 3]


def test_background_is_cleared_to_transparent_black(red_square) -> None:
    segment_background(red_square)

    assert tuple(red_square.pixels[0, 0]) == (0, 0, 0, 0)
    assert not np.any(red_square.pixels[~red_square.foreground_mask()])
