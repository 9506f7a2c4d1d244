"""Tests for the logo/photo variance heuristic."""

import numpy as np

from printcheck.config import PipelineConfig
from printcheck.features.classify import classify_image, mean_neighbor_variance
from printcheck.io.models import RasterImage


def _opaque(rgb: np.ndarray) -> RasterImage:
    pixels = np.zeros(rgb.shape[:2] + (4,), dtype=np.uint8)
    pixels[:, :, :3] = rgb
    pixels[:, :, 3] = 255
    return RasterImage(pixels)


def test_flat_color_blocks_classify_as_logo() -> None:
    rgb = np.zeros((64, 64, 3), dtype=np.uint8)
    rgb[:, :32] = (220, 30, 30)
    rgb[:, 32:] = (30, 30, 220)
    result = classify_image(_opaque(rgb))

    assert result.image_type == "logo"
    assert result.mean_variance == 0.0
    assert result.samples == 64


def test_random_noise_classifies_as_photo() -> None:
    rng = np.random.default_rng(42)
    rgb = rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
    result = classify_image(_opaque(rgb))

    assert result.image_type == "photo"
    assert result.mean_variance > 40


def test_invisible_pixels_are_not_sampled() -> None:
    rng = np.random.default_rng(1)
    pixels = np.zeros((32, 32, 4), dtype=np.uint8)
    pixels[:, :, :3] = rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)
    pixels[:, :, 3] = 100
    variance, samples = mean_neighbor_variance(RasterImage(pixels))

    assert (variance, samples) == (0.0, 0)
    assert classify_image(RasterImage(pixels)).image_type == "logo"


def test_threshold_is_exclusive() -> None:
    rgb = np.zeros((16, 16, 3), dtype=np.uint8)
    rgb[:, 1::2, 0] = 40  # every sampled (even) column differs by 40 from its neighbor
    image = _opaque(rgb)

    assert mean_neighbor_variance(image)[0] == 40.0
    assert classify_image(image).image_type == "logo"
    assert classify_image(image, PipelineConfig(photo_variance_threshold=39.5)).image_type == "photo"
