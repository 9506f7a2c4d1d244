"""Shared image builders for printcheck tests."""

from __future__ import annotations

from io import BytesIO
from typing import Callable

import numpy as np
import pytest
from PIL import Image

from printcheck.io.models import RasterImage

WHITE = (255, 255, 255)
RED = (255, 0, 0)


def _canvas(width: int, height: int, color: tuple[int, int, int]) -> np.ndarray:
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = color
    pixels[:, :, 3] = 255
    return pixels


def _encode(pixels: np.ndarray, fmt: str = "PNG") -> bytes:
    image = Image.fromarray(np.ascontiguousarray(pixels))
    if fmt == "JPEG":
        image = image.convert("RGB")
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def canvas() -> Callable[..., np.ndarray]:
    """Return a builder for opaque single-color RGBA arrays."""
    return _canvas


@pytest.fixture
def encode() -> Callable[..., bytes]:
    """Return a helper that encodes an RGBA array as image bytes."""
    return _encode


@pytest.fixture
def red_square_pixels() -> np.ndarray:
    """200x200 white image with a centered 100x100 red square."""
    pixels = _canvas(200, 200, WHITE)
    pixels[50:150, 50:150, :3] = RED
    return pixels


@pytest.fixture
def red_square(red_square_pixels: np.ndarray) -> RasterImage:
    return RasterImage(red_square_pixels.copy())


@pytest.fixture
def gradient_photo_pixels() -> np.ndarray:
    """160x160 RGB ramp under heavy sensor grain, with no flat background."""
    rng = np.random.default_rng(7)
    size = 160
    ramp = np.linspace(0, 255, size)
    gradient = np.zeros((size, size, 3), dtype=np.float64)
    gradient[:, :, 0] = ramp[None, :]
    gradient[:, :, 1] = ramp[:, None]
    gradient[:, :, 2] = ramp[::-1][None, :]
    grain = rng.integers(0, 256, size=(size, size, 3))
    rgb = 0.3 * gradient + 0.7 * grain
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[:, :, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    pixels[:, :, 3] = 255
    return pixels


@pytest.fixture
def six_color_pixels() -> np.ndarray:
    """White image with six well separated color blocks of decreasing size."""
    pixels = _canvas(240, 200, WHITE)
    blocks = [
        ((255, 0, 0), (10, 10, 70, 90)),
        ((0, 255, 0), (90, 10, 148, 85)),
        ((0, 0, 255), (170, 10, 226, 80)),
        ((0, 0, 0), (10, 110, 64, 180)),
        ((255, 255, 0), (90, 110, 142, 175)),
        ((255, 0, 255), (170, 110, 220, 170)),
    ]
    for color, (x0, y0, x1, y1) in blocks:
        pixels[y0:y1, x0:x1, :3] = color
    return pixels


def _smooth_ramp(size: int) -> np.ndarray:
    ramp = np.linspace(0, 255, size)
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.rint(ramp)[None, :]
    pixels[:, :, 1] = np.rint(ramp)[:, None]
    pixels[:, :, 2] = np.rint(ramp[::-1])[None, :]
    pixels[:, :, 3] = 255
    return pixels


@pytest.fixture
def smooth_ramp() -> Callable[[int], np.ndarray]:
    """Return a builder for a noise-free RGB ramp covering the whole frame."""
    return _smooth_ramp
