"""Tests for raster decoding."""

import numpy as np
import pytest

from printcheck.errors import DecodeError
from printcheck.extract import decode
from printcheck.extract.decode import decode_image, load_image


def test_png_decodes_to_rgba(encode, red_square_pixels) -> None:
    image = decode_image(encode(red_square_pixels))
    assert (image.width, image.height) == (200, 200)
    assert np.array_equal(image.pixels, red_square_pixels)


def test_jpeg_gains_opaque_alpha(encode, red_square_pixels) -> None:
    image = decode_image(encode(red_square_pixels, "JPEG"))
    assert image.pixels.shape == (200, 200, 4)
    assert np.all(image.alpha == 255)


@pytest.mark.parametrize("payload", [b"", b"\x89PNG\r\n\x1a\n", b"GIF89a-but-not-really"])
def test_unreadable_payloads_raise(payload: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_image(payload)


def test_svg_without_rasterizer_raises(monkeypatch) -> None:
    monkeypatch.setattr(decode, "cairosvg", None)
    with pytest.raises(DecodeError, match="cairosvg"):
        decode_image(b"<svg xmlns='http://www.w3.org/2000/svg' width='4' height='4'/>")


def test_load_image_reads_files(tmp_path, encode, red_square_pixels) -> None:
    path = tmp_path / "logo.png"
    path.write_bytes(encode(red_square_pixels))
    assert load_image(path).width == 200


def test_load_image_missing_file(tmp_path) -> None:
    with pytest.raises(DecodeError):
        load_image(tmp_path / "missing.png")
