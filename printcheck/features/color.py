"""Palette extraction and nearest-color quantization."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Dict, Iterable, Mapping

import numpy as np

from ..config import DEFAULT_CONFIG, PipelineConfig
from ..errors import EmptyForegroundError
from ..io.models import RGB, ColorBucket, Palette, RasterImage

logger = logging.getLogger(__name__)

Buckets = Dict[RGB, ColorBucket]


def bucket_keys(rgb: np.ndarray, step: int) -> np.ndarray:
    """Round each channel of an ``(N, 3)`` array to the nearest multiple of *step*."""
    return (np.floor(rgb.astype(np.float64) / step + 0.5) * step).astype(np.int32)


def accumulate_buckets(rgb: np.ndarray, step: int) -> Buckets:
    """Return color buckets for an ``(N, 3)`` array of foreground colors."""
    if rgb.size == 0:
        return {}

    keys = bucket_keys(rgb, step)
    unique, inverse, counts = np.unique(keys, axis=0, return_inverse=True, return_counts=True)
    inverse = inverse.reshape(-1)
    sums = np.zeros((len(unique), 3), dtype=np.int64)
    np.add.at(sums, inverse, rgb.astype(np.int64))

    buckets: Buckets = {}
    for key, total, count in zip(unique, sums, counts):
        bucket_key = (int(key[0]), int(key[1]), int(key[2]))
        buckets[bucket_key] = ColorBucket(
            key=bucket_key,
            r_sum=int(total[0]),
            g_sum=int(total[1]),
            b_sum=int(total[2]),
            count=int(count),
        )
    return buckets


def merge_buckets(left: Mapping[RGB, ColorBucket], right: Mapping[RGB, ColorBucket]) -> Buckets:
    """Combine two bucket maps; the operation is associative and commutative."""
    merged: Buckets = dict(left)
    for key, bucket in right.items():
        existing = merged.get(key)
        merged[key] = existing.merge(bucket) if existing is not None else bucket
    return merged


def bucket_colors(image: RasterImage, config: PipelineConfig = DEFAULT_CONFIG) -> Buckets:
    """Accumulate every foreground pixel of *image* into color buckets.

    With ``config.workers > 1`` the rows are split into bands that are bucketed
    concurrently and merged afterwards; the result does not depend on the
    number of workers.
    """
    mask = image.foreground_mask()
    if config.workers <= 1 or image.height < 2:
        return accumulate_buckets(image.rgb[mask], config.bucket_size)

    bands = np.array_split(np.arange(image.height), min(config.workers, image.height))

    def _band(rows: np.ndarray) -> Buckets:
        band_rgb = image.rgb[rows[0] : rows[-1] + 1]
        band_mask = mask[rows[0] : rows[-1] + 1]
        return accumulate_buckets(band_rgb[band_mask], config.bucket_size)

    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        partials = list(pool.map(_band, bands))
    return reduce(merge_buckets, partials, {})


def select_palette(buckets: Iterable[ColorBucket], config: PipelineConfig = DEFAULT_CONFIG) -> Palette:
    """Greedily pick up to ``max_colors`` well separated bucket centroids.

    Buckets are visited by descending pixel count (ties broken by key), so the
    first palette entry is the dominant color.
    """
    ordered = sorted(buckets, key=lambda bucket: (-bucket.count, bucket.key))
    palette: list[RGB] = []
    for bucket in ordered:
        if len(palette) >= config.max_colors:
            break
        centroid = bucket.centroid
        if all(_distance(centroid, chosen) >= config.palette_min_distance for chosen in palette):
            palette.append(centroid)
    return tuple(palette)


def remap_to_palette(image: RasterImage, palette: Palette) -> None:
    """Replace every foreground color of *image* with its nearest palette entry, in place."""
    if not palette:
        raise ValueError("Cannot remap to an empty palette")
    mask = image.foreground_mask()
    if not np.any(mask):
        return

    colors = np.asarray(palette, dtype=np.int32)
    rgb = image.rgb[mask].astype(np.int32)
    distances = np.sum((rgb[:, None, :] - colors[None, :, :]) ** 2, axis=2)
    nearest = np.argmin(distances, axis=1)
    image.pixels[mask, :3] = colors[nearest].astype(np.uint8)


def quantize_palette(image: RasterImage, config: PipelineConfig = DEFAULT_CONFIG) -> Palette:
    """Extract a palette from *image* and remap its foreground onto it in place."""
    buckets = bucket_colors(image, config)
    if not buckets:
        raise EmptyForegroundError("Palette quantization requires foreground pixels")

    palette = select_palette(buckets.values(), config)
    logger.debug("Selected %s palette colors from %s buckets", len(palette), len(buckets))
    remap_to_palette(image, palette)
    return palette


def _distance(a: RGB, b: RGB) -> float:
    return float(np.sqrt(sum((int(x) - int(y)) ** 2 for x, y in zip(a, b))))
