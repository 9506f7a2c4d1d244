"""Image-to-printability pipeline entry points."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .config import DEFAULT_CONFIG, PipelineConfig
from .errors import EmptyForegroundError
from .extract.decode import decode_image
from .extract.normalize import trim_and_square
from .extract.segment import segment_background
from .features.classify import classify_image
from .features.color import quantize_palette
from .features.nozzle import count_thin_features
from .features.perceptual import design_id
from .io.models import RGB, PrintabilityReport, ProcessedImage, RasterImage, SemanticHint
from .score.feasibility import build_report

logger = logging.getLogger(__name__)


def process(
    image_bytes: bytes,
    config: PipelineConfig | None = None,
    mime_hint: str | None = None,
) -> ProcessedImage:
    """Decode, segment, quantize and center the artwork in *image_bytes*.

    Raises :class:`~printcheck.errors.DecodeError`,
    :class:`~printcheck.errors.EmptyForegroundError` or
    :class:`~printcheck.errors.DegenerateBoundsError`; nothing partial is
    returned on failure.
    """
    config = config or DEFAULT_CONFIG
    image = decode_image(image_bytes, mime_hint)
    segment_background(image, config)
    palette = quantize_palette(image, config)
    normalized, bbox = trim_and_square(image, config)
    logger.debug(
        "Processed %sx%s input into %sx%s canvas with %s colors",
        image.width,
        image.height,
        normalized.width,
        normalized.height,
        len(palette),
    )
    return ProcessedImage(
        image=normalized,
        palette=palette,
        bbox=bbox,
        png_bytes=normalized.to_png_bytes(),
    )


def analyze(
    pixels: RasterImage | np.ndarray,
    palette: Sequence[RGB],
    config: PipelineConfig | None = None,
    hint: SemanticHint | None = None,
) -> PrintabilityReport:
    """Classify and nozzle-check a normalized buffer and score its printability.

    *hint* is an optional result from an external semantic classifier; it is
    reported as an informational finding and never changes the verdict.
    """
    config = config or DEFAULT_CONFIG
    image = pixels if isinstance(pixels, RasterImage) else RasterImage(np.asarray(pixels))
    if not np.any(image.foreground_mask()):
        raise EmptyForegroundError("Cannot analyze an image without foreground pixels")

    colors = tuple((int(r), int(g), int(b)) for r, g, b in palette)
    classification = classify_image(image, config)
    thin_features = count_thin_features(image, config)
    return build_report(
        image_type=classification.image_type,
        mean_variance=classification.mean_variance,
        thin_features=thin_features,
        palette=colors,
        config=config,
        hint=hint,
        design_id=design_id(image),
    )


def run(
    image_bytes: bytes,
    config: PipelineConfig | None = None,
    mime_hint: str | None = None,
    hint: SemanticHint | None = None,
) -> tuple[ProcessedImage, PrintabilityReport]:
    """Process *image_bytes* and analyze the result in one call."""
    config = config or DEFAULT_CONFIG
    processed = process(image_bytes, config=config, mime_hint=mime_hint)
    report = analyze(processed.image, processed.palette, config=config, hint=hint)
    return processed, report
