"""Tunable thresholds shared by every pipeline stage."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Named thresholds for segmentation, quantization, analysis and pricing.

    A single instance is passed by value into each stage. Use
    :meth:`with_overrides` or :meth:`from_json` to derive variants.
    """

    # Background segmentation
    bg_distance_threshold: float = 45.0
    opaque_alpha_threshold: int = 110
    transparent_alpha_threshold: int = 20
    contrast_boost: bool = True
    contrast_midpoint: int = 127
    contrast_shadow_shift: int = 30

    # Palette quantization
    bucket_size: int = 32
    palette_min_distance: float = 55.0
    max_colors: int = 4
    workers: int = 1

    # Bounds normalization
    canvas_padding: float = 1.1
    target_size: int | None = None

    # Logo/photo classifier
    classifier_stride: int = 8
    visibility_alpha: int = 128
    photo_variance_threshold: float = 40.0

    # Nozzle model
    nozzle_mm: float = 0.4
    print_width_mm: float = 40.0
    min_nozzle_radius: int = 2
    nozzle_stride: int = 8
    thin_fraction: float = 0.5

    # Feasibility scoring
    max_thin_features: int = 25
    thin_warning_count: int = 5
    base_confidence: int = 95
    photo_confidence_penalty: int = 30
    thin_confidence_step: int = 2
    thin_confidence_cap: int = 25
    base_price: float = 14.99
    color_surcharge: float = 2.50
    scale_options_mm: tuple[float, float, float] = (36.0, 38.0, 40.0)

    def __post_init__(self) -> None:
        if self.bucket_size <= 0:
            raise ValueError("bucket_size must be a positive integer")
        if self.max_colors <= 0:
            raise ValueError("max_colors must be a positive integer")
        if self.classifier_stride <= 0 or self.nozzle_stride <= 0:
            raise ValueError("Sampling strides must be positive integers")
        if self.canvas_padding < 1.0:
            raise ValueError("canvas_padding must be at least 1.0")
        if self.target_size is not None and self.target_size <= 0:
            raise ValueError("target_size must be a positive integer or None")
        if self.workers <= 0:
            raise ValueError("workers must be a positive integer")
        if len(self.scale_options_mm) != 3:
            raise ValueError("scale_options_mm must contain three values")

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy of this config with *overrides* applied."""
        _check_known_keys(overrides)
        if "scale_options_mm" in overrides:
            overrides["scale_options_mm"] = tuple(
                float(value) for value in overrides["scale_options_mm"]
            )
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "PipelineConfig":
        """Build a config from a mapping of field names to values."""
        return cls().with_overrides(**dict(values))

    @classmethod
    def from_json(cls, path: str | Path) -> "PipelineConfig":
        """Load overrides from a JSON object stored at *path*."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file does not exist: {config_path}")
        payload = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("Config file must contain a JSON object")
        return cls.from_mapping(payload)


DEFAULT_CONFIG = PipelineConfig()


def _check_known_keys(values: Mapping[str, Any]) -> None:
    known = {item.name for item in fields(PipelineConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
