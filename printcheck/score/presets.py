"""Filament material presets offered for multi-color prints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..io.models import RGB, hex_to_rgb


@dataclass(frozen=True, slots=True)
class MaterialPreset:
    name: str
    colors: tuple[str, str, str, str]


MATERIAL_PRESETS: tuple[MaterialPreset, ...] = (
    MaterialPreset("Galaxy Black", ("#FFFFFF", "#0A0A0A", "#1A1A1A", "#222222")),
    MaterialPreset("Silk Gold", ("#5D4037", "#D4AF37", "#FFD700", "#B8860B")),
    MaterialPreset("Signal Red", ("#FFFFFF", "#CC0000", "#FF4444", "#880000")),
    MaterialPreset("Translucent Ice", ("#E0F7FA", "#B2EBF2", "#80DEEA", "#4DD0E1")),
)


def preset_distance(palette: Sequence[RGB], preset: MaterialPreset) -> float:
    """Sum over *palette* of the distance to the closest preset color."""
    preset_rgb = [hex_to_rgb(value) for value in preset.colors]
    return sum(min(math.dist(color, candidate) for candidate in preset_rgb) for color in palette)


def nearest_preset(
    palette: Sequence[RGB], presets: Sequence[MaterialPreset] = MATERIAL_PRESETS
) -> MaterialPreset | None:
    """Return the preset whose colors best cover *palette* (first wins ties)."""
    if not palette or not presets:
        return None
    return min(presets, key=lambda preset: preset_distance(palette, preset))
