"""Output helpers for persisting pipeline results."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Mapping, Sequence

import pandas as pd

from .models import ExportConfig, PrintabilityReport, ProcessedImage


def write_processed_image(path: Path, processed: ProcessedImage) -> Path:
    """Write the centered, quantized artwork to *path* as PNG and return the path."""
    payload = processed.png_bytes or processed.image.to_png_bytes()
    path.write_bytes(payload)
    return path


def write_report(path: Path, report: PrintabilityReport) -> Path:
    """Write a printability report to *path* as JSON and return the path."""
    path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
    return path


def write_export_config(path: Path, export: ExportConfig) -> Path:
    """Write the renderer hand-off settings to *path* as JSON and return the path."""
    path.write_text(json.dumps(asdict(export), indent=2), encoding="utf-8")
    return path


def summary_row(name: str, report: PrintabilityReport) -> dict[str, Any]:
    """Flatten *report* into one summary table row."""
    return {
        "image": name,
        "design_id": report.design_id,
        "printable": report.is_printable,
        "image_type": report.image_type,
        "confidence": report.confidence_score,
        "colors": len(report.suggested_colors),
        "palette": list(report.suggested_colors),
        "thin_features": report.thin_features,
        "complexity": report.complexity_rating,
        "price": report.estimated_price,
        "scale_mm": report.recommended_scale,
        "error": None,
    }


def error_row(name: str, message: str) -> dict[str, Any]:
    return {
        "image": name,
        "design_id": None,
        "printable": False,
        "image_type": None,
        "confidence": None,
        "colors": None,
        "palette": None,
        "thin_features": None,
        "complexity": None,
        "price": None,
        "scale_mm": None,
        "error": message,
    }


def write_summary_table(path: Path, rows: Sequence[Mapping[str, Any]]) -> Path | None:
    """Write summary *rows* to *path* as parquet; return None when there are no rows."""
    if not rows:
        return None
    df = pd.DataFrame(list(rows))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False, engine="pyarrow")
    return path
