"""Command-line interface for the printcheck project."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Iterable

from tqdm import tqdm

from .config import PipelineConfig
from .errors import PrintcheckError
from .io.models import ExportConfig, PrintabilityReport, ProcessedImage
from .io.outputs import (
    error_row,
    summary_row,
    write_export_config,
    write_processed_image,
    write_report,
    write_summary_table,
)
from .pipeline import run
from .score.presets import nearest_preset

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tif", ".tiff", ".svg"}
_LIST_SUFFIXES = {".txt", ".lst"}


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the printability checker."""
    parser = argparse.ArgumentParser(
        description="Check images for multi-color 3D print suitability."
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Image file, directory of images, or text file listing image paths.",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Directory path where processed images and reports will be written.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON file with threshold overrides.",
    )
    parser.add_argument(
        "--target-size",
        type=int,
        default=None,
        metavar="PX",
        help="Resize the centered canvas to PX by PX pixels.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used for color bucketing.",
    )
    parser.add_argument(
        "--label",
        default="",
        help="Text label stored in the export settings.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def read_input(path: Path) -> list[Path]:
    """Return the image paths referenced by *path*."""
    if not path.exists():
        raise FileNotFoundError(f"Input path does not exist: {path}")
    if path.is_dir():
        return sorted(
            item for item in path.iterdir() if item.is_file() and item.suffix.lower() in IMAGE_SUFFIXES
        )
    if path.suffix.lower() in _LIST_SUFFIXES:
        lines = [line.strip() for line in path.read_text(encoding="utf-8-sig").splitlines()]
        return [_resolve_listed(path, line) for line in lines if line and not line.startswith("#")]
    return [path]


def build_config(args: argparse.Namespace) -> PipelineConfig:
    config = PipelineConfig.from_json(args.config) if args.config else PipelineConfig()
    overrides: dict[str, Any] = {}
    if args.target_size is not None:
        overrides["target_size"] = args.target_size
    if args.workers is not None:
        overrides["workers"] = args.workers
    return config.with_overrides(**overrides) if overrides else config


def _resolve_listed(list_path: Path, entry: str) -> Path:
    candidate = Path(entry)
    return candidate if candidate.is_absolute() else list_path.parent / candidate


def _output_stem(image_path: Path, used: set[str]) -> str:
    stem = "".join(ch if ch.isalnum() or ch in "._-" else "_" for ch in image_path.stem) or "image"
    base, counter = stem, 2
    while stem in used:
        stem = f"{base}_{counter}"
        counter += 1
    used.add(stem)
    return stem


def _persist(
    processed: ProcessedImage,
    report: PrintabilityReport,
    out_dir: Path,
    stem: str,
    label: str,
) -> None:
    preset = nearest_preset(processed.palette)
    export = ExportConfig.from_report(report, material=preset.name if preset else None)
    export.text = label
    image_path = write_processed_image(out_dir / f"{stem}.png", processed)
    report_path = write_report(out_dir / f"{stem}.report.json", report)
    write_export_config(out_dir / f"{stem}.export.json", export)
    print(f"[saved] {stem}: {image_path} (report {report_path})")


def _process_images(
    paths: list[Path], out_dir: Path, config: PipelineConfig, label: str
) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    used: set[str] = set()
    for image_path in tqdm(paths, desc="Checking images", unit="image", leave=False):
        stem = _output_stem(image_path, used)
        try:
            payload = image_path.read_bytes()
        except OSError as exc:
            print(f"[warn] {stem}: failed to read input ({exc})")
            rows.append(error_row(image_path.name, "could not process image"))
            continue
        try:
            processed, report = run(payload, config=config)
        except PrintcheckError as exc:
            print(f"[warn] {stem}: {exc.user_message} ({exc})")
            rows.append(error_row(image_path.name, exc.user_message))
            continue

        _persist(processed, report, out_dir, stem, label)
        verdict = "printable" if report.is_printable else "not printable"
        print(
            f"[report] {stem}: {verdict}, {report.image_type}, "
            f"{len(report.suggested_colors)} colors, confidence {report.confidence_score}, "
            f"{report.estimated_price:.2f}"
        )
        rows.append(summary_row(image_path.name, report))
    return rows


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = build_config(args)
    paths = read_input(Path(args.input))
    print(f"[input] {len(paths)} images")
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    rows = _process_images(paths, out_dir, config, args.label)
    summary_path = write_summary_table(out_dir / "summary.parquet", rows)
    if summary_path:
        print(f"[summary] wrote {len(rows)} rows to {summary_path}")

    succeeded = sum(1 for row in rows if row.get("error") is None)
    return 0 if succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())
