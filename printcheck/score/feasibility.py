"""Combine analysis signals into a printability verdict."""

from __future__ import annotations

from typing import List

from ..config import DEFAULT_CONFIG, PipelineConfig
from ..io.models import (
    CapabilityFinding,
    FindingStatus,
    ImageType,
    Palette,
    PrintabilityReport,
    SemanticHint,
    rgb_to_hex,
)


def is_printable(
    image_type: ImageType,
    palette: Palette,
    thin_features: int,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> bool:
    """Printable means: classified as a logo, has colors, and few thin features."""
    return (
        image_type == "logo"
        and len(palette) >= 1
        and thin_features <= config.max_thin_features
    )


def confidence_score(
    image_type: ImageType, thin_features: int, config: PipelineConfig = DEFAULT_CONFIG
) -> int:
    score = config.base_confidence
    if image_type == "photo":
        score -= config.photo_confidence_penalty
    score -= min(config.thin_confidence_cap, thin_features * config.thin_confidence_step)
    return int(max(0, min(100, score)))


def complexity_rating(
    palette: Palette,
    image_type: ImageType,
    thin_features: int,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> int:
    rating = len(palette) * 2
    if image_type == "photo":
        rating += 2
    if thin_features > config.thin_warning_count:
        rating += 1
    if thin_features > config.max_thin_features:
        rating += 1
    return int(max(1, min(10, rating)))


def estimated_price(palette: Palette, config: PipelineConfig = DEFAULT_CONFIG) -> float:
    """Base price plus one surcharge per color beyond the first."""
    surcharge = max(0, len(palette) - 1) * config.color_surcharge
    return round(config.base_price + surcharge, 2)


def recommended_scale(thin_features: int, config: PipelineConfig = DEFAULT_CONFIG) -> float:
    """Pick a larger print size when fine details would otherwise be lost."""
    standard, enlarged, maximum = config.scale_options_mm
    if thin_features == 0:
        return standard
    if thin_features <= config.thin_warning_count:
        return enlarged
    return maximum


def classification_finding(image_type: ImageType, mean_variance: float) -> CapabilityFinding:
    if image_type == "logo":
        return CapabilityFinding(
            title="Logo detected",
            description=(
                f"Flat color regions (mean local variance {mean_variance:.1f}) "
                "translate cleanly into extruded layers."
            ),
            status="optimal",
        )
    return CapabilityFinding(
        title="Photo detected",
        description=(
            f"Continuous gradients and texture (mean local variance {mean_variance:.1f}) "
            "cannot be reproduced with a few filament colors."
        ),
        status="critical",
    )


def nozzle_finding(thin_features: int, config: PipelineConfig = DEFAULT_CONFIG) -> CapabilityFinding:
    status: FindingStatus
    if thin_features == 0:
        status = "optimal"
        description = f"All sampled details are wider than the {config.nozzle_mm} mm nozzle."
    elif thin_features <= config.thin_warning_count:
        status = "info"
        description = (
            f"{thin_features} sampled spots are close to the {config.nozzle_mm} mm "
            "nozzle width; a larger print size is recommended."
        )
    elif thin_features <= config.max_thin_features:
        status = "warning"
        description = (
            f"{thin_features} sampled spots are thinner than the {config.nozzle_mm} mm "
            "nozzle and may print incompletely."
        )
    else:
        status = "critical"
        description = (
            f"{thin_features} sampled spots are thinner than the {config.nozzle_mm} mm "
            "nozzle; fine details will not survive printing."
        )
    return CapabilityFinding(title="Nozzle check", description=description, status=status)


def palette_finding(palette: Palette, config: PipelineConfig = DEFAULT_CONFIG) -> CapabilityFinding:
    count = len(palette)
    status: FindingStatus
    if count >= config.max_colors:
        status = "warning"
        description = (
            f"Reduced to {count} colors, the maximum number of filament layers; "
            "similar shades were merged."
        )
    elif count <= 2:
        status = "optimal"
        description = f"{count} color{'s' if count != 1 else ''} extracted; simple layer stack."
    else:
        status = "info"
        description = f"{count} colors extracted; each adds a filament change."
    return CapabilityFinding(title="Color palette", description=description, status=status)


def hint_finding(hint: SemanticHint) -> CapabilityFinding:
    description = f"External classifier suggests '{hint.classification}'."
    if hint.description:
        description = f"{description} {hint.description}"
    return CapabilityFinding(title="Semantic hint", description=description, status="info")


def build_report(
    image_type: ImageType,
    mean_variance: float,
    thin_features: int,
    palette: Palette,
    config: PipelineConfig = DEFAULT_CONFIG,
    hint: SemanticHint | None = None,
    design_id: str | None = None,
) -> PrintabilityReport:
    """Assemble the final :class:`PrintabilityReport` from the analysis signals."""
    printable = is_printable(image_type, palette, thin_features, config)

    findings: List[CapabilityFinding] = [
        classification_finding(image_type, mean_variance),
        nozzle_finding(thin_features, config),
        palette_finding(palette, config),
    ]
    if hint is not None:
        findings.append(hint_finding(hint))

    verdict = "Printable" if printable else "Not printable"
    reasoning = (
        f"{verdict}: {image_type} with {len(palette)} colors and {thin_features} thin "
        f"features, checked against a {config.nozzle_mm} mm nozzle at "
        f"{config.print_width_mm:g} mm print width."
    )

    return PrintabilityReport(
        is_printable=printable,
        confidence_score=confidence_score(image_type, thin_features, config),
        reasoning=reasoning,
        suggested_colors=tuple(rgb_to_hex(color) for color in palette),
        complexity_rating=complexity_rating(palette, image_type, thin_features, config),
        estimated_price=estimated_price(palette, config),
        recommended_scale=recommended_scale(thin_features, config),
        image_type=image_type,
        findings=tuple(findings),
        thin_features=thin_features,
        mean_variance=round(mean_variance, 3),
        design_id=design_id,
    )
