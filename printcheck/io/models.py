"""Data models shared across the printability pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from io import BytesIO
from typing import Any, Dict, Literal, Tuple

import numpy as np
from PIL import Image

RGB = Tuple[int, int, int]
Palette = Tuple[RGB, ...]
ImageType = Literal["logo", "photo"]
FindingStatus = Literal["optimal", "warning", "critical", "info"]
SemanticClass = Literal["logo", "photo", "graphic"]


@dataclass(slots=True)
class RasterImage:
    """RGBA pixel buffer with shape ``(height, width, 4)`` and dtype uint8."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError("RasterImage expects an array of shape (height, width, 4)")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValueError("RasterImage dimensions must be positive")
        if self.pixels.dtype != np.uint8:
            self.pixels = self.pixels.astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def foreground_mask(self) -> np.ndarray:
        """Return a boolean mask of pixels with non-zero alpha."""
        return self.alpha > 0

    @classmethod
    def from_pil(cls, img: Image.Image) -> "RasterImage":
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        return cls(np.array(img, dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def to_png_bytes(self) -> bytes:
        buffer = BytesIO()
        image = self.to_pil()
        try:
            image.save(buffer, format="PNG")
        finally:
            image.close()
        return buffer.getvalue()


@dataclass(slots=True)
class ColorBucket:
    """Running channel sums for pixels sharing a quantized color key."""

    key: RGB
    r_sum: int = 0
    g_sum: int = 0
    b_sum: int = 0
    count: int = 0

    @property
    def centroid(self) -> RGB:
        """Mean color of the bucket, rounded half-up to integers."""
        if self.count == 0:
            raise ValueError("Empty bucket has no centroid")
        return (
            _round_half_up(self.r_sum / self.count),
            _round_half_up(self.g_sum / self.count),
            _round_half_up(self.b_sum / self.count),
        )

    def merge(self, other: "ColorBucket") -> "ColorBucket":
        """Return a bucket combining *self* and *other* (same key required)."""
        if other.key != self.key:
            raise ValueError("Cannot merge buckets with different keys")
        return ColorBucket(
            key=self.key,
            r_sum=self.r_sum + other.r_sum,
            g_sum=self.g_sum + other.g_sum,
            b_sum=self.b_sum + other.b_sum,
            count=self.count + other.count,
        )


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Inclusive pixel bounds of the foreground."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def is_degenerate(self) -> bool:
        """True when the box has zero extent along either axis."""
        return self.max_x == self.min_x or self.max_y == self.min_y


@dataclass(frozen=True, slots=True)
class CapabilityFinding:
    """One evaluated printability dimension."""

    title: str
    description: str
    status: FindingStatus


@dataclass(frozen=True, slots=True)
class SemanticHint:
    """Advisory classification supplied by an external vision service."""

    classification: SemanticClass
    description: str = ""


@dataclass(frozen=True, slots=True)
class PrintabilityReport:
    """Final verdict of one analysis run."""

    is_printable: bool
    confidence_score: int
    reasoning: str
    suggested_colors: Tuple[str, ...]
    complexity_rating: int
    estimated_price: float
    recommended_scale: float
    image_type: ImageType
    findings: Tuple[CapabilityFinding, ...]
    thin_features: int = 0
    mean_variance: float = 0.0
    design_id: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["suggested_colors"] = list(self.suggested_colors)
        payload["findings"] = [asdict(finding) for finding in self.findings]
        return payload


@dataclass(slots=True)
class ProcessedImage:
    """Output of the processing stages: centered, quantized artwork."""

    image: RasterImage
    palette: Palette
    bbox: BoundingBox
    png_bytes: bytes = b""


@dataclass(slots=True)
class ExportConfig:
    """Placement settings handed to the 3D preview/export renderer."""

    x: float = 0.0
    y: float = 0.0
    scale: float = 30.0
    rotation: float = 0.0
    text: str = ""
    text_x: float = 0.0
    text_y: float = -18.0
    text_scale: float = 5.0
    custom_palette: list[str] = field(default_factory=list)
    material: str | None = None
    design_id: str | None = None

    @classmethod
    def from_report(
        cls, report: PrintabilityReport, material: str | None = None
    ) -> "ExportConfig":
        return cls(
            scale=float(report.recommended_scale),
            custom_palette=list(report.suggested_colors),
            material=material,
            design_id=report.design_id,
        )


def rgb_to_hex(color: RGB) -> str:
    """Return ``#rrggbb`` for an RGB triple."""
    r, g, b = color
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(value: str) -> RGB:
    """Parse ``#rrggbb`` (leading ``#`` optional) into an RGB triple."""
    stripped = value.strip().lstrip("#")
    if len(stripped) != 6:
        raise ValueError(f"Expected a 6 digit hex color, got {value!r}")
    return (int(stripped[0:2], 16), int(stripped[2:4], 16), int(stripped[4:6], 16))


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))
