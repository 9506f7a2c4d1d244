"""Error taxonomy for the printability pipeline."""

from __future__ import annotations


class PrintcheckError(Exception):
    """Base class for failures that abort a single analysis call."""

    user_message = "could not process image"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail


class DecodeError(PrintcheckError):
    """Raised when the input bytes cannot be decoded into a raster image."""

    user_message = "could not process image"


class EmptyForegroundError(PrintcheckError):
    """Raised when segmentation leaves no foreground pixels."""

    user_message = "no content detected"


class DegenerateBoundsError(PrintcheckError):
    """Raised when the foreground bounding box has zero extent on an axis."""

    user_message = "no content detected"

    def __init__(self, width: int, height: int) -> None:
        super().__init__(f"Foreground bounding box is degenerate ({width}x{height})")
        self.width = width
        self.height = height
