"""Sparse sampling grids shared by the pixel scanners."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np


@dataclass(frozen=True, slots=True)
class SampleGrid:
    """Row-major grid of ``(x, y)`` coordinates spaced *stride* apart.

    ``margin`` keeps samples away from every edge; ``right_margin`` reserves
    additional columns on the right, e.g. for right-neighbor lookups. Each
    iteration starts over, so one grid can be scanned several times.
    """

    width: int
    height: int
    stride: int
    margin: int = 0
    right_margin: int = 0

    def __post_init__(self) -> None:
        if self.stride <= 0:
            raise ValueError("stride must be a positive integer")
        if self.margin < 0 or self.right_margin < 0:
            raise ValueError("margins cannot be negative")

    @property
    def xs(self) -> range:
        return range(self.margin, self.width - self.margin - self.right_margin, self.stride)

    @property
    def ys(self) -> range:
        return range(self.margin, self.height - self.margin, self.stride)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        xs = self.xs
        for y in self.ys:
            for x in xs:
                yield x, y

    def __len__(self) -> int:
        return len(self.xs) * len(self.ys)

    def coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return the grid as flat ``(xs, ys)`` index arrays in row-major order."""
        yy, xx = np.meshgrid(
            np.asarray(self.ys, dtype=np.intp), np.asarray(self.xs, dtype=np.intp), indexing="ij"
        )
        return xx.ravel(), yy.ravel()
