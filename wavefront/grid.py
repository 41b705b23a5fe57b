"""
Regular sampling grid laid over a world-space rectangle.

Nodes are indexed (i, j) with i along x (0..width-1) and j along y
(0..height-1). Node (0, 0) sits on the bounds corner and node
(width-1, height-1) on the opposite corner, so the grid spans the bounds
exactly. Flat storage is row-major: ``j * width + i``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .errors import ConfigurationError

# World-space point (x, y)
Point = Tuple[float, float]


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned world rectangle: corner (x, y) plus width and height."""
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if not (self.width > 0 and self.height > 0):
            raise ConfigurationError(f'bounds must have positive size, got {self.width}x{self.height}')

    @property
    def x1(self) -> float:
        return self.x + self.width

    @property
    def y1(self) -> float:
        return self.y + self.height

    def clamp(self, p: Point) -> Point:
        return (min(max(p[0], self.x), self.x1), min(max(p[1], self.y), self.y1))

    def contains(self, p: Point) -> bool:
        return self.x <= p[0] <= self.x1 and self.y <= p[1] <= self.y1


class Grid:
    """Grid of ``width * height`` nodes covering ``bounds``."""

    def __init__(self, width: int, height: int, bounds: Bounds):
        if width < 2 or height < 2:
            raise ConfigurationError(f'grid must be at least 2x2 nodes, got {width}x{height}')
        self.width = int(width)
        self.height = int(height)
        self.bounds = bounds
        # Node coordinates are computed once so every caller sees the exact
        # same floats for a given node.
        self._xs: List[float] = [bounds.x + (i / (self.width - 1)) * bounds.width for i in range(self.width)]
        self._ys: List[float] = [bounds.y + (j / (self.height - 1)) * bounds.height for j in range(self.height)]

    def __repr__(self):
        return f'Grid({self.width}x{self.height}, {self.bounds})'

    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def cell_size(self) -> float:
        """World distance between two horizontally adjacent nodes."""
        return self.bounds.width / (self.width - 1)

    @property
    def xs(self) -> List[float]:
        return self._xs

    @property
    def ys(self) -> List[float]:
        return self._ys

    def index(self, i: int, j: int) -> int:
        return j * self.width + i

    def grid_to_world(self, i: int, j: int) -> Point:
        return (self._xs[i], self._ys[j])

    def to_continuous(self, p: Point) -> Tuple[float, float]:
        """Fractional grid coordinates of a world point (unclamped)."""
        b = self.bounds
        gx = (p[0] - b.x) / b.width * (self.width - 1)
        gy = (p[1] - b.y) / b.height * (self.height - 1)
        return gx, gy

    def world_to_grid(self, p: Point) -> Tuple[int, int]:
        """Nearest node to ``p``; points outside the bounds clamp to the border."""
        gx, gy = self.to_continuous(p)
        i = int(math.floor(gx + 0.5))
        j = int(math.floor(gy + 0.5))
        return min(max(i, 0), self.width - 1), min(max(j, 0), self.height - 1)

    def mesh(self) -> Tuple[np.ndarray, np.ndarray]:
        """World coordinates of all nodes as two ``(height, width)`` arrays."""
        X, Y = np.meshgrid(np.array(self._xs), np.array(self._ys))
        return X, Y
