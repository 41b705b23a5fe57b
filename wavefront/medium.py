"""
Propagation medium: obstacle shapes and the speed lookup built on them.

Three obstacle shapes exist (circle, capsule, axis-aligned rectangle). Each
carries a ``speed`` multiplier in [0, 1]: 0 blocks propagation completely,
1 is free space, anything in between is a slower medium. Points covered by
no obstacle propagate at speed 1.

Obstacles overlap with first-match-wins precedence in list order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from .errors import ConfigurationError
from .grid import Grid, Point

FREE_SPEED = 1.0


class Obstacle:
    """Base class for the obstacle shapes. Subclasses define ``speed``."""

    speed: float

    def contains(self, p: Point) -> bool:
        raise NotImplementedError

    def contains_many(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        """Vectorized ``contains`` over coordinate arrays of equal shape."""
        raise NotImplementedError


@dataclass
class Circle(Obstacle):
    center: Point
    radius: float
    speed: float = 0.0

    def contains(self, p: Point) -> bool:
        dx, dy = p[0] - self.center[0], p[1] - self.center[1]
        return math.sqrt(dx * dx + dy * dy) <= self.radius

    def contains_many(self, X, Y):
        dx, dy = X - self.center[0], Y - self.center[1]
        return np.sqrt(dx * dx + dy * dy) <= self.radius


@dataclass
class Capsule(Obstacle):
    """Segment a-b thickened by ``radius`` (a stadium shape)."""
    a: Point
    b: Point
    radius: float
    speed: float = 0.0

    def contains(self, p: Point) -> bool:
        pax, pay = p[0] - self.a[0], p[1] - self.a[1]
        bax, bay = self.b[0] - self.a[0], self.b[1] - self.a[1]
        len2 = bax * bax + bay * bay
        # degenerate capsule is a circle around a
        h = 0.0 if len2 == 0.0 else min(max((pax * bax + pay * bay) / len2, 0.0), 1.0)
        dx, dy = pax - bax * h, pay - bay * h
        return math.sqrt(dx * dx + dy * dy) <= self.radius

    def contains_many(self, X, Y):
        pax, pay = X - self.a[0], Y - self.a[1]
        bax, bay = self.b[0] - self.a[0], self.b[1] - self.a[1]
        len2 = bax * bax + bay * bay
        if len2 == 0.0:
            h = np.zeros_like(pax)
        else:
            h = np.clip((pax * bax + pay * bay) / len2, 0.0, 1.0)
        dx, dy = pax - bax * h, pay - bay * h
        return np.sqrt(dx * dx + dy * dy) <= self.radius


@dataclass
class Rect(Obstacle):
    """Axis-aligned rectangle, half-open: includes its min edges, not its max edges."""
    x: float
    y: float
    width: float
    height: float
    speed: float = 0.0

    def contains(self, p: Point) -> bool:
        return self.x <= p[0] < self.x + self.width and self.y <= p[1] < self.y + self.height

    def contains_many(self, X, Y):
        return (X >= self.x) & (X < self.x + self.width) & (Y >= self.y) & (Y < self.y + self.height)


class Medium:
    """Speed lookup over an ordered, fixed list of obstacles."""

    def __init__(self, obstacles: Iterable[Obstacle] = ()):
        self.obstacles: List[Obstacle] = list(obstacles)
        for k, o in enumerate(self.obstacles):
            if not 0.0 <= o.speed <= 1.0:
                raise ConfigurationError(f'obstacle {k} speed {o.speed} outside [0, 1]')

    def __len__(self):
        return len(self.obstacles)

    def speed_at(self, p: Point) -> float:
        for o in self.obstacles:
            if o.contains(p):
                return o.speed
        return FREE_SPEED

    def speed_grid(self, grid: Grid) -> np.ndarray:
        """Speed at every grid node, shape ``(height, width)``.

        Same result as calling ``speed_at`` on each node, evaluated with masks.
        """
        X, Y = grid.mesh()
        speed = np.full(X.shape, FREE_SPEED, dtype=float)
        claimed = np.zeros(X.shape, dtype=bool)
        for o in self.obstacles:
            mask = o.contains_many(X, Y) & ~claimed
            speed[mask] = o.speed
            claimed |= mask
        return speed
