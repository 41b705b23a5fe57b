"""
Segment linking: turn an unordered bag of iso-segments into ordered
polylines (open chains and closed loops).

Points are matched through coordinates rounded to ``epsilon`` rather than
exact float equality, which tolerates tiny interpolation drift between the
two cells that share an edge. Output polylines carry the original,
unrounded coordinates (the first copy seen of each point).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional, Set, Tuple

import numpy as np

from .grid import Point

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-6


@dataclass(frozen=True)
class Polyline:
    """Ordered world points. Closed polylines repeat the first point at the end."""
    points: Tuple[Point, ...]
    is_closed: bool = False

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, k):
        return self.points[k]

    @property
    def distinct_points(self) -> Tuple[Point, ...]:
        return self.points[:-1] if self.is_closed else self.points

    @property
    def midpoint(self) -> Point:
        """The middle point of the sequence (by index, not by arc length)."""
        return self.points[len(self.points) // 2]

    def as_array(self) -> np.ndarray:
        return np.asarray(self.points, dtype=float).reshape(-1, 2)

    def reversed(self) -> 'Polyline':
        return Polyline(tuple(reversed(self.points)), self.is_closed)


def _key_fn(epsilon: Optional[float]):
    if not epsilon:
        return lambda p: p
    return lambda p: (round(p[0] / epsilon), round(p[1] / epsilon))


def link_segments(segments: Iterable[Tuple[Point, Point]],
                  epsilon: Optional[float] = DEFAULT_EPSILON) -> List[Polyline]:
    """Chain segments into polylines.

    Open chains are walked first, starting from every degree-1 endpoint;
    whatever remains is walked as loops. ``epsilon=None`` (or 0) matches
    points by exact equality.
    """
    key = _key_fn(epsilon)
    adjacency: Dict[Hashable, List[Hashable]] = {}
    points: Dict[Hashable, Point] = {}
    for a, b in segments:
        ka, kb = key(a), key(b)
        points.setdefault(ka, a)
        points.setdefault(kb, b)
        adjacency.setdefault(ka, []).append(kb)
        adjacency.setdefault(kb, []).append(ka)

    if not adjacency:
        return []

    visited: Set[Hashable] = set()

    def walk(start):
        chain = []
        curr = start
        while curr is not None and curr not in visited:
            visited.add(curr)
            chain.append(curr)
            curr = next((n for n in adjacency[curr] if n not in visited), None)
        return chain

    polylines: List[Polyline] = []

    # open chains, from their endpoints
    for start, neighbours in adjacency.items():
        if start in visited or len(neighbours) != 1:
            continue
        chain = walk(start)
        if len(chain) > 1:
            polylines.append(Polyline(tuple(points[k] for k in chain), False))
    n_open = len(polylines)

    # loops
    for start in adjacency:
        if start in visited:
            continue
        chain = walk(start)
        if len(chain) < 2:
            continue
        closed = len(chain) > 2 and chain[0] in adjacency[chain[-1]]
        if closed:
            chain.append(chain[0])
        polylines.append(Polyline(tuple(points[k] for k in chain), closed))

    logger.debug('linked %d points into %d open chains and %d loops',
                 len(adjacency), n_open, len(polylines) - n_open)
    return polylines


def decimate(polyline: Polyline, target: int = 50, limit: int = 100) -> Polyline:
    """Thin out long polylines before curve fitting.

    Polylines with more than ``limit`` points keep every ``n // target``-th
    point plus the last one; shorter ones are returned unchanged.
    """
    n = len(polyline)
    if n <= limit:
        return polyline
    step = max(1, n // target)
    kept = tuple(p for k, p in enumerate(polyline.points) if k % step == 0 or k == n - 1)
    return Polyline(kept, polyline.is_closed)
