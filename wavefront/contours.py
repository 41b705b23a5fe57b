"""
Iso-contour extraction from a travel-time field (marching squares).

All thresholds are handled in a single pass over the grid cells. For each
cell the four edges are tested for a straddling value pair and the crossing
is linearly interpolated; two crossings make one segment, four crossings (a
saddle cell) make two.

Edges touching an unreached (+inf) node never produce a crossing, so
wavefronts simply end where they meet a blocking obstacle.

Every edge is interpolated from its lower-index node towards its
higher-index node, whichever cell asks, so the two cells sharing an edge get
bit-identical crossing points and the linker can join them.
"""

from __future__ import annotations

import bisect
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ConfigurationError
from .grid import Point
from .solver import TravelTimeField
from .topology import DEFAULT_EPSILON, Polyline, link_segments

logger = logging.getLogger(__name__)

Segment = Tuple[Point, Point]


def validate_thresholds(thresholds: Iterable[float]) -> List[float]:
    values = [float(t) for t in thresholds]
    for t in values:
        if not (math.isfinite(t) and t > 0.0):
            raise ConfigurationError(f'thresholds must be finite and positive, got {t}')
    return values


def _crossing(t: float, pa: Point, pb: Point, va: float, vb: float) -> Optional[Point]:
    """Point where the edge a-b reaches value ``t``, or None."""
    if math.isinf(va) or math.isinf(vb):
        return None
    if (va <= t < vb) or (vb <= t < va):
        s = (t - va) / (vb - va)
        return (pa[0] + (pb[0] - pa[0]) * s, pa[1] + (pb[1] - pa[1]) * s)
    return None


def _saddle_center(v00: float, v10: float, v01: float, v11: float) -> float:
    """Value of the bilinear interpolant at its saddle point."""
    return (v00 * v11 - v10 * v01) / (v00 + v11 - v10 - v01)


def extract_segments(field: TravelTimeField, thresholds: Iterable[float],
                     resolve_saddles: bool = False) -> List[List[Segment]]:
    """Raw iso-segments for each threshold, in threshold order.

    resolve_saddles: pick the saddle pairing with the asymptotic decider
        instead of pairing crossings in discovery order (bottom, right, top,
        left).
    """
    values = validate_thresholds(thresholds)
    buckets: List[List[Segment]] = [[] for _ in values]
    if not values:
        return buckets

    # sorted view so each cell only visits the thresholds inside its range
    order = sorted(range(len(values)), key=values.__getitem__)
    ordered = [values[k] for k in order]

    g = field.grid
    w, h = g.width, g.height
    xs, ys = g.xs, g.ys
    data = field.data
    inf = math.inf
    saddles = 0

    for y in range(h - 1):
        row0 = y * w
        row1 = row0 + w
        y0, y1 = ys[y], ys[y + 1]
        for x in range(w - 1):
            v00 = data[row0 + x]
            v10 = data[row0 + x + 1]
            v01 = data[row1 + x]
            v11 = data[row1 + x + 1]

            finite = [v for v in (v00, v10, v01, v11) if v != inf]
            if not finite:
                continue
            lo = min(finite)
            hi = max(finite)
            if lo == hi:
                continue

            first = bisect.bisect_left(ordered, lo)
            last = bisect.bisect_right(ordered, hi)
            if first >= last:
                continue

            p00 = (xs[x], y0)
            p10 = (xs[x + 1], y0)
            p01 = (xs[x], y1)
            p11 = (xs[x + 1], y1)

            for k in range(first, last):
                t = ordered[k]
                crossings = [c for c in (
                    _crossing(t, p00, p10, v00, v10),  # bottom
                    _crossing(t, p10, p11, v10, v11),  # right
                    _crossing(t, p01, p11, v01, v11),  # top
                    _crossing(t, p00, p01, v00, v01),  # left
                ) if c is not None]

                bucket = buckets[order[k]]
                if len(crossings) == 2:
                    pairs = [(crossings[0], crossings[1])]
                elif len(crossings) == 4:
                    saddles += 1
                    e1, e2, e3, e4 = crossings
                    if resolve_saddles and (_saddle_center(v00, v10, v01, v11) > t) != (v00 > t):
                        pairs = [(e1, e4), (e2, e3)]
                    else:
                        pairs = [(e1, e2), (e3, e4)]
                else:
                    continue

                for a, b in pairs:
                    if a != b:
                        bucket.append((a, b))

    logger.debug('extracted %d segments over %d thresholds (%d saddle cells)',
                 sum(len(b) for b in buckets), len(values), saddles)
    return buckets


def extract_contours(field: TravelTimeField, thresholds: Iterable[float],
                     min_points: int = 2, resolve_saddles: bool = False,
                     epsilon: float = DEFAULT_EPSILON) -> Dict[float, List[Polyline]]:
    """Ordered wavefront polylines of ``field`` at every threshold.

    Polylines with fewer than ``min_points`` points are dropped.
    """
    values = validate_thresholds(thresholds)
    buckets = extract_segments(field, values, resolve_saddles=resolve_saddles)
    contours: Dict[float, List[Polyline]] = {}
    for t, segments in zip(values, buckets):
        polylines = link_segments(segments, epsilon=epsilon)
        contours[t] = [p for p in polylines if len(p) >= min_points]
    return contours
