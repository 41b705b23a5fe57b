import os
import sys

import pytest

root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root not in sys.path:
    sys.path.insert(0, root)

from wavefront.contours import extract_contours
from wavefront.grid import Bounds
from wavefront.solver import Source, compute_field
from wavefront.topology import Polyline, decimate, link_segments

SQUARE = [
    ((0.0, 0.0), (1.0, 0.0)),
    ((1.0, 0.0), (1.0, 1.0)),
    ((1.0, 1.0), (0.0, 1.0)),
    ((0.0, 1.0), (0.0, 0.0)),
]


def test_unit_square_becomes_one_loop():
    polys = link_segments(SQUARE)
    assert len(polys) == 1
    loop = polys[0]
    assert loop.is_closed
    assert len(loop) == 5
    assert loop[0] == loop[-1]
    assert set(loop.distinct_points) == {(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)}


def test_open_chain_walked_from_an_endpoint():
    chain = [((2.0, 0.0), (3.0, 0.0)), ((0.0, 0.0), (1.0, 0.0)), ((1.0, 0.0), (2.0, 0.0))]
    polys = link_segments(chain)
    assert len(polys) == 1
    line = polys[0]
    assert not line.is_closed
    assert line.points in (
        ((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)),
        ((3.0, 0.0), (2.0, 0.0), (1.0, 0.0), (0.0, 0.0)),
    )


def test_chains_and_loops_together():
    chain = [((10.0, 10.0), (11.0, 10.0)), ((11.0, 10.0), (12.0, 11.0))]
    polys = link_segments(SQUARE + chain)
    assert len(polys) == 2
    # open chains are emitted first
    assert not polys[0].is_closed and len(polys[0]) == 3
    assert polys[1].is_closed and len(polys[1]) == 5


def test_empty_input():
    assert link_segments([]) == []


def test_rounded_keys_absorb_drift():
    drifted = list(SQUARE)
    # the closing segment recomputes (0, 0) with a tiny error
    drifted[3] = ((0.0, 1.0), (1e-12, 0.0))
    loops = link_segments(drifted)
    assert len(loops) == 1 and loops[0].is_closed
    # output keeps the first copy seen, unrounded
    assert (0.0, 0.0) in loops[0].points
    # exact matching fragments the same input
    exact = link_segments(drifted, epsilon=None)
    assert not any(p.is_closed for p in exact)


def test_reversed_segments_rebuild_the_same_ring():
    field = compute_field(Source(position=(30.0, 30.0), wavelength=10.0), [], 61, 61,
                          Bounds(0.0, 0.0, 60.0, 60.0))
    ring = extract_contours(field, [15.5])[15.5][0]
    segments = list(zip(ring.points[:-1], ring.points[1:]))
    reversed_segments = [(b, a) for a, b in reversed(segments)]
    rebuilt = link_segments(reversed_segments)
    assert len(rebuilt) == 1
    assert rebuilt[0].is_closed
    assert set(rebuilt[0].points) == set(ring.points)
    assert len(rebuilt[0]) == len(ring)


def test_polyline_helpers():
    line = Polyline(((0.0, 0.0), (1.0, 0.0), (2.0, 0.0)))
    assert line.midpoint == (1.0, 0.0)
    assert line.as_array().shape == (3, 2)
    assert line.reversed().points[0] == (2.0, 0.0)
    assert line.distinct_points == line.points


def test_decimate_long_polylines_only():
    pts = tuple((float(k), 0.0) for k in range(300))
    long_line = Polyline(pts)
    thin = decimate(long_line)
    assert len(thin) < 100
    assert thin[0] == pts[0] and thin[-1] == pts[-1]
    short = Polyline(pts[:80])
    assert decimate(short) is short


@pytest.mark.parametrize('n', [101, 150, 1000])
def test_decimate_keeps_closure(n):
    pts = [(float(k), float(k % 7)) for k in range(n - 1)]
    loop = Polyline(tuple(pts + [pts[0]]), True)
    thin = decimate(loop)
    assert thin.is_closed
    assert thin[0] == thin[-1]
