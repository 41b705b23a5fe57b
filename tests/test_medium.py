import os
import sys

import numpy as np
import pytest

# Ensure the repository root is in sys.path for imports
root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root not in sys.path:
    sys.path.insert(0, root)

from wavefront.errors import ConfigurationError
from wavefront.grid import Bounds, Grid
from wavefront.medium import Capsule, Circle, Medium, Rect


def test_circle_contains_boundary():
    c = Circle(center=(10.0, 10.0), radius=5.0)
    assert c.contains((15.0, 10.0))
    assert c.contains((10.0, 10.0))
    assert not c.contains((15.1, 10.0))


def test_capsule_uses_clamped_projection():
    cap = Capsule(a=(0.0, 0.0), b=(10.0, 0.0), radius=2.0)
    assert cap.contains((5.0, 1.9))
    assert cap.contains((11.5, 0.0))   # beyond b, within the end cap
    assert not cap.contains((12.5, 0.0))
    assert not cap.contains((5.0, 2.5))


def test_degenerate_capsule_is_a_circle():
    cap = Capsule(a=(3.0, 3.0), b=(3.0, 3.0), radius=1.0)
    assert cap.contains((3.5, 3.5))
    assert not cap.contains((5.0, 3.0))


def test_rect_is_half_open():
    r = Rect(x=0.0, y=0.0, width=10.0, height=5.0)
    assert r.contains((0.0, 0.0))
    assert r.contains((9.99, 4.99))
    assert not r.contains((10.0, 2.0))
    assert not r.contains((5.0, 5.0))


def test_speed_first_match_wins_and_free_default():
    soft = Circle(center=(0.0, 0.0), radius=10.0, speed=0.5)
    hard = Rect(x=-5.0, y=-5.0, width=10.0, height=10.0, speed=0.0)
    medium = Medium([soft, hard])
    assert medium.speed_at((0.0, 0.0)) == 0.5
    assert Medium([hard, soft]).speed_at((0.0, 0.0)) == 0.0
    assert medium.speed_at((50.0, 50.0)) == 1.0
    assert Medium().speed_at((1.0, 2.0)) == 1.0


def test_speed_grid_matches_pointwise_lookup():
    obstacles = [
        Circle(center=(20.0, 20.0), radius=8.0, speed=0.3),
        Capsule(a=(5.0, 30.0), b=(35.0, 35.0), radius=3.0),
        Rect(x=15.0, y=10.0, width=12.0, height=6.0, speed=0.6),
    ]
    medium = Medium(obstacles)
    grid = Grid(41, 31, Bounds(0.0, 0.0, 40.0, 45.0))
    speed = medium.speed_grid(grid)
    assert speed.shape == (31, 41)
    expected = np.array([[medium.speed_at(grid.grid_to_world(i, j)) for i in range(grid.width)]
                         for j in range(grid.height)])
    assert np.array_equal(speed, expected)
    assert np.count_nonzero(speed == 0.0) > 0
    assert np.count_nonzero(speed == 0.3) > 0


def test_invalid_speed_rejected():
    with pytest.raises(ConfigurationError):
        Medium([Circle(center=(0.0, 0.0), radius=1.0, speed=1.5)])
    with pytest.raises(ConfigurationError):
        Medium([Rect(0.0, 0.0, 1.0, 1.0, speed=-0.1)])
