import math
import os
import sys

import numpy as np
import pytest

root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root not in sys.path:
    sys.path.insert(0, root)

from wavefront.errors import ConfigurationError
from wavefront.grid import Bounds
from wavefront.interference import interference_at, phase_at
from wavefront.medium import Circle
from wavefront.solver import Source, compute_fields

# one world unit per cell, both sources on grid nodes
BOUNDS = Bounds(-50.0, -50.0, 200.0, 100.0)
LAMBDA = 20.0


@pytest.fixture(scope='module')
def pair():
    sources = [Source(position=(0.0, 0.0), wavelength=LAMBDA),
               Source(position=(100.0, 0.0), wavelength=LAMBDA)]
    return compute_fields(sources, [], 201, 101, BOUNDS, workers=1)


def test_relative_equal_travel_time_is_constructive(pair):
    assert pair[0].sample((50.0, 0.0)) == pytest.approx(pair[1].sample((50.0, 0.0)))
    assert interference_at((50.0, 0.0), pair, 0, relative=True) == pytest.approx(1.0)


def test_relative_half_wavelength_difference_is_destructive(pair):
    # 45 vs 55 units: a difference of lambda / 2
    assert interference_at((45.0, 0.0), pair, 0, relative=True) == pytest.approx(0.0, abs=1e-9)


def test_absolute_phase_formula(pair):
    # 60 units from the second source: three whole wavelengths
    assert interference_at((40.0, 0.0), pair, 0) == pytest.approx(1.0)
    # 50 units: two and a half wavelengths
    assert interference_at((50.0, 0.0), pair, 0) == pytest.approx(0.0, abs=1e-9)


def test_amplitude_weights_other_sources():
    sources = [Source(position=(0.0, 0.0), wavelength=LAMBDA),
               Source(position=(100.0, 0.0), wavelength=LAMBDA, amplitude=0.5)]
    fields = compute_fields(sources, [], 201, 101, BOUNDS, workers=1)
    assert interference_at((40.0, 0.0), fields, 0) == pytest.approx(0.75)


def test_initial_phase_ignored_unless_requested():
    sources = [Source(position=(0.0, 0.0), wavelength=LAMBDA),
               Source(position=(100.0, 0.0), wavelength=LAMBDA, phase=math.pi)]
    fields = compute_fields(sources, [], 201, 101, BOUNDS, workers=1)
    # 60 units from the second source: its initial phase does not enter the sum
    assert interference_at((40.0, 0.0), fields, 0) == pytest.approx(1.0)
    assert interference_at((40.0, 0.0), fields, 0, with_initial_phase=True) == pytest.approx(0.0, abs=1e-9)


def test_unreached_source_contributes_nothing():
    sources = [Source(position=(0.0, 0.0), wavelength=LAMBDA),
               Source(position=(100.0, 0.0), wavelength=LAMBDA)]
    cage = Circle(center=(100.0, 0.0), radius=5.0, speed=0.0)
    fields = compute_fields(sources, [cage], 201, 101, BOUNDS, workers=1)
    assert math.isinf(phase_at(fields[1], (40.0, 0.0)))
    assert interference_at((40.0, 0.0), fields, 0) == pytest.approx(0.5)


def test_result_always_in_range(pair):
    rng = np.random.default_rng(0)
    for x, y in rng.uniform([-50.0, -50.0], [150.0, 50.0], size=(200, 2)):
        for home in (0, 1):
            v = interference_at((x, y), pair, home)
            assert -1.0 <= v <= 1.0


def test_single_source_is_fully_constructive(pair):
    assert interference_at((10.0, 10.0), pair[:1], 0) == 1.0


def test_bad_arguments(pair):
    with pytest.raises(ConfigurationError):
        interference_at((0.0, 0.0), [], 0)
    with pytest.raises(ConfigurationError):
        interference_at((0.0, 0.0), pair, 2)
    with pytest.raises(ConfigurationError):
        interference_at((0.0, 0.0), pair, -1)
