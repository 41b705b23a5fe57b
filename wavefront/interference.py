"""
Interference proxy between the wavefronts of several sources.

Each field's arrival time at a point stands in for that source's phase
there (geometric optics). The result is a cheap visual cue, not a
superposition of real wave amplitudes.
"""

from __future__ import annotations

import math
from typing import Sequence

from .errors import ConfigurationError
from .grid import Point
from .solver import TravelTimeField


def phase_at(field: TravelTimeField, p: Point, with_initial_phase: bool = False) -> float:
    """Phase (radians) of the field's source at ``p``; +inf if unreached.

    The source's initial phase is only added when ``with_initial_phase`` is set.
    """
    t = field.sample(p)
    if math.isinf(t):
        return math.inf
    src = field.source
    phase = 2.0 * math.pi * t / src.wavelength
    if with_initial_phase:
        phase += src.phase
    return phase


def interference_at(p: Point, fields: Sequence[TravelTimeField], home_index: int,
                    relative: bool = False, with_initial_phase: bool = False) -> float:
    """Interference value in [-1, 1] at ``p`` seen from source ``home_index``.

    The home source contributes 1 (``p`` lies on one of its wavefronts).
    Every other reached source contributes
    ``amplitude * cos(2 pi * t / wavelength)``; unreached sources contribute 0.
    The sum is averaged over all sources.

    relative: measure phases against the home source's own phase at ``p``,
        so equal travel times interfere constructively whatever the distance.
    with_initial_phase: add each source's ``phase`` to its phase term.
    """
    if not fields:
        raise ConfigurationError('at least one field is required')
    if not 0 <= home_index < len(fields):
        raise ConfigurationError(f'home index {home_index} out of range for {len(fields)} fields')

    reference = 0.0
    if relative:
        reference = phase_at(fields[home_index], p, with_initial_phase)
        if math.isinf(reference):
            reference = 0.0

    total = 1.0
    for k, field in enumerate(fields):
        if k == home_index:
            continue
        phase = phase_at(field, p, with_initial_phase)
        if math.isinf(phase):
            continue
        total += field.source.amplitude * math.cos(phase - reference)

    return min(max(total / len(fields), -1.0), 1.0)
