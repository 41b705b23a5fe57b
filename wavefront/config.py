"""
Run settings for a wavefront poster: ring spacing, grid resolution and the
extraction options, plus the ring threshold helper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import ConfigurationError


def ring_thresholds(wavelength: float, steps: int, spacing: float = 0.4) -> List[float]:
    """Arrival times of ``steps`` rings spaced ``spacing * wavelength`` apart."""
    if not wavelength > 0:
        raise ConfigurationError(f'wavelength must be positive, got {wavelength}')
    if not spacing > 0:
        raise ConfigurationError(f'ring spacing must be positive, got {spacing}')
    return [k * wavelength * spacing for k in range(1, int(steps) + 1)]


@dataclass
class PropagationConfig:
    # Rings
    wavelength: float = 25.0
    steps: int = 120
    ring_spacing: float = 0.4     # fraction of a wavelength between rings

    # Grid: width in nodes, height = width * aspect
    grid_resolution: int = 250
    aspect: float = 1.33

    # Extraction / linking
    min_points: int = 4           # shorter polylines are too unstable to curve-fit
    resolve_saddles: bool = False
    epsilon: float = 1e-6

    # Parallel field computation (None = one process per core)
    workers: Optional[int] = None

    def grid_shape(self) -> Tuple[int, int]:
        return self.grid_resolution, int(self.grid_resolution * self.aspect)

    def thresholds(self) -> List[float]:
        return ring_thresholds(self.wavelength, self.steps, self.ring_spacing)

    def validate(self) -> None:
        w, h = self.grid_shape()
        if w < 2 or h < 2:
            raise ConfigurationError(f'grid must be at least 2x2 nodes, got {w}x{h}')
        if self.steps < 1:
            raise ConfigurationError(f'steps must be at least 1, got {self.steps}')
        if self.min_points < 2:
            raise ConfigurationError(f'min_points must be at least 2, got {self.min_points}')
        if self.workers is not None and self.workers < 1:
            raise ConfigurationError(f'workers must be positive, got {self.workers}')
        self.thresholds()
