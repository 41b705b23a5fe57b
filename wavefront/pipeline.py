"""
End-to-end run: sources + obstacles -> fields -> wavefront polylines, each
tagged with the interference value a renderer uses to modulate it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from .config import PropagationConfig
from .contours import extract_contours
from .grid import Bounds
from .interference import interference_at
from .medium import Medium, Obstacle
from .solver import Source, TravelTimeField, compute_fields
from .topology import Polyline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Wavefront:
    source_index: int
    step: int             # 1-based ring number
    threshold: float
    polyline: Polyline
    interference: float


def trace_wavefronts(sources: Sequence[Source], obstacles: Union[Medium, Iterable[Obstacle]],
                     bounds: Bounds, config: PropagationConfig = None
                     ) -> Tuple[List[Wavefront], List[TravelTimeField]]:
    """Compute every source's wavefronts.

    Returns the wavefronts (source by source, ring by ring) and the fields
    they were extracted from.
    """
    config = config or PropagationConfig()
    config.validate()
    thresholds = config.thresholds()
    width, height = config.grid_shape()

    fields = compute_fields(sources, obstacles, width, height, bounds, workers=config.workers)

    wavefronts: List[Wavefront] = []
    for s_idx, field in enumerate(fields):
        contours = extract_contours(field, thresholds, min_points=config.min_points,
                                    resolve_saddles=config.resolve_saddles, epsilon=config.epsilon)
        for step, t in enumerate(thresholds, start=1):
            for poly in contours[t]:
                value = interference_at(poly.midpoint, fields, s_idx)
                wavefronts.append(Wavefront(s_idx, step, t, poly, value))

    logger.info('%d wavefronts from %d sources on a %dx%d grid',
                len(wavefronts), len(fields), width, height)
    return wavefronts, fields
