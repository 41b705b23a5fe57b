# wavefront/__init__.py
from __future__ import annotations

from .errors import ConfigurationError
from .config import PropagationConfig, ring_thresholds

# ---- Geometry / medium ----
from .grid import Bounds, Grid
from .medium import Obstacle, Circle, Capsule, Rect, Medium

# ---- Solver ----
from .solver import Source, TravelTimeField, compute_field, compute_fields

# ---- Contours / linking ----
from .contours import extract_segments, extract_contours
from .topology import Polyline, link_segments, decimate

# ---- Interference / pipeline ----
from .interference import interference_at
from .pipeline import Wavefront, trace_wavefronts

__all__ = [
    "ConfigurationError", "PropagationConfig", "ring_thresholds",
    "Bounds", "Grid",
    "Obstacle", "Circle", "Capsule", "Rect", "Medium",
    "Source", "TravelTimeField", "compute_field", "compute_fields",
    "extract_segments", "extract_contours",
    "Polyline", "link_segments", "decimate",
    "interference_at",
    "Wavefront", "trace_wavefronts",
]
