"""Shared pipeline constants — single source of truth.

Centralises the tuning values of the normalization stages and the
property names the orchestrator attaches to processed features.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Processing option defaults
# ---------------------------------------------------------------------------

DEFAULT_TOLERANCE: float = 0.0001
"""Simplification deviation bound, in coordinate units."""

DEFAULT_GRID_SIZE: float = 0.0001
"""Grid cell edge length used for snapping, in coordinate units."""

DEFAULT_MIN_AREA: float = 0.000001
"""Planar area (squared coordinate units) below which a polygon is dropped."""

DEFAULT_MAX_VERTICES: int = 20
"""Vertex cap (closing duplicate excluded) enforced by decimation."""

DEFAULT_ANGLE_TOLERANCE_DEG: float = 15.0
"""Allowed deviation from the nearest right-angle multiple before correction."""

DEFAULT_CORRECTION_PASSES: int = 1
"""Angle-correction sweeps over the ring. One sweep bounds runtime."""

DEFAULT_MAX_COMPLEX_VERTICES: int = 15
"""Vertex count above which a ring falls back to its bounding box."""

DEFAULT_MAX_ISOPERIMETRIC_RATIO: float = 50.0
"""Perimeter² / area above which a ring falls back to its bounding box."""

# ---------------------------------------------------------------------------
# Ring structure
# ---------------------------------------------------------------------------

MIN_DISTINCT_VERTICES = 3

# 3 distinct vertices + closing point
MIN_RING_POINTS = 4

# ---------------------------------------------------------------------------
# Orthogonalization
# ---------------------------------------------------------------------------

# Upper bounds (inclusive) of the right-angle buckets. Angles above the
# last bound wrap back to the 0° target.
RIGHT_ANGLE_BUCKETS: tuple[tuple[float, float], ...] = (
    (45.0, 0.0),
    (135.0, 90.0),
    (225.0, 180.0),
    (315.0, 270.0),
)

# Deviations below this are nudged; larger ones are snapped to a grid line.
SMALL_DEVIATION_DEG = 30.0

NUDGE_FACTOR = 0.1
PRESERVE_SHAPE_NUDGE_FACTOR = 0.05

# An edge is axis-aligned when |dx| or |dy| is within this fraction of the grid.
AXIS_ALIGNED_GRID_FRACTION = 0.1

# ---------------------------------------------------------------------------
# Processed-feature annotations
# ---------------------------------------------------------------------------

PROCESSED_PROPERTY = "_processed"
ORIGINAL_AREA_PROPERTY = "_originalArea"
PROCESSED_AREA_PROPERTY = "_processedArea"

POLYGON_TYPE = "Polygon"
LINESTRING_TYPE = "LineString"
POINT_TYPE = "Point"
FEATURE_COLLECTION_TYPE = "FeatureCollection"
