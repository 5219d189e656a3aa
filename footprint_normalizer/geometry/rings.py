"""Planar ring helpers shared by the normalization stages.

A ring is a list of ``(x, y)`` tuples whose first and last points are
identical. All measurements here are planar (coordinate units), which
is what the pixel-art renderer works in.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from footprint_normalizer.core.constants import MIN_DISTINCT_VERTICES

Coordinate = tuple[float, float]
Ring = list[Coordinate]

# ---------------------------------------------------------------------------
# Ring structure
# ---------------------------------------------------------------------------


def close_ring(coords: Sequence[Coordinate]) -> Ring:
    """Return *coords* as a new ring whose last point repeats the first."""
    ring = list(coords)
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def open_ring(ring: Sequence[Coordinate]) -> Ring:
    """Return the vertices of *ring* without the closing duplicate."""
    vertices = list(ring)
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices.pop()
    return vertices


def distinct_vertex_count(ring: Sequence[Coordinate]) -> int:
    """Number of distinct vertices in *ring* (closing point ignored)."""
    return len(set(ring))


def is_degenerate(ring: Sequence[Coordinate]) -> bool:
    """Whether *ring* has fewer than three distinct vertices."""
    return distinct_vertex_count(ring) < MIN_DISTINCT_VERTICES


# ---------------------------------------------------------------------------
# Grid snapping
# ---------------------------------------------------------------------------


def snap_value(value: float, grid_size: float) -> float:
    """Round *value* half-up to the nearest multiple of *grid_size*."""
    return math.floor(value / grid_size + 0.5) * grid_size


def snap_point(point: Coordinate, grid_size: float) -> Coordinate:
    """Snap both axes of *point* to the grid independently."""
    return (snap_value(point[0], grid_size), snap_value(point[1], grid_size))


def snap_to_grid(coords: Sequence[Coordinate], grid_size: float) -> Ring:
    """Snap every point of *coords* to the grid. Idempotent."""
    return [snap_point(p, grid_size) for p in coords]


# ---------------------------------------------------------------------------
# Measurements
# ---------------------------------------------------------------------------


def ring_area(ring: Sequence[Coordinate]) -> float:
    """Planar (shoelace) area of *ring*, always non-negative.

    Degenerate rings (fewer than three distinct vertices) have zero area.
    """
    if is_degenerate(ring):
        return 0.0

    from shapely.geometry import Polygon

    return float(Polygon(ring).area)


def ring_perimeter(ring: Sequence[Coordinate]) -> float:
    """Sum of edge lengths of the closed *ring*."""
    closed = close_ring(ring)
    if len(closed) < 2:
        return 0.0

    from shapely.geometry import LineString

    return float(LineString(closed).length)


def ring_bounds(ring: Sequence[Coordinate]) -> tuple[float, float, float, float]:
    """Axis-aligned bounds ``(min_x, min_y, max_x, max_y)`` of *ring*.

    Raises:
        ValueError: If *ring* is empty.
    """
    if not ring:
        msg = "Cannot compute bounds of an empty ring"
        raise ValueError(msg)

    from shapely.geometry import MultiPoint

    min_x, min_y, max_x, max_y = MultiPoint(list(ring)).bounds
    return (min_x, min_y, max_x, max_y)


def bounding_rectangle(ring: Sequence[Coordinate]) -> Ring:
    """Closed five-point rectangle enclosing every vertex of *ring*.

    Corner order is south-west, south-east, north-east, north-west.
    """
    min_x, min_y, max_x, max_y = ring_bounds(ring)
    return [
        (min_x, min_y),
        (max_x, min_y),
        (max_x, max_y),
        (min_x, max_y),
        (min_x, min_y),
    ]


def is_axis_aligned(start: Coordinate, end: Coordinate, epsilon: float) -> bool:
    """Whether the edge *start*→*end* is horizontal or vertical within *epsilon*."""
    return abs(end[0] - start[0]) <= epsilon or abs(end[1] - start[1]) <= epsilon
