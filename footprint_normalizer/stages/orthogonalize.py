"""Orthogonalization stage: push footprints toward right-angle outlines.

Three steps, each building a new vertex list:

1. **Grid snap**: every coordinate is rounded to the nearest multiple of
   ``grid_size``.
2. **Angle correction**: each vertex whose turning angle is more than
   ``angle_tolerance`` away from a multiple of 90° is nudged toward its
   neighbours (small deviations) or pulled onto its nearest grid line
   (large deviations). Vertices are visited in ring order and see the
   already-corrected position of their predecessor.
3. **Edge forcing**: one forward pass that collapses the end of every
   diagonal edge onto the start's x or y, so each edge becomes horizontal
   or vertical. The wrap-around edge is not revisited by that pass; when
   it is still diagonal an elbow vertex can be inserted to square it.

The sweep count is bounded (``correction_passes``) rather than iterated to
a fixed point, so a corrected ring is not guaranteed to be perfectly
orthogonal unless edge forcing runs.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from footprint_normalizer.core.constants import (
    AXIS_ALIGNED_GRID_FRACTION,
    DEFAULT_ANGLE_TOLERANCE_DEG,
    DEFAULT_CORRECTION_PASSES,
    MIN_RING_POINTS,
    NUDGE_FACTOR,
    PRESERVE_SHAPE_NUDGE_FACTOR,
    RIGHT_ANGLE_BUCKETS,
    SMALL_DEVIATION_DEG,
)
from footprint_normalizer.geometry.rings import (
    is_axis_aligned,
    open_ring,
    snap_point,
    snap_to_grid,
    snap_value,
)

if TYPE_CHECKING:
    from footprint_normalizer.geometry.rings import Coordinate, Ring

logger = logging.getLogger("footprint_normalizer.stages.orthogonalize")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def orthogonalize_ring(
    ring: Ring,
    *,
    grid_size: float,
    angle_tolerance: float = DEFAULT_ANGLE_TOLERANCE_DEG,
    force_orthogonal: bool = True,
    preserve_shape: bool = False,
    correction_passes: int = DEFAULT_CORRECTION_PASSES,
    square_closing_edge: bool = True,
) -> Ring:
    """Snap, angle-correct and straighten a closed ring.

    Args:
        ring: Closed ring of ``(x, y)`` tuples.
        grid_size: Grid cell edge length, in coordinate units.
        angle_tolerance: Degrees of deviation from 0/90/180/270 tolerated
            before a vertex is moved.
        force_orthogonal: Run the edge-forcing pass.
        preserve_shape: Use the smaller nudge factor.
        correction_passes: Number of angle-correction sweeps.
        square_closing_edge: With ``force_orthogonal``, insert an elbow
            vertex when the closing edge is still diagonal.

    Returns:
        A new closed ring. Rings with fewer than four points are returned
        as a copy, untouched.
    """
    if len(ring) < MIN_RING_POINTS:
        return list(ring)

    vertices = snap_to_grid(open_ring(ring), grid_size)
    for _ in range(correction_passes):
        vertices = correct_angles(
            vertices,
            grid_size=grid_size,
            angle_tolerance=angle_tolerance,
            preserve_shape=preserve_shape,
        )

    if force_orthogonal:
        vertices = force_orthogonal_edges(vertices, grid_size)
        if square_closing_edge:
            vertices = square_closing(vertices, grid_size)

    return [*vertices, vertices[0]]


# ---------------------------------------------------------------------------
# Angle math
# ---------------------------------------------------------------------------


def vertex_angle(prev: Coordinate, curr: Coordinate, nxt: Coordinate) -> float:
    """Turning angle at *curr* in degrees, in ``[0, 360)``.

    Measured from the vector toward *prev* to the vector toward *nxt*;
    the sign of their cross product decides whether the angle is
    reported as ``θ`` or ``360 − θ``. A zero-length edge yields ``0``.
    """
    v1x, v1y = prev[0] - curr[0], prev[1] - curr[1]
    v2x, v2y = nxt[0] - curr[0], nxt[1] - curr[1]
    if (v1x == 0 and v1y == 0) or (v2x == 0 and v2y == 0):
        return 0.0

    dot = v1x * v2x + v1y * v2y
    cross = v1x * v2y - v1y * v2x
    return math.degrees(math.atan2(cross, dot)) % 360.0


def nearest_right_angle(angle: float) -> float:
    """Bucket *angle* to the right-angle target 0, 90, 180 or 270."""
    normalized = angle % 360.0
    for upper, target in RIGHT_ANGLE_BUCKETS:
        if normalized <= upper:
            return target
    return 0.0


# ---------------------------------------------------------------------------
# Angle correction
# ---------------------------------------------------------------------------


def correct_angles(
    vertices: list[Coordinate],
    *,
    grid_size: float,
    angle_tolerance: float = DEFAULT_ANGLE_TOLERANCE_DEG,
    preserve_shape: bool = False,
) -> list[Coordinate]:
    """One correction sweep over an open vertex list."""
    result = list(vertices)
    if len(result) < 3:
        return result

    n = len(result)
    moved = 0
    for i in range(n):
        prev = result[i - 1]
        curr = result[i]
        nxt = result[(i + 1) % n]

        angle = vertex_angle(prev, curr, nxt)
        target = nearest_right_angle(angle)
        if abs(angle - target) <= angle_tolerance:
            continue

        adjusted = adjust_vertex(
            prev, curr, nxt, target, grid_size=grid_size, preserve_shape=preserve_shape
        )
        if adjusted != curr:
            moved += 1
        result[i] = adjusted

    logger.debug("Angle correction sweep | vertices=%d | moved=%d", n, moved)
    return result


def adjust_vertex(
    prev: Coordinate,
    curr: Coordinate,
    nxt: Coordinate,
    target: float,
    *,
    grid_size: float,
    preserve_shape: bool = False,
) -> Coordinate:
    """Move *curr* toward an angle of *target* degrees.

    Small deviations nudge the vertex along the sum of the vectors to its
    neighbours and re-snap it; larger ones pull it onto its nearest grid
    line.
    """
    deviation = target - vertex_angle(prev, curr, nxt)
    if abs(deviation) < SMALL_DEVIATION_DEG:
        factor = PRESERVE_SHAPE_NUDGE_FACTOR if preserve_shape else NUDGE_FACTOR
        adj_x = ((prev[0] - curr[0]) + (nxt[0] - curr[0])) * factor
        adj_y = ((prev[1] - curr[1]) + (nxt[1] - curr[1])) * factor
        return snap_point((curr[0] + adj_x, curr[1] + adj_y), grid_size)

    return align_to_grid_line(curr, grid_size)


def align_to_grid_line(vertex: Coordinate, grid_size: float) -> Coordinate:
    """Snap whichever single axis of *vertex* needs the smaller move."""
    x, y = vertex
    snapped_x = snap_value(x, grid_size)
    snapped_y = snap_value(y, grid_size)
    if abs(x - snapped_x) < abs(y - snapped_y):
        return (snapped_x, y)
    return (x, snapped_y)


# ---------------------------------------------------------------------------
# Edge forcing
# ---------------------------------------------------------------------------


def force_orthogonal_edges(vertices: list[Coordinate], grid_size: float) -> list[Coordinate]:
    """Single forward pass making every edge but the closing one axis-aligned.

    For a diagonal edge ``i → i+1`` (both deltas above a tenth of the
    grid) the end vertex takes the start's y when the edge is wider than
    tall, otherwise the start's x.
    """
    result = list(vertices)
    epsilon = grid_size * AXIS_ALIGNED_GRID_FRACTION

    forced = 0
    for i in range(len(result) - 1):
        x1, y1 = result[i]
        x2, y2 = result[i + 1]
        dx = abs(x2 - x1)
        dy = abs(y2 - y1)
        if dx > epsilon and dy > epsilon:
            result[i + 1] = (x2, y1) if dx > dy else (x1, y2)
            forced += 1

    if forced:
        logger.debug("Edges forced axis-aligned | edges=%d", forced)
    return result


def square_closing(vertices: list[Coordinate], grid_size: float) -> list[Coordinate]:
    """Replace a diagonal closing edge with a horizontal and a vertical leg.

    The elbow leaves the last vertex perpendicular to the edge that
    enters it, keeping horizontal and vertical edges alternating.
    """
    if len(vertices) < 3:
        return list(vertices)

    epsilon = grid_size * AXIS_ALIGNED_GRID_FRACTION
    before, last, first = vertices[-2], vertices[-1], vertices[0]
    if is_axis_aligned(last, first, epsilon):
        return list(vertices)

    entering_horizontal = abs(last[1] - before[1]) <= epsilon
    elbow = (last[0], first[1]) if entering_horizontal else (first[0], last[1])
    logger.debug("Closing edge squared | elbow=(%g, %g)", *elbow)
    return [*vertices, elbow]
