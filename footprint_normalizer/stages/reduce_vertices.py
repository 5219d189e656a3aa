"""Vertex reduction stage: uniform decimation down to a vertex budget."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from footprint_normalizer.geometry.rings import close_ring, open_ring

if TYPE_CHECKING:
    from footprint_normalizer.geometry.rings import Ring

logger = logging.getLogger("footprint_normalizer.stages.reduce_vertices")


def reduce_vertices(ring: Ring, max_vertices: int) -> Ring:
    """Keep every ``ceil(n / max_vertices)``-th vertex of *ring*.

    ``n`` counts vertices without the closing point. Rings already within
    budget are returned as a copy. The result is re-closed, so it holds
    at most ``max_vertices + 1`` points. Decimation is uniform, not
    curvature-aware.
    """
    vertices = open_ring(ring)
    if len(vertices) <= max_vertices:
        return list(ring)

    stride = math.ceil(len(vertices) / max_vertices)
    reduced = close_ring(vertices[::stride])
    logger.debug(
        "Vertices decimated | vertices=%d -> %d | stride=%d",
        len(vertices),
        len(reduced) - 1,
        stride,
    )
    return reduced
