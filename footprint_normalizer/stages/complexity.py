"""Complexity fallback stage: replace unrenderable outlines with a box.

A ring is too complex when it still has many vertices, or when its
isoperimetric ratio (perimeter² / area) shows a jagged or sliver-like
outline. Such rings are replaced by their axis-aligned bounding
rectangle, which is already orthogonal and has four corners, so no
earlier stage needs to run again.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from footprint_normalizer.core.constants import (
    DEFAULT_MAX_COMPLEX_VERTICES,
    DEFAULT_MAX_ISOPERIMETRIC_RATIO,
)
from footprint_normalizer.geometry.rings import (
    bounding_rectangle,
    distinct_vertex_count,
    ring_area,
    ring_perimeter,
)

if TYPE_CHECKING:
    from footprint_normalizer.geometry.rings import Ring

logger = logging.getLogger("footprint_normalizer.stages.complexity")


def isoperimetric_ratio(ring: Ring) -> float:
    """Perimeter² / area of *ring*; ``inf`` for a zero-area ring."""
    area = ring_area(ring)
    if area == 0:
        return float("inf")
    perimeter = ring_perimeter(ring)
    return perimeter * perimeter / area


def is_complex(
    ring: Ring,
    *,
    max_vertices: int = DEFAULT_MAX_COMPLEX_VERTICES,
    max_ratio: float = DEFAULT_MAX_ISOPERIMETRIC_RATIO,
) -> bool:
    """Whether *ring* should fall back to its bounding rectangle."""
    if distinct_vertex_count(ring) > max_vertices:
        return True
    return isoperimetric_ratio(ring) > max_ratio


def simplify_complex(
    ring: Ring,
    *,
    max_vertices: int = DEFAULT_MAX_COMPLEX_VERTICES,
    max_ratio: float = DEFAULT_MAX_ISOPERIMETRIC_RATIO,
) -> Ring:
    """Return the bounding rectangle of *ring* if it is too complex.

    Otherwise a copy of *ring* is returned.
    """
    if not ring or not is_complex(ring, max_vertices=max_vertices, max_ratio=max_ratio):
        return list(ring)

    logger.debug(
        "Complex ring replaced by bounding box | vertices=%d",
        distinct_vertex_count(ring),
    )
    return bounding_rectangle(ring)
