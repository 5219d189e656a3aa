"""Simplification stage: Douglas-Peucker vertex thinning.

Removes interior vertices that lie within ``tolerance`` of the segment
joining their retained neighbours. The first and last points of the ring
are always kept, so a closed ring stays closed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from footprint_normalizer.geometry.rings import is_degenerate

if TYPE_CHECKING:
    from footprint_normalizer.geometry.rings import Ring

logger = logging.getLogger("footprint_normalizer.stages.simplify")


def simplify_ring(ring: Ring, tolerance: float) -> Ring:
    """Douglas-Peucker simplification of a closed ring.

    The ring is simplified as a line, without topology preservation, so
    the shared start/end point is the fixed anchor.

    Args:
        ring: Closed ring of ``(x, y)`` tuples.
        tolerance: Maximum perpendicular deviation, in coordinate units.
            ``0`` returns the ring unchanged.

    Returns:
        A new ring. If simplification would leave fewer than three
        distinct vertices, a copy of the input ring is returned instead.
    """
    if tolerance <= 0 or len(ring) <= 2:
        return list(ring)

    from shapely.geometry import LineString

    line = LineString(ring).simplify(tolerance, preserve_topology=False)
    simplified = [(float(x), float(y)) for x, y in line.coords]
    if is_degenerate(simplified):
        logger.debug(
            "Simplification collapsed ring, keeping original | points=%d | tolerance=%g",
            len(ring),
            tolerance,
        )
        return list(ring)

    logger.debug("Ring simplified | points=%d -> %d", len(ring), len(simplified))
    return simplified
