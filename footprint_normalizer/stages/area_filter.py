"""Area filter stage: drop footprints too small to render."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from footprint_normalizer.geometry.rings import is_degenerate, ring_area

if TYPE_CHECKING:
    from footprint_normalizer.geometry.rings import Ring

logger = logging.getLogger("footprint_normalizer.stages.area_filter")


class AreaCheck(NamedTuple):
    """Outcome of the area filter for one ring."""

    area: float
    keep: bool


def check_area(ring: Ring, min_area: float) -> AreaCheck:
    """Measure the planar area of *ring* and compare it to *min_area*.

    Rings strictly below the threshold are rejected. Degenerate rings
    (fewer than three distinct vertices) are always rejected, whatever
    the threshold.
    """
    if is_degenerate(ring):
        logger.debug("Degenerate ring rejected | points=%d", len(ring))
        return AreaCheck(0.0, False)

    area = ring_area(ring)
    if area < min_area:
        logger.debug("Ring below minimum area | area=%g | min_area=%g", area, min_area)
        return AreaCheck(area, False)
    return AreaCheck(area, True)
