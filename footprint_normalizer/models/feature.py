"""Data model for a building-footprint feature.

A ``FootprintFeature`` is the parsed form of a GeoJSON ``Feature`` whose
geometry is a ``Polygon``: the exterior ring as ``(x, y)`` tuples plus the
properties and any other top-level members, which are carried through
untouched. It is the input of every normalization stage and is turned
back into a GeoJSON dict by ``to_dict()``.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from footprint_normalizer.core.constants import POLYGON_TYPE
from footprint_normalizer.core.exceptions import ValidationError
from footprint_normalizer.geometry.rings import Coordinate, Ring, close_ring

logger = logging.getLogger("footprint_normalizer.models.feature")

# Members rebuilt by to_dict() rather than copied from the source feature.
_OWN_KEYS = frozenset({"type", "geometry", "properties"})


class GeometryValidationError(ValidationError):
    """Raised when a feature's geometry cannot be read as a polygon."""

    default_stage = "normalize"
    default_code = "GEOMETRY_INVALID"


def geometry_type_of(data: object) -> str | None:
    """Return the GeoJSON geometry type of a raw feature, or ``None``."""
    if not isinstance(data, dict):
        return None
    geometry = data.get("geometry")
    if not isinstance(geometry, dict):
        return None
    geometry_type = geometry.get("type")
    return geometry_type if isinstance(geometry_type, str) else None


def coords_to_tuples(raw_coords: object) -> Ring:
    """Convert a GeoJSON position array to ``(x, y)`` tuples.

    Drops altitude (third element) if present.

    Raises:
        GeometryValidationError: If any position is malformed or not finite.
    """
    if not isinstance(raw_coords, list | tuple):
        msg = f"Ring must be a list of positions, got {type(raw_coords).__name__}"
        raise GeometryValidationError(msg)
    coords: Ring = []
    for idx, c in enumerate(raw_coords):
        if not isinstance(c, list | tuple):
            msg = f"Malformed position at index {idx}: expected list/tuple, got {type(c).__name__}"
            raise GeometryValidationError(msg)
        if len(c) < 2:
            msg = f"Malformed position at index {idx}: expected at least 2 elements, got {len(c)}"
            raise GeometryValidationError(msg)
        if isinstance(c[0], bool) or isinstance(c[1], bool):
            msg = f"Malformed position at index {idx}: boolean is not a coordinate"
            raise GeometryValidationError(msg)
        try:
            x = float(c[0])
            y = float(c[1])
        except (TypeError, ValueError) as exc:
            msg = (
                f"Malformed position at index {idx}: cannot convert to float "
                f"(x={c[0]!r}, y={c[1]!r})"
            )
            raise GeometryValidationError(msg) from exc
        if not (math.isfinite(x) and math.isfinite(y)):
            msg = f"Non-finite position at index {idx}: ({x}, {y})"
            raise GeometryValidationError(msg)
        coords.append((x, y))
    return coords


@dataclass(frozen=True, slots=True)
class FootprintFeature:
    """A polygon feature ready for normalization.

    Attributes:
        exterior: Closed exterior ring as ``(x, y)`` tuples. Empty when the
            source polygon had no positions.
        holes: Interior rings, if the source polygon had any.
        properties: Copy of the source feature's properties.
        extra: Other top-level members of the source feature (``id``,
            ``bbox``, foreign members), copied verbatim.
    """

    exterior: Ring = field(default_factory=list)
    holes: list[Ring] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FootprintFeature:
        """Parse a GeoJSON ``Feature`` dict with ``Polygon`` geometry.

        Unclosed rings are closed. The source dict is not modified and
        shares no mutable state with the result.

        Raises:
            GeometryValidationError: If the geometry is not a polygon or
                its coordinates are malformed.
        """
        if geometry_type_of(data) != POLYGON_TYPE:
            msg = f"Expected {POLYGON_TYPE} geometry, got {geometry_type_of(data)!r}"
            raise GeometryValidationError(msg)

        rings_raw = data["geometry"].get("coordinates", [])
        if not isinstance(rings_raw, list | tuple):
            msg = f"Polygon coordinates must be a list, got {type(rings_raw).__name__}"
            raise GeometryValidationError(msg)

        rings = [coords_to_tuples(ring) for ring in rings_raw]
        exterior = rings[0] if rings else []
        if exterior and exterior[0] != exterior[-1]:
            logger.warning("Auto-closing unclosed exterior ring | points=%d", len(exterior))
            exterior = close_ring(exterior)

        properties_raw = data.get("properties") or {}
        if not isinstance(properties_raw, dict):
            msg = f"properties must be an object, got {type(properties_raw).__name__}"
            raise GeometryValidationError(msg)

        return cls(
            exterior=exterior,
            holes=[close_ring(ring) for ring in rings[1:]],
            properties=copy.deepcopy(properties_raw),
            extra={k: copy.deepcopy(v) for k, v in data.items() if k not in _OWN_KEYS},
        )

    def to_dict(
        self,
        *,
        exterior: list[Coordinate] | None = None,
        properties: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Serialise to a GeoJSON ``Feature`` dict.

        Args:
            exterior: Replacement exterior ring; holes are dropped when
                given, since a normalized footprint is solid.
            properties: Replacement properties mapping.
        """
        if exterior is None:
            rings = [self.exterior, *self.holes]
        else:
            rings = [exterior]
        return {
            "type": "Feature",
            **copy.deepcopy(self.extra),
            "geometry": {
                "type": POLYGON_TYPE,
                "coordinates": [[[x, y] for x, y in ring] for ring in rings],
            },
            "properties": copy.deepcopy(self.properties if properties is None else properties),
        }

    @property
    def vertex_count(self) -> int:
        """Number of points in the exterior ring, closing point included."""
        return len(self.exterior)

    @property
    def has_holes(self) -> bool:
        """Whether this feature has interior (hole) rings."""
        return len(self.holes) > 0
