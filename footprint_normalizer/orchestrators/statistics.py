"""Descriptive statistics over a feature list.

Companion to the normalization pipeline, consumed by the same map
client: counts by geometry type, counts per ``building`` category, total
area and average vertex count. Nothing here modifies the features.

Areas are reported twice: planar (``total_area``, squared coordinate
units, the unit the pipeline filters on) and geodesic
(``total_area_m2``, square metres on the WGS 84 ellipsoid) for polygons
whose coordinates are valid longitude/latitude.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from pydantic import BaseModel, Field

from footprint_normalizer.core.constants import LINESTRING_TYPE, POINT_TYPE, POLYGON_TYPE
from footprint_normalizer.core.exceptions import ContractError, PipelineError
from footprint_normalizer.core.ingress import deserialize_request, require_features
from footprint_normalizer.geometry.rings import Ring, is_degenerate, ring_area
from footprint_normalizer.models.contracts import StatisticsPayload, StatsRequest
from footprint_normalizer.models.feature import GeometryValidationError, coords_to_tuples

logger = logging.getLogger("footprint_normalizer.orchestrators.statistics")

# WGS 84 coordinate bounds
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

BUILDING_PROPERTY = "building"


class FeatureStatistics(BaseModel):
    """Aggregate statistics for a feature list.

    Field aliases are the camelCase keys the map client reads.

    Attributes:
        total_features: Number of features in the list.
        polygons: Features with ``Polygon`` geometry.
        lines: Features with ``LineString`` geometry.
        points: Features with ``Point`` geometry.
        geometry_types: Feature count per geometry type, all types included.
        building_types: Feature count per ``properties.building`` value.
        total_area: Sum of planar polygon areas, squared coordinate units.
        total_area_m2: Sum of geodesic polygon areas, square metres.
        total_vertices: Polygon exterior points (closing point included)
            plus LineString points.
    """

    total_features: int = Field(default=0, alias="totalFeatures")
    polygons: int = 0
    lines: int = 0
    points: int = 0
    geometry_types: dict[str, int] = Field(default_factory=dict, alias="geometryTypes")
    building_types: dict[str, int] = Field(default_factory=dict, alias="buildingTypes")
    total_area: float = Field(default=0.0, alias="totalArea")
    total_area_m2: float = Field(default=0.0, alias="totalAreaM2")
    total_vertices: int = Field(default=0, alias="totalVertices")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def average_vertices(self) -> float:
        """Mean vertex count over all features; ``0`` for an empty list."""
        if self.total_features == 0:
            return 0.0
        return self.total_vertices / self.total_features

    def to_dict(self) -> StatisticsPayload:
        """Serialise to the camelCase wire shape."""
        payload = self.model_dump(by_alias=True)
        payload["averageVertices"] = self.average_vertices
        return payload  # type: ignore[return-value]


def compute_statistics(features: list[Any]) -> FeatureStatistics:
    """Aggregate counts, areas and vertex totals over *features*.

    Features without a geometry object count toward ``total_features``
    only. Polygons with malformed coordinates are counted but contribute
    no area or vertices.

    Raises:
        ContractError: If *features* is not a list.
    """
    if not isinstance(features, list):
        msg = "Invalid features array provided"
        raise ContractError(msg, stage="statistics", code="INVALID_FEATURES")

    geometry_types: Counter[str] = Counter()
    building_types: Counter[str] = Counter()
    total_area = 0.0
    total_area_m2 = 0.0
    total_vertices = 0

    for index, feature in enumerate(features):
        if not isinstance(feature, dict) or not isinstance(feature.get("geometry"), dict):
            continue
        geometry = feature["geometry"]
        geometry_type = str(geometry.get("type", ""))
        geometry_types[geometry_type] += 1

        if geometry_type == POLYGON_TYPE:
            rings = geometry.get("coordinates") or []
            try:
                exterior = coords_to_tuples(rings[0]) if rings else []
            except (GeometryValidationError, TypeError, KeyError) as exc:
                logger.warning("Skipping malformed polygon | index=%d | error=%s", index, exc)
            else:
                total_area += ring_area(exterior)
                total_area_m2 += geodesic_area_m2(exterior)
                total_vertices += len(exterior)
        elif geometry_type == LINESTRING_TYPE:
            coordinates = geometry.get("coordinates")
            if isinstance(coordinates, list):
                total_vertices += len(coordinates)

        properties = feature.get("properties")
        if isinstance(properties, dict) and properties.get(BUILDING_PROPERTY):
            building_types[str(properties[BUILDING_PROPERTY])] += 1

    stats = FeatureStatistics(
        total_features=len(features),
        polygons=geometry_types[POLYGON_TYPE],
        lines=geometry_types[LINESTRING_TYPE],
        points=geometry_types[POINT_TYPE],
        geometry_types=dict(geometry_types),
        building_types=dict(building_types),
        total_area=total_area,
        total_area_m2=total_area_m2,
        total_vertices=total_vertices,
    )
    logger.info(
        "Statistics computed | features=%d | polygons=%d | area_m2=%.1f",
        stats.total_features,
        stats.polygons,
        stats.total_area_m2,
    )
    return stats


def geodesic_area_m2(ring: Ring) -> float:
    """Geodesic area of a lon/lat *ring* in square metres.

    Uses ``pyproj.Geod`` on the WGS 84 ellipsoid. Returns ``0`` for
    degenerate rings and for rings with coordinates outside WGS 84
    bounds (projected input).
    """
    if is_degenerate(ring):
        return 0.0
    if not all(
        MIN_LONGITUDE <= lon <= MAX_LONGITUDE and MIN_LATITUDE <= lat <= MAX_LATITUDE
        for lon, lat in ring
    ):
        logger.debug("Ring outside WGS 84 bounds, no geodesic area | points=%d", len(ring))
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    area_m2, _perimeter = geod.polygon_area_perimeter(
        [c[0] for c in ring],
        [c[1] for c in ring],
    )
    return abs(area_m2)


def handle_stats_request(raw: str | bytes | StatsRequest) -> StatisticsPayload:
    """Decode a ``{"features": [...]}`` body and return its statistics.

    Raises:
        ContractError: If the body or its ``features`` array is malformed.
    """
    try:
        features = require_features(deserialize_request(raw))
    except PipelineError as exc:
        logger.warning("Statistics request rejected | error=%s", exc.to_error_dict())
        raise
    return compute_statistics(features).to_dict()
