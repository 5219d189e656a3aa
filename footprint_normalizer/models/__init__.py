"""Data models and payload contracts.

- FootprintFeature: Parsed polygon feature with pass-through properties
- contracts: TypedDicts for request and response bodies
"""

from footprint_normalizer.models.feature import (
    FootprintFeature,
    GeometryValidationError,
    coords_to_tuples,
    geometry_type_of,
)

__all__ = [
    "FootprintFeature",
    "GeometryValidationError",
    "coords_to_tuples",
    "geometry_type_of",
]
