"""Canonical payload contracts for the request/response boundary.

The map client talks to the pipeline in JSON, so every shape crossing the
boundary is defined here as a ``TypedDict``. This module is the single
source of truth for wire key names; drift-detection tests compare these
contracts against what the code actually emits.

Design notes:
- Wire keys are camelCase because the consuming client is JavaScript.
- Request contracts use ``total=False`` for optional members.
"""

from __future__ import annotations

from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# GeoJSON features
# ---------------------------------------------------------------------------


class FeaturePayload(TypedDict):
    """A GeoJSON ``Feature`` as received from or returned to the client."""

    type: str
    geometry: dict[str, Any]
    properties: dict[str, Any]


# ---------------------------------------------------------------------------
# normalize  (input = NormalizeRequest, output = FeatureCollectionPayload)
# ---------------------------------------------------------------------------


class NormalizeRequest(TypedDict, total=False):
    """Body of a normalization request."""

    features: list[FeaturePayload]
    options: dict[str, Any]


class BatchMetadata(TypedDict):
    """Batch-level summary returned alongside normalized features."""

    originalCount: int
    processedCount: int
    options: dict[str, object]


class FeatureCollectionPayload(TypedDict):
    """Normalization response: area-filtered features are omitted."""

    type: str
    features: list[dict[str, Any]]
    metadata: BatchMetadata


# ---------------------------------------------------------------------------
# statistics  (input = StatsRequest, output = StatisticsPayload)
# ---------------------------------------------------------------------------


class StatsRequest(TypedDict):
    """Body of a statistics request."""

    features: list[FeaturePayload]


class StatisticsPayload(TypedDict):
    """Descriptive statistics over a feature list."""

    totalFeatures: int
    polygons: int
    lines: int
    points: int
    geometryTypes: dict[str, int]
    buildingTypes: dict[str, int]
    totalArea: float
    totalAreaM2: float
    totalVertices: int
    averageVertices: float
