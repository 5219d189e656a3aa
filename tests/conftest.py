"""Shared pytest fixtures for the footprint normalizer test suite."""

from __future__ import annotations

import math
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Reference rings
# ---------------------------------------------------------------------------

# Sharp triangle: the classic worst case for right-angle snapping.
SHARP_TRIANGLE = [[0, 0], [0.001, 0.001], [0.002, 0], [0, 0]]

IRREGULAR_PENTAGON = [
    [0, 0],
    [0.002, 0.001],
    [0.001, 0.002],
    [0.0015, 0.0015],
    [0, 0.002],
    [0, 0],
]

COMPLEX_BUILDING = [
    [0, 0],
    [0.003, 0.0005],
    [0.0025, 0.0015],
    [0.001, 0.002],
    [0.0005, 0.001],
    [0, 0],
]

# Plain rectangular building near Yakima, WA (lon/lat)
RECTANGLE = [
    [-120.5210, 46.6040],
    [-120.5210, 46.6050],
    [-120.5190, 46.6050],
    [-120.5190, 46.6040],
    [-120.5210, 46.6040],
]


def regular_polygon(vertices: int, radius: float = 0.01) -> list[list[float]]:
    """Closed ring of a regular polygon centred on the origin."""
    ring = [
        [radius * math.cos(2 * math.pi * i / vertices), radius * math.sin(2 * math.pi * i / vertices)]
        for i in range(vertices)
    ]
    return [*ring, ring[0]]


def polygon_feature(ring: list[list[float]], **properties: Any) -> dict[str, Any]:
    """GeoJSON polygon feature around *ring*."""
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring]},
        "properties": dict(properties),
    }


# ---------------------------------------------------------------------------
# Feature fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sharp_triangle_feature() -> dict[str, Any]:
    """Polygon feature with a 45°/90°/45° triangle footprint."""
    return polygon_feature([list(p) for p in SHARP_TRIANGLE], name="Sharp Triangle")


@pytest.fixture()
def rectangle_feature() -> dict[str, Any]:
    """Axis-aligned rectangular house with OSM-style properties."""
    return polygon_feature([list(p) for p in RECTANGLE], building="house", name="Farmhouse")


@pytest.fixture()
def tiny_feature() -> dict[str, Any]:
    """Triangle with an area of 1e-9 square degrees."""
    return polygon_feature([[0, 0], [0.0001, 0], [0, 0.00002], [0, 0]], building="shed")


@pytest.fixture()
def twenty_vertex_feature() -> dict[str, Any]:
    """Round building outline with 20 vertices."""
    return polygon_feature(regular_polygon(20), building="silo")


@pytest.fixture()
def linestring_feature() -> dict[str, Any]:
    """A road segment, which the pipeline must pass through untouched."""
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": [[0, 0], [0.001, 0.0005], [0.002, 0]]},
        "properties": {"highway": "residential"},
    }


@pytest.fixture()
def point_feature() -> dict[str, Any]:
    """A point of interest."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [0.0005, 0.0005]},
        "properties": {"amenity": "bench"},
    }
