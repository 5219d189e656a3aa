"""Unit tests for the vertex reduction (decimation) stage."""

from __future__ import annotations

import pytest

from footprint_normalizer.stages.reduce_vertices import reduce_vertices
from tests.conftest import regular_polygon


def _ring(vertices: int) -> list[tuple[float, float]]:
    return [(float(x), float(y)) for x, y in regular_polygon(vertices)]


class TestReduceVertices:
    """Uniform stride decimation."""

    def test_twenty_vertices_to_ten(self) -> None:
        ring = _ring(20)
        result = reduce_vertices(ring, 10)
        assert len(result) == 11
        assert result[0] == result[-1]

    def test_keeps_every_stride_th_vertex(self) -> None:
        ring = _ring(20)
        result = reduce_vertices(ring, 10)
        assert result[:-1] == ring[0:20:2]

    def test_within_budget_is_identity(self) -> None:
        ring = _ring(8)
        result = reduce_vertices(ring, 8)
        assert result == ring
        assert result is not ring

    def test_closing_point_not_counted(self) -> None:
        """Nine points with closure are eight vertices: within a budget of 8."""
        ring = _ring(8)
        assert len(ring) == 9
        assert reduce_vertices(ring, 8) == ring

    def test_input_not_modified(self) -> None:
        ring = _ring(30)
        snapshot = list(ring)
        reduce_vertices(ring, 7)
        assert ring == snapshot


class TestDecimationBound:
    """Output never exceeds ``max_vertices`` plus the closing point."""

    @pytest.mark.parametrize("vertices", [4, 9, 16, 21, 37, 64, 101])
    @pytest.mark.parametrize("max_vertices", [3, 5, 7, 10, 20])
    def test_bound_and_closure(self, vertices: int, max_vertices: int) -> None:
        result = reduce_vertices(_ring(vertices), max_vertices)
        assert len(result) <= max_vertices + 1
        assert result[0] == result[-1]
