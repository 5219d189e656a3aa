"""Tests for feature-list statistics."""

from __future__ import annotations

import copy
import json
import logging

import pytest

from footprint_normalizer.core.exceptions import ContractError
from footprint_normalizer.models.contracts import StatisticsPayload
from footprint_normalizer.orchestrators.statistics import (
    FeatureStatistics,
    compute_statistics,
    geodesic_area_m2,
    handle_stats_request,
)
from tests.conftest import polygon_feature

UNIT_DEGREE_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)]


class TestComputeStatistics:
    """Counts, categories and vertex totals."""

    def test_mixed_batch(
        self,
        rectangle_feature: dict,
        tiny_feature: dict,
        linestring_feature: dict,
        point_feature: dict,
    ) -> None:
        stats = compute_statistics(
            [rectangle_feature, tiny_feature, linestring_feature, point_feature]
        )

        assert stats.total_features == 4
        assert stats.polygons == 2
        assert stats.lines == 1
        assert stats.points == 1
        assert stats.building_types == {"house": 1, "shed": 1}
        # 5 + 4 polygon points, 3 line points
        assert stats.total_vertices == 12
        assert stats.average_vertices == pytest.approx(3.0)

    def test_planar_area_summed(self, rectangle_feature: dict, tiny_feature: dict) -> None:
        stats = compute_statistics([rectangle_feature, tiny_feature])
        assert stats.total_area == pytest.approx(2e-6 + 1e-9, rel=1e-6)

    def test_geodesic_area_summed(self, rectangle_feature: dict) -> None:
        stats = compute_statistics([rectangle_feature])
        # 0.002° x 0.001° at 46.6°N is roughly 153 m x 111 m
        assert 15_000 < stats.total_area_m2 < 19_000

    def test_other_geometry_types_counted(self) -> None:
        multi = {
            "type": "Feature",
            "geometry": {"type": "MultiPolygon", "coordinates": []},
            "properties": {"building": "yes"},
        }
        stats = compute_statistics([multi])
        assert stats.geometry_types == {"MultiPolygon": 1}
        assert stats.polygons == 0
        assert stats.building_types == {"yes": 1}

    def test_features_without_geometry_count_only_in_total(self) -> None:
        stats = compute_statistics([{"type": "Feature", "geometry": None, "properties": {}}, "junk"])
        assert stats.total_features == 2
        assert stats.geometry_types == {}
        assert stats.total_vertices == 0

    def test_falsy_building_not_counted(self) -> None:
        feature = polygon_feature([[0, 0], [1, 0], [1, 1], [0, 0]], building="")
        assert compute_statistics([feature]).building_types == {}

    def test_empty_list(self) -> None:
        stats = compute_statistics([])
        assert stats.total_features == 0
        assert stats.average_vertices == 0.0
        assert stats.total_area == 0.0

    def test_input_not_mutated(self, rectangle_feature: dict, linestring_feature: dict) -> None:
        batch = [rectangle_feature, linestring_feature]
        snapshot = copy.deepcopy(batch)
        compute_statistics(batch)
        assert batch == snapshot

    @pytest.mark.parametrize("bad", [None, {"features": []}, "features"])
    def test_non_list_rejected(self, bad: object) -> None:
        with pytest.raises(ContractError) as exc_info:
            compute_statistics(bad)  # type: ignore[arg-type]
        assert exc_info.value.stage == "statistics"

    def test_malformed_polygon_skipped_with_warning(
        self, rectangle_feature: dict, caplog: pytest.LogCaptureFixture
    ) -> None:
        bad = polygon_feature([[0, 0], [None, 1], [1, 1], [0, 0]])

        with caplog.at_level(logging.WARNING):
            stats = compute_statistics([bad, rectangle_feature])

        assert stats.polygons == 2
        assert stats.total_vertices == 5
        assert "Skipping malformed polygon" in caplog.text


class TestGeodesicArea:
    """Ellipsoidal area via pyproj."""

    def test_one_degree_square_at_equator(self) -> None:
        assert 1.2e10 < geodesic_area_m2(UNIT_DEGREE_SQUARE) < 1.25e10

    def test_orientation_does_not_matter(self) -> None:
        clockwise = list(reversed(UNIT_DEGREE_SQUARE))
        assert geodesic_area_m2(clockwise) == pytest.approx(geodesic_area_m2(UNIT_DEGREE_SQUARE))

    def test_projected_coordinates_have_no_geodesic_area(self) -> None:
        utm = [(500000.0, 5160000.0), (500100.0, 5160000.0), (500100.0, 5160100.0), (500000.0, 5160000.0)]
        assert geodesic_area_m2(utm) == 0.0

    def test_projected_polygon_still_counts_planar_area(self) -> None:
        feature = polygon_feature([[1000, 1000], [1100, 1000], [1100, 1100], [1000, 1100], [1000, 1000]])
        stats = compute_statistics([feature])
        assert stats.total_area == pytest.approx(10_000.0)
        assert stats.total_area_m2 == 0.0

    def test_degenerate_ring(self) -> None:
        assert geodesic_area_m2([(0.0, 0.0), (1.0, 1.0), (0.0, 0.0)]) == 0.0


class TestStatisticsPayload:
    """Wire shape of the statistics response."""

    def test_keys_match_contract(self, rectangle_feature: dict) -> None:
        payload = compute_statistics([rectangle_feature]).to_dict()
        assert set(payload) == set(StatisticsPayload.__annotations__)

    def test_model_accepts_wire_keys(self) -> None:
        stats = FeatureStatistics.model_validate({"totalFeatures": 2, "totalVertices": 7})
        assert stats.total_vertices == 7
        assert stats.average_vertices == pytest.approx(3.5)

    def test_handle_stats_request_from_json(
        self, rectangle_feature: dict, point_feature: dict
    ) -> None:
        body = json.dumps({"features": [rectangle_feature, point_feature]})
        payload = handle_stats_request(body)

        assert payload["totalFeatures"] == 2
        assert payload["polygons"] == 1
        assert payload["points"] == 1
        assert payload["buildingTypes"] == {"house": 1}
        assert payload["averageVertices"] == pytest.approx(2.5)

    def test_handle_stats_request_rejects_missing_features(self) -> None:
        with pytest.raises(ContractError):
            handle_stats_request(b'{"items": []}')

    def test_rejection_logged_with_error_body(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING), pytest.raises(ContractError):
            handle_stats_request({"features": "none"})

        assert "Statistics request rejected" in caplog.text
        assert "'code': 'INVALID_FEATURES'" in caplog.text
        assert "'stage': 'ingress'" in caplog.text
