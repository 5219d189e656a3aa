"""Contract drift detection tests.

These tests verify that serialised keys match the canonical payload
contracts defined in ``footprint_normalizer.models.contracts``. If a key
is added to or removed from a ``to_dict()`` without updating the contract
TypedDict, these tests fail before the map client sees the change.
"""

from __future__ import annotations

import unittest
from typing import get_type_hints

from footprint_normalizer.core.config import ProcessingOptions
from footprint_normalizer.models.contracts import (
    BatchMetadata,
    FeatureCollectionPayload,
    FeaturePayload,
    NormalizeRequest,
    StatisticsPayload,
    StatsRequest,
)
from footprint_normalizer.models.feature import FootprintFeature
from footprint_normalizer.orchestrators.normalize_pipeline import NormalizeResult
from footprint_normalizer.orchestrators.statistics import FeatureStatistics


def _contract_keys(td: type) -> set[str]:
    """Extract the declared field names from a TypedDict class."""
    return set(get_type_hints(td).keys())


def _sample_feature() -> FootprintFeature:
    return FootprintFeature.from_dict(
        {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
            },
            "properties": {"building": "yes"},
        }
    )


# ---------------------------------------------------------------------------
# FootprintFeature ↔ FeaturePayload
# ---------------------------------------------------------------------------


class TestFeatureContract(unittest.TestCase):
    """FootprintFeature.to_dict() keys match FeaturePayload."""

    def test_keys_match(self) -> None:
        self.assertEqual(set(_sample_feature().to_dict()), _contract_keys(FeaturePayload))

    def test_type_is_feature(self) -> None:
        self.assertEqual(_sample_feature().to_dict()["type"], "Feature")


# ---------------------------------------------------------------------------
# NormalizeResult ↔ FeatureCollectionPayload
# ---------------------------------------------------------------------------


class TestFeatureCollectionContract(unittest.TestCase):
    """NormalizeResult.to_feature_collection() keys match the contracts."""

    def setUp(self) -> None:
        self.payload = NormalizeResult(
            features=[_sample_feature().to_dict()],
            original_count=2,
            options=ProcessingOptions(),
            dropped_count=1,
        ).to_feature_collection()

    def test_top_level_keys(self) -> None:
        self.assertEqual(set(self.payload), _contract_keys(FeatureCollectionPayload))

    def test_metadata_keys(self) -> None:
        self.assertEqual(set(self.payload["metadata"]), _contract_keys(BatchMetadata))

    def test_counts(self) -> None:
        self.assertEqual(self.payload["metadata"]["originalCount"], 2)
        self.assertEqual(self.payload["metadata"]["processedCount"], 1)

    def test_options_are_wire_keys(self) -> None:
        self.assertEqual(self.payload["metadata"]["options"], ProcessingOptions().to_dict())


# ---------------------------------------------------------------------------
# FeatureStatistics ↔ StatisticsPayload
# ---------------------------------------------------------------------------


class TestStatisticsContract(unittest.TestCase):
    """FeatureStatistics.to_dict() keys match StatisticsPayload."""

    def test_keys_match(self) -> None:
        self.assertEqual(set(FeatureStatistics().to_dict()), _contract_keys(StatisticsPayload))


# ---------------------------------------------------------------------------
# Request contracts
# ---------------------------------------------------------------------------


class TestRequestContracts(unittest.TestCase):
    """Request bodies carry the members the handlers read."""

    def test_normalize_request_keys(self) -> None:
        self.assertEqual(_contract_keys(NormalizeRequest), {"features", "options"})

    def test_normalize_request_members_optional(self) -> None:
        self.assertEqual(NormalizeRequest.__required_keys__, frozenset())

    def test_stats_request_keys(self) -> None:
        self.assertEqual(_contract_keys(StatsRequest), {"features"})
