"""Feature orchestrator for the footprint normalization pipeline.

Runs every polygon feature of a batch through the five stages in fixed
order:

1. Simplify: Douglas-Peucker thinning (``stages.simplify``)
2. Area filter: drop footprints below ``min_area`` (``stages.area_filter``)
3. Orthogonalize: grid snap, angle correction, edge forcing
   (``stages.orthogonalize``)
4. Reduce vertices: uniform decimation (``stages.reduce_vertices``)
5. Complexity fallback: bounding box for irregular outlines
   (``stages.complexity``)

Features are independent: one feature's failure is logged and the
original feature is returned in its place, so a single bad polygon never
aborts the batch. Only a malformed batch (no ``features`` list) fails the
whole call.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any

from footprint_normalizer.core.config import ProcessingOptions
from footprint_normalizer.core.constants import (
    FEATURE_COLLECTION_TYPE,
    ORIGINAL_AREA_PROPERTY,
    POLYGON_TYPE,
    PROCESSED_AREA_PROPERTY,
    PROCESSED_PROPERTY,
)
from footprint_normalizer.core.exceptions import ContractError, PipelineError
from footprint_normalizer.core.ingress import (
    deserialize_request,
    request_options,
    require_features,
)
from footprint_normalizer.geometry.rings import is_degenerate, ring_area
from footprint_normalizer.models.contracts import FeatureCollectionPayload, NormalizeRequest
from footprint_normalizer.models.feature import FootprintFeature, geometry_type_of
from footprint_normalizer.stages.area_filter import check_area
from footprint_normalizer.stages.complexity import simplify_complex
from footprint_normalizer.stages.orthogonalize import orthogonalize_ring
from footprint_normalizer.stages.reduce_vertices import reduce_vertices
from footprint_normalizer.stages.simplify import simplify_ring

logger = logging.getLogger("footprint_normalizer.orchestrators.normalize_pipeline")


@dataclass(frozen=True, slots=True)
class NormalizeResult:
    """Outcome of normalizing one batch.

    Attributes:
        features: Normalized features, pass-through features and
            untouched originals of failed features, in input order.
            Area-filtered features are omitted.
        original_count: Number of features in the request.
        options: Effective options used for the batch.
        dropped_count: Features removed by the area filter or because
            their geometry collapsed.
        failed_count: Features returned unmodified after a processing error.
    """

    features: list[Any]
    original_count: int
    options: ProcessingOptions
    dropped_count: int = 0
    failed_count: int = 0

    @property
    def processed_count(self) -> int:
        """Number of features in the output collection."""
        return len(self.features)

    def to_feature_collection(self) -> FeatureCollectionPayload:
        """Render the response body returned to the map client."""
        return {
            "type": FEATURE_COLLECTION_TYPE,
            "features": list(self.features),
            "metadata": {
                "originalCount": self.original_count,
                "processedCount": self.processed_count,
                "options": self.options.to_dict(),
            },
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(
    features: list[Any],
    options: ProcessingOptions | dict[str, Any] | None = None,
) -> NormalizeResult:
    """Normalize a batch of features.

    Args:
        features: GeoJSON ``Feature`` dicts. Non-polygon features are
            passed through unchanged.
        options: Processing options, or a camelCase overrides mapping
            applied on top of the defaults.

    Returns:
        A ``NormalizeResult``; the input list and its features are never
        modified.

    Raises:
        ContractError: If *features* is not a list.
        ConfigValidationError: If an option value is out of range.
    """
    if not isinstance(features, list):
        msg = "Invalid features array provided"
        raise ContractError(msg, stage="normalize", code="INVALID_FEATURES")

    if isinstance(options, ProcessingOptions):
        options = ProcessingOptions.from_dict(None, base=options)
    else:
        options = ProcessingOptions.from_dict(options)

    logger.info(
        "Normalization started | features=%d | grid_size=%g | tolerance=%g | min_area=%g",
        len(features),
        options.grid_size,
        options.tolerance,
        options.min_area,
    )

    results: list[Any] = []
    dropped = 0
    failed = 0
    for index, feature in enumerate(features):
        try:
            normalized = normalize_feature(feature, options)
        except Exception as exc:
            logger.warning(
                "Feature processing failed, returning original | index=%d | error=%s",
                index,
                exc,
            )
            failed += 1
            results.append(copy.deepcopy(feature))
            continue

        if normalized is None:
            dropped += 1
            continue
        results.append(normalized)

    logger.info(
        "Normalization completed | original=%d | processed=%d | dropped=%d | failed=%d",
        len(features),
        len(results),
        dropped,
        failed,
    )

    return NormalizeResult(
        features=results,
        original_count=len(features),
        options=options,
        dropped_count=dropped,
        failed_count=failed,
    )


def normalize_feature(
    feature: Any,
    options: ProcessingOptions,
) -> dict[str, Any] | None:
    """Run one feature through the pipeline.

    Returns:
        A new normalized feature, a copy of *feature* if it is not a
        polygon, or ``None`` if it was filtered out (too small, or its
        geometry collapsed).

    Raises:
        GeometryValidationError: If the polygon's coordinates are malformed.
    """
    if geometry_type_of(feature) != POLYGON_TYPE:
        return copy.deepcopy(feature)

    parsed = FootprintFeature.from_dict(feature)
    ring = parsed.exterior

    # 1. Simplify
    simplified = simplify_ring(ring, options.tolerance)

    # 2. Area filter (measured on the input footprint)
    area_check = check_area(ring, options.min_area)
    if not area_check.keep:
        return None

    # 3. Orthogonalize
    orthogonal = orthogonalize_ring(
        simplified,
        grid_size=options.grid_size,
        angle_tolerance=options.angle_tolerance,
        force_orthogonal=options.force_orthogonal,
        preserve_shape=options.preserve_shape,
        correction_passes=options.correction_passes,
        square_closing_edge=options.square_closing_edge,
    )

    # 4. Limit vertices
    reduced = reduce_vertices(orthogonal, options.max_vertices)

    # 5. Bounding box for outlines that are still too irregular
    final = simplify_complex(
        reduced,
        max_vertices=options.max_complex_vertices,
        max_ratio=options.max_isoperimetric_ratio,
    )

    if is_degenerate(final):
        logger.debug("Ring collapsed during normalization | points=%d", parsed.vertex_count)
        return None

    if parsed.has_holes:
        logger.debug("Dropping %d hole(s) from normalized footprint", len(parsed.holes))

    properties = {
        **parsed.properties,
        PROCESSED_PROPERTY: True,
        ORIGINAL_AREA_PROPERTY: area_check.area,
        PROCESSED_AREA_PROPERTY: ring_area(final),
    }
    return parsed.to_dict(exterior=final, properties=properties)


def handle_normalize_request(
    raw: str | bytes | NormalizeRequest,
    *,
    base_options: ProcessingOptions | None = None,
) -> FeatureCollectionPayload:
    """Decode a request body, normalize its features and build the response.

    Args:
        raw: ``{"features": [...], "options": {...}}`` as a dict or JSON.
        base_options: Defaults the request's options are applied on top
            of (for example ``ProcessingOptions.from_env()``).

    Raises:
        ContractError: If the body or its ``features`` array is malformed.
        ConfigValidationError: If an option value is out of range.
    """
    try:
        payload = deserialize_request(raw)
        features = require_features(payload)
        options = request_options(payload, base=base_options)
    except PipelineError as exc:
        logger.warning("Normalize request rejected | error=%s", exc.to_error_dict())
        raise
    return normalize(features, options).to_feature_collection()
