"""Processing options for the footprint normalization pipeline.

Defaults match the rendering client's expectations and can be overridden
twice: process-wide from environment variables (``from_env()``) and per
request from the options mapping sent alongside the features
(``from_dict()``).

Fail-fast validation:
    Both constructors raise ``ConfigValidationError`` if any value is
    out of its valid range, so bad options are rejected before any
    feature is touched.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any

from footprint_normalizer.core.constants import (
    DEFAULT_ANGLE_TOLERANCE_DEG,
    DEFAULT_CORRECTION_PASSES,
    DEFAULT_GRID_SIZE,
    DEFAULT_MAX_COMPLEX_VERTICES,
    DEFAULT_MAX_ISOPERIMETRIC_RATIO,
    DEFAULT_MAX_VERTICES,
    DEFAULT_MIN_AREA,
    DEFAULT_TOLERANCE,
    MIN_DISTINCT_VERTICES,
)
from footprint_normalizer.core.exceptions import PipelineError

logger = logging.getLogger("footprint_normalizer.core.config")

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})

# Wire key (camelCase, as sent by the map client) -> dataclass field
_WIRE_KEYS: dict[str, str] = {
    "tolerance": "tolerance",
    "gridSize": "grid_size",
    "minArea": "min_area",
    "maxVertices": "max_vertices",
    "angleTolerance": "angle_tolerance",
    "forceOrthogonal": "force_orthogonal",
    "preserveShape": "preserve_shape",
    "correctionPasses": "correction_passes",
    "squareClosingEdge": "square_closing_edge",
    "maxComplexVertices": "max_complex_vertices",
    "maxIsoperimetricRatio": "max_isoperimetric_ratio",
}

_WIRE_NAMES: dict[str, str] = {name: wire for wire, name in _WIRE_KEYS.items()}

_ENV_KEYS: dict[str, str] = {
    "grid_size": "FOOTPRINT_GRID_SIZE",
    "tolerance": "FOOTPRINT_TOLERANCE",
    "min_area": "FOOTPRINT_MIN_AREA",
    "max_vertices": "FOOTPRINT_MAX_VERTICES",
    "angle_tolerance": "FOOTPRINT_ANGLE_TOLERANCE",
    "force_orthogonal": "FOOTPRINT_FORCE_ORTHOGONAL",
    "preserve_shape": "FOOTPRINT_PRESERVE_SHAPE",
    "correction_passes": "FOOTPRINT_CORRECTION_PASSES",
    "square_closing_edge": "FOOTPRINT_SQUARE_CLOSING_EDGE",
    "max_complex_vertices": "FOOTPRINT_MAX_COMPLEX_VERTICES",
    "max_isoperimetric_ratio": "FOOTPRINT_MAX_ISOPERIMETRIC_RATIO",
}


class ConfigValidationError(PipelineError):
    """Raised when an option value is out of its valid range.

    Attributes:
        key: The option key that failed validation.
        value: The invalid value.
        reason: Human-readable description of the valid range.
    """

    category = "config"
    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.reason = message
        super().__init__(f"Invalid option {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ProcessingOptions:
    """Immutable per-request processing options.

    Attributes:
        tolerance: Simplification deviation bound, in coordinate units.
        grid_size: Grid cell edge length for snapping, in coordinate units.
        min_area: Polygons below this planar area are dropped.
        max_vertices: Vertex cap (closing point excluded) before decimation.
        angle_tolerance: Degrees an angle may deviate from 0/90/180/270
            before correction is attempted.
        force_orthogonal: Run the edge-straightening pass.
        preserve_shape: Halve the per-vertex nudge to track the outline.
        correction_passes: Number of angle-correction sweeps.
        square_closing_edge: Insert an elbow vertex when the closing edge
            is still diagonal after edge forcing.
        max_complex_vertices: Vertex count above which the bounding box
            replaces the ring.
        max_isoperimetric_ratio: Perimeter² / area above which the bounding
            box replaces the ring.
    """

    tolerance: float = DEFAULT_TOLERANCE
    grid_size: float = DEFAULT_GRID_SIZE
    min_area: float = DEFAULT_MIN_AREA
    max_vertices: int = DEFAULT_MAX_VERTICES
    angle_tolerance: float = DEFAULT_ANGLE_TOLERANCE_DEG
    force_orthogonal: bool = True
    preserve_shape: bool = False
    correction_passes: int = DEFAULT_CORRECTION_PASSES
    square_closing_edge: bool = True
    max_complex_vertices: int = DEFAULT_MAX_COMPLEX_VERTICES
    max_isoperimetric_ratio: float = DEFAULT_MAX_ISOPERIMETRIC_RATIO

    @classmethod
    def from_env(cls) -> ProcessingOptions:
        """Load default options from ``FOOTPRINT_*`` environment variables.

        Variables that are unset keep the built-in default.

        Raises:
            ConfigValidationError: If a value is out of range.
            ValueError: If a numeric variable cannot be parsed
                (e.g. ``FOOTPRINT_GRID_SIZE=abc``).
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(_ENV_KEYS[f.name])
            if raw is None:
                continue
            values[f.name] = _coerce(f.name, raw, f.default)
        options = cls(**values)
        _validate(options)
        return options

    @classmethod
    def from_dict(
        cls,
        overrides: dict[str, Any] | None,
        *,
        base: ProcessingOptions | None = None,
    ) -> ProcessingOptions:
        """Apply a request's option overrides on top of *base*.

        Keys are the camelCase names used on the wire (``gridSize``,
        ``maxVertices``...). Unknown keys are ignored.

        Raises:
            ConfigValidationError: If a value cannot be coerced or is
                out of range.
        """
        options = base if base is not None else cls()
        if not overrides:
            _validate(options)
            return options

        changes: dict[str, Any] = {}
        for key, raw in overrides.items():
            name = _WIRE_KEYS.get(key)
            if name is None:
                logger.debug("Ignoring unknown processing option | key=%s", key)
                continue
            try:
                changes[name] = _coerce(name, raw, getattr(options, name))
            except (TypeError, ValueError, OverflowError) as exc:
                raise ConfigValidationError(key, raw, f"cannot be parsed ({exc})") from exc

        options = replace(options, **changes)
        _validate(options)
        return options

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase wire shape echoed in batch metadata."""
        return {wire: getattr(self, name) for wire, name in _WIRE_KEYS.items()}


def _coerce(name: str, raw: object, default: object) -> object:
    """Coerce *raw* to the type of the field's *default* value."""
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        msg = f"expected a boolean for {name}, got {raw!r}"
        raise ValueError(msg)
    if isinstance(raw, bool):
        msg = f"expected a number for {name}, got {raw!r}"
        raise TypeError(msg)
    value = float(str(raw))
    if not math.isfinite(value):
        msg = f"expected a finite number for {name}, got {raw!r}"
        raise ValueError(msg)
    if isinstance(default, int):
        if not value.is_integer():
            msg = f"expected a whole number for {name}, got {raw!r}"
            raise ValueError(msg)
        return int(value)
    return value


def _validate(options: ProcessingOptions) -> None:
    """Validate option ranges.  Raises ``ConfigValidationError``."""
    for f in fields(options):
        value = getattr(options, f.name)
        if isinstance(value, float) and not math.isfinite(value):
            raise ConfigValidationError(_WIRE_NAMES[f.name], value, "must be a finite number")

    if options.tolerance < 0:
        raise ConfigValidationError(
            "tolerance",
            options.tolerance,
            "must be >= 0 (coordinate units)",
        )

    if options.grid_size <= 0:
        raise ConfigValidationError(
            "gridSize",
            options.grid_size,
            "must be > 0 (coordinate units)",
        )

    if options.min_area < 0:
        raise ConfigValidationError(
            "minArea",
            options.min_area,
            "must be >= 0 (squared coordinate units)",
        )

    if options.max_vertices < MIN_DISTINCT_VERTICES:
        raise ConfigValidationError(
            "maxVertices",
            options.max_vertices,
            f"must be >= {MIN_DISTINCT_VERTICES}",
        )

    if not 0.0 <= options.angle_tolerance <= 180.0:
        raise ConfigValidationError(
            "angleTolerance",
            options.angle_tolerance,
            "must be between 0 and 180 (degrees)",
        )

    if options.correction_passes < 1:
        raise ConfigValidationError(
            "correctionPasses",
            options.correction_passes,
            "must be >= 1",
        )

    if options.max_complex_vertices < MIN_DISTINCT_VERTICES:
        raise ConfigValidationError(
            "maxComplexVertices",
            options.max_complex_vertices,
            f"must be >= {MIN_DISTINCT_VERTICES}",
        )

    if options.max_isoperimetric_ratio <= 0:
        raise ConfigValidationError(
            "maxIsoperimetricRatio",
            options.max_isoperimetric_ratio,
            "must be > 0",
        )
