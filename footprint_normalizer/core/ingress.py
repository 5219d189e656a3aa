"""Thin request boundary helpers.

Centralises the transport concerns of the HTTP collaborator so that the
pipeline itself only ever sees validated Python values:

- **deserialize_request** — normalises a JSON-string, bytes or dict body
  to a plain dict.
- **require_features** — extracts the ``features`` array, rejecting the
  whole batch when it is missing or not a list.
- **request_options** — builds ``ProcessingOptions`` from the optional
  ``options`` object.

Every failure here is batch-level and raised as ``ContractError`` (or
``ConfigValidationError`` for bad option values) before any feature is
processed.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from footprint_normalizer.core.config import ProcessingOptions
from footprint_normalizer.core.exceptions import ContractError

logger = logging.getLogger("footprint_normalizer.core.ingress")


# ---------------------------------------------------------------------------
# Body deserialisation
# ---------------------------------------------------------------------------


def deserialize_request(raw: str | bytes | dict[str, Any] | object) -> dict[str, Any]:
    """Normalise a request body to a plain dict.

    Args:
        raw: The request body, either already decoded or as JSON text.

    Returns:
        Parsed dict payload.

    Raises:
        ContractError: If *raw* is not valid JSON, or does not decode to
            a JSON object.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Request body is not valid UTF-8: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Request body is not valid JSON: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
        if not isinstance(parsed, dict):
            msg = f"Request body JSON must be an object, got {type(parsed).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")
        return parsed
    if isinstance(raw, dict):
        return raw
    msg = f"Unexpected request body type: {type(raw).__name__}"
    raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")


# ---------------------------------------------------------------------------
# Batch validation
# ---------------------------------------------------------------------------


def require_features(payload: dict[str, Any]) -> list[Any]:
    """Return the request's ``features`` array.

    Raises:
        ContractError: If ``features`` is missing or is not a list.
    """
    features = payload.get("features")
    if not isinstance(features, list):
        msg = "Invalid features array provided"
        raise ContractError(msg, stage="ingress", code="INVALID_FEATURES")
    return features


def request_options(
    payload: dict[str, Any],
    *,
    base: ProcessingOptions | None = None,
) -> ProcessingOptions:
    """Build ``ProcessingOptions`` from the request's ``options`` object.

    A missing or ``null`` options member means "use *base*".

    Raises:
        ContractError: If ``options`` is present but not an object.
        ConfigValidationError: If an option value is out of range.
    """
    overrides = payload.get("options")
    if overrides is None:
        overrides = {}
    if not isinstance(overrides, dict):
        msg = f"options must be an object, got {type(overrides).__name__}"
        raise ContractError(msg, stage="ingress", code="INVALID_OPTIONS")

    options = ProcessingOptions.from_dict(overrides, base=base)
    logger.debug("Resolved request options | overrides=%s", sorted(overrides))
    return options
