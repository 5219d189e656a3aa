"""Footprint pipeline exceptions.

Every domain exception inherits from ``PipelineError`` and records the
stage that raised it and a machine-readable code. Request handlers log
``to_error_dict()`` when they reject a batch; its ``error`` member is the
message the map client displays.

Categories:
- ``validation``: a feature's geometry or properties cannot be read.
  Recovered per feature by the orchestrator.
- ``contract``: the request body or its ``features`` array is malformed.
  Rejects the whole batch.
- ``config``: an option value is unparseable or out of range. Rejects
  the whole batch (defined in ``core.config``).
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all footprint-pipeline errors.

    Attributes:
        message: Human-readable error description.
        stage: Where the error was raised (``"ingress"``, ``"normalize"``,
            ``"statistics"``, ``"config"``).
        code: Machine-readable error code (e.g. ``"INVALID_FEATURES"``).
    """

    category: str = "pipeline"
    default_stage: str = ""
    default_code: str = ""

    def __init__(self, message: str = "", *, stage: str = "", code: str = "") -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        super().__init__(message)

    def to_error_dict(self) -> dict[str, str]:
        """Error body for a rejected request."""
        return {
            "error": self.message,
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
        }


class ValidationError(PipelineError):
    """A feature's geometry or properties failed validation."""

    category = "validation"


class ContractError(PipelineError):
    """Malformed request payload at the batch boundary."""

    category = "contract"
    default_code = "INVALID_REQUEST"
