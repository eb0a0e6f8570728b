"""
core/errors.py
--------------
Exception taxonomy raised by the regionrisk engine.

Every error derives from :class:`RiskModelError`, itself a ``ValueError``,
so callers at the boundary may catch the whole family in one clause.
None of them are retried internally: the engine fails fast on the first
violation and the computation is aborted as a whole.
"""

from __future__ import annotations

from typing import Optional


class RiskModelError(ValueError):
    """Base class for every error raised by the risk engine."""


class NumericError(RiskModelError):
    """Raised on a non-finite input or degenerate bounds in a numeric primitive."""


class ValidationError(RiskModelError):
    """
    Raised when an input record or the model configuration is unusable.

    Typical causes are a participant missing a criteria group or criterion,
    an unknown linguistic token, a non-positive weight, or a missing
    expert-scale value.
    """


class MissingInputError(RiskModelError):
    """
    Raised when a region with participants lacks a required input.

    Attributes:
        region_id: Region whose input is missing.
        missing:   Which input is absent: ``"expert_safety_level"`` or
                   ``"repeat_visit"``.
    """

    def __init__(self, region_id: str, missing: str, message: Optional[str] = None) -> None:
        self.region_id = region_id
        self.missing = missing
        super().__init__(message or f"Missing {missing.replace('_', ' ')} for region {region_id}.")
