"""
assessment/labels.py
--------------------
Maps a region's risk index onto one of five qualitative labels.

Bands are half-open ``[lower, upper)``; a value exactly on a boundary falls
into the less severe band above it.
"""

from __future__ import annotations

from typing import Tuple

from regionrisk.core.config import Thresholds
from regionrisk.core.models import RiskLabel
from regionrisk.fuzzy.membership import clamp

#: Labels from most to least severe; index ``i`` is the band below threshold ``i``.
RISK_LABEL_ORDER: Tuple[RiskLabel, ...] = (
    RiskLabel.VERY_HIGH,
    RiskLabel.HIGH,
    RiskLabel.MEDIUM,
    RiskLabel.LOW,
    RiskLabel.VERY_LOW,
)


def map_risk_label(value: float, thresholds: Thresholds) -> RiskLabel:
    """
    Return the :class:`~regionrisk.core.models.RiskLabel` for *value*.

    Examples (default thresholds 0.2 / 0.4 / 0.6 / 0.8)::

        map_risk_label(0.1, Thresholds())  # very_high
        map_risk_label(0.4, Thresholds())  # medium
        map_risk_label(0.9, Thresholds())  # very_low

    Raises:
        NumericError: If *value* is not finite.
    """
    clamped = clamp(value, 0, 1)
    for label, upper in zip(RISK_LABEL_ORDER, thresholds.as_tuple()):
        if clamped < upper:
            return label
    return RiskLabel.VERY_LOW
