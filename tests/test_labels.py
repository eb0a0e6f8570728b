import math

import numpy as np
import pytest

from regionrisk.assessment.labels import RISK_LABEL_ORDER, map_risk_label
from regionrisk.core.config import Thresholds
from regionrisk.core.errors import NumericError
from regionrisk.core.models import RiskLabel


def test_maps_risk_labels():
    t = Thresholds()
    assert map_risk_label(0.1, t) is RiskLabel.VERY_HIGH
    assert map_risk_label(0.3, t) is RiskLabel.HIGH
    assert map_risk_label(0.5, t) is RiskLabel.MEDIUM
    assert map_risk_label(0.7, t) is RiskLabel.LOW
    assert map_risk_label(0.9, t) is RiskLabel.VERY_LOW


def test_boundaries_fall_into_less_severe_band():
    t = Thresholds()
    assert map_risk_label(0.2, t) is RiskLabel.HIGH
    assert map_risk_label(0.4, t) is RiskLabel.MEDIUM
    assert map_risk_label(0.6, t) is RiskLabel.LOW
    assert map_risk_label(0.8, t) is RiskLabel.VERY_LOW
    assert map_risk_label(0.0, t) is RiskLabel.VERY_HIGH
    assert map_risk_label(1.0, t) is RiskLabel.VERY_LOW


def test_out_of_range_values_are_clamped():
    t = Thresholds()
    assert map_risk_label(-2.0, t) is RiskLabel.VERY_HIGH
    assert map_risk_label(3.0, t) is RiskLabel.VERY_LOW


def test_non_finite_value_rejected():
    with pytest.raises(NumericError):
        map_risk_label(math.nan, Thresholds())


@pytest.mark.parametrize(
    "bounds",
    [(0.2, 0.4, 0.6, 0.8), (0.05, 0.1, 0.5, 0.95), (0.3, 0.31, 0.32, 0.33)],
)
def test_labels_partition_unit_interval(bounds):
    """Labels are monotone over [0, 1] and every band is reached."""
    t = Thresholds(*bounds)
    seen = []
    for x in np.linspace(0, 1, 2001):
        label = map_risk_label(float(x), t)
        if not seen or seen[-1] is not label:
            seen.append(label)
    assert tuple(seen) == RISK_LABEL_ORDER
