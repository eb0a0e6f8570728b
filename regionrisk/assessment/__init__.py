"""assessment sub-package — criteria classifier, label mapper and region engine."""

from regionrisk.assessment.classifier import (
    classify_participant,
    group_term_from_sum,
    individual_risk_term,
    sum_group,
)
from regionrisk.assessment.labels import RISK_LABEL_ORDER, map_risk_label
from regionrisk.assessment.engine import RISK_TERM_SCORES, RegionRiskEngine, compute_region_risk

__all__ = [
    "classify_participant",
    "group_term_from_sum",
    "individual_risk_term",
    "sum_group",
    "RISK_LABEL_ORDER",
    "map_risk_label",
    "RISK_TERM_SCORES",
    "RegionRiskEngine",
    "compute_region_risk",
]
