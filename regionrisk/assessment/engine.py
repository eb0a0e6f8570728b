"""
assessment/engine.py
--------------------
Region aggregator: drives every region's participants through the fuzzy
pipeline and returns one :class:`~regionrisk.core.result_schema.RegionRiskResult`
per region.

Pipeline (per region)
---------------------
1. Require the region's expert safety level and repeat-visit ratio.
2. Classify every participant and map its individual term to a severity
   score (:data:`RISK_TERM_SCORES`), multiplied by the participant weight.
3. ``delta_risk``      = Σ weighted scores / Σ weights.
4. ``phi_risk``        = Z-spline(delta_risk, 60, 100).
5. ``repeat_visit``    = clamp(ratio, 0, 1).
6. ``sense_of_safety`` = clamp(1 − 0.5·√((phi − 1)² + (rv − 1)²), 0, 1).
7. ``omega``           = expert upper bound × sense_of_safety.
8. ``mu_r``            = S-curve(omega, breakpoints[0], breakpoints[5]).
9. ``risk_index``      = clamp(mu_r, 0, 1) and its label.

The computation is a pure function of its inputs.  Participants are
processed in participant-id order so the output does not depend on the
order of the input collections, and regions are emitted by ascending id.
Any error aborts the whole call; no partial results are returned.
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional

from regionrisk.assessment.classifier import classify_participant
from regionrisk.assessment.labels import map_risk_label
from regionrisk.core.config import RiskModelConfig
from regionrisk.core.config_hashing import compute_config_hash
from regionrisk.core.errors import MissingInputError, ValidationError
from regionrisk.core.execution import ExecutionManifest
from regionrisk.core.models import (
    ExpertRegionAssessment,
    ExpertSafetyLevel,
    IndividualRiskTerm,
    ParticipantAssessment,
)
from regionrisk.core.result_schema import (
    ParticipantDiagnostics,
    RegionDiagnostics,
    RegionRiskResult,
    RiskComputationResult,
)
from regionrisk.fuzzy.membership import (
    clamp,
    decreasing_spline_membership,
    increasing_s_curve_membership,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Model constants
# ---------------------------------------------------------------------------

RISK_TERM_SCORES: Dict[IndividualRiskTerm, int] = {
    IndividualRiskTerm.L: 15,
    IndividualRiskTerm.BA: 30,
    IndividualRiskTerm.A: 50,
    IndividualRiskTerm.AA: 80,
    IndividualRiskTerm.H: 100,
}

#: Delta-risk range of the phi-risk Z-spline.
PHI_RISK_BOUNDS = (60, 100)


# ---------------------------------------------------------------------------
# Input indexing
# ---------------------------------------------------------------------------

def _index_experts(experts: Iterable[ExpertRegionAssessment]) -> Dict[str, ExpertSafetyLevel]:
    by_region: Dict[str, ExpertSafetyLevel] = {}
    for expert in experts:
        level = ExpertSafetyLevel.parse(expert.safety_level)
        known = by_region.get(expert.region_id)
        if known is not None and known is not level:
            raise ValidationError(
                f"Conflicting expert safety levels for region {expert.region_id}: "
                f"{known.value} and {level.value}."
            )
        by_region[expert.region_id] = level
    return by_region


def _group_participants(
    participants: Iterable[ParticipantAssessment],
) -> Dict[str, List[ParticipantAssessment]]:
    by_region: Dict[str, List[ParticipantAssessment]] = {}
    seen: Dict[str, str] = {}
    for participant in participants:
        if participant.participant_id in seen:
            raise ValidationError(
                f"Duplicate participant id {participant.participant_id} "
                f"(regions {seen[participant.participant_id]} and {participant.region_id})."
            )
        seen[participant.participant_id] = participant.region_id
        by_region.setdefault(participant.region_id, []).append(participant)

    for members in by_region.values():
        members.sort(key=lambda p: p.participant_id)
    return by_region


# ---------------------------------------------------------------------------
# Per-region computation
# ---------------------------------------------------------------------------

def _participant_weight(config: RiskModelConfig, participant_id: str) -> float:
    weight = config.weights.participant_weight(participant_id)
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) \
            or not math.isfinite(weight) or weight <= 0:
        raise ValidationError(f"Invalid weight for participant {participant_id}.")
    return weight


def _compute_region(
    region_id: str,
    members: List[ParticipantAssessment],
    config: RiskModelConfig,
    expert_level: ExpertSafetyLevel,
    repeat_visit: float,
) -> RegionRiskResult:
    per_participant: "OrderedDict[str, ParticipantDiagnostics]" = OrderedDict()
    weighted_scores: List[float] = []
    weights: List[float] = []

    for participant in members:
        diagnostics = classify_participant(participant, config)
        per_participant[participant.participant_id] = diagnostics

        score = RISK_TERM_SCORES[diagnostics.individual_risk_term]
        weight = _participant_weight(config, participant.participant_id)
        weighted_scores.append(score * weight)
        weights.append(weight)

    delta_risk = sum(weighted_scores) / sum(weights)
    phi_risk = decreasing_spline_membership(delta_risk, *PHI_RISK_BOUNDS)
    repeat_visit_clamped = clamp(repeat_visit, 0, 1)

    sense_of_safety = clamp(
        1 - 0.5 * math.sqrt(
            (phi_risk - 1) * (phi_risk - 1)
            + (repeat_visit_clamped - 1) * (repeat_visit_clamped - 1)
        ),
        0,
        1,
    )

    upper_bound = config.expert_scale.label_to_upper_bound.get(expert_level.value)
    if upper_bound is None:
        raise ValidationError(f"Missing expert scale for level {expert_level.value}.")
    if isinstance(upper_bound, bool) or not isinstance(upper_bound, (int, float)) \
            or not math.isfinite(upper_bound):
        raise ValidationError(f"Invalid expert scale for level {expert_level.value}.")

    omega = upper_bound * sense_of_safety
    breakpoints = config.expert_scale.breakpoints
    mu_r = increasing_s_curve_membership(omega, breakpoints[0], breakpoints[5])
    risk_index = clamp(mu_r, 0, 1)
    risk_label = map_risk_label(risk_index, config.thresholds)

    logger.debug(
        "Region %s: n=%d delta=%.6f phi=%.6f rv=%.4f sense=%.6f omega=%.6f mu_r=%.6f label=%s",
        region_id, len(members), delta_risk, phi_risk, repeat_visit_clamped,
        sense_of_safety, omega, risk_index, risk_label.value,
    )

    return RegionRiskResult(
        region_id=region_id,
        risk_index=risk_index,
        risk_label=risk_label,
        diagnostics=RegionDiagnostics(
            sample_size=len(members),
            per_participant=per_participant,
            delta_risk=delta_risk,
            phi_risk=phi_risk,
            repeat_visit=repeat_visit_clamped,
            sense_of_safety=sense_of_safety,
            expert_safety_level=expert_level,
            omega=omega,
            mu_r=risk_index,
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_region_risk(
    config: RiskModelConfig,
    participants: Iterable[ParticipantAssessment],
    experts: Iterable[ExpertRegionAssessment],
    repeat_visit_by_region: Mapping[str, float],
) -> List[RegionRiskResult]:
    """
    Compute the risk index of every region that has at least one participant.

    Regions without participants are left out of the output even when they
    have an expert assessment and a repeat-visit value.

    Args:
        config:                 Active model configuration.
        participants:           Participant assessments of any regions.
        experts:                At most one safety level per region.
        repeat_visit_by_region: Region id → repeat-visit ratio.

    Returns:
        Region results sorted by region id ascending.

    Raises:
        ValidationError:   On an invalid configuration or participant record,
                           or conflicting expert levels for one region.
        MissingInputError: If a region lacks an expert level or repeat-visit value.
        NumericError:      If a numeric input such as the repeat-visit ratio
                           is not finite.
    """
    config.validate()
    expert_by_region = _index_experts(experts)
    participants_by_region = _group_participants(participants)

    results: List[RegionRiskResult] = []
    for region_id in sorted(participants_by_region):
        expert_level = expert_by_region.get(region_id)
        if expert_level is None:
            raise MissingInputError(
                region_id, "expert_safety_level",
                f"Missing expert safety level for region {region_id}.",
            )
        repeat_visit = repeat_visit_by_region.get(region_id)
        if repeat_visit is None:
            raise MissingInputError(
                region_id, "repeat_visit",
                f"Missing repeat-visit value for region {region_id}.",
            )
        results.append(
            _compute_region(
                region_id,
                participants_by_region[region_id],
                config,
                expert_level,
                float(repeat_visit),
            )
        )
    return results


class RegionRiskEngine:
    """
    Runs the region risk model for one configuration and wraps the results
    with an :class:`~regionrisk.core.execution.ExecutionManifest`.

    The engine holds no state besides its configuration; build one per
    computation request.

    Args:
        config: Model configuration.  Required: the caller decides which
                configuration version is active.

    Example::

        engine = RegionRiskEngine(load_config("model.yaml"))
        outcome = engine.run(participants, experts, {"Lviv": 0.78})
        for result in outcome.results:
            print(result.region_id, result.risk_index, result.risk_label.value)
    """

    def __init__(self, config: RiskModelConfig) -> None:
        self.config = config

    def run(
        self,
        participants: Iterable[ParticipantAssessment],
        experts: Iterable[ExpertRegionAssessment],
        repeat_visit_by_region: Mapping[str, float],
        region_ids: Optional[Iterable[str]] = None,
    ) -> RiskComputationResult:
        """
        Execute the computation.

        Args:
            participants:           Participant assessments.
            experts:                Expert assessments, one per region.
            repeat_visit_by_region: Region id → repeat-visit ratio.
            region_ids:             Optional subset of regions to compute;
                                    participants and experts of other regions
                                    are ignored.  ``None`` or an empty
                                    collection means every region.

        Returns:
            A :class:`~regionrisk.core.result_schema.RiskComputationResult`.
        """
        participants = list(participants)
        wanted = set(region_ids or ())
        if wanted:
            participants = [p for p in participants if p.region_id in wanted]
            experts = [e for e in experts if e.region_id in wanted]

        results = compute_region_risk(self.config, participants, experts, repeat_visit_by_region)

        manifest = ExecutionManifest.create(
            config_hash=compute_config_hash(self.config),
            config_version=self.config.version,
            regions_computed=[r.region_id for r in results],
            participant_count=len(participants),
        )
        logger.info(
            "Computed risk for %d region(s) from %d participant(s) (config version %s).",
            len(results), len(participants), self.config.version,
        )
        return RiskComputationResult(manifest=manifest, results=results)
