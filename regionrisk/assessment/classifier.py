"""
assessment/classifier.py
------------------------
Criteria classifier: turns a participant's linguistic answers into group
terms and a single individual risk term.

Group term buckets scale with the number of criteria ``n`` in the group::

    sum < 1n → T1    sum < 2n → T2    sum < 3n → T3    sum < 4n → T4    else T5

Individual risk term rules, first match wins, over the multiset of group terms:

1. T5 ≥ 1 and T4 ≥ 2           → L
2. T5 ≥ 1 and T4 ≥ 1 and T3 ≥ 1 → BA
3. T4 ≥ 1 and T3 ≥ 1 and T2 ≥ 1 → A
4. T3 ≥ 2 and T2 ≥ 1           → AA
5. otherwise                   → H

The rules overlap and are not exhaustive; their order is part of the model.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Dict, Iterable, List, Mapping

from regionrisk.core.config import RiskModelConfig
from regionrisk.core.errors import ValidationError
from regionrisk.core.models import GroupTerm, IndividualRiskTerm, ParticipantAssessment
from regionrisk.core.result_schema import ParticipantDiagnostics


def sum_group(
    participant: ParticipantAssessment,
    group_name: str,
    criteria_keys: List[str],
    linguistic_scale: Mapping[str, float],
) -> float:
    """
    Sum the numeric weights of every criterion answer in one group.

    Raises:
        ValidationError: If the group or a criterion is missing, or a token
                         does not resolve to a finite scale value.
    """
    answers = participant.criteria.get(group_name)
    if not answers:
        raise ValidationError(
            f"Participant {participant.participant_id} is missing group {group_name}."
        )

    total = 0.0
    for criterion_key in criteria_keys:
        token = answers.get(criterion_key)
        if not token:
            raise ValidationError(
                f"Participant {participant.participant_id} missing criterion {criterion_key}."
            )
        if token not in linguistic_scale:
            raise ValidationError(f"Unknown linguistic token: {token}.")
        numeric = linguistic_scale[token]
        if not math.isfinite(numeric):
            raise ValidationError(f"Invalid numeric value for token: {token}.")
        total += numeric
    return total


def group_term_from_sum(total: float, criteria_count: int) -> GroupTerm:
    """Bucket a group sum into a :class:`GroupTerm` relative to the group size."""
    if total < criteria_count:
        return GroupTerm.T1
    if total < 2 * criteria_count:
        return GroupTerm.T2
    if total < 3 * criteria_count:
        return GroupTerm.T3
    if total < 4 * criteria_count:
        return GroupTerm.T4
    return GroupTerm.T5


def individual_risk_term(group_terms: Iterable[GroupTerm]) -> IndividualRiskTerm:
    """Combine group terms into one :class:`IndividualRiskTerm`."""
    counts = Counter(GroupTerm(term) for term in group_terms)

    if counts[GroupTerm.T5] >= 1 and counts[GroupTerm.T4] >= 2:
        return IndividualRiskTerm.L
    if counts[GroupTerm.T5] >= 1 and counts[GroupTerm.T4] >= 1 and counts[GroupTerm.T3] >= 1:
        return IndividualRiskTerm.BA
    if counts[GroupTerm.T4] >= 1 and counts[GroupTerm.T3] >= 1 and counts[GroupTerm.T2] >= 1:
        return IndividualRiskTerm.A
    if counts[GroupTerm.T3] >= 2 and counts[GroupTerm.T2] >= 1:
        return IndividualRiskTerm.AA
    return IndividualRiskTerm.H


def classify_participant(
    participant: ParticipantAssessment,
    config: RiskModelConfig,
) -> ParticipantDiagnostics:
    """
    Classify one participant against every configured criteria group.

    Groups are visited in configuration order, so the diagnostics mappings
    follow that order too.

    Args:
        participant: The assessment to classify.
        config:      Active model configuration.

    Returns:
        :class:`~regionrisk.core.result_schema.ParticipantDiagnostics` holding
        group sums, group terms and the individual risk term.
    """
    group_sums: Dict[str, float] = {}
    group_terms: Dict[str, GroupTerm] = {}

    for group_name, criteria_keys in config.criteria_groups.items():
        total = sum_group(participant, group_name, criteria_keys, config.linguistic_scale)
        group_sums[group_name] = total
        group_terms[group_name] = group_term_from_sum(total, len(criteria_keys))

    return ParticipantDiagnostics(
        group_sums=group_sums,
        group_terms=group_terms,
        individual_risk_term=individual_risk_term(group_terms.values()),
    )
