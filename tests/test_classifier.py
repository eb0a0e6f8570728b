import itertools
import math

import pytest

from regionrisk.assessment.classifier import (
    classify_participant,
    group_term_from_sum,
    individual_risk_term,
    sum_group,
)
from regionrisk.core.errors import ValidationError
from regionrisk.core.models import GroupTerm, IndividualRiskTerm, ParticipantAssessment

T1, T2, T3, T4, T5 = (GroupTerm.T1, GroupTerm.T2, GroupTerm.T3, GroupTerm.T4, GroupTerm.T5)


@pytest.mark.parametrize(
    "total, count, expected",
    [
        (4, 5, T1),
        (5, 5, T2),
        (9.99, 5, T2),
        (10, 5, T3),
        (15, 5, T4),
        (19, 5, T4),
        (20, 5, T5),
        (25, 5, T5),
        (14, 7, T3),
        (21, 7, T4),
        (28, 7, T5),
    ],
)
def test_group_term_buckets_scale_with_group_size(total, count, expected):
    assert group_term_from_sum(total, count) is expected


@pytest.mark.parametrize(
    "terms, expected",
    [
        ([T5, T4, T4], IndividualRiskTerm.L),
        ([T5, T4, T3], IndividualRiskTerm.BA),
        ([T4, T3, T2], IndividualRiskTerm.A),
        ([T3, T3, T2], IndividualRiskTerm.AA),
        ([T2, T2, T2], IndividualRiskTerm.H),
        ([T1, T1, T1], IndividualRiskTerm.H),
        ([T5, T5, T5], IndividualRiskTerm.H),
    ],
)
def test_individual_risk_term_rules(terms, expected):
    assert individual_risk_term(terms) is expected


def test_individual_risk_term_first_match_wins():
    # Rules 1 and 2 both hold; rule 1 comes first.
    assert individual_risk_term([T5, T4, T4, T3]) is IndividualRiskTerm.L
    # Rules 3 and 4 both hold; rule 3 comes first.
    assert individual_risk_term([T4, T3, T3, T2]) is IndividualRiskTerm.A


def test_individual_risk_term_is_order_independent():
    for terms in ([T5, T4, T3], [T4, T3, T2], [T3, T3, T2], [T5, T4, T4]):
        results = {individual_risk_term(list(p)) for p in itertools.permutations(terms)}
        assert len(results) == 1


def test_individual_risk_term_accepts_string_values():
    assert individual_risk_term(["T4", "T3", "T2"]) is IndividualRiskTerm.A


def test_classify_participant_default_groups(default_config, make_participant):
    participant = make_participant("P-1", "Zakarpattia", "A")
    diagnostics = classify_participant(participant, default_config)

    assert diagnostics.group_sums == {"infrastructure": 15, "socioEcological": 14, "medical": 5}
    assert diagnostics.group_terms == {"infrastructure": T4, "socioEcological": T3, "medical": T2}
    assert diagnostics.individual_risk_term is IndividualRiskTerm.A
    assert list(diagnostics.group_terms) == list(default_config.criteria_groups)


def test_sum_group_missing_group(default_config, make_participant):
    participant = make_participant("P-1", "R", "A")
    criteria = dict(participant.criteria)
    del criteria["medical"]
    broken = ParticipantAssessment("P-1", "R", criteria)
    with pytest.raises(ValidationError, match="missing group medical"):
        classify_participant(broken, default_config)


def test_sum_group_missing_criterion(default_config):
    participant = ParticipantAssessment("P-2", "R", {"infrastructure": {"K1": "l1", "K2": "l1"}})
    with pytest.raises(ValidationError, match="missing criterion K3"):
        sum_group(participant, "infrastructure", ["K1", "K2", "K3"], default_config.linguistic_scale)


def test_sum_group_unknown_token(default_config):
    participant = ParticipantAssessment("P-3", "R", {"g": {"K1": "l9"}})
    with pytest.raises(ValidationError, match="Unknown linguistic token"):
        sum_group(participant, "g", ["K1"], default_config.linguistic_scale)


def test_sum_group_non_finite_scale_value():
    participant = ParticipantAssessment("P-4", "R", {"g": {"K1": "l1"}})
    with pytest.raises(ValidationError, match="Invalid numeric value"):
        sum_group(participant, "g", ["K1"], {"l1": math.inf})


def test_sum_group_ignores_extra_criteria(default_config):
    participant = ParticipantAssessment("P-5", "R", {"g": {"K1": "l2", "K2": "l3", "extra": "l5"}})
    assert sum_group(participant, "g", ["K1", "K2"], default_config.linguistic_scale) == 5
