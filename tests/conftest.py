import pytest

from regionrisk.core.config import RiskModelConfig
from regionrisk.core.models import ExpertRegionAssessment, ParticipantAssessment

# Group terms per individual risk term, in default group order
# (infrastructure, socioEcological, medical).
RISK_TERM_GROUPS = {
    "L": ["T5", "T4", "T4"],
    "BA": ["T5", "T4", "T3"],
    "A": ["T4", "T3", "T2"],
    "AA": ["T3", "T3", "T2"],
    "H": ["T2", "T2", "T2"],
}

# With the l1..l5 → 1..5 scale a whole group answered with one token lands
# in the bucket one above the token's value.
TOKEN_BY_GROUP_TERM = {"T2": "l1", "T3": "l2", "T4": "l3", "T5": "l4"}


@pytest.fixture
def default_config():
    return RiskModelConfig()


@pytest.fixture
def make_participant(default_config):
    def _make(participant_id, region_id, risk_term="A", config=None):
        config = config or default_config
        criteria = {}
        for group_name, group_term in zip(config.criteria_groups, RISK_TERM_GROUPS[risk_term]):
            token = TOKEN_BY_GROUP_TERM[group_term]
            criteria[group_name] = {key: token for key in config.criteria_groups[group_name]}
        return ParticipantAssessment(participant_id, region_id, criteria)

    return _make


@pytest.fixture
def golden_input(default_config, make_participant):
    """Three-region reference dataset with 109 participants per region."""
    plan = [
        ("Zakarpattia", "A", 36), ("Zakarpattia", "AA", 73),
        ("Lviv", "A", 38), ("Lviv", "AA", 71),
        ("Ivano-Frankivsk", "A", 1), ("Ivano-Frankivsk", "AA", 108),
    ]
    participants = []
    for region, term, count in plan:
        for _ in range(count):
            participants.append(
                make_participant(f"{region}-{term}-{len(participants) + 1}", region, term)
            )
    experts = [
        ExpertRegionAssessment("Zakarpattia", "above_average"),
        ExpertRegionAssessment("Lviv", "above_average"),
        ExpertRegionAssessment("Ivano-Frankivsk", "average"),
    ]
    repeat_visits = {"Zakarpattia": 0.85, "Lviv": 0.78, "Ivano-Frankivsk": 0.88}
    return default_config, participants, experts, repeat_visits
