"""
core/models.py
--------------
Input entities and the closed ordinal scales used throughout the engine.

Scales
------
* :class:`GroupTerm`          — severity of one criteria group, ``T1`` (best) … ``T5``.
* :class:`IndividualRiskTerm` — combined severity of one participant, ``L`` … ``H``.
* :class:`RiskLabel`          — qualitative label of a region's risk index.
* :class:`ExpertSafetyLevel`  — expert judgement of a region's safety.

Entities
--------
* :class:`ParticipantAssessment`  — one survey response.
* :class:`ExpertRegionAssessment` — one expert safety judgement for a region.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from regionrisk.core.errors import ValidationError


class GroupTerm(str, Enum):
    T1 = "T1"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"
    T5 = "T5"


class IndividualRiskTerm(str, Enum):
    L = "L"
    BA = "BA"
    A = "A"
    AA = "AA"
    H = "H"


class RiskLabel(str, Enum):
    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    VERY_LOW = "very_low"


class ExpertSafetyLevel(str, Enum):
    LOW = "low"
    BELOW_AVERAGE = "below_average"
    AVERAGE = "average"
    ABOVE_AVERAGE = "above_average"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Any) -> "ExpertSafetyLevel":
        """Return the level named by *value*, raising ``ValidationError`` if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(level.value for level in cls)
            raise ValidationError(
                f"Unknown expert safety level {value!r}. Expected one of: {valid}."
            ) from None


# ---------------------------------------------------------------------------
# Input entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParticipantAssessment:
    """
    One participant's linguistic answers, grouped by criteria group.

    Attributes:
        participant_id: Unique identifier of the participant.
        region_id:      Region the participant assessed.
        criteria:       ``group name -> criterion key -> linguistic token``.
    """

    participant_id: str
    region_id: str
    criteria: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParticipantAssessment":
        """Build from a record using either ``participant_id`` or ``participantId`` keys."""
        participant_id = _first_present(data, "participant_id", "participantId")
        region_id = _first_present(data, "region_id", "regionId")
        if participant_id is None or region_id is None:
            raise ValidationError(
                f"Participant record requires participant and region ids, got keys {sorted(data)}."
            )
        criteria = data.get("criteria") or {}
        if not isinstance(criteria, Mapping):
            raise ValidationError(
                f"Participant {participant_id} criteria must be a mapping of groups."
            )
        return cls(
            participant_id=str(participant_id),
            region_id=str(region_id),
            criteria={
                str(group): {str(k): str(v) for k, v in (answers or {}).items()}
                for group, answers in criteria.items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participantId": self.participant_id,
            "regionId": self.region_id,
            "criteria": {group: dict(answers) for group, answers in self.criteria.items()},
        }


@dataclass(frozen=True)
class ExpertRegionAssessment:
    """
    An expert's safety judgement for one region.

    ``assessed_at`` is only consulted by the ingestion layer when it picks
    the latest assessment per region; the engine ignores it.
    """

    region_id: str
    safety_level: ExpertSafetyLevel
    assessed_at: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "safety_level", ExpertSafetyLevel.parse(self.safety_level))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExpertRegionAssessment":
        region_id = _first_present(data, "region_id", "regionId")
        level = _first_present(data, "safety_level", "safetyLevel")
        if region_id is None or level is None:
            raise ValidationError(
                f"Expert record requires a region id and safety level, got keys {sorted(data)}."
            )
        assessed_at = _first_present(data, "assessed_at", "assessedAt", "created_at", "createdAt")
        return cls(
            region_id=str(region_id),
            safety_level=ExpertSafetyLevel.parse(level),
            assessed_at=None if assessed_at is None else str(assessed_at),
        )


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None
