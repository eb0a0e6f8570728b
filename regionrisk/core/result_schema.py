"""
core/result_schema.py
---------------------
Structured, typed result objects returned by the region risk engine.

Classes
-------
* :class:`ParticipantDiagnostics` — group sums, group terms and the combined
                                    term of one participant.
* :class:`RegionDiagnostics`      — every intermediate quantity of a region.
* :class:`RegionRiskResult`       — risk index, label and diagnostics of a region.
* :class:`RiskComputationResult`  — all region results of one run plus the
                                    :class:`~regionrisk.core.execution.ExecutionManifest`.

Serialisation
-------------
``to_dict()`` emits the camelCase shape read by dashboards
(``regionId``, ``riskIndex``, ``diagnostics.perParticipant`` …).  Values are
not rounded; the transport layer forwards them as-is.
"""

from __future__ import annotations

import json
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from regionrisk.core.execution import ExecutionManifest
from regionrisk.core.models import ExpertSafetyLevel, GroupTerm, IndividualRiskTerm, RiskLabel


@dataclass
class ParticipantDiagnostics:
    """Classification trace of one participant."""

    group_sums: Dict[str, float]
    group_terms: Dict[str, GroupTerm]
    individual_risk_term: IndividualRiskTerm

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groupSums": dict(self.group_sums),
            "groupTerms": {g: t.value for g, t in self.group_terms.items()},
            "individualRiskTerm": self.individual_risk_term.value,
        }


@dataclass
class RegionDiagnostics:
    """
    Intermediate quantities of one region's computation.

    Attributes:
        sample_size:         Number of participants in the region.
        per_participant:     Participant id → :class:`ParticipantDiagnostics`,
                             ordered by participant id.
        delta_risk:          Weighted mean severity score (0–100).
        phi_risk:            Z-spline membership of ``delta_risk``.
        repeat_visit:        Repeat-visit ratio clamped to ``[0, 1]``.
        sense_of_safety:     Distance-from-ideal composite in ``[0, 1]``.
        expert_safety_level: Expert judgement used for the region.
        omega:               Expert upper bound scaled by sense of safety.
        mu_r:                S-curve membership of ``omega``, clamped.
    """

    sample_size: int
    per_participant: "OrderedDict[str, ParticipantDiagnostics]"
    delta_risk: float
    phi_risk: float
    repeat_visit: float
    sense_of_safety: float
    expert_safety_level: ExpertSafetyLevel
    omega: float
    mu_r: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sampleSize": self.sample_size,
            "perParticipant": {pid: d.to_dict() for pid, d in self.per_participant.items()},
            "deltaRisk": self.delta_risk,
            "phiRisk": self.phi_risk,
            "repeatVisit": self.repeat_visit,
            "senseOfSafety": self.sense_of_safety,
            "expertSafetyLevel": self.expert_safety_level.value,
            "omega": self.omega,
            "muR": self.mu_r,
        }


@dataclass
class RegionRiskResult:
    """Final risk index and label of one region, with its full diagnostics."""

    region_id: str
    risk_index: float
    risk_label: RiskLabel
    diagnostics: RegionDiagnostics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regionId": self.region_id,
            "riskIndex": self.risk_index,
            "riskLabel": self.risk_label.value,
            "diagnostics": self.diagnostics.to_dict(),
        }


@dataclass
class RiskComputationResult:
    """
    Outcome of one :meth:`~regionrisk.assessment.engine.RegionRiskEngine.run`.

    ``results`` is ordered by region id ascending.
    """

    manifest: ExecutionManifest
    results: List[RegionRiskResult] = field(default_factory=list)

    def get(self, region_id: str) -> Optional[RegionRiskResult]:
        for result in self.results:
            if result.region_id == region_id:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "manifest": self.manifest.to_dict(),
            "configVersion": self.manifest.config_version,
            "results": [r.to_dict() for r in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten the region results into one row per region.

        Per-participant diagnostics are omitted; the region-level quantities
        are kept as columns.
        """
        rows = [
            {
                "region_id": r.region_id,
                "risk_index": r.risk_index,
                "risk_label": r.risk_label.value,
                "sample_size": r.diagnostics.sample_size,
                "delta_risk": r.diagnostics.delta_risk,
                "phi_risk": r.diagnostics.phi_risk,
                "repeat_visit": r.diagnostics.repeat_visit,
                "sense_of_safety": r.diagnostics.sense_of_safety,
                "expert_safety_level": r.diagnostics.expert_safety_level.value,
                "omega": r.diagnostics.omega,
                "mu_r": r.diagnostics.mu_r,
            }
            for r in self.results
        ]
        columns = [
            "region_id", "risk_index", "risk_label", "sample_size", "delta_risk",
            "phi_risk", "repeat_visit", "sense_of_safety", "expert_safety_level",
            "omega", "mu_r",
        ]
        return pd.DataFrame(rows, columns=columns)
