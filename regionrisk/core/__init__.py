"""core sub-package — configuration, input models, errors, results and manifests."""

from regionrisk.core.config import (
    RiskModelConfig,
    Thresholds,
    ExpertScale,
    ModelWeights,
    DEFAULT_CONFIG,
    load_config,
)
from regionrisk.core.config_hashing import compute_config_hash
from regionrisk.core.errors import RiskModelError, NumericError, ValidationError, MissingInputError
from regionrisk.core.execution import ExecutionManifest
from regionrisk.core.models import (
    GroupTerm,
    IndividualRiskTerm,
    RiskLabel,
    ExpertSafetyLevel,
    ParticipantAssessment,
    ExpertRegionAssessment,
)
from regionrisk.core.result_schema import (
    ParticipantDiagnostics,
    RegionDiagnostics,
    RegionRiskResult,
    RiskComputationResult,
)

__all__ = [
    "RiskModelConfig",
    "Thresholds",
    "ExpertScale",
    "ModelWeights",
    "DEFAULT_CONFIG",
    "load_config",
    "compute_config_hash",
    "RiskModelError",
    "NumericError",
    "ValidationError",
    "MissingInputError",
    "ExecutionManifest",
    "GroupTerm",
    "IndividualRiskTerm",
    "RiskLabel",
    "ExpertSafetyLevel",
    "ParticipantAssessment",
    "ExpertRegionAssessment",
    "ParticipantDiagnostics",
    "RegionDiagnostics",
    "RegionRiskResult",
    "RiskComputationResult",
]
