"""
regionrisk — Regional risk-intelligence engine v0.1
"""

__version__ = "0.1.0"
__author__ = "regionrisk"

from regionrisk.core.config import RiskModelConfig, DEFAULT_CONFIG, load_config
from regionrisk.assessment.engine import RegionRiskEngine, compute_region_risk

__all__ = [
    "RiskModelConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "RegionRiskEngine",
    "compute_region_risk",
    "__version__",
]
