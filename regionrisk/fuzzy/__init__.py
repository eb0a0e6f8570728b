"""fuzzy sub-package — membership shapes and numeric primitives."""

from regionrisk.fuzzy.membership import (
    clamp,
    normalize,
    decreasing_spline_membership,
    increasing_s_curve_membership,
    conical_membership,
)

__all__ = [
    "clamp",
    "normalize",
    "decreasing_spline_membership",
    "increasing_s_curve_membership",
    "conical_membership",
]
