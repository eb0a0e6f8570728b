"""
fuzzy/membership.py
-------------------
Fuzzy membership shapes and the clamp/normalise primitives they rely on.

Shapes
------
* :func:`decreasing_spline_membership`   — Z-shaped spline, 1 → 0 over ``[a, b]``.
* :func:`increasing_s_curve_membership`  — S-shaped spline, 0 → 1 over ``[a, b]``.
* :func:`conical_membership`             — triangle peaking at ``b``.

Both splines are quadratic and symmetric around the midpoint of ``[a, b]``::

    r = (x - a) / (b - a)          t = (x - b) / (b - a)

    Z(x) = 1 - 2r²   if x <= mid       S(x) = 2r²       if x <= mid
           2t²       otherwise                1 - 2t²   otherwise

Results depend on this exact evaluation order down to the last bit.
"""

from __future__ import annotations

import math

from regionrisk.core.errors import NumericError


def _require_finite(name: str, *values: float) -> None:
    if not all(math.isfinite(v) for v in values):
        raise NumericError(f"{name} parameters must be finite numbers, got {values!r}.")


def clamp(value: float, min_value: float, max_value: float) -> float:
    """
    Restrict *value* to ``[min_value, max_value]``.

    Raises:
        NumericError: If *value* is not finite or ``min_value > max_value``.
    """
    if not math.isfinite(value):
        raise NumericError(f"Expected a finite number to clamp, got {value!r}.")
    if min_value > max_value:
        raise NumericError(f"Clamp bounds are invalid: {min_value!r} > {max_value!r}.")
    return min(max_value, max(min_value, value))


def normalize(value: float, min_value: float, max_value: float) -> float:
    """
    Map *value* linearly from ``[min_value, max_value]`` onto ``[0, 1]`` and clamp.

    Raises:
        NumericError: If any input is not finite or the range is empty.
    """
    _require_finite("normalize", value, min_value, max_value)
    if min_value == max_value:
        raise NumericError("Normalization range must be non-zero.")
    ratio = (value - min_value) / (max_value - min_value)
    return clamp(ratio, 0, 1)


def decreasing_spline_membership(value: float, a: float, b: float) -> float:
    """Z-spline: 1 for ``value <= a``, 0 for ``value >= b``."""
    _require_finite("Z-spline", value, a, b)
    if a >= b:
        raise NumericError(f"Z-spline requires a < b, got a={a!r}, b={b!r}.")
    if value <= a:
        return 1.0
    if value >= b:
        return 0.0
    midpoint = (a + b) / 2
    if value <= midpoint:
        ratio = (value - a) / (b - a)
        return 1 - 2 * ratio * ratio
    tail_ratio = (value - b) / (b - a)
    return 2 * tail_ratio * tail_ratio


def increasing_s_curve_membership(value: float, a: float, b: float) -> float:
    """S-curve: 0 for ``value <= a``, 1 for ``value >= b``."""
    _require_finite("S-curve", value, a, b)
    if a >= b:
        raise NumericError(f"S-curve membership requires a < b, got a={a!r}, b={b!r}.")
    if value <= a:
        return 0.0
    if value >= b:
        return 1.0
    midpoint = (a + b) / 2
    if value <= midpoint:
        ratio = (value - a) / (b - a)
        return 2 * ratio * ratio
    tail_ratio = (value - b) / (b - a)
    return 1 - 2 * tail_ratio * tail_ratio


def conical_membership(value: float, a: float, b: float, c: float) -> float:
    """Triangular membership rising from *a* to a peak of exactly 1 at *b*, falling to *c*."""
    _require_finite("Conical membership", value, a, b, c)
    if a >= b or b >= c:
        raise NumericError(
            f"Conical membership requires a < b < c, got a={a!r}, b={b!r}, c={c!r}."
        )
    if value <= a or value >= c:
        return 0.0
    if value == b:
        return 1.0
    if value < b:
        return (value - a) / (b - a)
    return (c - value) / (c - b)
