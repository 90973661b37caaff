"""Scaling-curve evaluation."""

from __future__ import annotations

from typing import List

from .models import ScalingCurve


def _shape(ratio: float, exponent: float) -> float:
    if exponent > 0:
        return ratio ** exponent
    if exponent < 0:
        return 1.0 - (1.0 - ratio) ** abs(exponent)
    return 0.0


def curve_value(curve: ScalingCurve, level: float) -> float:
    """Cumulative scaling percent of `curve` at `level`.

    Levels below the first knot clamp to its value, above the last knot to the
    last value.
    """
    points = curve.points
    if level <= points[0][0]:
        return points[0][1]
    if level >= points[-1][0]:
        return points[-1][1]

    for i in range(1, len(points)):
        x1, y1 = points[i]
        if level <= x1:
            x0, y0 = points[i - 1]
            ratio = (level - x0) / (x1 - x0)
            return y0 + (y1 - y0) * _shape(ratio, curve.exponents[i - 1])
    return points[-1][1]  # unreachable: level < last knot


def saturation(curve: ScalingCurve, level: float) -> float:
    """Curve value as a fraction (100% -> 1.0)."""
    return curve_value(curve, level) / 100.0


def interior_levels(curve: ScalingCurve) -> List[int]:
    """Integer levels of the knots between the first and last, where the slope can change."""
    return [int(round(x)) for x in curve.levels[1:-1]]
