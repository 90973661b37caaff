"""Investment path: the best build at every point count from 0 to a budget,
for plotting damage against levels invested."""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from ..defaults import DEFAULT_LOOKAHEAD, MIN_GAIN_THRESHOLD
from ..models import AttributeBounds, AttributeSet, InvestmentPoint
from ..objectives import ObjectiveFunction
from .greedy import select_best_allocation


def investment_path(
    start: AttributeSet,
    free_attributes: Sequence[str],
    max_budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
    *,
    requirement_levels: Optional[Mapping[str, int]] = None,
    lookahead: int = DEFAULT_LOOKAHEAD,
    min_gain: float = MIN_GAIN_THRESHOLD,
) -> List[InvestmentPoint]:
    """One point per invested level, starting at 0.

    Requirements are met first, one level at a time in attribute order; the
    rest follows greedy selection with multi-point moves recorded per point.
    Stops early when no move gains anything.
    """
    free = list(free_attributes)
    max_values = bounds.max_values()
    current = start
    invested = 0
    path = [InvestmentPoint(points_invested=0, stats=current, raw_score=objective(current))]

    def advance(attribute: str) -> None:
        nonlocal current, invested
        current = current.replace(**{attribute: current.get(attribute) + 1})
        invested += 1
        path.append(InvestmentPoint(points_invested=invested, stats=current, raw_score=objective(current)))

    for attribute in free:
        target = min((requirement_levels or {}).get(attribute, 0), max_values[attribute])
        while current.get(attribute) < target and invested < max_budget:
            advance(attribute)

    while invested < max_budget:
        step = select_best_allocation(
            free, current, path[-1].raw_score, objective, lookahead, max_budget - invested,
            max_values=max_values, min_gain=min_gain,
        )
        if step is None:
            break
        for _ in range(step.points):
            advance(step.attribute)

    return path
