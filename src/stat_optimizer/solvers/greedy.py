"""Greedy allocator with lookahead.

- select_best_allocation: one decision. Tries every move of 1..lookahead points
  on every free attribute and keeps the best average gain per point.
- run_greedy: repeats that decision until the budget is spent or no move
  clears the minimum-gain threshold.

A pure single-point greedy stalls on flat stretches of a curve (a +1 that
gains nothing before a +2 that gains a lot); the lookahead moves are what get
it across them.
"""

from __future__ import annotations

from typing import Callable, Mapping, Optional, Sequence

from ..defaults import DEFAULT_LOOKAHEAD, MIN_GAIN_THRESHOLD
from ..models import AttributeBounds, AttributeSet, GreedyStep, SolverResult
from ..objectives import ObjectiveFunction

StepCallback = Callable[[GreedyStep, AttributeSet, float], None]


def select_best_allocation(
    free_attributes: Sequence[str],
    current: AttributeSet,
    current_score: float,
    objective: ObjectiveFunction,
    lookahead: int,
    remaining_budget: int,
    *,
    max_values: Mapping[str, int],
    min_gain: float = MIN_GAIN_THRESHOLD,
) -> Optional[GreedyStep]:
    """Best next move, or None when nothing gains more than `min_gain` per point.

    Moves are compared by average gain per point. Attributes are tried in
    order, each with every move size before the next attribute, so on ties the
    earlier attribute wins and, within it, the smaller move.
    """
    if lookahead < 1:
        raise ValueError(f"lookahead must be >= 1, got {lookahead}")

    best: Optional[GreedyStep] = None
    best_gain = 0.0
    for attribute in free_attributes:
        for points in range(1, min(lookahead, remaining_budget) + 1):
            level = current.get(attribute) + points
            if level > max_values[attribute]:
                break
            score = objective(current.replace(**{attribute: level}))
            gain = (score - current_score) / points
            if gain > best_gain:
                best_gain = gain
                best = GreedyStep(attribute=attribute, points=points, gain=gain)

    if best is None or best.gain <= min_gain:
        return None
    return best


def run_greedy(
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
    lookahead: int = DEFAULT_LOOKAHEAD,
    *,
    base: Optional[AttributeSet] = None,
    min_gain: float = MIN_GAIN_THRESHOLD,
    on_step: Optional[StepCallback] = None,
) -> SolverResult:
    """Spend up to `budget` points above `base` (defaults to `start`) greedily.

    `on_step(step, stats, score)` is called after every applied move with the
    freshly evaluated score.
    """
    free = list(free_attributes)
    base = base or start
    max_values = bounds.max_values()

    current = start
    score = objective(current)
    used = current.points_above(base, free)

    while used < budget:
        step = select_best_allocation(
            free, current, score, objective, lookahead, budget - used,
            max_values=max_values, min_gain=min_gain,
        )
        if step is None:
            break
        current = current.replace(**{step.attribute: current.get(step.attribute) + step.points})
        used += step.points
        score = objective(current)
        if on_step is not None:
            on_step(step, current, score)

    return SolverResult(stats=current, raw_score=score, strategy="greedy")

