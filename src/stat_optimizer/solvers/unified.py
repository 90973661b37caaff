"""Strategy dispatch: exact search for two free attributes, multi-start greedy otherwise."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Sequence

from ..defaults import CURVE_BREAKPOINTS, DEFAULT_LOOKAHEAD, MIN_GAIN_THRESHOLD
from ..models import AttributeBounds, AttributeSet, SolverResult
from ..objectives import ObjectiveFunction
from .exact import solve_2d_exact
from .multistart import solve_multi_start


class Strategy(str, Enum):
    EXACT_2D = "exact-2d"
    MULTI_START = "multi-start-greedy"


def choose_strategy(free_attributes: Sequence[str]) -> Strategy:
    return Strategy.EXACT_2D if len(free_attributes) == 2 else Strategy.MULTI_START


def solve(
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
    *,
    breakpoints: Optional[Mapping[str, Sequence[int]]] = None,
    lookahead: int = DEFAULT_LOOKAHEAD,
    min_gain: float = MIN_GAIN_THRESHOLD,
    default_breakpoints: Sequence[int] = CURVE_BREAKPOINTS,
    strategy: Optional[Strategy] = None,
) -> SolverResult:
    """Optimize `budget` points above `start` over `free_attributes`.

    No free attributes or no budget returns the start as-is (strategy "fixed").
    `strategy` forces a solver; forcing EXACT_2D needs exactly two free attributes.
    """
    free = list(free_attributes)
    if not free or budget <= 0:
        return SolverResult(stats=start, raw_score=objective(start), strategy="fixed")

    chosen = strategy or choose_strategy(free)
    if chosen is Strategy.EXACT_2D:
        if len(free) != 2:
            raise ValueError(f"{Strategy.EXACT_2D.value} needs exactly 2 free attributes, got {len(free)}")
        return solve_2d_exact(start, free, budget, bounds, objective)
    return solve_multi_start(
        start, free, budget, bounds, objective, breakpoints, lookahead,
        min_gain=min_gain, default_breakpoints=default_breakpoints,
    )
