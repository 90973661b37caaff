"""Multi-start greedy.

Greedy from one start can commit to an attribute early and never reach a
distant breakpoint on another. Here greedy is re-run from many starts, each
pinning one attribute of a pair at a breakpoint and pouring the rest of the
budget into the other, and the best finish wins.
"""

from __future__ import annotations

from itertools import combinations
from typing import List, Mapping, Optional, Sequence

from ..defaults import CURVE_BREAKPOINTS, DEFAULT_LOOKAHEAD, MIN_GAIN_THRESHOLD
from ..models import AttributeBounds, AttributeSet, SolverResult
from ..objectives import ObjectiveFunction
from .greedy import run_greedy


def _anchors(
    attribute: str,
    breakpoints: Optional[Mapping[str, Sequence[int]]],
    default_breakpoints: Sequence[int],
) -> Sequence[int]:
    if breakpoints is not None and attribute in breakpoints:
        return breakpoints[attribute]
    return default_breakpoints


def generate_breakpoint_starts(
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    breakpoints: Optional[Mapping[str, Sequence[int]]] = None,
    *,
    default_breakpoints: Sequence[int] = CURVE_BREAKPOINTS,
) -> List[AttributeSet]:
    """Candidate start configurations; the unmodified start is always first.

    For each ordered pair (a, b) of free attributes and each breakpoint bp of a
    with start[a] < bp <= max[a] and bp - start[a] <= budget, the candidate has
    a = bp and b raised by the leftover budget (clamped to max[b]). Attributes
    missing from `breakpoints` use `default_breakpoints`.
    """
    starts: List[AttributeSet] = [start]
    for first, second in combinations(free_attributes, 2):
        for pinned, filler in ((first, second), (second, first)):
            lo = start.get(pinned)
            hi = bounds[pinned].max
            for bp in _anchors(pinned, breakpoints, default_breakpoints):
                cost = bp - lo
                if bp <= lo or bp > hi or cost > budget:
                    continue
                filled = min(start.get(filler) + budget - cost, bounds[filler].max)
                starts.append(start.replace(**{pinned: bp, filler: filled}))
    return starts


def solve_multi_start(
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
    breakpoints: Optional[Mapping[str, Sequence[int]]] = None,
    lookahead: int = DEFAULT_LOOKAHEAD,
    *,
    min_gain: float = MIN_GAIN_THRESHOLD,
    default_breakpoints: Sequence[int] = CURVE_BREAKPOINTS,
) -> SolverResult:
    """Best greedy finish over all breakpoint starts. Earlier candidates win ties."""
    candidates = generate_breakpoint_starts(
        start, free_attributes, budget, bounds, breakpoints,
        default_breakpoints=default_breakpoints,
    )
    best: Optional[SolverResult] = None
    for candidate in candidates:
        result = run_greedy(
            candidate, free_attributes, budget, bounds, objective, lookahead,
            base=start, min_gain=min_gain,
        )
        if best is None or result.raw_score > best.raw_score:
            best = result

    assert best is not None  # the unmodified start is always a candidate
    return SolverResult(stats=best.stats, raw_score=best.raw_score, strategy="multi-start-greedy")

