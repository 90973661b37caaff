"""Brute-force oracle: enumerates every allocation. Exponential in the number of
free attributes, so only for small budgets (verification and tests)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from ..defaults import BRUTE_FORCE_TOLERANCE
from ..models import AttributeBounds, AttributeSet, SolverResult
from ..objectives import ObjectiveFunction


def _allocations(room: List[int], total: int) -> Iterator[List[int]]:
    """Every way to place exactly `total` points with at most room[i] in slot i."""
    if not room:
        if total == 0:
            yield []
        return
    head, rest = room[0], room[1:]
    rest_room = sum(rest)
    for take in range(min(head, total), -1, -1):
        if total - take > rest_room:
            break
        for tail in _allocations(rest, total - take):
            yield [take] + tail


def brute_force_at_budget(
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
) -> SolverResult:
    """Best allocation of exactly min(budget, capacity) points above `start`."""
    free = list(free_attributes)
    room = [max(0, bounds[a].max - start.get(a)) for a in free]
    target = min(budget, sum(room))

    best: Optional[SolverResult] = None
    for alloc in _allocations(room, target):
        stats = start.replace(**{a: start.get(a) + add for a, add in zip(free, alloc)})
        score = objective(stats)
        if best is None or score > best.raw_score:
            best = SolverResult(stats=stats, raw_score=score, strategy="brute-force")

    assert best is not None  # target never exceeds the room, so one allocation always exists
    return best


@dataclass(frozen=True, slots=True)
class BruteForceComparison:
    solver: SolverResult
    oracle: SolverResult
    matches: bool
    value_diff: float
    diverging_attributes: Dict[str, int]


def compare_to_brute_force(
    solver_result: SolverResult,
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
    *,
    tolerance: float = BRUTE_FORCE_TOLERANCE,
) -> BruteForceComparison:
    """Check a solver result against the oracle.

    `matches` is true when the solver is within `tolerance` of the optimum.
    `diverging_attributes` maps each attribute where the builds differ to
    (solver - oracle).
    """
    oracle = brute_force_at_budget(start, free_attributes, budget, bounds, objective)
    diff = oracle.raw_score - solver_result.raw_score
    diverging = {
        a: solver_result.stats.get(a) - oracle.stats.get(a)
        for a in free_attributes
        if solver_result.stats.get(a) != oracle.stats.get(a)
    }
    return BruteForceComparison(
        solver=solver_result,
        oracle=oracle,
        matches=diff <= tolerance,
        value_diff=diff,
        diverging_attributes=diverging,
    )
