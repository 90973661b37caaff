"""Exhaustive solver for exactly two free attributes."""

from __future__ import annotations

from typing import Sequence

from ..models import AttributeBounds, AttributeSet, SolverResult
from ..objectives import ObjectiveFunction


def solve_2d_exact(
    start: AttributeSet,
    free_attributes: Sequence[str],
    budget: int,
    bounds: AttributeBounds,
    objective: ObjectiveFunction,
) -> SolverResult:
    """Try every split of `budget` between the two attributes.

    Each side is clamped to its max, so a split that overflows one side
    leaves points unspent rather than going over. Starts from the unmodified
    configuration and only replaces it on a strictly higher score; splits are
    visited from "all into the first attribute" downwards so ties favor it.
    """
    if len(free_attributes) != 2:
        raise ValueError(f"solve_2d_exact needs exactly 2 free attributes, got {len(free_attributes)}")
    a, b = free_attributes
    start_a, start_b = start.get(a), start.get(b)
    max_a, max_b = bounds[a].max, bounds[b].max

    best_stats = start
    best_score = objective(start)
    for add_a in range(budget, -1, -1):
        candidate = start.replace(**{
            a: min(start_a + add_a, max_a),
            b: min(start_b + budget - add_a, max_b),
        })
        score = objective(candidate)
        if score > best_score:
            best_stats, best_score = candidate, score

    return SolverResult(stats=best_stats, raw_score=best_score, strategy="exact-2d")
