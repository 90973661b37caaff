"""Stat optimizer entry point.

Wires a request to the solvers:
    - validates bounds,
    - spends points on weapon requirements first,
    - builds the objective and the breakpoint map for the weapon,
    - dispatches to the unified solver and re-scores the winner.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from .breakpoints import collect_item_curves, extract_breakpoints
from .defaults import DAMAGE_ATTRIBUTES, TWO_HAND_STRENGTH_MULTIPLIER
from .models import (
    AttackRating,
    AttributeSet,
    GameData,
    InvestmentPoint,
    ObjectiveMode,
    SkillDamage,
    SolverResult,
    SolverSettings,
    SolveRequest,
    SpellPower,
)
from .objectives import ObjectiveContext, ObjectiveFunction, create_objective, mode_label
from .solvers.brute_force import BruteForceComparison, compare_to_brute_force
from .solvers.path import investment_path
from .solvers.unified import Strategy, choose_strategy, solve


@dataclass(slots=True)
class PreparedSolve:
    """A request resolved into solver inputs."""

    base: AttributeSet
    start: AttributeSet
    free: List[str]
    total_budget: int
    remaining_budget: int
    mode: ObjectiveMode
    objective: ObjectiveFunction
    breakpoints: Dict[str, List[int]]
    requirement_levels: Dict[str, int]


class StatOptimizer:
    """Finds the attribute allocation that maximizes a weapon's damage.

    The game data is injected once and shared by every request.
    """

    def __init__(
        self,
        data: GameData,
        *,
        logger: Optional[logging.Logger] = None,
        settings: Optional[SolverSettings] = None,
    ) -> None:
        self.data = data
        self.logger = logger or logging.getLogger("stat_optimizer")
        self.settings = settings or SolverSettings()

    # ---------------- Public API ----------------
    def optimize(self, request: SolveRequest, *, strategy: Optional[Strategy] = None) -> SolverResult:
        """Best build for the request. Raises ValueError on invalid bounds or budget."""
        prep = self.prepare(request)
        if not prep.free:
            self.logger.info("ℹ️ All attributes locked — evaluating the fixed build.")
            return SolverResult(stats=prep.start, raw_score=prep.objective(prep.start), strategy="fixed")

        chosen = strategy or choose_strategy(prep.free)
        self.logger.info(
            f"🧮 Optimizing {request.weapon_name} ({request.affinity} +{request.upgrade_level}) "
            f"for {mode_label(prep.mode)}: {len(prep.free)} free attributes, "
            f"{prep.remaining_budget}/{prep.total_budget} points after requirements"
        )
        self.logger.debug(f"🧭 Strategy: {chosen.value}")
        for attribute, levels in prep.breakpoints.items():
            self.logger.debug(f"📍 {attribute} breakpoints: {levels or '(none)'}")

        t0 = time.perf_counter()
        result = solve(
            prep.start,
            prep.free,
            prep.remaining_budget,
            request.bounds,
            prep.objective,
            breakpoints=prep.breakpoints,
            lookahead=self.settings.lookahead,
            min_gain=self.settings.min_gain,
            default_breakpoints=self.settings.default_breakpoints,
            strategy=strategy,
        )
        elapsed = time.perf_counter() - t0

        # Fresh evaluation of the winning build
        final = SolverResult(
            stats=result.stats,
            raw_score=prep.objective(result.stats),
            strategy=result.strategy,
        )
        self.logger.info(f"✅ {final.strategy} finished in {elapsed:.3f}s — score {final.score}")
        return final

    def evaluate(self, request: SolveRequest, stats: AttributeSet) -> SolverResult:
        """Score a fixed build with the request's weapon and mode."""
        mode = self.resolve_mode(request)
        objective = create_objective(mode, self._context(request))
        return SolverResult(stats=stats, raw_score=objective(stats), strategy="fixed")

    def investment_path(
        self,
        request: SolveRequest,
        max_budget: Optional[int] = None,
        *,
        ignore_requirements: bool = False,
    ) -> List[InvestmentPoint]:
        """Damage at every invested point from the minimums up to `max_budget`.

        With `ignore_requirements` unmet requirements carry no penalty and the
        path does not front-load them.
        """
        request.bounds.validate()
        base = request.bounds.minimum_set()
        free = request.bounds.free_attributes()
        capacity = request.bounds.capacity(free, base)
        budget = capacity if max_budget is None else min(max(0, max_budget), capacity)
        objective = create_objective(
            self.resolve_mode(request), self._context(request, ignore_requirements=ignore_requirements)
        )
        self.logger.info(f"📈 Building investment path over {budget} points")
        return investment_path(
            base, free, budget, request.bounds, objective,
            requirement_levels={} if ignore_requirements else self.requirement_levels(request),
            lookahead=self.settings.lookahead,
            min_gain=self.settings.min_gain,
        )

    def verify(self, request: SolveRequest) -> BruteForceComparison:
        """Compare `optimize` with the exhaustive oracle (small budgets only)."""
        prep = self.prepare(request)
        result = self.optimize(request)
        self.logger.info(f"🧪 Brute-forcing {prep.remaining_budget} points over {len(prep.free)} attributes")
        return compare_to_brute_force(
            result, prep.start, prep.free, prep.remaining_budget, request.bounds, prep.objective,
        )

    # ---------------- Request preparation ----------------
    def resolve_mode(self, request: SolveRequest) -> ObjectiveMode:
        if request.mode is not None:
            return request.mode
        weapon = self.data.weapon(request.weapon_name)
        affinity = weapon.affinities.get(request.affinity) if weapon else None
        if affinity is not None and affinity.is_catalyst:
            return SpellPower()
        return AttackRating()

    def requirement_levels(self, request: SolveRequest) -> Dict[str, int]:
        """Attribute levels needed to meet the weapon's requirements with this grip."""
        weapon = self.data.weapon(request.weapon_name)
        if weapon is None:
            return {}
        out: Dict[str, int] = {}
        for attribute in DAMAGE_ATTRIBUTES:
            req = weapon.requirement(attribute)
            if req <= 0:
                continue
            if attribute == "strength" and weapon.two_hand_bonus_applies(request.two_handing):
                req = math.ceil(req / TWO_HAND_STRENGTH_MULTIPLIER)
            out[attribute] = req
        return out

    def prepare(self, request: SolveRequest) -> PreparedSolve:
        bounds = request.bounds
        bounds.validate()
        if request.points_budget is not None and request.points_budget < 0:
            raise ValueError(f"points_budget must be >= 0, got {request.points_budget}")

        base = bounds.minimum_set()
        free = bounds.free_attributes()
        capacity = bounds.capacity(free, base)
        total = capacity if request.points_budget is None else min(request.points_budget, capacity)

        if self.data.weapon(request.weapon_name) is None:
            self.logger.warning(f"⚠️ Unknown weapon {request.weapon_name!r} — every build scores 0.")

        # Requirements first, in attribute order; a short budget leaves the last one partial.
        requirements = self.requirement_levels(request)
        start = base
        spent = 0
        for attribute in free:
            target = min(requirements.get(attribute, 0), bounds[attribute].max)
            need = target - start.get(attribute)
            if need <= 0:
                continue
            add = min(need, total - spent)
            if add <= 0:
                self.logger.warning(f"⚠️ Budget exhausted before meeting {attribute} requirement {target}.")
                continue
            start = start.replace(**{attribute: start.get(attribute) + add})
            spent += add
            if add < need:
                self.logger.warning(f"⚠️ {attribute} requirement {target} only partly met ({start.get(attribute)}).")

        mode = self.resolve_mode(request)
        skill_name = mode.skill_name if isinstance(mode, SkillDamage) else None
        curves = collect_item_curves(self.data, request.weapon_name, request.affinity, skill_name=skill_name)

        return PreparedSolve(
            base=base,
            start=start,
            free=free,
            total_budget=total,
            remaining_budget=total - spent,
            mode=mode,
            objective=create_objective(mode, self._context(request)),
            breakpoints=extract_breakpoints(curves, free),
            requirement_levels=requirements,
        )

    def _context(self, request: SolveRequest, *, ignore_requirements: bool = False) -> ObjectiveContext:
        return ObjectiveContext(
            data=self.data,
            weapon_name=request.weapon_name,
            affinity=request.affinity,
            upgrade_level=request.upgrade_level,
            two_handing=request.two_handing,
            ignore_requirements=ignore_requirements,
        )
