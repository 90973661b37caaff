# apps/cli/main.py
"""Command-line interface for the stat optimizer"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, Optional, Tuple

import click

from stat_optimizer.calculator import calculate_ar
from stat_optimizer.io.loader import Loader
from stat_optimizer.models import AttributeBounds, AttributeSet, SolveRequest
from stat_optimizer.objectives import parse_mode
from stat_optimizer.optimizer import StatOptimizer
from stat_optimizer.reporter import OptimizationReporter, ReportOptions
from stat_optimizer.utils import parse_bound_spec, parse_stat_spec, setup_logger
from stat_optimizer.worker import SolverWorker


# ---------- Root group: loads game data once ----------
@click.group()
@click.option(
    "--data",
    "data_path",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=str),
    required=True,
    help="Path to the game-data JSON bundle (REQUIRED).",
)
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, readable=True, path_type=str),
    default=None,
    show_default=True,
    help="Optional solver settings JSON (lookahead, min_gain, ...).",
)
@click.option("--verbose", is_flag=True, help="Enable detailed debug logs.")
@click.pass_context
def cli(ctx: click.Context, data_path: str, settings_path: str | None, verbose: bool):
    """🧮 Stat Optimizer: best attribute spread for a weapon"""
    logger = setup_logger(verbose)
    loader = Loader(logger)

    logger.info("🚀 Loading game data...")
    try:
        data = loader.load_game_data(data_path)
    except (TypeError, ValueError) as exc:
        raise click.ClickException(f"Invalid game data: {exc}")
    settings = loader.load_settings_or_default(settings_path)

    ctx.obj = {
        "logger": logger,
        "loader": loader,
        "data": data,
        "settings": settings,
    }


# ---------- Shared request options ----------
MODE_CHOICE = click.Choice(["AR", "SP", "SKILL"], case_sensitive=False)

_REQUEST_OPTIONS = (
    click.argument("weapon"),
    click.option("--affinity", default="Standard", show_default=True, help="Weapon affinity."),
    click.option("--level", "upgrade_level", type=int, default=0, show_default=True, help="Upgrade level."),
    click.option("--mode", type=MODE_CHOICE, default=None,
                 help="Objective (default: SP for catalysts, AR otherwise)."),
    click.option("--skill", default=None, help="Skill name for --mode SKILL (omit to score AR)."),
    click.option("--two-handing", is_flag=True, help="Two-hand the weapon (strength x1.5)."),
    click.option("--bound", "bound_specs", multiple=True,
                 help="ATTR=MIN:MAX frees an attribute, ATTR=VALUE locks it. Repeatable."),
    click.option("--budget", type=int, default=None, help="Points to spend above the minimums (default: all)."),
)


def request_options(f: Callable) -> Callable:
    """WEAPON argument plus the options every solve-style command takes."""
    for decorator in reversed(_REQUEST_OPTIONS):
        f = decorator(f)
    return f


def _build_request(
    weapon: str,
    affinity: str,
    upgrade_level: int,
    mode: Optional[str],
    skill: Optional[str],
    two_handing: bool,
    bound_specs: Tuple[str, ...],
    budget: Optional[int],
) -> SolveRequest:
    try:
        bounds = AttributeBounds.from_mapping(dict(parse_bound_spec(s) for s in bound_specs))
        bounds.validate()
        return SolveRequest(
            weapon_name=weapon,
            affinity=affinity,
            upgrade_level=upgrade_level,
            bounds=bounds,
            mode=parse_mode(mode, skill) if mode else None,
            two_handing=two_handing,
            points_budget=budget,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _settings_with(shared: Dict[str, Any], lookahead: Optional[int]):
    settings = shared["settings"]
    if lookahead is not None:
        try:
            settings = dataclasses.replace(settings, lookahead=lookahead)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--lookahead")
    return settings


# ---------- Subcommand: optimize ----------
@cli.command("optimize")
@request_options
@click.option("--lookahead", type=int, default=None, help="Greedy lookahead depth (default from settings).")
@click.option("--no-worker", is_flag=True, help="Solve on the main thread instead of the background worker.")
@click.option("--show-locked", is_flag=True, help="Also list locked attributes.")
@click.pass_obj
def cmd_optimize(
    shared: Dict[str, Any],
    weapon: str,
    affinity: str,
    upgrade_level: int,
    mode: Optional[str],
    skill: Optional[str],
    two_handing: bool,
    bound_specs: Tuple[str, ...],
    budget: Optional[int],
    lookahead: Optional[int],
    no_worker: bool,
    show_locked: bool,
):
    """Find the best attribute allocation."""
    logger = shared["logger"]
    request = _build_request(weapon, affinity, upgrade_level, mode, skill, two_handing, bound_specs, budget)
    settings = _settings_with(shared, lookahead)

    with SolverWorker(
        shared["data"],
        logger=logger,
        settings=settings,
        use_background=False if no_worker else None,
    ) as worker:
        try:
            result = worker.solve(request)
        except ValueError as exc:
            raise click.ClickException(str(exc))

    OptimizationReporter().emit(
        result=result,
        request=request,
        base=request.bounds.minimum_set(),
        options=ReportOptions(show_locked=show_locked),
    )


# ---------- Subcommand: evaluate ----------
@cli.command("evaluate")
@click.argument("weapon")
@click.option("--affinity", default="Standard", show_default=True, help="Weapon affinity.")
@click.option("--level", "upgrade_level", type=int, default=0, show_default=True, help="Upgrade level.")
@click.option("--mode", type=MODE_CHOICE, default=None)
@click.option("--skill", default=None, help="Skill name for --mode SKILL.")
@click.option("--two-handing", is_flag=True, help="Two-hand the weapon (strength x1.5).")
@click.option("--stat", "stat_specs", multiple=True, help="ATTR=VALUE. Repeatable; unlisted attributes use defaults.")
@click.pass_obj
def cmd_evaluate(
    shared: Dict[str, Any],
    weapon: str,
    affinity: str,
    upgrade_level: int,
    mode: Optional[str],
    skill: Optional[str],
    two_handing: bool,
    stat_specs: Tuple[str, ...],
):
    """Score a fixed build."""
    try:
        stats = AttributeSet.from_mapping(dict(parse_stat_spec(s) for s in stat_specs))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--stat")
    request = SolveRequest(
        weapon_name=weapon,
        affinity=affinity,
        upgrade_level=upgrade_level,
        bounds=AttributeBounds.locked_at(stats),
        mode=parse_mode(mode, skill) if mode else None,
        two_handing=two_handing,
    )
    optimizer = StatOptimizer(shared["data"], logger=shared["logger"], settings=shared["settings"])
    score = optimizer.evaluate(request, stats)
    ar = calculate_ar(shared["data"], weapon, affinity, upgrade_level, stats, two_handing=two_handing)
    OptimizationReporter().emit_evaluation(ar=ar, score=score)


# ---------- Subcommand: investment path ----------
@cli.command("path")
@request_options
@click.option("--max-budget", type=int, default=None, help="Last point count on the path (default: budget or all).")
@click.option("--stride", type=int, default=1, show_default=True, help="Print every Nth point.")
@click.option("--ignore-requirements", is_flag=True, help="Score as if every requirement were met.")
@click.pass_obj
def cmd_path(
    shared: Dict[str, Any],
    weapon: str,
    affinity: str,
    upgrade_level: int,
    mode: Optional[str],
    skill: Optional[str],
    two_handing: bool,
    bound_specs: Tuple[str, ...],
    budget: Optional[int],
    max_budget: Optional[int],
    stride: int,
    ignore_requirements: bool,
):
    """Damage at every invested point, requirements first."""
    request = _build_request(weapon, affinity, upgrade_level, mode, skill, two_handing, bound_specs, budget)
    optimizer = StatOptimizer(shared["data"], logger=shared["logger"], settings=shared["settings"])
    points = optimizer.investment_path(
        request, max_budget if max_budget is not None else budget, ignore_requirements=ignore_requirements
    )
    OptimizationReporter().emit_path(points, options=ReportOptions(path_stride=stride))


# ---------- Subcommand: brute-force verification ----------
@cli.command("verify")
@request_options
@click.pass_obj
def cmd_verify(
    shared: Dict[str, Any],
    weapon: str,
    affinity: str,
    upgrade_level: int,
    mode: Optional[str],
    skill: Optional[str],
    two_handing: bool,
    bound_specs: Tuple[str, ...],
    budget: Optional[int],
):
    """Check the solver against exhaustive search (keep the budget small)."""
    request = _build_request(weapon, affinity, upgrade_level, mode, skill, two_handing, bound_specs, budget)
    optimizer = StatOptimizer(shared["data"], logger=shared["logger"], settings=shared["settings"])
    comparison = optimizer.verify(request)
    OptimizationReporter().emit_comparison(comparison)
    if not comparison.matches:
        raise SystemExit(1)


def main() -> None:
    cli(prog_name="stat-optimize")


if __name__ == "__main__":
    main()
