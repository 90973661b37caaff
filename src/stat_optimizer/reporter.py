"""Terminal report printer for solver results.

Usage from CLI:
    reporter = OptimizationReporter()
    reporter.emit(result=result, request=request, base=request.bounds.minimum_set())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import click

from .calculator import ARResult
from .defaults import ALL_ATTRIBUTES
from .models import AttributeSet, InvestmentPoint, SolveRequest, SolverResult
from .objectives import mode_label
from .solvers.brute_force import BruteForceComparison


@dataclass
class ReportOptions:
    show_locked: bool = False
    # Path output gets long; print every Nth point plus the last
    path_stride: int = 1


class OptimizationReporter:
    """Uniform report printer for the optimize/evaluate/path/verify commands."""

    def __init__(self, *, use_colors: bool = True):
        self.use_colors = use_colors

    # ---- public ----
    def emit(
        self,
        *,
        result: Optional[SolverResult],
        request: SolveRequest,
        base: Optional[AttributeSet] = None,
        options: Optional[ReportOptions] = None,
    ) -> None:
        opts = options or ReportOptions()
        if result is None:
            self._print_header("⏭️ Result superseded by a newer request.", color="yellow")
            return

        self._print_header("✅ Optimization Complete!", color="green", bold=True)
        self._print_kv(
            "🗡️ Weapon",
            f"{request.weapon_name} ({request.affinity} +{request.upgrade_level})"
            + (" [two-handed]" if request.two_handing else ""),
        )
        if request.mode is not None:
            self._print_kv("🎯 Objective", mode_label(request.mode))
        self._print_kv("🧭 Strategy", result.strategy or "-")
        self._print_kv("🏆 Score", f"{result.score} ({result.raw_score:.2f})", strong=True)
        self._println("")
        self._emit_stats(result.stats, base, request, show_locked=opts.show_locked)

    def emit_evaluation(self, *, ar: Optional[ARResult], score: SolverResult) -> None:
        self._print_header("📊 Build Evaluation", color="blue", bold=True)
        if ar is None:
            self._print_line("Unknown weapon, affinity or upgrade level.", color="red")
            return
        for name, ch in ar.channels.items():
            self._println(f"  • {name:<10} base {ch.base:8.2f}  scaling {ch.scaling:+8.2f}  = {ch.total:8.2f}")
        self._print_kv("• Attack rating", f"{ar.rounded}")
        for label, spell in (("Sorcery", ar.sorcery), ("Incantation", ar.incantation)):
            if spell is not None:
                self._print_kv(f"• {label} scaling", f"{spell.total:.1f}")
        if not ar.requirements_met:
            self._print_line("⚠️ Requirements not met — scaling penalized.", color="yellow")
        self._print_kv("🏆 Objective score", f"{score.score} ({score.raw_score:.2f})", strong=True)

    def emit_path(self, points: List[InvestmentPoint], *, options: Optional[ReportOptions] = None) -> None:
        opts = options or ReportOptions()
        stride = max(1, opts.path_stride)
        self._print_header("📈 Investment Path", color="blue", bold=True)
        for i, point in enumerate(points):
            if i % stride and i != len(points) - 1:
                continue
            stats = point.stats.as_dict()
            build = " ".join(f"{a[:3]}={stats[a]}" for a in ALL_ATTRIBUTES)
            self._println(f"  +{point.points_invested:<4} {point.score:>6}  {build}")

    def emit_comparison(self, cmp: BruteForceComparison) -> None:
        self._print_header("🧪 Brute-force check", color="blue", bold=True)
        self._print_kv("• Solver", f"{cmp.solver.raw_score:.2f} ({cmp.solver.strategy})")
        self._print_kv("• Oracle", f"{cmp.oracle.raw_score:.2f}")
        self._print_kv("• Δ", f"{cmp.value_diff:+.4f}")
        if cmp.matches:
            self._print_line("✅ Solver matches the optimum.", color="green")
        else:
            self._print_line("❌ Solver is below the optimum.", color="red")
        for attribute, delta in cmp.diverging_attributes.items():
            self._println(f"  • {attribute}: solver {delta:+d} vs oracle")

    # ---- sections ----
    def _emit_stats(
        self,
        stats: AttributeSet,
        base: Optional[AttributeSet],
        request: SolveRequest,
        *,
        show_locked: bool,
    ) -> None:
        self._print_line("Attributes", color="blue")
        for attribute in ALL_ATTRIBUTES:
            locked = request.bounds[attribute].locked
            if locked and not show_locked:
                continue
            value = stats.get(attribute)
            added = value - base.get(attribute) if base is not None else 0
            suffix = f"  (+{added})" if added else ""
            self._println(f"  • {attribute:<13} {value:>3}{suffix}")
        if base is not None:
            self._print_kv("• Points spent", str(stats.points_above(base)))
        self._println("")

    # ---- printing primitives ----
    def _print_header(self, text: str, *, color: Optional[str] = None, bold: bool = False) -> None:
        if self.use_colors and color:
            click.secho(text, fg=color, bold=bold)
        else:
            self._println(text)

    def _print_kv(self, k: str, v: str, *, strong: bool = False) -> None:
        line = f"{k}: {v}"
        if self.use_colors and strong:
            click.secho(line, fg="green", bold=True)
        else:
            self._println(line)

    def _print_line(self, text: str, *, color: Optional[str] = None) -> None:
        if self.use_colors and color:
            click.secho(text, fg=color)
        else:
            self._println(text)

    def _println(self, text: str = "") -> None:
        click.echo(text)
