"""Objective functions: turn a build into the single number a solver maximizes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .calculator import calculate_ar
from .models import AttackRating, AttributeSet, GameData, ObjectiveMode, SkillDamage, SpellPower
from .skills import calculate_skill_damage

ObjectiveFunction = Callable[[AttributeSet], float]

MODE_NAMES = {
    "AR": AttackRating,
    "SP": SpellPower,
    "SKILL": SkillDamage,
    "AOW": SkillDamage,
}


@dataclass(frozen=True, slots=True)
class ObjectiveContext:
    """Item identity and grip an objective is bound to."""

    data: GameData
    weapon_name: str
    affinity: str
    upgrade_level: int
    two_handing: bool = False
    ignore_requirements: bool = False


def parse_mode(text: str, skill_name: Optional[str] = None) -> ObjectiveMode:
    """'AR' | 'SP' | 'SKILL' (alias 'AOW'), case-insensitive."""
    key = str(text).strip().upper()
    if key not in MODE_NAMES:
        raise ValueError(f"Unknown objective mode {text!r}; expected one of AR, SP, SKILL")
    cls = MODE_NAMES[key]
    if cls is SkillDamage:
        return SkillDamage(skill_name=skill_name or None)
    return cls()


def mode_label(mode: ObjectiveMode) -> str:
    if isinstance(mode, SkillDamage):
        return f"SKILL ({mode.skill_name})" if mode.skill_name else "SKILL (-> AR)"
    if isinstance(mode, SpellPower):
        return "SP"
    return "AR"


def create_objective(mode: ObjectiveMode, context: ObjectiveContext) -> ObjectiveFunction:
    """Build a pure objective for `mode`. Evaluator failures score 0."""
    c = context

    def attack_rating(stats: AttributeSet) -> float:
        result = calculate_ar(
            c.data, c.weapon_name, c.affinity, c.upgrade_level, stats,
            two_handing=c.two_handing, ignore_requirements=c.ignore_requirements,
        )
        return result.total if result is not None else 0.0

    def spell_power(stats: AttributeSet) -> float:
        result = calculate_ar(
            c.data, c.weapon_name, c.affinity, c.upgrade_level, stats,
            two_handing=c.two_handing, ignore_requirements=c.ignore_requirements,
        )
        return result.spell_power if result is not None else 0.0

    if isinstance(mode, AttackRating):
        return attack_rating
    if isinstance(mode, SpellPower):
        return spell_power
    if isinstance(mode, SkillDamage):
        if not mode.skill_name:
            return attack_rating
        skill_name = mode.skill_name

        def skill_damage(stats: AttributeSet) -> float:
            result = calculate_skill_damage(
                c.data, c.weapon_name, c.affinity, c.upgrade_level, skill_name, stats,
                two_handing=c.two_handing, ignore_requirements=c.ignore_requirements,
            )
            return result.total if result is not None else 0.0

        return skill_damage
    raise TypeError(f"Unsupported objective mode: {mode!r}")
