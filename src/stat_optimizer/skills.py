"""Weapon-skill damage: motion-value hits plus projectile (bullet) damage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional

from .calculator import calculate_ar, effective_attributes, resolve_item, scaling_fraction
from .defaults import BULLET_UPGRADE_GROWTH
from .models import AttributeSet, GameData, SkillHit, StatScaling


@dataclass(frozen=True, slots=True)
class SkillHitResult:
    name: str
    motion_damage: float
    bullet_damage: float

    @property
    def total(self) -> float:
        return self.motion_damage + self.bullet_damage


@dataclass(frozen=True, slots=True)
class SkillResult:
    skill_name: str
    hits: List[SkillHitResult]

    @property
    def total(self) -> float:
        return sum(h.total for h in self.hits)


def upgrade_multiplier(upgrade_level: int, max_upgrade_level: int) -> float:
    """Bullet damage grows linearly from x1 at +0 to x4 at max upgrade."""
    if max_upgrade_level <= 0:
        return 1.0
    return 1.0 + BULLET_UPGRADE_GROWTH * upgrade_level / max_upgrade_level


def calculate_skill_damage(
    data: GameData,
    weapon_name: str,
    affinity: str,
    upgrade_level: int,
    skill_name: str,
    stats: AttributeSet,
    *,
    two_handing: bool = False,
    ignore_requirements: bool = False,
) -> Optional[SkillResult]:
    """Damage of every hit of `skill_name` with this weapon. None if the skill or weapon is unknown."""
    skill = data.skills.get(skill_name)
    item = resolve_item(data, weapon_name, affinity, upgrade_level)
    if skill is None or item is None:
        return None

    ar_cache = {}

    def channel_totals(two_handed: bool) -> Mapping[str, float]:
        if two_handed not in ar_cache:
            ar = calculate_ar(
                data, weapon_name, affinity, upgrade_level, stats,
                two_handing=two_handed, ignore_requirements=ignore_requirements,
            )
            ar_cache[two_handed] = ar.per_channel_totals if ar else {}
        return ar_cache[two_handed]

    pwu = upgrade_multiplier(upgrade_level, item.weapon.max_upgrade_level)
    hits: List[SkillHitResult] = []
    for hit in skill.hits:
        two_handed = two_handing and not hit.disable_two_hand_bonus
        totals = channel_totals(two_handed)
        motion = sum(mv * totals.get(channel, 0.0) for channel, mv in hit.motion.items())

        effective = effective_attributes(stats, item.weapon, two_handed)
        bullet = 0.0
        for channel, flat in hit.bullet.items():
            scalings = _bullet_scalings(hit, item.affinity.channels, channel)
            bullet += flat * pwu * (1.0 + scaling_fraction(data, scalings, item.rates, effective))
        hits.append(SkillHitResult(name=hit.name, motion_damage=motion, bullet_damage=bullet))

    return SkillResult(skill_name=skill.name, hits=hits)


def _bullet_scalings(hit: SkillHit, weapon_channels, channel: str) -> Mapping[str, StatScaling]:
    if hit.bullet_scaling:
        return hit.bullet_scaling
    if hit.use_weapon_scaling and channel in weapon_channels:
        return weapon_channels[channel].scaling
    return {}
