"""Attack-rating and spell-scaling evaluator.

`calculate_ar` is the damage evaluator the objectives score against. It is
pure: all game data comes through the `GameData` handle and nothing is cached.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .curves import saturation
from .defaults import (
    DAMAGE_ATTRIBUTES,
    MAX_EFFECTIVE_ATTRIBUTE,
    REQUIREMENT_PENALTY,
    SPELL_SCALING_BASE,
    SPELL_SCALING_UNMET,
    TWO_HAND_STRENGTH_MULTIPLIER,
)
from .models import (
    AffinityData,
    AttributeSet,
    GameData,
    ReinforceRates,
    StatScaling,
    WeaponEntry,
)


@dataclass(frozen=True, slots=True)
class ChannelResult:
    base: float
    scaling: float

    @property
    def total(self) -> float:
        return self.base + self.scaling


@dataclass(frozen=True, slots=True)
class SpellResult:
    total: float
    requirements_met: bool


@dataclass(frozen=True, slots=True)
class ARResult:
    channels: Dict[str, ChannelResult]
    effective_stats: Dict[str, int]
    requirements_met: bool
    sorcery: Optional[SpellResult] = None
    incantation: Optional[SpellResult] = None

    @property
    def per_channel_totals(self) -> Dict[str, float]:
        return {name: ch.total for name, ch in self.channels.items()}

    @property
    def total(self) -> float:
        return sum(ch.total for ch in self.channels.values())

    @property
    def rounded(self) -> int:
        return math.trunc(self.total)

    @property
    def spell_power(self) -> float:
        """Best of sorcery and incantation scaling, 0 for non-catalysts."""
        totals = [s.total for s in (self.sorcery, self.incantation) if s is not None]
        return max(totals, default=0.0)


@dataclass(frozen=True, slots=True)
class ResolvedItem:
    """A weapon narrowed to one affinity and one upgrade level."""

    weapon: WeaponEntry
    affinity: AffinityData
    rates: ReinforceRates
    upgrade_level: int


# ----------------------------- helpers -----------------------------

def resolve_item(data: GameData, weapon_name: str, affinity: str, upgrade_level: int) -> Optional[ResolvedItem]:
    """Look up weapon, affinity and reinforce row. None when any is missing."""
    weapon = data.weapon(weapon_name)
    if weapon is None:
        return None
    aff = weapon.affinities.get(affinity)
    if aff is None:
        return None
    if not 0 <= upgrade_level <= weapon.max_upgrade_level:
        return None
    rates = data.reinforce_rates.get(aff.reinforce_type_id + upgrade_level)
    if rates is None:
        return None
    return ResolvedItem(weapon=weapon, affinity=aff, rates=rates, upgrade_level=upgrade_level)


def effective_attributes(stats: AttributeSet, weapon: WeaponEntry, two_handing: bool) -> Dict[str, int]:
    """Damage attributes as the weapon sees them (two-handing boosts strength)."""
    values = {a: stats.get(a) for a in DAMAGE_ATTRIBUTES}
    if weapon.two_hand_bonus_applies(two_handing):
        boosted = math.floor(values["strength"] * TWO_HAND_STRENGTH_MULTIPLIER)
        values["strength"] = min(boosted, MAX_EFFECTIVE_ATTRIBUTE)
    return values


def scaling_value(scaling: StatScaling, rates: ReinforceRates, attribute: str) -> float:
    if scaling.is_override:
        return scaling.base
    return scaling.base * rates.scaling_rate(attribute)


def _meets(weapon: WeaponEntry, attributes: Iterable[str], effective: Mapping[str, int]) -> bool:
    return all(effective.get(a, 0) >= weapon.requirement(a) for a in attributes)


def scaling_fraction(
    data: GameData,
    scalings: Mapping[str, StatScaling],
    rates: ReinforceRates,
    effective: Mapping[str, int],
) -> float:
    """Sum of value% x saturation over scaling attributes, as a fraction."""
    total = 0.0
    for attribute, sc in scalings.items():
        value = scaling_value(sc, rates, attribute)
        if value <= 0:
            continue
        curve = data.curves.get(sc.curve_id)
        if curve is None:
            continue
        total += value / 100.0 * saturation(curve, effective.get(attribute, 0))
    return total


def _spell_scaling(
    data: GameData,
    item: ResolvedItem,
    scalings: Mapping[str, StatScaling],
    effective: Mapping[str, int],
    ignore_requirements: bool,
) -> SpellResult:
    scaling_attrs = [a for a, sc in scalings.items() if scaling_value(sc, item.rates, a) > 0]
    met = ignore_requirements or _meets(item.weapon, scaling_attrs, effective)
    if not met:
        return SpellResult(total=SPELL_SCALING_UNMET, requirements_met=False)
    bonus = SPELL_SCALING_BASE * scaling_fraction(data, scalings, item.rates, effective)
    return SpellResult(total=SPELL_SCALING_BASE + bonus, requirements_met=True)


# ----------------------------- public API -----------------------------

def calculate_ar(
    data: GameData,
    weapon_name: str,
    affinity: str,
    upgrade_level: int,
    stats: AttributeSet,
    *,
    two_handing: bool = False,
    ignore_requirements: bool = False,
) -> Optional[ARResult]:
    """Evaluate a weapon for a build. Returns None for an unknown weapon/affinity/level."""
    item = resolve_item(data, weapon_name, affinity, upgrade_level)
    if item is None:
        return None

    effective = effective_attributes(stats, item.weapon, two_handing)

    channels: Dict[str, ChannelResult] = {}
    for name, channel in item.affinity.channels.items():
        base = channel.attack_base * item.rates.attack_rate(name)
        if base <= 0:
            continue
        scaling_attrs = [a for a, sc in channel.scaling.items() if scaling_value(sc, item.rates, a) > 0]
        if ignore_requirements or _meets(item.weapon, scaling_attrs, effective):
            scaling = base * scaling_fraction(data, channel.scaling, item.rates, effective)
        else:
            scaling = base * REQUIREMENT_PENALTY
        channels[name] = ChannelResult(base=base, scaling=scaling)

    sorcery = incantation = None
    if item.affinity.sorcery_scaling:
        sorcery = _spell_scaling(data, item, item.affinity.sorcery_scaling, effective, ignore_requirements)
    if item.affinity.incantation_scaling:
        incantation = _spell_scaling(data, item, item.affinity.incantation_scaling, effective, ignore_requirements)

    return ARResult(
        channels=channels,
        effective_stats=effective,
        requirements_met=_meets(item.weapon, item.weapon.requirements.keys(), effective),
        sorcery=sorcery,
        incantation=incantation,
    )
