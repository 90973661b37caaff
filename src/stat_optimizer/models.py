"""Models for the Stat Optimizer.

This module defines the dataclasses shared by the evaluator, the solvers, the
loaders and the app layers: attribute sets and bounds, the game-data bundle,
objective modes, requests and results.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .defaults import (
    ALL_ATTRIBUTES,
    ALWAYS_TWO_HANDED_WEAPON_TYPES,
    CURVE_BREAKPOINTS,
    DEFAULT_ATTRIBUTE_VALUES,
    DEFAULT_LOOKAHEAD,
    FIST_WEAPON_TYPE,
    MAX_ATTRIBUTE_VALUE,
    MIN_ATTRIBUTE_VALUE,
    MIN_GAIN_THRESHOLD,
)


# ----------------------------- attributes -----------------------------

@dataclass(frozen=True, slots=True)
class AttributeSet:
    """One character build: a value for each of the eight attributes.

    Attributes:
        vigor, mind, endurance: Budget attributes. They cost points but never
            contribute to damage.
        strength, dexterity, intelligence, faith, arcane: Damage attributes.
    """

    vigor: int = DEFAULT_ATTRIBUTE_VALUES["vigor"]
    mind: int = DEFAULT_ATTRIBUTE_VALUES["mind"]
    endurance: int = DEFAULT_ATTRIBUTE_VALUES["endurance"]
    strength: int = DEFAULT_ATTRIBUTE_VALUES["strength"]
    dexterity: int = DEFAULT_ATTRIBUTE_VALUES["dexterity"]
    intelligence: int = DEFAULT_ATTRIBUTE_VALUES["intelligence"]
    faith: int = DEFAULT_ATTRIBUTE_VALUES["faith"]
    arcane: int = DEFAULT_ATTRIBUTE_VALUES["arcane"]

    def __post_init__(self) -> None:
        for name in ALL_ATTRIBUTES:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not MIN_ATTRIBUTE_VALUE <= value <= MAX_ATTRIBUTE_VALUE:
                raise ValueError(
                    f"{name}={value} is outside [{MIN_ATTRIBUTE_VALUE}, {MAX_ATTRIBUTE_VALUE}]"
                )

    @classmethod
    def from_mapping(cls, values: Mapping[str, int]) -> "AttributeSet":
        unknown = [k for k in values if k not in ALL_ATTRIBUTES]
        if unknown:
            raise ValueError(f"Unknown attributes {unknown}")
        return cls(**{k: int(v) for k, v in values.items()})

    def get(self, name: str) -> int:
        return getattr(self, name)

    def replace(self, **changes: int) -> "AttributeSet":
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in ALL_ATTRIBUTES}

    def points_above(self, other: "AttributeSet", attributes: Iterable[str] = ALL_ATTRIBUTES) -> int:
        """Sum of (self - other) over the given attributes."""
        return sum(getattr(self, a) - getattr(other, a) for a in attributes)


@dataclass(frozen=True, slots=True)
class StatBounds:
    """Inclusive range for one attribute. min == max means the attribute is locked."""

    min: int
    max: int

    @property
    def locked(self) -> bool:
        return self.min == self.max


@dataclass(frozen=True, slots=True)
class AttributeBounds:
    """Bounds for all eight attributes.

    Attributes missing from `from_mapping` input are locked at their default
    value, so a caller only lists what it wants the solver to move.
    """

    bounds: Dict[str, StatBounds]

    @classmethod
    def from_mapping(cls, values: Mapping[str, StatBounds | Tuple[int, int] | int]) -> "AttributeBounds":
        out: Dict[str, StatBounds] = {}
        for name in values:
            if name not in ALL_ATTRIBUTES:
                raise ValueError(f"Unknown attribute {name!r}")
        for name in ALL_ATTRIBUTES:
            raw = values.get(name)
            if raw is None:
                default = DEFAULT_ATTRIBUTE_VALUES[name]
                out[name] = StatBounds(default, default)
            elif isinstance(raw, StatBounds):
                out[name] = raw
            elif isinstance(raw, int):
                out[name] = StatBounds(raw, raw)
            else:
                lo, hi = raw
                out[name] = StatBounds(int(lo), int(hi))
        return cls(bounds=out)

    @classmethod
    def locked_at(cls, stats: AttributeSet) -> "AttributeBounds":
        return cls(bounds={a: StatBounds(stats.get(a), stats.get(a)) for a in ALL_ATTRIBUTES})

    def __getitem__(self, name: str) -> StatBounds:
        return self.bounds[name]

    def validate(self) -> None:
        """Raise ValueError when any range is empty or outside the legal attribute range."""
        missing = [a for a in ALL_ATTRIBUTES if a not in self.bounds]
        if missing:
            raise ValueError(f"Missing bounds for {missing}")
        for name in ALL_ATTRIBUTES:
            b = self.bounds[name]
            if b.min > b.max:
                raise ValueError(f"{name}: min {b.min} exceeds max {b.max}")
            if b.min < MIN_ATTRIBUTE_VALUE or b.max > MAX_ATTRIBUTE_VALUE:
                raise ValueError(
                    f"{name}: bounds [{b.min}, {b.max}] fall outside "
                    f"[{MIN_ATTRIBUTE_VALUE}, {MAX_ATTRIBUTE_VALUE}]"
                )

    def free_attributes(self) -> List[str]:
        return [a for a in ALL_ATTRIBUTES if not self.bounds[a].locked]

    def minimum_set(self) -> AttributeSet:
        return AttributeSet(**{a: self.bounds[a].min for a in ALL_ATTRIBUTES})

    def max_values(self) -> Dict[str, int]:
        return {a: self.bounds[a].max for a in ALL_ATTRIBUTES}

    def capacity(self, attributes: Iterable[str], start: AttributeSet) -> int:
        """Points needed to raise `attributes` from `start` to their maxima."""
        return sum(max(0, self.bounds[a].max - start.get(a)) for a in attributes)


# ----------------------------- scaling curves -----------------------------

@dataclass(frozen=True, slots=True)
class ScalingCurve:
    """Piecewise curve mapping an attribute level to a cumulative scaling percent.

    Attributes:
        points: Ordered (level, percent) knots.
        exponents: One shaping exponent per segment (len(points) - 1).
            Positive bends the segment as r**e, negative as 1 - (1 - r)**|e|,
            zero keeps it flat at the segment's lower value.
    """

    points: Tuple[Tuple[float, float], ...]
    exponents: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError("A scaling curve needs at least two points")
        if len(self.exponents) != len(self.points) - 1:
            raise ValueError(
                f"Expected {len(self.points) - 1} segment exponents, got {len(self.exponents)}"
            )
        xs = [x for x, _ in self.points]
        if any(b <= a for a, b in zip(xs, xs[1:])):
            raise ValueError(f"Curve levels must be strictly increasing: {xs}")

    @classmethod
    def linear(cls, points: Iterable[Tuple[float, float]]) -> "ScalingCurve":
        pts = tuple((float(x), float(y)) for x, y in points)
        return cls(points=pts, exponents=(1.0,) * (len(pts) - 1))

    @classmethod
    def from_stages(
        cls,
        stage_max_val: Iterable[float],
        stage_max_grow_val: Iterable[float],
        adj_pt_max_grow_val: Iterable[float],
    ) -> "ScalingCurve":
        """Build a curve from the game's five-stage representation."""
        xs = [float(v) for v in stage_max_val]
        ys = [float(v) for v in stage_max_grow_val]
        adj = [float(v) for v in adj_pt_max_grow_val]
        if not (len(xs) == len(ys) == len(adj)):
            raise ValueError("Stage arrays must have equal length")
        return cls(points=tuple(zip(xs, ys)), exponents=tuple(adj[: len(xs) - 1]))

    @property
    def levels(self) -> Tuple[float, ...]:
        return tuple(x for x, _ in self.points)


# ----------------------------- game data -----------------------------

@dataclass(frozen=True, slots=True)
class StatScaling:
    """Scaling of one attribute on one channel (percent, before reinforcement)."""

    base: float
    curve_id: int
    is_override: bool = False


@dataclass(frozen=True, slots=True)
class DamageChannel:
    attack_base: float
    scaling: Dict[str, StatScaling] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AffinityData:
    reinforce_type_id: int
    channels: Dict[str, DamageChannel]
    sorcery_scaling: Optional[Dict[str, StatScaling]] = None
    incantation_scaling: Optional[Dict[str, StatScaling]] = None

    @property
    def is_catalyst(self) -> bool:
        return bool(self.sorcery_scaling) or bool(self.incantation_scaling)


@dataclass(frozen=True, slots=True)
class WeaponEntry:
    name: str
    requirements: Dict[str, int]
    affinities: Dict[str, AffinityData]
    wep_type: int = 0
    is_dual_blade: bool = False
    max_upgrade_level: int = 25

    def two_hand_bonus_applies(self, two_handing: bool) -> bool:
        if self.wep_type in ALWAYS_TWO_HANDED_WEAPON_TYPES:
            return True
        if not two_handing:
            return False
        return not (self.is_dual_blade or self.wep_type == FIST_WEAPON_TYPE)

    def requirement(self, attribute: str) -> int:
        return int(self.requirements.get(attribute, 0))


@dataclass(frozen=True, slots=True)
class ReinforceRates:
    """Upgrade multipliers for one reinforce row. Unlisted rates are 1.0."""

    attack: Dict[str, float] = field(default_factory=dict)
    scaling: Dict[str, float] = field(default_factory=dict)

    def attack_rate(self, channel: str) -> float:
        return self.attack.get(channel, 1.0)

    def scaling_rate(self, attribute: str) -> float:
        return self.scaling.get(attribute, 1.0)


@dataclass(frozen=True, slots=True)
class SkillHit:
    """One attack of a skill.

    Attributes:
        name: Label for reporting.
        motion: Multiplier per channel applied to the weapon's channel totals.
        bullet: Flat projectile damage per channel.
        bullet_scaling: Attribute scaling of the projectile.
        use_weapon_scaling: Scale projectiles with the weapon when bullet_scaling is empty.
        disable_two_hand_bonus: Evaluate motion damage one-handed.
    """

    name: str
    motion: Dict[str, float] = field(default_factory=dict)
    bullet: Dict[str, float] = field(default_factory=dict)
    bullet_scaling: Dict[str, StatScaling] = field(default_factory=dict)
    use_weapon_scaling: bool = False
    disable_two_hand_bonus: bool = False


@dataclass(frozen=True, slots=True)
class Skill:
    name: str
    hits: Tuple[SkillHit, ...]


@dataclass(frozen=True, slots=True)
class GameData:
    """Read-only game-data bundle. Passed explicitly to everything that evaluates damage."""

    curves: Dict[int, ScalingCurve]
    reinforce_rates: Dict[int, ReinforceRates]
    weapons: Dict[str, WeaponEntry]
    skills: Dict[str, Skill] = field(default_factory=dict)
    version: str = "unknown"

    def weapon(self, name: str) -> Optional[WeaponEntry]:
        return self.weapons.get(name)


# ----------------------------- objective modes -----------------------------

@dataclass(frozen=True, slots=True)
class AttackRating:
    """Total attack rating of the weapon."""


@dataclass(frozen=True, slots=True)
class SpellPower:
    """Best spell scaling (sorcery or incantation) of a catalyst."""


@dataclass(frozen=True, slots=True)
class SkillDamage:
    """Summed damage of every hit of a weapon skill. No skill falls back to attack rating."""

    skill_name: Optional[str] = None


ObjectiveMode = Union[AttackRating, SpellPower, SkillDamage]


# ----------------------------- settings / requests / results -----------------------------

@dataclass(frozen=True, slots=True)
class SolverSettings:
    lookahead: int = DEFAULT_LOOKAHEAD
    min_gain: float = MIN_GAIN_THRESHOLD
    use_background_worker: bool = True
    default_breakpoints: Tuple[int, ...] = CURVE_BREAKPOINTS

    def __post_init__(self) -> None:
        if self.lookahead < 1:
            raise ValueError(f"lookahead must be >= 1, got {self.lookahead}")
        if self.min_gain < 0:
            raise ValueError(f"min_gain must be >= 0, got {self.min_gain}")


@dataclass(frozen=True, slots=True)
class SolveRequest:
    """Everything the entry point needs to optimize one build.

    `mode=None` picks spell power for catalysts and attack rating otherwise.
    `points_budget=None` spends as many points as the bounds allow.
    """

    weapon_name: str
    affinity: str
    upgrade_level: int
    bounds: AttributeBounds
    mode: Optional[ObjectiveMode] = None
    two_handing: bool = False
    points_budget: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SolverResult:
    stats: AttributeSet
    raw_score: float
    strategy: str = ""

    @property
    def score(self) -> int:
        return math.floor(self.raw_score)


@dataclass(frozen=True, slots=True)
class GreedyStep:
    attribute: str
    points: int
    gain: float


@dataclass(frozen=True, slots=True)
class InvestmentPoint:
    points_invested: int
    stats: AttributeSet
    raw_score: float

    @property
    def score(self) -> int:
        return math.floor(self.raw_score)
