# stat_optimizer/io/parsers.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, TYPE_CHECKING

from ..defaults import DAMAGE_ATTRIBUTES, DAMAGE_CHANNELS
from ..models import (
    AffinityData,
    AttributeBounds,
    DamageChannel,
    GameData,
    ReinforceRates,
    ScalingCurve,
    Skill,
    SkillHit,
    SolverSettings,
    StatBounds,
    StatScaling,
    WeaponEntry,
)
from ..utils import normalize_attribute

if TYPE_CHECKING:
    from logging import Logger

SETTINGS_KEYS = ("lookahead", "min_gain", "use_background_worker", "default_breakpoints")


def _require_keys(d: Dict[str, Any], keys: Iterable[str], where: str) -> None:
    missing = [k for k in keys if k not in d]
    if missing:
        raise ValueError(f"Missing keys {missing} in {where}")


def _require_object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{where} must be an object")
    return value


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{where} must be a number, got {value!r}")
    return float(value)


def _int_key(key: Any, where: str) -> int:
    try:
        return int(key)
    except (TypeError, ValueError):
        raise ValueError(f"{where}: key {key!r} is not an integer id") from None


def _channel(name: Any, where: str) -> str:
    channel = str(name).lower()
    if channel not in DAMAGE_CHANNELS:
        raise ValueError(f"{where}: unknown damage channel {name!r}")
    return channel


def _damage_attribute(name: Any, where: str) -> str:
    attribute = normalize_attribute(str(name))
    if attribute not in DAMAGE_ATTRIBUTES:
        raise ValueError(f"{where}: {attribute!r} is not a damage attribute")
    return attribute


# ----------------------------- curves / rates -----------------------------

def parse_curve(data: Any, where: str = "curve") -> ScalingCurve:
    """Either {"points": [[x, y], ...], "exponents"?: [...]} or the five-stage form."""
    obj = _require_object(data, where)
    if "points" in obj:
        points = obj["points"]
        if not isinstance(points, list) or not all(isinstance(p, list) and len(p) == 2 for p in points):
            raise TypeError(f"{where}.points must be a list of [level, percent] pairs")
        pts = tuple((_number(x, where), _number(y, where)) for x, y in points)
        if "exponents" in obj:
            exps = tuple(_number(e, f"{where}.exponents") for e in obj["exponents"])
            return ScalingCurve(points=pts, exponents=exps)
        return ScalingCurve.linear(pts)
    _require_keys(obj, ["stage_max_val", "stage_max_grow_val", "adj_pt_max_grow_val"], where)
    return ScalingCurve.from_stages(
        [_number(v, f"{where}.stage_max_val") for v in obj["stage_max_val"]],
        [_number(v, f"{where}.stage_max_grow_val") for v in obj["stage_max_grow_val"]],
        [_number(v, f"{where}.adj_pt_max_grow_val") for v in obj["adj_pt_max_grow_val"]],
    )


def parse_curves(data: Any) -> Dict[int, ScalingCurve]:
    obj = _require_object(data, "curves")
    return {_int_key(k, "curves"): parse_curve(v, f"curves[{k!r}]") for k, v in obj.items()}


def parse_reinforce_rates(data: Any) -> Dict[int, ReinforceRates]:
    obj = _require_object(data, "reinforce_rates")
    out: Dict[int, ReinforceRates] = {}
    for key, row in obj.items():
        where = f"reinforce_rates[{key!r}]"
        row = _require_object(row, where)
        attack = _require_object(row.get("attack", {}), f"{where}.attack")
        scaling = _require_object(row.get("scaling", {}), f"{where}.scaling")
        out[_int_key(key, "reinforce_rates")] = ReinforceRates(
            attack={_channel(c, where): _number(v, f"{where}.attack") for c, v in attack.items()},
            scaling={_damage_attribute(a, where): _number(v, f"{where}.scaling") for a, v in scaling.items()},
        )
    return out


# ----------------------------- weapons / skills -----------------------------

def parse_scaling_map(data: Any, where: str, *, default_override: bool = False) -> Dict[str, StatScaling]:
    obj = _require_object(data, where)
    out: Dict[str, StatScaling] = {}
    for attr, raw in obj.items():
        raw = _require_object(raw, f"{where}[{attr!r}]")
        _require_keys(raw, ["base", "curve_id"], f"{where}[{attr!r}]")
        out[_damage_attribute(attr, where)] = StatScaling(
            base=_number(raw["base"], f"{where}[{attr!r}].base"),
            curve_id=int(raw["curve_id"]),
            is_override=bool(raw.get("is_override", default_override)),
        )
    return out


def _parse_affinity(data: Any, where: str) -> AffinityData:
    obj = _require_object(data, where)
    _require_keys(obj, ["reinforce_type_id", "channels"], where)
    channels: Dict[str, DamageChannel] = {}
    for name, raw in _require_object(obj["channels"], f"{where}.channels").items():
        cwhere = f"{where}.channels[{name!r}]"
        raw = _require_object(raw, cwhere)
        _require_keys(raw, ["attack_base"], cwhere)
        channels[_channel(name, cwhere)] = DamageChannel(
            attack_base=_number(raw["attack_base"], f"{cwhere}.attack_base"),
            scaling=parse_scaling_map(raw.get("scaling", {}), f"{cwhere}.scaling"),
        )
    sorcery = obj.get("sorcery_scaling")
    incantation = obj.get("incantation_scaling")
    return AffinityData(
        reinforce_type_id=int(obj["reinforce_type_id"]),
        channels=channels,
        sorcery_scaling=parse_scaling_map(sorcery, f"{where}.sorcery_scaling") if sorcery else None,
        incantation_scaling=parse_scaling_map(incantation, f"{where}.incantation_scaling") if incantation else None,
    )


def parse_weapons(data: Any) -> Dict[str, WeaponEntry]:
    obj = _require_object(data, "weapons")
    out: Dict[str, WeaponEntry] = {}
    for name, raw in obj.items():
        where = f"weapons[{name!r}]"
        raw = _require_object(raw, where)
        _require_keys(raw, ["affinities"], where)
        requirements = _require_object(raw.get("requirements", {}), f"{where}.requirements")
        affinities = _require_object(raw["affinities"], f"{where}.affinities")
        if not affinities:
            raise ValueError(f"{where}.affinities must not be empty")
        out[str(name)] = WeaponEntry(
            name=str(name),
            requirements={_damage_attribute(a, where): int(v) for a, v in requirements.items()},
            affinities={str(a): _parse_affinity(v, f"{where}.affinities[{a!r}]") for a, v in affinities.items()},
            wep_type=int(raw.get("wep_type", 0)),
            is_dual_blade=bool(raw.get("is_dual_blade", False)),
            max_upgrade_level=int(raw.get("max_upgrade_level", 25)),
        )
    return out


def parse_skills(data: Any) -> Dict[str, Skill]:
    obj = _require_object(data, "skills")
    out: Dict[str, Skill] = {}
    for name, raw in obj.items():
        where = f"skills[{name!r}]"
        raw = _require_object(raw, where)
        hits_raw = raw.get("hits")
        if not isinstance(hits_raw, list) or not hits_raw:
            raise TypeError(f"{where}.hits must be a non-empty list")
        hits: List[SkillHit] = []
        for i, hit in enumerate(hits_raw):
            hwhere = f"{where}.hits[{i}]"
            hit = _require_object(hit, hwhere)
            hits.append(
                SkillHit(
                    name=str(hit.get("name", f"hit {i + 1}")),
                    motion={_channel(c, hwhere): _number(v, f"{hwhere}.motion")
                            for c, v in _require_object(hit.get("motion", {}), f"{hwhere}.motion").items()},
                    bullet={_channel(c, hwhere): _number(v, f"{hwhere}.bullet")
                            for c, v in _require_object(hit.get("bullet", {}), f"{hwhere}.bullet").items()},
                    # projectile scaling is stated as final values, so not reinforced
                    bullet_scaling=parse_scaling_map(
                        hit.get("bullet_scaling", {}), f"{hwhere}.bullet_scaling", default_override=True
                    ),
                    use_weapon_scaling=bool(hit.get("use_weapon_scaling", False)),
                    disable_two_hand_bonus=bool(hit.get("disable_two_hand_bonus", False)),
                )
            )
        out[str(name)] = Skill(name=str(name), hits=tuple(hits))
    return out


def parse_game_data(data: Any) -> GameData:
    """Validate and convert a full game-data bundle."""
    obj = _require_object(data, "game data")
    _require_keys(obj, ["curves", "reinforce_rates", "weapons"], "game data")
    return GameData(
        curves=parse_curves(obj["curves"]),
        reinforce_rates=parse_reinforce_rates(obj["reinforce_rates"]),
        weapons=parse_weapons(obj["weapons"]),
        skills=parse_skills(obj.get("skills", {})),
        version=str(obj.get("version", "unknown")),
    )


# ----------------------------- bounds / settings -----------------------------

def parse_bounds(data: Any) -> AttributeBounds:
    """{attr: {"min": m, "max": M} | [m, M] | v} -> AttributeBounds. Aliases accepted."""
    obj = _require_object(data, "bounds")
    values: Dict[str, StatBounds] = {}
    for name, raw in obj.items():
        attribute = normalize_attribute(str(name))
        where = f"bounds[{name!r}]"
        if isinstance(raw, dict):
            _require_keys(raw, ["min", "max"], where)
            values[attribute] = StatBounds(int(raw["min"]), int(raw["max"]))
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            values[attribute] = StatBounds(int(raw[0]), int(raw[1]))
        elif isinstance(raw, int) and not isinstance(raw, bool):
            values[attribute] = StatBounds(raw, raw)
        else:
            raise TypeError(f"{where} must be {{min, max}}, [min, max] or an integer")
    return AttributeBounds.from_mapping(values)


def parse_settings(data: Any, logger: "Logger | None" = None) -> SolverSettings:
    obj = _require_object(data, "settings")
    unknown = [k for k in obj if k not in SETTINGS_KEYS]
    if unknown and logger:
        logger.warning(f"⚠️ Ignoring unknown settings keys: {unknown}")
    kwargs: Dict[str, Any] = {}
    if "lookahead" in obj:
        kwargs["lookahead"] = int(obj["lookahead"])
    if "min_gain" in obj:
        kwargs["min_gain"] = _number(obj["min_gain"], "settings.min_gain")
    if "use_background_worker" in obj:
        kwargs["use_background_worker"] = bool(obj["use_background_worker"])
    if "default_breakpoints" in obj:
        bps = obj["default_breakpoints"]
        if not isinstance(bps, list):
            raise TypeError("settings.default_breakpoints must be a list of integers")
        kwargs["default_breakpoints"] = tuple(sorted({int(b) for b in bps}))
    return SolverSettings(**kwargs)


def parse_stats(data: Any) -> Dict[str, int]:
    """{attr: value} with aliases -> {canonical: value}."""
    obj = _require_object(data, "stats")
    return {normalize_attribute(str(k)): int(v) for k, v in obj.items()}
