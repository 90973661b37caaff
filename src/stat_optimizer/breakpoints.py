"""Breakpoint extraction: attribute levels where a scaling curve changes slope.

These are the candidate anchors for the multi-start solver.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .curves import interior_levels
from .defaults import BREAKPOINT_WINDOW
from .models import GameData, ScalingCurve, StatScaling


def collect_item_curves(
    data: GameData,
    weapon_name: str,
    affinity: str,
    *,
    skill_name: Optional[str] = None,
) -> Dict[str, List[ScalingCurve]]:
    """Every curve that scales some part of this weapon, grouped by attribute.

    Covers damage channels, sorcery/incantation scaling and, when `skill_name`
    is given, the skill's projectile scaling. Unknown curve ids are skipped.
    """
    out: Dict[str, List[ScalingCurve]] = defaultdict(list)
    weapon = data.weapon(weapon_name)
    aff = weapon.affinities.get(affinity) if weapon else None
    if aff is None:
        return {}

    groups: List[Mapping[str, StatScaling]] = [ch.scaling for ch in aff.channels.values()]
    if aff.sorcery_scaling:
        groups.append(aff.sorcery_scaling)
    if aff.incantation_scaling:
        groups.append(aff.incantation_scaling)
    skill = data.skills.get(skill_name) if skill_name else None
    if skill is not None:
        groups.extend(hit.bullet_scaling for hit in skill.hits)

    for group in groups:
        for attribute, sc in group.items():
            if sc.base <= 0:
                continue
            curve = data.curves.get(sc.curve_id)
            if curve is not None and curve not in out[attribute]:
                out[attribute].append(curve)
    return dict(out)


def extract_breakpoints(
    item_curves: Mapping[str, Sequence[ScalingCurve]],
    free_attributes: Iterable[str],
) -> Dict[str, List[int]]:
    """Sorted, de-duplicated interior knot levels per free attribute.

    The first and last knot of each curve are dropped, as are levels outside
    BREAKPOINT_WINDOW. Attributes with no curves map to an empty list.
    """
    lo, hi = BREAKPOINT_WINDOW
    out: Dict[str, List[int]] = {}
    for attribute in free_attributes:
        levels = set()
        for curve in item_curves.get(attribute, ()):
            levels.update(x for x in interior_levels(curve) if lo <= x <= hi)
        out[attribute] = sorted(levels)
    return out
