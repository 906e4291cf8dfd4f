"""Pairwise fabric compatibility and per-item season/occasion fit.

All functions here are pure and deterministic. Season and occasion rules are
advisory: a mismatch lowers the fit but never reaches zero, so no item is
excluded on season or occasion alone.
"""

from __future__ import annotations

from itertools import combinations
from typing import Dict, List, Optional, Sequence

from models.clothing_item import ClothingItem
from models.color_theory import hex_to_hsl
from models.taxonomy import CASUAL_FABRICS, FORMAL_FABRICS, HEAVY_FABRICS, WARM_SEASONS

SAME_FABRIC = 0.9
SAME_REGISTER = 0.85
MIXED_REGISTER = 0.7
UNKNOWN_FABRIC = 0.8
HEAVY_IN_WARM_SEASON = 0.55

SEASON_MATCH = 1.0
SEASON_NEUTRAL = 0.9
SEASON_MISMATCH = 0.4
SEASON_FLOOR = 0.1

OCCASION_MATCH = 1.0
OCCASION_HINTED = 0.95
OCCASION_NEUTRAL = 0.8
OCCASION_MISMATCH = 0.5
OCCASION_CLASH = 0.45

YEAR_ROUND_SUBCATEGORIES = {
    "casual_blazer",
    "formal_blazer",
    "sweater",
    "hoodie",
    "sweatshirt",
    "work_jacket",
}
WARM_ONLY_SUBCATEGORIES = {"sandals", "sundress"}
WARM_LEANING_SUBCATEGORIES = {
    "casual_shorts",
    "athletic_shorts",
    "dressy_shorts",
    "tank_top",
    "sandals",
    "sundress",
    "cover_up",
    "swim_cover_up",
}
COLD_ONLY_SUBCATEGORIES = {"winter_boots", "ski_jacket", "parka"}
TRANSITIONAL_SUBCATEGORIES = {"jean_jacket", "spring_jacket"}

OCCASION_HINTS: Dict[str, set] = {
    "casual": {"tshirt", "jeans", "hoodie", "sweatshirt", "casual_pants", "sneakers", "casual_dress", "casual_shorts"},
    "work": {"blouse", "trousers", "formal_blazer", "work_dress", "loafers", "flats", "work_jacket", "polo"},
    "fancy": {"formal_dress", "formal_blazer", "heels", "dress_boots", "dressy_jumpsuit", "silk"},
    "party": {"party_dress", "heels", "mini_skirt", "dressy_jumpsuit", "dressy_shorts"},
    "vacation": {"sundress", "sandals", "casual_shorts", "tank_top", "sunglasses", "hats", "one_piece", "swim_top", "swim_bottom", "cover_up", "swim_cover_up"},
}
OCCASION_CLASHES: Dict[str, set] = {
    "casual": {"formal_dress"},
    "work": {"athletic_shorts", "workout_shirt", "soccer_shoes", "running_shoes", "swim_top", "swim_bottom", "one_piece", "tank_top"},
    "fancy": {"hoodie", "sweatshirt", "joggers", "athletic_shorts", "workout_shirt", "running_shoes", "soccer_shoes"},
    "party": {"workout_shirt", "athletic_shorts", "soccer_shoes"},
    "vacation": {"winter_boots", "parka", "ski_jacket"},
}


def fabric_register(fabric: str) -> str:
    if fabric in FORMAL_FABRICS:
        return "formal"
    if fabric in CASUAL_FABRICS:
        return "casual"
    return "unknown"


def fabric_pair_compatibility(fabric_a: str, fabric_b: str, season: Optional[str] = None) -> float:
    """Score a fabric pairing in [0, 1]. Symmetric."""

    if fabric_a in HEAVY_FABRICS and fabric_b in HEAVY_FABRICS and season in WARM_SEASONS:
        return HEAVY_IN_WARM_SEASON
    if fabric_a == fabric_b:
        return SAME_FABRIC if fabric_a != "other" else UNKNOWN_FABRIC
    register_a, register_b = fabric_register(fabric_a), fabric_register(fabric_b)
    if "unknown" in (register_a, register_b):
        return UNKNOWN_FABRIC
    if register_a == register_b:
        return SAME_REGISTER
    return MIXED_REGISTER


def outfit_fabric_score(items: Sequence[ClothingItem], season: Optional[str] = None) -> float:
    """Mean pairwise fabric compatibility across the outfit."""

    scores = [
        fabric_pair_compatibility(a.fabric_type, b.fabric_type, season)
        for a, b in combinations(items, 2)
    ]
    if not scores:
        return SAME_FABRIC
    return sum(scores) / len(scores)


def _untagged_season_fit(item: ClothingItem, season: str) -> float:
    sub = item.sub_category or ""
    if sub in YEAR_ROUND_SUBCATEGORIES or item.category == "blazers":
        return SEASON_MATCH

    if season == "winter":
        if sub in WARM_ONLY_SUBCATEGORIES:
            return SEASON_FLOOR
        if sub in WARM_LEANING_SUBCATEGORIES:
            return 0.2
    if season == "summer":
        if sub in COLD_ONLY_SUBCATEGORIES:
            return SEASON_FLOOR
    if sub in TRANSITIONAL_SUBCATEGORIES:
        if season in ("spring", "fall"):
            return SEASON_MATCH
        return 0.6 if season == "summer" else 0.7
    if sub == "raincoat":
        return SEASON_MATCH if season in ("spring", "fall") else 0.5

    # White trousers in winter are the one color rule worth enforcing.
    if season == "winter" and item.category == "bottoms" and hex_to_hsl(item.color).l > 90:
        return 0.3
    return SEASON_NEUTRAL


def season_fit(item: ClothingItem, season: Optional[str]) -> float:
    """Fit of ``item`` for ``season``; untagged items are neutral, never excluded."""

    if not season:
        return SEASON_NEUTRAL
    if item.seasons:
        return SEASON_MATCH if season in item.seasons else SEASON_MISMATCH
    return max(SEASON_FLOOR, _untagged_season_fit(item, season))


def occasion_fit(item: ClothingItem, occasion: Optional[str]) -> float:
    """Fit of ``item`` for ``occasion``; untagged items are neutral, never excluded."""

    if not occasion:
        return OCCASION_NEUTRAL
    if item.occasions:
        return OCCASION_MATCH if occasion in item.occasions else OCCASION_MISMATCH
    token = item.sub_category or ""
    if token in OCCASION_CLASHES.get(occasion, set()):
        return OCCASION_CLASH
    if token in OCCASION_HINTS.get(occasion, set()) or item.fabric_type in OCCASION_HINTS.get(occasion, set()):
        return OCCASION_HINTED
    return OCCASION_NEUTRAL


def average_fit(values: List[float], default: float) -> float:
    return sum(values) / len(values) if values else default


__all__ = [
    "fabric_pair_compatibility",
    "outfit_fabric_score",
    "season_fit",
    "occasion_fit",
    "average_fit",
    "SEASON_NEUTRAL",
    "OCCASION_NEUTRAL",
]
