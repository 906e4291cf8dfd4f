"""Color harmony and fabric/season/occasion compatibility tests."""

from __future__ import annotations

import sys
from itertools import combinations
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.compatibility import (
    OCCASION_CLASH,
    OCCASION_HINTED,
    SEASON_NEUTRAL,
    fabric_pair_compatibility,
    occasion_fit,
    outfit_fabric_score,
    season_fit,
)
from models.clothing_item import ClothingItem
from models.color_theory import color_family, evaluate_harmony, is_neutral, pair_harmony
from models.taxonomy import FABRIC_TYPES

SAMPLE_COLORS = ["#FFFFFF", "#000000", "#808080", "#FF0000", "#FFFF00", "#00FF00", "#0000FF", "#1F3A93", "#FF8800"]


def _item(item_id: str, category: str, color: str = "#808080", **kwargs) -> ClothingItem:
    return ClothingItem(item_id=item_id, name=item_id, category=category, color=color, **kwargs)


def test_neutral_detection_and_families() -> None:
    assert is_neutral("#FFFFFF")
    assert is_neutral("#000000")
    assert is_neutral("#808080")
    assert not is_neutral("#FF0000")
    assert color_family("#FF0000") == "red"
    assert color_family("#0000FF") == "blue"
    assert color_family("#F5F5F5") == "neutral"


def test_pair_harmony_is_symmetric_and_bounded() -> None:
    for a, b in combinations(SAMPLE_COLORS, 2):
        assert pair_harmony(a, b) == pair_harmony(b, a)
        assert 0.0 <= pair_harmony(a, b) <= 1.0


def test_neutral_pairs_beat_clashing_hues() -> None:
    assert pair_harmony("#FFFFFF", "#000000") == 0.9
    assert pair_harmony("#FFFFFF", "#FF0000") == 0.85
    assert pair_harmony("#FF0000", "#FFFF00") < pair_harmony("#FFFFFF", "#000000")


def test_worst_pair_drags_outfit_harmony_down() -> None:
    calm = evaluate_harmony(["#FFFFFF", "#000000", "#808080"])
    clash = evaluate_harmony(["#FFFFFF", "#FF0000", "#FFFF00"])
    assert calm.rule_used == "neutral"
    assert clash.worst_pair < calm.worst_pair
    assert clash.score < calm.score


def test_single_color_harmony() -> None:
    result = evaluate_harmony(["#FF0000"])
    assert result.rule_used == "single"
    assert result.score == 0.85


def test_fabric_compatibility_is_symmetric() -> None:
    for a, b in combinations(FABRIC_TYPES, 2):
        for season in (None, "summer", "winter"):
            assert fabric_pair_compatibility(a, b, season) == fabric_pair_compatibility(b, a, season)


def test_heavy_fabrics_penalised_in_warm_seasons() -> None:
    assert fabric_pair_compatibility("wool", "leather", "summer") < fabric_pair_compatibility("wool", "leather", "winter")
    assert fabric_pair_compatibility("cotton", "cotton") > fabric_pair_compatibility("cotton", "silk")


def test_outfit_fabric_score_for_single_item() -> None:
    assert outfit_fabric_score([_item("a", "tops", fabric_type="cotton")]) == 0.9


def test_season_fit_is_advisory() -> None:
    sandals = _item("s", "shoes", sub_category="sandals")
    tagged = _item("t", "tops", seasons=["summer"])
    plain = _item("p", "tops")

    assert season_fit(sandals, "winter") > 0
    assert season_fit(sandals, "winter") < season_fit(sandals, "summer")
    assert season_fit(tagged, "summer") == 1.0
    assert 0 < season_fit(tagged, "winter") < 1.0
    assert season_fit(plain, "spring") == SEASON_NEUTRAL
    assert season_fit(plain, None) == SEASON_NEUTRAL


def test_occasion_fit_uses_tags_then_hints() -> None:
    hoodie = _item("h", "tops", sub_category="hoodie")
    loafers = _item("l", "shoes", sub_category="loafers")
    tagged = _item("t", "tops", occasions=["party"])

    assert occasion_fit(hoodie, "fancy") == OCCASION_CLASH
    assert occasion_fit(loafers, "work") == OCCASION_HINTED
    assert occasion_fit(tagged, "party") == 1.0
    assert 0 < occasion_fit(tagged, "work") < 1.0
