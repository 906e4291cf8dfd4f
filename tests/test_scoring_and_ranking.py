"""Outfit scoring and ranking tests."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.outfit_scoring import OutfitScore, UNFILTERED_FIT, rating_bias, score_outfit
from logic.ranking import item_overlap, rank_suggestions
from logic.validation import RatedOutfit
from models.clothing_item import ClothingItem


def _item(item_id: str, category: str, color: str = "#808080", **kwargs) -> ClothingItem:
    return ClothingItem(item_id=item_id, name=item_id, category=category, color=color, **kwargs)


TEE = _item("tee", "tops", "#FFFFFF", sub_category="tshirt", fabric_type="cotton")
JEANS = _item("jeans", "bottoms", "#1F3A93", sub_category="jeans", fabric_type="denim")
SNEAKERS = _item("sneakers", "shoes", "#FFFFFF", sub_category="sneakers")


def test_scoring_is_deterministic() -> None:
    first = score_outfit([TEE, JEANS, SNEAKERS], season="summer", occasion="casual")
    second = score_outfit([TEE, JEANS, SNEAKERS], season="summer", occasion="casual")
    assert first == second
    assert first.pattern == "jeans+sneakers+tshirt"
    assert not first.excluded


def test_unfiltered_season_and_occasion_use_midpoint() -> None:
    result = score_outfit([TEE, JEANS])
    assert result.sub_scores["season"] == UNFILTERED_FIT
    assert result.sub_scores["occasion"] == UNFILTERED_FIT


def test_rating_bias_is_monotonic() -> None:
    items = [TEE, JEANS]
    loved = [RatedOutfit(item_ids=["tee", "jeans"], rating=5)]
    hated = [RatedOutfit(item_ids=["tee", "jeans"], rating=1)]
    liked = [RatedOutfit(item_ids=["tee", "jeans"], rating=4)]

    neutral_score = score_outfit(items).score
    assert score_outfit(items, rated_outfits=loved).score > score_outfit(items, rated_outfits=liked).score
    assert score_outfit(items, rated_outfits=liked).score > neutral_score
    assert score_outfit(items, rated_outfits=hated).score < neutral_score
    assert "Similar to outfits you loved" in score_outfit(items, rated_outfits=loved).reasons
    assert "Close to an outfit you rated low" in score_outfit(items, rated_outfits=hated).reasons


def test_rating_bias_ignores_unknown_items() -> None:
    history = [RatedOutfit(item_ids=["ghost"], rating=5)]
    assert rating_bias(["tee", "jeans"], history, known_item_ids={"tee", "jeans"}) == (0.0, 0.0)


def test_color_clash_lowers_score() -> None:
    red = _item("red", "tops", "#FF0000", fabric_type="cotton")
    yellow = _item("yellow", "bottoms", "#FFFF00", fabric_type="cotton")
    white = _item("white", "tops", "#FFFFFF", fabric_type="cotton")
    black = _item("black", "bottoms", "#000000", fabric_type="cotton")
    assert score_outfit([red, yellow]).score < score_outfit([white, black]).score


def test_flagged_pattern_is_excluded() -> None:
    result = score_outfit([TEE, JEANS], flagged_patterns=frozenset({"jeans+tshirt"}))
    assert result.excluded
    assert not score_outfit([TEE, JEANS, SNEAKERS], flagged_patterns=frozenset({"jeans+tshirt"})).excluded


def test_reasons_describe_the_outfit() -> None:
    summer_tee = _item("st", "tops", "#FFFFFF", sub_category="tshirt", seasons=["summer"], fabric_type="cotton")
    summer_shorts = _item(
        "ss", "skirts_shorts", "#000000", sub_category="casual_shorts", seasons=["summer"], fabric_type="cotton"
    )
    result = score_outfit([summer_tee, summer_shorts, SNEAKERS], season="summer")
    assert "Great for Summer" in result.reasons
    assert "Complete with shoes" in result.reasons
    assert "Classic neutral palette" in result.reasons
    assert result.sub_scores["bonus"] == 2.0


def _scored(ids, score, excluded=False):
    items = [_item(item_id, "tops") for item_id in ids]
    return items, OutfitScore(score=score, pattern="+".join(sorted(ids)), excluded=excluded)


def test_ranking_orders_by_score_then_ids() -> None:
    results = rank_suggestions([_scored(["c", "d"], 50.0), _scored(["a", "b"], 50.0), _scored(["e", "f"], 70.0)], 5)
    assert [r.item_ids for r in results] == [["e", "f"], ["a", "b"], ["c", "d"]]


def test_ranking_drops_duplicates_and_excluded() -> None:
    results = rank_suggestions(
        [_scored(["a", "b"], 60.0), _scored(["b", "a"], 60.0), _scored(["x", "y"], 99.0, excluded=True)], 5
    )
    assert [sorted(r.item_ids) for r in results] == [["a", "b"]]


def test_ranking_enforces_diversity_and_limit() -> None:
    scored = [
        _scored(["a", "b", "c"], 90.0),
        _scored(["a", "b", "c", "d"], 85.0),
        _scored(["a", "e", "f"], 80.0),
        _scored(["g", "h"], 70.0),
    ]
    results = rank_suggestions(scored, 5)
    assert [r.item_ids for r in results] == [["a", "b", "c"], ["a", "e", "f"], ["g", "h"]]
    assert len(rank_suggestions(scored, 1)) == 1
    for i, first in enumerate(results):
        for second in results[i + 1:]:
            assert item_overlap(frozenset(first.item_ids), frozenset(second.item_ids)) <= 0.6
