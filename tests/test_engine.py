"""End-to-end engine scenarios against local stores."""

from __future__ import annotations

import random
import sys
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from closet_app.config import EngineConfig
from logic.engine import OutfitEngine, suggest_outfits
from logic.outfit_rules import is_valid_combo
from logic.repeat_detection import RepeatCheck
from memory.feedback_store import FeedbackService, JSONFeedbackStore
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from tools.catalog_store import SQLiteCatalogStore
from tools.outfit_store import JSONOutfitStore


def _basics():
    return [
        ClothingItem(item_id="tee", name="White tee", category="tops", sub_category="tshirt", color="#FFFFFF"),
        ClothingItem(item_id="jeans", name="Blue jeans", category="bottoms", sub_category="jeans", color="#1F3A93"),
        ClothingItem(item_id="blazer", name="Black blazer", category="blazers", color="#000000"),
        ClothingItem(item_id="sneakers", name="White sneakers", category="shoes", sub_category="sneakers", color="#FFFFFF"),
    ]


@pytest.fixture()
def engine(tmp_path: Path) -> OutfitEngine:
    catalog = SQLiteCatalogStore(tmp_path / "catalog.db")
    for item in _basics():
        catalog.create_item(item)
    feedback = FeedbackService(JSONFeedbackStore(tmp_path / "flagged.json"))
    return OutfitEngine(
        catalog=catalog,
        feedback=feedback,
        outfit_store=JSONOutfitStore(tmp_path / "outfits.json"),
        config=EngineConfig(data_dir=str(tmp_path)),
    )


def test_suggestions_are_valid_and_sorted(engine: OutfitEngine) -> None:
    results = engine.suggest_outfits(season="fall", occasion="casual")

    assert results
    assert all(is_valid_combo(result.items) for result in results)
    scores = [result.score for result in results]
    assert scores == sorted(scores, reverse=True)
    assert all(result.reasons for result in results)


def test_basic_closet_suggests_tee_and_jeans(engine: OutfitEngine) -> None:
    results = engine.suggest_outfits()

    assert results
    for result in results:
        assert {"tee", "jeans"} <= set(result.item_ids)
        assert result.score > 0
        assert any("color" in reason.lower() or "palette" in reason.lower() for reason in result.reasons)


def test_flagged_pattern_never_suggested_again(engine: OutfitEngine) -> None:
    engine.flag_outfit("tshirt+jeans", "too casual for me")

    results = engine.suggest_outfits()
    assert results
    assert all(result.pattern != "jeans+tshirt" for result in results)


def test_flag_suggestion_uses_its_pattern(engine: OutfitEngine) -> None:
    first = engine.suggest_outfits()[0]
    engine.flag_suggestion(first, "not for me")
    assert all(result.pattern != first.pattern for result in engine.suggest_outfits())
    assert engine.unflag_outfit(first.pattern)


def test_flag_requires_a_pattern(engine: OutfitEngine) -> None:
    with pytest.raises(ValidationError):
        engine.flag_outfit("", "empty")


def test_invalid_options_raise(engine: OutfitEngine) -> None:
    with pytest.raises(ValidationError):
        engine.suggest_outfits(season="monsoon")
    with pytest.raises(ValidationError):
        engine.suggest_outfits(max_results=0)


def test_repeat_detected_against_worn_history(engine: OutfitEngine) -> None:
    engine.outfit_store.save_outfit(
        Outfit(outfit_id="o1", name="Weekend", item_ids=["tee", "jeans"], worn_dates=["2024-01-01"])
    )

    check = engine.detect_repeat_outfit(["jeans", "tee"])

    assert check.is_repeat
    assert check.repeat_outfit_name == "Weekend"
    assert check.days_since_worn == (date.today() - date(2024, 1, 1)).days


def test_not_enough_items_returns_empty(tmp_path: Path) -> None:
    tee = _basics()[0]
    assert suggest_outfits([tee]) == []
    archived = ClothingItem(item_id="old", name="Old jeans", category="bottoms", color="#1F3A93", archived=True)
    assert suggest_outfits([tee, archived]) == []


def test_saved_ratings_bias_suggestions(engine: OutfitEngine) -> None:
    engine.outfit_store.save_outfit(
        Outfit(outfit_id="o1", name="Favourite", item_ids=["tee", "jeans", "sneakers"], rating=5)
    )
    results = engine.suggest_outfits()
    assert any("Similar to outfits you loved" in result.reasons for result in results)

    explicit = engine.suggest_outfits(rated_outfits=[])
    assert not any("Similar to outfits you loved" in result.reasons for result in explicit)


def test_max_results_caps_output(engine: OutfitEngine) -> None:
    assert len(engine.suggest_outfits(max_results=1)) == 1


def test_save_suggestion_and_log_worn(engine: OutfitEngine) -> None:
    suggestion = engine.suggest_outfits()[0]
    outfit = engine.save_suggestion(suggestion, rng=random.Random(1))

    assert outfit.name
    assert outfit.suggested
    assert engine.outfit_store.get_outfit(outfit.outfit_id) is not None

    engine.log_worn(outfit.outfit_id, on=date(2024, 5, 1))
    engine.log_worn(outfit.outfit_id, on=date(2024, 5, 1))
    for item_id in outfit.item_ids:
        assert engine.catalog.get_item(item_id).wear_count == 1
    assert engine.log_worn("missing") is None


def test_pure_suggestions_accept_flagged_patterns() -> None:
    results = suggest_outfits(_basics(), {"max_results": 10}, flagged_patterns={"tshirt+jeans"})
    assert results
    assert all(result.pattern != "jeans+tshirt" for result in results)


def test_flags_typed_with_legacy_labels_still_exclude() -> None:
    for typed in ("T-Shirt+Jeans", "tee+jeans"):
        results = suggest_outfits(_basics(), {"max_results": 10}, flagged_patterns={typed})
        assert results
        assert all(result.pattern != "jeans+tshirt" for result in results), typed


def test_engine_flag_is_stored_canonically(engine: OutfitEngine) -> None:
    flagged = engine.flag_outfit("Jeans + T-Shirt", reason="too casual")

    assert flagged.pattern == "jeans+tshirt"
    assert flagged.reason == "too casual"
    assert all(result.pattern != "jeans+tshirt" for result in engine.suggest_outfits())


def test_unreadable_history_degrades_to_empty(engine: OutfitEngine) -> None:
    engine.outfit_store.path.write_text("{not json")

    results = engine.suggest_outfits()
    assert results
    assert not any("Similar to outfits you loved" in result.reasons for result in results)
    assert engine.detect_repeat_outfit(["tee", "jeans"]) == RepeatCheck()
