"""Taxonomy, clothing item and outfit model tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models import taxonomy
from models.clothing_item import ClothingItem, from_raw_metadata, normalize_hex
from models.outfit import Outfit, SuggestionResult, outfit_from_suggestion, rating_from_score


def test_category_validation_accepts_legacy_labels() -> None:
    assert taxonomy.validate_category("Top") == "tops"
    assert taxonomy.validate_category("outerwear") == "jackets"
    with pytest.raises(ValueError):
        taxonomy.validate_category("spacesuit")


def test_subcategory_validation() -> None:
    assert taxonomy.validate_subcategory("tops", "T-Shirt") == "tshirt"
    assert taxonomy.validate_subcategory("shoes", "trainers") == "sneakers"
    assert taxonomy.validate_subcategory("tops", "  ") is None
    with pytest.raises(ValueError):
        taxonomy.validate_subcategory("tops", "jeans")


def test_tags_and_fabric_are_normalised() -> None:
    assert taxonomy.normalise_tags(["Autumn", "fall", "Winter", "monsoon"], taxonomy.SEASONS) == ["fall", "winter"]
    assert taxonomy.normalize_fabric("Cotton") == "cotton"
    assert taxonomy.normalize_fabric("kevlar") == "other"
    assert taxonomy.normalize_fabric(None) == "other"


def test_hex_normalisation() -> None:
    assert normalize_hex("fff") == "#FFFFFF"
    assert normalize_hex("#1a2b3c") == "#1A2B3C"
    with pytest.raises(ValueError):
        normalize_hex("blue")


def test_always_open_subcategories_force_is_open() -> None:
    cardigan = ClothingItem(item_id="c1", name="Cardigan", category="tops", color="#808080", sub_category="cardigan")
    assert cardigan.is_open


def test_is_open_dropped_for_non_layering_piece() -> None:
    tee = ClothingItem(item_id="t1", name="Tee", category="tops", color="#FFFFFF", sub_category="tshirt", is_open=True)
    jeans = ClothingItem(item_id="j1", name="Jeans", category="bottoms", color="#1F3A93", is_open=True)
    assert not tee.is_open
    assert not jeans.is_open


def test_item_colors_and_type_token() -> None:
    item = ClothingItem(
        item_id="s1",
        name="Striped shirt",
        category="tops",
        color="#FFFFFF",
        sub_category="blouse",
        secondary_color="#000080",
    )
    assert item.colors == ["#FFFFFF", "#000080"]
    assert item.type_token == "blouse"
    blazer = ClothingItem(item_id="b1", name="Blazer", category="blazers", color="#000000")
    assert blazer.type_token == "blazers"


def test_from_raw_metadata_accepts_camel_case() -> None:
    item = from_raw_metadata(
        {
            "id": 42,
            "name": "Denim",
            "category": "bottoms",
            "subCategory": "jeans",
            "color": "#1F3A93",
            "fabricType": "denim",
            "wearCount": "3",
            "seasons": "autumn",
        }
    )
    assert item.item_id == "42"
    assert item.sub_category == "jeans"
    assert item.fabric_type == "denim"
    assert item.wear_count == 3
    assert item.seasons == ["fall"]


def test_from_raw_metadata_requires_core_fields() -> None:
    with pytest.raises(ValueError):
        from_raw_metadata({"name": "Mystery", "category": "tops"})


def test_outfit_worn_dates_skip_malformed_entries() -> None:
    outfit = Outfit(
        outfit_id="o1",
        name="Friday",
        item_ids=["a", "b"],
        worn_dates=["2024-01-01", "not-a-date", "2024-03-05T10:00:00"],
    )
    assert outfit.parsed_worn_dates() == [date(2024, 1, 1), date(2024, 3, 5)]
    assert outfit.last_worn() == date(2024, 3, 5)
    assert Outfit(outfit_id="o2", name="Never", item_ids=["a"]).last_worn() is None


def test_outfit_rating_is_clamped() -> None:
    assert Outfit(outfit_id="o1", name="x", item_ids=["a"], rating=9).rating == 5
    assert Outfit(outfit_id="o1", name="x", item_ids=["a"], rating=0).rating == 1


def test_outfit_from_suggestion() -> None:
    top = ClothingItem(item_id="t", name="Tee", category="tops", color="#FFFFFF", occasions=["casual"])
    jeans = ClothingItem(item_id="j", name="Jeans", category="bottoms", color="#1F3A93", seasons=["fall"])
    suggestion = SuggestionResult(items=[top, jeans], score=81.0, pattern="bottoms+tops")

    outfit = outfit_from_suggestion(suggestion, "Easy Denim")

    assert outfit.item_ids == ["t", "j"]
    assert outfit.suggested
    assert outfit.rating == rating_from_score(81.0) == 4
    assert outfit.occasions == ["casual"]
    assert outfit.seasons == ["fall"]
