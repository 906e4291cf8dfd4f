"""Repeat detection and outfit naming tests."""

from __future__ import annotations

import random
import sys
from datetime import date
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.outfit_naming import CATEGORY_NOUNS, FALLBACK_NAME, FAMILY_WORDS, generate_outfit_name
from logic.repeat_detection import detect_repeat_outfit, overlap_ratio
from models.clothing_item import ClothingItem
from models.outfit import Outfit

TODAY = date(2024, 1, 11)


def _worn(outfit_id: str, item_ids, *dates: str) -> Outfit:
    return Outfit(outfit_id=outfit_id, name=f"Outfit {outfit_id}", item_ids=list(item_ids), worn_dates=list(dates))


def test_exact_repeat_reports_days_since_worn() -> None:
    history = [_worn("o1", ["a", "b", "c"], "2024-01-01")]
    check = detect_repeat_outfit(["c", "b", "a"], history, today=TODAY)
    assert check.is_repeat
    assert not check.near_repeat
    assert check.overlap_pct == 100
    assert check.repeat_outfit_name == "Outfit o1"
    assert check.days_since_worn == 10


def test_near_repeat_threshold_is_inclusive() -> None:
    worn = [str(i) for i in range(10)]
    history = [_worn("o1", worn, "2024-01-05")]

    at_threshold = detect_repeat_outfit(worn[:7], history, today=TODAY)
    assert at_threshold.near_repeat
    assert at_threshold.overlap_pct == 70
    assert at_threshold.days_since_worn == 6

    below = detect_repeat_outfit(worn[:6], history, today=TODAY)
    assert not below.near_repeat
    assert not below.is_repeat


def test_no_overlap_is_not_a_repeat() -> None:
    check = detect_repeat_outfit(["x", "y"], [_worn("o1", ["a", "b"], "2024-01-01")], today=TODAY)
    assert not check.is_repeat
    assert not check.near_repeat
    assert check.overlap_pct is None


def test_deleted_items_do_not_count_against_a_repeat() -> None:
    history = [_worn("o1", ["tee", "jeans", "gone"], "2024-01-10")]

    check = detect_repeat_outfit(["jeans", "tee"], history, today=TODAY, known_item_ids={"tee", "jeans"})
    assert check.is_repeat
    assert check.overlap_pct == 100

    unfiltered = detect_repeat_outfit(["jeans", "tee"], history, today=TODAY)
    assert not unfiltered.is_repeat
    assert not unfiltered.near_repeat


def test_accepts_clothing_items() -> None:
    items = [
        ClothingItem(item_id="a", name="Tee", category="tops", color="#FFFFFF"),
        ClothingItem(item_id="b", name="Jeans", category="bottoms", color="#1F3A93"),
    ]
    assert detect_repeat_outfit(items, [_worn("o1", ["a", "b"], "2024-01-10")], today=TODAY).is_repeat


def test_unworn_and_malformed_history_is_skipped() -> None:
    history = [
        _worn("never", ["a", "b"]),
        _worn("garbled", ["a", "b"], "yesterday", "01/02/2024"),
    ]
    assert not detect_repeat_outfit(["a", "b"], history, today=TODAY).is_repeat


def test_unknown_item_ids_are_ignored() -> None:
    history = [_worn("o1", ["a", "b", "deleted"], "2024-01-01")]
    check = detect_repeat_outfit(["a", "b", "ghost"], history, today=TODAY, known_item_ids={"a", "b"})
    assert check.is_repeat


def test_most_recent_outfit_wins_ties() -> None:
    history = [
        _worn("old", ["a", "b"], "2023-06-01"),
        _worn("recent", ["a", "b"], "2023-12-01", "2024-01-09"),
    ]
    check = detect_repeat_outfit(["a", "b"], history, today=TODAY)
    assert check.repeat_outfit_name == "Outfit recent"
    assert check.days_since_worn == 2


def test_overlap_ratio_uses_larger_outfit() -> None:
    assert overlap_ratio({"a", "b"}, {"a", "b", "c", "d"}) == 0.5
    assert overlap_ratio(set(), set()) == 0.0


def test_names_are_reproducible_with_a_seed() -> None:
    items = [
        ClothingItem(item_id="d", name="Dress", category="dresses", color="#AA3355", fabric_type="silk"),
        ClothingItem(item_id="h", name="Heels", category="shoes", color="#000000", sub_category="heels"),
    ]
    first = generate_outfit_name(items, random.Random(5))
    assert first == generate_outfit_name(items, random.Random(5))
    assert any(noun in first for noun in CATEGORY_NOUNS["dresses"])
    assert "  " not in first


def test_neutral_outfit_uses_neutral_vocabulary() -> None:
    items = [
        ClothingItem(item_id="t", name="Tee", category="tops", color="#FFFFFF"),
        ClothingItem(item_id="b", name="Trousers", category="bottoms", color="#000000"),
    ]
    for seed in range(10):
        name = generate_outfit_name(items, random.Random(seed))
        assert any(word in name for word in FAMILY_WORDS["neutral"])


def test_empty_outfit_gets_fallback_name() -> None:
    assert generate_outfit_name([]) == FALLBACK_NAME
