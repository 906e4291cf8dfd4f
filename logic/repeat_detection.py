"""Detect suggestions that repeat a recently worn outfit."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Iterable, Optional, Sequence

from models.clothing_item import ClothingItem
from models.outfit import Outfit

logger = logging.getLogger(__name__)

NEAR_REPEAT_THRESHOLD = 0.7


@dataclass(frozen=True)
class RepeatCheck:
    """Outcome of comparing a candidate with the wear log."""

    is_repeat: bool = False
    near_repeat: bool = False
    overlap_pct: Optional[int] = None
    repeat_outfit_name: Optional[str] = None
    days_since_worn: Optional[int] = None


def overlap_ratio(candidate: AbstractSet[str], worn: AbstractSet[str]) -> float:
    """Shared items over the larger of the two outfits."""

    largest = max(len(candidate), len(worn))
    return len(candidate & worn) / largest if largest else 0.0


def _item_ids(items: Iterable[ClothingItem | str]) -> set:
    return {item if isinstance(item, str) else item.item_id for item in items}


def detect_repeat_outfit(
    items: Iterable[ClothingItem | str],
    outfit_history: Sequence[Outfit],
    today: Optional[date] = None,
    known_item_ids: Optional[AbstractSet[str]] = None,
    threshold: float = NEAR_REPEAT_THRESHOLD,
) -> RepeatCheck:
    """Compare a candidate (items or item ids) with outfits that were worn.

    An identical item set is a repeat; an overlap of at least ``threshold``
    is a near repeat. Among equal overlaps the most recently worn outfit
    wins.

    Item ids missing from ``known_item_ids`` (deleted from the catalog) are
    dropped from both sides before comparing, so a worn outfit whose extra
    piece was since deleted counts as an exact repeat of the remaining items.
    """

    today = today or date.today()
    candidate = _item_ids(items)
    if known_item_ids is not None:
        candidate &= known_item_ids
    if not candidate:
        return RepeatCheck()

    best: Optional[tuple] = None
    for outfit in outfit_history:
        last_worn = outfit.last_worn()
        if last_worn is None:
            continue
        worn_ids = set(outfit.item_ids)
        if known_item_ids is not None:
            worn_ids &= known_item_ids
        if not worn_ids:
            continue
        ratio = round(overlap_ratio(candidate, worn_ids), 4)
        exact = worn_ids == candidate
        rank = (exact, ratio, last_worn)
        if best is None or rank > best[0]:
            best = (rank, outfit, last_worn)

    if best is None:
        return RepeatCheck()

    (exact, ratio, _), outfit, last_worn = best
    days_since = (today - last_worn).days
    if exact:
        logger.info("Candidate repeats outfit %s worn %s days ago", outfit.outfit_id, days_since)
        return RepeatCheck(
            is_repeat=True,
            overlap_pct=100,
            repeat_outfit_name=outfit.name,
            days_since_worn=days_since,
        )
    if ratio >= threshold:
        return RepeatCheck(
            near_repeat=True,
            overlap_pct=round(ratio * 100),
            repeat_outfit_name=outfit.name,
            days_since_worn=days_since,
        )
    return RepeatCheck()


__all__ = ["RepeatCheck", "detect_repeat_outfit", "overlap_ratio", "NEAR_REPEAT_THRESHOLD"]
