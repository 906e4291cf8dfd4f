"""Ordering, deduplication and diversity filtering of scored outfits."""
from __future__ import annotations

import logging
from typing import FrozenSet, List, Sequence, Tuple

from logic.outfit_scoring import OutfitScore
from models.clothing_item import ClothingItem
from models.outfit import SuggestionResult

logger = logging.getLogger(__name__)

# Two results may share at most this Jaccard fraction of their items.
MAX_PAIRWISE_OVERLAP = 0.6

ScoredCandidate = Tuple[Sequence[ClothingItem], OutfitScore]


def item_overlap(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    union = a | b
    return len(a & b) / len(union) if union else 0.0


def _sort_key(entry: ScoredCandidate) -> Tuple[float, Tuple[str, ...]]:
    items, score = entry
    # Equal scores fall back to the sorted item ids so output is reproducible.
    return (-score.score, tuple(sorted(item.item_id for item in items)))


def rank_suggestions(
    scored: Sequence[ScoredCandidate],
    max_results: int,
    max_overlap: float = MAX_PAIRWISE_OVERLAP,
) -> List[SuggestionResult]:
    """Return up to ``max_results`` diverse suggestions, best first."""

    ordered = sorted((entry for entry in scored if not entry[1].excluded), key=_sort_key)
    selected: List[SuggestionResult] = []
    selected_keys: List[FrozenSet[str]] = []
    duplicates = 0
    too_similar = 0
    for items, score in ordered:
        if len(selected) >= max_results:
            break
        key = frozenset(item.item_id for item in items)
        if key in selected_keys:
            duplicates += 1
            continue
        if any(item_overlap(key, other) > max_overlap for other in selected_keys):
            too_similar += 1
            continue
        selected_keys.append(key)
        selected.append(
            SuggestionResult(items=list(items), score=score.score, reasons=list(score.reasons), pattern=score.pattern)
        )
    logger.info(
        "Ranked %s scored outfits -> %s results (%s duplicates, %s too similar)",
        len(ordered),
        len(selected),
        duplicates,
        too_similar,
    )
    return selected


__all__ = ["rank_suggestions", "item_overlap", "MAX_PAIRWISE_OVERLAP"]
