"""Deterministic scoring for candidate outfits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from logic.compatibility import average_fit, occasion_fit, outfit_fabric_score, season_fit
from logic.outfit_rules import LAYER, SHOES, slot_for
from memory.feedback_store import canonical_pattern
from models.clothing_item import ClothingItem
from models.color_theory import evaluate_harmony

WEIGHTS = {
    "color": 40.0,
    "fabric": 25.0,
    "season": 20.0,
    "occasion": 10.0,
    "rating": 10.0,
}
COMPLETENESS_BONUS = {
    "shoes": 2.0,
    "accessory": 1.0,
}
# Sub-score used for season/occasion when the request does not filter on it.
UNFILTERED_FIT = 0.5
# Share of the color sub-score taken from the worst color pair.
WORST_PAIR_WEIGHT = 0.4

THRESHOLDS = {
    "color_excellent": 0.85,
    "color_good": 0.7,
    "fabric": 0.8,
    "season": 0.85,
    "occasion": 0.85,
    "rating": 0.5,
}


class Rated(Protocol):
    item_ids: List[str]
    rating: int


@dataclass(frozen=True)
class OutfitScore:
    """Composite score with the sub-scores and reasons behind it.

    ``excluded`` is set when the outfit matches a flagged pattern; such an
    outfit must never be returned.
    """

    score: float
    reasons: List[str] = field(default_factory=list)
    sub_scores: Dict[str, float] = field(default_factory=dict)
    pattern: str = ""
    excluded: bool = False


def _jaccard(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    union = a | b
    return len(a & b) / len(union) if union else 0.0


def rating_bias(
    item_ids: Iterable[str],
    rated_outfits: Sequence[Rated],
    known_item_ids: Optional[AbstractSet[str]] = None,
) -> Tuple[float, float]:
    """Return ``(affinity, aversion)`` against rated history, each in [0, 1].

    Affinity is the strongest Jaccard overlap with a well-rated outfit scaled
    by how far its rating sits above 3 stars; aversion mirrors it for ratings
    below 3. Ids that are no longer in the catalog are ignored.
    """

    candidate = set(item_ids)
    affinity = 0.0
    aversion = 0.0
    for rated in rated_outfits:
        history = set(rated.item_ids)
        if known_item_ids is not None:
            history &= known_item_ids
        if not history:
            continue
        weight = (int(rated.rating) - 3) / 2
        overlap = _jaccard(candidate, history)
        if weight > 0:
            affinity = max(affinity, overlap * weight)
        elif weight < 0:
            aversion = max(aversion, overlap * -weight)
    return affinity, aversion


def score_outfit(
    items: Sequence[ClothingItem],
    season: Optional[str] = None,
    occasion: Optional[str] = None,
    rated_outfits: Sequence[Rated] = (),
    flagged_patterns: AbstractSet[str] = frozenset(),
    known_item_ids: Optional[AbstractSet[str]] = None,
) -> OutfitScore:
    """Calculate the composite score and reasons for one candidate."""

    pattern = canonical_pattern(items)
    if pattern in flagged_patterns:
        return OutfitScore(score=0.0, pattern=pattern, excluded=True)

    harmony = evaluate_harmony([color for item in items for color in item.colors], WORST_PAIR_WEIGHT)
    color_val = harmony.score
    fabric_val = outfit_fabric_score(items, season)
    season_val = average_fit([season_fit(item, season) for item in items], UNFILTERED_FIT) if season else UNFILTERED_FIT
    occasion_val = (
        average_fit([occasion_fit(item, occasion) for item in items], UNFILTERED_FIT) if occasion else UNFILTERED_FIT
    )
    affinity, aversion = rating_bias((item.item_id for item in items), rated_outfits, known_item_ids)
    rating_val = affinity - aversion

    slots = [slot_for(item) for item in items]
    bonus = 0.0
    if SHOES in slots:
        bonus += COMPLETENESS_BONUS["shoes"]
    if any(item.category in ("accessories", "jewelry") for item in items):
        bonus += COMPLETENESS_BONUS["accessory"]

    composite = (
        color_val * WEIGHTS["color"]
        + fabric_val * WEIGHTS["fabric"]
        + season_val * WEIGHTS["season"]
        + occasion_val * WEIGHTS["occasion"]
        + rating_val * WEIGHTS["rating"]
        + bonus
    )

    reasons: List[str] = []
    if color_val > THRESHOLDS["color_excellent"]:
        reasons.append("Excellent color harmony")
    elif color_val > THRESHOLDS["color_good"]:
        reasons.append("Good color pairing")
    if harmony.rule_used == "monochrome":
        reasons.append("Matching color family")
    elif harmony.rule_used == "neutral":
        reasons.append("Classic neutral palette")
    elif harmony.rule_used == "complementary":
        reasons.append("Complementary contrast")
    if fabric_val > THRESHOLDS["fabric"]:
        reasons.append("Well-balanced fabrics")
    if season and season_val > THRESHOLDS["season"]:
        reasons.append(f"Great for {season.title()}")
    if occasion and occasion_val > THRESHOLDS["occasion"]:
        reasons.append(f"Good fit for {occasion}")
    if affinity >= THRESHOLDS["rating"]:
        reasons.append("Similar to outfits you loved")
    if aversion >= THRESHOLDS["rating"]:
        reasons.append("Close to an outfit you rated low")
    if SHOES in slots:
        reasons.append("Complete with shoes")
    if any(item.category in ("dresses", "jumpsuits") for item in items):
        reasons.append("Dress-based look")
    if any(item.category == "blazers" for item in items):
        reasons.append("Polished with blazer")
    elif LAYER in slots:
        reasons.append("Layered look")

    return OutfitScore(
        score=round(max(0.0, composite), 6),
        reasons=reasons,
        sub_scores={
            "color": color_val,
            "worst_color_pair": harmony.worst_pair,
            "fabric": fabric_val,
            "season": season_val,
            "occasion": occasion_val,
            "rating": rating_val,
            "bonus": bonus,
        },
        pattern=pattern,
    )


__all__ = ["score_outfit", "rating_bias", "OutfitScore", "WEIGHTS", "COMPLETENESS_BONUS", "THRESHOLDS"]
