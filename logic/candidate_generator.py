"""Bounded enumeration of structurally valid outfit combinations."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from itertools import product
from math import prod
from typing import Dict, List, Optional, Sequence, Tuple

from logic.outfit_rules import (
    ACCESSORY,
    BASE_TOP,
    BOTTOM,
    DRESS,
    LAYER,
    MIN_OUTFIT_ITEMS,
    OUTERWEAR,
    SHOES,
    SWIM_BOTTOM,
    SWIM_COVER,
    SWIM_PIECE,
    SWIM_TOP,
    is_valid_combo,
    partition_by_slot,
)
from models.clothing_item import ClothingItem
from models.taxonomy import JEWELRY_SUBCATEGORIES

logger = logging.getLogger(__name__)

PER_SLOT_LIMIT = 8
MAX_CANDIDATES = 1500
MAX_ACCESSORIES = 2
DEFAULT_SEED = 1729

Candidate = Tuple[ClothingItem, ...]


@dataclass(frozen=True)
class GeneratorLimits:
    """Bounds that keep enumeration interactive on large closets."""

    per_slot_limit: int = PER_SLOT_LIMIT
    max_candidates: int = MAX_CANDIDATES
    max_accessories: int = MAX_ACCESSORIES
    seed: int = DEFAULT_SEED


@dataclass(frozen=True)
class CandidateGenerationResult:
    candidates: List[Candidate]
    diagnostics: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class _Space:
    """One family of combinations: a base axis followed by optional axes."""

    kind: str
    axes: Tuple[Tuple[Optional[Tuple[ClothingItem, ...]], ...], ...]

    @property
    def size(self) -> int:
        return prod(len(axis) for axis in self.axes)

    def decode(self, index: int) -> List[ClothingItem]:
        chosen: List[ClothingItem] = []
        for axis in reversed(self.axes):
            index, position = divmod(index, len(axis))
            picked = axis[position]
            if picked:
                chosen[:0] = list(picked)
        return chosen


def _preference_key(item: ClothingItem) -> Tuple[bool, int, str]:
    # Favourites first, then the least worn, then a stable id order.
    return (not item.favorite, item.wear_count, item.item_id)


def _limit(items: List[ClothingItem], limit: int) -> List[ClothingItem]:
    return sorted(items, key=_preference_key)[: max(0, limit)]


def _optional(items: Sequence[ClothingItem]) -> Tuple[Optional[Tuple[ClothingItem, ...]], ...]:
    return (None,) + tuple((item,) for item in items)


def _build_spaces(grouped: Dict[str, List[ClothingItem]]) -> List[_Space]:
    spaces: List[_Space] = []
    layers = _optional(grouped[LAYER])
    outerwear = _optional(grouped[OUTERWEAR])
    shoes = _optional(grouped[SHOES])
    accessories = _optional(grouped[ACCESSORY])

    separates = tuple((top, bottom) for top in grouped[BASE_TOP] for bottom in grouped[BOTTOM])
    if separates:
        spaces.append(_Space("separates", (separates, layers, outerwear, shoes, accessories)))
    dresses = tuple((dress,) for dress in grouped[DRESS])
    if dresses:
        spaces.append(_Space("dress", (dresses, layers, outerwear, shoes, accessories)))

    swim_bases = tuple((piece,) for piece in grouped[SWIM_PIECE]) + tuple(
        (top, bottom) for top in grouped[SWIM_TOP] for bottom in grouped[SWIM_BOTTOM]
    )
    if swim_bases:
        spaces.append(_Space("swim", (swim_bases, _optional(grouped[SWIM_COVER]), shoes, accessories)))
    return spaces


def enrich_with_accessories(
    combo: List[ClothingItem], accessories: Sequence[ClothingItem], max_accessories: int = MAX_ACCESSORIES
) -> List[ClothingItem]:
    """Add a belt to trousers and jewelry to blazer looks, within the accessory cap."""

    if not accessories:
        return combo
    used_subs = {item.type_token for item in combo if item.category in ("accessories", "jewelry")}
    room = max_accessories - len(used_subs)
    extras: List[ClothingItem] = []

    if room > 0 and any(item.category == "bottoms" for item in combo) and "belts" not in used_subs:
        belt = next((a for a in accessories if a.sub_category == "belts"), None)
        if belt:
            extras.append(belt)
            used_subs.add("belts")

    if any(item.category == "blazers" for item in combo):
        for sub in JEWELRY_SUBCATEGORIES:
            if len(extras) >= room:
                break
            if sub in used_subs:
                continue
            piece = next((a for a in accessories if a.sub_category == sub), None)
            if piece:
                extras.append(piece)
                used_subs.add(sub)

    return combo + extras[: max(0, room)]


def _sample_indices(total: int, count: int, excluded: set, rng: random.Random) -> List[int]:
    picked: List[int] = []
    if count <= 0:
        return picked
    for index in rng.sample(range(total), min(total, count + len(excluded))):
        if index in excluded:
            continue
        picked.append(index)
        if len(picked) >= count:
            break
    return sorted(picked)


def generate_candidates(
    items: Sequence[ClothingItem], limits: GeneratorLimits | None = None
) -> CandidateGenerationResult:
    """Enumerate outfit candidates from the active items in ``items``.

    When the combination space exceeds ``limits.max_candidates`` every bare
    base (shirt and bottom, dress, or swim set) is kept and the remainder is
    drawn with a seeded sampler, so results stay reproducible.
    """

    limits = limits or GeneratorLimits()
    active = [item for item in items if not item.archived]
    diagnostics: Dict[str, object] = {
        "active_count": len(active),
        "archived_skipped": len(items) - len(active),
        "sampled": False,
    }
    if len(active) < MIN_OUTFIT_ITEMS:
        logger.info("Only %s eligible items, skipping candidate generation", len(active))
        diagnostics["status"] = "not_enough_items"
        return CandidateGenerationResult(candidates=[], diagnostics=diagnostics)

    full = partition_by_slot(active)
    accessory_pool = sorted(full[ACCESSORY], key=_preference_key)
    grouped = {slot: _limit(values, limits.per_slot_limit) for slot, values in full.items()}
    diagnostics["slot_counts"] = {slot: len(values) for slot, values in full.items() if values}

    spaces = _build_spaces(grouped)
    total = sum(space.size for space in spaces)
    diagnostics["search_space"] = total

    raw: List[List[ClothingItem]] = []
    if total <= limits.max_candidates:
        for space in spaces:
            for picks in product(*space.axes):
                raw.append([item for pick in picks if pick for item in pick])
    else:
        diagnostics["sampled"] = True
        rng = random.Random(limits.seed)
        bare_indices = set()
        offset = 0
        for space in spaces:
            stride = space.size // len(space.axes[0])
            for position, base in enumerate(space.axes[0]):
                raw.append(list(base))
                bare_indices.add(offset + position * stride)
            offset += space.size
        for index in _sample_indices(total, limits.max_candidates - len(raw), bare_indices, rng):
            for space in spaces:
                if index < space.size:
                    raw.append(space.decode(index))
                    break
                index -= space.size
        logger.info("Sampled %s of %s possible combinations", len(raw), total)

    candidates: List[Candidate] = []
    seen = set()
    for combo in raw:
        enriched = enrich_with_accessories(combo, accessory_pool, limits.max_accessories)
        if len(enriched) < MIN_OUTFIT_ITEMS or not is_valid_combo(enriched):
            continue
        key = frozenset(item.item_id for item in enriched)
        if key in seen:
            continue
        seen.add(key)
        candidates.append(tuple(enriched))

    diagnostics["candidate_count"] = len(candidates)
    logger.info("Generated %s candidates from %s active items", len(candidates), len(active))
    return CandidateGenerationResult(candidates=candidates, diagnostics=diagnostics)


__all__ = [
    "GeneratorLimits",
    "CandidateGenerationResult",
    "Candidate",
    "enrich_with_accessories",
    "generate_candidates",
    "PER_SLOT_LIMIT",
    "MAX_CANDIDATES",
    "MAX_ACCESSORIES",
]
