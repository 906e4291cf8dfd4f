"""Structural slot rules shared by the candidate generator and outfit designer."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Sequence

from models.clothing_item import ClothingItem

BASE_TOP = "base_top"
LAYER = "layer"
OUTERWEAR = "outerwear"
BOTTOM = "bottom"
DRESS = "dress"
SWIM_PIECE = "swim_piece"
SWIM_TOP = "swim_top"
SWIM_BOTTOM = "swim_bottom"
SWIM_COVER = "swim_cover"
SHOES = "shoes"
ACCESSORY = "accessory"

SLOTS = (
    BASE_TOP,
    LAYER,
    OUTERWEAR,
    BOTTOM,
    DRESS,
    SWIM_PIECE,
    SWIM_TOP,
    SWIM_BOTTOM,
    SWIM_COVER,
    SHOES,
    ACCESSORY,
)
SWIM_SLOTS = (SWIM_PIECE, SWIM_TOP, SWIM_BOTTOM, SWIM_COVER)
REGULAR_BODY_SLOTS = (BASE_TOP, LAYER, BOTTOM, DRESS)
MIN_OUTFIT_ITEMS = 2

_CATEGORY_SLOTS: Dict[str, str] = {
    "blazers": LAYER,
    "jackets": OUTERWEAR,
    "bottoms": BOTTOM,
    "skirts_shorts": BOTTOM,
    "dresses": DRESS,
    "jumpsuits": DRESS,
    "shoes": SHOES,
    "accessories": ACCESSORY,
    "jewelry": ACCESSORY,
}
_SWIM_SLOTS: Dict[str, str] = {
    "one_piece": SWIM_PIECE,
    "swim_top": SWIM_TOP,
    "swim_bottom": SWIM_BOTTOM,
    "swim_cover_up": SWIM_COVER,
}


def slot_for(item: ClothingItem) -> str:
    """Return the structural slot ``item`` fills."""

    if item.category == "tops":
        return LAYER if item.is_open else BASE_TOP
    if item.category == "swimwear":
        return _SWIM_SLOTS.get(item.sub_category or "", SWIM_PIECE)
    return _CATEGORY_SLOTS[item.category]


def partition_by_slot(items: Iterable[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    grouped: Dict[str, List[ClothingItem]] = {slot: [] for slot in SLOTS}
    for item in items:
        grouped[slot_for(item)].append(item)
    return grouped


def _slot_counts(items: Sequence[ClothingItem]) -> Counter:
    return Counter(slot_for(item) for item in items)


def is_valid_combo(items: Sequence[ClothingItem]) -> bool:
    """Check slot exclusivity and layering rules for a combination."""

    if len(items) < MIN_OUTFIT_ITEMS:
        return False
    if len({item.item_id for item in items}) != len(items):
        return False
    counts = _slot_counts(items)
    if any(count > 1 for slot, count in counts.items() if slot != ACCESSORY):
        return False
    accessory_subs = [item.type_token for item in items if slot_for(item) == ACCESSORY]
    if len(accessory_subs) != len(set(accessory_subs)):
        return False

    # A dress fills both the top and bottom slots.
    if counts[DRESS] and (counts[BOTTOM] or counts[BASE_TOP]):
        return False
    if counts[LAYER] and not (counts[BASE_TOP] or counts[DRESS]):
        return False
    if counts[SWIM_PIECE] and (counts[SWIM_TOP] or counts[SWIM_BOTTOM]):
        return False
    has_swim = any(counts[slot] for slot in SWIM_SLOTS)
    if has_swim and any(counts[slot] for slot in REGULAR_BODY_SLOTS):
        return False
    return True


def validate_outfit(items: Sequence[ClothingItem]) -> List[str]:
    """Return styling warnings for a hand-built outfit (empty when valid)."""

    warnings: List[str] = []
    if not items:
        warnings.append("Select at least one item to create an outfit")
        return warnings

    counts = _slot_counts(items)
    has_dress = counts[DRESS] > 0
    if has_dress and counts[BOTTOM]:
        warnings.append("A dress typically doesn't pair with pants or bottoms")
    if has_dress and counts[BASE_TOP]:
        warnings.append("A dress already covers the top, so a separate shirt is unusual")
    if counts[LAYER] and not counts[BASE_TOP] and not has_dress:
        warnings.append("A blazer usually needs a shirt or top underneath")
    if counts[SWIM_PIECE] and (counts[SWIM_TOP] or counts[SWIM_BOTTOM]):
        warnings.append("A one-piece swimsuit doesn't pair with separate swim tops or bottoms")
    has_swim = any(counts[slot] for slot in SWIM_SLOTS)
    if has_swim and (counts[BASE_TOP] or counts[LAYER]):
        warnings.append("Swimwear doesn't typically pair with regular tops")
    if has_swim and counts[BOTTOM]:
        warnings.append("Swimwear doesn't typically pair with regular bottoms")
    for slot in (BASE_TOP, BOTTOM, DRESS, SHOES, OUTERWEAR):
        if counts[slot] > 1:
            warnings.append(f"More than one {slot.replace('_', ' ')} selected")
    return warnings


__all__ = [
    "SLOTS",
    "BASE_TOP",
    "LAYER",
    "OUTERWEAR",
    "BOTTOM",
    "DRESS",
    "SWIM_PIECE",
    "SWIM_TOP",
    "SWIM_BOTTOM",
    "SWIM_COVER",
    "SHOES",
    "ACCESSORY",
    "MIN_OUTFIT_ITEMS",
    "slot_for",
    "partition_by_slot",
    "is_valid_combo",
    "validate_outfit",
]
