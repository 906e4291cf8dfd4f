"""Clothing item data model and helpers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import (
    ALWAYS_OPEN_SUBCATEGORIES,
    OCCASIONS,
    SEASONS,
    is_layering_subcategory,
    normalise_tags,
    normalize_fabric,
    validate_category,
    validate_subcategory,
)

logger = logging.getLogger(__name__)

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def normalize_hex(value: str) -> str:
    """Return ``value`` as an upper-case ``#RRGGBB`` string.

    Three digit shorthand is expanded. Raises :class:`ValueError` for anything
    that is not a hex color.
    """

    match = _HEX_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid hex color '{value}'")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


@dataclass
class ClothingItem:
    """Represents a single garment in the user's closet."""

    item_id: str
    name: str
    category: str
    color: str
    fabric_type: str = "other"
    sub_category: Optional[str] = None
    color_name: str = ""
    secondary_color: Optional[str] = None
    secondary_color_name: Optional[str] = None
    is_open: bool = False
    archived: bool = False
    wear_count: int = 0
    favorite: bool = False
    seasons: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    brand: Optional[str] = None
    cost: Optional[float] = None
    notes: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.category = validate_category(self.category)
        self.sub_category = validate_subcategory(self.category, self.sub_category)
        self.color = normalize_hex(self.color)
        if self.secondary_color:
            self.secondary_color = normalize_hex(self.secondary_color)
        else:
            self.secondary_color = None
        self.fabric_type = normalize_fabric(self.fabric_type)
        self.seasons = normalise_tags(_ensure_list(self.seasons), SEASONS)
        self.occasions = normalise_tags(_ensure_list(self.occasions), OCCASIONS)
        self.tags = [str(tag).strip() for tag in _ensure_list(self.tags) if str(tag).strip()]
        self.wear_count = max(0, int(self.wear_count or 0))
        if self.sub_category in ALWAYS_OPEN_SUBCATEGORIES:
            self.is_open = True
        elif self.is_open and not is_layering_subcategory(self.category, self.sub_category):
            logger.warning(
                "Ignoring is_open on %s (%s/%s): not a layering piece",
                self.item_id,
                self.category,
                self.sub_category,
            )
            self.is_open = False

    @property
    def colors(self) -> List[str]:
        """Primary and optional secondary hex colors."""

        return [self.color] + ([self.secondary_color] if self.secondary_color else [])

    @property
    def type_token(self) -> str:
        """Subcategory when known, otherwise the category."""

        return self.sub_category or self.category


_CAMEL_CASE_KEYS = {
    "id": "item_id",
    "subCategory": "sub_category",
    "colorName": "color_name",
    "secondaryColor": "secondary_color",
    "secondaryColorName": "secondary_color_name",
    "fabricType": "fabric_type",
    "isOpen": "is_open",
    "wearCount": "wear_count",
}


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from a loose catalog record.

    Both snake_case keys and the camelCase keys of exported app data are
    accepted. Unknown keys are ignored.
    """

    record = {_CAMEL_CASE_KEYS.get(key, key): value for key, value in metadata.items()}
    required_fields = ["item_id", "category", "color"]
    missing = [name for name in required_fields if not record.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        item_id=str(record["item_id"]),
        name=str(record.get("name") or record["item_id"]),
        category=str(record["category"]),
        color=str(record["color"]),
        fabric_type=str(record.get("fabric_type") or "other"),
        sub_category=record.get("sub_category"),
        color_name=str(record.get("color_name") or ""),
        secondary_color=record.get("secondary_color"),
        secondary_color_name=record.get("secondary_color_name"),
        is_open=bool(record.get("is_open", False)),
        archived=bool(record.get("archived", False)),
        wear_count=int(record.get("wear_count") or 0),
        favorite=bool(record.get("favorite", False)),
        seasons=_ensure_list(record.get("seasons")),
        occasions=_ensure_list(record.get("occasions")),
        brand=record.get("brand"),
        cost=float(record["cost"]) if record.get("cost") is not None else None,
        notes=record.get("notes"),
        tags=_ensure_list(record.get("tags")),
    )


__all__ = ["ClothingItem", "from_raw_metadata", "normalize_hex"]
