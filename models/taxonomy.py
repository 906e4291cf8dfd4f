"""Canonical taxonomy definitions for clothing items.

This module centralises the canonical labels for categories, subcategories,
fabrics, seasons and occasions. The category set is closed and versioned;
labels from older catalog schemas are translated through
``LEGACY_CATEGORY_MAP`` so stored records keep validating after a schema bump.
"""

from typing import Dict, Iterable, List

TAXONOMY_VERSION = 2


def normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace("-", "_").replace(" ", "_")


CATEGORIES: Dict[str, List[str]] = {
    "tops": [
        "blouse",
        "long_sleeve",
        "tshirt",
        "tank_top",
        "polo",
        "sweater",
        "cardigan",
        "sweatshirt",
        "hoodie",
        "zip_up",
        "workout_shirt",
    ],
    "bottoms": ["trousers", "jeans", "casual_pants", "leggings", "joggers", "other"],
    "skirts_shorts": [
        "mini_skirt",
        "midi_skirt",
        "maxi_skirt",
        "skort",
        "casual_shorts",
        "athletic_shorts",
        "dressy_shorts",
    ],
    "dresses": ["work_dress", "casual_dress", "formal_dress", "party_dress", "sundress", "cover_up"],
    "jumpsuits": ["casual_jumpsuit", "dressy_jumpsuit"],
    "blazers": ["casual_blazer", "formal_blazer"],
    "jackets": ["spring_jacket", "jean_jacket", "work_jacket", "raincoat", "parka", "ski_jacket"],
    "shoes": [
        "flats",
        "loafers",
        "heels",
        "sandals",
        "ankle_boots",
        "dress_boots",
        "knee_boots",
        "winter_boots",
        "running_shoes",
        "soccer_shoes",
        "sneakers",
    ],
    "accessories": ["belts", "hats", "sunglasses", "scarves", "hair_pieces", "stockings", "bags"],
    "jewelry": ["earrings", "necklaces", "bracelets", "rings", "watches"],
    "swimwear": ["one_piece", "swim_top", "swim_bottom", "swim_cover_up"],
}

# Version 1 catalogs used singular labels and a single "outerwear" bucket.
LEGACY_CATEGORY_MAP: Dict[str, str] = {
    "top": "tops",
    "shirt": "tops",
    "bottom": "bottoms",
    "pants": "bottoms",
    "skirt": "skirts_shorts",
    "skirts": "skirts_shorts",
    "shorts": "skirts_shorts",
    "dress": "dresses",
    "jumpsuit": "jumpsuits",
    "blazer": "blazers",
    "jacket": "jackets",
    "outerwear": "jackets",
    "coat": "jackets",
    "shoe": "shoes",
    "footwear": "shoes",
    "accessory": "accessories",
    "jewellery": "jewelry",
    "swim": "swimwear",
}

LEGACY_SUBCATEGORY_MAP: Dict[str, str] = {
    "tee": "tshirt",
    "t_shirt": "tshirt",
    "shirt": "blouse",
    "tank": "tank_top",
    "chinos": "casual_pants",
    "belt": "belts",
    "hat": "hats",
    "bag": "bags",
    "scarf": "scarves",
    "boots": "ankle_boots",
    "trainers": "sneakers",
    # Swim cover-ups were split from dress cover-ups in version 2.
    "cover_up": "swim_cover_up",
}

FABRIC_TYPES = [
    "cotton",
    "linen",
    "silk",
    "polyester",
    "wool",
    "denim",
    "leather",
    "nylon",
    "cashmere",
    "satin",
    "fleece",
    "other",
]
FORMAL_FABRICS = ["silk", "wool", "cashmere", "leather", "satin"]
CASUAL_FABRICS = ["cotton", "denim", "linen", "nylon", "polyester", "fleece"]
HEAVY_FABRICS = ["wool", "fleece", "cashmere", "leather"]

SEASONS = ["spring", "summer", "fall", "winter"]
WARM_SEASONS = ["spring", "summer"]
OCCASIONS = ["casual", "work", "fancy", "party", "vacation"]

# Layering pieces that always need something worn underneath.
ALWAYS_OPEN_SUBCATEGORIES = ["casual_blazer", "formal_blazer", "cardigan", "zip_up"]

JEWELRY_SUBCATEGORIES = ["earrings", "necklaces", "bracelets", "rings"]


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Legacy labels are translated to their current category. Raises a
    :class:`ValueError` if the category is not part of the canonical taxonomy.
    """

    key = normalize_key(value)
    key = LEGACY_CATEGORY_MAP.get(key, key)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {sorted(CATEGORIES)}")
    return key


def validate_subcategory(category: str, value: str | None) -> str | None:
    """Validate that a subcategory belongs to the given category.

    Subcategories are optional; ``None`` or blank values are passed through as
    ``None``.
    """

    category_key = validate_category(category)
    if value is None or not str(value).strip():
        return None
    sub_key = normalize_key(str(value))
    if sub_key not in CATEGORIES[category_key]:
        sub_key = LEGACY_SUBCATEGORY_MAP.get(sub_key, sub_key)
    if sub_key not in CATEGORIES[category_key]:
        raise ValueError(
            f"Unsupported subcategory '{value}' for category '{category_key}'. "
            f"Allowed: {CATEGORIES[category_key]}"
        )
    return sub_key


def canonical_type_token(value: str) -> str:
    """Map a typed item type (subcategory or category) onto its current label.

    Current labels pass through unchanged, so ``cover_up`` stays the dress
    token; anything else goes through the legacy subcategory and category maps.
    """

    key = normalize_key(str(value))
    if key in CATEGORIES or any(key in subs for subs in CATEGORIES.values()):
        return key
    if key in LEGACY_SUBCATEGORY_MAP:
        return LEGACY_SUBCATEGORY_MAP[key]
    return LEGACY_CATEGORY_MAP.get(key, key)


def normalize_fabric(value: str | None) -> str:
    """Map a raw fabric string onto the closed fabric set."""

    if not value:
        return "other"
    key = normalize_key(str(value))
    return key if key in FABRIC_TYPES else "other"


def normalise_tags(values: Iterable[str], allowed: List[str]) -> List[str]:
    """Normalise and deduplicate tags against an allowed set."""

    normalised = []
    seen = set()
    for value in values:
        key = normalize_key(str(value))
        if key == "autumn":
            key = "fall"
        if key in allowed and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def is_layering_subcategory(category: str, sub_category: str | None) -> bool:
    """Return True when the category/subcategory pair can be worn open over a top."""

    if category == "blazers":
        return True
    if category != "tops":
        return False
    return sub_category is None or sub_category in {"cardigan", "zip_up", "hoodie", "sweatshirt", "long_sleeve", "blouse"}


__all__ = [
    "TAXONOMY_VERSION",
    "CATEGORIES",
    "LEGACY_CATEGORY_MAP",
    "LEGACY_SUBCATEGORY_MAP",
    "FABRIC_TYPES",
    "FORMAL_FABRICS",
    "CASUAL_FABRICS",
    "HEAVY_FABRICS",
    "SEASONS",
    "WARM_SEASONS",
    "OCCASIONS",
    "ALWAYS_OPEN_SUBCATEGORIES",
    "JEWELRY_SUBCATEGORIES",
    "validate_category",
    "validate_subcategory",
    "normalize_key",
    "canonical_type_token",
    "normalize_fabric",
    "normalise_tags",
    "is_layering_subcategory",
]
