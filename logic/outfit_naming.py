"""Display names for outfits built from their dominant color, piece and fabric."""
from __future__ import annotations

import random
from collections import Counter
from typing import Dict, List, Optional, Sequence

from models.clothing_item import ClothingItem
from models.color_theory import color_family

FAMILY_WORDS: Dict[str, List[str]] = {
    "neutral": ["Monochrome", "Understated", "Minimal", "Classic"],
    "red": ["Crimson", "Scarlet", "Ruby"],
    "orange": ["Sunset", "Amber", "Terracotta"],
    "yellow": ["Golden", "Sunny", "Honey"],
    "lime": ["Citrus", "Zesty"],
    "green": ["Sage", "Forest", "Evergreen"],
    "teal": ["Lagoon", "Teal"],
    "cyan": ["Aqua", "Seaside"],
    "blue": ["Cobalt", "Denim", "Azure"],
    "indigo": ["Midnight", "Indigo"],
    "purple": ["Violet", "Plum", "Amethyst"],
    "pink": ["Rosy", "Blush", "Peony"],
}
FABRIC_WORDS: Dict[str, List[str]] = {
    "silk": ["Silky", "Fluid"],
    "satin": ["Glossy", "Satin"],
    "wool": ["Cozy", "Tailored"],
    "cashmere": ["Soft", "Luxe"],
    "leather": ["Edgy", "Sleek"],
    "denim": ["Easy", "Laid-back"],
    "linen": ["Breezy", "Airy"],
    "fleece": ["Snug"],
    "cotton": ["Fresh", "Crisp"],
}
CATEGORY_NOUNS: Dict[str, List[str]] = {
    "dresses": ["Dress Moment", "Frock", "Silhouette"],
    "jumpsuits": ["One-and-Done", "Jumpsuit Look"],
    "blazers": ["Power Look", "Sharp Edit", "Office Edit"],
    "jackets": ["Layers", "Street Look"],
    "swimwear": ["Beach Day", "Poolside"],
    "skirts_shorts": ["Stroll", "Day Out"],
}
DEFAULT_NOUNS = ["Look", "Ensemble", "Edit", "Combo", "Outfit"]
TEMPLATES = [
    "{color} {noun}",
    "{fabric} {color} {noun}",
    "The {color} {noun}",
    "{fabric} {noun}",
]
FALLBACK_NAME = "New Outfit"

# Most distinctive piece first when picking the noun.
_NOUN_PRIORITY = ["dresses", "jumpsuits", "swimwear", "blazers", "jackets", "skirts_shorts"]


def _dominant_family(items: Sequence[ClothingItem]) -> str:
    families = Counter(color_family(item.color) for item in items)
    chromatic = [(count, family) for family, count in families.items() if family != "neutral"]
    if chromatic:
        return max(chromatic)[1]
    return "neutral"


def _noun_pool(items: Sequence[ClothingItem]) -> List[str]:
    categories = {item.category for item in items}
    for category in _NOUN_PRIORITY:
        if category in categories:
            return CATEGORY_NOUNS[category]
    return DEFAULT_NOUNS


def generate_outfit_name(items: Sequence[ClothingItem], rng: Optional[random.Random] = None) -> str:
    """Return a human-friendly outfit name.

    Names vary between calls; pass a seeded ``rng`` for reproducible output.
    """

    if not items:
        return FALLBACK_NAME
    rng = rng or random.Random()
    color = rng.choice(FAMILY_WORDS[_dominant_family(items)])
    noun = rng.choice(_noun_pool(items))
    fabrics = Counter(item.fabric_type for item in items if item.fabric_type in FABRIC_WORDS)
    templates = TEMPLATES if fabrics else [template for template in TEMPLATES if "{fabric}" not in template]
    template = rng.choice(templates)
    fabric = rng.choice(FABRIC_WORDS[fabrics.most_common(1)[0][0]]) if fabrics else ""
    return template.format(color=color, noun=noun, fabric=fabric).strip()


__all__ = ["generate_outfit_name", "FALLBACK_NAME"]
