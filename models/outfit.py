"""Outfit and suggestion schemas."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from uuid import uuid4

from models.clothing_item import ClothingItem
from models.taxonomy import OCCASIONS, SEASONS, normalise_tags


@dataclass
class SuggestionResult:
    """A scored outfit candidate returned by the suggestion engine."""

    items: List[ClothingItem]
    score: float
    reasons: List[str] = field(default_factory=list)
    pattern: str = ""

    @property
    def item_ids(self) -> List[str]:
        return [item.item_id for item in self.items]


@dataclass
class Outfit:
    """A saved outfit with its wear log."""

    outfit_id: str
    name: str
    item_ids: List[str]
    occasions: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)
    rating: int = 3
    created_at: float = field(default_factory=lambda: time.time())
    suggested: bool = False
    worn_dates: List[str] = field(default_factory=list)
    name_locked: bool = False
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.item_ids = [str(item_id) for item_id in self.item_ids]
        self.occasions = normalise_tags(self.occasions, OCCASIONS)
        self.seasons = normalise_tags(self.seasons, SEASONS)
        self.rating = min(5, max(1, int(self.rating)))

    def parsed_worn_dates(self) -> List[date]:
        """Worn dates that parse as ISO dates; malformed entries are skipped."""

        parsed = []
        for raw in self.worn_dates:
            try:
                parsed.append(date.fromisoformat(str(raw)[:10]))
            except ValueError:
                continue
        return parsed

    def last_worn(self) -> Optional[date]:
        dates = self.parsed_worn_dates()
        return max(dates) if dates else None


def rating_from_score(score: float) -> int:
    """Initial star rating for a saved suggestion."""

    return min(5, max(1, round(score / 20)))


def outfit_from_suggestion(
    suggestion: SuggestionResult,
    name: str,
    occasions: Optional[List[str]] = None,
    seasons: Optional[List[str]] = None,
) -> Outfit:
    """Build an :class:`Outfit` record for a suggestion the user chose to keep."""

    if occasions is None:
        occasions = sorted({occasion for item in suggestion.items for occasion in item.occasions})
    if seasons is None:
        seasons = sorted({season for item in suggestion.items for season in item.seasons})
    return Outfit(
        outfit_id=uuid4().hex,
        name=name,
        item_ids=suggestion.item_ids,
        occasions=occasions,
        seasons=seasons,
        rating=rating_from_score(suggestion.score),
        suggested=True,
    )


__all__ = ["SuggestionResult", "Outfit", "outfit_from_suggestion", "rating_from_score"]
