"""Pydantic schemas for validating engine inputs."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from models.outfit import Outfit

SeasonName = Literal["spring", "summer", "fall", "winter"]
OccasionName = Literal["casual", "work", "fancy", "party", "vacation"]


class RatedOutfit(BaseModel):
    """A historical outfit rating used to bias future scoring."""

    item_ids: List[str]
    rating: int = Field(ge=1, le=5)

    @classmethod
    def from_outfit(cls, outfit: Outfit) -> "RatedOutfit":
        return cls(item_ids=list(outfit.item_ids), rating=outfit.rating)


class SuggestionOptions(BaseModel):
    """Options accepted by ``suggest_outfits``."""

    season: Optional[SeasonName] = None
    occasion: Optional[OccasionName] = None
    max_results: int = Field(default=6, ge=1, le=50)
    rated_outfits: Optional[List[RatedOutfit]] = None

    @field_validator("season", "occasion", mode="before")
    @classmethod
    def _lowercase(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "autumn":
                return "fall"
            return value or None
        return value


class FlagRequest(BaseModel):
    """Input contract for flagging an outfit pattern."""

    pattern: str = Field(min_length=1)
    reason: str = ""

    @field_validator("pattern")
    @classmethod
    def _has_tokens(cls, pattern: str) -> str:
        if not pattern.replace("+", "").strip():
            raise ValueError("pattern must contain at least one item type")
        return pattern


def rated_outfits_from_history(outfits: List[Outfit]) -> List[RatedOutfit]:
    """Ratings of saved outfits, used when the caller supplies none."""

    return [RatedOutfit.from_outfit(outfit) for outfit in outfits if outfit.item_ids]


__all__ = [
    "RatedOutfit",
    "SuggestionOptions",
    "FlagRequest",
    "rated_outfits_from_history",
]
