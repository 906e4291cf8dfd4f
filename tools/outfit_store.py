"""Saved outfit persistence with a JSON-file implementation."""
from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from models.outfit import Outfit


class OutfitStoreError(RuntimeError):
    """Raised when the outfit file cannot be read or written."""


class OutfitStore:
    """Interface for saved outfits and their wear log."""

    def list_outfits(self) -> List[Outfit]:
        raise NotImplementedError

    def get_outfit(self, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def save_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def delete_outfit(self, outfit_id: str) -> bool:
        raise NotImplementedError

    def log_worn(self, outfit_id: str, on: Optional[date] = None) -> Optional[Outfit]:
        raise NotImplementedError

    def remove_worn_date(self, outfit_id: str, worn_on: str) -> Optional[Outfit]:
        raise NotImplementedError


class JSONOutfitStore(OutfitStore):
    """Outfits kept in one JSON document, suitable for local runs."""

    def __init__(self, path: str | Path = "data/outfits.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, Outfit]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
            outfits = [Outfit(**entry) for entry in payload.get("outfits", [])]
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            raise OutfitStoreError(f"Cannot read outfits from {self.path}") from exc
        return {outfit.outfit_id: outfit for outfit in outfits}

    def _save(self, outfits: Dict[str, Outfit]) -> None:
        payload = {"outfits": [asdict(outfit) for outfit in outfits.values()]}
        try:
            self.path.write_text(json.dumps(payload, indent=2))
        except OSError as exc:
            raise OutfitStoreError(f"Cannot write outfits to {self.path}") from exc

    def list_outfits(self) -> List[Outfit]:
        return sorted(self._load().values(), key=lambda outfit: outfit.created_at)

    def get_outfit(self, outfit_id: str) -> Optional[Outfit]:
        return self._load().get(outfit_id)

    def save_outfit(self, outfit: Outfit) -> Outfit:
        outfits = self._load()
        outfits[outfit.outfit_id] = outfit
        self._save(outfits)
        return outfit

    def delete_outfit(self, outfit_id: str) -> bool:
        outfits = self._load()
        if outfits.pop(outfit_id, None) is None:
            return False
        self._save(outfits)
        return True

    def log_worn(self, outfit_id: str, on: Optional[date] = None) -> Optional[Outfit]:
        """Append a wear date; logging the same day twice is a no-op."""

        outfits = self._load()
        outfit = outfits.get(outfit_id)
        if outfit is None:
            return None
        worn_on = (on or date.today()).isoformat()
        if worn_on not in outfit.worn_dates:
            outfit.worn_dates.append(worn_on)
            outfit.worn_dates.sort()
            self._save(outfits)
        return outfit

    def remove_worn_date(self, outfit_id: str, worn_on: str) -> Optional[Outfit]:
        outfits = self._load()
        outfit = outfits.get(outfit_id)
        if outfit is None:
            return None
        if worn_on in outfit.worn_dates:
            outfit.worn_dates.remove(worn_on)
            self._save(outfits)
        return outfit


__all__ = ["OutfitStore", "JSONOutfitStore", "OutfitStoreError"]
