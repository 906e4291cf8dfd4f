"""Flagged-pattern persistence and the feedback service consulted by the engine."""
from __future__ import annotations

import json
import logging
import sqlite3
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

from closet_app.logging_config import get_logger, log_event
from models.clothing_item import ClothingItem
from models.taxonomy import canonical_type_token

logger = get_logger(__name__)

PATTERN_SEPARATOR = "+"


class FeedbackStoreError(RuntimeError):
    """Raised when flagged patterns cannot be read or written."""


@dataclass
class FlaggedPattern:
    """A combination of item types the user never wants suggested again."""

    pattern: str
    reason: str
    flagged_at: float = field(default_factory=lambda: time.time())


def canonicalize_pattern(pattern: str) -> str:
    """Normalise a ``+`` separated pattern the way item types are stored.

    Tokens are keyed like taxonomy labels (``T-Shirt`` and ``tee`` both become
    ``tshirt``) and token order does not matter.
    """

    tokens = (token for token in str(pattern).split(PATTERN_SEPARATOR) if token.strip())
    return PATTERN_SEPARATOR.join(sorted(canonical_type_token(token) for token in tokens))


def canonical_pattern(items: Iterable[ClothingItem]) -> str:
    """Canonical pattern key for an outfit: its sorted item type tokens."""

    return PATTERN_SEPARATOR.join(sorted(item.type_token for item in items))


class FeedbackStore:
    """Persistence interface for flagged patterns."""

    def load_flagged_patterns(self) -> List[FlaggedPattern]:
        raise NotImplementedError

    def save_flagged_pattern(self, flagged: FlaggedPattern) -> None:
        raise NotImplementedError

    def delete_flagged_pattern(self, pattern: str) -> bool:
        raise NotImplementedError


class JSONFeedbackStore(FeedbackStore):
    """JSON-file-backed FeedbackStore suitable for local runs."""

    def __init__(self, path: str | Path = "data/flagged_patterns.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, Dict[str, object]]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
            return {
                str(entry["pattern"]): {
                    "pattern": str(entry["pattern"]),
                    "reason": str(entry.get("reason", "")),
                    "flagged_at": float(entry.get("flagged_at", 0.0)),
                }
                for entry in payload.get("flagged", [])
            }
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise FeedbackStoreError(f"Cannot read flagged patterns from {self.path}") from exc

    def _save(self, records: Dict[str, Dict[str, object]]) -> None:
        payload = {"flagged": sorted(records.values(), key=lambda entry: entry["pattern"])}
        try:
            self.path.write_text(json.dumps(payload, indent=2))
        except OSError as exc:
            raise FeedbackStoreError(f"Cannot write flagged patterns to {self.path}") from exc

    def load_flagged_patterns(self) -> List[FlaggedPattern]:
        return [FlaggedPattern(**entry) for entry in self._load().values()]

    def save_flagged_pattern(self, flagged: FlaggedPattern) -> None:
        records = self._load()
        records[flagged.pattern] = asdict(flagged)
        self._save(records)

    def delete_flagged_pattern(self, pattern: str) -> bool:
        records = self._load()
        if records.pop(pattern, None) is None:
            return False
        self._save(records)
        return True


class SQLiteFeedbackStore(FeedbackStore):
    """SQLite-backed feedback store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/feedback.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS flagged_patterns (
                    pattern TEXT PRIMARY KEY,
                    reason TEXT,
                    flagged_at REAL
                );
                """
            )

    def load_flagged_patterns(self) -> List[FlaggedPattern]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT pattern, reason, flagged_at FROM flagged_patterns ORDER BY pattern"
                ).fetchall()
        except sqlite3.Error as exc:
            raise FeedbackStoreError("Cannot read flagged patterns") from exc
        return [
            FlaggedPattern(pattern=row["pattern"], reason=row["reason"], flagged_at=row["flagged_at"])
            for row in rows
        ]

    def save_flagged_pattern(self, flagged: FlaggedPattern) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO flagged_patterns(pattern, reason, flagged_at) VALUES (?, ?, ?)\n"
                    "ON CONFLICT(pattern) DO UPDATE SET reason=excluded.reason, flagged_at=excluded.flagged_at",
                    (flagged.pattern, flagged.reason, flagged.flagged_at),
                )
        except sqlite3.Error as exc:
            raise FeedbackStoreError(f"Cannot save flagged pattern '{flagged.pattern}'") from exc

    def delete_flagged_pattern(self, pattern: str) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM flagged_patterns WHERE pattern = ?", (pattern,))
        except sqlite3.Error as exc:
            raise FeedbackStoreError(f"Cannot delete flagged pattern '{pattern}'") from exc
        return cursor.rowcount > 0


class FeedbackService:
    """Holds a snapshot of flagged patterns for suggestion calls.

    The snapshot is loaded once and read by every suggestion call; a flag added
    while a suggestion is being computed only affects the next call.
    """

    def __init__(self, store: FeedbackStore) -> None:
        self.store = store
        self._flags: Dict[str, FlaggedPattern] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> Dict[str, FlaggedPattern]:
        """Refresh the snapshot; read failures degrade to an empty set."""

        try:
            flags = self.store.load_flagged_patterns()
        except FeedbackStoreError as exc:
            log_event(logger, logging.WARNING, "feedback_load_failed", error=str(exc))
            flags = []
        self._flags = {flag.pattern: flag for flag in flags}
        self._loaded = True
        log_event(logger, logging.INFO, "feedback_loaded", flagged_count=len(self._flags))
        return dict(self._flags)

    def ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def flagged_patterns(self) -> FrozenSet[str]:
        self.ensure_loaded()
        return frozenset(self._flags)

    def get(self, pattern: str) -> Optional[FlaggedPattern]:
        self.ensure_loaded()
        return self._flags.get(canonicalize_pattern(pattern))

    def flag_outfit(self, pattern: str, reason: str) -> FlaggedPattern:
        """Persist a flag; flagging the same pattern again updates it in place.

        Raises :class:`FeedbackStoreError` when the write fails; the snapshot is
        left untouched in that case.
        """

        key = canonicalize_pattern(pattern)
        if not key:
            raise ValueError("Cannot flag an empty pattern")
        self.ensure_loaded()
        flagged = FlaggedPattern(pattern=key, reason=reason.strip())
        self.store.save_flagged_pattern(flagged)
        self._flags[key] = flagged
        log_event(logger, logging.INFO, "outfit_pattern_flagged", pattern=key)
        return flagged

    def unflag(self, pattern: str) -> bool:
        key = canonicalize_pattern(pattern)
        self.ensure_loaded()
        removed = self.store.delete_flagged_pattern(key)
        self._flags.pop(key, None)
        return removed


__all__ = [
    "PATTERN_SEPARATOR",
    "FeedbackStoreError",
    "FlaggedPattern",
    "FeedbackStore",
    "JSONFeedbackStore",
    "SQLiteFeedbackStore",
    "FeedbackService",
    "canonical_pattern",
    "canonicalize_pattern",
]
