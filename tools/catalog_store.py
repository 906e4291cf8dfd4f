"""Clothing catalog storage abstractions and SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
import time
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from models.clothing_item import ClothingItem


class CatalogStore:
    """Persistence interface for clothing items."""

    def create_item(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def get_item(self, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_items(self, include_archived: bool = False) -> List[ClothingItem]:
        raise NotImplementedError

    def update_item(self, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete_item(self, item_id: str) -> bool:
        raise NotImplementedError

    def list_active(self) -> List[ClothingItem]:
        """Active (non-archived) items, the set suggestions are built from."""

        return self.list_items(include_archived=False)

    def record_wear(self, item_ids: List[str]) -> int:
        """Increment wear counts; returns how many items were updated."""

        updated = 0
        for item_id in item_ids:
            item = self.get_item(item_id)
            if item is None:
                continue
            self.update_item(item_id, {"wear_count": item.wear_count + 1})
            updated += 1
        return updated

    def archive_item(self, item_id: str) -> Optional[ClothingItem]:
        return self.update_item(item_id, {"archived": True})

    def unarchive_item(self, item_id: str) -> Optional[ClothingItem]:
        return self.update_item(item_id, {"archived": False})


class SQLiteCatalogStore(CatalogStore):
    """Local SQLite-backed store for clothing items."""

    def __init__(self, database_path: str | Path = "data/catalog.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS clothing_items (
                    item_id TEXT PRIMARY KEY,
                    archived INTEGER NOT NULL DEFAULT 0,
                    archived_at REAL,
                    payload TEXT NOT NULL
                );
                """
            )

    @staticmethod
    def _serialise(item: ClothingItem) -> str:
        return json.dumps(asdict(item))

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> ClothingItem:
        return ClothingItem(**json.loads(row["payload"]))

    def create_item(self, item: ClothingItem) -> ClothingItem:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO clothing_items (item_id, archived, archived_at, payload)
                VALUES (?, ?, ?, ?)
                """,
                (
                    item.item_id,
                    int(item.archived),
                    time.time() if item.archived else None,
                    self._serialise(item),
                ),
            )
        return item

    def get_item(self, item_id: str) -> Optional[ClothingItem]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM clothing_items WHERE item_id = ?", (item_id,)).fetchone()
            return self._row_to_item(row) if row else None

    def list_items(self, include_archived: bool = False) -> List[ClothingItem]:
        query = "SELECT * FROM clothing_items"
        if not include_archived:
            query += " WHERE archived = 0"
        with self._connect() as conn:
            rows = conn.execute(query + " ORDER BY item_id").fetchall()
        return [self._row_to_item(row) for row in rows]

    def update_item(self, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        current = self.get_item(item_id)
        if not current:
            return None

        for key, value in updated_fields.items():
            if key == "item_id":
                continue
            if hasattr(current, key):
                setattr(current, key, value)

        validated = ClothingItem(**asdict(current))
        return self.create_item(validated)

    def delete_item(self, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM clothing_items WHERE item_id = ?", (item_id,))
            return cursor.rowcount > 0


__all__ = ["CatalogStore", "SQLiteCatalogStore"]
