"""Closet engine bootstrap."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from closet_app.config import EngineConfig
from closet_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.engine import OutfitEngine
from memory.feedback_store import FeedbackService, FeedbackStore, JSONFeedbackStore, SQLiteFeedbackStore
from models.clothing_item import ClothingItem, from_raw_metadata
from tools.catalog_store import SQLiteCatalogStore
from tools.outfit_store import JSONOutfitStore

LOGGER = get_logger(__name__)


class ClosetApp:
    """Wires together the stores, the feedback service and the engine."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig.from_env()
        configure_logging(self.config.log_level, self.config.log_format)

        self.catalog = SQLiteCatalogStore(self.config.resolve(self.config.catalog_db_path, "catalog.db"))
        self.outfit_store = JSONOutfitStore(self.config.resolve(self.config.outfit_store_path, "outfits.json"))
        self.feedback_store = self._build_feedback_store()
        self.feedback = FeedbackService(self.feedback_store)
        self.feedback.load()
        self.engine = OutfitEngine(
            catalog=self.catalog,
            feedback=self.feedback,
            outfit_store=self.outfit_store,
            config=self.config,
        )
        log_event(
            LOGGER,
            logging.INFO,
            "closet_app_ready",
            environment=self.config.environment,
            feedback_backend=self.config.feedback_store_backend,
        )

    def _build_feedback_store(self) -> FeedbackStore:
        if self.config.feedback_store_backend.lower() == "sqlite":
            return SQLiteFeedbackStore(self.config.resolve(self.config.feedback_store_path, "feedback.db"))
        return JSONFeedbackStore(self.config.resolve(self.config.feedback_store_path, "flagged_patterns.json"))

    def import_items(self, records: Iterable[Dict[str, Any]]) -> List[ClothingItem]:
        """Add catalog records (snake_case or exported camelCase) to the closet.

        Records that fail validation are skipped and logged.
        """

        imported: List[ClothingItem] = []
        with operation_context("app:import_items") as correlation_id:
            for index, record in enumerate(records):
                try:
                    item = from_raw_metadata(record)
                except ValueError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "catalog_record_rejected",
                        correlation_id=correlation_id,
                        index=index,
                        error=str(exc),
                    )
                    continue
                imported.append(self.catalog.create_item(item))
            log_event(
                LOGGER,
                logging.INFO,
                "catalog_import_completed",
                correlation_id=correlation_id,
                imported=len(imported),
            )
        return imported


__all__ = ["ClosetApp"]
