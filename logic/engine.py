"""Suggestion engine: candidate generation, scoring, ranking and feedback."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import AbstractSet, Any, Dict, Iterable, List, Mapping, Optional, Sequence

from closet_app.config import EngineConfig
from closet_app.logging_config import get_logger, log_event
from logic.candidate_generator import GeneratorLimits, generate_candidates
from logic.outfit_naming import generate_outfit_name as _generate_outfit_name
from logic.outfit_scoring import score_outfit
from logic.ranking import rank_suggestions
from logic.repeat_detection import RepeatCheck, detect_repeat_outfit as _detect_repeat_outfit
from logic.validation import FlagRequest, SuggestionOptions, rated_outfits_from_history
from memory.feedback_store import FeedbackService, FlaggedPattern, canonicalize_pattern
from models.clothing_item import ClothingItem
from models.outfit import Outfit, SuggestionResult, outfit_from_suggestion
from tools.catalog_store import CatalogStore
from tools.observability import instrument_operation
from tools.outfit_store import OutfitStore, OutfitStoreError

LOGGER = get_logger(__name__)

OptionsInput = Optional[SuggestionOptions | Mapping[str, Any]]


def _coerce_options(
    options: OptionsInput, overrides: Dict[str, Any], default_max_results: Optional[int] = None
) -> SuggestionOptions:
    if isinstance(options, SuggestionOptions) and not overrides:
        return options
    if isinstance(options, SuggestionOptions):
        payload = options.model_dump(exclude_unset=True)
    else:
        payload = dict(options or {})
    payload.update(overrides)
    if default_max_results is not None:
        payload.setdefault("max_results", default_max_results)
    return SuggestionOptions.model_validate(payload)


def suggest_outfits(
    items: Sequence[ClothingItem],
    options: OptionsInput = None,
    flagged_patterns: Iterable[str] = frozenset(),
    limits: Optional[GeneratorLimits] = None,
    **overrides: Any,
) -> List[SuggestionResult]:
    """Return up to ``max_results`` valid, diverse outfits, best first.

    ``items`` is the whole catalog; archived items are never suggested but
    their ids still count as known when matching rated history. Fewer than
    two eligible items yields an empty list. Malformed options raise
    ``pydantic.ValidationError``.
    """

    opts = _coerce_options(options, overrides)
    generation = generate_candidates(items, limits)
    if not generation.candidates:
        log_event(LOGGER, logging.INFO, "no_candidates", **generation.diagnostics)
        return []

    known_ids = {item.item_id for item in items}
    flagged = frozenset(canonicalize_pattern(pattern) for pattern in flagged_patterns)
    rated = opts.rated_outfits or []
    scored = [
        (candidate, score_outfit(candidate, opts.season, opts.occasion, rated, flagged, known_ids))
        for candidate in generation.candidates
    ]
    excluded = sum(1 for _, score in scored if score.excluded)
    results = rank_suggestions(scored, opts.max_results)
    log_event(
        LOGGER,
        logging.INFO,
        "outfits_suggested",
        season=opts.season,
        occasion=opts.occasion,
        candidate_count=len(scored),
        flagged_excluded=excluded,
        sampled=generation.diagnostics.get("sampled", False),
        result_count=len(results),
    )
    return results


class OutfitEngine:
    """Runs suggestions against the catalog, feedback and outfit history."""

    def __init__(
        self,
        catalog: CatalogStore,
        feedback: FeedbackService,
        outfit_store: Optional[OutfitStore] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.catalog = catalog
        self.feedback = feedback
        self.outfit_store = outfit_store
        self.config = config or EngineConfig()
        self.limits = GeneratorLimits(
            per_slot_limit=self.config.per_slot_limit,
            max_candidates=self.config.max_candidates,
            seed=self.config.sampling_seed,
        )

    def _outfit_history(self) -> List[Outfit]:
        if self.outfit_store is None:
            return []
        try:
            return self.outfit_store.list_outfits()
        except OutfitStoreError as exc:
            log_event(LOGGER, logging.WARNING, "outfit_history_unavailable", error=str(exc))
            return []

    def _catalog_ids(self) -> AbstractSet[str]:
        return {item.item_id for item in self.catalog.list_items(include_archived=True)}

    @instrument_operation("suggest_outfits")
    def suggest_outfits(self, options: OptionsInput = None, **overrides: Any) -> List[SuggestionResult]:
        """Suggest outfits from the active catalog.

        Flags are read from the feedback snapshot taken before scoring starts.
        When no ``rated_outfits`` are given the ratings of saved outfits are
        used.
        """

        opts = _coerce_options(options, overrides, self.config.default_max_results)
        if opts.rated_outfits is None:
            opts = opts.model_copy(update={"rated_outfits": rated_outfits_from_history(self._outfit_history())})
        flagged = self.feedback.flagged_patterns()
        items = self.catalog.list_items(include_archived=True)
        return suggest_outfits(items, opts, flagged_patterns=flagged, limits=self.limits)

    def generate_outfit_name(self, items: Sequence[ClothingItem], rng: Optional[random.Random] = None) -> str:
        return _generate_outfit_name(items, rng)

    @instrument_operation("flag_outfit", input_model=FlagRequest)
    def flag_outfit(self, pattern: str, reason: str = "") -> FlaggedPattern:
        """Persist a pattern the user never wants suggested again.

        Raises ``pydantic.ValidationError`` for an empty pattern and
        ``FeedbackStoreError`` when the flag cannot be saved.
        """

        return self.feedback.flag_outfit(pattern, reason)

    def flag_suggestion(self, suggestion: SuggestionResult, reason: str = "") -> FlaggedPattern:
        return self.flag_outfit(suggestion.pattern, reason)

    def unflag_outfit(self, pattern: str) -> bool:
        return self.feedback.unflag(pattern)

    @instrument_operation("detect_repeat_outfit")
    def detect_repeat_outfit(
        self, items: Iterable[ClothingItem | str], today: Optional[date] = None
    ) -> RepeatCheck:
        return _detect_repeat_outfit(
            items,
            self._outfit_history(),
            today=today,
            known_item_ids=self._catalog_ids(),
            threshold=self.config.near_repeat_threshold,
        )

    @instrument_operation("save_suggestion")
    def save_suggestion(
        self,
        suggestion: SuggestionResult,
        name: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> Outfit:
        """Keep a suggestion as a saved outfit, naming it when no name is given."""

        if self.outfit_store is None:
            raise OutfitStoreError("No outfit store configured")
        outfit = outfit_from_suggestion(suggestion, name or self.generate_outfit_name(suggestion.items, rng))
        return self.outfit_store.save_outfit(outfit)

    @instrument_operation("log_worn")
    def log_worn(self, outfit_id: str, on: Optional[date] = None) -> Optional[Outfit]:
        """Record that an outfit was worn and bump its items' wear counts."""

        if self.outfit_store is None:
            raise OutfitStoreError("No outfit store configured")
        before = self.outfit_store.get_outfit(outfit_id)
        outfit = self.outfit_store.log_worn(outfit_id, on)
        if outfit is None:
            return None
        if before is None or len(outfit.worn_dates) > len(before.worn_dates):
            self.catalog.record_wear(outfit.item_ids)
        return outfit


__all__ = ["OutfitEngine", "suggest_outfits"]
