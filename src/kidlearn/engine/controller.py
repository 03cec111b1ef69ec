"""Difficulty controller: per-learner level tracking in front of a settings store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import structlog

from kidlearn.config.settings import Settings
from kidlearn.engine.adaptive import (
    DEFAULT_ADJUSTMENT_SENSITIVITY,
    DEFAULT_LEARNING_CURVE,
    RECOMMENDATION_WINDOW,
    AdaptiveSettings,
    PerformanceSnapshot,
    calculate_optimal_difficulty,
    calculate_progression,
    generate_recommendations,
)
from kidlearn.engine.levels import (
    DEFAULT_LEVEL,
    ContentModifiers,
    DifficultyLevel,
    get_level,
    next_milestone,
)
from kidlearn.state.store import SettingsStore, StoreError, open_store

logger = structlog.get_logger()


@dataclass
class DifficultyInsights:
    current_level: int
    progression: float
    recommendations: list[str] = field(default_factory=list)
    next_milestone: str = ""

    def to_dict(self) -> dict:
        return {
            "currentLevel": self.current_level,
            "progression": self.progression,
            "recommendations": list(self.recommendations),
            "nextMilestone": self.next_milestone,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DifficultyController:
    """Tracks each learner's difficulty level and evolves it from performance.

    Settings are cached per child id after the first lookup and written
    through to the store after every mutation. Store failures are logged
    and otherwise ignored; the cached copy stays authoritative.
    """

    def __init__(
        self,
        store: SettingsStore,
        learning_curve: float = DEFAULT_LEARNING_CURVE,
        adjustment_sensitivity: float = DEFAULT_ADJUSTMENT_SENSITIVITY,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.learning_curve = learning_curve
        self.adjustment_sensitivity = adjustment_sensitivity
        self._clock = clock or _utc_now
        self._cache: dict[str, AdaptiveSettings] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "DifficultyController":
        return cls(
            store=open_store(settings),
            learning_curve=settings.adaptive.learning_curve,
            adjustment_sensitivity=settings.adaptive.adjustment_sensitivity,
        )

    def _now(self) -> str:
        return self._clock().isoformat()

    def _persist(self, settings: AdaptiveSettings) -> None:
        self._cache[settings.child_id] = settings
        try:
            self.store.save(settings)
        except StoreError as e:
            logger.warning(
                "adaptive_settings_save_failed", child_id=settings.child_id, error=str(e)
            )

    # --- Settings lifecycle ---

    def initialize(self, child_id: str) -> AdaptiveSettings:
        """Create fresh settings for ``child_id``, replacing any prior state."""
        settings = AdaptiveSettings(
            child_id=child_id,
            current_difficulty=DEFAULT_LEVEL,
            performance_history=[],
            learning_curve=self.learning_curve,
            adjustment_sensitivity=self.adjustment_sensitivity,
            last_adjustment=self._now(),
        )
        self._persist(settings)
        logger.debug("adaptive_settings_initialized", child_id=child_id)
        return settings

    def get_settings(self, child_id: str) -> AdaptiveSettings:
        cached = self._cache.get(child_id)
        if cached is not None:
            return cached

        try:
            loaded = self.store.load(child_id)
        except StoreError as e:
            logger.warning("adaptive_settings_load_failed", child_id=child_id, error=str(e))
            loaded = None

        if loaded is not None:
            self._cache[child_id] = loaded
            return loaded
        return self.initialize(child_id)

    # --- Performance ingestion ---

    def record_performance(self, child_id: str, snapshot: PerformanceSnapshot) -> None:
        settings = self.get_settings(child_id)
        settings.append_snapshot(snapshot)

        new_difficulty = calculate_optimal_difficulty(settings)
        if new_difficulty != settings.current_difficulty:
            logger.info(
                "difficulty_adjusted",
                child_id=child_id,
                old_level=settings.current_difficulty,
                new_level=new_difficulty,
            )
            settings.current_difficulty = new_difficulty
            settings.last_adjustment = self._now()

        self._persist(settings)

    def reset_difficulty(self, child_id: str) -> None:
        """Back to Easy with an empty history; identity and damping are kept."""
        settings = self.get_settings(child_id)
        settings.current_difficulty = DEFAULT_LEVEL
        settings.performance_history = []
        settings.last_adjustment = self._now()
        self._persist(settings)
        logger.info("difficulty_reset", child_id=child_id)

    # --- Read accessors ---

    def get_current_difficulty_level(self, child_id: str) -> DifficultyLevel:
        return get_level(self.get_settings(child_id).current_difficulty)

    def get_content_modifiers(self, child_id: str) -> ContentModifiers:
        return self.get_current_difficulty_level(child_id).modifiers

    def get_personalized_content(self, child_id: str, base_content: dict[str, Any]) -> dict[str, Any]:
        """Merge caller content with the current modifiers and a diagnostic block."""
        modifiers = self.get_content_modifiers(child_id)
        settings = self.get_settings(child_id)
        return {
            **base_content,
            "time_limit": modifiers.time_limit,
            "max_attempts": modifiers.attempts,
            "max_hints": modifiers.hints,
            "complexity": modifiers.complexity,
            "adaptive_settings": {
                "current_difficulty": settings.current_difficulty,
                "learning_curve": settings.learning_curve,
                "last_adjustment": settings.last_adjustment,
            },
        }

    def get_difficulty_insights(self, child_id: str) -> DifficultyInsights:
        settings = self.get_settings(child_id)
        recent = settings.performance_history[-RECOMMENDATION_WINDOW:]
        return DifficultyInsights(
            current_level=settings.current_difficulty,
            progression=calculate_progression(settings.performance_history),
            recommendations=generate_recommendations(settings.current_difficulty, recent),
            next_milestone=next_milestone(settings.current_difficulty),
        )
