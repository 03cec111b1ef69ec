"""Difficulty level catalog and per-level content modifiers."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_LEVEL = 2
MIN_LEVEL = 1
MAX_LEVEL = 5


@dataclass(frozen=True)
class ContentModifiers:
    """How the next activity should be configured at a given level."""
    time_limit: int  # seconds, 0 = unlimited
    hints: int
    attempts: int
    complexity: float  # 0..1

    def to_dict(self) -> dict:
        return {
            "timeLimit": self.time_limit,
            "hints": self.hints,
            "attempts": self.attempts,
            "complexity": self.complexity,
        }


@dataclass(frozen=True)
class DifficultyLevel:
    level: int
    name: str
    description: str
    modifiers: ContentModifiers
    characteristics: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "name": self.name,
            "description": self.description,
            "characteristics": list(self.characteristics),
            "contentModifiers": self.modifiers.to_dict(),
        }


DIFFICULTY_LEVELS: dict[int, DifficultyLevel] = {
    1: DifficultyLevel(
        level=1,
        name="Very Easy",
        description="Perfect for beginners with lots of support",
        characteristics=("unlimited attempts", "many hints", "slow pace", "visual cues"),
        modifiers=ContentModifiers(time_limit=0, hints=5, attempts=10, complexity=0.3),
    ),
    2: DifficultyLevel(
        level=2,
        name="Easy",
        description="Good for building confidence",
        characteristics=("multiple attempts", "some hints", "moderate pace"),
        modifiers=ContentModifiers(time_limit=60, hints=3, attempts=5, complexity=0.5),
    ),
    3: DifficultyLevel(
        level=3,
        name="Medium",
        description="Balanced challenge for steady progress",
        characteristics=("limited attempts", "few hints", "normal pace"),
        modifiers=ContentModifiers(time_limit=45, hints=2, attempts=3, complexity=0.7),
    ),
    4: DifficultyLevel(
        level=4,
        name="Hard",
        description="Challenging for advanced learners",
        characteristics=("strict attempts", "minimal hints", "fast pace"),
        modifiers=ContentModifiers(time_limit=30, hints=1, attempts=2, complexity=0.9),
    ),
    5: DifficultyLevel(
        level=5,
        name="Expert",
        description="Maximum challenge for mastery",
        characteristics=("no hints", "single attempt", "very fast pace"),
        modifiers=ContentModifiers(time_limit=20, hints=0, attempts=1, complexity=1.0),
    ),
}

MILESTONES: dict[int, str] = {
    1: "Master the basics and move to Easy level",
    2: "Build confidence and advance to Medium level",
    3: "Challenge yourself with Hard level content",
    4: "Push your limits with Expert level",
    5: "You've mastered all levels! Keep practicing to maintain your skills.",
}
FALLBACK_MILESTONE = "Continue your learning journey!"


def get_level(level: int) -> DifficultyLevel:
    """Return the catalog entry for ``level``, or the Easy entry if unknown."""
    return DIFFICULTY_LEVELS.get(level, DIFFICULTY_LEVELS[DEFAULT_LEVEL])


def list_levels() -> list[DifficultyLevel]:
    return [DIFFICULTY_LEVELS[k] for k in sorted(DIFFICULTY_LEVELS)]


def next_milestone(level: int) -> str:
    return MILESTONES.get(level, FALLBACK_MILESTONE)
