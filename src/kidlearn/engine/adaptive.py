"""Adaptive difficulty engine.

Learner state and the pure scoring functions that move a learner's
difficulty level from a rolling window of performance snapshots.
Snapshot values are taken as given; nothing here clamps or rejects
out-of-range accuracy, speed or engagement.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from kidlearn.engine.levels import DEFAULT_LEVEL, MAX_LEVEL, MIN_LEVEL

HISTORY_LIMIT = 20
SCORING_WINDOW = 5
RECOMMENDATION_WINDOW = 10
PROGRESSION_WINDOW = 3

DEFAULT_LEARNING_CURVE = 0.1
DEFAULT_ADJUSTMENT_SENSITIVITY = 0.7


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _whole_number(value, name: str) -> int:
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class PerformanceSnapshot:
    """One scored activity."""
    accuracy: float
    speed: float
    engagement: float
    attempts: int = 1
    hints_used: int = 0
    time_spent: float = 0.0  # seconds
    module: str = ""
    activity: str = ""
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "module": self.module,
            "activity": self.activity,
            "accuracy": self.accuracy,
            "speed": self.speed,
            "engagement": self.engagement,
            "timeSpent": self.time_spent,
            "attempts": self.attempts,
            "hintsUsed": self.hints_used,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PerformanceSnapshot:
        if not isinstance(data, dict):
            raise ValueError(f"Performance snapshot must be an object, got {data!r}")
        try:
            return cls(
                timestamp=data.get("timestamp") or utc_now_iso(),
                module=str(data.get("module", "")),
                activity=str(data.get("activity", "")),
                accuracy=float(data["accuracy"]),
                speed=float(data["speed"]),
                engagement=float(data["engagement"]),
                time_spent=float(data.get("timeSpent", 0.0)),
                attempts=_whole_number(data.get("attempts", 1), "attempts"),
                hints_used=_whole_number(data.get("hintsUsed", 0), "hintsUsed"),
            )
        except KeyError as e:
            raise ValueError(f"Performance snapshot is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid performance snapshot: {e}") from e


@dataclass
class AdaptiveSettings:
    """Per-learner adaptive state."""
    child_id: str
    current_difficulty: int = DEFAULT_LEVEL
    performance_history: list[PerformanceSnapshot] = field(default_factory=list)
    learning_curve: float = DEFAULT_LEARNING_CURVE
    adjustment_sensitivity: float = DEFAULT_ADJUSTMENT_SENSITIVITY
    last_adjustment: str = field(default_factory=utc_now_iso)

    def append_snapshot(self, snapshot: PerformanceSnapshot) -> None:
        """Append and keep only the most recent HISTORY_LIMIT entries."""
        self.performance_history.append(snapshot)
        if len(self.performance_history) > HISTORY_LIMIT:
            self.performance_history = self.performance_history[-HISTORY_LIMIT:]

    def to_dict(self) -> dict:
        return {
            "childId": self.child_id,
            "currentDifficulty": self.current_difficulty,
            "performanceHistory": [s.to_dict() for s in self.performance_history],
            "learningCurve": self.learning_curve,
            "adjustmentSensitivity": self.adjustment_sensitivity,
            "lastAdjustment": self.last_adjustment,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AdaptiveSettings:
        if not isinstance(data, dict):
            raise ValueError(f"Adaptive settings must be an object, got {data!r}")
        history = data.get("performanceHistory", [])
        if not isinstance(history, list):
            raise ValueError(f"performanceHistory must be a list, got {history!r}")
        return cls(
            child_id=data["childId"],
            current_difficulty=int(data.get("currentDifficulty", DEFAULT_LEVEL)),
            performance_history=[PerformanceSnapshot.from_dict(s) for s in history],
            learning_curve=float(data.get("learningCurve", DEFAULT_LEARNING_CURVE)),
            adjustment_sensitivity=float(
                data.get("adjustmentSensitivity", DEFAULT_ADJUSTMENT_SENSITIVITY)
            ),
            last_adjustment=data.get("lastAdjustment") or utc_now_iso(),
        )


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 moving away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def score_adjustment(recent: list[PerformanceSnapshot]) -> float:
    """Sum the threshold rules over a window of snapshots (unscaled)."""
    avg_accuracy = _mean([p.accuracy for p in recent])
    avg_speed = _mean([p.speed for p in recent])
    avg_engagement = _mean([p.engagement for p in recent])
    avg_attempts = _mean([p.attempts for p in recent])

    adjustment = 0.0

    if avg_accuracy > 0.9:
        adjustment += 0.5
    elif avg_accuracy < 0.6:
        adjustment -= 0.5

    if avg_speed > 0.8:
        adjustment += 0.3
    elif avg_speed < 0.4:
        adjustment -= 0.3

    # Low engagement usually means the content is too hard
    if avg_engagement < 0.5:
        adjustment -= 0.4
    elif avg_engagement > 0.9:
        adjustment += 0.2

    if avg_attempts > 4:
        adjustment -= 0.3
    elif avg_attempts < 1.5:
        adjustment += 0.2

    return adjustment


def calculate_optimal_difficulty(settings: AdaptiveSettings) -> int:
    """Recompute the level from the last SCORING_WINDOW snapshots."""
    recent = settings.performance_history[-SCORING_WINDOW:]
    if not recent:
        return settings.current_difficulty

    final_adjustment = (
        score_adjustment(recent)
        * settings.adjustment_sensitivity
        * settings.learning_curve
    )
    target = max(MIN_LEVEL, min(MAX_LEVEL, settings.current_difficulty + final_adjustment))
    return round_half_up(target)


def calculate_progression(history: list[PerformanceSnapshot]) -> float:
    """One-sided improvement signal in [0, 1].

    Compares mean accuracy of the last three snapshots against the three
    before them. Regression is reported as 0, and so is a history too
    short to fill both windows.
    """
    if len(history) < 2 * PROGRESSION_WINDOW:
        return 0.0

    recent = history[-PROGRESSION_WINDOW:]
    older = history[-2 * PROGRESSION_WINDOW:-PROGRESSION_WINDOW]

    recent_avg = _mean([p.accuracy for p in recent])
    older_avg = _mean([p.accuracy for p in older])
    return max(0.0, min(1.0, (recent_avg - older_avg) * 2))


def generate_recommendations(
    current_difficulty: int, recent: list[PerformanceSnapshot]
) -> list[str]:
    recommendations: list[str] = []
    if not recent:
        return recommendations

    avg_accuracy = _mean([p.accuracy for p in recent])
    avg_engagement = _mean([p.engagement for p in recent])

    if avg_accuracy > 0.9 and current_difficulty < MAX_LEVEL:
        recommendations.append("Great job! You're ready for more challenging content.")

    if avg_engagement < 0.6:
        recommendations.append("Let's try a different approach to keep you engaged.")

    if any(p.attempts > 5 for p in recent):
        recommendations.append("Take your time and think through each step carefully.")

    return recommendations
