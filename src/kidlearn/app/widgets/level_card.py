"""Current level card with content modifiers."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from kidlearn.engine.levels import MAX_LEVEL, DifficultyLevel


def level_stars(level: int) -> str:
    return "★" * level + "☆" * (MAX_LEVEL - level)


def format_time_limit(seconds: int) -> str:
    return "no limit" if seconds == 0 else f"{seconds}s"


class LevelCard(Vertical):
    """Displays the learner's current difficulty level and its modifiers."""

    def __init__(self, **kwargs) -> None:
        super().__init__(id="level-card", **kwargs)
        self.border_title = "Difficulty"

    def compose(self) -> ComposeResult:
        yield Static("", id="level-title")
        yield Static("", id="level-description")
        yield Static("", id="level-modifiers")

    def show_level(self, level: DifficultyLevel) -> None:
        self.query_one("#level-title", Static).update(
            f"[bold]{level.name}[/]  {level_stars(level.level)}  (level {level.level})"
        )
        traits = ", ".join(level.characteristics)
        self.query_one("#level-description", Static).update(
            f"{level.description}\n[dim]{traits}[/]"
        )
        m = level.modifiers
        self.query_one("#level-modifiers", Static).update(
            f"Time limit: {format_time_limit(m.time_limit)}   "
            f"Hints: {m.hints}   Attempts: {m.attempts}   "
            f"Complexity: {int(m.complexity * 100)}%"
        )
