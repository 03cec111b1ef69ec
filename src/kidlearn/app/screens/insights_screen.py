"""Parent-facing insights screen for one learner."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ProgressBar, Static

from kidlearn.app.widgets.level_card import LevelCard
from kidlearn.engine.controller import DifficultyController


class InsightsScreen(Screen):
    """Level, progression, recommendations and next milestone."""

    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("x", "reset_difficulty", "Reset level"),
        Binding("q", "quit", "Quit"),
    ]

    CSS = """
    #insights-container {
        padding: 1 4;
    }
    #level-card {
        border: round $accent;
        padding: 0 2;
        height: auto;
    }
    """

    def __init__(self, controller: DifficultyController, child_id: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self.child_id = child_id

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="insights-container"):
            yield Static(f"[bold]Learner:[/] {self.child_id}", id="learner-name")
            yield LevelCard()
            yield Label("\n[bold]Recent progress[/]")
            yield ProgressBar(total=100, show_eta=False, id="progression")
            yield Static("", id="activity-count")
            yield Label("\n[bold]Recommendations[/]")
            yield Static("", id="recommendations")
            yield Label("\n[bold]Next milestone[/]")
            yield Static("", id="milestone")
        yield Footer()

    def on_mount(self) -> None:
        self.action_refresh()

    def action_refresh(self) -> None:
        level = self.controller.get_current_difficulty_level(self.child_id)
        insights = self.controller.get_difficulty_insights(self.child_id)
        settings = self.controller.get_settings(self.child_id)

        self.query_one(LevelCard).show_level(level)
        self.query_one("#progression", ProgressBar).update(
            progress=round(insights.progression * 100)
        )
        self.query_one("#activity-count", Static).update(
            f"[dim]{len(settings.performance_history)} recent activities, "
            f"last change {settings.last_adjustment}[/]"
        )
        recs = insights.recommendations or ["Keep up the steady practice!"]
        self.query_one("#recommendations", Static).update(
            "\n".join(f"• {r}" for r in recs)
        )
        self.query_one("#milestone", Static).update(insights.next_milestone)

    def action_reset_difficulty(self) -> None:
        self.controller.reset_difficulty(self.child_id)
        self.app.notify(f"Difficulty reset for {self.child_id}")
        self.action_refresh()

    def action_quit(self) -> None:
        self.app.exit()
