"""KidLearn parent insights Textual application."""

from __future__ import annotations

from typing import Optional

from textual.app import App

from kidlearn.app.screens.insights_screen import InsightsScreen
from kidlearn.config.settings import Settings
from kidlearn.engine.controller import DifficultyController


class InsightsApp(App):
    """Shows how the adaptive engine sees one learner."""

    TITLE = "KidLearn"
    SUB_TITLE = "Learning Insights"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        child_id: str,
        settings: Optional[Settings] = None,
        controller: Optional[DifficultyController] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.child_id = child_id
        self.settings = settings or Settings.load()
        self.controller = controller or DifficultyController.from_settings(self.settings)

    def on_mount(self) -> None:
        self.sub_title = f"Learning Insights: {self.child_id}"
        self.push_screen(InsightsScreen(controller=self.controller, child_id=self.child_id))
