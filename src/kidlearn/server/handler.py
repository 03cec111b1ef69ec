"""Server handler: dispatches JSON-lines requests to the difficulty controller."""

from __future__ import annotations

from typing import Callable, Optional

from kidlearn.config.settings import Settings
from kidlearn.engine.adaptive import PerformanceSnapshot
from kidlearn.engine.controller import DifficultyController
from kidlearn.engine.levels import get_level, list_levels

from .protocol import Notification


def _personalized_to_dict(content: dict) -> dict:
    """Rename the controller's snake_case keys for the JS client."""
    diag = content["adaptive_settings"]
    out = {
        k: v
        for k, v in content.items()
        if k not in ("time_limit", "max_attempts", "max_hints", "adaptive_settings")
    }
    out.update({
        "timeLimit": content["time_limit"],
        "maxAttempts": content["max_attempts"],
        "maxHints": content["max_hints"],
        "complexity": content["complexity"],
        "adaptiveSettings": {
            "currentDifficulty": diag["current_difficulty"],
            "learningCurve": diag["learning_curve"],
            "lastAdjustment": diag["last_adjustment"],
        },
    })
    return out


def _child_id(params: dict) -> str:
    child_id = params.get("childId")
    if not child_id or not isinstance(child_id, str):
        raise ValueError("Missing required param: childId")
    return child_id


class ServerHandler:
    """Routes incoming requests to controller methods and returns result dicts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        controller: Optional[DifficultyController] = None,
        write_notification: Optional[Callable[[Notification], None]] = None,
    ):
        self.settings = settings or Settings.load()
        self.controller = controller or DifficultyController.from_settings(self.settings)
        self._write_notification = write_notification or (lambda n: None)

    async def dispatch(self, msg: dict) -> dict:
        """Route a request message to the appropriate handler method."""
        method = msg.get("method", "")
        params = msg.get("params", {})

        handler_map = {
            "initialize": self._initialize,
            "getSettings": self._get_settings,
            "recordPerformance": self._record_performance,
            "getDifficultyLevel": self._get_difficulty_level,
            "getContentModifiers": self._get_content_modifiers,
            "getPersonalizedContent": self._get_personalized_content,
            "getDifficultyInsights": self._get_difficulty_insights,
            "resetDifficulty": self._reset_difficulty,
            "listLevels": self._list_levels,
        }

        handler = handler_map.get(method)
        if handler is None:
            raise ValueError(f"Unknown method: {method}")

        return await handler(params)

    async def _initialize(self, params: dict) -> dict:
        settings = self.controller.initialize(_child_id(params))
        return {"settings": settings.to_dict()}

    async def _get_settings(self, params: dict) -> dict:
        settings = self.controller.get_settings(_child_id(params))
        return {"settings": settings.to_dict()}

    async def _record_performance(self, params: dict) -> dict:
        child_id = _child_id(params)
        raw = params.get("snapshot")
        if not isinstance(raw, dict):
            raise ValueError("Missing required param: snapshot")
        snapshot = PerformanceSnapshot.from_dict(raw)

        before = self.controller.get_settings(child_id).current_difficulty
        self.controller.record_performance(child_id, snapshot)
        after = self.controller.get_settings(child_id).current_difficulty

        if after != before:
            self._write_notification(Notification.difficulty_changed(
                child_id, before, after, get_level(after).name
            ))
        return {"currentDifficulty": after, "changed": after != before}

    async def _get_difficulty_level(self, params: dict) -> dict:
        level = self.controller.get_current_difficulty_level(_child_id(params))
        return {"level": level.to_dict()}

    async def _get_content_modifiers(self, params: dict) -> dict:
        modifiers = self.controller.get_content_modifiers(_child_id(params))
        return {"contentModifiers": modifiers.to_dict()}

    async def _get_personalized_content(self, params: dict) -> dict:
        base = params.get("baseContent") or {}
        if not isinstance(base, dict):
            raise ValueError("'baseContent' must be an object")
        content = self.controller.get_personalized_content(_child_id(params), base)
        return {"content": _personalized_to_dict(content)}

    async def _get_difficulty_insights(self, params: dict) -> dict:
        insights = self.controller.get_difficulty_insights(_child_id(params))
        return {"insights": insights.to_dict()}

    async def _reset_difficulty(self, params: dict) -> dict:
        self.controller.reset_difficulty(_child_id(params))
        return {"ok": True}

    async def _list_levels(self, params: dict) -> dict:
        return {"levels": [level.to_dict() for level in list_levels()]}
