"""JSON-lines protocol messages exchanged with the learning-module UI."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional


class ProtocolError(ValueError):
    """A line that is not a usable request."""


@dataclass
class Request:
    """Incoming call from the UI layer."""
    id: int
    method: str
    params: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Request:
        if not isinstance(data, dict) or "method" not in data:
            raise ProtocolError("Request must be an object with a 'method'")
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ProtocolError("'params' must be an object")
        return cls(id=data.get("id", 0), method=data["method"], params=params)

    @classmethod
    def from_json_line(cls, line: str) -> Request:
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)


@dataclass
class Response:
    """Reply to one request.

    A reply carries either ``result`` or ``error``. An unparseable line has
    no request id to echo, so its failure reply uses id 0.
    """
    id: int
    result: Optional[dict] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, message: str, request_id: int = 0) -> Response:
        return cls(id=request_id, error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_json_line(self) -> str:
        body = {"result": self.result} if self.ok else {"error": self.error}
        return json.dumps({"id": self.id, **body}) + "\n"


@dataclass
class Notification:
    method: str
    params: dict = field(default_factory=dict)

    @classmethod
    def difficulty_changed(
        cls, child_id: str, previous_level: int, current_level: int, level_name: str
    ) -> Notification:
        """Pushed after recordPerformance moves a learner to another level."""
        return cls("difficultyChanged", {
            "childId": child_id,
            "previousLevel": previous_level,
            "currentLevel": current_level,
            "levelName": level_name,
        })

    def to_json_line(self) -> str:
        return json.dumps({"method": self.method, "params": self.params}) + "\n"
