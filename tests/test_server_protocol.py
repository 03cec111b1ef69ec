"""Tests for the JSON-lines protocol message types."""

from __future__ import annotations

import json

import pytest

from kidlearn.server.protocol import Notification, ProtocolError, Request, Response


class TestRequest:
    def test_from_json_line(self):
        line = '{"id": 1, "method": "getSettings", "params": {"childId": "c1"}}'
        req = Request.from_json_line(line)
        assert req.id == 1
        assert req.method == "getSettings"
        assert req.params == {"childId": "c1"}

    def test_missing_params_and_id(self):
        req = Request.from_dict({"method": "listLevels"})
        assert req.id == 0
        assert req.params == {}

    def test_invalid_json(self):
        with pytest.raises(ProtocolError, match="Invalid JSON"):
            Request.from_json_line("{oops")

    def test_missing_method(self):
        with pytest.raises(ProtocolError, match="method"):
            Request.from_dict({"id": 3})

    def test_params_must_be_object(self):
        with pytest.raises(ProtocolError, match="params"):
            Request.from_dict({"id": 3, "method": "getSettings", "params": [1, 2]})


class TestResponse:
    def test_success_json_line(self):
        line = Response(id=1, result={"ok": True}).to_json_line()
        assert line.endswith("\n")
        assert json.loads(line) == {"id": 1, "result": {"ok": True}}

    def test_error_json_line(self):
        parsed = json.loads(Response(id=2, error="Unknown method: foo").to_json_line())
        assert parsed == {"id": 2, "error": "Unknown method: foo"}

    def test_failure_defaults_to_id_zero(self):
        response = Response.failure("Invalid JSON")
        assert not response.ok
        assert json.loads(response.to_json_line()) == {"id": 0, "error": "Invalid JSON"}
        assert Response.failure("boom", request_id=9).id == 9


class TestNotification:
    def test_json_line(self):
        notif = Notification("difficultyChanged", {"childId": "c1", "currentLevel": 3})
        parsed = json.loads(notif.to_json_line())
        assert parsed == {
            "method": "difficultyChanged",
            "params": {"childId": "c1", "currentLevel": 3},
        }

    def test_difficulty_changed(self):
        notif = Notification.difficulty_changed("c1", 2, 3, "Medium")
        assert notif.method == "difficultyChanged"
        assert notif.params == {
            "childId": "c1",
            "previousLevel": 2,
            "currentLevel": 3,
            "levelName": "Medium",
        }
