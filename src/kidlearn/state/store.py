"""Persistence contract for per-learner adaptive settings."""

from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import quote
from typing import Optional

from kidlearn.config.settings import Settings, StorageBackend
from kidlearn.engine.adaptive import AdaptiveSettings

KEY_PREFIX = "adaptive_settings_"


class StoreError(Exception):
    """Raised when a backend cannot read or write a learner's settings."""


def settings_key(child_id: str) -> str:
    return f"{KEY_PREFIX}{child_id}"


def _decode(raw: str, child_id: str) -> AdaptiveSettings:
    try:
        settings = AdaptiveSettings.from_dict(json.loads(raw))
    except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Corrupt settings for {child_id!r}: {e}") from e
    if settings.child_id != child_id:
        raise StoreError(
            f"Settings stored for {child_id!r} belong to {settings.child_id!r}"
        )
    return settings


class SettingsStore:
    """Key/value surface keyed by child id. Last write wins."""

    def load(self, child_id: str) -> Optional[AdaptiveSettings]:
        raise NotImplementedError

    def save(self, settings: AdaptiveSettings) -> None:
        raise NotImplementedError


class MemorySettingsStore(SettingsStore):
    """Keeps serialized documents in a dict; nothing survives the process."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, child_id: str) -> Optional[AdaptiveSettings]:
        raw = self._data.get(settings_key(child_id))
        if raw is None:
            return None
        return _decode(raw, child_id)

    def save(self, settings: AdaptiveSettings) -> None:
        self._data[settings_key(settings.child_id)] = json.dumps(settings.to_dict())


class JsonFileSettingsStore(SettingsStore):
    """One ``adaptive_settings_<childId>.json`` document per learner."""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = directory or (Path.home() / ".kidlearn" / "settings")
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, child_id: str) -> Path:
        # Percent-encoding is reversible, so distinct ids never share a file
        return self.directory / f"{settings_key(quote(child_id, safe=''))}.json"

    def load(self, child_id: str) -> Optional[AdaptiveSettings]:
        path = self.path_for(child_id)
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot read {path}: {e}") from e
        return _decode(raw, child_id)

    def save(self, settings: AdaptiveSettings) -> None:
        path = self.path_for(settings.child_id)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise StoreError(f"Cannot write {path}: {e}") from e


def open_store(settings: Settings) -> SettingsStore:
    """Build the backend selected in configuration."""
    backend = settings.storage.backend
    if backend == StorageBackend.MEMORY:
        return MemorySettingsStore()
    if backend == StorageBackend.JSON:
        return JsonFileSettingsStore(directory=settings.data_dir / "settings")

    from kidlearn.state.sqlite import SqliteSettingsStore

    return SqliteSettingsStore(db_path=settings.data_dir / "adaptive.db")
