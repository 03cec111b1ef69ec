"""SQLite-backed store for adaptive settings."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Optional

from kidlearn.engine.adaptive import AdaptiveSettings, PerformanceSnapshot, utc_now_iso
from kidlearn.state.store import SettingsStore, StoreError


class SqliteSettingsStore(SettingsStore):
    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or (Path.home() / ".kidlearn" / "adaptive.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        try:
            with self._conn() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS adaptive_settings (
                        child_id TEXT PRIMARY KEY,
                        current_difficulty INTEGER NOT NULL DEFAULT 2,
                        performance_history TEXT NOT NULL DEFAULT '[]',
                        learning_curve REAL NOT NULL,
                        adjustment_sensitivity REAL NOT NULL,
                        last_adjustment TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialize {self.db_path}: {e}") from e

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def load(self, child_id: str) -> Optional[AdaptiveSettings]:
        try:
            with self._conn() as conn:
                row = conn.execute(
                    """SELECT child_id, current_difficulty, performance_history,
                              learning_curve, adjustment_sensitivity, last_adjustment
                       FROM adaptive_settings WHERE child_id = ?""",
                    (child_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot load settings for {child_id!r}: {e}") from e
        if not row:
            return None
        try:
            history = [PerformanceSnapshot.from_dict(s) for s in json.loads(row[2])]
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            raise StoreError(f"Corrupt history for {child_id!r}: {e}") from e
        return AdaptiveSettings(
            child_id=row[0],
            current_difficulty=row[1],
            performance_history=history,
            learning_curve=row[3],
            adjustment_sensitivity=row[4],
            last_adjustment=row[5],
        )

    def save(self, settings: AdaptiveSettings) -> None:
        history = json.dumps([s.to_dict() for s in settings.performance_history])
        try:
            with self._conn() as conn:
                conn.execute(
                    """INSERT OR REPLACE INTO adaptive_settings
                       (child_id, current_difficulty, performance_history, learning_curve,
                        adjustment_sensitivity, last_adjustment, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        settings.child_id,
                        settings.current_difficulty,
                        history,
                        settings.learning_curve,
                        settings.adjustment_sensitivity,
                        settings.last_adjustment,
                        utc_now_iso(),
                    ),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Cannot save settings for {settings.child_id!r}: {e}") from e

