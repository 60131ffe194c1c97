"""Per-user skill cooldowns, kept in an sqlite3 table."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime

_TABLE = "cdsheet"


class CooldownBook:
    """Records when a member last used a skill and whether it is ready again."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.RLock()
        with self._lock:
            self._ensure()
            self._conn.commit()

    def _ensure(self) -> None:
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {_TABLE} ("
            "Time INTEGER, GroupID INTEGER, UserID INTEGER, ModeID TEXT, "
            "PRIMARY KEY (GroupID, UserID, ModeID))"
        )

    def ready(
        self, gid: int, uid: int, mode: str, cd_hours: float, now: datetime
    ) -> bool:
        """Tell whether the skill may be used; an expired record is removed."""
        key = (int(gid), int(uid), mode)
        with self._lock:
            self._ensure()
            row = self._conn.execute(
                f"SELECT Time FROM {_TABLE} WHERE GroupID = ? AND UserID = ? AND ModeID = ?",
                key,
            ).fetchone()
            if row is None:
                return True
            hours = (now.timestamp() - int(row[0])) / 3600
            if hours > cd_hours:
                self._conn.execute(
                    f"DELETE FROM {_TABLE} WHERE GroupID = ? AND UserID = ? AND ModeID = ?",
                    key,
                )
                self._conn.commit()
                return True
            return False

    def record(self, gid: int, uid: int, mode: str, now: datetime) -> None:
        """Note that the skill was used at ``now``."""
        with self._lock:
            self._ensure()
            self._conn.execute(
                f"INSERT OR REPLACE INTO {_TABLE} (Time, GroupID, UserID, ModeID) "
                "VALUES (?, ?, ?, ?)",
                (int(now.timestamp()), int(gid), int(uid), mode),
            )
            self._conn.commit()

    def clear_group(self, gid: int) -> None:
        """Forget every cooldown in a group."""
        with self._lock:
            self._ensure()
            self._conn.execute(f"DELETE FROM {_TABLE} WHERE GroupID = ?", (int(gid),))
            self._conn.commit()