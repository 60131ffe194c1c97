"""Daily group marriage registry: group settings, couples and the roster."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

DEFAULT_CD_HOURS = 12.0
NAME_WIDTH_LIMIT = 350

_SETTINGS_TABLE = "updateinfo"
_KEPT_ON_FULL_RESET = "favorability"
_COOLDOWN_TABLE = "cdsheet"


@dataclass
class GroupSettings:
    """Per-group switches and the date the roster was last opened."""

    gid: int
    updated: str = ""
    can_match: bool = True
    can_ntr: bool = True
    cd_hours: float = DEFAULT_CD_HOURS


@dataclass(frozen=True)
class Marriage:
    """One registered couple; a zero user or target marks a single noble."""

    user: int
    target: int
    username: str
    targetname: str
    time: str

    @property
    def is_single_noble(self) -> bool:
        return self.user == 0 or self.target == 0


def _group_table(gid: int) -> str:
    return f'"group{int(gid)}"'


class MarriageRegistry:
    """The registry office, backed by an sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.RLock()
        with self._lock:
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {_SETTINGS_TABLE} ("
                "gid INTEGER PRIMARY KEY, updatetime TEXT, canmatch INTEGER, "
                "canntr INTEGER, cdtime REAL)"
            )
            self._conn.commit()

    def _ensure_group(self, gid: int) -> str:
        table = _group_table(gid)
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {table} ("
            "user INTEGER PRIMARY KEY, target INTEGER, username TEXT, "
            "targetname TEXT, updatetime TEXT)"
        )
        return table

    def _table_exists(self, name: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
        ).fetchone()
        return row is not None

    def settings(self, gid: int) -> GroupSettings:
        """Return the group's settings, or the defaults when none are stored."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT gid, updatetime, canmatch, canntr, cdtime FROM {_SETTINGS_TABLE} "
                "WHERE gid = ?",
                (int(gid),),
            ).fetchone()
        if row is None:
            return GroupSettings(gid=int(gid))
        return GroupSettings(
            gid=row[0],
            updated=row[1] or "",
            can_match=bool(row[2]),
            can_ntr=bool(row[3]),
            cd_hours=float(row[4]),
        )

    def update_settings(self, settings: GroupSettings) -> None:
        with self._lock:
            self._conn.execute(
                f"INSERT OR REPLACE INTO {_SETTINGS_TABLE} "
                "(gid, updatetime, canmatch, canntr, cdtime) VALUES (?, ?, ?, ?, ?)",
                (
                    int(settings.gid),
                    settings.updated,
                    int(settings.can_match),
                    int(settings.can_ntr),
                    float(settings.cd_hours),
                ),
            )
            self._conn.commit()

    def open_for_today(self, gid: int, now: datetime) -> None:
        """Clear the group's roster when the stored date is not today's."""
        today = now.strftime("%Y/%m/%d")
        with self._lock:
            current = self.settings(gid)
            if current.updated == today:
                return
            self._conn.execute(f"DROP TABLE IF EXISTS {_group_table(gid)}")
            current.gid = int(gid)
            current.updated = today
            self.update_settings(current)

    def lookup(self, gid: int, uid: int) -> Marriage | None:
        """Find the record where uid is the user or, failing that, the target."""
        with self._lock:
            table = self._ensure_group(gid)
            columns = "user, target, username, targetname, updatetime"
            row = self._conn.execute(
                f"SELECT {columns} FROM {table} WHERE user = ? LIMIT 1", (int(uid),)
            ).fetchone()
            if row is None:
                row = self._conn.execute(
                    f"SELECT {columns} FROM {table} WHERE target = ? LIMIT 1", (int(uid),)
                ).fetchone()
        return Marriage(*row) if row is not None else None

    def register(
        self,
        gid: int,
        uid: int,
        target: int,
        username: str,
        targetname: str,
        now: datetime,
    ) -> Marriage:
        record = Marriage(
            user=int(uid),
            target=int(target),
            username=username,
            targetname=targetname,
            time=now.strftime("%H:%M:%S"),
        )
        with self._lock:
            table = self._ensure_group(gid)
            self._conn.execute(
                f"INSERT OR REPLACE INTO {table} "
                "(user, target, username, targetname, updatetime) VALUES (?, ?, ?, ?, ?)",
                (record.user, record.target, record.username, record.targetname, record.time),
            )
            self._conn.commit()
        return record

    def roster(self, gid: int) -> list[tuple[str, str, str, str]]:
        """List couples as (username, user id, target name, target id), skipping singles."""
        with self._lock:
            if not self._table_exists(f"group{int(gid)}"):
                return []
            rows = self._conn.execute(
                f"SELECT user, target, username, targetname FROM {_group_table(gid)} "
                "ORDER BY user"
            ).fetchall()
        return [
            (username, str(user), targetname, str(target))
            for user, target, username, targetname in rows
            if target != 0
        ]

    def reset(self, gid: int | None = None) -> None:
        """Drop one group's roster and cooldowns, or every table but favourability."""
        with self._lock:
            if gid is None:
                names = [
                    row[0]
                    for row in self._conn.execute(
                        "SELECT name FROM sqlite_master WHERE type = 'table'"
                    )
                ]
                for name in names:
                    if name == _KEPT_ON_FULL_RESET:
                        continue
                    quoted = name.replace('"', '""')
                    self._conn.execute(f'DROP TABLE IF EXISTS "{quoted}"')
                self._conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {_SETTINGS_TABLE} ("
                    "gid INTEGER PRIMARY KEY, updatetime TEXT, canmatch INTEGER, "
                    "canntr INTEGER, cdtime REAL)"
                )
            else:
                self._conn.execute(f"DROP TABLE IF EXISTS {_group_table(gid)}")
                if self._table_exists(_COOLDOWN_TABLE):
                    self._conn.execute(
                        f"DELETE FROM {_COOLDOWN_TABLE} WHERE GroupID = ?", (int(gid),)
                    )
            self._conn.commit()

    def divorce_wife(self, gid: int, wife: int) -> None:
        with self._lock:
            table = self._ensure_group(gid)
            self._conn.execute(f"DELETE FROM {table} WHERE target = ?", (int(wife),))
            self._conn.commit()

    def divorce_husband(self, gid: int, husband: int) -> None:
        with self._lock:
            table = self._ensure_group(gid)
            self._conn.execute(f"DELETE FROM {table} WHERE user = ?", (int(husband),))
            self._conn.commit()


def slice_name(
    name: str, measure: Callable[[str], float], limit: int = NAME_WIDTH_LIMIT
) -> str:
    """Shorten a name whose drawn width exceeds the limit, ending it with dots."""
    total = 0
    last_fitting = 0
    for index, char in enumerate(name):
        total += int(measure(char))
        if total > limit:
            break
        last_fitting = index
    if total > limit:
        return name[: max(last_fitting - 1, 0)] + "......"
    return name