"""Storage for the confession wall: login cookies and submitted posts."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

WAIT_STATUS = 1
AGREE_STATUS = 2
DISAGREE_STATUS = 3
LOVE_TAG = "表白"
PAGE_SIZE = 5

_STATUS_TEXT = {
    WAIT_STATUS: "状态: 审核中\n",
    AGREE_STATUS: "状态: 同意\n",
    DISAGREE_STATUS: "状态: 拒绝\n",
}
_COLUMNS = "id, created_at, anonymous, qq, msg, status, tag"


class RecordNotFound(LookupError):
    """No stored record matches."""


def _stamp(moment: datetime) -> str:
    return moment.isoformat(sep=" ", timespec="microseconds")


def _format_time(moment: datetime) -> str:
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


@dataclass
class Emotion:
    """A post submitted to the wall."""

    qq: int
    msg: str = ""
    status: int = WAIT_STATUS
    tag: str = LOVE_TAG
    anonymous: bool = False
    id: int = 0
    created_at: datetime | None = None

    def brief(self) -> str:
        """Summary shown to reviewers."""
        created = self.created_at if self.created_at is not None else datetime.min
        text = f"序号: {self.id}\nQQ: {self.qq}\n创建时间: {_format_time(created)}\n"
        text += _STATUS_TEXT.get(self.status, "")
        text += "匿名: 是" if self.anonymous else "匿名: 否"
        return text


def _emotion(row: tuple) -> Emotion:
    ident, created, anonymous, qq, msg, status, tag = row
    return Emotion(
        qq=int(qq),
        msg=msg,
        status=int(status),
        tag=tag,
        anonymous=bool(anonymous),
        id=int(ident),
        created_at=datetime.fromisoformat(created),
    )


class QzoneStore:
    """Cookies per account and wall posts, kept in an sqlite3 database."""

    def __init__(self, path: str) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        with self._lock:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS qzone_config ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, qq INTEGER UNIQUE NOT NULL, "
                "cookie VARCHAR(1024))"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS emotion ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at TEXT, updated_at TEXT, "
                "deleted_at TEXT, anonymous INTEGER, qq INTEGER, msg TEXT, "
                "status INTEGER, tag TEXT)"
            )
            self._conn.commit()

    def __enter__(self) -> QzoneStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def insert_or_update(self, qq: int, cookie: str) -> None:
        """Store the account's cookie, replacing an older one."""
        with self._lock:
            self._conn.execute(
                "INSERT INTO qzone_config (qq, cookie) VALUES (?, ?) "
                "ON CONFLICT(qq) DO UPDATE SET cookie = excluded.cookie",
                (int(qq), cookie),
            )
            self._conn.commit()

    def get_by_uin(self, qq: int) -> str:
        """Return the account's cookie; raise RecordNotFound when it never logged in."""
        with self._lock:
            row = self._conn.execute(
                "SELECT cookie FROM qzone_config WHERE qq = ? LIMIT 1", (int(qq),)
            ).fetchone()
        if row is None:
            raise RecordNotFound(f"no login for {qq}")
        return row[0]

    def save_emotion(self, emotion: Emotion) -> int:
        """Store a post and return its id."""
        created = emotion.created_at if emotion.created_at is not None else datetime.now()
        with self._lock:
            cursor = self._conn.execute(
                "INSERT INTO emotion (created_at, updated_at, anonymous, qq, msg, status, tag) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    _stamp(created),
                    _stamp(created),
                    int(emotion.anonymous),
                    int(emotion.qq),
                    emotion.msg,
                    int(emotion.status),
                    emotion.tag,
                ),
            )
            self._conn.commit()
        return int(cursor.lastrowid)

    def emotions_by_ids(self, ids: list[int]) -> list[Emotion]:
        ids = [int(i) for i in ids]
        if not ids:
            return []
        marks = ", ".join("?" for _ in ids)
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM emotion WHERE deleted_at IS NULL "
                f"AND id IN ({marks}) ORDER BY id",
                ids,
            ).fetchall()
        return [_emotion(row) for row in rows]

    def love_emotions_by_status(self, status: int, page: int) -> list[Emotion]:
        """One page of wall posts, newest first; status 0 means every status."""
        query = f"SELECT {_COLUMNS} FROM emotion WHERE deleted_at IS NULL AND tag LIKE ?"
        params: list[object] = [f"%{LOVE_TAG}%"]
        if status != 0:
            query += " AND status = ?"
            params.append(int(status))
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params += [PAGE_SIZE, int(page) * PAGE_SIZE]
        with self._lock:
            rows = self._conn.execute(query, params).fetchall()
        return [_emotion(row) for row in rows]

    def update_status(self, ids: list[int], status: int) -> None:
        ids = [int(i) for i in ids]
        if not ids:
            return
        marks = ", ".join("?" for _ in ids)
        with self._lock:
            self._conn.execute(
                f"UPDATE emotion SET status = ?, updated_at = ? "
                f"WHERE deleted_at IS NULL AND id IN ({marks})",
                [int(status), _stamp(datetime.now()), *ids],
            )
            self._conn.commit()