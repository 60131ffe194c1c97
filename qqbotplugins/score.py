"""Daily sign-in: levels, sign-in counts and the coins each sign-in earns."""

from __future__ import annotations

import random
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime

SCORE_MAX = 1200
SIGN_IN_MAX = 1
RANK_THRESHOLDS = (0, 10, 20, 50, 100, 200, 350, 550, 750, 1000, 1200)
BACKGROUND_URL = "https://img.moehu.org/pic.php?id=pc"

_DAY_FORMAT = "%Y%m%d"


@dataclass(frozen=True)
class SignInResult:
    """Outcome of one sign-in attempt."""

    already_signed: bool
    count: int
    level: int
    rank: int
    coins: int
    capped: bool
    next_rank_score: int


class ScoreStore:
    """Levels and sign-in counts per user, kept in an sqlite3 database."""

    def __init__(self, path: str) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        with self._lock:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS score "
                "(uid INTEGER PRIMARY KEY, score INTEGER NOT NULL DEFAULT 0)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sign_in "
                "(uid INTEGER PRIMARY KEY, count INTEGER NOT NULL DEFAULT 0, "
                "updated_at TEXT)"
            )
            self._conn.commit()

    def __enter__(self) -> ScoreStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def get_score(self, uid: int) -> int:
        """Return the user's level, creating a zero entry when there is none."""
        with self._lock:
            self._conn.execute(
                "INSERT OR IGNORE INTO score (uid, score) VALUES (?, 0)", (int(uid),)
            )
            self._conn.commit()
            row = self._conn.execute(
                "SELECT score FROM score WHERE uid = ?", (int(uid),)
            ).fetchone()
        return int(row[0])

    def set_score(self, uid: int, score: int) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT INTO score (uid, score) VALUES (?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
                (int(uid), int(score)),
            )
            self._conn.commit()

    def get_sign_in(self, uid: int) -> tuple[int, datetime | None]:
        """Return (sign-in count, time of the last update), creating an empty entry."""
        with self._lock:
            self._conn.execute(
                "INSERT OR IGNORE INTO sign_in (uid, count, updated_at) VALUES (?, 0, NULL)",
                (int(uid),),
            )
            self._conn.commit()
            row = self._conn.execute(
                "SELECT count, updated_at FROM sign_in WHERE uid = ?", (int(uid),)
            ).fetchone()
        updated = datetime.fromisoformat(row[1]) if row[1] else None
        return int(row[0]), updated

    def set_sign_in_count(self, uid: int, count: int, now: datetime) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
                "updated_at = excluded.updated_at",
                (int(uid), int(count), now.isoformat()),
            )
            self._conn.commit()

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """Return up to n (uid, level) pairs, highest level first."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (int(n),)
            ).fetchall()
        return [(int(uid), int(score)) for uid, score in rows]


def hour_word(moment: datetime) -> str:
    """Greeting for the time of day."""
    hour = moment.hour
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""


def rank_of(level: int) -> int:
    """Rank reached by a level; -1 when it lies outside the thresholds."""
    for rank, threshold in enumerate(RANK_THRESHOLDS):
        if level == threshold:
            return rank
        if level < threshold:
            return rank - 1
    return -1


def next_rank_score(rank: int) -> int:
    """Level needed for the rank after this one, or the maximum at the top rank."""
    if rank < len(RANK_THRESHOLDS) - 1:
        return RANK_THRESHOLDS[rank + 1]
    return SCORE_MAX


def sign_in(
    store: ScoreStore, uid: int, now: datetime, rng: random.Random
) -> SignInResult:
    """Sign a user in for the day, raising their level and working out the coins earned."""
    count, updated = store.get_sign_in(uid)
    today = now.strftime(_DAY_FORMAT)
    updated_day = updated.strftime(_DAY_FORMAT) if updated is not None else ""
    if count >= SIGN_IN_MAX and updated_day == today:
        level = store.get_score(uid)
        rank = rank_of(level)
        return SignInResult(
            already_signed=True,
            count=count,
            level=level,
            rank=rank,
            coins=0,
            capped=False,
            next_rank_score=next_rank_score(rank),
        )
    if updated_day != today:
        store.set_sign_in_count(uid, 0, now)
    store.set_sign_in_count(uid, count + 1, now)

    level = store.get_score(uid) + 1
    capped = level > SCORE_MAX
    if capped:
        level = SCORE_MAX
    store.set_score(uid, level)

    rank = rank_of(level)
    coins = 1 + rng.randrange(10) + rank * 5
    return SignInResult(
        already_signed=False,
        count=count + 1,
        level=level,
        rank=rank,
        coins=coins,
        capped=capped,
        next_rank_score=next_rank_score(rank),
    )