"""Good-night and good-morning bookkeeping: sleep times and daily positions."""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timedelta

MORNING_FIRST_HOUR = 6
MORNING_LAST_HOUR = 12
EVENING_FIRST_HOUR = 21
EVENING_LAST_HOUR = 3

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def _stamp(moment: datetime) -> str:
    return moment.isoformat(sep=" ", timespec="microseconds")


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // b
    return -quotient if a < 0 else quotient


def _evening_start(now: datetime) -> datetime:
    hour = now.hour
    if hour >= EVENING_FIRST_HOUR:
        return now - timedelta(
            hours=hour - EVENING_FIRST_HOUR, minutes=now.minute, seconds=now.second
        )
    if hour <= EVENING_LAST_HOUR:
        return now - timedelta(
            hours=EVENING_LAST_HOUR + hour, minutes=now.minute, seconds=now.second
        )
    return datetime.min


def _morning_start(now: datetime) -> datetime:
    return now - timedelta(
        hours=now.hour - MORNING_FIRST_HOUR, minutes=now.minute, seconds=now.second
    )


class SleepStore:
    """Last sleep or wake time of every member, kept in an sqlite3 database."""

    def __init__(self, path: str) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.RLock()
        with self._lock:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS sleep_manage ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, group_id INTEGER, "
                "user_id INTEGER, sleep_time TEXT)"
            )
            self._conn.commit()

    def __enter__(self) -> SleepStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _record(
        self, gid: int, uid: int, now: datetime, window_start: datetime
    ) -> tuple[int, timedelta]:
        elapsed = timedelta(0)
        with self._lock:
            row = self._conn.execute(
                "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
                "ORDER BY id LIMIT 1",
                (int(gid), int(uid)),
            ).fetchone()
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) "
                    "VALUES (?, ?, ?)",
                    (int(gid), int(uid), _stamp(now)),
                )
            else:
                elapsed = now - datetime.fromisoformat(row[0])
                self._conn.execute(
                    "UPDATE sleep_manage SET sleep_time = ? "
                    "WHERE group_id = ? AND user_id = ?",
                    (_stamp(now), int(gid), int(uid)),
                )
            self._conn.commit()
            (position,) = self._conn.execute(
                "SELECT COUNT(*) FROM sleep_manage WHERE group_id = ? "
                "AND sleep_time <= ? AND sleep_time >= ?",
                (int(gid), _stamp(now), _stamp(window_start)),
            ).fetchone()
        return int(position), elapsed

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record going to sleep; return (position tonight, time awake since last record)."""
        return self._record(gid, uid, now, _evening_start(now))

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record getting up; return (position this morning, time slept since last record)."""
        return self._record(gid, uid, now, _morning_start(now))


def split_duration(delta: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds, truncating toward zero."""
    total = delta // timedelta(microseconds=1)
    hours = _trunc_div(total, _US_PER_HOUR)
    rest = total - hours * _US_PER_HOUR
    minutes = _trunc_div(rest, _US_PER_MINUTE)
    rest -= minutes * _US_PER_MINUTE
    seconds = _trunc_div(rest, _US_PER_SECOND)
    return hours, minutes, seconds


def is_morning(hour: int) -> bool:
    """Good mornings count from 6 to 12 o'clock."""
    return MORNING_FIRST_HOUR <= hour <= MORNING_LAST_HOUR


def is_evening(hour: int) -> bool:
    """Good nights count from 21 o'clock to 3 in the morning."""
    return hour >= EVENING_FIRST_HOUR or hour <= EVENING_LAST_HOUR


def _no_duration(hours: int, minutes: int, seconds: int) -> bool:
    return (hours == 0 and minutes == 0 and seconds == 0) or hours >= 24


def good_night_text(position: int, awake: timedelta) -> str:
    hours, minutes, seconds = split_duration(awake)
    if _no_duration(hours, minutes, seconds):
        return f"晚安成功！你是今天第{position}个睡觉的"
    return (
        f"晚安成功！你的清醒时长为{hours}时{minutes}分{seconds}秒,"
        f"你是今天第{position}个睡觉的"
    )


def good_morning_text(position: int, slept: timedelta) -> str:
    hours, minutes, seconds = split_duration(slept)
    if _no_duration(hours, minutes, seconds):
        return f"早安成功！你是今天第{position}个起床的"
    return (
        f"早安成功！你的睡眠时长为{hours}时{minutes}分{seconds}秒,"
        f"你是今天第{position}个起床的"
    )