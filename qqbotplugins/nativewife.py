"""Per-group picture gallery of wives, with one deterministic draw per person per day."""

from __future__ import annotations

import hashlib
import random
from datetime import date
from pathlib import Path

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class NoWifeError(LookupError):
    """The group has no wives to draw from."""

    def __init__(self) -> None:
        super().__init__("一个wife也没有哦~")


def base36(number: int) -> str:
    """Lower-case base-36 representation with a leading minus for negatives."""
    if number == 0:
        return "0"
    sign = "-" if number < 0 else ""
    value = abs(number)
    digits = []
    while value:
        value, rest = divmod(value, 36)
        digits.append(_DIGITS[rest])
    return sign + "".join(reversed(digits))


def day_seed(nickname: str, day: date) -> int:
    """Seed derived from the nickname and the date, as a signed 64-bit integer."""
    digest = hashlib.md5(f"{nickname}{day.year}{day.month}{day.day}".encode()).digest()
    return int.from_bytes(digest[:8], "little", signed=True)


def extract_name(text: str, prefix: str) -> str:
    """Take the name after the last command prefix, without spaces or path separators."""
    compact = text.replace(" ", "")
    _, _, name = compact.rpartition(prefix)
    return name.replace("/", "").replace("\\", "")


class WifeGallery:
    """Pictures stored as files named after each wife, one folder per group."""

    def __init__(self, base: str | Path) -> None:
        self.base = Path(base)

    def folder(self, gid: int) -> Path:
        return self.base / base36(int(gid))

    def names(self, gid: int) -> list[str]:
        """Names of the group's wives in file-name order; empty when there is no folder."""
        try:
            return sorted(entry.name for entry in self.folder(gid).iterdir())
        except (FileNotFoundError, NotADirectoryError):
            return []

    def draw(self, gid: int, nickname: str, day: date) -> str:
        """Pick the member's wife of the day; raise NoWifeError when there is none."""
        names = self.names(gid)
        if not names:
            raise NoWifeError()
        if len(names) == 1:
            return names[0]
        return names[random.Random(day_seed(nickname, day)).randrange(len(names))]

    def add(self, gid: int, name: str, data: bytes) -> Path:
        """Store a picture under the given name and return its path."""
        if not name:
            raise ValueError("没有找到wife的名字！")
        folder = self.folder(gid)
        folder.mkdir(mode=0o755, parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(data)
        return path

    def remove(self, gid: int, name: str) -> None:
        """Delete a wife's picture; raise FileNotFoundError when it is missing."""
        if not name:
            raise ValueError("没有找到wife的名字！")
        (self.folder(gid) / name).unlink()