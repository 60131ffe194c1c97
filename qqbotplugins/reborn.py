"""Reincarnation simulator: a weighted draw of birthplace and gender."""

from __future__ import annotations

import json
import random
from collections.abc import Iterable

GENDERS = (("男孩子", 50707), ("女孩子", 48292), ("雌雄同体", 1001))
SUCCESS_THRESHOLD = 1 << 27
WEIGHT_SCALE = 1e9
FAILURE_TEXT = "投胎失败！\n您没能活到出生，祝您下次好运！"


class Reborn:
    """Draws a country by its population weight and a gender by birth ratio."""

    def __init__(
        self, areas: Iterable[tuple[str, float]], rng: random.Random | None = None
    ) -> None:
        pairs = [(str(name), int(float(weight) * WEIGHT_SCALE)) for name, weight in areas]
        kept = [(name, weight) for name, weight in pairs if weight > 0]
        if not kept:
            raise ValueError("zero Choices with Weight >= 1")
        self._names = [name for name, _ in kept]
        self._weights = [weight for _, weight in kept]
        self._rng = rng if rng is not None else random.Random()

    @classmethod
    def from_json(cls, data: str | bytes, rng: random.Random | None = None) -> Reborn:
        """Build from a JSON list of objects with "name" and "weight"."""
        entries = json.loads(data)
        return cls(((entry["name"], entry["weight"]) for entry in entries), rng)

    def country(self) -> str:
        return self._rng.choices(self._names, weights=self._weights)[0]

    def gender(self) -> str:
        names, weights = zip(*GENDERS)
        return self._rng.choices(names, weights=weights)[0]

    def reborn(self) -> str:
        """Return the reply for one attempt at being reborn."""
        if self._rng.getrandbits(31) > SUCCESS_THRESHOLD:
            return f"投胎成功！\n您出生在 {self.country()}, 是 {self.gender()}。"
        return FAILURE_TEXT