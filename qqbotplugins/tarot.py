"""Tarot deck: single draws, multi-card draws, spreads and card lookups."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from enum import Enum

IMAGE_BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
REVERSE_DIR = "Reverse/"
MAJOR_COUNT = 22
MINOR_COUNT = 55
MAX_DRAW = 20
REASONS = ("您抽到的是~\n", "锵锵锵，塔罗牌的预言是~\n", "诶，让我看看您抽到了~\n")
UPRIGHT = "『正位』"
REVERSED = "『逆位』"
MINOR_LIST_LINE = "[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]"


class ArcanaKind(Enum):
    """Which part of the deck to draw from, as (first index, number of cards)."""

    MAJOR = (0, MAJOR_COUNT)
    MINOR = (MAJOR_COUNT, MINOR_COUNT)
    MIXED = (0, MAJOR_COUNT + MINOR_COUNT)

    @classmethod
    def from_text(cls, text: str) -> ArcanaKind:
        """Read the kind from a command word such as 小阿卡纳 or 混合."""
        if "小" in text:
            return cls.MINOR
        if text == "混合":
            return cls.MIXED
        return cls.MAJOR


class SpreadNotFound(LookupError):
    """No spread of that name; the message lists the known spreads."""

    def __init__(self, name: str, known: list[str]) -> None:
        super().__init__(f"没有找到{name}噢~\n现有牌阵列表: \n" + "\n".join(known))
        self.name = name


@dataclass(frozen=True)
class Card:
    """One tarot card with its upright and reversed meanings."""

    name: str = ""
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""

    @property
    def image_url(self) -> str:
        return IMAGE_BED + self.img_url


@dataclass(frozen=True)
class Formation:
    """A spread: how many cards it takes and what each position stands for."""

    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class DrawnCard:
    """A card as drawn, upright or reversed."""

    card: Card
    reversed: bool

    @property
    def position(self) -> str:
        return REVERSED if self.reversed else UPRIGHT

    @property
    def description(self) -> str:
        return self.card.reverse_description if self.reversed else self.card.description

    @property
    def image_url(self) -> str:
        return IMAGE_BED + (REVERSE_DIR if self.reversed else "") + self.card.img_url

    @property
    def image_name(self) -> str:
        return ("Reverse" + self.card.name) if self.reversed else self.card.name

    def reading(self, reason: str) -> str:
        """The reply text for this card, led by one of the reasons."""
        return f"{reason}{self.position}的『{self.card.name}』\n其释义为: {self.description}"


class TarotDeck:
    """Cards keyed by their index as a string, plus the named spreads."""

    def __init__(self, cards: dict[str, Card], formations: dict[str, Formation]) -> None:
        self._cards = dict(cards)
        self._formations = dict(formations)
        self._by_name = {card.name: card for card in self._cards.values()}

    @classmethod
    def from_json(cls, cards_json: str | bytes, formations_json: str | bytes) -> TarotDeck:
        """Build from the card and spread JSON documents."""
        cards = {}
        for key, entry in json.loads(cards_json).items():
            info = entry.get("info", {})
            cards[str(key)] = Card(
                name=entry.get("name", ""),
                description=info.get("description", ""),
                reverse_description=info.get("reverseDescription", ""),
                img_url=info.get("imgUrl", ""),
            )
        formations = {
            name: Formation(
                cards_num=int(entry.get("cards_num", 0)),
                is_cut=bool(entry.get("is_cut", False)),
                represent=[list(row) for row in entry.get("represent", [])],
            )
            for name, entry in json.loads(formations_json).items()
        }
        return cls(cards, formations)

    def _card(self, index: int) -> Card:
        return self._cards.get(str(index), Card())

    def major_arcana(self) -> list[str]:
        """Names of the 22 major arcana in order."""
        return [self._card(index).name for index in range(MAJOR_COUNT)]

    def lookup(self, name: str) -> Card | None:
        return self._by_name.get(name)

    def formation_names(self) -> list[str]:
        return list(self._formations)

    def card_list_text(self) -> str:
        """The list of card names sent when a lookup finds nothing."""
        major = self.major_arcana()
        return (
            "塔罗牌列表\n大阿尔卡纳:\n"
            + " ".join(major[:7])
            + "\n"
            + " ".join(major[7:14])
            + "\n"
            + " ".join(major[14:22])
            + "\n小阿尔卡纳:\n"
            + MINOR_LIST_LINE
        )

    def draw(self, count: int, kind: ArcanaKind, rng: random.Random) -> list[DrawnCard]:
        """Draw distinct cards from one part of the deck, each upright or reversed."""
        start, length = kind.value
        if count <= 0:
            raise ValueError("张数必须为正")
        if count > length:
            raise ValueError("抽取张数过多")
        indices = rng.sample(range(length), count)
        return [DrawnCard(self._card(start + i), rng.randrange(2) == 1) for i in indices]

    def spread(
        self, name: str, kind: ArcanaKind, nickname: str, rng: random.Random
    ) -> tuple[list[DrawnCard], str]:
        """Lay out a named spread; return the cards and the reading text."""
        formation = self._formations.get(name)
        if formation is None:
            raise SpreadNotFound(name, self.formation_names())
        drawn = self.draw(formation.cards_num, kind, rng)
        parts = [f"{nickname}---{name}\n"]
        for index, card in enumerate(drawn):
            parts.append(
                f"{formation.represent[0][index]}:{card.position}的『{card.card.name}』"
                f"\n其释义为: \n{card.description}\n"
            )
        return drawn, "".join(parts)


def parse_draw_count(text: str, in_group: bool) -> int:
    """Read a count such as "3张"; an empty text means one card."""
    if not text:
        return 1
    count = int(text.removesuffix("张"))
    if count <= 0:
        raise ValueError("张数必须为正")
    if count > 1 and not in_group:
        raise ValueError("抽取多张仅支持群聊")
    if count > MAX_DRAW:
        raise ValueError("抽取张数过多")
    return count