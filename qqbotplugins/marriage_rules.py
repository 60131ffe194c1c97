"""Preconditions and odds for the marriage skills: propose, NTR, divorce, matchmaking."""

from __future__ import annotations

import random
from datetime import datetime
from enum import Enum

from qqbotplugins.cooldown import CooldownBook
from qqbotplugins.marriage import GroupSettings, Marriage, MarriageRegistry

MODE_PROPOSE = "嫁娶"
MODE_NTR = "NTR"
MODE_DIVORCE = "离婚"
MODE_MATCHMAKE = "做媒"
MODE_GIFT = "买礼物"

PROPOSAL_FLOOR = 30
NTR_FLOOR = 30
DIVORCE_LOW_FAVOR = 20
DIVORCE_LOW_FAVOR_VALUE = 10
DIVORCE_CEILING = 110


class RuleViolation(Exception):
    """A skill may not be used; the message is the reply for the member."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LineKind(Enum):
    PROPOSAL_SUCCESS = 0
    PROPOSAL_FAILURE = 1
    NTR_SUCCESS = 2
    DIVORCE_FAILURE = 3
    DIVORCE_SUCCESS = 4


LINES: dict[LineKind, tuple[str, ...]] = {
    LineKind.PROPOSAL_SUCCESS: (
        "是个勇敢的孩子(*/ω＼*) 今天的运气都降临在你的身边~\n\n",
        "(´･ω･`)对方答应了你 并表示愿意当今天的CP\n\n",
    ),
    LineKind.PROPOSAL_FAILURE: (
        "今天的运气有一点背哦~明天再试试叭",
        "_(:з」∠)_下次还有机会 咱抱抱你w",
        "今天失败了惹. 摸摸头~咱明天还有机会",
    ),
    LineKind.NTR_SUCCESS: ("因为你的个人魅力~~今天他就是你的了w\n\n",),
    LineKind.DIVORCE_FAILURE: (
        "打是情,骂是爱,不打不亲不相爱。答应我不要分手。",
        "床头打架床尾和，夫妻没有隔夜仇。安啦安啦，不要闹变扭。",
    ),
    LineKind.DIVORCE_SUCCESS: (
        "离婚成功力\n话说你不考虑当个1？",
        "离婚成功力\n天涯何处无芳草，何必单恋一枝花？不如再摘一支（bushi",
    ),
}

_COOLING = "你的技能还在CD中..."
_TOGETHER = "笨蛋！你们已经在一起了！"


def _require_ready(
    cooldowns: CooldownBook,
    gid: int,
    uid: int,
    mode: str,
    settings: GroupSettings,
    now: datetime,
) -> None:
    if not cooldowns.ready(gid, uid, mode, settings.cd_hours, now):
        raise RuleViolation(_COOLING)


def _check_caller_single(info: Marriage | None, uid: int, attached_reply: str) -> None:
    if info is None:
        return
    if info.is_single_noble:
        raise RuleViolation("今天的你是单身贵族噢")
    if info.user == uid:
        raise RuleViolation(attached_reply)
    if info.target == uid:
        raise RuleViolation("该是0就是0,当0有什么不好")


def check_single(
    registry: MarriageRegistry,
    cooldowns: CooldownBook,
    gid: int,
    uid: int,
    fiancee: int,
    now: datetime,
) -> None:
    """Check that both sides are free for a proposal; raise RuleViolation otherwise."""
    registry.open_for_today(gid, now)
    settings = registry.settings(gid)
    if not settings.can_match:
        raise RuleViolation("你群包分配,别在娶妻上面下功夫，好好水群")
    _require_ready(cooldowns, gid, uid, MODE_PROPOSE, settings, now)

    mine = registry.lookup(gid, uid)
    if mine is not None:
        if mine.is_single_noble:
            raise RuleViolation("今天的你是单身贵族噢")
        if fiancee in (mine.target, mine.user):
            raise RuleViolation(_TOGETHER)
    _check_caller_single(mine, uid, "笨蛋~你家里还有个吃白饭的w")

    theirs = registry.lookup(gid, fiancee)
    if theirs is not None:
        if theirs.is_single_noble:
            raise RuleViolation("今天的ta是单身贵族噢")
        if theirs.user == fiancee:
            raise RuleViolation("他有别的女人了，你该放下了")
        if theirs.target == fiancee:
            raise RuleViolation("ta被别人娶了,你来晚力")


def check_mistress(
    registry: MarriageRegistry,
    cooldowns: CooldownBook,
    gid: int,
    uid: int,
    fiancee: int,
    now: datetime,
) -> None:
    """Check that the target is married to someone else and the caller is free."""
    registry.open_for_today(gid, now)
    settings = registry.settings(gid)
    if not settings.can_ntr:
        raise RuleViolation("你群发布了牛头人禁止令，放弃吧")
    _require_ready(cooldowns, gid, uid, MODE_PROPOSE, settings, now)

    theirs = registry.lookup(gid, fiancee)
    if theirs is None:
        raise RuleViolation("ta现在还是单身哦,快向ta表白吧!")
    if theirs.is_single_noble:
        raise RuleViolation("今天的ta是单身贵族噢")
    if uid in (theirs.target, theirs.user):
        raise RuleViolation(_TOGETHER)

    _check_caller_single(registry.lookup(gid, uid), uid, "打灭，不给纳小妾！")


def check_divorce(
    registry: MarriageRegistry,
    cooldowns: CooldownBook,
    gid: int,
    uid: int,
    now: datetime,
) -> None:
    """Check that the caller is married today and the divorce skill is ready."""
    registry.open_for_today(gid, now)
    if registry.lookup(gid, uid) is None:
        raise RuleViolation("今天你还没结婚哦")
    settings = registry.settings(gid)
    _require_ready(cooldowns, gid, uid, MODE_DIVORCE, settings, now)


def check_matchmaker(
    registry: MarriageRegistry,
    cooldowns: CooldownBook,
    gid: int,
    uid: int,
    gay_one: int,
    gay_zero: int,
    now: datetime,
) -> None:
    """Check that a matchmaker may pair two other, unmarried members."""
    if uid in (gay_one, gay_zero):
        raise RuleViolation("禁止自己给自己做媒!")
    if gay_one == gay_zero:
        raise RuleViolation("你这个媒人XP很怪咧,不能这样噢")
    registry.open_for_today(gid, now)
    settings = registry.settings(gid)
    _require_ready(cooldowns, gid, uid, MODE_MATCHMAKE, settings, now)

    one = registry.lookup(gid, gay_one)
    if one is not None:
        if one.is_single_noble:
            raise RuleViolation("今天的攻方是单身贵族噢")
        if gay_zero in (one.target, one.user):
            raise RuleViolation("笨蛋!ta们已经在一起了!")
        raise RuleViolation("攻方不是单身,不允许给这种人做媒!")

    if registry.lookup(gid, gay_zero) is not None:
        raise RuleViolation("受方不是单身,不允许给这种人做媒!")


def proposal_succeeds(favor: int, roll: int) -> bool:
    """A roll in 0..100 succeeds below the favourability, floored at 30."""
    return roll < max(favor, PROPOSAL_FLOOR)


def ntr_succeeds(favor: int, roll: int) -> bool:
    """A roll in 0..100 succeeds below a third of the floored favourability."""
    return roll < max(favor, NTR_FLOOR) // 3


def divorce_succeeds(favor: int, roll: int) -> bool:
    """A roll in 0..100 succeeds unless it exceeds 110 minus the favourability."""
    if favor < DIVORCE_LOW_FAVOR:
        favor = DIVORCE_LOW_FAVOR_VALUE
    return roll <= DIVORCE_CEILING - favor


def pick_line(kind: LineKind, rng: random.Random) -> str:
    """Pick one of the canned replies of the given kind."""
    return rng.choice(LINES[kind])