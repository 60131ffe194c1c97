import random
import sqlite3
from datetime import datetime, timedelta

import pytest

from qqbotplugins.cooldown import CooldownBook
from qqbotplugins.marriage import MarriageRegistry
from qqbotplugins.marriage_rules import (
    LINES,
    MODE_DIVORCE,
    MODE_MATCHMAKE,
    MODE_PROPOSE,
    LineKind,
    RuleViolation,
    check_divorce,
    check_matchmaker,
    check_mistress,
    check_single,
    divorce_succeeds,
    ntr_succeeds,
    pick_line,
    proposal_succeeds,
)

GID = 1000
NOW = datetime(2024, 3, 5, 12, 0, 0)


@pytest.fixture
def books():
    conn = sqlite3.connect(":memory:")
    registry = MarriageRegistry(conn)
    cooldowns = CooldownBook(conn)
    registry.open_for_today(GID, NOW)
    yield registry, cooldowns
    conn.close()


def test_single_passes_and_opens_day(books):
    registry, cooldowns = books
    check_single(registry, cooldowns, GID, 1, 2, NOW + timedelta(days=1))
    assert registry.settings(GID).updated == (NOW + timedelta(days=1)).strftime("%Y/%m/%d")


def test_single_disabled(books):
    registry, cooldowns = books
    settings = registry.settings(GID)
    settings.can_match = False
    registry.update_settings(settings)
    with pytest.raises(RuleViolation, match="你群包分配"):
        check_single(registry, cooldowns, GID, 1, 2, NOW)


def test_single_cooldown(books):
    registry, cooldowns = books
    cooldowns.record(GID, 1, MODE_PROPOSE, NOW)
    with pytest.raises(RuleViolation) as info:
        check_single(registry, cooldowns, GID, 1, 2, NOW)
    assert info.value.message == "你的技能还在CD中..."


def test_single_already_together(books):
    registry, cooldowns = books
    registry.register(GID, 1, 2, "a", "b", NOW)
    with pytest.raises(RuleViolation, match="你们已经在一起了"):
        check_single(registry, cooldowns, GID, 1, 2, NOW)


def test_single_caller_married(books):
    registry, cooldowns = books
    registry.register(GID, 1, 3, "a", "c", NOW)
    with pytest.raises(RuleViolation, match="吃白饭"):
        check_single(registry, cooldowns, GID, 1, 2, NOW)


def test_single_fiancee_taken(books):
    registry, cooldowns = books
    registry.register(GID, 3, 2, "c", "b", NOW)
    with pytest.raises(RuleViolation, match="你来晚力"):
        check_single(registry, cooldowns, GID, 1, 2, NOW)


def test_single_noble(books):
    registry, cooldowns = books
    registry.register(GID, 1, 0, "", "", NOW)
    with pytest.raises(RuleViolation, match="单身贵族"):
        check_single(registry, cooldowns, GID, 1, 2, NOW)


def test_mistress_target_single(books):
    registry, cooldowns = books
    with pytest.raises(RuleViolation, match="快向ta表白"):
        check_mistress(registry, cooldowns, GID, 1, 2, NOW)


def test_mistress_disabled(books):
    registry, cooldowns = books
    settings = registry.settings(GID)
    settings.can_ntr = False
    registry.update_settings(settings)
    with pytest.raises(RuleViolation, match="牛头人禁止令"):
        check_mistress(registry, cooldowns, GID, 1, 2, NOW)


def test_mistress_caller_married(books):
    registry, cooldowns = books
    registry.register(GID, 2, 3, "b", "c", NOW)
    registry.register(GID, 1, 4, "a", "d", NOW)
    with pytest.raises(RuleViolation, match="不给纳小妾"):
        check_mistress(registry, cooldowns, GID, 1, 2, NOW)


def test_mistress_passes(books):
    registry, cooldowns = books
    registry.register(GID, 2, 3, "b", "c", NOW)
    check_mistress(registry, cooldowns, GID, 1, 2, NOW)
    assert registry.lookup(GID, 2).target == 3


def test_divorce_not_married(books):
    registry, cooldowns = books
    with pytest.raises(RuleViolation, match="还没结婚"):
        check_divorce(registry, cooldowns, GID, 1, NOW)


def test_divorce_cooldown(books):
    registry, cooldowns = books
    registry.register(GID, 1, 2, "a", "b", NOW)
    cooldowns.record(GID, 1, MODE_DIVORCE, NOW)
    with pytest.raises(RuleViolation, match="CD"):
        check_divorce(registry, cooldowns, GID, 1, NOW)


def test_divorce_ready_after_cd(books):
    registry, cooldowns = books
    registry.register(GID, 1, 2, "a", "b", NOW)
    cooldowns.record(GID, 1, MODE_DIVORCE, NOW - timedelta(hours=13))
    check_divorce(registry, cooldowns, GID, 1, NOW)
    assert cooldowns.ready(GID, 1, MODE_DIVORCE, 12, NOW) is True


def test_matchmaker_self(books):
    registry, cooldowns = books
    with pytest.raises(RuleViolation, match="禁止自己给自己做媒"):
        check_matchmaker(registry, cooldowns, GID, 1, 1, 2, NOW)


def test_matchmaker_same_pair(books):
    registry, cooldowns = books
    with pytest.raises(RuleViolation, match="XP很怪"):
        check_matchmaker(registry, cooldowns, GID, 1, 2, 2, NOW)


def test_matchmaker_cooldown(books):
    registry, cooldowns = books
    cooldowns.record(GID, 1, MODE_MATCHMAKE, NOW)
    with pytest.raises(RuleViolation, match="CD"):
        check_matchmaker(registry, cooldowns, GID, 1, 2, 3, NOW)


def test_matchmaker_married_sides(books):
    registry, cooldowns = books
    registry.register(GID, 2, 4, "b", "d", NOW)
    with pytest.raises(RuleViolation, match="攻方不是单身"):
        check_matchmaker(registry, cooldowns, GID, 1, 2, 3, NOW)
    with pytest.raises(RuleViolation, match="受方不是单身"):
        check_matchmaker(registry, cooldowns, GID, 1, 3, 4, NOW)


def test_matchmaker_together(books):
    registry, cooldowns = books
    registry.register(GID, 2, 3, "b", "c", NOW)
    with pytest.raises(RuleViolation, match="ta们已经在一起了"):
        check_matchmaker(registry, cooldowns, GID, 1, 2, 3, NOW)


def test_proposal_floor():
    assert proposal_succeeds(0, 29) is True
    assert proposal_succeeds(0, 30) is False
    assert proposal_succeeds(80, 79) is True
    assert proposal_succeeds(80, 80) is False


def test_ntr_is_harder_than_proposal():
    for favor in range(0, 101, 5):
        for roll in range(101):
            if ntr_succeeds(favor, roll):
                assert proposal_succeeds(favor, roll)


def test_divorce_monotonic_in_favor():
    for roll in range(101):
        for favor in range(20, 100):
            if divorce_succeeds(favor + 1, roll):
                assert divorce_succeeds(favor, roll)
    assert divorce_succeeds(0, 100) is True
    assert divorce_succeeds(0, 101) is False


def test_pick_line_from_kind():
    rng = random.Random(7)
    for kind in LineKind:
        for _ in range(10):
            assert pick_line(kind, rng) in LINES[kind]