from datetime import datetime, timedelta

import pytest

from qqbotplugins.sleep import (
    SleepStore,
    good_morning_text,
    good_night_text,
    is_evening,
    is_morning,
    split_duration,
)


@pytest.fixture
def store(tmp_path):
    with SleepStore(str(tmp_path / "sleep.db")) as s:
        yield s


def test_first_sleep_has_no_duration(store):
    position, awake = store.sleep(1, 10, datetime(2024, 5, 1, 22, 0, 0))
    assert position == 1
    assert awake == timedelta(0)


def test_second_sleep_reports_time_since_last(store):
    first = datetime(2024, 5, 1, 22, 0, 0)
    second = datetime(2024, 5, 2, 23, 15, 30)
    store.sleep(1, 10, first)
    position, awake = store.sleep(1, 10, second)
    assert awake == second - first
    assert position == 1


def test_sleep_before_evening_not_counted(store):
    store.sleep(1, 10, datetime(2024, 5, 1, 20, 0, 0))
    position, _ = store.sleep(1, 11, datetime(2024, 5, 1, 22, 0, 0))
    assert position == 1
    position, _ = store.sleep(1, 12, datetime(2024, 5, 1, 22, 30, 0))
    assert position == 2


def test_sleep_window_spans_midnight(store):
    store.sleep(1, 10, datetime(2024, 5, 1, 22, 0, 0))
    position, _ = store.sleep(1, 11, datetime(2024, 5, 2, 1, 0, 0))
    assert position == 2


def test_groups_are_separate(store):
    store.sleep(1, 10, datetime(2024, 5, 1, 22, 0, 0))
    position, _ = store.sleep(2, 11, datetime(2024, 5, 1, 22, 5, 0))
    assert position == 1


def test_get_up_positions_and_duration(store):
    night = datetime(2024, 5, 1, 23, 0, 0)
    store.sleep(1, 10, night)
    morning = datetime(2024, 5, 2, 7, 0, 0)
    position, slept = store.get_up(1, 10, morning)
    assert slept == morning - night
    assert position == 1
    position, _ = store.get_up(1, 11, datetime(2024, 5, 2, 8, 0, 0))
    assert position == 2


def test_split_duration():
    assert split_duration(timedelta(hours=1, minutes=2, seconds=3)) == (1, 2, 3)
    assert split_duration(timedelta(0)) == (0, 0, 0)


def test_split_duration_truncates_toward_zero():
    assert split_duration(timedelta(seconds=-3661)) == (-1, -1, -1)


def test_split_duration_ignores_fraction():
    assert split_duration(timedelta(seconds=5, microseconds=999999)) == (0, 0, 5)


@pytest.mark.parametrize("hour,expected", [(5, False), (6, True), (12, True), (13, False)])
def test_is_morning(hour, expected):
    assert is_morning(hour) is expected


@pytest.mark.parametrize("hour,expected", [(3, True), (4, False), (20, False), (21, True), (0, True)])
def test_is_evening(hour, expected):
    assert is_evening(hour) is expected


def test_good_night_text():
    assert good_night_text(3, timedelta(0)) == "晚安成功！你是今天第3个睡觉的"
    assert (
        good_night_text(3, timedelta(hours=1, minutes=2, seconds=3))
        == "晚安成功！你的清醒时长为1时2分3秒,你是今天第3个睡觉的"
    )


def test_good_morning_text_long_duration_is_short_form():
    assert good_morning_text(2, timedelta(hours=30)) == "早安成功！你是今天第2个起床的"
    assert good_morning_text(2, timedelta(minutes=5)).startswith("早安成功！你的睡眠时长为0时5分0秒")