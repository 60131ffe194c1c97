from datetime import datetime, timedelta

import pytest

from qqbotplugins.qzone_store import (
    AGREE_STATUS,
    DISAGREE_STATUS,
    WAIT_STATUS,
    Emotion,
    QzoneStore,
    RecordNotFound,
)


@pytest.fixture
def store(tmp_path):
    with QzoneStore(str(tmp_path / "qzone.db")) as opened:
        yield opened


def test_cookie_insert_and_update(store):
    store.insert_or_update(10001, "token")
    assert store.get_by_uin(10001) == "token"
    store.insert_or_update(10001, "placeholder")
    assert store.get_by_uin(10001) == "placeholder"


def test_cookie_missing(store):
    with pytest.raises(RecordNotFound):
        store.get_by_uin(42)


def test_save_and_fetch(store):
    moment = datetime(2022, 5, 6, 7, 8, 9)
    first = store.save_emotion(Emotion(qq=1, msg="hello", anonymous=True, created_at=moment))
    second = store.save_emotion(Emotion(qq=2, msg="world", created_at=moment))
    assert second > first
    fetched = store.emotions_by_ids([second, first])
    assert [e.id for e in fetched] == [first, second]
    assert fetched[0].msg == "hello"
    assert fetched[0].anonymous is True
    assert fetched[0].created_at == moment
    assert fetched[1].status == WAIT_STATUS
    assert store.emotions_by_ids([]) == []


def test_paging_newest_first(store):
    base = datetime(2022, 1, 1)
    ids = [
        store.save_emotion(Emotion(qq=i, msg=str(i), created_at=base + timedelta(minutes=i)))
        for i in range(7)
    ]
    first_page = store.love_emotions_by_status(WAIT_STATUS, 0)
    second_page = store.love_emotions_by_status(WAIT_STATUS, 1)
    assert [e.id for e in first_page] == list(reversed(ids))[:5]
    assert [e.id for e in second_page] == list(reversed(ids))[5:]


def test_status_filter_and_update(store):
    ids = [store.save_emotion(Emotion(qq=i)) for i in range(3)]
    store.update_status(ids[:2], AGREE_STATUS)
    store.update_status(ids[2:], DISAGREE_STATUS)
    agreed = store.love_emotions_by_status(AGREE_STATUS, 0)
    assert sorted(e.id for e in agreed) == ids[:2]
    assert store.love_emotions_by_status(WAIT_STATUS, 0) == []
    assert len(store.love_emotions_by_status(0, 0)) == 3


def test_other_tags_excluded(store):
    store.save_emotion(Emotion(qq=1, tag="其他"))
    assert store.love_emotions_by_status(0, 0) == []


def test_brief():
    emotion = Emotion(
        qq=10001, id=3, status=WAIT_STATUS, anonymous=True,
        created_at=datetime(2022, 1, 2, 3, 4, 5),
    )
    assert emotion.brief() == (
        "序号: 3\nQQ: 10001\n创建时间: 2022-01-02 03:04:05\n状态: 审核中\n匿名: 是"
    )
    rejected = Emotion(qq=7, id=1, status=DISAGREE_STATUS, created_at=datetime(2022, 1, 2))
    assert "状态: 拒绝\n" in rejected.brief()
    assert rejected.brief().endswith("匿名: 否")