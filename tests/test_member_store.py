import threading
from datetime import date

import pytest

from member_model import Member
from member_store import InMemoryMemberStore


def _member(email="a@b.com", name="A"):
    return Member(
        email=email,
        password="$2b$04$digest",
        name=name,
        date_of_birth=date(2000, 1, 1),
        gender="F",
        address="X",
        subscribed=True,
    )


@pytest.fixture
def store():
    return InMemoryMemberStore()


def test_get_missing_returns_none(store):
    assert store.get("nobody@x.com") is None
    assert "nobody@x.com" not in store


def test_put_then_get(store):
    assert store.put("a@b.com", _member()) is False
    got = store.get("a@b.com")
    assert got == _member()
    assert "a@b.com" in store
    assert len(store) == 1


def test_put_overwrites_existing(store):
    store.put("a@b.com", _member(name="A"))
    assert store.put("a@b.com", _member(name="B")) is True
    assert store.get("a@b.com").name == "B"
    assert len(store) == 1


def test_get_returns_copy(store):
    store.put("a@b.com", _member())
    got = store.get("a@b.com")
    got.name = "changed"
    assert store.get("a@b.com").name == "A"


def test_delete(store):
    store.put("a@b.com", _member())
    assert store.delete("a@b.com") is True
    assert store.delete("a@b.com") is False
    assert store.get("a@b.com") is None


def test_update_applies_change(store):
    store.put("a@b.com", _member())
    updated = store.update("a@b.com", lambda m: m.model_copy(update={"address": "Y"}))
    assert updated.address == "Y"
    assert store.get("a@b.com").address == "Y"


def test_update_missing_raises_keyerror(store):
    with pytest.raises(KeyError):
        store.update("a@b.com", lambda m: m)


def test_concurrent_updates_are_not_lost(store):
    store.put("a@b.com", _member(name=""))

    def append_char():
        for _ in range(200):
            store.update("a@b.com", lambda m: m.model_copy(update={"name": m.name + "x"}))

    threads = [threading.Thread(target=append_char) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.get("a@b.com").name) == 8 * 200
