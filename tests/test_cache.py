import pytest

from hrtfkit.cache import HrtfCache


class Closable:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_lookup_empty():
    cache = HrtfCache()
    assert cache.lookup("a.sofa", 48000.0) is None
    assert len(cache) == 0


def test_store_and_lookup():
    cache = HrtfCache()
    easy = Closable()
    assert cache.store(easy, "a.sofa", 48000.0) is easy
    assert cache.lookup("a.sofa", 48000.0) is easy
    assert len(cache) == 1


def test_lookup_requires_same_rate_and_name():
    cache = HrtfCache()
    cache.store(Closable(), "a.sofa", 48000.0)
    assert cache.lookup("a.sofa", 44100.0) is None
    assert cache.lookup("b.sofa", 48000.0) is None


def test_none_filename():
    cache = HrtfCache()
    easy = Closable()
    cache.store(easy, None, 48000.0)
    assert cache.lookup(None, 48000.0) is easy
    assert cache.lookup("a.sofa", 48000.0) is None


def test_store_duplicate_closes_new():
    cache = HrtfCache()
    first, second = Closable(), Closable()
    cache.store(first, "a.sofa", 48000.0)
    assert cache.store(second, "a.sofa", 48000.0) is first
    assert second.closed
    assert not first.closed
    assert len(cache) == 1


def test_release_only_entry_keeps_it():
    cache = HrtfCache()
    easy = Closable()
    cache.store(easy, "a.sofa", 48000.0)
    cache.release(easy)
    assert len(cache) == 1
    assert not easy.closed


def test_release_older_entry_removes_it():
    cache = HrtfCache()
    old, new = Closable(), Closable()
    cache.store(old, "a.sofa", 48000.0)
    cache.store(new, "b.sofa", 48000.0)
    cache.release(old)
    assert old.closed
    assert len(cache) == 1
    assert cache.lookup("a.sofa", 48000.0) is None


def test_release_newest_with_others_removes_it():
    cache = HrtfCache()
    old, new = Closable(), Closable()
    cache.store(old, "a.sofa", 48000.0)
    cache.store(new, "b.sofa", 48000.0)
    cache.release(new)
    assert new.closed
    assert cache.lookup("b.sofa", 48000.0) is None
    assert cache.lookup("a.sofa", 48000.0) is old


def test_lookup_adds_reference():
    cache = HrtfCache()
    old, new = Closable(), Closable()
    cache.store(old, "a.sofa", 48000.0)
    cache.store(new, "b.sofa", 48000.0)
    assert cache.lookup("a.sofa", 48000.0) is old
    cache.release(old)
    assert not old.closed
    assert len(cache) == 2
    cache.release(old)
    assert old.closed
    assert len(cache) == 1


def test_release_unknown_raises():
    cache = HrtfCache()
    cache.store(Closable(), "a.sofa", 48000.0)
    with pytest.raises(ValueError):
        cache.release(Closable())


def test_release_all():
    cache = HrtfCache()
    items = [Closable(), Closable()]
    cache.store(items[0], "a.sofa", 48000.0)
    cache.store(items[1], "b.sofa", 48000.0)
    cache.release_all()
    assert len(cache) == 0
    assert all(item.closed for item in items)
    assert cache.lookup("a.sofa", 48000.0) is None