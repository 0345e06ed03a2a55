import threading
from datetime import timedelta

import pytest

from accessgate.cache import Cache, DefaultCache, NoSuchKeyError, SyncCache


class _Clock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_set_then_get_round_trip():
    for cache in (DefaultCache(), SyncCache()):
        cache.set("alice,data1,read", True)
        cache.set("bob,data1,read", False)
        assert cache.get("alice,data1,read") is True
        assert cache.get("bob,data1,read") is False


def test_missing_key_raises_with_message():
    for cache in (DefaultCache(), SyncCache()):
        with pytest.raises(NoSuchKeyError) as info:
            cache.get("absent")
        assert str(info.value) == "there's no such key existing in cache"


def test_missing_key_is_lookup_error():
    for cache in (DefaultCache(), SyncCache()):
        with pytest.raises(LookupError):
            cache.get("absent")


def test_overwrite_replaces_value():
    for cache in (DefaultCache(), SyncCache()):
        cache.set("k", True)
        cache.set("k", False)
        assert cache.get("k") is False


def test_delete_removes_key():
    for cache in (DefaultCache(), SyncCache()):
        cache.set("k", True)
        cache.delete("k")
        with pytest.raises(NoSuchKeyError):
            cache.get("k")


def test_delete_missing_raises():
    for cache in (DefaultCache(), SyncCache()):
        with pytest.raises(NoSuchKeyError):
            cache.delete("absent")


def test_clear_removes_everything():
    for cache in (DefaultCache(), SyncCache()):
        for key in ("a", "b", "c"):
            cache.set(key, True)
        cache.clear()
        for key in ("a", "b", "c"):
            with pytest.raises(NoSuchKeyError):
                cache.get(key)


def test_item_expires_after_ttl():
    default_clock, sync_clock = _Clock(), _Clock()
    pairs = [(DefaultCache(default_clock), default_clock),
             (SyncCache(sync_clock), sync_clock)]
    for cache, clock in pairs:
        cache.set("k", True, 10)
        clock.now += 5
        assert cache.get("k") is True
        clock.now += 6
        with pytest.raises(NoSuchKeyError):
            cache.get("k")
        with pytest.raises(NoSuchKeyError):
            cache.delete("k")


def test_timedelta_ttl():
    default_clock, sync_clock = _Clock(), _Clock()
    pairs = [(DefaultCache(default_clock), default_clock),
             (SyncCache(sync_clock), sync_clock)]
    for cache, clock in pairs:
        cache.set("k", True, timedelta(seconds=2))
        clock.now += 3
        with pytest.raises(NoSuchKeyError):
            cache.get("k")


@pytest.mark.parametrize("ttl", [None, 0, -5])
def test_non_positive_ttl_never_expires(ttl):
    default_clock, sync_clock = _Clock(), _Clock()
    pairs = [(DefaultCache(default_clock), default_clock),
             (SyncCache(sync_clock), sync_clock)]
    for cache, clock in pairs:
        cache.set("k", True, ttl)
        clock.now += 1_000_000
        assert cache.get("k") is True


def test_cache_interface_is_abstract():
    with pytest.raises(TypeError):
        Cache()


def test_sync_cache_concurrent_writers():
    cache = SyncCache()
    keys = [f"key{i}" for i in range(200)]

    def writer(chunk):
        for key in chunk:
            cache.set(key, True)

    threads = [threading.Thread(target=writer, args=(keys[i::4],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert all(cache.get(key) is True for key in keys)