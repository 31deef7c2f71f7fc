import json

import pytest

from bullion_fetcher.cache import PriceCache
from bullion_fetcher.models import CacheEntry, SaveOutcome
from bullion_fetcher.storage import MemoryStore
from tests.conftest import BrokenStore, CountingStore

HOUR_MS = 60 * 60 * 1000
KEY = "bullion_prices_v1"


def make_cache(store, clock, **kwargs):
    return PriceCache(store, key=KEY, clock=clock, **kwargs)


def seed(store, clock, entries):
    now = int(clock() * 1000)
    store.data[KEY] = json.dumps({url: {"price": p, "t": now - age} for url, (p, age) in entries.items()})


def test_load_missing_key_is_empty(store, clock):
    assert make_cache(store, clock).load() == {}
    assert store.sets == 0


@pytest.mark.parametrize("raw", ["not json", "[1, 2, 3]", "null", '"text"'])
def test_load_unreadable_payload_is_empty(clock, raw):
    store = CountingStore({KEY: raw})
    assert make_cache(store, clock).load() == {}


def test_load_store_error_is_empty(clock):
    assert make_cache(BrokenStore(), clock).load() == {}


def test_load_keeps_entries_within_expiry(store, clock):
    seed(store, clock, {"https://a": ("£1", 10 * 60 * 1000), "https://b": ("£2", 23 * HOUR_MS)})
    entries = make_cache(store, clock).load()

    assert set(entries) == {"https://a", "https://b"}
    assert entries["https://a"].price == "£1"
    assert store.sets == 0


def test_expired_entry_is_pruned_and_saved_exactly_once(store, clock):
    seed(store, clock, {"https://old": ("£1", 25 * HOUR_MS), "https://new": ("£2", HOUR_MS)})
    entries = make_cache(store, clock).load()

    assert "https://old" not in entries
    assert "https://new" in entries
    assert store.sets == 1
    assert "https://old" not in json.loads(store.data[KEY])


def test_pruning_everything_persists_empty_mapping(store, clock):
    seed(store, clock, {"https://old": ("£1", 48 * HOUR_MS)})
    assert make_cache(store, clock).load() == {}
    assert store.data[KEY] == "{}"


def test_malformed_entries_are_dropped(store, clock):
    store.data[KEY] = json.dumps({"https://a": "oops", "https://b": {"price": "£2"}, "https://c": {"price": "£3", "t": int(clock() * 1000)}})
    entries = make_cache(store, clock).load()
    assert list(entries) == ["https://c"]
    assert store.sets == 1


@pytest.mark.parametrize("raw_t", ["1e400", "-1e400", "Infinity", "NaN"])
def test_non_finite_timestamp_is_dropped(clock, raw_t):
    now = int(clock() * 1000)
    store = CountingStore({KEY: '{"https://a": {"price": "x", "t": ' + raw_t + '}, "https://b": {"price": "£2", "t": ' + str(now) + '}}'})
    entries = make_cache(store, clock).load()

    assert list(entries) == ["https://b"]
    assert store.sets == 1


def test_entry_exactly_at_expiry_is_kept(store, clock):
    seed(store, clock, {"https://a": ("£1", 24 * HOUR_MS)})
    assert "https://a" in make_cache(store, clock).load()
    assert store.sets == 0


def test_entry_one_ms_past_expiry_is_pruned(store, clock):
    seed(store, clock, {"https://a": ("£1", 24 * HOUR_MS + 1)})
    assert make_cache(store, clock).load() == {}
    assert store.sets == 1


def test_save_load_round_trip_is_idempotent(store, clock):
    cache = make_cache(store, clock)
    now = cache.now_ms()
    cache.save({"https://a": CacheEntry("£1", now - 1000), "https://b": CacheEntry("Unavailable", now - 2 * HOUR_MS)})
    before = store.data[KEY]

    assert cache.save(cache.load()) is SaveOutcome.PERSISTED
    assert store.data[KEY] == before


def test_save_outcomes(clock):
    assert make_cache(MemoryStore(), clock).save({}) is SaveOutcome.PERSISTED
    assert make_cache(None, clock).save({}) is SaveOutcome.SKIPPED
    assert make_cache(BrokenStore(), clock).save({"https://a": CacheEntry("£1", 0)}) is SaveOutcome.FAILED


def test_serialized_shape(store, clock):
    make_cache(store, clock).save({"https://a": CacheEntry("£1.00", 1234)})
    assert json.loads(store.data[KEY]) == {"https://a": {"price": "£1.00", "t": 1234}}


def test_freshness_window(clock):
    cache = make_cache(MemoryStore(), clock)
    now = cache.now_ms()
    assert cache.is_fresh(CacheEntry("£1", now - 59 * 60 * 1000))
    assert not cache.is_fresh(CacheEntry("£1", now - HOUR_MS))
    assert not cache.is_fresh(None)


def test_entry_between_horizons_is_kept_but_stale(store, clock):
    seed(store, clock, {"https://a": ("£1", 5 * HOUR_MS)})
    cache = make_cache(store, clock)
    entry = cache.load()["https://a"]
    assert not cache.is_fresh(entry)


def test_horizons_are_configurable(store, clock):
    seed(store, clock, {"https://a": ("£1", 90 * 1000)})
    cache = make_cache(store, clock, fresh_seconds=30, expiry_seconds=60)
    assert cache.load() == {}


def test_freshness_longer_than_expiry_is_rejected(clock):
    with pytest.raises(ValueError):
        make_cache(MemoryStore(), clock, fresh_seconds=100, expiry_seconds=10)
