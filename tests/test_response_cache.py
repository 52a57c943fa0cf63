"""Tests for the in-memory TTL response cache."""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.recommendation_agent import RecommendationAgent
from recommender_app.config import EngineConfig
from tools.response_cache import TTLResponseCache, payload_digest, recommendations_key


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = TTLResponseCache(ttl_minutes=5, clock=clock)
    cache.set("key", {"value": 1})

    clock.now += 299
    assert cache.get("key") == {"value": 1}

    clock.now += 2
    assert cache.get("key") is None
    assert len(cache) == 0


def test_per_entry_ttl_delete_and_clear() -> None:
    clock = _Clock()
    cache = TTLResponseCache(ttl_minutes=5, clock=clock)
    cache.set("short", 1, ttl_minutes=1)
    cache.set("long", 2)

    clock.now += 61
    assert cache.get("short") is None
    assert cache.get("long") == 2

    cache.delete("long")
    cache.delete("missing")
    assert cache.get("long") is None

    cache.set("again", 3)
    cache.clear()
    assert len(cache) == 0


def test_keys_are_stable_for_identical_payloads() -> None:
    first = payload_digest({"b": [1, 2], "a": "x"})
    second = payload_digest({"a": "x", "b": [1, 2]})

    assert first == second
    assert first != payload_digest({"a": "y", "b": [1, 2]})

    key = recommendations_key("u1", "outfits", {"occasion": "work"}, first)
    assert key == f"recommendations:u1:outfits:work:any:{first[:16]}"
    assert recommendations_key(None, "products", None, first).startswith("recommendations:anonymous:products:any:any:")


def test_writes_purge_expired_entries() -> None:
    clock = _Clock()
    cache = TTLResponseCache(ttl_minutes=5, clock=clock)

    for index in range(50):
        cache.set(f"request-{index}", index)
        clock.now += 3600

    assert len(cache) == 1
    assert cache.purge_expired() == 1
    assert len(cache) == 0


def test_oldest_entry_is_evicted_when_full() -> None:
    clock = _Clock()
    cache = TTLResponseCache(ttl_minutes=5, clock=clock, max_entries=2)
    cache.set("first", 1)
    clock.now += 1
    cache.set("second", 2)
    clock.now += 1
    cache.set("third", 3)

    assert len(cache) == 2
    assert cache.get("first") is None
    assert cache.get("second") == 2
    assert cache.get("third") == 3

    cache.set("third", 4)
    assert len(cache) == 2
    assert cache.get("third") == 4


def test_distinct_requests_do_not_accumulate() -> None:
    clock = _Clock()
    cache = TTLResponseCache(ttl_minutes=5, clock=clock)
    agent = RecommendationAgent(EngineConfig(), cache=cache)
    wardrobe = [{"id": "w1", "category": "shirts", "color": "navy"}]

    for index in range(50):
        agent.recommend(wardrobe, [{"id": f"p{index}", "category": "ties", "color": "white"}], {})
        clock.now += 3600

    assert len(cache) == 1
