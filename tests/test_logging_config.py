"""Tests for structured engine logging."""

import json
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.recommendation_agent import RecommendationAgent
from recommender_app.config import EngineConfig
from recommender_app.logging_config import JsonFormatter, log_event, redact_for_log
from tools.response_cache import TTLResponseCache


def _formatted(caplog, event: str) -> dict:
    matching = [record for record in caplog.records if getattr(record, "event", None) == event]
    record = matching[-1]
    return json.loads(JsonFormatter().format(record))


def test_recommendation_outcome_is_grouped(caplog) -> None:
    caplog.set_level(logging.INFO)
    agent = RecommendationAgent(EngineConfig(), cache=TTLResponseCache())
    wardrobe = [{"id": "w1", "category": "shirts", "color": "navy"}]
    products = [{"id": "p1", "category": "ties", "color": "white"}]

    agent.recommend(wardrobe, products, {}, user_id="u1")

    started = _formatted(caplog, "recommendation_started")
    assert started["user_id"] == "[redacted]"
    assert started["recommendation"] == {"rec_type": "products"}

    completed = _formatted(caplog, "recommendation_completed")
    assert completed["recommendation"] == {
        "rec_type": "products",
        "cache": "miss",
        "judge_status": "disabled",
        "result_count": 1,
    }
    assert "rec_type" not in completed
    assert completed["correlation_id"] == started["correlation_id"]


def test_cache_hits_are_logged(caplog) -> None:
    agent = RecommendationAgent(EngineConfig(), cache=TTLResponseCache())
    wardrobe = [{"id": "w1", "category": "shirts", "color": "navy"}]
    agent.recommend(wardrobe, [], {}, rec_type="outfits")

    caplog.set_level(logging.INFO)
    agent.recommend(wardrobe, [], {}, rec_type="outfits")

    assert _formatted(caplog, "recommendation_completed")["recommendation"]["cache"] == "hit"


def test_payloads_are_scrubbed() -> None:
    scrubbed = redact_for_log(
        {
            "reason": "POST https://judge.local/rank-items?key=abc failed for ana@example.com",
            "wardrobe_items": [{"id": "w1"}],
            "api_key": None,
            "count": 2,
        }
    )

    assert scrubbed == {
        "reason": "POST [url:judge.local] failed for [redacted-email]",
        "wardrobe_items": "[redacted]",
        "api_key": None,
        "count": 2,
    }


def test_log_event_keeps_extra_fields(caplog) -> None:
    caplog.set_level(logging.WARNING)

    log_event(logging.getLogger("engine.test"), logging.WARNING, "judge_unavailable", judge="http", reason="timeout")

    payload = _formatted(caplog, "judge_unavailable")
    assert payload["level"] == "WARNING"
    assert payload["judge"] == "http"
    assert payload["reason"] == "timeout"
    assert "recommendation" not in payload
