"""Tests for product ranking and the external judge fallback."""

import sys
from pathlib import Path
from typing import Dict, List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.contextual_filtering import coerce_wardrobe
from logic.product_ranking import (
    GENERIC_REASON,
    rank_products,
    rank_products_with_diagnostics,
    reorder_by_ids,
    wardrobe_gaps,
)
from tools.ranking_judge import JudgeUnavailableError, MockRankingJudge


def _wardrobe() -> List[Dict]:
    return [
        {"id": "w1", "user_id": "u1", "category": "shirts", "color": "navy"},
        {"id": "w2", "user_id": "u1", "category": "chinos", "color": "gray"},
    ]


def _products() -> List[Dict]:
    return [
        {"id": "p3", "category": "boots", "color": "black", "price": 150.0},
        {"id": "p2", "category": "loafers", "color": "brown", "price": 120.0},
        {"id": "p1", "category": "ties", "color": "white", "price": 39.0},
    ]


def _product_ids(recommendations) -> List[str]:
    return [recommendation.product.product_id for recommendation in recommendations]


def test_empty_inputs_yield_no_recommendations() -> None:
    assert rank_products(_wardrobe(), [], {}) == []
    assert rank_products([], _products(), {}) == []


def test_products_rank_by_mean_score_then_id() -> None:
    recommendations = rank_products(_wardrobe(), _products(), {})

    assert _product_ids(recommendations) == ["p1", "p2", "p3"]
    assert recommendations[0].confidence_score == pytest.approx(0.8)
    assert recommendations[1].confidence_score == pytest.approx(0.65)
    assert recommendations[2].confidence_score == pytest.approx(0.65)


def test_complements_are_best_matching_wardrobe_items() -> None:
    recommendations = rank_products(_wardrobe(), _products(), {})
    loafers = recommendations[1]

    assert [item.item_id for item in loafers.complements] == ["w1", "w2"]
    assert [item.item_id for item in recommendations[0].complements] == ["w1"]


def test_products_without_compatible_items_are_skipped() -> None:
    result = rank_products_with_diagnostics(
        [{"id": "w1", "category": "sneakers"}], [{"id": "p1", "category": "boots"}], {}
    )

    assert result.recommendations == []
    assert result.diagnostics["products_without_complements"] == ["p1"]


def test_reasons_follow_the_dominant_factor() -> None:
    recommendations = rank_products(_wardrobe(), _products(), {})
    assert recommendations[0].reason == "Complements your navy pieces perfectly"

    tagged = rank_products(
        [{"id": "w1", "category": "tops", "tags": ["linen", "summer"]}],
        [{"id": "p1", "category": "chinos", "occasion": "party", "tags": ["linen", "summer"]}],
        {},
    )
    assert tagged[0].reason == "Shares linen, summer styling with 1 item in your wardrobe"

    gap = rank_products(
        [{"id": "w1", "category": "tops", "occasion": "work"}],
        [{"id": "p1", "category": "chinos", "occasion": "party"}],
        {},
    )
    assert gap[0].reason == "Perfect addition to fill a gap in your bottoms collection"

    stocked_wardrobe = [{"id": "w1", "category": "tops", "occasion": "work"}] + [
        {"id": f"b{index}", "category": "jeans", "occasion": "work"} for index in range(3)
    ]
    generic = rank_products(stocked_wardrobe, [{"id": "p1", "category": "chinos", "occasion": "party"}], {})
    assert generic[0].reason == GENERIC_REASON


def test_wardrobe_gaps_compare_against_ideal_counts() -> None:
    gaps = wardrobe_gaps(coerce_wardrobe(_wardrobe() + [{"id": "w3", "category": "sneakers"}]))

    assert gaps == {
        "tops": pytest.approx(7 / 8),
        "bottoms": pytest.approx(5 / 6),
        "outerwear": 1.0,
        "shoes": 0.75,
        "accessories": 1.0,
    }
    full_tops = wardrobe_gaps(coerce_wardrobe([{"id": f"t{index}", "category": "tops"} for index in range(10)]))
    assert full_tops["tops"] == 0.0


def test_gaps_are_reported_without_changing_the_order() -> None:
    result = rank_products_with_diagnostics(_wardrobe(), _products(), {})

    assert result.diagnostics["wardrobe_gaps"]["accessories"] == 1.0
    assert [rec.product.product_id for rec in result.recommendations] == ["p1", "p2", "p3"]
    assert result.recommendations[0].reason == "Complements your navy pieces perfectly"


def test_ranking_is_deterministic() -> None:
    first = [rec.to_dict() for rec in rank_products(_wardrobe(), _products(), {})]
    second = [rec.to_dict() for rec in rank_products(_wardrobe(), list(reversed(_products())), {})]

    assert first == second


@pytest.mark.parametrize(
    "judge",
    [
        MockRankingJudge(error=JudgeUnavailableError("timeout")),
        MockRankingJudge(error=RuntimeError("boom")),
        MockRankingJudge(ranked_ids={}),
        MockRankingJudge(ranked_ids=["unknown"]),
    ],
)
def test_judge_failures_fall_back_to_local_order(judge) -> None:
    local = rank_products(_wardrobe(), _products(), {})
    result = rank_products_with_diagnostics(_wardrobe(), _products(), {}, judge=judge)

    assert _product_ids(result.recommendations) == _product_ids(local)
    assert result.judge_status == "unavailable"


def test_judge_can_reorder_the_local_ranking() -> None:
    judge = MockRankingJudge()

    result = rank_products_with_diagnostics(_wardrobe(), _products(), {}, judge=judge)

    assert result.judge_status == "applied"
    assert _product_ids(result.recommendations) == ["p3", "p2", "p1"]
    assert judge.calls[0]["primary_item"]["id"] == "w1"
    assert [item["id"] for item in judge.calls[0]["candidate_items"]] == ["p1", "p2", "p3"]
    assert judge.calls[0]["candidate_items"][0]["price"] == 39.0


def test_partial_judge_rankings_keep_the_rest_in_local_order() -> None:
    judge = MockRankingJudge(ranked_ids=["p3", "p3", 7])

    recommendations = rank_products(_wardrobe(), _products(), {}, judge=judge, limit=2)

    assert _product_ids(recommendations) == ["p3", "p1"]


def test_judge_is_not_called_without_candidates() -> None:
    judge = MockRankingJudge()

    assert rank_products(_wardrobe(), [], {}, judge=judge) == []
    assert judge.calls == []


def test_reorder_by_ids_accepts_a_key() -> None:
    entries = ["a", "b", "c"]

    assert reorder_by_ids(entries, ["c", "a"], key=lambda entry: entry) == ["c", "a", "b"]
    assert reorder_by_ids(entries, None, key=lambda entry: entry) is None
    assert reorder_by_ids(entries, [], key=lambda entry: entry) is None
