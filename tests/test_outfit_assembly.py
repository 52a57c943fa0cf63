"""Tests for deterministic outfit assembly."""

import sys
from pathlib import Path
from typing import Dict, List

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.outfit_builder import assemble_outfits, build_outfit_candidates
from models.recommendation import OutfitRecommendation


def _wardrobe() -> List[Dict]:
    return [
        {"id": "w1", "user_id": "u1", "category": "shirts", "color": "navy", "occasion": "work"},
        {"id": "w2", "user_id": "u1", "category": "chinos", "color": "gray", "occasion": "work"},
    ]


def _products() -> List[Dict]:
    return [
        {"id": "p1", "category": "ties", "color": "white", "occasion": "work", "price": 39.0},
        {"id": "p2", "category": "loafers", "color": "brown", "occasion": "work", "price": 120.0},
        {"id": "p3", "category": "boots", "color": "black", "occasion": "work", "price": 150.0},
    ]


def _ids(records) -> List[str]:
    return [getattr(record, "item_id", None) or record.product_id for record in records]


def test_empty_wardrobe_yields_no_outfits() -> None:
    assert assemble_outfits([], _products(), {}) == []
    assert assemble_outfits(_wardrobe(), [], {}) == []


def test_outfits_group_best_products_per_anchor() -> None:
    outfits = assemble_outfits(_wardrobe(), _products(), {"occasion": "work"})

    assert all(isinstance(outfit, OutfitRecommendation) for outfit in outfits)
    shirt_outfit = next(outfit for outfit in outfits if outfit.anchor_id == "w1")
    assert _ids(shirt_outfit.recommended_products) == ["p1", "p2"]
    assert shirt_outfit.confidence_score == 0.8
    assert shirt_outfit.id == "outfit-w1"
    assert shirt_outfit.name == "Work Shirts Look"
    assert shirt_outfit.occasion == "work"
    assert shirt_outfit.styling_notes


def test_products_at_the_threshold_are_excluded() -> None:
    wardrobe = [{"id": "w1", "category": "shirts", "color": "navy"}]
    boots_only = [{"id": "p3", "category": "boots", "color": "black"}]

    result = build_outfit_candidates(wardrobe, boots_only, {})

    assert result.outfits == []
    assert result.diagnostics["anchors_without_products"] == ["w1"]


def test_products_per_outfit_is_capped() -> None:
    products = _products() + [{"id": "p0", "category": "belts", "color": "white", "occasion": "work"}]

    outfits = assemble_outfits(_wardrobe()[:1], products, {})

    assert len(outfits) == 1
    assert len(outfits[0].recommended_products) == 2
    assert outfits[0].confidence_score == 0.8


def test_companion_pieces_come_from_the_wardrobe() -> None:
    outfits = assemble_outfits(_wardrobe(), _products(), {})
    shirt_outfit = next(outfit for outfit in outfits if outfit.anchor_id == "w1")

    assert _ids(shirt_outfit.wardrobe_items) == ["w1", "w2"]


def test_ties_break_on_recency_then_id() -> None:
    wardrobe = [
        {"id": "w-old", "category": "shirts", "color": "navy", "created_at": "2024-01-01T00:00:00Z"},
        {"id": "w-new", "category": "shirts", "color": "navy", "created_at": "2024-06-01T00:00:00Z"},
        {"id": "w-b", "category": "shirts", "color": "navy"},
        {"id": "w-a", "category": "shirts", "color": "navy"},
    ]
    products = [{"id": "p1", "category": "ties", "color": "white"}]

    outfits = assemble_outfits(wardrobe, products, {})

    assert [outfit.anchor_id for outfit in outfits] == ["w-new", "w-old", "w-a", "w-b"]


def test_context_filters_by_exact_occasion_and_season() -> None:
    assert assemble_outfits(_wardrobe(), _products(), {"occasion": "formal"}) == []

    wardrobe = [{"id": "w1", "category": "shirts", "color": "navy", "season": "summer"}]
    products = [
        {"id": "p1", "category": "ties", "color": "white", "season": "winter"},
        {"id": "p2", "category": "ties", "color": "white", "season": "summer"},
    ]
    outfits = assemble_outfits(wardrobe, products, {"season": "Summer"})
    assert _ids(outfits[0].recommended_products) == ["p2"]


def test_unavailable_products_are_never_recommended() -> None:
    products = [
        {"id": "p1", "category": "ties", "color": "white", "is_active": False},
        {"id": "p2", "category": "ties", "color": "white", "stock_quantity": 0},
        {"id": "p4", "category": "ties", "color": "white", "stock_quantity": 3},
    ]

    outfits = assemble_outfits(_wardrobe()[:1], products, {})

    assert _ids(outfits[0].recommended_products) == ["p4"]


def test_assembly_is_deterministic_and_limited() -> None:
    first = [outfit.to_dict() for outfit in assemble_outfits(_wardrobe(), _products(), {})]
    second = [outfit.to_dict() for outfit in assemble_outfits(_wardrobe(), _products(), {})]

    assert first == second
    assert len(assemble_outfits(_wardrobe(), _products(), {}, limit=1)) == 1
    assert assemble_outfits(_wardrobe(), _products(), {}, limit=0) == []


def test_inactive_flags_sent_as_strings_are_respected() -> None:
    products = [
        {"id": "p1", "category": "ties", "color": "white", "is_active": "false"},
        {"id": "p2", "category": "ties", "color": "white", "is_active": "0"},
        {"id": "p4", "category": "ties", "color": "white", "is_active": "true"},
    ]

    outfits = assemble_outfits(_wardrobe()[:1], products, {})

    assert _ids(outfits[0].recommended_products) == ["p4"]
