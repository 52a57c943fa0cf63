"""HTTP surface tests using FastAPI's TestClient."""

import importlib
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

WARDROBE = [
    {"id": "w1", "user_id": "u1", "category": "shirts", "color": "navy", "occasion": "work"},
    {"id": "w2", "user_id": "u1", "category": "chinos", "color": "gray", "occasion": "work"},
]
PRODUCTS = [
    {"id": "p1", "category": "ties", "color": "white", "occasion": "work", "price": 39.0},
    {"id": "p2", "category": "loafers", "color": "brown", "occasion": "work", "price": 120.0},
]


@pytest.fixture()
def client(monkeypatch) -> TestClient:
    monkeypatch.setenv("JUDGE_BACKEND", "none")
    api = importlib.import_module("server.api")
    api.engine_app.clear_cache()
    return TestClient(api.app)


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "wardrobe-match"


def test_outfit_recommendations(client: TestClient) -> None:
    body = {
        "user_id": "u1",
        "type": "outfits",
        "wardrobe_items": WARDROBE,
        "products": PRODUCTS,
        "context": {"occasion": "work"},
    }

    response = client.post("/recommendations", json=body)

    assert response.status_code == 200
    payload = response.json()
    assert payload["type"] == "outfits"
    assert payload["recommendations"][0]["anchor_id"] == "w1"


def test_product_recommendations_default_type(client: TestClient) -> None:
    response = client.post("/recommendations", json={"wardrobe_items": WARDROBE, "products": PRODUCTS, "limit": 1})

    assert response.status_code == 200
    payload = response.json()
    assert payload["type"] == "products"
    assert [rec["product"]["product_id"] for rec in payload["recommendations"]] == ["p1"]


def test_unknown_recommendation_type_is_rejected(client: TestClient) -> None:
    response = client.post("/recommendations", json={"type": "lookbook", "wardrobe_items": [], "products": []})

    assert response.status_code == 422


def test_empty_wardrobe_returns_empty_list(client: TestClient) -> None:
    response = client.post("/recommendations", json={"type": "outfits", "products": PRODUCTS})

    assert response.status_code == 200
    assert response.json()["recommendations"] == []


def test_rank_items_endpoint(client: TestClient) -> None:
    body = {
        "primaryItem": {"id": "w1", "category": "shirts", "color": "navy"},
        "candidateItems": [
            {"id": "c2", "category": "boots", "color": "black"},
            {"id": "c1", "category": "ties", "color": "white"},
        ],
    }

    response = client.post("/recommendations/rank-items", json=body)

    assert response.status_code == 200
    assert response.json() == {"ranked_ids": ["c1", "c2"]}


def test_product_compatibility_endpoint(client: TestClient) -> None:
    response = client.post("/products/compatibility", json={"product": PRODUCTS[0], "wardrobe_items": WARDROBE})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_items"] == 2
    assert payload["compatibility_score"] == 0.5
    assert payload["compatible_items"][0]["item_id"] == "w1"
