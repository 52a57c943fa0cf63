"""Simple entrypoint to run the Wardrobe Match engine locally."""

import json

from recommender_app.app import RecommendationApp
from recommender_app.config import EngineConfig

SAMPLE_WARDROBE = [
    {"id": "w-navy-shirt", "category": "shirts", "color": "navy", "occasion": "work", "tags": ["classic"]},
    {"id": "w-gray-chinos", "category": "chinos", "color": "gray", "occasion": "work", "tags": ["classic"]},
]
SAMPLE_PRODUCTS = [
    {"id": "p-white-tie", "category": "ties", "color": "white", "occasion": "work", "price": 39.0},
    {"id": "p-brown-loafers", "category": "loafers", "color": "brown", "occasion": "work", "price": 120.0},
    {"id": "p-black-boots", "category": "boots", "color": "black", "occasion": "work", "price": 150.0},
]


def main() -> None:
    app = RecommendationApp(EngineConfig.from_env())
    for rec_type in ("outfits", "products"):
        response = app.recommend(
            wardrobe_items=SAMPLE_WARDROBE,
            products=SAMPLE_PRODUCTS,
            context={"occasion": "work"},
            rec_type=rec_type,
        )
        print(json.dumps(response["recommendations"], indent=2, default=str))


if __name__ == "__main__":
    main()
