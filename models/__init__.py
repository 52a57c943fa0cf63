"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.attributes import NormalizedAttributes, normalize_attributes
from models.product import Product, product_from_raw
from models.recommendation import Garment, OutfitRecommendation, ProductRecommendation
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = [
    "WardrobeItem",
    "from_raw_metadata",
    "Product",
    "product_from_raw",
    "NormalizedAttributes",
    "normalize_attributes",
    "Garment",
    "OutfitRecommendation",
    "ProductRecommendation",
]
