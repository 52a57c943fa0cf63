"""Recommendation result schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from models.attributes import NormalizedAttributes
from models.product import Product
from models.wardrobe_item import WardrobeItem


@dataclass(frozen=True)
class Garment:
    """A wardrobe item or product paired with its normalised attributes."""

    record: Union[WardrobeItem, Product]
    attributes: NormalizedAttributes

    @property
    def garment_id(self) -> str:
        return self.attributes.item_id


@dataclass
class OutfitRecommendation:
    id: str
    name: str
    occasion: str
    confidence_score: float
    anchor_id: str
    wardrobe_items: List[WardrobeItem] = field(default_factory=list)
    recommended_products: List[Product] = field(default_factory=list)
    styling_notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "occasion": self.occasion,
            "confidence_score": self.confidence_score,
            "anchor_id": self.anchor_id,
            "wardrobe_items": [item.to_dict() for item in self.wardrobe_items],
            "recommended_products": [product.to_dict() for product in self.recommended_products],
            "styling_notes": self.styling_notes,
        }


@dataclass
class ProductRecommendation:
    product: Product
    reason: str
    confidence_score: float
    complements: List[WardrobeItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.product.to_dict(),
            "reason": self.reason,
            "confidence_score": self.confidence_score,
            "complements": [item.to_dict() for item in self.complements],
        }


__all__ = ["Garment", "OutfitRecommendation", "ProductRecommendation"]
