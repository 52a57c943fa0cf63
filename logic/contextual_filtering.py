"""Deterministic filtering of garments by request context and availability."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.attributes import normalize_attributes
from models.product import Product, product_from_raw
from models.recommendation import Garment
from models.taxonomy import normalize_key
from models.wardrobe_item import WardrobeItem, from_raw_metadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a single filtering step."""

    items: List[Garment]
    removed: Dict[str, str]
    debug: Dict[str, object]


def coerce_wardrobe(raw_items: Iterable[Any] | None) -> List[Garment]:
    """Wrap wardrobe records as garments, skipping entries that are not records."""

    garments: List[Garment] = []
    for raw in raw_items or []:
        if isinstance(raw, WardrobeItem):
            item = raw
        elif isinstance(raw, Mapping):
            item = from_raw_metadata(dict(raw))
        else:
            logger.warning("Skipping wardrobe entry of unsupported type %s", type(raw).__name__)
            continue
        garments.append(Garment(record=item, attributes=normalize_attributes(item)))
    return garments


def coerce_products(raw_products: Iterable[Any] | None) -> List[Garment]:
    """Wrap catalog records as garments, skipping entries that are not records."""

    garments: List[Garment] = []
    for raw in raw_products or []:
        if isinstance(raw, Product):
            product = raw
        elif isinstance(raw, Mapping):
            product = product_from_raw(dict(raw))
        else:
            logger.warning("Skipping product entry of unsupported type %s", type(raw).__name__)
            continue
        garments.append(Garment(record=product, attributes=normalize_attributes(product)))
    return garments


def _context_value(context: Mapping[str, Any] | None, key: str) -> Optional[str]:
    if not context:
        return None
    value = normalize_key(context.get(key))
    return value or None


def filter_by_context(items: List[Garment], context: Mapping[str, Any] | None) -> FilteringResult:
    """Keep garments whose occasion and season exactly match the context.

    An absent context value applies no filter for that attribute.
    """

    occasion = _context_value(context, "occasion")
    season = _context_value(context, "season")
    removed: Dict[str, str] = {}
    kept: List[Garment] = []

    for garment in items:
        reason = None
        if occasion and garment.attributes.occasion != occasion:
            reason = f"occasion {garment.attributes.occasion} does not match {occasion}"
        elif season and garment.attributes.season != season:
            reason = f"season {garment.attributes.season} does not match {season}"
        if reason:
            removed[garment.garment_id] = reason
        else:
            kept.append(garment)

    debug = {
        "input_count": len(items),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "occasion": occasion,
        "season": season,
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


def filter_available(products: List[Garment]) -> FilteringResult:
    """Drop inactive or out-of-stock catalog products."""

    removed: Dict[str, str] = {}
    kept: List[Garment] = []
    for garment in products:
        record = garment.record
        if isinstance(record, Product) and not record.is_available:
            removed[garment.garment_id] = "inactive" if not record.is_active else "out of stock"
        else:
            kept.append(garment)

    debug = {"input_count": len(products), "kept_count": len(kept), "removed_count": len(removed)}
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = [
    "FilteringResult",
    "coerce_wardrobe",
    "coerce_products",
    "filter_by_context",
    "filter_available",
]
