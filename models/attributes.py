"""Attribute normalisation shared by wardrobe items and catalog products.

Upstream records are unreliable (manual entry, AI image analysis, partial
catalog rows), so :func:`normalize_attributes` never raises: every categorical
field is filled from :data:`models.taxonomy.ATTRIBUTE_DEFAULTS` and the
formality score is coerced into its 1-5 range.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping

from models.product import Product
from models.taxonomy import (
    ATTRIBUTE_DEFAULTS,
    DEFAULT_FORMALITY,
    FORMALITY_RANGE,
    normalise_tags,
    normalize_color_name,
    normalize_key,
    resolve_category,
    resolve_kind,
)
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("style", "pattern", "material", "occasion", "season", "fit", "neckline", "sleeve_length")


@dataclass(frozen=True)
class NormalizedAttributes:
    """Fully populated, immutable attribute tuple for one garment."""

    item_id: str
    category: str
    kind: str
    color: str
    style: str
    pattern: str
    material: str
    occasion: str
    season: str
    fit: str
    neckline: str
    sleeve_length: str
    formality_score: int
    tags: FrozenSet[str]

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.__dict__)
        payload["tags"] = sorted(self.tags)
        return payload


def coerce_formality(value: Any) -> int:
    """Return ``value`` as an int in [1, 5], or the default of 3."""

    if isinstance(value, bool) or value is None:
        return DEFAULT_FORMALITY
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_FORMALITY
    if not isinstance(value, (int, float)):
        return DEFAULT_FORMALITY
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return DEFAULT_FORMALITY
    score = int(value)
    low, high = FORMALITY_RANGE
    if score < low or score > high:
        return DEFAULT_FORMALITY
    return score


def _as_mapping(record: Any) -> Mapping[str, Any]:
    if isinstance(record, (WardrobeItem, Product)):
        return record.__dict__
    if isinstance(record, Mapping):
        return record
    return getattr(record, "__dict__", {}) or {}


def _record_id(raw: Mapping[str, Any]) -> str:
    for key in ("item_id", "product_id", "id"):
        value = raw.get(key)
        if value not in (None, ""):
            return str(value)
    return ""


def normalize_attributes(record: Any) -> NormalizedAttributes:
    """Normalise a wardrobe item, product or raw mapping into attributes."""

    raw = _as_mapping(record)
    category, kind = resolve_category(raw.get("category"))
    sub_kind = resolve_kind(category, raw.get("sub_category") or raw.get("subcategory"))
    if sub_kind and kind == category:
        kind = sub_kind

    fields: Dict[str, str] = {}
    for name in _TEXT_FIELDS:
        fields[name] = normalize_key(raw.get(name)) or ATTRIBUTE_DEFAULTS[name]

    attributes = NormalizedAttributes(
        item_id=_record_id(raw),
        category=category,
        kind=kind,
        color=normalize_color_name(raw.get("color")),
        formality_score=coerce_formality(raw.get("formality_score")),
        tags=normalise_tags(raw.get("tags")),
        **fields,
    )
    logger.debug("Normalised %s -> category=%s kind=%s", attributes.item_id, category, kind)
    return attributes


__all__ = ["NormalizedAttributes", "normalize_attributes", "coerce_formality"]
