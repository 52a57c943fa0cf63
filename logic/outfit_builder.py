"""Deterministic outfit assembly with transparent diagnostics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from logic.compatibility import (
    ScoreBreakdown,
    is_category_compatible,
    score,
    score_breakdown,
    styles_compatible,
)
from logic.contextual_filtering import (
    coerce_products,
    coerce_wardrobe,
    filter_available,
    filter_by_context,
)
from models.attributes import NormalizedAttributes
from models.color_theory import UNSPECIFIED_COLOR, color_vetoed, monochrome
from models.recommendation import Garment, OutfitRecommendation
from models.taxonomy import normalize_key

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 0.5
DEFAULT_PRODUCTS_PER_OUTFIT = 2
DEFAULT_COMPANIONS_PER_OUTFIT = 2


@dataclass(frozen=True)
class OutfitAssemblyResult:
    outfits: List[OutfitRecommendation]
    diagnostics: Dict[str, object]


@dataclass(frozen=True)
class _Candidate:
    anchor: Garment
    products: List[Tuple[Garment, ScoreBreakdown]]
    companions: List[Garment]
    confidence: float


def _describe(attributes: NormalizedAttributes) -> str:
    kind = attributes.kind.replace("-", " ")
    if attributes.color == UNSPECIFIED_COLOR:
        return kind
    return f"{attributes.color.replace('-', ' ')} {kind}"


def _join(parts: Sequence[str]) -> str:
    if len(parts) <= 1:
        return "".join(parts)
    return ", ".join(parts[:-1]) + f" and {parts[-1]}"


def _score_products(
    anchor: Garment, products: Iterable[Garment], min_score: float
) -> List[Tuple[Garment, ScoreBreakdown]]:
    scored: List[Tuple[Garment, ScoreBreakdown]] = []
    for product in products:
        if not is_category_compatible(anchor.attributes, product.attributes):
            continue
        breakdown = score_breakdown(anchor.attributes, product.attributes)
        if breakdown.score > min_score:
            scored.append((product, breakdown))
    scored.sort(key=lambda entry: (-entry[1].score, entry[0].garment_id))
    return scored


def _find_companions(anchor: Garment, wardrobe: Sequence[Garment], limit: int) -> List[Garment]:
    """Pick other wardrobe pieces that can be worn with the anchor."""

    companions = []
    for other in wardrobe:
        if other is anchor:
            continue
        if not is_category_compatible(anchor.attributes, other.attributes):
            continue
        if color_vetoed(anchor.attributes.color, other.attributes.color):
            continue
        if not styles_compatible(anchor.attributes, other.attributes):
            continue
        companions.append(other)
    companions.sort(key=lambda item: (-score(anchor.attributes, item.attributes), item.garment_id))
    return companions[:limit]


def _sort_key(candidate: _Candidate) -> Tuple[float, int, float, str]:
    created_at = getattr(candidate.anchor.record, "created_at", None)
    timestamp = created_at.timestamp() if created_at else 0.0
    return (-candidate.confidence, 0 if created_at else 1, -timestamp, candidate.anchor.garment_id)


def outfit_name(anchor: NormalizedAttributes, occasion: str) -> str:
    return f"{occasion.replace('-', ' ').title()} {anchor.kind.replace('-', ' ').title()} Look"


def styling_notes(candidate: _Candidate, occasion: str) -> str:
    """Compose templated styling notes from the matched attributes."""

    anchor = candidate.anchor.attributes
    product_attrs = [product.attributes for product, _ in candidate.products]
    notes = [
        f"Anchor your {occasion.replace('-', ' ')} look with your {_describe(anchor)} "
        f"and add the {_join([_describe(attrs) for attrs in product_attrs])}."
    ]

    matched_colors = sorted(
        {product.attributes.color for product, breakdown in candidate.products if breakdown.color > 0}
    )
    if matched_colors:
        notes.append(
            f"The {anchor.color.replace('-', ' ')} base pairs naturally with "
            f"{_join([color.replace('-', ' ') for color in matched_colors])}."
        )
    shared_tags = sorted({tag for _, breakdown in candidate.products for tag in breakdown.shared_tags})
    if shared_tags:
        notes.append(f"Shared {_join(shared_tags)} details keep the outfit cohesive.")
    if candidate.companions:
        notes.append(
            f"Round it out with your {_join([_describe(item.attributes) for item in candidate.companions])}."
        )
    palette = [anchor.color] + [attrs.color for attrs in product_attrs]
    if len(palette) > 1 and monochrome(palette):
        notes.append("A tonal palette keeps the look streamlined.")
    return " ".join(notes)


def build_outfit_candidates(
    wardrobe: Iterable[Any] | None,
    products: Iterable[Any] | None,
    context: Mapping[str, Any] | None = None,
    min_score: float = DEFAULT_MIN_SCORE,
    products_per_outfit: int = DEFAULT_PRODUCTS_PER_OUTFIT,
    companions_per_outfit: int = DEFAULT_COMPANIONS_PER_OUTFIT,
) -> OutfitAssemblyResult:
    """Group each wardrobe anchor with its best products and rank the outfits."""

    wardrobe_filter = filter_by_context(coerce_wardrobe(wardrobe), context)
    available = filter_available(coerce_products(products))
    product_filter = filter_by_context(available.items, context)
    anchors = wardrobe_filter.items
    catalog = product_filter.items

    diagnostics: Dict[str, object] = {
        "filters": {
            "wardrobe": wardrobe_filter.debug,
            "availability": available.debug,
            "products": product_filter.debug,
        },
        "anchors_considered": len(anchors),
        "anchors_without_products": [],
    }

    candidates: List[_Candidate] = []
    for anchor in anchors:
        scored = _score_products(anchor, catalog, min_score)[: max(1, products_per_outfit)]
        if not scored:
            diagnostics["anchors_without_products"].append(anchor.garment_id)
            continue
        confidence = sum(breakdown.score for _, breakdown in scored) / len(scored)
        candidates.append(
            _Candidate(
                anchor=anchor,
                products=scored,
                companions=_find_companions(anchor, anchors, companions_per_outfit),
                confidence=confidence,
            )
        )
    candidates.sort(key=_sort_key)

    occasion_override = normalize_key((context or {}).get("occasion"))
    outfits: List[OutfitRecommendation] = []
    for index, candidate in enumerate(candidates):
        anchor = candidate.anchor
        occasion = occasion_override or anchor.attributes.occasion
        outfits.append(
            OutfitRecommendation(
                id=f"outfit-{anchor.garment_id or index}",
                name=outfit_name(anchor.attributes, occasion),
                occasion=occasion,
                confidence_score=candidate.confidence,
                anchor_id=anchor.garment_id,
                wardrobe_items=[anchor.record] + [item.record for item in candidate.companions],
                recommended_products=[product.record for product, _ in candidate.products],
                styling_notes=styling_notes(candidate, occasion),
            )
        )
    diagnostics["candidate_outfits"] = len(outfits)
    logger.info("Assembled %s outfits from %s anchors", len(outfits), len(anchors))
    return OutfitAssemblyResult(outfits=outfits, diagnostics=diagnostics)


def assemble_outfits(
    wardrobe: Iterable[Any] | None,
    products: Iterable[Any] | None,
    context: Mapping[str, Any] | None = None,
    limit: Optional[int] = None,
    min_score: float = DEFAULT_MIN_SCORE,
    products_per_outfit: int = DEFAULT_PRODUCTS_PER_OUTFIT,
) -> List[OutfitRecommendation]:
    """Return outfit proposals ranked by confidence, optionally truncated to ``limit``."""

    result = build_outfit_candidates(
        wardrobe,
        products,
        context,
        min_score=min_score,
        products_per_outfit=products_per_outfit,
    )
    if limit is None:
        return result.outfits
    return result.outfits[: max(0, limit)]


__all__ = [
    "assemble_outfits",
    "build_outfit_candidates",
    "outfit_name",
    "styling_notes",
    "OutfitAssemblyResult",
    "DEFAULT_MIN_SCORE",
    "DEFAULT_PRODUCTS_PER_OUTFIT",
]
