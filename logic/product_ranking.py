"""Rank catalog products by aggregate compatibility with a user's wardrobe."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from logic.compatibility import ScoreBreakdown, TAG_BONUS, is_category_compatible, score_breakdown
from logic.contextual_filtering import (
    coerce_products,
    coerce_wardrobe,
    filter_available,
    filter_by_context,
)
from models.attributes import normalize_attributes
from models.product import Product
from models.recommendation import Garment, ProductRecommendation
from tools.ranking_judge import RankingJudge

logger = logging.getLogger(__name__)
T = TypeVar("T")

DEFAULT_COMPLEMENT_COUNT = 3
GENERIC_REASON = "A versatile piece that will enhance your existing style"

# Category sizes of a well-rounded wardrobe.
IDEAL_CATEGORY_COUNTS: Dict[str, int] = {"tops": 8, "bottoms": 6, "outerwear": 3, "shoes": 4, "accessories": 5}
GAP_REASON_THRESHOLD = 0.5


@dataclass
class RankingResult:
    recommendations: List[ProductRecommendation]
    judge_status: str = "disabled"
    diagnostics: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class _Scored:
    product: Garment
    mean_score: float
    pairs: List[Tuple[Garment, ScoreBreakdown]]


def _dominant_factor(product: Garment, pairs: Sequence[Tuple[Garment, ScoreBreakdown]]) -> str | None:
    """Return ``color``, ``occasion`` or ``tags`` by summed contribution, if any."""

    totals = {
        "color": sum(breakdown.color for _, breakdown in pairs),
        "occasion": TAG_BONUS
        * sum(1 for item, _ in pairs if item.attributes.occasion == product.attributes.occasion),
        "tags": sum(breakdown.tags for _, breakdown in pairs),
    }
    factor, value = max(totals.items(), key=lambda entry: entry[1])
    return factor if value > 0 else None


def wardrobe_gaps(wardrobe: Iterable[Garment]) -> Dict[str, float]:
    """Return how far each category falls short of its ideal count, in [0, 1]."""

    counts = Counter(garment.attributes.category for garment in wardrobe)
    return {
        category: max(0.0, (ideal - counts.get(category, 0)) / ideal)
        for category, ideal in IDEAL_CATEGORY_COUNTS.items()
    }


def recommendation_reason(
    product: Garment,
    pairs: Sequence[Tuple[Garment, ScoreBreakdown]],
    gaps: Mapping[str, float] | None = None,
) -> str:
    """Template a reason string from the factor that contributed most.

    When no pairwise factor contributed, a large gap in the product's category
    is named instead of the generic reason.
    """

    factor = _dominant_factor(product, pairs)
    if factor == "color":
        colors: List[str] = []
        for item, breakdown in pairs:
            color = item.attributes.color.replace("-", " ")
            if breakdown.color > 0 and color not in colors:
                colors.append(color)
        return f"Complements your {' and '.join(colors[:2])} pieces perfectly"
    if factor == "occasion":
        occasion = product.attributes.occasion
        count = sum(1 for item, _ in pairs if item.attributes.occasion == occasion)
        noun = "piece" if count == 1 else "pieces"
        return f"Made for the same {occasion.replace('-', ' ')} occasions as {count} {noun} in your wardrobe"
    if factor == "tags":
        shared = sorted({tag for _, breakdown in pairs for tag in breakdown.shared_tags})
        count = sum(1 for _, breakdown in pairs if breakdown.shared_tags)
        noun = "item" if count == 1 else "items"
        return f"Shares {', '.join(shared[:3])} styling with {count} {noun} in your wardrobe"
    category = product.attributes.category
    if (gaps or {}).get(category, 0.0) > GAP_REASON_THRESHOLD:
        return f"Perfect addition to fill a gap in your {category} collection"
    return GENERIC_REASON


def _score_product(product: Garment, wardrobe: Sequence[Garment]) -> Optional[_Scored]:
    pairs = [
        (item, score_breakdown(product.attributes, item.attributes))
        for item in wardrobe
        if is_category_compatible(product.attributes, item.attributes)
    ]
    if not pairs:
        return None
    mean_score = sum(breakdown.score for _, breakdown in pairs) / len(pairs)
    return _Scored(product=product, mean_score=mean_score, pairs=pairs)


def rank_locally(
    wardrobe: Iterable[Any] | None,
    products: Iterable[Any] | None,
    context: Mapping[str, Any] | None = None,
    complement_count: int = DEFAULT_COMPLEMENT_COUNT,
) -> Tuple[List[ProductRecommendation], Dict[str, object]]:
    """Deterministic ranking: mean pairwise score, ties by product id."""

    garments = coerce_wardrobe(wardrobe)
    gaps = wardrobe_gaps(garments)
    wardrobe_filter = filter_by_context(garments, context)
    available = filter_available(coerce_products(products))
    product_filter = filter_by_context(available.items, context)
    diagnostics: Dict[str, object] = {
        "filters": {
            "wardrobe": wardrobe_filter.debug,
            "availability": available.debug,
            "products": product_filter.debug,
        },
        "wardrobe_gaps": gaps,
        "products_without_complements": [],
    }
    if not wardrobe_filter.items:
        return [], diagnostics

    scored: List[_Scored] = []
    for product in product_filter.items:
        entry = _score_product(product, wardrobe_filter.items)
        if entry is None:
            diagnostics["products_without_complements"].append(product.garment_id)
            continue
        scored.append(entry)
    scored.sort(key=lambda entry: (-entry.mean_score, entry.product.garment_id))

    recommendations = []
    for entry in scored:
        ordered_pairs = sorted(entry.pairs, key=lambda pair: (-pair[1].score, pair[0].garment_id))
        recommendations.append(
            ProductRecommendation(
                product=entry.product.record,
                reason=recommendation_reason(entry.product, entry.pairs, gaps),
                confidence_score=entry.mean_score,
                complements=[item.record for item, _ in ordered_pairs[: max(0, complement_count)]],
            )
        )
    diagnostics["ranked_count"] = len(recommendations)
    return recommendations, diagnostics


def judge_payload(record: Any) -> Dict[str, Any]:
    """Describe a wardrobe item or product for an external judge."""

    payload = normalize_attributes(record).to_dict()
    payload["id"] = payload.pop("item_id")
    payload["name"] = getattr(record, "name", None) or (record.get("name") if isinstance(record, Mapping) else None)
    if isinstance(record, Product):
        payload["price"] = record.price
    elif isinstance(record, Mapping) and record.get("price") is not None:
        payload["price"] = record.get("price")
    return payload


def _product_id(recommendation: ProductRecommendation) -> str:
    return recommendation.product.product_id


def reorder_by_ids(
    entries: Sequence[T], ranked_ids: Any, key: Callable[[T], str] = _product_id
) -> Optional[List[T]]:
    """Apply a judge's id order, or return ``None`` when it is unusable.

    Unknown ids are ignored and repeated ids keep their first position;
    entries the judge left out follow in their local order.
    """

    if not isinstance(ranked_ids, list):
        return None
    by_id: Dict[str, List[T]] = {}
    for entry in entries:
        by_id.setdefault(key(entry), []).append(entry)

    ordered: List[T] = []
    seen = set()
    for entry_id in ranked_ids:
        if not isinstance(entry_id, str) or entry_id in seen or entry_id not in by_id:
            continue
        seen.add(entry_id)
        ordered.extend(by_id[entry_id])
    if not ordered:
        return None
    ordered.extend(entry for entry in entries if key(entry) not in seen)
    return ordered


def rank_products_with_diagnostics(
    wardrobe: Iterable[Any] | None,
    products: Iterable[Any] | None,
    context: Mapping[str, Any] | None = None,
    judge: RankingJudge | None = None,
    complement_count: int = DEFAULT_COMPLEMENT_COUNT,
    limit: Optional[int] = None,
    primary_item: Any = None,
) -> RankingResult:
    """Rank locally, then let ``judge`` reorder the result if it answers usefully."""

    local, diagnostics = rank_locally(wardrobe, products, context, complement_count)
    status = "disabled"
    final = local

    if judge is not None and local:
        primary = primary_item if primary_item is not None else (local[0].complements or [None])[0]
        if primary is None:
            status = "skipped"
        else:
            try:
                ranked_ids = judge.rank(judge_payload(primary), [judge_payload(rec.product) for rec in local])
            except Exception as exc:  # noqa: BLE001
                logger.warning("Ranking judge unavailable, using local order", extra={"reason": str(exc)})
                status = "unavailable"
            else:
                reordered = reorder_by_ids(local, ranked_ids)
                if reordered is None:
                    logger.warning("Ranking judge returned an unusable ranking, using local order")
                    status = "unavailable"
                else:
                    final = reordered
                    status = "applied"

    if limit is not None:
        final = final[: max(0, limit)]
    diagnostics["judge_status"] = status
    return RankingResult(recommendations=final, judge_status=status, diagnostics=diagnostics)


def rank_products(
    wardrobe: Iterable[Any] | None,
    products: Iterable[Any] | None,
    context: Mapping[str, Any] | None = None,
    judge: RankingJudge | None = None,
    complement_count: int = DEFAULT_COMPLEMENT_COUNT,
    limit: Optional[int] = None,
    primary_item: Any = None,
) -> List[ProductRecommendation]:
    """Return product recommendations ordered best first."""

    return rank_products_with_diagnostics(
        wardrobe,
        products,
        context,
        judge=judge,
        complement_count=complement_count,
        limit=limit,
        primary_item=primary_item,
    ).recommendations


__all__ = [
    "rank_products",
    "rank_products_with_diagnostics",
    "rank_locally",
    "reorder_by_ids",
    "recommendation_reason",
    "wardrobe_gaps",
    "IDEAL_CATEGORY_COUNTS",
    "judge_payload",
    "RankingResult",
    "GENERIC_REASON",
]
