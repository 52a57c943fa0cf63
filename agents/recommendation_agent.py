"""Recommendation agent: request-scoped entry point to the engine."""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Sequence

from logic.compatibility import is_category_compatible, score, styles_compatible
from logic.contextual_filtering import coerce_products, coerce_wardrobe
from logic.outfit_builder import assemble_outfits, build_outfit_candidates
from logic.product_ranking import judge_payload, rank_products_with_diagnostics, reorder_by_ids
from models.attributes import normalize_attributes
from models.color_theory import color_vetoed
from recommender_app.config import EngineConfig
from recommender_app.logging_config import get_logger, log_event, operation_context
from tools.observability import instrument_operation
from tools.ranking_judge import RankingJudge
from tools.response_cache import TTLResponseCache, payload_digest, recommendations_key

logger = get_logger(__name__)

RECOMMENDATION_TYPES = ("products", "outfits")
PRODUCT_DETAIL_ITEMS = 6
PRODUCT_DETAIL_OUTFITS = 3


def _serialisable(record: Any) -> Any:
    if hasattr(record, "to_dict"):
        return record.to_dict()
    if isinstance(record, Mapping):
        return dict(record)
    return str(record)


class RecommendationAgent:
    """Produces outfit or product recommendations from caller-supplied data.

    Scoring stays local and deterministic; the optional judge only reorders
    product rankings, and the optional cache only short-circuits repeated
    identical requests.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        judge: RankingJudge | None = None,
        cache: TTLResponseCache | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.judge = judge
        self.cache = cache

    @instrument_operation("recommend")
    def recommend(
        self,
        wardrobe_items: Sequence[Any] | None,
        products: Sequence[Any] | None,
        context: Mapping[str, Any] | None = None,
        rec_type: str = "products",
        user_id: str | None = None,
        limit: int | None = None,
    ) -> Dict[str, object]:
        """Return ``{type, recommendations, debug_summary}`` for one request."""

        if rec_type not in RECOMMENDATION_TYPES:
            logger.warning("Unknown recommendation type '%s', defaulting to products", rec_type)
            rec_type = "products"
        context = dict(context or {})

        with operation_context("agent:recommendation.recommend", user_id=user_id) as correlation_id:
            log_event(
                logger,
                level=logging.INFO,
                event="recommendation_started",
                agent="recommendation",
                rec_type=rec_type,
                correlation_id=correlation_id,
                user_id=user_id,
                wardrobe_count=len(wardrobe_items or []),
                product_count=len(products or []),
            )

            cache_key = None
            if self.cache is not None:
                digest = payload_digest(
                    {
                        "wardrobe": [_serialisable(item) for item in wardrobe_items or []],
                        "products": [_serialisable(product) for product in products or []],
                        "context": context,
                        "limit": limit,
                    }
                )
                cache_key = recommendations_key(user_id, rec_type, context, digest)
                cached = self.cache.get(cache_key)
                if cached is not None:
                    response = copy.deepcopy(cached)
                    response["debug_summary"]["cache"] = "hit"
                    log_event(
                        logger,
                        level=logging.INFO,
                        event="recommendation_completed",
                        agent="recommendation",
                        rec_type=rec_type,
                        correlation_id=correlation_id,
                        result_count=len(response["recommendations"]),
                        cache="hit",
                    )
                    return response

            if rec_type == "outfits":
                response = self._recommend_outfits(wardrobe_items, products, context, limit)
            else:
                response = self._recommend_products(wardrobe_items, products, context, limit)
            response["debug_summary"]["cache"] = "miss" if cache_key else "disabled"

            if cache_key is not None:
                self.cache.set(cache_key, copy.deepcopy(response))

            log_event(
                logger,
                level=logging.INFO,
                event="recommendation_completed",
                agent="recommendation",
                rec_type=rec_type,
                correlation_id=correlation_id,
                result_count=len(response["recommendations"]),
                judge_status=response["debug_summary"].get("judge_status"),
                cache=response["debug_summary"]["cache"],
            )
            return response

    def _recommend_outfits(
        self,
        wardrobe_items: Sequence[Any] | None,
        products: Sequence[Any] | None,
        context: Dict[str, Any],
        limit: int | None,
    ) -> Dict[str, object]:
        result = build_outfit_candidates(
            wardrobe_items,
            products,
            context,
            min_score=self.config.min_score,
            products_per_outfit=self.config.products_per_outfit,
        )
        top = result.outfits[: self._limit(limit, self.config.outfit_limit)]
        return {
            "type": "outfits",
            "recommendations": [outfit.to_dict() for outfit in top],
            "debug_summary": {**result.diagnostics, "context": context},
        }

    def _recommend_products(
        self,
        wardrobe_items: Sequence[Any] | None,
        products: Sequence[Any] | None,
        context: Dict[str, Any],
        limit: int | None,
    ) -> Dict[str, object]:
        result = rank_products_with_diagnostics(
            wardrobe_items,
            products,
            context,
            judge=self.judge,
            complement_count=self.config.complements_per_product,
            limit=self._limit(limit, self.config.product_limit),
        )
        return {
            "type": "products",
            "recommendations": [recommendation.to_dict() for recommendation in result.recommendations],
            "debug_summary": {**result.diagnostics, "context": context},
        }

    @staticmethod
    def _limit(requested: int | None, default: int) -> int:
        if requested is None or requested < 0:
            return default
        return requested

    @instrument_operation("product_compatibility")
    def product_compatibility(self, product: Any, wardrobe_items: Sequence[Any] | None) -> Dict[str, object]:
        """Summarise how a single product fits into a user's wardrobe.

        A wardrobe item counts as compatible when its category is worn with the
        product and neither colour nor style labels rule the pairing out.
        """

        garments = coerce_products([product])
        wardrobe = coerce_wardrobe(wardrobe_items)
        if not garments or not wardrobe:
            return {
                "total_items": len(wardrobe),
                "compatible_items": [],
                "compatibility_score": 0.0,
                "styling_recommendations": [],
            }

        target = garments[0]
        compatible = [
            item
            for item in wardrobe
            if is_category_compatible(target.attributes, item.attributes)
            and not color_vetoed(target.attributes.color, item.attributes.color)
            and styles_compatible(target.attributes, item.attributes)
        ]
        outfits = assemble_outfits(
            [item.record for item in wardrobe],
            [target.record],
            {},
            limit=PRODUCT_DETAIL_OUTFITS,
            min_score=self.config.min_score,
            products_per_outfit=self.config.products_per_outfit,
        )
        return {
            "total_items": len(wardrobe),
            "compatible_items": [item.record.to_dict() for item in compatible[:PRODUCT_DETAIL_ITEMS]],
            "compatibility_score": len(compatible) / len(wardrobe),
            "styling_recommendations": [outfit.to_dict() for outfit in outfits],
        }

    def rank_items(self, primary_item: Any, candidate_items: Sequence[Any]) -> Dict[str, object]:
        """Rank candidates against one primary item, preferring the judge when it answers."""

        primary = normalize_attributes(primary_item)
        candidates = [normalize_attributes(candidate) for candidate in candidate_items]
        local = sorted(candidates, key=lambda attrs: (-score(primary, attrs), attrs.item_id))
        local_ids = [attrs.item_id for attrs in local]

        if self.judge is not None and candidates:
            try:
                ranked_ids = self.judge.rank(
                    judge_payload(primary_item), [judge_payload(candidate) for candidate in candidate_items]
                )
            except Exception as exc:  # noqa: BLE001
                log_event(logger, logging.WARNING, "judge_unavailable", judge=self.judge.name, reason=str(exc))
            else:
                reordered = reorder_by_ids(local_ids, ranked_ids, key=lambda entry_id: entry_id)
                if reordered is not None:
                    return {"ranked_ids": reordered, "source": self.judge.name}
                log_event(logger, logging.WARNING, "judge_unavailable", judge=self.judge.name, reason="malformed")
        return {"ranked_ids": local_ids, "source": "local"}


__all__ = ["RecommendationAgent", "RECOMMENDATION_TYPES"]
