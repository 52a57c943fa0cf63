"""Application bootstrap for the recommendation engine."""

import logging
from typing import Any, Sequence

from pydantic import ValidationError

from agents.recommendation_agent import RecommendationAgent
from logic.validation import RecommendationResponse, validation_failure
from recommender_app.config import EngineConfig
from recommender_app.logging_config import configure_logging, get_logger, log_event, operation_context
from tools.ranking_judge import GeminiRankingJudge, HttpRankingJudge, RankingJudge
from tools.response_cache import TTLResponseCache

LOGGER = get_logger(__name__)


class RecommendationApp:
    """Wires together the config, the optional judge, the cache and the agent."""

    def __init__(self, config: EngineConfig | None = None, judge: RankingJudge | None = None) -> None:
        self.config = config or EngineConfig.from_env()
        configure_logging()

        self.judge = judge if judge is not None else self._build_judge()
        self.cache = TTLResponseCache(
            ttl_minutes=self.config.cache_ttl_minutes, max_entries=self.config.cache_max_entries
        )
        self.agent = RecommendationAgent(config=self.config, judge=self.judge, cache=self.cache)

    def _build_judge(self) -> RankingJudge | None:
        backend = self.config.judge_backend
        if backend == "gemini":
            return GeminiRankingJudge(
                api_key=self.config.api_key,
                model=self.config.model,
                timeout_seconds=self.config.judge_timeout_seconds,
            )
        if backend == "http":
            if not self.config.judge_url:
                LOGGER.warning("JUDGE_URL is not set, external judge disabled")
                return None
            return HttpRankingJudge(self.config.judge_url, timeout_seconds=self.config.judge_timeout_seconds)
        return None

    @property
    def judge_backend(self) -> str:
        return self.judge.name if self.judge is not None else "none"

    def recommend(
        self,
        *,
        wardrobe_items: Sequence[Any] | None,
        products: Sequence[Any] | None,
        context: dict | None = None,
        rec_type: str = "products",
        user_id: str | None = None,
        limit: int | None = None,
    ) -> dict:
        """Run the agent and check the response shape before handing it back."""

        with operation_context("app:recommend", user_id=user_id) as correlation_id:
            response = self.agent.recommend(
                wardrobe_items,
                products,
                context,
                rec_type=rec_type,
                user_id=user_id,
                limit=limit,
            )
            try:
                RecommendationResponse.model_validate(response)
            except ValidationError as exc:
                log_event(
                    LOGGER,
                    level=logging.WARNING,
                    event="app_response_invalid",
                    agent="app",
                    method="recommend",
                    details=str(exc),
                    correlation_id=correlation_id,
                )
                return validation_failure("Recommendation response failed schema checks", exc)
            return response

    def rank_items(self, primary_item: Any, candidate_items: Sequence[Any]) -> dict:
        return self.agent.rank_items(primary_item, candidate_items)

    def product_compatibility(self, product: Any, wardrobe_items: Sequence[Any] | None) -> dict:
        return self.agent.product_compatibility(product, wardrobe_items)

    def clear_cache(self) -> None:
        self.cache.clear()


__all__ = ["RecommendationApp"]
