"""FastAPI server exposing the recommendation engine."""

from fastapi import FastAPI, HTTPException

from logic.validation import CompatibilityRequest, RankItemsRequest, RecommendationRequest
from recommender_app.app import RecommendationApp
from recommender_app.logging_config import configure_logging

configure_logging()

engine_app = RecommendationApp()
app = FastAPI(title="Wardrobe Match", version="0.1.0")


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness probe."""

    return {
        "status": "ok",
        "service": "wardrobe-match",
        "environment": engine_app.config.environment or "local",
        "judge_backend": engine_app.judge_backend,
    }


@app.post("/recommendations")
def recommendations(request: RecommendationRequest) -> dict:
    """Return outfit or product recommendations for the supplied wardrobe and catalog."""

    response = engine_app.recommend(
        wardrobe_items=request.wardrobe_items,
        products=request.products,
        context=request.context.model_dump(exclude_none=True),
        rec_type=request.type,
        user_id=request.user_id,
        limit=request.limit,
    )
    if response.get("status") == "needs_review":
        raise HTTPException(status_code=500, detail=response.get("message", "recommendation failed"))
    return response


@app.post("/recommendations/rank-items")
def rank_items(request: RankItemsRequest) -> dict:
    """Order candidate items by how well they complement the primary item."""

    response = engine_app.rank_items(request.primary_item, request.candidate_items)
    return {"ranked_ids": response["ranked_ids"]}


@app.post("/products/compatibility")
def product_compatibility(request: CompatibilityRequest) -> dict:
    """Summarise how one product fits the supplied wardrobe."""

    return engine_app.product_compatibility(request.product, request.wardrobe_items)


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=int("8080"), reload=False)
