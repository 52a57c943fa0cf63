"""Pydantic schemas and helpers for validating engine requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class RecommendationContext(BaseModel):
    """Optional occasion/season filter shared by both recommendation types."""

    model_config = ConfigDict(extra="allow")

    occasion: Optional[str] = None
    season: Optional[str] = None

    @field_validator("occasion", "season")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class RecommendationRequest(BaseModel):
    """Payload for ``POST /recommendations``."""

    user_id: Optional[str] = None
    type: Literal["products", "outfits"] = "products"
    wardrobe_items: List[Dict[str, Any]] = Field(default_factory=list)
    products: List[Dict[str, Any]] = Field(default_factory=list)
    context: RecommendationContext = Field(default_factory=RecommendationContext)
    limit: Optional[int] = Field(default=None, ge=0)


class RecommendationResponse(BaseModel):
    """Minimal structure expected from the recommendation agent."""

    type: Literal["products", "outfits"]
    recommendations: List[Dict[str, Any]] = []
    debug_summary: Optional[Dict[str, Any]] = None


class RankItemsRequest(BaseModel):
    """Payload for the rank-items boundary, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    primary_item: Dict[str, Any] = Field(alias="primaryItem")
    candidate_items: List[Dict[str, Any]] = Field(default_factory=list, alias="candidateItems")


class CompatibilityRequest(BaseModel):
    """Payload for ``POST /products/compatibility``."""

    product: Dict[str, Any]
    wardrobe_items: List[Dict[str, Any]] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=exc.errors(include_url=False)).model_dump()


__all__ = [
    "RecommendationContext",
    "RecommendationRequest",
    "RecommendationResponse",
    "RankItemsRequest",
    "CompatibilityRequest",
    "ValidationResult",
    "validation_failure",
]
