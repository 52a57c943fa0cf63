"""Deterministic pairwise compatibility scoring between garments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from models.attributes import NormalizedAttributes
from models.color_theory import colors_match
from models.taxonomy import (
    CATEGORY_COMPATIBILITY,
    DEFAULT_COMPATIBLE_CATEGORIES,
    STYLE_COMPATIBILITY,
    is_known_category,
    normalize_key,
    resolve_category,
)

BASE_SCORE = 0.5
COLOR_BONUS = 0.3
TAG_BONUS = 0.1


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions to a pairwise score, before clamping."""

    base: float
    color: float
    tags: float
    shared_tags: FrozenSet[str]

    @property
    def total(self) -> float:
        return self.base + self.color + self.tags

    @property
    def score(self) -> float:
        return min(self.total, 1.0)


def score_breakdown(a: NormalizedAttributes, b: NormalizedAttributes) -> ScoreBreakdown:
    """Split the compatibility of ``a`` with ``b`` into named contributions."""

    color = COLOR_BONUS if colors_match(a.color, b.color) else 0.0
    shared = a.tags & b.tags
    return ScoreBreakdown(base=BASE_SCORE, color=color, tags=TAG_BONUS * len(shared), shared_tags=shared)


def score(a: NormalizedAttributes, b: NormalizedAttributes) -> float:
    """Return the compatibility of ``a`` with ``b`` in [0, 1].

    Colour harmony is looked up from ``a``'s colour, so the score is directional.
    """

    return score_breakdown(a, b).score


def compatible_categories(category: str) -> FrozenSet[str]:
    """Return the categories and garment kinds ``category`` is worn with.

    Garment kinds without an entry of their own use their parent category's
    entry; values unknown to the taxonomy get the generic accessory set.
    """

    key = normalize_key(category)
    if key in CATEGORY_COMPATIBILITY:
        return CATEGORY_COMPATIBILITY[key]
    if not is_known_category(key):
        return DEFAULT_COMPATIBLE_CATEGORIES
    parent, kind = resolve_category(key)
    return CATEGORY_COMPATIBILITY.get(kind) or CATEGORY_COMPATIBILITY[parent]


def is_category_compatible(source: NormalizedAttributes, target: NormalizedAttributes) -> bool:
    """Return True when ``target`` is conventionally worn with ``source``."""

    allowed = compatible_categories(source.kind)
    return target.kind in allowed or target.category in allowed


def style_labels(tags: Iterable[str]) -> FrozenSet[str]:
    return frozenset(tag for tag in tags if tag in STYLE_COMPATIBILITY)


def styles_compatible(a: NormalizedAttributes, b: NormalizedAttributes) -> bool:
    """Return False only when both garments carry style labels and none agree."""

    a_styles = style_labels(a.tags | {a.style})
    b_styles = style_labels(b.tags | {b.style})
    if not a_styles or not b_styles:
        return True
    return any(STYLE_COMPATIBILITY[style] & b_styles for style in a_styles)


__all__ = [
    "BASE_SCORE",
    "COLOR_BONUS",
    "TAG_BONUS",
    "ScoreBreakdown",
    "score_breakdown",
    "score",
    "compatible_categories",
    "is_category_compatible",
    "styles_compatible",
]
