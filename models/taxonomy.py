"""Canonical taxonomy definitions for wardrobe items and catalog products.

This module centralises the categorical vocabulary used by the engine: the
five garment categories, the finer garment kinds that refine them, attribute
defaults and the lookup tables (colour, style and category complements) that
the scorer and assembler consult. Helper functions keep normalisation
consistent across models and logic.
"""

from typing import Dict, FrozenSet, Iterable, List

CATEGORIES: List[str] = ["tops", "bottoms", "outerwear", "shoes", "accessories"]
DEFAULT_CATEGORY = "tops"

# Finer garment kinds, keyed by the category they roll up into.
GARMENT_KINDS: Dict[str, List[str]] = {
    "tops": ["shirts", "blouses", "t-shirts", "tees", "polos", "sweaters", "hoodies", "tanks", "dresses"],
    "bottoms": ["pants", "trousers", "jeans", "chinos", "shorts", "skirts", "leggings"],
    "outerwear": ["suits", "blazers", "jackets", "coats", "cardigans", "vests"],
    "shoes": ["sneakers", "boots", "loafers", "heels", "sandals", "flats", "oxfords"],
    "accessories": [
        "ties",
        "cufflinks",
        "watches",
        "belts",
        "bags",
        "jewelry",
        "hats",
        "scarves",
        "sunglasses",
    ],
}

CATEGORY_ALIASES: Dict[str, str] = {
    "top": "tops",
    "clothing": "tops",
    "bottom": "bottoms",
    "outer": "outerwear",
    "shoe": "shoes",
    "footwear": "shoes",
    "accessory": "accessories",
    "shirt": "shirts",
    "tie": "ties",
    "watch": "watches",
    "belt": "belts",
    "suit": "suits",
    "jacket": "jackets",
    "dress": "dresses",
    "skirt": "skirts",
    "bag": "bags",
    "hat": "hats",
    "scarf": "scarves",
}

ATTRIBUTE_DEFAULTS: Dict[str, str] = {
    "color": "unspecified",
    "style": "casual",
    "pattern": "solid",
    "material": "unspecified",
    "occasion": "casual",
    "season": "all-season",
    "fit": "regular",
    "neckline": "none",
    "sleeve_length": "none",
}
DEFAULT_FORMALITY = 3
FORMALITY_RANGE = (1, 5)

COLOR_ALIASES: Dict[str, str] = {
    "grey": "gray",
    "navy-blue": "navy",
    "off-white": "white",
    "ivory": "cream",
    "light-grey": "gray",
    "sky-blue": "light-blue",
    "baby-blue": "light-blue",
    "maroon": "burgundy",
    "wine": "burgundy",
    "camel": "tan",
}

ANY_COLOR = "*"

# Keyed by the first garment's colour; lookups are one-directional.
COLOR_COMPATIBILITY: Dict[str, FrozenSet[str]] = {
    "navy": frozenset({"white", "light-blue", "gray", "beige", "cream", "burgundy", "brown"}),
    "white": frozenset({"navy", "black", "gray", "blue", "red", "green", "brown", ANY_COLOR}),
    "black": frozenset({"white", "gray", "red", "blue", "silver"}),
    "gray": frozenset({"white", "black", "navy", "blue", "pink", "yellow"}),
    "brown": frozenset({"cream", "beige", "white", "navy", "green", "tan"}),
    "beige": frozenset({"navy", "brown", "white", "blue", "green"}),
    "blue": frozenset({"white", "navy", "gray", "brown", "beige"}),
    "green": frozenset({"brown", "beige", "white", "navy"}),
    "red": frozenset({"white", "black", "gray", "navy"}),
    "burgundy": frozenset({"navy", "gray", "white", "beige"}),
}

STYLE_COMPATIBILITY: Dict[str, FrozenSet[str]] = {
    "casual": frozenset({"casual", "smart-casual"}),
    "smart-casual": frozenset({"casual", "smart-casual", "professional"}),
    "professional": frozenset({"smart-casual", "professional", "formal"}),
    "formal": frozenset({"professional", "formal"}),
    "minimalist": frozenset({"casual", "smart-casual", "professional"}),
    "classic": frozenset({"smart-casual", "professional", "formal"}),
}

_CLOTHING_COMPLEMENTS = frozenset({"bottoms", "outerwear", "shoes", "accessories"})

# What a garment category or kind is conventionally worn with. Same-category
# pairings only happen where a category lists itself.
CATEGORY_COMPATIBILITY: Dict[str, FrozenSet[str]] = {
    "tops": _CLOTHING_COMPLEMENTS,
    "shirts": frozenset({"ties", "cufflinks", "watches", "belts", "bottoms", "outerwear", "shoes"}),
    "dresses": frozenset({"outerwear", "shoes", "accessories"}),
    "bottoms": frozenset({"tops", "outerwear", "shoes", "accessories"}),
    "outerwear": frozenset({"tops", "bottoms", "shoes", "accessories"}),
    "suits": frozenset({"ties", "cufflinks", "watches", "shoes", "belts"}),
    "blazers": frozenset({"tops", "bottoms", "shoes", "ties", "watches", "belts"}),
    "shoes": frozenset({"tops", "bottoms", "outerwear", "accessories"}),
    "accessories": frozenset({"tops", "bottoms", "outerwear", "shoes", "accessories"}),
    "ties": frozenset({"shirts", "tops", "suits", "blazers", "cufflinks"}),
    "cufflinks": frozenset({"shirts", "suits", "ties"}),
    "watches": frozenset({"tops", "outerwear"}),
    "belts": frozenset({"bottoms", "shirts", "suits"}),
}
DEFAULT_COMPATIBLE_CATEGORIES: FrozenSet[str] = frozenset({"accessories", "watches", "belts"})

_KIND_TO_CATEGORY: Dict[str, str] = {
    kind: category for category, kinds in GARMENT_KINDS.items() for kind in kinds
}


def normalize_key(value: object) -> str:
    """Normalise a free-form string into a hyphenated taxonomy key."""

    if value is None:
        return ""
    text = str(value).strip().lower()
    return "-".join(text.replace("_", " ").split())


def is_known_category(value: object) -> bool:
    """Return True when ``value`` names a category, garment kind or alias."""

    key = normalize_key(value)
    key = CATEGORY_ALIASES.get(key, key)
    return key in CATEGORIES or key in _KIND_TO_CATEGORY


def resolve_category(value: object) -> tuple[str, str]:
    """Return ``(category, kind)`` for a raw category value.

    Known garment kinds roll up into their parent category and keep the kind;
    anything unknown collapses to the default category.
    """

    key = normalize_key(value)
    key = CATEGORY_ALIASES.get(key, key)
    if key in CATEGORIES:
        return key, key
    if key in _KIND_TO_CATEGORY:
        return _KIND_TO_CATEGORY[key], key
    return DEFAULT_CATEGORY, DEFAULT_CATEGORY


def resolve_kind(category: str, sub_category: object) -> str | None:
    """Return the garment kind for a sub category when it belongs to ``category``."""

    key = normalize_key(sub_category)
    key = CATEGORY_ALIASES.get(key, key)
    if _KIND_TO_CATEGORY.get(key) == category:
        return key
    return None


def normalize_color_name(raw: object) -> str:
    """Map a raw color string to a canonical color name."""

    key = normalize_key(raw)
    if not key:
        return ATTRIBUTE_DEFAULTS["color"]
    return COLOR_ALIASES.get(key, key)


def normalise_tags(values: object) -> FrozenSet[str]:
    """Lower-case and deduplicate tags, dropping blanks and non-strings."""

    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, Iterable):
        return frozenset()
    tags = set()
    for value in values:
        if not isinstance(value, str):
            continue
        key = normalize_key(value)
        if key:
            tags.add(key)
    return frozenset(tags)


__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "GARMENT_KINDS",
    "ATTRIBUTE_DEFAULTS",
    "DEFAULT_FORMALITY",
    "FORMALITY_RANGE",
    "ANY_COLOR",
    "COLOR_COMPATIBILITY",
    "STYLE_COMPATIBILITY",
    "CATEGORY_COMPATIBILITY",
    "DEFAULT_COMPATIBLE_CATEGORIES",
    "normalize_key",
    "is_known_category",
    "resolve_category",
    "resolve_kind",
    "normalize_color_name",
    "normalise_tags",
]
