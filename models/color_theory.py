"""Colour harmony helpers backed by the directional compatibility table."""
from __future__ import annotations

import logging
from typing import FrozenSet, Iterable

from models.taxonomy import ANY_COLOR, ATTRIBUTE_DEFAULTS, COLOR_COMPATIBILITY, normalize_color_name

logger = logging.getLogger(__name__)

UNSPECIFIED_COLOR = ATTRIBUTE_DEFAULTS["color"]


def compatible_colors(color: str) -> FrozenSet[str]:
    """Return the colours listed as pairing well with ``color``."""

    return COLOR_COMPATIBILITY.get(normalize_color_name(color), frozenset())


def colors_match(first: str, second: str) -> bool:
    """Return True when ``second`` is in ``first``'s compatible set.

    The lookup is keyed by ``first`` only, so ``colors_match(a, b)`` and
    ``colors_match(b, a)`` may differ.
    """

    c1, c2 = normalize_color_name(first), normalize_color_name(second)
    if c1 == UNSPECIFIED_COLOR or c2 == UNSPECIFIED_COLOR:
        return False
    partners = compatible_colors(c1)
    result = c2 in partners or ANY_COLOR in partners
    logger.debug("color match (%s -> %s) -> %s", c1, c2, result)
    return result


def color_vetoed(first: str, second: str) -> bool:
    """Return True when ``first`` has a table entry that excludes ``second``.

    Colours without a table entry, and unspecified colours, never veto.
    """

    c1, c2 = normalize_color_name(first), normalize_color_name(second)
    if c1 == UNSPECIFIED_COLOR or c2 == UNSPECIFIED_COLOR:
        return False
    if c1 not in COLOR_COMPATIBILITY:
        return False
    return not colors_match(c1, c2)


def monochrome(color_list: Iterable[str]) -> bool:
    """Return True when all specified colours collapse to a single tone."""

    normalized = {normalize_color_name(color) for color in color_list}
    normalized.discard(UNSPECIFIED_COLOR)
    return len(normalized) == 1


__all__ = ["compatible_colors", "colors_match", "color_vetoed", "monochrome", "UNSPECIFIED_COLOR"]
