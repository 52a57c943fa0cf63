"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or datetime into an aware datetime, else ``None``."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class WardrobeItem:
    """A garment owned by one user, entered manually or via image analysis.

    Descriptive attributes are kept as provided; the engine reads them through
    :func:`models.attributes.normalize_attributes`, which fills the gaps.
    """

    item_id: str
    user_id: str
    category: str
    name: str = ""
    sub_category: Optional[str] = None
    color: Optional[str] = None
    style: Optional[str] = None
    pattern: Optional[str] = None
    material: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[str] = None
    fit: Optional[str] = None
    neckline: Optional[str] = None
    sleeve_length: Optional[str] = None
    formality_score: Any = None
    tags: List[str] = field(default_factory=list)
    brand: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.item_id = str(self.item_id)
        self.user_id = str(self.user_id or "")
        self.tags = [tag for tag in _ensure_list(self.tags) if isinstance(tag, str)]
        self.created_at = parse_timestamp(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.__dict__)
        payload["created_at"] = self.created_at.isoformat() if self.created_at else None
        return payload


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a loose database row.

    Accepts both this project's field names and the hosted-database column
    names (``id``, ``subcategory``). Missing fields are left unset rather than
    rejected.
    """

    return WardrobeItem(
        item_id=str(metadata.get("item_id") or metadata.get("id") or ""),
        user_id=str(metadata.get("user_id") or ""),
        category=str(metadata.get("category") or ""),
        name=str(metadata.get("name") or ""),
        sub_category=metadata.get("sub_category") or metadata.get("subcategory"),
        color=metadata.get("color"),
        style=metadata.get("style"),
        pattern=metadata.get("pattern"),
        material=metadata.get("material"),
        occasion=metadata.get("occasion"),
        season=metadata.get("season"),
        fit=metadata.get("fit"),
        neckline=metadata.get("neckline"),
        sleeve_length=metadata.get("sleeve_length"),
        formality_score=metadata.get("formality_score"),
        tags=_ensure_list(metadata.get("tags")),
        brand=metadata.get("brand"),
        image_url=metadata.get("image_url"),
        created_at=metadata.get("created_at"),
    )


__all__ = ["WardrobeItem", "from_raw_metadata", "parse_timestamp"]
