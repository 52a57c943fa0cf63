"""Catalog product model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import normalize_key
from models.wardrobe_item import _ensure_list


@dataclass
class Product:
    """A purchasable catalog garment. Read-only from the engine's perspective."""

    product_id: str
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
    price: float = 0.0
    stock_quantity: Optional[int] = None
    is_active: bool = True
    images: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.product_id = str(self.product_id)
        self.tags = [tag for tag in _ensure_list(self.tags) if isinstance(tag, str)]
        self.images = [str(image) for image in _ensure_list(self.images)]
        self.is_active = _as_flag(self.is_active, default=True)
        try:
            self.price = float(self.price or 0.0)
        except (TypeError, ValueError):
            self.price = 0.0
        if self.stock_quantity is not None:
            try:
                self.stock_quantity = int(self.stock_quantity)
            except (TypeError, ValueError):
                self.stock_quantity = None

    @property
    def is_available(self) -> bool:
        """Active and not explicitly out of stock."""

        if not self.is_active:
            return False
        return self.stock_quantity is None or self.stock_quantity > 0

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


_FALSE_FLAGS = frozenset({"false", "0", "no", "off", "n", "f"})


def _as_flag(value: Any, default: bool) -> bool:
    """Read a loose boolean column; strings such as ``"false"`` and ``"0"`` are False."""

    if value is None:
        return default
    if isinstance(value, str):
        key = normalize_key(value)
        if not key:
            return default
        return key not in _FALSE_FLAGS
    return bool(value)


def product_from_raw(metadata: Dict[str, Any]) -> Product:
    """Build a :class:`Product` from a loose catalog row."""

    is_active = metadata.get("is_active", True)
    return Product(
        product_id=str(metadata.get("product_id") or metadata.get("id") or ""),
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
        price=metadata.get("price") or 0.0,
        stock_quantity=metadata.get("stock_quantity"),
        is_active=_as_flag(is_active, default=True),
        images=_ensure_list(metadata.get("images")),
    )


__all__ = ["Product", "product_from_raw"]
