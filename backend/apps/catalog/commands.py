from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

# Marks a field the client did not send, as opposed to an explicit null.
UNSET: Any = object()


def _code(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip().upper()
    return text or None


@dataclass
class ProductCreateCommand:
    name: str
    price: Decimal
    category_id: int
    subcategory_id: int
    brand_id: int
    description: str = ""
    discount: int = 0
    images: List[str] = field(default_factory=list)
    color: Optional[str] = None
    size: Optional[str] = None

    @staticmethod
    def from_raw(payload: Dict[str, Any]):
        data = dict(payload or {})
        data.pop("id", None)
        return ProductCreateCommand(
            name=str(data.get("name", "")).strip(),
            price=Decimal(str(data.get("price", "0"))),
            category_id=int(data["categoryId"]),
            subcategory_id=int(data["subcategoryId"]),
            brand_id=int(data["brandId"]),
            description=str(data.get("description") or "").strip(),
            discount=int(data.get("discount") or 0),
            images=[str(url) for url in data.get("images") or []],
            color=_code(data.get("color")),
            size=_code(data.get("size")),
        )


@dataclass
class ProductUpdateCommand:
    """Partial update; only fields present in the payload are touched."""

    product_id: int
    name: Any = UNSET
    description: Any = UNSET
    price: Any = UNSET
    discount: Any = UNSET
    images: Any = UNSET
    category_id: Any = UNSET
    subcategory_id: Any = UNSET
    brand_id: Any = UNSET
    color: Any = UNSET
    size: Any = UNSET

    @staticmethod
    def from_raw(product_id: int, payload: Dict[str, Any]):
        data = dict(payload or {})
        cmd = ProductUpdateCommand(product_id=product_id)
        if "name" in data:
            cmd.name = str(data["name"]).strip()
        if "description" in data:
            cmd.description = str(data["description"] or "").strip()
        if "price" in data:
            cmd.price = Decimal(str(data["price"]))
        if "discount" in data:
            cmd.discount = int(data["discount"] or 0)
        if "images" in data:
            cmd.images = [str(url) for url in data["images"] or []]
        if "categoryId" in data:
            cmd.category_id = int(data["categoryId"])
        if "subcategoryId" in data:
            cmd.subcategory_id = int(data["subcategoryId"])
        if "brandId" in data:
            cmd.brand_id = int(data["brandId"])
        if "color" in data:
            cmd.color = _code(data["color"])
        if "size" in data:
            cmd.size = _code(data["size"])
        return cmd

    def provided(self) -> Dict[str, Any]:
        names = (
            "name",
            "description",
            "price",
            "discount",
            "images",
            "category_id",
            "subcategory_id",
            "brand_id",
            "color",
            "size",
        )
        return {
            name: getattr(self, name)
            for name in names
            if getattr(self, name) is not UNSET
        }
