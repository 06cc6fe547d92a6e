"""Translate listing query parameters into a normalized ``ProductQuerySpec``.

Every filter is one of four explicit options so the repository can evaluate
them with a single predicate translator:

* ``ABSENT``: the parameter was missing or unusable; no clause is emitted.
* ``Equals(value)``: exact match.
* ``Range(lower, upper)``: inclusive bounds, either side may be open.
* ``AnyOf(values)``: set membership.

Filters are lenient by omission: a value that does not parse simply drops its
clause. Only the pagination policy rejects requests (page or limit below 1).
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from django.conf import settings

from apps.api.exceptions import ApplicationError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="catalog", layer="query")

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

DEFAULT_SORT_FIELD = "price"

# Accepted ``sortBy`` values mapped onto model fields; camelCase is the wire form.
SORT_FIELDS: Dict[str, str] = {
    "price": "price",
    "name": "name",
    "discount": "discount",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "id": "id",
}

# Query attribute -> ORM lookup path the option applies to.
FILTER_LOOKUPS: Dict[str, str] = {
    "category": "category_id",
    "subcategory": "subcategory_id",
    "brand": "brand_id",
    "color": "color__code",
    "size": "size__code",
    "price": "price",
    "discount": "discount",
}


class Absent:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = Absent()


@dataclass(frozen=True)
class Equals:
    value: Any


@dataclass(frozen=True)
class Range:
    lower: Optional[Any] = None
    upper: Optional[Any] = None


@dataclass(frozen=True)
class AnyOf:
    values: Tuple[Any, ...]


FilterOption = Union[Absent, Equals, Range, AnyOf]


@dataclass(frozen=True)
class ProductQuerySpec:
    category: FilterOption = ABSENT
    subcategory: FilterOption = ABSENT
    brand: FilterOption = ABSENT
    color: FilterOption = ABSENT
    size: FilterOption = ABSENT
    price: FilterOption = ABSENT
    discount: FilterOption = ABSENT
    sort_field: str = SORT_FIELDS[DEFAULT_SORT_FIELD]
    descending: bool = False
    page: int = 1
    page_size: int = field(default=10)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def active_filters(self) -> Dict[str, FilterOption]:
        """Return ``{orm_lookup: option}`` for every filter that is not ABSENT."""
        active = {}
        for name, lookup in FILTER_LOOKUPS.items():
            option = getattr(self, name)
            if option is not ABSENT:
                active[lookup] = option
        return active

    def ordering(self) -> Tuple[str, ...]:
        prefix = "-" if self.descending else ""
        if self.sort_field == "id":
            return (f"{prefix}id",)
        return (f"{prefix}{self.sort_field}", f"{prefix}id")

    def cache_key(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in FILTER_LOOKUPS]
        parts.append(f"sort={'-' if self.descending else ''}{self.sort_field}")
        parts.append(f"page={self.page}")
        parts.append(f"size={self.page_size}")
        return "|".join(parts)


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    text = str(raw).strip()
    if not _INTEGER_PATTERN.match(text):
        return None
    return int(text)


def _parse_decimal(raw: Optional[str]) -> Optional[Decimal]:
    if raw is None or not str(raw).strip():
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _equals_int(raw: Optional[str]) -> FilterOption:
    value = _parse_int(raw)
    return ABSENT if value is None else Equals(value)


def _price_range(raw_min: Optional[str], raw_max: Optional[str]) -> FilterOption:
    lower = _parse_decimal(raw_min)
    upper = _parse_decimal(raw_max)
    if lower is None and upper is None:
        return ABSENT
    return Range(lower=lower, upper=upper)


def _code_set(raw: Optional[str]) -> FilterOption:
    if raw is None:
        return ABSENT
    codes = []
    for item in str(raw).split(","):
        code = item.strip().upper()
        if code and code not in codes:
            codes.append(code)
    return AnyOf(tuple(codes)) if codes else ABSENT


def _discount_flag(raw: Optional[str]) -> FilterOption:
    # discount is an integer column, so "> 0" is the range starting at 1
    if raw == "true":
        return Range(lower=1)
    if raw == "false":
        return Equals(0)
    return ABSENT


def _sort_field(raw: Optional[str]) -> str:
    if raw is None or raw == "":
        return SORT_FIELDS[DEFAULT_SORT_FIELD]
    resolved = SORT_FIELDS.get(raw)
    if resolved is None:
        logger.warning("Unknown sortBy value; falling back to default", sort_by=raw)
        return SORT_FIELDS[DEFAULT_SORT_FIELD]
    return resolved


def _positive_int(params: Mapping[str, Any], name: str, default: int) -> int:
    raw = params.get(name)
    value = _parse_int(raw)
    if value is None:
        return default
    if value < 1:
        raise ApplicationError(
            "VALIDATION_ERROR",
            f"{name} must be a positive integer",
            details={name: str(raw)},
        )
    return value


def build_product_query(params: Mapping[str, Any]) -> ProductQuerySpec:
    default_size = getattr(settings, "CATALOG_DEFAULT_PAGE_SIZE", 10)
    max_size = getattr(settings, "CATALOG_MAX_PAGE_SIZE", 100)

    page = _positive_int(params, "page", 1)
    page_size = min(_positive_int(params, "limit", default_size), max_size)

    spec = ProductQuerySpec(
        category=_equals_int(params.get("categoryId")),
        subcategory=_equals_int(params.get("subcategoryId")),
        brand=_equals_int(params.get("brandId")),
        color=_code_set(params.get("color")),
        size=_code_set(params.get("size")),
        price=_price_range(params.get("minPrice"), params.get("maxPrice")),
        discount=_discount_flag(params.get("discount")),
        sort_field=_sort_field(params.get("sortBy")),
        descending=params.get("sortOrder", "asc") != "asc",
        page=page,
        page_size=page_size,
    )
    logger.debug(
        "Built product query",
        filters=sorted(spec.active_filters()),
        sort=spec.sort_field,
        descending=spec.descending,
        page=spec.page,
        page_size=spec.page_size,
    )
    return spec
