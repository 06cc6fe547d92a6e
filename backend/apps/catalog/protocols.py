from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol

from .models import Brand, Category, Color, Product, Size, Subcategory
from .query import ProductQuerySpec


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        ...

    def add(self, key: str, value: Any, timeout: Optional[int] = None) -> bool:
        ...

    def incr(self, key: str, delta: int = 1) -> int:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Product]:
        ...

    def exists(self, **filters) -> bool:
        ...

    def create(self, **data) -> Product:
        ...

    def apply_changes(self, product: Product, changes: dict) -> Product:
        ...

    def delete(self, product: Product) -> None:
        ...

    def find_page(self, spec: ProductQuerySpec) -> List[Product]:
        ...

    def count_matching(self, spec: ProductQuerySpec) -> int:
        ...

    def search(self, term: str) -> Iterable[Product]:
        ...

    def list_by_category(self, category_id: int) -> Iterable[Product]:
        ...

    def list_by_subcategory(self, subcategory_id: int) -> Iterable[Product]:
        ...


class CategoryRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Category]:
        ...

    def get(self, **filters) -> Optional[Category]:
        ...

    def exists(self, **filters) -> bool:
        ...

    def create(self, **data) -> Category:
        ...

    def update(self, obj: Category, **data) -> Category:
        ...

    def delete(self, obj: Category) -> None:
        ...


class SubcategoryRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Subcategory]:
        ...

    def exists(self, **filters) -> bool:
        ...

    def create(self, **data) -> Subcategory:
        ...

    def update(self, obj: Subcategory, **data) -> Subcategory:
        ...

    def delete(self, obj: Subcategory) -> None:
        ...


class BrandRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Brand]:
        ...

    def get(self, **filters) -> Optional[Brand]:
        ...

    def exists(self, **filters) -> bool:
        ...

    def create(self, **data) -> Brand:
        ...

    def update(self, obj: Brand, **data) -> Brand:
        ...

    def delete(self, obj: Brand) -> None:
        ...


class PaletteRepositoryProtocol(Protocol):
    def color_by_code(self, code: str) -> Optional[Color]:
        ...

    def size_by_code(self, code: str) -> Optional[Size]:
        ...
