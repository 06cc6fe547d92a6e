from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RefDTO:
    id: int
    name: str


@dataclass
class SubcategoryDTO:
    id: int
    name: str
    slug: str
    category_id: int


@dataclass
class CategoryDTO:
    id: int
    name: str
    slug: str
    subcategories: List[SubcategoryDTO] = field(default_factory=list)


@dataclass
class BrandDTO:
    id: int
    name: str
    slug: str


@dataclass
class ProductDTO:
    id: int
    name: str
    description: str
    price: str
    discount: int
    images: List[str]
    category: RefDTO
    subcategory: RefDTO
    brand: RefDTO
    color: Optional[str]
    size: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
