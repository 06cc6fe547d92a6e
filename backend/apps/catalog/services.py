from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from django.db.models import ProtectedError

from apps.api.utils import ServiceError
from apps.common import get_logger
from .cache import ProductListingCache
from .commands import ProductCreateCommand, ProductUpdateCommand
from .dtos import BrandDTO, CategoryDTO, ProductDTO, SubcategoryDTO
from .mappers import BrandMapper, CategoryMapper, ProductMapper, SubcategoryMapper
from .models import Product
from .pagination import PageMeta, page_meta
from .protocols import (
    BrandRepositoryProtocol,
    CategoryRepositoryProtocol,
    PaletteRepositoryProtocol,
    ProductRepositoryProtocol,
    SubcategoryRepositoryProtocol,
)
from .query import ProductQuerySpec

logger = get_logger(__name__).bind(component="catalog", layer="service")


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        categories: CategoryRepositoryProtocol,
        subcategories: SubcategoryRepositoryProtocol,
        brands: BrandRepositoryProtocol,
        palette: PaletteRepositoryProtocol,
        listing_cache: ProductListingCache,
    ):
        self.products = products
        self.categories = categories
        self.subcategories = subcategories
        self.brands = brands
        self.palette = palette
        self.listing_cache = listing_cache
        self.logger = logger.bind(service="ProductService")

    def list_products(self, spec: ProductQuerySpec) -> Tuple[List[ProductDTO], PageMeta]:
        """Fetch one page of the filtered catalog plus metadata from a matching count."""
        # Resolved before the reads; a concurrent bump leaves this entry orphaned.
        cache_key = self.listing_cache.key_for(spec.cache_key())
        cached = self.listing_cache.get(cache_key)
        if cached is not None:
            self.logger.debug("Product listing served from cache", page=spec.page)
            return cached
        items = self.products.find_page(spec)
        total = self.products.count_matching(spec)
        result = (
            ProductMapper.many_to_dto(items),
            page_meta(total, spec.page_size, spec.page),
        )
        self.listing_cache.set(cache_key, result)
        self.logger.debug(
            "Product listing computed",
            page=spec.page,
            page_size=spec.page_size,
            returned=len(items),
            total=total,
        )
        return result

    def get_product(self, product_id: int) -> Optional[ProductDTO]:
        self.logger.debug("Fetching product", product_id=product_id)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.info("Product not found", product_id=product_id)
            return None
        return ProductMapper.to_dto(product)

    def search_products(self, term: str) -> List[ProductDTO]:
        self.logger.debug("Searching products", term=term)
        return ProductMapper.many_to_dto(self.products.search(term))

    def products_by_category(self, category_id: int) -> List[ProductDTO]:
        self.logger.debug("Listing products by category", category_id=category_id)
        return ProductMapper.many_to_dto(self.products.list_by_category(category_id))

    def products_by_subcategory(
        self, subcategory_id: int
    ) -> Union[List[ProductDTO], ServiceError]:
        self.logger.debug("Listing products by subcategory", subcategory_id=subcategory_id)
        products = ProductMapper.many_to_dto(self.products.list_by_subcategory(subcategory_id))
        if not products:
            self.logger.info("No products in subcategory", subcategory_id=subcategory_id)
            return (
                "NOT_FOUND",
                "No products found in this subcategory",
                {"subcategoryId": str(subcategory_id)},
            )
        return products

    def create_product(
        self, data: Union[Dict[str, Any], ProductCreateCommand]
    ) -> Union[ProductDTO, ServiceError]:
        cmd = data if isinstance(data, ProductCreateCommand) else ProductCreateCommand.from_raw(data)
        self.logger.info("Creating product", name=cmd.name)
        references = self._resolve_references(
            {
                "category_id": cmd.category_id,
                "subcategory_id": cmd.subcategory_id,
                "brand_id": cmd.brand_id,
                "color": cmd.color,
                "size": cmd.size,
            }
        )
        if isinstance(references, tuple):
            return references
        product: Product = self.products.create(
            name=cmd.name,
            description=cmd.description,
            price=cmd.price,
            discount=cmd.discount,
            images=cmd.images,
            **references,
        )
        self.listing_cache.invalidate()
        self.logger.info("Product created", product_id=product.id)
        return ProductMapper.to_dto(self.products.get(id=product.id))

    def update_product(
        self, product_id: int, data: Union[Dict[str, Any], ProductUpdateCommand]
    ) -> Union[ProductDTO, ServiceError]:
        cmd = (
            data
            if isinstance(data, ProductUpdateCommand)
            else ProductUpdateCommand.from_raw(product_id, data)
        )
        self.logger.info("Updating product", product_id=product_id)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product update failed: not found", product_id=product_id)
            return ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        changes = cmd.provided()
        reference_fields = {"category_id", "subcategory_id", "brand_id", "color", "size"}
        references = self._resolve_references(
            {k: v for k, v in changes.items() if k in reference_fields}, current=product
        )
        if isinstance(references, tuple):
            return references
        scalar_changes = {k: v for k, v in changes.items() if k not in reference_fields}
        updated = self.products.apply_changes(product, {**scalar_changes, **references})
        self.listing_cache.invalidate()
        self.logger.info("Product updated", product_id=product_id, fields=sorted(changes))
        return ProductMapper.to_dto(updated)

    def delete_product(self, product_id: int) -> Optional[ServiceError]:
        self.logger.info("Deleting product", product_id=product_id)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product deletion failed: not found", product_id=product_id)
            return ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        try:
            self.products.delete(product)
        except ProtectedError:
            self.logger.warning("Product deletion blocked by cart lines", product_id=product_id)
            return (
                "CONFLICT",
                "Product is referenced by cart lines and cannot be deleted",
                {"id": str(product_id)},
            )
        self.listing_cache.invalidate()
        self.logger.info("Product deleted", product_id=product_id)
        return None

    def _resolve_references(
        self, values: Dict[str, Any], current: Optional[Product] = None
    ) -> Union[Dict[str, Any], ServiceError]:
        """Check referenced rows exist and agree; returns model field kwargs or an error."""
        resolved: Dict[str, Any] = {}
        errors: Dict[str, str] = {}

        if "category_id" in values:
            if self.categories.exists(id=values["category_id"]):
                resolved["category_id"] = values["category_id"]
            else:
                errors["categoryId"] = "Category not found"
        if "brand_id" in values:
            if self.brands.exists(id=values["brand_id"]):
                resolved["brand_id"] = values["brand_id"]
            else:
                errors["brandId"] = "Brand not found"

        subcategory = None
        if "subcategory_id" in values:
            subcategory = self.subcategories.get(id=values["subcategory_id"])
            if subcategory is None:
                errors["subcategoryId"] = "Subcategory not found"
            else:
                resolved["subcategory_id"] = subcategory.id
        elif current is not None and "category_id" in values:
            subcategory = current.subcategory
        category_id = values.get("category_id", current.category_id if current else None)
        if subcategory is not None and category_id is not None and subcategory.category_id != category_id:
            errors["subcategoryId"] = "Subcategory does not belong to the category"

        for field, lookup in (("color", self.palette.color_by_code), ("size", self.palette.size_by_code)):
            if field not in values:
                continue
            code = values[field]
            if code is None:
                resolved[field] = None
                continue
            match = lookup(code)
            if match is None:
                errors[field] = f"Unknown {field} '{code}'"
            else:
                resolved[field] = match

        if errors:
            self.logger.warning("Rejected product references", errors=errors)
            return ("VALIDATION_ERROR", "Invalid product references", errors)
        return resolved


class TaxonomyService:
    """Create/read/update/delete for a uniquely named catalog entity."""

    entity_name = "Entity"
    mapper: Any = None

    def __init__(self, repository, listing_cache: ProductListingCache):
        self.repository = repository
        self.listing_cache = listing_cache
        self.logger = logger.bind(service=type(self).__name__)

    def _not_found(self, entity_id: int) -> ServiceError:
        return ("NOT_FOUND", f"{self.entity_name} not found", {"id": str(entity_id)})

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        matches = self.repository.list(name=name)
        return any(obj.id != exclude_id for obj in matches)

    def list_all(self):
        self.logger.debug("Listing entities")
        return self.mapper.many_to_dto(self.repository.list())

    def get_one(self, entity_id: int):
        self.logger.debug("Fetching entity", entity_id=entity_id)
        obj = self.repository.get(id=entity_id)
        if not obj:
            self.logger.info("Entity not found", entity_id=entity_id)
            return None
        return self.mapper.to_dto(obj)

    def create(self, data: Dict[str, Any]):
        name = data["name"].strip()
        if self._name_taken(name):
            self.logger.info("Create rejected: name taken", name=name)
            return ("CONFLICT", f"{self.entity_name} already exists", {"name": name})
        obj = self.repository.create(name=name, slug=data.get("slug") or "")
        self.logger.info("Entity created", entity_id=obj.id)
        return self.mapper.to_dto(self.repository.get(id=obj.id))

    def update(self, entity_id: int, data: Dict[str, Any]):
        obj = self.repository.get(id=entity_id)
        if not obj:
            self.logger.warning("Update failed: not found", entity_id=entity_id)
            return self._not_found(entity_id)
        name = data.get("name")
        if name is not None:
            name = name.strip()
            if self._name_taken(name, exclude_id=entity_id):
                self.logger.info("Update rejected: name taken", entity_id=entity_id, name=name)
                return ("CONFLICT", f"{self.entity_name} already exists", {"name": name})
        self.repository.update(obj, name=name, slug=data.get("slug"))
        # Names are embedded in cached product listings.
        self.listing_cache.invalidate()
        self.logger.info("Entity updated", entity_id=entity_id)
        return self.mapper.to_dto(self.repository.get(id=entity_id))

    def delete(self, entity_id: int) -> Optional[ServiceError]:
        obj = self.repository.get(id=entity_id)
        if not obj:
            self.logger.warning("Delete failed: not found", entity_id=entity_id)
            return self._not_found(entity_id)
        try:
            self.repository.delete(obj)
        except ProtectedError:
            self.logger.warning("Delete blocked by products", entity_id=entity_id)
            return (
                "CONFLICT",
                f"{self.entity_name} still has products and cannot be deleted",
                {"id": str(entity_id)},
            )
        self.listing_cache.invalidate()
        self.logger.info("Entity deleted", entity_id=entity_id)
        return None


class CategoryService(TaxonomyService):
    entity_name = "Category"
    mapper = CategoryMapper


class BrandService(TaxonomyService):
    entity_name = "Brand"
    mapper = BrandMapper


class SubcategoryService:
    def __init__(
        self,
        subcategories: SubcategoryRepositoryProtocol,
        categories: CategoryRepositoryProtocol,
        listing_cache: ProductListingCache,
    ):
        self.subcategories = subcategories
        self.categories = categories
        self.listing_cache = listing_cache
        self.logger = logger.bind(service="SubcategoryService")

    def _conflict(self, category_id: int, name: str, exclude_id: Optional[int] = None) -> bool:
        existing = self.subcategories.get(category_id=category_id, name=name)
        return existing is not None and existing.id != exclude_id

    def create(self, data: Dict[str, Any]) -> Union[SubcategoryDTO, ServiceError]:
        name = data["name"].strip()
        category_id = int(data["categoryId"])
        self.logger.info("Creating subcategory", name=name, category_id=category_id)
        if not self.categories.exists(id=category_id):
            return ("NOT_FOUND", "Category not found", {"categoryId": str(category_id)})
        if self._conflict(category_id, name):
            return ("CONFLICT", "Subcategory already exists in this category", {"name": name})
        sub = self.subcategories.create(
            name=name, category_id=category_id, slug=data.get("slug") or ""
        )
        self.logger.info("Subcategory created", subcategory_id=sub.id)
        return SubcategoryMapper.to_dto(sub)

    def update(self, subcategory_id: int, data: Dict[str, Any]) -> Union[SubcategoryDTO, ServiceError]:
        self.logger.info("Updating subcategory", subcategory_id=subcategory_id)
        sub = self.subcategories.get(id=subcategory_id)
        if not sub:
            return ("NOT_FOUND", "Subcategory not found", {"id": str(subcategory_id)})
        name = data["name"].strip()
        category_id = int(data["categoryId"])
        if not self.categories.exists(id=category_id):
            return ("NOT_FOUND", "Category not found", {"categoryId": str(category_id)})
        if self._conflict(category_id, name, exclude_id=subcategory_id):
            return ("CONFLICT", "Subcategory already exists in this category", {"name": name})
        self.subcategories.update(sub, name=name, category_id=category_id, slug=data.get("slug"))
        self.listing_cache.invalidate()
        return SubcategoryMapper.to_dto(self.subcategories.get(id=subcategory_id))

    def delete(self, subcategory_id: int) -> Optional[ServiceError]:
        self.logger.info("Deleting subcategory", subcategory_id=subcategory_id)
        sub = self.subcategories.get(id=subcategory_id)
        if not sub:
            return ("NOT_FOUND", "Subcategory not found", {"id": str(subcategory_id)})
        try:
            self.subcategories.delete(sub)
        except ProtectedError:
            self.logger.warning("Subcategory delete blocked by products", subcategory_id=subcategory_id)
            return (
                "CONFLICT",
                "Subcategory still has products and cannot be deleted",
                {"id": str(subcategory_id)},
            )
        self.listing_cache.invalidate()
        return None


__all__ = [
    "BrandService",
    "CategoryService",
    "ProductService",
    "SubcategoryService",
    "CategoryDTO",
    "BrandDTO",
]
