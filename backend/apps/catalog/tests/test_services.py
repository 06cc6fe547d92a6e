import unittest
from decimal import Decimal
from types import SimpleNamespace

from django.db.models import ProtectedError

from apps.catalog.cache import ProductListingCache
from apps.catalog.query import ProductQuerySpec
from apps.catalog.services import (
    BrandService,
    CategoryService,
    ProductService,
    SubcategoryService,
)


class FakeCache:
    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, timeout=None):
        self.store[key] = value

    def add(self, key, value, timeout=None):
        if key in self.store:
            return False
        self.store[key] = value
        return True

    def incr(self, key, delta=1):
        if key not in self.store:
            raise ValueError(f"Key '{key}' not found")
        self.store[key] += delta
        return self.store[key]


class StubManager:
    def __init__(self, items=None):
        self._items = list(items or [])

    def all(self):
        return list(self._items)


def make_product(product_id, category_id=1, subcategory_id=10, **extra):
    fields = dict(
        id=product_id,
        name=f"Product {product_id}",
        description="",
        price=Decimal("10.00"),
        discount=0,
        images=[],
        category_id=category_id,
        category=SimpleNamespace(id=category_id, name=f"Cat {category_id}"),
        subcategory_id=subcategory_id,
        subcategory=SimpleNamespace(
            id=subcategory_id, name=f"Sub {subcategory_id}", category_id=category_id
        ),
        brand_id=1,
        brand=SimpleNamespace(id=1, name="Brand"),
        color=None,
        size=None,
        created_at=None,
        updated_at=None,
    )
    fields.update(extra)
    return SimpleNamespace(**fields)


class FakeProductRepository:
    def __init__(self, products=None, total=None):
        self._products = {p.id: p for p in products or []}
        self.total = total
        self.page_calls = 0
        self.protected = set()

    def get(self, **filters):
        return self._products.get(filters.get("id"))

    def exists(self, **filters):
        return filters.get("id") in self._products

    def find_page(self, spec):
        self.page_calls += 1
        items = sorted(self._products.values(), key=lambda p: p.id)
        return items[spec.offset : spec.offset + spec.page_size]

    def count_matching(self, spec):
        return len(self._products) if self.total is None else self.total

    def search(self, term):
        return [p for p in self._products.values() if term.lower() in p.name.lower()]

    def list_by_category(self, category_id):
        return [p for p in self._products.values() if p.category_id == category_id]

    def list_by_subcategory(self, subcategory_id):
        return [p for p in self._products.values() if p.subcategory_id == subcategory_id]

    def create(self, **data):
        product_id = max(self._products, default=0) + 1
        product = make_product(
            product_id,
            category_id=data["category_id"],
            subcategory_id=data["subcategory_id"],
            name=data["name"],
            price=data["price"],
            color=data.get("color"),
            size=data.get("size"),
        )
        self._products[product_id] = product
        return product

    def apply_changes(self, product, changes):
        for key, value in changes.items():
            setattr(product, key, value)
        return product

    def delete(self, product):
        if product.id in self.protected:
            raise ProtectedError("referenced", [])
        self._products.pop(product.id, None)


class FakeRowRepository:
    """In-memory stand-in for the category/subcategory/brand repositories."""

    def __init__(self, rows=None):
        self._rows = {r.id: r for r in rows or []}
        self.protected = set()

    def get(self, **filters):
        for row in self._rows.values():
            if all(getattr(row, k, None) == v for k, v in filters.items()):
                return row
        return None

    def exists(self, **filters):
        return self.get(**filters) is not None

    def list(self, **filters):
        return [
            r for r in self._rows.values()
            if all(getattr(r, k, None) == v for k, v in filters.items())
        ]

    def create(self, **data):
        row_id = max(self._rows, default=0) + 1
        row = SimpleNamespace(id=row_id, subcategories=StubManager(), **data)
        self._rows[row_id] = row
        return row

    def update(self, obj, **data):
        for key, value in data.items():
            if value is not None:
                setattr(obj, key, value)
        return obj

    def delete(self, obj):
        if obj.id in self.protected:
            raise ProtectedError("referenced", [])
        self._rows.pop(obj.id, None)


class FakePalette:
    colors = {"RED": SimpleNamespace(code="RED")}
    sizes = {"M": SimpleNamespace(code="M")}

    def color_by_code(self, code):
        return self.colors.get(code)

    def size_by_code(self, code):
        return self.sizes.get(code)


def build_service(products=None, total=None):
    categories = FakeRowRepository(
        [
            SimpleNamespace(id=1, name="Cat 1", slug="", subcategories=StubManager()),
            SimpleNamespace(id=2, name="Cat 2", slug="", subcategories=StubManager()),
        ]
    )
    subcategories = FakeRowRepository(
        [
            SimpleNamespace(id=10, name="Sub 10", slug="", category_id=1),
            SimpleNamespace(id=20, name="Sub 20", slug="", category_id=2),
        ]
    )
    brands = FakeRowRepository([SimpleNamespace(id=1, name="Brand", slug="")])
    cache_backend = FakeCache()
    service = ProductService(
        products=FakeProductRepository(products, total=total),
        categories=categories,
        subcategories=subcategories,
        brands=brands,
        palette=FakePalette(),
        listing_cache=ProductListingCache(cache_backend),
    )
    return service, cache_backend


CREATE_PAYLOAD = {
    "name": "Jacket",
    "price": "80.00",
    "categoryId": 1,
    "subcategoryId": 10,
    "brandId": 1,
    "color": "red",
}


class ProductListingTests(unittest.TestCase):
    def test_second_page_and_meta(self):
        service, _ = build_service([make_product(i) for i in range(1, 13)])
        items, meta = service.list_products(ProductQuerySpec(page=2, page_size=5))
        self.assertEqual([p.id for p in items], [6, 7, 8, 9, 10])
        self.assertEqual(meta.as_dict(), {"totalProducts": 12, "totalPages": 3, "currentPage": 2, "pageSize": 5})

    def test_page_past_end_is_empty(self):
        service, _ = build_service([make_product(i) for i in range(1, 4)])
        items, meta = service.list_products(ProductQuerySpec(page=5, page_size=10))
        self.assertEqual(items, [])
        self.assertEqual(meta.total_pages, 1)
        self.assertEqual(meta.current_page, 5)

    def test_listing_is_cached_until_mutation(self):
        service, _ = build_service([make_product(1)])
        spec = ProductQuerySpec()
        service.list_products(spec)
        service.list_products(spec)
        self.assertEqual(service.products.page_calls, 1)
        service.create_product(CREATE_PAYLOAD)
        items, meta = service.list_products(spec)
        self.assertEqual(service.products.page_calls, 2)
        self.assertEqual(meta.total_items, 2)

    def test_disabled_cache_always_reads_through(self):
        service, _ = build_service([make_product(1)])
        service.listing_cache.enabled = False
        service.list_products(ProductQuerySpec())
        service.list_products(ProductQuerySpec())
        self.assertEqual(service.products.page_calls, 2)

    def test_write_during_listing_is_not_cached(self):
        service, _ = build_service([make_product(1)])
        repo = service.products
        original_count = repo.count_matching

        def count_then_write(spec):
            total = original_count(spec)
            repo.count_matching = original_count
            service.create_product(CREATE_PAYLOAD)
            return total

        repo.count_matching = count_then_write
        spec = ProductQuerySpec()
        _, first = service.list_products(spec)
        self.assertEqual(first.total_items, 1)
        _, after = service.list_products(spec)
        self.assertEqual(after.total_items, 2)


class ProductListingCacheTests(unittest.TestCase):
    def test_invalidate_moves_to_a_fresh_version_each_time(self):
        backend = FakeCache()
        cache = ProductListingCache(backend)
        keys = [cache.key_for("page=1")]
        for _ in range(2):
            cache.invalidate()
            keys.append(cache.key_for("page=1"))
        self.assertEqual(len(set(keys)), 3)
        self.assertEqual(backend.get("products:list:version"), 3)

    def test_entry_stored_under_old_key_is_not_served(self):
        cache = ProductListingCache(FakeCache())
        stale_key = cache.key_for("page=1")
        cache.invalidate()
        cache.set(stale_key, "stale")
        self.assertIsNone(cache.get(cache.key_for("page=1")))


class ProductWriteTests(unittest.TestCase):
    def test_create_resolves_palette_codes(self):
        service, _ = build_service()
        dto = service.create_product(CREATE_PAYLOAD)
        self.assertEqual(dto.name, "Jacket")
        self.assertEqual(dto.color, "RED")

    def test_create_rejects_unknown_references(self):
        service, _ = build_service()
        result = service.create_product(
            {**CREATE_PAYLOAD, "categoryId": 99, "brandId": 42, "size": "XXXL"}
        )
        code, _, details = result
        self.assertEqual(code, "VALIDATION_ERROR")
        self.assertIn("categoryId", details)
        self.assertIn("brandId", details)
        self.assertIn("size", details)

    def test_create_rejects_subcategory_of_other_category(self):
        service, _ = build_service()
        result = service.create_product({**CREATE_PAYLOAD, "subcategoryId": 20})
        self.assertEqual(result[0], "VALIDATION_ERROR")
        self.assertEqual(result[2], {"subcategoryId": "Subcategory does not belong to the category"})

    def test_update_moving_category_requires_matching_subcategory(self):
        service, _ = build_service([make_product(1)])
        result = service.update_product(1, {"categoryId": 2})
        self.assertEqual(result[0], "VALIDATION_ERROR")
        dto = service.update_product(1, {"categoryId": 2, "subcategoryId": 20})
        self.assertEqual(dto.category.id, 2)

    def test_update_scalar_fields(self):
        service, _ = build_service([make_product(1)])
        dto = service.update_product(1, {"name": "Renamed", "price": "12.50"})
        self.assertEqual(dto.name, "Renamed")
        self.assertEqual(dto.price, "12.50")

    def test_update_missing_product(self):
        service, _ = build_service()
        self.assertEqual(service.update_product(3, {"name": "x"})[0], "NOT_FOUND")

    def test_delete_referenced_product_conflicts(self):
        service, _ = build_service([make_product(1)])
        service.products.protected.add(1)
        self.assertEqual(service.delete_product(1)[0], "CONFLICT")
        self.assertIsNotNone(service.get_product(1))

    def test_delete(self):
        service, _ = build_service([make_product(1)])
        self.assertIsNone(service.delete_product(1))
        self.assertIsNone(service.get_product(1))
        self.assertEqual(service.delete_product(1)[0], "NOT_FOUND")


class ProductLookupTests(unittest.TestCase):
    def test_search_and_category_listing(self):
        service, _ = build_service(
            [make_product(1, name="Blue Jacket"), make_product(2, category_id=2, subcategory_id=20)]
        )
        self.assertEqual([p.id for p in service.search_products("jacket")], [1])
        self.assertEqual([p.id for p in service.products_by_category(2)], [2])

    def test_empty_subcategory_is_not_found(self):
        service, _ = build_service([make_product(1)])
        self.assertEqual(len(service.products_by_subcategory(10)), 1)
        self.assertEqual(service.products_by_subcategory(20)[0], "NOT_FOUND")


class TaxonomyServiceTests(unittest.TestCase):
    def setUp(self):
        self.cache = ProductListingCache(FakeCache())

    def test_category_lifecycle(self):
        service = CategoryService(FakeRowRepository(), self.cache)
        created = service.create({"name": " Apparel "})
        self.assertEqual(created.name, "Apparel")
        self.assertEqual(service.create({"name": "Apparel"})[0], "CONFLICT")
        renamed = service.update(created.id, {"name": "Clothing"})
        self.assertEqual(renamed.name, "Clothing")
        self.assertIsNone(service.delete(created.id))
        self.assertIsNone(service.get_one(created.id))

    def test_update_keeps_own_name(self):
        service = BrandService(FakeRowRepository(), self.cache)
        brand = service.create({"name": "Stride"})
        self.assertEqual(service.update(brand.id, {"name": "Stride"}).name, "Stride")

    def test_delete_with_products_conflicts(self):
        repo = FakeRowRepository()
        service = BrandService(repo, self.cache)
        brand = service.create({"name": "Stride"})
        repo.protected.add(brand.id)
        self.assertEqual(service.delete(brand.id)[0], "CONFLICT")

    def test_missing_entity(self):
        service = BrandService(FakeRowRepository(), self.cache)
        self.assertEqual(service.update(7, {"name": "x"})[0], "NOT_FOUND")
        self.assertEqual(service.delete(7)[0], "NOT_FOUND")

    def test_subcategory_requires_existing_category(self):
        categories = FakeRowRepository([SimpleNamespace(id=1, name="Apparel")])
        service = SubcategoryService(FakeRowRepository(), categories, self.cache)
        self.assertEqual(service.create({"name": "Shirts", "categoryId": 9})[0], "NOT_FOUND")
        created = service.create({"name": "Shirts", "categoryId": 1})
        self.assertEqual(created.category_id, 1)
        self.assertEqual(service.create({"name": "Shirts", "categoryId": 1})[0], "CONFLICT")
