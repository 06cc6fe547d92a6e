import unittest
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from apps.catalog.mappers import BrandMapper, CategoryMapper, ProductMapper


class StubSubcategoryManager:
    def __init__(self, subcategories=None):
        self._subcategories = list(subcategories or [])

    def all(self):
        return list(self._subcategories)


def make_product(**overrides):
    fields = dict(
        id=1,
        name="Trail Shoe",
        description="Grippy",
        price=Decimal("59.90"),
        discount=10,
        images=["https://cdn.example.com/shoe.png"],
        category_id=2,
        category=SimpleNamespace(id=2, name="Footwear"),
        subcategory_id=5,
        subcategory=SimpleNamespace(id=5, name="Running"),
        brand_id=3,
        brand=SimpleNamespace(id=3, name="Stride"),
        color=SimpleNamespace(code="RED"),
        size=None,
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        updated_at=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class ProductMapperTests(unittest.TestCase):
    def test_maps_references_and_codes(self):
        dto = ProductMapper.to_dto(make_product())
        self.assertEqual(dto.price, "59.90")
        self.assertEqual(dto.category.name, "Footwear")
        self.assertEqual(dto.subcategory.id, 5)
        self.assertEqual(dto.brand.name, "Stride")
        self.assertEqual(dto.color, "RED")
        self.assertIsNone(dto.size)
        self.assertEqual(dto.created_at, "2024-05-01T12:00:00+00:00")
        self.assertIsNone(dto.updated_at)

    def test_images_default_to_empty_list(self):
        dto = ProductMapper.to_dto(make_product(images=None))
        self.assertEqual(dto.images, [])

    def test_many_to_dto(self):
        dtos = ProductMapper.many_to_dto([make_product(id=1), make_product(id=2)])
        self.assertEqual([d.id for d in dtos], [1, 2])


class TaxonomyMapperTests(unittest.TestCase):
    def test_category_includes_subcategories(self):
        category = SimpleNamespace(
            id=1,
            name="Apparel",
            slug="apparel",
            subcategories=StubSubcategoryManager(
                [SimpleNamespace(id=4, name="Shirts", slug=None, category_id=1)]
            ),
        )
        dto = CategoryMapper.to_dto(category)
        self.assertEqual(dto.slug, "apparel")
        self.assertEqual(len(dto.subcategories), 1)
        self.assertEqual(dto.subcategories[0].slug, "")
        self.assertEqual(dto.subcategories[0].category_id, 1)

    def test_brand(self):
        dto = BrandMapper.to_dto(SimpleNamespace(id=9, name="Stride", slug=""))
        self.assertEqual((dto.id, dto.name, dto.slug), (9, "Stride", ""))
