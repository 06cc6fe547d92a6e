import unittest
from decimal import Decimal

from apps.catalog.commands import UNSET, ProductCreateCommand, ProductUpdateCommand


class ProductCommandTests(unittest.TestCase):
    def test_create_command_parses_payload_and_strips_id(self):
        cmd = ProductCreateCommand.from_raw(
            {
                "id": 999,
                "name": "  Runner  ",
                "price": "49.90",
                "categoryId": "2",
                "subcategoryId": 3,
                "brandId": 4,
                "images": ["https://cdn.example.com/a.png"],
                "color": " red ",
                "size": "",
            }
        )
        self.assertEqual(cmd.name, "Runner")
        self.assertEqual(cmd.price, Decimal("49.90"))
        self.assertEqual((cmd.category_id, cmd.subcategory_id, cmd.brand_id), (2, 3, 4))
        self.assertEqual(cmd.color, "RED")
        self.assertIsNone(cmd.size)
        self.assertEqual(cmd.discount, 0)
        self.assertIsNone(getattr(cmd, "id", None))

    def test_update_command_tracks_only_sent_fields(self):
        cmd = ProductUpdateCommand.from_raw(5, {"name": "New", "color": None})
        self.assertEqual(cmd.product_id, 5)
        self.assertIs(cmd.price, UNSET)
        self.assertEqual(cmd.provided(), {"name": "New", "color": None})

    def test_update_command_converts_ids(self):
        cmd = ProductUpdateCommand.from_raw(1, {"categoryId": "7", "discount": None})
        self.assertEqual(cmd.provided(), {"category_id": 7, "discount": 0})
