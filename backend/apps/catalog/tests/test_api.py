from decimal import Decimal

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.catalog.models import Brand, Category, Color, Product, Size, Subcategory
from apps.users.models import User


class CatalogApiTestCase(APITestCase):
    def setUp(self):
        cache.clear()
        self.apparel = Category.objects.create(name="Apparel")
        self.footwear = Category.objects.create(name="Footwear")
        self.shirts = Subcategory.objects.create(category=self.apparel, name="Shirts")
        self.runners = Subcategory.objects.create(category=self.footwear, name="Running")
        self.brand = Brand.objects.create(name="Stride")
        self.staff = User.objects.create_user(
            username="staff", password="StaffPass123", email="staff@example.com", is_staff=True
        )
        self.shopper = User.objects.create_user(
            username="shopper", password="ShopPass123", email="shopper@example.com"
        )

    def make_product(self, name, price, category=None, subcategory=None, brand=None, **extra):
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            category=category or self.footwear,
            subcategory=subcategory or self.runners,
            brand=brand or self.brand,
            **extra,
        )

    def login_as(self, user):
        token = RefreshToken.for_user(user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")


class ProductListingApiTests(CatalogApiTestCase):
    def test_filtered_second_page(self):
        matching = [self.make_product(f"Runner {i}", f"{10 + i}.00") for i in range(1, 13)]
        self.make_product("Too pricey", "75.00")
        self.make_product("Other category", "20.00", self.apparel, self.shirts)

        response = self.client.get(
            reverse("api-products-list"),
            {
                "categoryId": self.footwear.id,
                "minPrice": "10",
                "maxPrice": "50",
                "page": 2,
                "limit": 5,
            },
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p["id"] for p in response.data["data"]], [p.id for p in matching[5:10]])
        self.assertEqual(
            response.data["meta"],
            {"totalProducts": 12, "totalPages": 3, "currentPage": 2, "pageSize": 5},
        )

    def test_sort_by_name_descending(self):
        for name in ("Alpha", "Charlie", "Bravo"):
            self.make_product(name, "10.00")
        response = self.client.get(
            reverse("api-products-list"), {"sortBy": "name", "sortOrder": "desc"}
        )
        self.assertEqual([p["name"] for p in response.data["data"]], ["Charlie", "Bravo", "Alpha"])

    def test_color_and_discount_filters(self):
        red = Color.objects.get(code="RED")
        self.make_product("Red sale", "10.00", color=red, discount=15)
        self.make_product("Red full", "10.00", color=red)
        self.make_product("Plain sale", "10.00", discount=5)
        response = self.client.get(
            reverse("api-products-list"), {"color": "red,blue", "discount": "true"}
        )
        self.assertEqual([p["name"] for p in response.data["data"]], ["Red sale"])
        self.assertEqual(response.data["data"][0]["color"], "RED")

    def listed_names(self, **params):
        response = self.client.get(reverse("api-products-list"), params)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return sorted(p["name"] for p in response.data["data"])

    def test_subcategory_filter(self):
        trail = Subcategory.objects.create(category=self.footwear, name="Trail")
        self.make_product("Road", "10.00")
        self.make_product("Mountain", "10.00", subcategory=trail)
        self.assertEqual(self.listed_names(subcategoryId=trail.id), ["Mountain"])

    def test_brand_filter(self):
        other = Brand.objects.create(name="Summit")
        self.make_product("Ours", "10.00")
        self.make_product("Theirs", "10.00", brand=other)
        self.assertEqual(self.listed_names(brandId=other.id), ["Theirs"])
        self.assertEqual(self.listed_names(brandId="abc"), ["Ours", "Theirs"])

    def test_size_filter(self):
        self.make_product("Medium", "10.00", size=Size.objects.get(code="M"))
        self.make_product("Large", "10.00", size=Size.objects.get(code="L"))
        self.make_product("Unsized", "10.00")
        self.assertEqual(self.listed_names(size=" m ,xl"), ["Medium"])
        self.assertEqual(self.listed_names(size="m,l"), ["Large", "Medium"])

    def test_discount_false_keeps_full_price_only(self):
        self.make_product("Sale", "10.00", discount=20)
        self.make_product("Full", "10.00")
        self.assertEqual(self.listed_names(discount="false"), ["Full"])
        self.assertEqual(self.listed_names(discount="maybe"), ["Full", "Sale"])

    def test_min_price_only_is_open_ended(self):
        self.make_product("Cheap", "9.99")
        self.make_product("Exact", "10.00")
        self.make_product("Premium", "250.00")
        self.assertEqual(self.listed_names(minPrice="10"), ["Exact", "Premium"])
        self.assertEqual(self.listed_names(maxPrice="10"), ["Cheap", "Exact"])

    def test_empty_catalog(self):
        response = self.client.get(reverse("api-products-list"))
        self.assertEqual(response.data["data"], [])
        self.assertEqual(response.data["meta"]["totalPages"], 0)

    def test_invalid_limit(self):
        response = self.client.get(reverse("api-products-list"), {"limit": 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_listing_reflects_writes_through_api(self):
        url = reverse("api-products-list")
        self.assertEqual(self.client.get(url).data["meta"]["totalProducts"], 0)
        self.login_as(self.staff)
        payload = {
            "name": "Tempo",
            "price": "30.00",
            "categoryId": self.footwear.id,
            "subcategoryId": self.runners.id,
            "brandId": self.brand.id,
        }
        created = self.client.post(reverse("api-products-create"), payload, format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.client.get(url).data["meta"]["totalProducts"], 1)


class ProductEndpointTests(CatalogApiTestCase):
    def test_catalog_writes_require_staff(self):
        payload = {"name": "x"}
        url = reverse("api-products-create")
        self.assertEqual(self.client.post(url, payload, format="json").status_code, 401)
        self.login_as(self.shopper)
        self.assertEqual(self.client.post(url, payload, format="json").status_code, 403)

    def test_create_rejects_mismatched_subcategory(self):
        self.login_as(self.staff)
        response = self.client.post(
            reverse("api-products-create"),
            {
                "name": "Odd",
                "price": "5.00",
                "categoryId": self.footwear.id,
                "subcategoryId": self.shirts.id,
                "brandId": self.brand.id,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Product.objects.exists())

    def test_detail_update_delete(self):
        product = self.make_product("Runner", "20.00")
        self.assertEqual(
            self.client.get(reverse("api-products-detail", args=[product.id])).data["name"],
            "Runner",
        )
        self.login_as(self.staff)
        updated = self.client.patch(
            reverse("api-products-update", args=[product.id]),
            {"price": "25.00", "size": "m"},
            format="json",
        )
        self.assertEqual(updated.status_code, status.HTTP_200_OK)
        self.assertEqual(updated.data["price"], "25.00")
        self.assertEqual(updated.data["size"], "M")
        deleted = self.client.delete(reverse("api-products-delete", args=[product.id]))
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        missing = self.client.get(reverse("api-products-detail", args=[product.id]))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_search_and_subcategory_listing(self):
        self.make_product("Trail Runner", "20.00")
        self.make_product("Oxford", "30.00", self.apparel, self.shirts)
        found = self.client.get(reverse("api-products-search"), {"q": "running"})
        self.assertEqual([p["name"] for p in found.data], ["Trail Runner"])
        empty_sub = Subcategory.objects.create(category=self.apparel, name="Socks")
        response = self.client.get(reverse("api-products-by-subcategory", args=[empty_sub.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        by_category = self.client.get(reverse("api-products-by-category", args=[self.apparel.id]))
        self.assertEqual([p["name"] for p in by_category.data], ["Oxford"])


class TaxonomyEndpointTests(CatalogApiTestCase):
    def test_category_listing_includes_subcategories(self):
        response = self.client.get(reverse("api-categories-list"))
        apparel = next(c for c in response.data if c["name"] == "Apparel")
        self.assertEqual([s["name"] for s in apparel["subcategories"]], ["Shirts"])

    def test_category_crud(self):
        self.login_as(self.staff)
        created = self.client.post(reverse("api-categories-create"), {"name": "Outdoor"}, format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        duplicate = self.client.post(reverse("api-categories-create"), {"name": "Outdoor"}, format="json")
        self.assertEqual(duplicate.status_code, status.HTTP_409_CONFLICT)
        category_id = created.data["id"]
        renamed = self.client.put(
            reverse("api-categories-update", args=[category_id]), {"name": "Camping"}, format="json"
        )
        self.assertEqual(renamed.data["name"], "Camping")
        deleted = self.client.delete(reverse("api-categories-delete", args=[category_id]))
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)

    def test_category_with_products_cannot_be_deleted(self):
        self.make_product("Runner", "20.00")
        self.login_as(self.staff)
        response = self.client.delete(reverse("api-categories-delete", args=[self.footwear.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Category.objects.filter(id=self.footwear.id).exists())

    def test_subcategory_crud(self):
        self.login_as(self.staff)
        created = self.client.post(
            reverse("api-subcategories-create"),
            {"name": "Trail", "categoryId": self.footwear.id},
            format="json",
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(created.data["categoryId"], self.footwear.id)
        moved = self.client.put(
            reverse("api-subcategories-update", args=[created.data["id"]]),
            {"name": "Hiking", "categoryId": self.apparel.id},
            format="json",
        )
        self.assertEqual(moved.data["categoryId"], self.apparel.id)
        deleted = self.client.delete(reverse("api-subcategories-delete", args=[created.data["id"]]))
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)

    def test_brand_crud(self):
        self.login_as(self.staff)
        created = self.client.post(reverse("api-brands-create"), {"name": "Summit"}, format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(created.data["message"], "Brand created successfully")
        brand_id = created.data["brand"]["id"]
        fetched = self.client.get(reverse("api-brands-detail", args=[brand_id]))
        self.assertEqual(fetched.data["name"], "Summit")
        deleted = self.client.delete(reverse("api-brands-delete", args=[brand_id]))
        self.assertEqual(deleted.data, {"message": "Brand deleted successfully"})
        listing = self.client.get(reverse("api-brands-list"))
        self.assertEqual([b["name"] for b in listing.data], ["Stride"])
