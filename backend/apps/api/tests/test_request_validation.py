import json
import types

from rest_framework.test import APIRequestFactory

from apps.api.middleware import RequestValidationMiddleware
from apps.api.validation import (
    _coerce_positive_int,
    _extract_request_data,
    validate_request_context,
)
from apps.carts.views import CartAddView, CartListView, CartRemoveView
from apps.catalog.query import Equals
from apps.catalog.views import (
    BrandCreateView,
    CategoryListView,
    ProductListView,
    ProductSearchView,
)

factory = APIRequestFactory()


def _user(user_id=42, staff=False, superuser=False):
    return types.SimpleNamespace(
        id=user_id, is_authenticated=True, is_staff=staff, is_superuser=superuser
    )


def test_public_views_pass_through():
    request = factory.get("/categories/all")
    assert validate_request_context(request, CategoryListView, {}) is None


def test_authenticated_user_is_recorded():
    request = factory.get("/cart")
    request.user = _user(42)
    assert validate_request_context(request, CartListView, {}) is None
    assert request.validated_user_id == 42
    assert request.is_privileged_user is False


def test_cart_view_without_credential_is_unauthorized():
    request = factory.get("/cart")
    response = validate_request_context(request, CartListView, {})
    assert response.status_code == 401
    assert response.data["error"]["message"] == "Authentication required"
    assert response["WWW-Authenticate"].startswith("Bearer")


def test_cart_view_with_wrong_scheme():
    request = factory.get("/cart", HTTP_AUTHORIZATION="Token abc")
    response = validate_request_context(request, CartListView, {})
    assert response.status_code == 401
    assert response.data["error"]["message"] == "Authorization header must use the Bearer scheme"


def test_catalog_write_requires_privilege():
    request = factory.post("/brands/create", {"name": "Stride"}, format="json")
    request.user = _user()
    response = validate_request_context(request, BrandCreateView, {})
    assert response.status_code == 403
    assert response.data["error"]["code"] == "FORBIDDEN"


def test_superuser_may_write_catalog():
    request = factory.post("/brands/create", {"name": "Stride"}, format="json")
    request.user = _user(superuser=True)
    assert validate_request_context(request, BrandCreateView, {}) is None
    assert request.is_privileged_user is True


def test_cart_add_sets_product_and_default_count():
    request = factory.post("/cart/add", {"productId": "7"}, format="json")
    request.user = _user()
    assert validate_request_context(request, CartAddView, {}) is None
    assert request.cart_product_id == 7
    assert request.cart_count == 1


def test_cart_add_missing_product_id():
    request = factory.post("/cart/add", {}, format="json")
    request.user = _user()
    response = validate_request_context(request, CartAddView, {})
    assert response.status_code == 400
    assert response.data["error"]["message"] == "Product ID is required"


def test_cart_add_rejects_fractional_count():
    request = factory.post("/cart/add", {"productId": 7, "count": 1.5}, format="json")
    request.user = _user()
    response = validate_request_context(request, CartAddView, {})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"count": "1.5"}


def test_cart_add_rejects_count_above_limit(settings):
    settings.CART_MAX_QUANTITY = 5
    request = factory.post("/cart/add", {"productId": 7, "count": 6}, format="json")
    request.user = _user()
    response = validate_request_context(request, CartAddView, {})
    assert response.status_code == 400
    assert response.data["error"]["message"] == "count must be an integer between 1 and 5"


def test_cart_remove_requires_numeric_item():
    request = factory.delete("/cart/delete/abc")
    request.user = _user()
    response = validate_request_context(request, CartRemoveView, {"item_id": "abc"})
    assert response.status_code == 400
    assert response.data["error"]["message"] == "Item ID is required"


def test_cart_remove_sets_product_id():
    request = factory.delete("/cart/delete/9")
    request.user = _user()
    assert validate_request_context(request, CartRemoveView, {"item_id": "9"}) is None
    assert request.cart_product_id == 9


def test_product_listing_attaches_query():
    request = factory.get("/products/all", {"categoryId": "3", "page": "2"})
    assert validate_request_context(request, ProductListView, {}) is None
    assert request.product_query.category == Equals(3)
    assert request.product_query.page == 2


def test_product_listing_rejects_bad_page():
    request = factory.get("/products/all", {"page": "-1"})
    response = validate_request_context(request, ProductListView, {})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"page": "-1"}


def test_product_search_requires_term():
    request = factory.get("/products/search")
    response = validate_request_context(request, ProductSearchView, {})
    assert response.status_code == 400


def test_extract_request_data_from_json_body():
    request = factory.post("/cart/add", json.dumps({"productId": 1}), content_type="application/json")
    assert _extract_request_data(request) == {"productId": 1}


def test_coerce_positive_int():
    assert _coerce_positive_int("12") == 12
    assert _coerce_positive_int(3.0) == 3
    assert _coerce_positive_int(True) is None
    assert _coerce_positive_int("0") is None
    assert _coerce_positive_int("-4") is None
    assert _coerce_positive_int("4a") is None
    assert _coerce_positive_int(10**20) is None
    assert _coerce_positive_int("6", max_value=5) is None
    assert _coerce_positive_int(5, max_value=5) == 5


def test_middleware_no_view_class_returns_none():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/health/live")
    response = middleware.process_view(request, lambda req: req, [], {})
    assert response is None


def test_middleware_renders_blocking_response():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.post("/cart/add", {"productId": 7}, format="json")
    view_func = CartAddView.as_view()
    response = middleware.process_view(request, view_func, [], {})
    assert response.status_code == 401
    body = json.loads(response.content)
    assert body["error"]["code"] == "UNAUTHORIZED"
