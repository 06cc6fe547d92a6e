import json
from typing import Any, Dict, Optional

from django.conf import settings
from django.http import HttpRequest

from apps.api.exceptions import ApplicationError, UnauthorizedError
from apps.api.utils import error_response
from apps.auth.gate import AuthGate
from apps.carts.serializers import MAX_ROW_ID
from apps.catalog.query import build_product_query
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")

_auth_gate = AuthGate()

# Views that need a verified caller before anything else runs.
AUTHENTICATED_VIEWS = frozenset({"CartListView", "CartAddView", "CartRemoveView"})

# Catalog write endpoints; staff or superuser only.
PRIVILEGED_VIEWS = frozenset(
    {
        "ProductCreateView",
        "ProductUpdateView",
        "ProductDeleteView",
        "CategoryCreateView",
        "CategoryUpdateView",
        "CategoryDeleteView",
        "SubcategoryCreateView",
        "SubcategoryUpdateView",
        "SubcategoryDeleteView",
        "BrandCreateView",
        "BrandUpdateView",
        "BrandDeleteView",
    }
)


def _is_privileged_user(user: Any) -> bool:
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def _authenticate(request: HttpRequest) -> Optional[Any]:
    """Resolve the caller, returning an error response when the credential is rejected.

    A user already attached to the request (session or test client) is trusted;
    otherwise the bearer header is verified by the auth gate. Runs before the
    view, so a rejected caller never reaches a store mutation.
    """
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        _set_validated_user(request, user)
        return None
    header = request.META.get("HTTP_AUTHORIZATION")
    try:
        user, token = _auth_gate.authenticate(header)
    except UnauthorizedError as exc:
        return exc.to_response()
    # Mirror DRF so downstream consumers see the authenticated user.
    request.user = user
    request.auth = token
    _set_validated_user(request, user)
    return None


def _set_validated_user(request: HttpRequest, user: Any) -> None:
    request.validated_user_id = int(user.id)
    request.is_privileged_user = _is_privileged_user(user)


def _extract_request_data(request: HttpRequest) -> Dict[str, Any]:
    data = getattr(request, "data", None)
    if data not in (None, {}):
        return data
    if request.content_type == "application/json":
        try:
            body = request.body.decode("utf-8") if hasattr(request, "body") else None
            parsed = json.loads(body) if body else {}
        except (ValueError, AttributeError, UnicodeDecodeError):
            return {}
        return parsed if isinstance(parsed, dict) else {}
    if hasattr(request, "POST"):
        post = request.POST
        if hasattr(post, "dict"):
            return post.dict()
        return dict(post)
    return {}


def _coerce_positive_int(value: Any, max_value: int = MAX_ROW_ID) -> Optional[int]:
    """Accept ints and digit strings; reject bools, floats with fractions and values outside 1..max_value."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        return None
    return number if 1 <= number <= max_value else None


def _validate_cart_add(request: HttpRequest, view_kwargs) -> Any:
    data = _extract_request_data(request) or {}
    raw_product_id = data.get("productId")
    if raw_product_id in (None, ""):
        logger.warning("Cart add missing productId", user_id=request.validated_user_id)
        return error_response(
            "VALIDATION_ERROR", "Product ID is required", {"productId": None}
        )
    product_id = _coerce_positive_int(raw_product_id)
    if product_id is None:
        logger.warning(
            "Cart add with invalid productId",
            user_id=request.validated_user_id,
            value=raw_product_id,
        )
        return error_response(
            "VALIDATION_ERROR",
            "productId must be a positive integer",
            {"productId": str(raw_product_id)},
        )
    raw_count = data.get("count", 1)
    max_quantity = getattr(settings, "CART_MAX_QUANTITY", 999)
    count = _coerce_positive_int(raw_count, max_value=max_quantity)
    if count is None:
        logger.warning(
            "Cart add with invalid count",
            user_id=request.validated_user_id,
            value=raw_count,
        )
        return error_response(
            "VALIDATION_ERROR",
            f"count must be an integer between 1 and {max_quantity}",
            {"count": str(raw_count)},
        )
    request.cart_product_id = product_id
    request.cart_count = count
    return None


def _validate_cart_remove(request: HttpRequest, view_kwargs) -> Any:
    raw_item_id = view_kwargs.get("item_id")
    item_id = _coerce_positive_int(raw_item_id)
    if item_id is None:
        logger.warning(
            "Cart remove with invalid itemId",
            user_id=request.validated_user_id,
            value=raw_item_id,
        )
        return error_response(
            "VALIDATION_ERROR",
            "Item ID is required",
            {"itemId": None if raw_item_id is None else str(raw_item_id)},
        )
    request.cart_product_id = item_id
    return None


def _validate_product_listing(request: HttpRequest, view_kwargs) -> Any:
    try:
        request.product_query = build_product_query(request.GET)
    except ApplicationError as exc:
        logger.warning("Product listing rejected", code=exc.code, details=exc.details)
        return exc.to_response()
    return None


def _validate_product_search(request: HttpRequest, view_kwargs) -> Any:
    term = (request.GET.get("q") or "").strip()
    if not term:
        logger.warning("Product search without a term")
        return error_response(
            "VALIDATION_ERROR", "Search term is required", {"q": None}
        )
    request.search_term = term
    return None


PAYLOAD_VALIDATORS = {
    ("CartAddView", "POST"): _validate_cart_add,
    ("CartRemoveView", "DELETE"): _validate_cart_remove,
    ("ProductListView", "GET"): _validate_product_listing,
    ("ProductSearchView", "GET"): _validate_product_search,
}


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Performs request level validation for specific API views.
    Returns a DRF Response when validation fails; otherwise None and
    attaches validated data to the request instance.
    """
    view_name = getattr(view_class, "__name__", "")
    method = getattr(request, "method", None)
    view_kwargs = view_kwargs or {}

    logger.debug("Running request context validation", view=view_name, method=method)

    if view_name in AUTHENTICATED_VIEWS or view_name in PRIVILEGED_VIEWS:
        response = _authenticate(request)
        if response is not None:
            logger.warning("Request requires authentication", view=view_name, method=method)
            return response

    if view_name in PRIVILEGED_VIEWS and not request.is_privileged_user:
        logger.warning(
            "Catalog modification forbidden",
            view=view_name,
            user_id=request.validated_user_id,
        )
        return error_response(
            "FORBIDDEN", "You do not have permission to manage the catalog"
        )

    validator = PAYLOAD_VALIDATORS.get((view_name, method))
    if validator is not None:
        return validator(request, view_kwargs)
    return None
