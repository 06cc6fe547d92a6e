from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, MessageSerializer
from apps.api.utils import error_response, is_service_error, service_error_response
from apps.common import get_logger
from .container import build_cart_service
from .serializers import CartAddSerializer, CartAdditionSerializer, CartReadSerializer

logger = get_logger(__name__).bind(component="carts", layer="view")

ERROR_RESPONSE = OpenApiResponse(response=ErrorResponseSerializer)


def _caller_id(request) -> int:
    user_id = getattr(request, "validated_user_id", None)
    return int(user_id if user_id is not None else request.user.id)


@extend_schema(tags=["Cart"])
class CartListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartListView")

    @extend_schema(
        operation_id="cart_retrieve",
        summary="Get the caller's cart",
        responses={200: CartReadSerializer, 401: ERROR_RESPONSE},
    )
    def get(self, request):
        user_id = _caller_id(request)
        cart = self.service.list_cart(user_id)
        self.log.debug("Cart listed", user_id=user_id, lines=len(cart.lines))
        return Response(CartReadSerializer(cart).data)


@extend_schema(tags=["Cart"])
class CartAddView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartAddView")

    @extend_schema(
        operation_id="cart_add",
        summary="Add product to cart",
        description="Adds count (default 1) units; repeated adds of a product accumulate on one line.",
        request=CartAddSerializer,
        responses={
            200: CartAdditionSerializer,
            400: ERROR_RESPONSE,
            401: ERROR_RESPONSE,
            404: ERROR_RESPONSE,
            409: ERROR_RESPONSE,
        },
    )
    def post(self, request):
        user_id = _caller_id(request)
        product_id = getattr(request, "cart_product_id", None)
        count = getattr(request, "cart_count", None)
        if product_id is None:
            serializer = CartAddSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            product_id = serializer.validated_data["productId"]
            count = serializer.validated_data["count"]
        self.log.info("Adding product to cart", user_id=user_id, product_id=product_id, count=count)
        result = self.service.add_to_cart(user_id, product_id, count or 1)
        if is_service_error(result):
            return service_error_response(result)
        return Response(CartAdditionSerializer(result).data)


@extend_schema(tags=["Cart"])
class CartRemoveView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartRemoveView")

    @extend_schema(
        operation_id="cart_remove",
        summary="Remove a product from the cart",
        parameters=[
            OpenApiParameter(
                "item_id", str, OpenApiParameter.PATH, description="Product ID of the cart line"
            )
        ],
        responses={200: MessageSerializer, 400: ERROR_RESPONSE, 401: ERROR_RESPONSE, 404: ERROR_RESPONSE},
    )
    def delete(self, request, item_id: str):
        user_id = _caller_id(request)
        product_id = getattr(request, "cart_product_id", None)
        if product_id is None:
            if not str(item_id).isdigit() or int(item_id) < 1:
                return error_response("VALIDATION_ERROR", "Item ID is required", {"itemId": str(item_id)})
            product_id = int(item_id)
        self.log.info("Removing product from cart", user_id=user_id, product_id=product_id)
        error = self.service.remove_from_cart(user_id, product_id)
        if error:
            return service_error_response(error)
        return Response({"message": "Item removed from cart successfully"})
