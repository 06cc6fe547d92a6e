from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    inline_serializer,
)
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, MessageSerializer, paginated_response
from apps.api.utils import error_response, is_service_error, service_error_response
from apps.common import get_logger
from .container import (
    build_brand_service,
    build_category_service,
    build_product_service,
    build_subcategory_service,
)
from .query import build_product_query
from .serializers import (
    BrandSerializer,
    CategorySerializer,
    NamedEntityWriteSerializer,
    ProductReadSerializer,
    ProductWriteSerializer,
    SubcategorySerializer,
    SubcategoryWriteSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")

ERROR_RESPONSE = OpenApiResponse(response=ErrorResponseSerializer)

LISTING_PARAMETERS = [
    OpenApiParameter("page", int, description="1-based page number (default 1)"),
    OpenApiParameter("limit", int, description="Page size (default 10, max 100)"),
    OpenApiParameter(
        "sortBy",
        str,
        description="price, name, discount, createdAt, updatedAt or id (default price)",
    ),
    OpenApiParameter("sortOrder", str, description="asc (default) or desc"),
    OpenApiParameter("categoryId", int),
    OpenApiParameter("subcategoryId", int),
    OpenApiParameter("brandId", int),
    OpenApiParameter("color", str, description="Comma separated color codes"),
    OpenApiParameter("size", str, description="Comma separated size codes"),
    OpenApiParameter("minPrice", str),
    OpenApiParameter("maxPrice", str),
    OpenApiParameter("discount", str, description="true: discounted only, false: full price only"),
]


@extend_schema(tags=["Products"])
class ProductListView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Filtered, sorted and paginated product listing. Cached results may be served.",
        parameters=LISTING_PARAMETERS,
        responses={200: paginated_response(ProductReadSerializer), 400: ERROR_RESPONSE},
    )
    def get(self, request):
        spec = getattr(request, "product_query", None)
        if spec is None:
            spec = build_product_query(request.query_params)
        self.log.debug("Handling product list request", page=spec.page, page_size=spec.page_size)
        products, meta = self.service.list_products(spec)
        return Response(
            {
                "data": ProductReadSerializer(products, many=True).data,
                "meta": meta.as_dict(),
            }
        )


@extend_schema(tags=["Products"])
class ProductCreateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_product_service()
    log = logger.bind(view="ProductCreateView")

    @extend_schema(
        operation_id="products_create",
        summary="Create product",
        request=ProductWriteSerializer,
        responses={
            201: inline_serializer(
                name="ProductCreated",
                fields={"message": serializers.CharField(), "product": ProductReadSerializer()},
            ),
            400: ERROR_RESPONSE,
            401: ERROR_RESPONSE,
            403: ERROR_RESPONSE,
        },
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Creating product via API", name=serializer.validated_data.get("name"))
        result = self.service.create_product(serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        self.log.info("Product created via API", product_id=result.id)
        return Response(
            {"message": "Success", "product": ProductReadSerializer(result).data},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Products"])
class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={200: ProductReadSerializer, 404: ERROR_RESPONSE},
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        dto = self.service.get_product(product_id)
        if not dto:
            return error_response("NOT_FOUND", "Product not found", {"id": str(product_id)})
        return Response(ProductReadSerializer(dto).data)


@extend_schema(tags=["Products"])
class ProductUpdateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_product_service()
    log = logger.bind(view="ProductUpdateView")

    @extend_schema(
        operation_id="products_partial_update",
        summary="Update product",
        request=ProductWriteSerializer,
        responses={
            200: ProductReadSerializer,
            400: ERROR_RESPONSE,
            401: ERROR_RESPONSE,
            403: ERROR_RESPONSE,
            404: ERROR_RESPONSE,
        },
    )
    def patch(self, request, product_id: int):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.log.info("Patching product", product_id=product_id)
        result = self.service.update_product(product_id, serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        return Response(ProductReadSerializer(result).data)


@extend_schema(tags=["Products"])
class ProductDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_product_service()
    log = logger.bind(view="ProductDeleteView")

    @extend_schema(
        operation_id="products_destroy",
        summary="Delete product",
        responses={204: None, 401: ERROR_RESPONSE, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def delete(self, request, product_id: int):
        self.log.info("Deleting product", product_id=product_id)
        error = self.service.delete_product(product_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Products"])
class ProductSearchView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductSearchView")

    @extend_schema(
        operation_id="products_search",
        summary="Search products",
        description="Case-insensitive match on product name, description, category and subcategory names.",
        parameters=[OpenApiParameter("q", str, required=True)],
        responses={200: ProductReadSerializer(many=True), 400: ERROR_RESPONSE},
    )
    def get(self, request):
        term = getattr(request, "search_term", None) or (request.query_params.get("q") or "").strip()
        if not term:
            return error_response("VALIDATION_ERROR", "Search term is required", {"q": None})
        products = self.service.search_products(term)
        self.log.debug("Search completed", term=term, results=len(products))
        return Response(ProductReadSerializer(products, many=True).data)


@extend_schema(tags=["Products"])
class ProductsByCategoryView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductsByCategoryView")

    @extend_schema(
        operation_id="products_by_category",
        summary="List products in a category",
        responses={200: ProductReadSerializer(many=True)},
    )
    def get(self, request, category_id: int):
        self.log.debug("Listing products by category", category_id=category_id)
        products = self.service.products_by_category(category_id)
        return Response(ProductReadSerializer(products, many=True).data)


@extend_schema(tags=["Products"])
class ProductsBySubcategoryView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductsBySubcategoryView")

    @extend_schema(
        operation_id="products_by_subcategory",
        summary="List products in a subcategory",
        responses={200: ProductReadSerializer(many=True), 404: ERROR_RESPONSE},
    )
    def get(self, request, subcategory_id: int):
        self.log.debug("Listing products by subcategory", subcategory_id=subcategory_id)
        result = self.service.products_by_subcategory(subcategory_id)
        if is_service_error(result):
            return service_error_response(result)
        return Response(ProductReadSerializer(result, many=True).data)


@extend_schema(tags=["Categories"])
class CategoryListView(APIView):
    permission_classes = [AllowAny]
    service = build_category_service()
    log = logger.bind(view="CategoryListView")

    @extend_schema(
        operation_id="categories_list",
        summary="List categories with their subcategories",
        responses={200: CategorySerializer(many=True)},
    )
    def get(self, request):
        self.log.debug("Listing categories")
        return Response(CategorySerializer(self.service.list_all(), many=True).data)


@extend_schema(tags=["Categories"])
class CategoryCreateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_category_service()
    log = logger.bind(view="CategoryCreateView")

    @extend_schema(
        operation_id="categories_create",
        summary="Create category",
        request=NamedEntityWriteSerializer,
        responses={201: CategorySerializer, 400: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def post(self, request):
        serializer = NamedEntityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Creating category", name=serializer.validated_data["name"])
        result = self.service.create(serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        return Response(CategorySerializer(result).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Categories"])
class CategoryDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_category_service()
    log = logger.bind(view="CategoryDetailView")

    @extend_schema(
        operation_id="categories_retrieve",
        summary="Get category",
        responses={200: CategorySerializer, 404: ERROR_RESPONSE},
    )
    def get(self, request, category_id: int):
        dto = self.service.get_one(category_id)
        if not dto:
            return error_response("NOT_FOUND", "Category not found", {"id": str(category_id)})
        return Response(CategorySerializer(dto).data)


@extend_schema(tags=["Categories"])
class CategoryUpdateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_category_service()
    log = logger.bind(view="CategoryUpdateView")

    @extend_schema(
        operation_id="categories_update",
        summary="Rename category",
        request=NamedEntityWriteSerializer,
        responses={200: CategorySerializer, 400: ERROR_RESPONSE, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def put(self, request, category_id: int):
        serializer = NamedEntityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Updating category", category_id=category_id)
        result = self.service.update(category_id, serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        return Response(CategorySerializer(result).data)


@extend_schema(tags=["Categories"])
class CategoryDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_category_service()
    log = logger.bind(view="CategoryDeleteView")

    @extend_schema(
        operation_id="categories_destroy",
        summary="Delete category",
        responses={204: None, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def delete(self, request, category_id: int):
        self.log.info("Deleting category", category_id=category_id)
        error = self.service.delete(category_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Categories"])
class SubcategoryCreateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_subcategory_service()
    log = logger.bind(view="SubcategoryCreateView")

    @extend_schema(
        operation_id="subcategories_create",
        summary="Create subcategory",
        request=SubcategoryWriteSerializer,
        responses={201: SubcategorySerializer, 400: ERROR_RESPONSE, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def post(self, request):
        serializer = SubcategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.service.create(serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        self.log.info("Subcategory created", subcategory_id=result.id)
        return Response(SubcategorySerializer(result).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Categories"])
class SubcategoryUpdateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_subcategory_service()
    log = logger.bind(view="SubcategoryUpdateView")

    @extend_schema(
        operation_id="subcategories_update",
        summary="Update subcategory",
        request=SubcategoryWriteSerializer,
        responses={200: SubcategorySerializer, 400: ERROR_RESPONSE, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def put(self, request, subcategory_id: int):
        serializer = SubcategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.service.update(subcategory_id, serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        return Response(SubcategorySerializer(result).data)


@extend_schema(tags=["Categories"])
class SubcategoryDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_subcategory_service()
    log = logger.bind(view="SubcategoryDeleteView")

    @extend_schema(
        operation_id="subcategories_destroy",
        summary="Delete subcategory",
        responses={204: None, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def delete(self, request, subcategory_id: int):
        error = self.service.delete(subcategory_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


BRAND_ENVELOPE = inline_serializer(
    name="BrandEnvelope",
    fields={"message": serializers.CharField(), "brand": BrandSerializer()},
)


@extend_schema(tags=["Brands"])
class BrandListView(APIView):
    permission_classes = [AllowAny]
    service = build_brand_service()
    log = logger.bind(view="BrandListView")

    @extend_schema(operation_id="brands_list", summary="List brands", responses={200: BrandSerializer(many=True)})
    def get(self, request):
        return Response(BrandSerializer(self.service.list_all(), many=True).data)


@extend_schema(tags=["Brands"])
class BrandCreateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_brand_service()
    log = logger.bind(view="BrandCreateView")

    @extend_schema(
        operation_id="brands_create",
        summary="Create brand",
        request=NamedEntityWriteSerializer,
        responses={201: BRAND_ENVELOPE, 400: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def post(self, request):
        serializer = NamedEntityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.service.create(serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        self.log.info("Brand created", brand_id=result.id)
        return Response(
            {"message": "Brand created successfully", "brand": BrandSerializer(result).data},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Brands"])
class BrandDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_brand_service()
    log = logger.bind(view="BrandDetailView")

    @extend_schema(operation_id="brands_retrieve", summary="Get brand", responses={200: BrandSerializer, 404: ERROR_RESPONSE})
    def get(self, request, brand_id: int):
        dto = self.service.get_one(brand_id)
        if not dto:
            return error_response("NOT_FOUND", "Brand not found", {"id": str(brand_id)})
        return Response(BrandSerializer(dto).data)


@extend_schema(tags=["Brands"])
class BrandUpdateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_brand_service()
    log = logger.bind(view="BrandUpdateView")

    @extend_schema(
        operation_id="brands_update",
        summary="Rename brand",
        request=NamedEntityWriteSerializer,
        responses={200: BRAND_ENVELOPE, 400: ERROR_RESPONSE, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def put(self, request, brand_id: int):
        serializer = NamedEntityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.service.update(brand_id, serializer.validated_data)
        if is_service_error(result):
            return service_error_response(result)
        return Response({"message": "Brand updated successfully", "brand": BrandSerializer(result).data})


@extend_schema(tags=["Brands"])
class BrandDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_brand_service()
    log = logger.bind(view="BrandDeleteView")

    @extend_schema(
        operation_id="brands_destroy",
        summary="Delete brand",
        responses={200: MessageSerializer, 404: ERROR_RESPONSE, 409: ERROR_RESPONSE},
    )
    def delete(self, request, brand_id: int):
        error = self.service.delete(brand_id)
        if error:
            return service_error_response(error)
        self.log.info("Brand deleted", brand_id=brand_id)
        return Response({"message": "Brand deleted successfully"})
