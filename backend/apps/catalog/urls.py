from django.urls import path

from .views import (
    BrandCreateView,
    BrandDeleteView,
    BrandDetailView,
    BrandListView,
    BrandUpdateView,
    CategoryCreateView,
    CategoryDeleteView,
    CategoryDetailView,
    CategoryListView,
    CategoryUpdateView,
    ProductCreateView,
    ProductDeleteView,
    ProductDetailView,
    ProductListView,
    ProductSearchView,
    ProductsByCategoryView,
    ProductsBySubcategoryView,
    ProductUpdateView,
    SubcategoryCreateView,
    SubcategoryDeleteView,
    SubcategoryUpdateView,
)

urlpatterns = [
    path("products/all", ProductListView.as_view(), name="api-products-list"),
    path("products/create", ProductCreateView.as_view(), name="api-products-create"),
    path("products/get/<int:product_id>", ProductDetailView.as_view(), name="api-products-detail"),
    path("products/update/<int:product_id>", ProductUpdateView.as_view(), name="api-products-update"),
    path("products/delete/<int:product_id>", ProductDeleteView.as_view(), name="api-products-delete"),
    path("products/search", ProductSearchView.as_view(), name="api-products-search"),
    path("products/category/<int:category_id>", ProductsByCategoryView.as_view(), name="api-products-by-category"),
    path(
        "products/subcategory/<int:subcategory_id>",
        ProductsBySubcategoryView.as_view(),
        name="api-products-by-subcategory",
    ),
    path("categories/create", CategoryCreateView.as_view(), name="api-categories-create"),
    path("categories/all", CategoryListView.as_view(), name="api-categories-list"),
    path("categories/get/<int:category_id>", CategoryDetailView.as_view(), name="api-categories-detail"),
    path("categories/update/<int:category_id>", CategoryUpdateView.as_view(), name="api-categories-update"),
    path("categories/delete/<int:category_id>", CategoryDeleteView.as_view(), name="api-categories-delete"),
    path("categories/subcategory/create", SubcategoryCreateView.as_view(), name="api-subcategories-create"),
    path(
        "categories/subcategory/update/<int:subcategory_id>",
        SubcategoryUpdateView.as_view(),
        name="api-subcategories-update",
    ),
    path(
        "categories/subcategory/delete/<int:subcategory_id>",
        SubcategoryDeleteView.as_view(),
        name="api-subcategories-delete",
    ),
    path("brands/create", BrandCreateView.as_view(), name="api-brands-create"),
    path("brands/all", BrandListView.as_view(), name="api-brands-list"),
    path("brands/get/<int:brand_id>", BrandDetailView.as_view(), name="api-brands-detail"),
    path("brands/update/<int:brand_id>", BrandUpdateView.as_view(), name="api-brands-update"),
    path("brands/delete/<int:brand_id>", BrandDeleteView.as_view(), name="api-brands-delete"),
]
