from django.urls import include, path

urlpatterns = [
    path("", include("apps.catalog.urls")),
    path("", include("apps.carts.urls")),
    path("", include("apps.auth.urls")),
]
