from django.urls import path

from .views import CartAddView, CartListView, CartRemoveView

urlpatterns = [
    path("cart", CartListView.as_view(), name="cart-detail"),
    path("cart/add", CartAddView.as_view(), name="cart-add"),
    path("cart/delete/<str:item_id>", CartRemoveView.as_view(), name="cart-remove"),
]
