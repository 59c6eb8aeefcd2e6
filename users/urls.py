from django.urls import path
from .views import AddressViewSet

# =========================
# ADDRESS BOOK
# =========================
address_list = AddressViewSet.as_view({
    "get": "list",
    "post": "create",
})
address_detail = AddressViewSet.as_view({
    "get": "retrieve",
    "put": "update",
    "patch": "update",
    "delete": "destroy",
})
address_make_default = AddressViewSet.as_view({"post": "make_default"})

urlpatterns = [
    path("addresses/", address_list, name="address-list"),
    path("addresses/<int:pk>/", address_detail, name="address-detail"),
    path("addresses/<int:pk>/make-default/", address_make_default, name="address-make-default"),
]
