from __future__ import annotations

from django.http import JsonResponse
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AddressViewSet,
    CartViewSet,
    CheckoutView,
    DealerApplicationViewSet,
    OrderViewSet,
    PriceListViewSet,
    ProductViewSet,
)


def health_check(request):
    """
    Liveness endpoint for probes and load balancers.

    Returns:
        200 OK with {"status": "healthy", "version": "X.X.X"}
    """
    from orbis import __version__

    return JsonResponse({
        "status": "healthy",
        "version": __version__,
    })


router = DefaultRouter(trailing_slash=False)
router.register("products", ProductViewSet, basename="products")
router.register("cart", CartViewSet, basename="cart")
router.register("addresses", AddressViewSet, basename="addresses")
router.register("orders", OrderViewSet, basename="orders")
router.register("dealer-applications", DealerApplicationViewSet, basename="dealer-applications")
router.register("price-lists", PriceListViewSet, basename="price-lists")

urlpatterns = [
    path("health", health_check, name="health-check"),
    path("checkout", CheckoutView.as_view(), name="checkout"),
    path("", include(router.urls)),
]
