"""
Orbis API Views: REST endpoints for catalog, cart, checkout and back-office pricing.

Throttling:
    Configure in settings.py:

    REST_FRAMEWORK = {
        'DEFAULT_THROTTLE_RATES': {
            'orbis_cart': '300/minute',
            'orbis_checkout': '30/minute',
        }
    }
"""

from __future__ import annotations

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from orbis.conf import get_orbis_setting
from orbis.exceptions import CartError, CheckoutError, DealerError, InvalidTransition, OrbisError, PricingError
from orbis.models import Address, DealerApplication, Order, PriceList, ProductVariant
from orbis.services import (
    CartService,
    CatalogService,
    CheckoutService,
    DealerService,
    OrderService,
    PriceListService,
    PricingService,
    RoleService,
)

from .serializers import (
    AddressSerializer,
    CartAddSerializer,
    CartQuantitySerializer,
    CartSummarySerializer,
    CheckoutSerializer,
    DealerApplicationSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    PriceGridRowSerializer,
    PriceListSerializer,
    ProductSerializer,
    SetPriceSerializer,
)


logger = logging.getLogger(__name__)


def _get_actor(request) -> str:
    """Username of the caller, or 'api'."""
    user = getattr(request, "user", None)
    return getattr(user, "username", None) or "api"


def _error(exc: OrbisError) -> DRFValidationError:
    return DRFValidationError({"code": exc.code, "message": exc.message, "context": exc.context})


class CartRateThrottle(UserRateThrottle):
    scope = "orbis_cart"


class CheckoutRateThrottle(UserRateThrottle):
    """
    Rate limit for checkout submissions.

    Configure via 'orbis_checkout' in DEFAULT_THROTTLE_RATES.
    """

    scope = "orbis_checkout"


class OrbisPermissionsMixin:
    """
    DEFAULT_PERMISSION_CLASSES for every action, ADMIN_PERMISSION_CLASSES
    for the actions listed in `admin_actions`.
    """

    admin_actions: tuple[str, ...] = ()

    def get_permissions(self):
        key = "ADMIN_PERMISSION_CLASSES" if self.action in self.admin_actions else "DEFAULT_PERMISSION_CLASSES"
        return [permission() for permission in get_orbis_setting(key)]


class ProductViewSet(viewsets.ViewSet):
    """
    Storefront catalog, priced for the caller's role.

    Endpoints:
        GET /api/products?q=&category= - Listing, category page and search
        GET /api/products/{slug} - Product detail

    Guests see retail (b2c) prices. One price lookup per page.
    """

    permission_classes = [AllowAny]
    lookup_field = "slug"

    def list(self, request):
        products = CatalogService.products(
            query=request.query_params.get("q") or None,
            category=request.query_params.get("category") or None,
        )
        role = RoleService.resolve_role(request.user)
        priced = PricingService.price_products(products, role)
        return Response(ProductSerializer(priced, many=True).data)

    def retrieve(self, request, slug=None):
        product = CatalogService.product(slug)
        if product is None:
            raise NotFound("Ürün bulunamadı.")
        role = RoleService.resolve_role(request.user)
        PricingService.price_products([product], role)
        return Response(ProductSerializer(product).data)


class CartViewSet(OrbisPermissionsMixin, viewsets.ViewSet):
    """
    The caller's active cart.

    Endpoints:
        GET    /api/cart - Priced cart summary
        POST   /api/cart/items - Add {variant_id, quantity}
        POST   /api/cart/items/{item_id}/quantity - {quantity} or {change: 1|-1}
        DELETE /api/cart/items/{item_id} - Remove a line
    """

    throttle_classes = [CartRateThrottle]

    def list(self, request):
        summary = CartService.summary(request.user)
        return Response(CartSummarySerializer(summary).data)

    @action(detail=False, methods=["post"], url_path="items")
    def add_item(self, request):
        s = CartAddSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            CartService.add_item(
                request.user,
                variant_id=s.validated_data["variant_id"],
                quantity=s.validated_data["quantity"],
            )
        except CartError as e:
            raise _error(e)
        summary = CartService.summary(request.user)
        return Response(CartSummarySerializer(summary).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path=r"items/(?P<item_id>[0-9]+)/quantity")
    def set_quantity(self, request, item_id=None):
        s = CartQuantitySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            if "quantity" in s.validated_data:
                CartService.set_quantity(request.user, item_id, s.validated_data["quantity"])
            elif s.validated_data["change"] == 1:
                CartService.increment(request.user, item_id)
            else:
                CartService.decrement(request.user, item_id)
        except CartError as e:
            if e.code == "item_not_found":
                raise NotFound(e.message)
            raise _error(e)
        summary = CartService.summary(request.user)
        return Response(CartSummarySerializer(summary).data)

    @action(detail=False, methods=["delete"], url_path=r"items/(?P<item_id>[0-9]+)")
    def remove_item(self, request, item_id=None):
        try:
            CartService.remove_item(request.user, item_id)
        except CartError as e:
            raise NotFound(e.message)
        summary = CartService.summary(request.user)
        return Response(CartSummarySerializer(summary).data)


class CheckoutView(OrbisPermissionsMixin, APIView):
    """
    POST /api/checkout

    Places an order from the caller's active cart.

    Args:
        address_id: Selected shipping address
        idempotency_key: Optional; a repeated key replays the first result

    Returns:
        201: Order created
        400: Validation or persistence failure ({code, message, context})
    """

    throttle_classes = [CheckoutRateThrottle]
    action = "checkout"

    def post(self, request):
        s = CheckoutSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        logger.info(
            "Checkout requested",
            extra={
                "user_id": request.user.pk,
                "address_id": s.validated_data["address_id"],
                "idempotency_key": s.validated_data.get("idempotency_key"),
            },
        )
        try:
            result = CheckoutService.submit_checkout(
                request.user,
                address_id=s.validated_data["address_id"],
                idempotency_key=s.validated_data.get("idempotency_key"),
                ctx={"actor": _get_actor(request)},
            )
        except CheckoutError as e:
            logger.warning(
                "Checkout failed",
                extra={"user_id": request.user.pk, "error_code": e.code, "error_message": e.message},
            )
            raise _error(e)

        logger.info("Checkout successful", extra={"user_id": request.user.pk, "order_no": result["order_no"]})
        return Response(result, status=status.HTTP_201_CREATED)


class AddressViewSet(OrbisPermissionsMixin, mixins.ListModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
        GET  /api/addresses - The caller's addresses
        POST /api/addresses - Add an address
    """

    serializer_class = AddressSerializer

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)


class OrderViewSet(OrbisPermissionsMixin, viewsets.ReadOnlyModelViewSet):
    """
    Endpoints:
        GET  /api/orders - The caller's orders (staff: all orders)
        GET  /api/orders/{order_no} - Order detail with snapshot lines
        POST /api/orders/{order_no}/status - Status transition (staff only)

    Orders are immutable snapshots; only status moves.
    """

    serializer_class = OrderSerializer
    lookup_field = "order_no"
    admin_actions = ("set_status",)

    def get_queryset(self):
        user = self.request.user
        if user.is_staff:
            return Order.objects.prefetch_related("items").all()
        return OrderService.orders_for(user)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, order_no=None):
        order = self.get_object()
        s = OrderStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            OrderService.transition(order, s.validated_data["status"], actor=_get_actor(request))
        except InvalidTransition as e:
            raise _error(e)
        order.refresh_from_db()
        return Response(OrderSerializer(order).data)


class DealerApplicationViewSet(
    OrbisPermissionsMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Endpoints:
        GET  /api/dealer-applications - Own applications (staff: pending ones)
        POST /api/dealer-applications - Apply for the dealer (b2b) role
        POST /api/dealer-applications/{id}/approve - Staff only
        POST /api/dealer-applications/{id}/reject - Staff only
    """

    serializer_class = DealerApplicationSerializer
    admin_actions = ("approve", "reject")

    def get_queryset(self):
        user = self.request.user
        if user.is_staff:
            return DealerApplication.objects.filter(status=DealerApplication.Status.PENDING)
        return DealerApplication.objects.filter(user=user)

    def create(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            application = DealerService.apply(request.user, **s.validated_data)
        except DealerError as e:
            raise _error(e)
        return Response(self.get_serializer(application).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        return self._process(DealerService.approve, pk, request)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        return self._process(DealerService.reject, pk, request)

    def _process(self, operation, pk, request):
        try:
            application = operation(pk, actor=_get_actor(request))
        except DealerApplication.DoesNotExist:
            raise NotFound("Başvuru bulunamadı.")
        except DealerError as e:
            raise _error(e)
        return Response(self.get_serializer(application).data)


class PriceListViewSet(OrbisPermissionsMixin, viewsets.ReadOnlyModelViewSet):
    """
    Back-office pricing (staff only).

    Endpoints:
        GET  /api/price-lists - Price lists
        GET  /api/price-lists/{id}/grid - Every variant with this list's price
        POST /api/price-lists/{id}/prices - Upsert {variant_id, price}
    """

    queryset = PriceList.objects.all()
    serializer_class = PriceListSerializer
    admin_actions = ("list", "retrieve", "grid", "prices")

    @action(detail=True, methods=["get"])
    def grid(self, request, pk=None):
        rows = PriceListService.grid(self.get_object())
        return Response(PriceGridRowSerializer(rows, many=True).data)

    @action(detail=True, methods=["post"])
    def prices(self, request, pk=None):
        price_list = self.get_object()
        s = SetPriceSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        variant = ProductVariant.objects.filter(pk=s.validated_data["variant_id"]).first()
        if variant is None:
            raise NotFound("Varyant bulunamadı.")
        try:
            entry = PriceListService.set_price(price_list, variant, s.validated_data["price"])
        except PricingError as e:
            raise _error(e)
        return Response(
            {"variant_id": variant.pk, "price_list_id": price_list.pk, "price": str(entry.price)},
            status=status.HTTP_200_OK,
        )
