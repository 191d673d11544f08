"""
CheckoutService: Validates the active cart against live catalog state and commits an Order.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any

from django.db import DatabaseError, transaction
from django.utils import timezone

from orbis.conf import get_orbis_setting
from orbis.exceptions import CheckoutError, IdempotencyCacheHit
from orbis.ids import generate_order_no
from orbis.models import Address, Cart, CartItem, IdempotencyKey, Order, OrderItem
from orbis.monetary import ZERO, monetary_mult

from .pricing import PricingService
from .roles import RoleService


logger = logging.getLogger(__name__)


GENERIC_FAILURE_MESSAGE = "Sipariş oluşturulurken beklenmedik bir hata oluştu. Lütfen tekrar deneyin."


class CheckoutService:
    """
    Turns the user's active cart into an Order.

    States: collecting -> validating -> committing -> completed, or aborted.

    Pipeline:
    1. Check idempotency (return cached response if the key already succeeded)
    2. Resolve the shipping address (must belong to the user)
    3. Validating: re-read role, lock the active cart, re-read lines + live variants
    4. Validate every line (missing / inactive / stock) and price it
    5. Committing: Order + OrderItems + cart -> converted, in one transaction
    6. Cache response in IdempotencyKey

    Any failure in 2-5 aborts with nothing persisted. The cart row lock held
    from 3 to 5 serializes concurrent submits for the same cart: the second
    one finds no active cart.
    """

    STATE_VALIDATING = "validating"
    STATE_COMMITTING = "committing"

    @staticmethod
    def submit_checkout(
        user: Any,
        address_id: Any,
        idempotency_key: str | None = None,
        ctx: dict | None = None,
    ) -> dict:
        """
        Place an order from the user's active cart.

        Args:
            user: Authenticated user
            address_id: Selected shipping address
            idempotency_key: Optional key; a repeated key replays the first result
            ctx: Extra context (e.g. {"actor": "api"})

        Returns:
            dict with order_no, order_id, status, grand_total, currency, items_count

        Raises:
            CheckoutError: validation failure or persistence failure
        """
        ctx = ctx or {}
        if not idempotency_key:
            return CheckoutService._run(user, address_id, ctx)

        scope = f"checkout:{user.pk}"
        try:
            idem = CheckoutService._acquire_idempotency_lock(scope, idempotency_key)
        except IdempotencyCacheHit as cache_hit:
            logger.info("Checkout replayed from idempotency key %s for user=%s", idempotency_key, user.pk)
            return cache_hit.cached_response

        try:
            response = CheckoutService._run(user, address_id, ctx)
        except Exception:
            # Persists even though the checkout transaction rolled back.
            idem.status = IdempotencyKey.Status.FAILED
            idem.save(update_fields=["status"])
            raise

        idem.status = IdempotencyKey.Status.DONE
        idem.response_body = response
        idem.response_code = 201
        idem.save(update_fields=["status", "response_body", "response_code"])
        return response

    @staticmethod
    def _run(user: Any, address_id: Any, ctx: dict) -> dict:
        try:
            return CheckoutService._do_checkout(user, address_id, ctx)
        except CheckoutError as exc:
            logger.warning(
                "Checkout aborted for user=%s: %s (%s)",
                user.pk,
                exc.code,
                exc.message,
            )
            raise
        except DatabaseError as exc:
            logger.exception("Checkout persistence failure for user=%s", user.pk)
            raise CheckoutError(
                code="persistence_failure",
                message=GENERIC_FAILURE_MESSAGE,
                context={"stage": CheckoutService.STATE_COMMITTING},
            ) from exc

    @staticmethod
    def _acquire_idempotency_lock(scope: str, key: str) -> IdempotencyKey:
        """
        Acquire idempotency lock for a checkout.

        Returns:
            IdempotencyKey with status="in_progress"

        Raises:
            IdempotencyCacheHit: key already finished, cached response available
            CheckoutError: key is in progress in another request
        """
        ttl = timedelta(hours=get_orbis_setting("IDEMPOTENCY_TTL_HOURS"))
        with transaction.atomic():
            idem, created = IdempotencyKey.objects.get_or_create(
                scope=scope,
                key=key,
                defaults={
                    "status": IdempotencyKey.Status.IN_PROGRESS,
                    "expires_at": timezone.now() + ttl,
                },
            )
            if created:
                return idem

            idem = IdempotencyKey.objects.select_for_update().get(pk=idem.pk)
            if idem.status == IdempotencyKey.Status.DONE and idem.response_body:
                raise IdempotencyCacheHit(idem.response_body)
            if idem.status == IdempotencyKey.Status.IN_PROGRESS:
                if not (idem.expires_at and idem.expires_at <= timezone.now()):
                    raise CheckoutError(
                        code="in_progress",
                        message="Siparişiniz işleniyor, lütfen bekleyiniz.",
                        context={"idempotency_key": key},
                    )
                # Orphaned key: allow retry.
                idem.expires_at = timezone.now() + ttl
                idem.save(update_fields=["expires_at"])
                return idem

            idem.status = IdempotencyKey.Status.IN_PROGRESS
            idem.expires_at = timezone.now() + ttl
            idem.save(update_fields=["status", "expires_at"])
            return idem

    @staticmethod
    @transaction.atomic
    def _do_checkout(user: Any, address_id: Any, ctx: dict) -> dict:
        address = Address.objects.filter(pk=address_id, user=user).first()
        if address is None:
            raise CheckoutError(
                code="address_not_found",
                message="Lütfen adres seçimi yapınız.",
                context={"address_id": address_id},
            )

        # Validating: fresh reads only
        logger.debug("Checkout user=%s: %s", user.pk, CheckoutService.STATE_VALIDATING)
        role = RoleService.resolve_role(user)

        cart = (
            Cart.objects.select_for_update()
            .filter(user=user, status=Cart.Status.ACTIVE)
            .first()
        )
        if cart is None:
            raise CheckoutError(
                code="no_active_cart",
                message="Aktif sepet bulunamadı veya süre aşımı.",
                context={"stage": CheckoutService.STATE_VALIDATING},
            )

        items = list(
            CartItem.objects.filter(cart=cart)
            .select_related("variant__product")
            .order_by("id")
        )
        if not items:
            raise CheckoutError(
                code="empty_cart",
                message="Sepetiniz boş.",
                context={"stage": CheckoutService.STATE_VALIDATING, "cart_id": cart.pk},
            )

        lines, subtotal = CheckoutService._validate_lines(items, role)

        # Committing
        logger.debug("Checkout user=%s cart=%s: %s", user.pk, cart.pk, CheckoutService.STATE_COMMITTING)
        order = Order.objects.create(
            order_no=CheckoutService._allocate_order_no(),
            user=user,
            cart=cart,
            status=Order.Status.PENDING_PAYMENT,
            role=role,
            currency=get_orbis_setting("CURRENCY"),
            subtotal=subtotal,
            discount_total=ZERO,
            shipping_total=ZERO,
            grand_total=subtotal,
            shipping_address=address.to_snapshot(),
        )

        for line in lines:
            OrderItem.objects.create(order=order, **line)

        order.emit_event(
            event_type="created",
            actor=ctx.get("actor", "system"),
            payload={"cart_id": cart.pk, "role": role, "grand_total": str(order.grand_total)},
        )

        CheckoutService._close_cart(cart)

        logger.info(
            "Order %s placed for user=%s: %d lines, grand_total=%s %s",
            order.order_no,
            user.pk,
            len(lines),
            order.grand_total,
            order.currency,
        )

        return {
            "order_no": order.order_no,
            "order_id": order.pk,
            "status": order.status,
            "grand_total": str(order.grand_total),
            "currency": order.currency,
            "items_count": len(lines),
        }

    @staticmethod
    def _validate_lines(items: list[CartItem], role: str) -> tuple[list[dict], Decimal]:
        """
        All-or-nothing validation pass, in line order.

        Returns:
            (order line payloads with snapshotted values, subtotal)

        Raises:
            CheckoutError: on the first invalid line
        """
        lines: list[dict] = []
        subtotal = ZERO

        for item in items:
            variant = item.variant
            qty = item.quantity

            if variant is None:
                raise CheckoutError(
                    code="missing_variant",
                    message="Sepetteki bir ürünün kaydı bulunamadı (silinmiş olabilir).",
                    context={"stage": CheckoutService.STATE_VALIDATING, "cart_item_id": item.pk},
                )

            if not variant.is_active:
                raise CheckoutError(
                    code="variant_inactive",
                    message=f'"{variant.name}" ürünü şu anda satışa kapalı.',
                    context={
                        "stage": CheckoutService.STATE_VALIDATING,
                        "variant_id": variant.pk,
                        "variant_name": variant.name,
                    },
                )

            if variant.stock < qty:
                raise CheckoutError(
                    code="insufficient_stock",
                    message=f'"{variant.name}" için yeterli stok yok. Mevcut: {variant.stock}',
                    context={
                        "stage": CheckoutService.STATE_VALIDATING,
                        "variant_id": variant.pk,
                        "variant_name": variant.name,
                        "available": variant.stock,
                        "requested": qty,
                    },
                )

            unit_price = PricingService.resolve_price(variant.pk, variant.base_price, role)
            line_total = monetary_mult(qty, unit_price)
            subtotal += line_total

            lines.append(
                {
                    "variant_id": variant.pk,
                    "product_id": variant.product_id,
                    "quantity": qty,
                    "unit_price_snapshot": unit_price,
                    "line_total": line_total,
                    "product_name_snapshot": variant.name,
                    "sku_snapshot": variant.sku or "",
                    "attributes_snapshot": dict(variant.attributes or {}),
                }
            )

        return lines, subtotal

    @staticmethod
    def _allocate_order_no() -> str:
        """Random order number, retried until it is not taken."""
        attempts = get_orbis_setting("ORDER_NUMBER_MAX_ATTEMPTS")
        for _ in range(attempts):
            order_no = generate_order_no()
            if not Order.objects.filter(order_no=order_no).exists():
                return order_no
        raise CheckoutError(
            code="persistence_failure",
            message=GENERIC_FAILURE_MESSAGE,
            context={"stage": CheckoutService.STATE_COMMITTING, "reason": "order_no_exhausted"},
        )

    @staticmethod
    def _close_cart(cart: Cart) -> None:
        """
        Mark the source cart converted.

        With CART_CLOSE_FAILURE="ignore" a failure here is logged and the order
        is kept; the cart stays active until `reconcile_carts` closes it.
        """
        if get_orbis_setting("CART_CLOSE_FAILURE") == "ignore":
            try:
                with transaction.atomic():
                    CheckoutService._mark_converted(cart)
            except DatabaseError:
                logger.exception("Cart %s could not be closed; order kept, cart left active", cart.pk)
            return

        CheckoutService._mark_converted(cart)

    @staticmethod
    def _mark_converted(cart: Cart) -> None:
        cart.status = Cart.Status.CONVERTED
        cart.converted_at = timezone.now()
        cart.save(update_fields=["status", "converted_at", "updated_at"])
