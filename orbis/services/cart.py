"""
CartService: Active cart editing and priced cart summaries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from orbis.exceptions import CartError
from orbis.models import Cart, CartItem, ProductVariant
from orbis.monetary import ZERO, monetary_mult

from .pricing import PricingService
from .roles import RoleService


logger = logging.getLogger(__name__)


@dataclass
class PricedLine:
    """A cart line with its resolved unit price."""

    item_id: int | None
    variant_id: int | None
    name: str
    sku: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    product_name: str = ""
    # Variant was deleted; shown in the cart, rejected at checkout.
    missing: bool = False


@dataclass
class CartSummary:
    """Priced view of a cart."""

    role: str
    lines: list[PricedLine] = field(default_factory=list)
    grand_total: Decimal = ZERO
    cart_id: int | None = None

    @property
    def items_count(self) -> int:
        return sum(line.quantity for line in self.lines)


class CartService:
    """
    Service for the shopper's active cart.

    Every mutation goes through add / set_quantity / remove / clear; pricing is
    never stored on cart lines, it is recomputed on each read.
    """

    @staticmethod
    def get_active_cart(user: Any) -> Cart | None:
        return Cart.objects.filter(user=user, status=Cart.Status.ACTIVE).first()

    @staticmethod
    def get_or_create_active_cart(user: Any) -> Cart:
        """
        Return the user's active cart, creating it if needed.

        Safe under concurrent first calls: the insert is guarded by the
        `uniq_active_cart_per_user` constraint and a losing request re-reads
        the winner's row.
        """
        cart, created = Cart.objects.get_or_create(user=user, status=Cart.Status.ACTIVE)
        if created:
            logger.info("Active cart %s created for user=%s", cart.pk, user.pk)
        return cart

    @staticmethod
    def add_item(user: Any, variant_id: Any, quantity: int = 1) -> CartItem:
        """
        Add quantity units of a variant to the active cart.

        An existing line for the same variant is incremented.

        Raises:
            CartError: invalid quantity, unknown or inactive variant
        """
        if quantity is None or int(quantity) < 1:
            raise CartError(
                code="invalid_quantity",
                message="Adet en az 1 olmalıdır",
                context={"quantity": quantity},
            )
        quantity = int(quantity)

        variant = ProductVariant.objects.select_related("product").filter(pk=variant_id).first()
        if variant is None:
            raise CartError(
                code="variant_not_found",
                message="Ürün bulunamadı",
                context={"variant_id": variant_id},
            )
        if not variant.is_active or not variant.product.is_active:
            raise CartError(
                code="variant_inactive",
                message=f'"{variant.name}" ürünü şu anda satışa kapalı.',
                context={"variant_id": variant.pk, "variant_name": variant.name},
            )

        with transaction.atomic():
            cart = CartService.get_or_create_active_cart(user)
            item, created = CartItem.objects.get_or_create(
                cart=cart,
                variant=variant,
                defaults={"quantity": quantity},
            )
            if not created:
                CartItem.objects.filter(pk=item.pk).update(
                    quantity=F("quantity") + quantity,
                    updated_at=timezone.now(),
                )
                item.refresh_from_db()
            Cart.objects.filter(pk=cart.pk).update(updated_at=timezone.now())

        logger.debug("Cart %s: variant=%s qty=%s (+%s)", cart.pk, variant.pk, item.quantity, quantity)
        return item

    @staticmethod
    def set_quantity(user: Any, item_id: Any, quantity: int) -> CartItem | None:
        """
        Set the quantity of a line. Quantity below 1 removes the line.

        Returns:
            The updated line, or None when it was removed
        """
        item = CartService._get_item(user, item_id)
        if int(quantity) < 1:
            item.delete()
            logger.debug("Cart %s: line %s removed", item.cart_id, item_id)
            return None

        item.quantity = int(quantity)
        item.save(update_fields=["quantity", "updated_at"])
        return item

    @staticmethod
    def increment(user: Any, item_id: Any) -> CartItem | None:
        item = CartService._get_item(user, item_id)
        return CartService.set_quantity(user, item.pk, item.quantity + 1)

    @staticmethod
    def decrement(user: Any, item_id: Any) -> CartItem | None:
        item = CartService._get_item(user, item_id)
        return CartService.set_quantity(user, item.pk, item.quantity - 1)

    @staticmethod
    def remove_item(user: Any, item_id: Any) -> None:
        CartService.set_quantity(user, item_id, 0)

    @staticmethod
    def clear(user: Any) -> int:
        """Remove every line of the active cart. Returns the number removed."""
        cart = CartService.get_active_cart(user)
        if cart is None:
            return 0
        count, _ = cart.items.all().delete()
        return count

    @staticmethod
    def compute_cart(cart_items: Iterable[CartItem], role: str) -> CartSummary:
        """
        Price every line for role and total them.

        line_total = unit_price * quantity; grand_total = sum of line totals.
        Pure read: no writes, same inputs give the same result.
        """
        items = list(cart_items)
        prices = PricingService.resolve_prices(
            [item.variant for item in items if item.variant is not None],
            role,
        )

        summary = CartSummary(role=role)
        total = ZERO
        for item in items:
            variant = item.variant
            if variant is None:
                summary.lines.append(
                    PricedLine(
                        item_id=item.pk,
                        variant_id=None,
                        name="",
                        sku="",
                        quantity=item.quantity,
                        unit_price=ZERO,
                        line_total=ZERO,
                        missing=True,
                    )
                )
                continue

            unit_price = prices[variant.pk]
            line_total = monetary_mult(item.quantity, unit_price)
            total += line_total
            summary.lines.append(
                PricedLine(
                    item_id=item.pk,
                    variant_id=variant.pk,
                    name=variant.name,
                    sku=variant.sku,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                    product_name=CartService._product_name(variant),
                )
            )

        summary.grand_total = total
        return summary

    @staticmethod
    def summary(user: Any) -> CartSummary:
        """Fresh role + active cart + live variants, priced."""
        role = RoleService.resolve_role(user)
        cart = CartService.get_active_cart(user)
        if cart is None:
            return CartSummary(role=role)

        items = cart.items.select_related("variant__product").order_by("id")
        summary = CartService.compute_cart(items, role)
        summary.cart_id = cart.pk
        return summary

    # ------------------------------------------------------------------ internal

    @staticmethod
    def _get_item(user: Any, item_id: Any) -> CartItem:
        item = (
            CartItem.objects.select_related("cart")
            .filter(pk=item_id, cart__user=user, cart__status=Cart.Status.ACTIVE)
            .first()
        )
        if item is None:
            raise CartError(
                code="item_not_found",
                message="Sepet kalemi bulunamadı",
                context={"item_id": item_id},
            )
        return item

    @staticmethod
    def _product_name(variant: ProductVariant) -> str:
        product = getattr(variant, "product", None)
        return product.name if product is not None else ""
