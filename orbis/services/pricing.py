"""
PricingService: Role-based price resolution.

PriceListService: Back-office price grid (read + upsert).
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from django.db import transaction

from orbis.exceptions import PricingError
from orbis.models import PriceList, ProductVariant, VariantPrice
from orbis.monetary import ZERO, to_money


logger = logging.getLogger(__name__)


B2B_ROLE = "b2b"


class PricingService:
    """
    Effective unit price for a variant and a role.

    Rules:
    1. role != "b2b": base price, no query at all. Non-dealers never read
       dealer price rows. A negative base price is priced at zero.
    2. role == "b2b": newest active entry of an active b2b price list
       (created_at desc, id desc); base price when there is none.
    3. Never raises. Lookup errors are logged and fall back to the base price.
    """

    @staticmethod
    def _active_entries(role: str):
        return VariantPrice.objects.filter(
            is_active=True,
            price_list__is_active=True,
            price_list__role=role,
        )

    @staticmethod
    def _base(variant_id: Any, base_price: Any) -> Decimal:
        base = to_money(base_price)
        if base < ZERO:
            logger.warning("Negative base price %s for variant=%s, priced at zero", base, variant_id)
            return ZERO
        return base

    @staticmethod
    def resolve_price(variant_id: Any, base_price: Any, role: str) -> Decimal:
        base = PricingService._base(variant_id, base_price)
        if role != B2B_ROLE:
            return base

        try:
            with transaction.atomic():
                price = (
                    PricingService._active_entries(role)
                    .filter(variant_id=variant_id)
                    .order_by("-created_at", "-id")
                    .values_list("price", flat=True)
                    .first()
                )
        except Exception:
            logger.exception("PricingService.resolve_price lookup failed for variant=%s", variant_id)
            return base

        if price is None or price < 0:
            return base
        return to_money(price)

    @staticmethod
    def resolve_prices(variants: Iterable[Any], role: str) -> dict[Any, Decimal]:
        """
        Batched resolve_price for a page of variants.

        One query for the whole batch; the first row per variant in
        (created_at desc, id desc) order wins.

        Args:
            variants: objects with `pk` and `base_price`

        Returns:
            {variant_pk: effective unit price}
        """
        prices = {variant.pk: PricingService._base(variant.pk, variant.base_price) for variant in variants}
        if role != B2B_ROLE or not prices:
            return prices

        try:
            with transaction.atomic():
                rows = list(
                    PricingService._active_entries(role)
                    .filter(variant_id__in=list(prices))
                    .order_by("variant_id", "-created_at", "-id")
                    .values_list("variant_id", "price")
                )
        except Exception:
            logger.exception("PricingService.resolve_prices lookup failed for %d variants", len(prices))
            return prices

        seen: set = set()
        for variant_id, price in rows:
            if variant_id in seen:
                continue
            seen.add(variant_id)
            if price is not None and price >= 0:
                prices[variant_id] = to_money(price)
        return prices

    @staticmethod
    def price_products(products: Iterable[Any], role: str) -> list[Any]:
        """
        Attach `price` to every variant of every product.

        Products are expected to carry `active_variants` (see
        CatalogService.products); otherwise `variants.all()` is used.
        """
        products = list(products)
        variants = [
            variant
            for product in products
            for variant in PricingService._variants_of(product)
        ]
        prices = PricingService.resolve_prices(variants, role)
        for variant in variants:
            variant.price = prices[variant.pk]
        return products

    @staticmethod
    def _variants_of(product: Any) -> list[Any]:
        if hasattr(product, "active_variants"):
            return product.active_variants
        return list(product.variants.all())


class PriceListService:
    """
    Admin pricing grid for one price list.
    """

    @staticmethod
    def grid(price_list: PriceList) -> list[dict]:
        """
        One row per variant, with this list's price or None.

        Sorted by product name, then variant name.
        """
        list_prices = dict(price_list.entries.values_list("variant_id", "price"))
        rows = [
            {
                "variant_id": variant.pk,
                "product_name": variant.product.name if variant.product_id else "Bilinmeyen Ürün",
                "name": variant.name,
                "sku": variant.sku,
                "base_price": variant.base_price,
                "list_price": list_prices.get(variant.pk),
            }
            for variant in ProductVariant.objects.select_related("product")
        ]
        rows.sort(key=lambda row: (row["product_name"], row["name"]))
        return rows

    @staticmethod
    def set_price(price_list: PriceList, variant: ProductVariant, price: Any) -> VariantPrice:
        """
        Upsert the (variant, price_list) entry and mark it active.

        Raises:
            PricingError: price is not a number or is negative
        """
        try:
            value = Decimal(str(price))
        except (InvalidOperation, ValueError):
            raise PricingError(
                code="invalid_price",
                message="Geçersiz fiyat",
                context={"price": str(price)},
            ) from None
        if not value.is_finite() or value < 0:
            raise PricingError(
                code="invalid_price",
                message="Fiyat negatif olamaz",
                context={"price": str(price)},
            )

        entry, created = VariantPrice.objects.update_or_create(
            variant=variant,
            price_list=price_list,
            defaults={"price": to_money(value), "is_active": True},
        )
        logger.info(
            "Price %s for variant=%s list=%s: %s",
            "created" if created else "updated",
            variant.pk,
            price_list.slug,
            entry.price,
        )
        return entry
