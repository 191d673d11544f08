from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

from django.db import DatabaseError, connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext
from django.utils import timezone

from orbis.models import VariantPrice
from orbis.services import PricingService

from .helpers import CatalogFixturesMixin


def _price_selects(ctx: CaptureQueriesContext) -> list[str]:
    return [q["sql"] for q in ctx.captured_queries if "orbis_variantprice" in q["sql"]]


class ResolvePriceTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.variant = self.make_variant("PNL-A", "100.00")
        self.dealer_list = self.make_price_list("bayi")

    def test_b2c_gets_base_price_without_touching_the_database(self) -> None:
        self.set_list_price(self.dealer_list, self.variant, "80.00")

        with self.assertNumQueries(0):
            price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2c")

        self.assertEqual(price, Decimal("100.00"))

    def test_unknown_role_is_treated_like_b2c(self) -> None:
        self.set_list_price(self.dealer_list, self.variant, "80.00")

        with self.assertNumQueries(0):
            price = PricingService.resolve_price(self.variant.pk, "100", "wholesale")

        self.assertEqual(price, Decimal("100.00"))

    def test_b2b_uses_active_list_price(self) -> None:
        self.set_list_price(self.dealer_list, self.variant, "80.00")

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("80.00"))

    def test_b2b_newest_entry_wins(self) -> None:
        older = self.set_list_price(self.make_price_list("bayi-eski"), self.variant, "95.00")
        newer = self.set_list_price(self.dealer_list, self.variant, "90.00")
        now = timezone.now()
        VariantPrice.objects.filter(pk=older.pk).update(created_at=now - timedelta(days=2))
        VariantPrice.objects.filter(pk=newer.pk).update(created_at=now - timedelta(days=1))

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("90.00"))

    def test_b2b_same_timestamp_higher_id_wins(self) -> None:
        first = self.set_list_price(self.make_price_list("bayi-a"), self.variant, "95.00")
        second = self.set_list_price(self.make_price_list("bayi-b"), self.variant, "92.00")
        stamp = timezone.now()
        VariantPrice.objects.filter(pk__in=[first.pk, second.pk]).update(created_at=stamp)

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("92.00"))

    def test_b2b_falls_back_to_base_without_entry(self) -> None:
        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")
        self.assertEqual(price, Decimal("100.00"))

    def test_inactive_entry_is_ignored(self) -> None:
        self.set_list_price(self.dealer_list, self.variant, "80.00", is_active=False)

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("100.00"))

    def test_inactive_list_is_ignored(self) -> None:
        closed = self.make_price_list("kapali", is_active=False)
        self.set_list_price(closed, self.variant, "70.00")

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("100.00"))

    def test_list_for_other_role_is_ignored(self) -> None:
        retail = self.make_price_list("kampanya", role="b2c")
        self.set_list_price(retail, self.variant, "60.00")

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("100.00"))

    def test_zero_list_price_is_honoured(self) -> None:
        self.set_list_price(self.dealer_list, self.variant, "0.00")

        price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("0.00"))

    def test_lookup_failure_degrades_to_base_price(self) -> None:
        self.set_list_price(self.dealer_list, self.variant, "80.00")

        with mock.patch.object(PricingService, "_active_entries", side_effect=DatabaseError("boom")):
            with self.assertLogs("orbis.services.pricing", level="ERROR"):
                price = PricingService.resolve_price(self.variant.pk, self.variant.base_price, "b2b")

        self.assertEqual(price, Decimal("100.00"))

    def test_result_is_quantized_to_cents(self) -> None:
        price = PricingService.resolve_price(self.variant.pk, "99.999", "b2c")
        self.assertEqual(price, Decimal("100.00"))
        self.assertEqual(price.as_tuple().exponent, -2)

    def test_negative_base_price_is_priced_at_zero(self) -> None:
        with self.assertLogs("orbis.services.pricing", level="WARNING"):
            price = PricingService.resolve_price(self.variant.pk, Decimal("-5"), "b2c")

        self.assertEqual(price, Decimal("0.00"))


class ResolvePricesTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.dealer_list = self.make_price_list("bayi")
        self.a = self.make_variant("A", "100.00")
        self.b = self.make_variant("B", "50.00")
        self.c = self.make_variant("C", "20.00")
        self.set_list_price(self.dealer_list, self.a, "90.00")
        self.set_list_price(self.dealer_list, self.b, "45.00")

    def test_b2c_batch_does_not_query(self) -> None:
        with self.assertNumQueries(0):
            prices = PricingService.resolve_prices([self.a, self.b, self.c], "b2c")

        self.assertEqual(
            prices,
            {self.a.pk: Decimal("100.00"), self.b.pk: Decimal("50.00"), self.c.pk: Decimal("20.00")},
        )

    def test_b2b_batch_uses_a_single_lookup(self) -> None:
        with CaptureQueriesContext(connection) as ctx:
            prices = PricingService.resolve_prices([self.a, self.b, self.c], "b2b")

        self.assertEqual(len(_price_selects(ctx)), 1)
        self.assertEqual(prices[self.a.pk], Decimal("90.00"))
        self.assertEqual(prices[self.b.pk], Decimal("45.00"))
        self.assertEqual(prices[self.c.pk], Decimal("20.00"))

    def test_batch_agrees_with_single_resolution(self) -> None:
        newer = self.set_list_price(self.make_price_list("bayi-yeni"), self.a, "88.00")
        VariantPrice.objects.filter(pk=newer.pk).update(created_at=timezone.now() + timedelta(minutes=1))

        batch = PricingService.resolve_prices([self.a, self.b, self.c], "b2b")

        for variant in (self.a, self.b, self.c):
            single = PricingService.resolve_price(variant.pk, variant.base_price, "b2b")
            self.assertEqual(batch[variant.pk], single)
        self.assertEqual(batch[self.a.pk], Decimal("88.00"))

    def test_empty_batch(self) -> None:
        with self.assertNumQueries(0):
            self.assertEqual(PricingService.resolve_prices([], "b2b"), {})

    def test_batch_lookup_failure_degrades_to_base_prices(self) -> None:
        with mock.patch.object(PricingService, "_active_entries", side_effect=DatabaseError("boom")):
            with self.assertLogs("orbis.services.pricing", level="ERROR"):
                prices = PricingService.resolve_prices([self.a, self.b], "b2b")

        self.assertEqual(prices, {self.a.pk: Decimal("100.00"), self.b.pk: Decimal("50.00")})

    def test_negative_base_price_in_batch_is_priced_at_zero(self) -> None:
        broken = SimpleNamespace(pk=self.c.pk, base_price=Decimal("-5"))

        with self.assertLogs("orbis.services.pricing", level="WARNING"):
            prices = PricingService.resolve_prices([broken], "b2b")

        self.assertEqual(prices, {self.c.pk: Decimal("0.00")})
