from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from orbis.exceptions import PricingError
from orbis.models import VariantPrice
from orbis.services import PriceListService, PricingService

from .helpers import CatalogFixturesMixin


class PriceGridTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.price_list = self.make_price_list("bayi")
        self.inverter = self.make_product("Inverter")
        self.panel = self.make_product("Panel")
        self.p1 = self.make_variant("PNL-450", "3000.00", product=self.panel, name="450W")
        self.p2 = self.make_variant("PNL-400", "2800.00", product=self.panel, name="400W")
        self.i1 = self.make_variant("INV-5", "15000.00", product=self.inverter, name="5kW")

    def test_grid_lists_every_variant_sorted(self) -> None:
        self.set_list_price(self.price_list, self.p1, "2700.00")

        rows = PriceListService.grid(self.price_list)

        self.assertEqual([(r["product_name"], r["name"]) for r in rows], [
            ("Inverter", "5kW"),
            ("Panel", "400W"),
            ("Panel", "450W"),
        ])
        by_sku = {r["sku"]: r for r in rows}
        self.assertEqual(by_sku["PNL-450"]["list_price"], Decimal("2700.00"))
        self.assertIsNone(by_sku["PNL-400"]["list_price"])
        self.assertEqual(by_sku["INV-5"]["base_price"], Decimal("15000.00"))

    def test_set_price_creates_entry(self) -> None:
        entry = PriceListService.set_price(self.price_list, self.p2, "2500")

        self.assertEqual(entry.price, Decimal("2500.00"))
        self.assertTrue(entry.is_active)
        self.assertEqual(PricingService.resolve_price(self.p2.pk, self.p2.base_price, "b2b"), Decimal("2500.00"))

    def test_set_price_updates_and_reactivates_entry(self) -> None:
        self.set_list_price(self.price_list, self.p2, "2600.00", is_active=False)

        PriceListService.set_price(self.price_list, self.p2, Decimal("2550.00"))

        entries = VariantPrice.objects.filter(price_list=self.price_list, variant=self.p2)
        self.assertEqual(entries.count(), 1)
        self.assertEqual(entries.get().price, Decimal("2550.00"))
        self.assertTrue(entries.get().is_active)

    def test_set_price_rejects_negative(self) -> None:
        with self.assertRaises(PricingError) as ctx:
            PriceListService.set_price(self.price_list, self.p2, "-1")
        self.assertEqual(ctx.exception.code, "invalid_price")

    def test_set_price_rejects_garbage(self) -> None:
        with self.assertRaises(PricingError) as ctx:
            PriceListService.set_price(self.price_list, self.p2, "abc")
        self.assertEqual(ctx.exception.code, "invalid_price")
