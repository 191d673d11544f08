from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.db.models import QuerySet
from django.test import TestCase

from orbis.exceptions import CartError
from orbis.models import Cart, CartItem
from orbis.services import CartService

from .helpers import CatalogFixturesMixin


class ActiveCartTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user()

    def test_get_or_create_returns_the_same_cart(self) -> None:
        first = CartService.get_or_create_active_cart(self.user)
        second = CartService.get_or_create_active_cart(self.user)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(Cart.objects.filter(user=self.user, status="active").count(), 1)

    def test_concurrent_first_call_rereads_the_winning_cart(self) -> None:
        winner = Cart.objects.create(user=self.user, status=Cart.Status.ACTIVE)
        real_get = QuerySet.get
        calls = []

        def lost_race_get(queryset, *args, **kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                raise Cart.DoesNotExist
            return real_get(queryset, *args, **kwargs)

        with mock.patch.object(QuerySet, "get", autospec=True, side_effect=lost_race_get):
            cart = CartService.get_or_create_active_cart(self.user)

        self.assertEqual(cart.pk, winner.pk)
        self.assertEqual(len(calls), 2)
        self.assertEqual(Cart.objects.filter(user=self.user).count(), 1)

    def test_converted_cart_is_not_reused(self) -> None:
        old = CartService.get_or_create_active_cart(self.user)
        Cart.objects.filter(pk=old.pk).update(status=Cart.Status.CONVERTED)

        fresh = CartService.get_or_create_active_cart(self.user)

        self.assertNotEqual(fresh.pk, old.pk)
        self.assertEqual(fresh.status, Cart.Status.ACTIVE)

    def test_get_active_cart_is_none_before_first_add(self) -> None:
        self.assertIsNone(CartService.get_active_cart(self.user))


class CartEditingTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user()
        self.variant = self.make_variant("INV-5K", "1000.00")

    def test_add_creates_cart_and_line(self) -> None:
        item = CartService.add_item(self.user, self.variant.pk, 2)

        self.assertEqual(item.quantity, 2)
        self.assertEqual(item.cart.user, self.user)

    def test_add_same_variant_increments_line(self) -> None:
        CartService.add_item(self.user, self.variant.pk, 2)
        item = CartService.add_item(self.user, self.variant.pk, 3)

        self.assertEqual(item.quantity, 5)
        self.assertEqual(CartItem.objects.filter(cart__user=self.user).count(), 1)

    def test_add_rejects_non_positive_quantity(self) -> None:
        with self.assertRaises(CartError) as ctx:
            CartService.add_item(self.user, self.variant.pk, 0)
        self.assertEqual(ctx.exception.code, "invalid_quantity")

    def test_add_rejects_unknown_variant(self) -> None:
        with self.assertRaises(CartError) as ctx:
            CartService.add_item(self.user, 999999, 1)
        self.assertEqual(ctx.exception.code, "variant_not_found")

    def test_add_rejects_inactive_variant(self) -> None:
        off = self.make_variant("OFF", is_active=False)
        with self.assertRaises(CartError) as ctx:
            CartService.add_item(self.user, off.pk, 1)
        self.assertEqual(ctx.exception.code, "variant_inactive")

    def test_add_rejects_variant_of_inactive_product(self) -> None:
        product = self.make_product("Eski Seri", is_active=False)
        variant = self.make_variant("OLD", product=product)
        with self.assertRaises(CartError) as ctx:
            CartService.add_item(self.user, variant.pk, 1)
        self.assertEqual(ctx.exception.code, "variant_inactive")

    def test_increment_and_decrement(self) -> None:
        item = CartService.add_item(self.user, self.variant.pk, 1)

        item = CartService.increment(self.user, item.pk)
        self.assertEqual(item.quantity, 2)

        item = CartService.decrement(self.user, item.pk)
        self.assertEqual(item.quantity, 1)

    def test_decrement_to_zero_removes_line(self) -> None:
        item = CartService.add_item(self.user, self.variant.pk, 1)

        self.assertIsNone(CartService.decrement(self.user, item.pk))
        self.assertFalse(CartItem.objects.filter(pk=item.pk).exists())

    def test_set_quantity(self) -> None:
        item = CartService.add_item(self.user, self.variant.pk, 1)

        item = CartService.set_quantity(self.user, item.pk, 7)

        self.assertEqual(item.quantity, 7)

    def test_remove_item(self) -> None:
        item = CartService.add_item(self.user, self.variant.pk, 1)
        CartService.remove_item(self.user, item.pk)
        self.assertFalse(CartItem.objects.filter(pk=item.pk).exists())

    def test_cannot_edit_someone_elses_line(self) -> None:
        item = CartService.add_item(self.user, self.variant.pk, 1)
        other = self.make_user("other")

        with self.assertRaises(CartError) as ctx:
            CartService.set_quantity(other, item.pk, 3)
        self.assertEqual(ctx.exception.code, "item_not_found")

    def test_clear(self) -> None:
        CartService.add_item(self.user, self.variant.pk, 1)
        CartService.add_item(self.user, self.make_variant("X").pk, 1)

        self.assertEqual(CartService.clear(self.user), 2)
        self.assertEqual(CartService.summary(self.user).lines, [])


class ComputeCartTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.a = self.make_variant("A", "100.00")
        self.b = self.make_variant("B", "50.00")

    def test_totals_for_b2c(self) -> None:
        user = self.make_user()
        CartService.add_item(user, self.a.pk, 2)
        CartService.add_item(user, self.b.pk, 1)

        summary = CartService.summary(user)

        self.assertEqual(summary.role, "b2c")
        self.assertEqual([line.line_total for line in summary.lines], [Decimal("200.00"), Decimal("50.00")])
        self.assertEqual(summary.grand_total, Decimal("250.00"))
        self.assertEqual(summary.items_count, 3)

    def test_totals_for_b2b_use_list_prices(self) -> None:
        user = self.make_user(role="b2b")
        self.set_list_price(self.make_price_list("bayi"), self.a, "90.00")
        CartService.add_item(user, self.a.pk, 2)
        CartService.add_item(user, self.b.pk, 1)

        summary = CartService.summary(user)

        self.assertEqual(summary.lines[0].unit_price, Decimal("90.00"))
        self.assertEqual(summary.grand_total, Decimal("230.00"))

    def test_empty_cart_totals_zero(self) -> None:
        summary = CartService.compute_cart([], "b2c")

        self.assertEqual(summary.lines, [])
        self.assertEqual(summary.grand_total, Decimal("0.00"))

    def test_no_active_cart_summary(self) -> None:
        summary = CartService.summary(self.make_user())

        self.assertIsNone(summary.cart_id)
        self.assertEqual(summary.grand_total, Decimal("0.00"))

    def test_deleted_variant_line_is_flagged_and_excluded_from_total(self) -> None:
        user = self.make_user()
        CartService.add_item(user, self.a.pk, 1)
        CartService.add_item(user, self.b.pk, 1)
        self.b.delete()

        summary = CartService.summary(user)

        self.assertEqual(len(summary.lines), 2)
        self.assertTrue(summary.lines[1].missing)
        self.assertEqual(summary.grand_total, Decimal("100.00"))

    def test_compute_does_not_write(self) -> None:
        user = self.make_user()
        CartService.add_item(user, self.a.pk, 2)
        cart = CartService.get_active_cart(user)
        before = cart.updated_at

        first = CartService.compute_cart(cart.items.select_related("variant"), "b2c")
        second = CartService.compute_cart(cart.items.select_related("variant"), "b2c")

        cart.refresh_from_db()
        self.assertEqual(cart.updated_at, before)
        self.assertEqual(first.grand_total, second.grand_total)
