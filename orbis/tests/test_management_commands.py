from __future__ import annotations

from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from orbis.models import Cart, IdempotencyKey, Order

from .helpers import CatalogFixturesMixin


class ReconcileCartsCommandTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.user = self.make_user()
        self.cart = Cart.objects.create(user=self.user)
        Order.objects.create(order_no="ORB-20260001", user=self.user, cart=self.cart, subtotal=1, grand_total=1)

    def test_converts_active_cart_with_order(self) -> None:
        untouched = Cart.objects.create(user=self.make_user("browsing"))

        call_command("reconcile_carts", stdout=StringIO())

        self.cart.refresh_from_db()
        untouched.refresh_from_db()
        self.assertEqual(self.cart.status, Cart.Status.CONVERTED)
        self.assertIsNotNone(self.cart.converted_at)
        self.assertEqual(untouched.status, Cart.Status.ACTIVE)

    def test_dry_run_changes_nothing(self) -> None:
        out = StringIO()

        call_command("reconcile_carts", "--dry-run", stdout=out)

        self.cart.refresh_from_db()
        self.assertEqual(self.cart.status, Cart.Status.ACTIVE)
        self.assertIn("1 carts would be converted", out.getvalue())

    def test_nothing_to_do(self) -> None:
        call_command("reconcile_carts", stdout=StringIO())
        out = StringIO()

        call_command("reconcile_carts", stdout=out)

        self.assertIn("Converted 0 carts", out.getvalue())


class CleanupIdempotencyKeysCommandTests(TestCase):
    def _key(self, key: str, status: str, *, age: timedelta, expires_in: timedelta | None = None) -> IdempotencyKey:
        idem = IdempotencyKey.objects.create(
            scope="checkout:1",
            key=key,
            status=status,
            expires_at=timezone.now() + expires_in if expires_in is not None else None,
        )
        IdempotencyKey.objects.filter(pk=idem.pk).update(created_at=timezone.now() - age)
        return idem

    def test_removes_expired_and_old_keys(self) -> None:
        self._key("expired", "done", age=timedelta(hours=2), expires_in=timedelta(hours=-1))
        self._key("old", "failed", age=timedelta(days=10))
        self._key("fresh", "done", age=timedelta(hours=1), expires_in=timedelta(hours=23))
        self._key("stuck", "in_progress", age=timedelta(hours=3))

        call_command("cleanup_idempotency_keys", stdout=StringIO())

        self.assertEqual(
            sorted(IdempotencyKey.objects.values_list("key", flat=True)),
            ["fresh", "stuck"],
        )

    def test_include_in_progress(self) -> None:
        self._key("stuck", "in_progress", age=timedelta(hours=3))
        self._key("running", "in_progress", age=timedelta(minutes=5))

        call_command("cleanup_idempotency_keys", "--include-in-progress", stdout=StringIO())

        self.assertEqual(list(IdempotencyKey.objects.values_list("key", flat=True)), ["running"])

    def test_dry_run(self) -> None:
        self._key("old", "done", age=timedelta(days=10))
        out = StringIO()

        call_command("cleanup_idempotency_keys", "--dry-run", stdout=out)

        self.assertEqual(IdempotencyKey.objects.count(), 1)
        self.assertIn("[DRY RUN] 1 keys would be deleted", out.getvalue())
