"""
Close carts that were checked out but left active.

With ORBIS["CART_CLOSE_FAILURE"] = "ignore" a checkout keeps its order even
when the cart could not be marked converted. Such a cart still has an order
pointing at it; this command converts it.

Usage:
    python manage.py reconcile_carts
    python manage.py reconcile_carts --dry-run
"""

import logging

from django.core.management.base import BaseCommand
from django.db.models import Max
from django.utils import timezone

from orbis.models import Cart


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Mark active carts that already produced an order as converted"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the carts without changing them",
        )

    def handle(self, *args, **options):
        stale = (
            Cart.objects.filter(status=Cart.Status.ACTIVE, orders__isnull=False)
            .annotate(last_order_at=Max("orders__created_at"))
            .order_by("id")
        )

        count = 0
        for cart in stale:
            count += 1
            self.stdout.write(f"  cart {cart.pk} (user={cart.user_id}, last order {cart.last_order_at:%Y-%m-%d %H:%M})")
            if options["dry_run"]:
                continue
            cart.status = Cart.Status.CONVERTED
            cart.converted_at = cart.last_order_at or timezone.now()
            cart.save(update_fields=["status", "converted_at", "updated_at"])
            logger.info("Cart %s reconciled to converted", cart.pk)

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING(f"[DRY RUN] {count} carts would be converted"))
            return
        self.stdout.write(self.style.SUCCESS(f"Converted {count} carts"))
