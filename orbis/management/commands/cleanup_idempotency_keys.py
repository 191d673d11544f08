"""
Delete finished or stale checkout idempotency keys.

Usage:
    python manage.py cleanup_idempotency_keys
    python manage.py cleanup_idempotency_keys --days 3 --include-in-progress
    python manage.py cleanup_idempotency_keys --dry-run

Meant to run daily from cron.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db.models import Q
from django.utils import timezone

from orbis.models import IdempotencyKey


class Command(BaseCommand):
    help = "Delete expired or old checkout idempotency keys"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=7,
            help="Delete done/failed keys older than N days (default: 7)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would be deleted without deleting",
        )
        parser.add_argument(
            "--include-in-progress",
            action="store_true",
            help="Also delete in_progress keys older than one hour",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        buckets = {
            "expired": Q(expires_at__lt=now),
            "old": Q(
                created_at__lt=now - timedelta(days=options["days"]),
                status__in=[IdempotencyKey.Status.DONE, IdempotencyKey.Status.FAILED],
            ),
        }
        if options["include_in_progress"]:
            buckets["orphaned"] = Q(
                created_at__lt=now - timedelta(hours=1),
                status=IdempotencyKey.Status.IN_PROGRESS,
            )

        condition = Q()
        for name, bucket in buckets.items():
            self.stdout.write(f"  {name}: {IdempotencyKey.objects.filter(bucket).count()}")
            condition |= bucket

        qs = IdempotencyKey.objects.filter(condition)
        if options["dry_run"]:
            self.stdout.write(self.style.WARNING(f"[DRY RUN] {qs.count()} keys would be deleted"))
            return

        deleted, _ = qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} idempotency keys"))
