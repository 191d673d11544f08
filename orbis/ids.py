"""
Orbis IDs: Order numbers and idempotency keys.
"""

from __future__ import annotations

import secrets
import uuid

from django.utils import timezone

from orbis.conf import get_orbis_setting


def generate_order_no() -> str:
    """
    Generate a human-readable order number.

    Format: ORB-YYYYNNNN (prefix, current year, 4 random digits 1000-9999).
    Uniqueness is checked by the caller.
    """
    prefix = get_orbis_setting("ORDER_NUMBER_PREFIX")
    year = timezone.localdate().year
    suffix = 1000 + secrets.randbelow(9000)
    return f"{prefix}-{year}{suffix}"


def generate_idempotency_key() -> str:
    """
    Generate an idempotency key for checkout.

    Format: CHK-<uuid4 hex>
    """
    return f"CHK-{uuid.uuid4().hex}"
