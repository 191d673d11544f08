from __future__ import annotations

from django.conf import settings
from django.utils.module_loading import import_string


ORBIS_DEFAULTS = {
    "ORDER_NUMBER_PREFIX": "ORB",
    "ORDER_NUMBER_MAX_ATTEMPTS": 5,
    "CURRENCY": "TRY",
    "DEFAULT_ROLE": "b2c",
    # "abort": cart-close failure rolls the whole checkout back.
    # "ignore": order is kept, cart stays active until reconcile_carts runs.
    "CART_CLOSE_FAILURE": "abort",
    "IDEMPOTENCY_TTL_HOURS": 24,
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.IsAuthenticated"],
    "ADMIN_PERMISSION_CLASSES": ["rest_framework.permissions.IsAdminUser"],
}


def get_orbis_setting(key: str):
    """Retrieve an Orbis setting, falling back to ORBIS_DEFAULTS."""
    user_settings = getattr(settings, "ORBIS", {})
    value = user_settings.get(key, ORBIS_DEFAULTS.get(key))
    if isinstance(value, list) and value and isinstance(value[0], str):
        return [import_string(cls) for cls in value]
    return value
