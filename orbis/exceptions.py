"""
Orbis Exceptions.

Every exception carries:
- code: machine-readable error code (e.g. "insufficient_stock", "empty_cart")
- message: human-readable message, shown to the shopper as-is
- context: extra data about the failure (variant, available stock, ...)
"""

from __future__ import annotations


class OrbisError(Exception):
    """
    Base class for all Orbis exceptions.

    Attributes:
        code: Machine-readable error code
        message: Human-readable message
        context: Additional data about the error
    """

    def __init__(self, code: str = "error", message: str = "", context: dict | None = None):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)


class CartError(OrbisError):
    """
    Cart editing error.

    Codes: "variant_not_found", "variant_inactive", "invalid_quantity", "item_not_found"
    """


class CheckoutError(OrbisError):
    """
    Checkout aborted. Nothing was persisted.

    Codes: "address_not_found", "no_active_cart", "empty_cart", "missing_variant",
    "variant_inactive", "insufficient_stock", "persistence_failure", "in_progress"
    """


class PricingError(OrbisError):
    """
    Price list administration error.

    Codes: "invalid_price"
    """


class DealerError(OrbisError):
    """
    Dealer (b2b) application error.

    Codes: "already_pending", "already_processed"
    """


class IdempotencyCacheHit(OrbisError):
    """
    A finished checkout with the same idempotency key was found.

    NOT an error: control flow used to return the cached response.

    Attributes:
        cached_response: Response of the previous successful checkout
    """

    def __init__(self, cached_response: dict):
        self.cached_response = cached_response
        super().__init__("idempotency_cache_hit", "Idempotency cache hit")


class InvalidTransition(OrbisError):
    """
    Order status transition not allowed.

    Codes: "invalid_transition", "terminal_status"
    """
