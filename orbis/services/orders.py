"""
OrderService: Order history and back-office status changes.
"""

from __future__ import annotations

from typing import Any

from django.db.models import QuerySet

from orbis.models import Order


class OrderService:
    @staticmethod
    def orders_for(user: Any) -> QuerySet:
        """The user's orders, newest first, lines prefetched."""
        return Order.objects.filter(user=user).prefetch_related("items").order_by("-created_at", "-id")

    @staticmethod
    def get(order_no: str, user: Any | None = None) -> Order | None:
        """
        Look up an order by number.

        When user is given, only that user's order is returned.
        """
        qs = Order.objects.prefetch_related("items")
        if user is not None:
            qs = qs.filter(user=user)
        return qs.filter(order_no=order_no).first()

    @staticmethod
    def transition(order: Order, new_status: str, actor: str = "system") -> Order:
        """
        Move order to new_status. Snapshot values are untouched.

        Raises:
            InvalidTransition
        """
        order.transition_status(new_status, actor=actor)
        return order
