from __future__ import annotations

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models, transaction
from django.utils.translation import gettext_lazy as _

from orbis.exceptions import InvalidTransition, OrbisError


class Order(models.Model):
    """
    Immutable order snapshot created by a successful checkout.

    Totals and lines are frozen at commit time. Only `status` moves afterwards,
    through `transition_status()`, and every move is recorded as an OrderEvent.

    Status flow (back-office):
        pending_payment -> pending -> processing -> shipped -> delivered
        any non-final state before shipping -> cancelled
        shipped / delivered -> refunded
    """

    class Status(models.TextChoices):
        PENDING_PAYMENT = "pending_payment", _("ödeme bekleniyor")
        PENDING = "pending", _("sipariş alındı")
        PROCESSING = "processing", _("hazırlanıyor")
        SHIPPED = "shipped", _("kargolandı")
        DELIVERED = "delivered", _("teslim edildi")
        CANCELLED = "cancelled", _("iptal edildi")
        REFUNDED = "refunded", _("iade edildi")

    TRANSITIONS = {
        Status.PENDING_PAYMENT: [Status.PENDING, Status.PROCESSING, Status.CANCELLED],
        Status.PENDING: [Status.PROCESSING, Status.CANCELLED],
        Status.PROCESSING: [Status.SHIPPED, Status.CANCELLED],
        Status.SHIPPED: [Status.DELIVERED, Status.REFUNDED],
        Status.DELIVERED: [Status.REFUNDED],
        Status.CANCELLED: [],
        Status.REFUNDED: [],
    }

    TERMINAL_STATUSES = [Status.CANCELLED, Status.REFUNDED]

    order_no = models.CharField(_("sipariş no"), max_length=32, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name=_("kullanıcı"),
        on_delete=models.PROTECT,
        related_name="orders",
    )
    # Source cart, used by reconcile_carts to close carts left active.
    cart = models.ForeignKey(
        "orbis.Cart",
        verbose_name=_("sepet"),
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    status = models.CharField(
        _("durum"),
        max_length=32,
        choices=Status.choices,
        default=Status.PENDING_PAYMENT,
        db_index=True,
    )
    role = models.CharField(_("fiyat rolü"), max_length=16, default="b2c")
    currency = models.CharField(_("para birimi"), max_length=3, default="TRY")

    subtotal = models.DecimalField(_("ara toplam"), max_digits=12, decimal_places=2)
    discount_total = models.DecimalField(_("indirim"), max_digits=12, decimal_places=2, default=0)
    shipping_total = models.DecimalField(_("kargo"), max_digits=12, decimal_places=2, default=0)
    grand_total = models.DecimalField(_("genel toplam"), max_digits=12, decimal_places=2)

    shipping_address = models.JSONField(_("teslimat adresi"), default=dict, blank=True, encoder=DjangoJSONEncoder)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("sipariş")
        verbose_name_plural = _("siparişler")
        ordering = ("-created_at", "id")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._original_status = self.status

    def __str__(self) -> str:
        return self.order_no

    # ------------------------------------------------------------------ status

    def get_allowed_transitions(self) -> list[str]:
        return self.TRANSITIONS.get(self.status, [])

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.get_allowed_transitions()

    def save(self, *args, **kwargs):
        # Status may only move along TRANSITIONS, even through a plain save().
        if self.pk and self.status != self._original_status:
            allowed = self.TRANSITIONS.get(self._original_status, [])
            if self.status not in allowed:
                raise InvalidTransition(
                    code="invalid_transition",
                    message=f"{self._original_status} → {self.status} geçişine izin verilmiyor",
                    context={
                        "current_status": self._original_status,
                        "requested_status": self.status,
                        "allowed_transitions": list(allowed),
                    },
                )

        super().save(*args, **kwargs)
        self._original_status = self.status

    @transaction.atomic
    def transition_status(self, new_status: str, actor: str = "system") -> None:
        """
        Move the order to new_status.

        Raises:
            InvalidTransition: terminal status or transition not in TRANSITIONS
        """
        order = Order.objects.select_for_update().get(pk=self.pk)

        if order.status in self.TERMINAL_STATUSES:
            raise InvalidTransition(
                code="terminal_status",
                message=f"'{order.status}' durumundaki sipariş değiştirilemez",
                context={"current_status": order.status, "requested_status": new_status},
            )

        allowed = order.get_allowed_transitions()
        if new_status not in allowed:
            raise InvalidTransition(
                code="invalid_transition",
                message=f"{order.status} → {new_status} geçişine izin verilmiyor",
                context={
                    "current_status": order.status,
                    "requested_status": new_status,
                    "allowed_transitions": list(allowed),
                },
            )

        old_status = order.status
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        self.status = order.status
        self._original_status = order.status

        self.emit_event(
            event_type="status_changed",
            actor=actor,
            payload={"old_status": old_status, "new_status": new_status},
        )

    def emit_event(self, event_type: str, actor: str = "system", payload: dict | None = None) -> OrderEvent:
        return OrderEvent.objects.create(
            order=self,
            type=event_type,
            actor=actor,
            payload=payload or {},
        )


class OrderItem(models.Model):
    """
    Order line snapshot.

    variant_id / product_id are plain ids, not foreign keys: deleting or
    repricing the catalog never touches a placed order. Rows are insert-only.
    """

    order = models.ForeignKey(Order, verbose_name=_("sipariş"), on_delete=models.CASCADE, related_name="items")

    variant_id = models.BigIntegerField(_("varyant id"), null=True, blank=True, db_index=True)
    product_id = models.BigIntegerField(_("ürün id"), null=True, blank=True)
    quantity = models.PositiveIntegerField(_("adet"))
    unit_price_snapshot = models.DecimalField(_("birim fiyat"), max_digits=12, decimal_places=2)
    line_total = models.DecimalField(_("satır toplamı"), max_digits=12, decimal_places=2)
    product_name_snapshot = models.CharField(_("ürün adı"), max_length=200, blank=True, default="")
    sku_snapshot = models.CharField(_("SKU"), max_length=64, blank=True, default="")
    attributes_snapshot = models.JSONField(_("özellikler"), default=dict, blank=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("sipariş kalemi")
        verbose_name_plural = _("sipariş kalemleri")
        ordering = ("id",)
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_item_qty_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.sku_snapshot} x {self.quantity}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise OrbisError(
                code="immutable_snapshot",
                message="Sipariş kalemleri oluşturulduktan sonra değiştirilemez",
                context={"order_item_id": self.pk},
            )
        super().save(*args, **kwargs)


class OrderEvent(models.Model):
    """
    Append-only audit log for orders.
    """

    order = models.ForeignKey(Order, verbose_name=_("sipariş"), on_delete=models.CASCADE, related_name="events")

    type = models.CharField(_("tip"), max_length=64, db_index=True)
    actor = models.CharField(_("aktör"), max_length=150)
    payload = models.JSONField(_("içerik"), default=dict, encoder=DjangoJSONEncoder)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("sipariş olayı")
        verbose_name_plural = _("sipariş olayları")
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        return f"{self.type} @ {self.created_at}"
