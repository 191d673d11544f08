from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Cart(models.Model):
    """
    Mutable pre-purchase container (one per user while active).

    Lifecycle: created on first add-to-cart -> "active" -> "converted" when a
    checkout commits. Never hard-deleted here. The partial unique constraint
    makes get-or-create safe under concurrent first calls.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", _("aktif")
        CONVERTED = "converted", _("siparişe dönüştü")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name=_("kullanıcı"),
        on_delete=models.CASCADE,
        related_name="carts",
    )
    status = models.CharField(
        _("durum"),
        max_length=16,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)
    converted_at = models.DateTimeField(_("dönüşme"), null=True, blank=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("sepet")
        verbose_name_plural = _("sepetler")
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(status="active"),
                name="uniq_active_cart_per_user",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user} [{self.status}]"


class CartItem(models.Model):
    """
    Cart line.

    The variant FK is nulled (not cascaded) when a variant is deleted so that
    checkout can detect and report the orphaned line.
    """

    cart = models.ForeignKey(Cart, verbose_name=_("sepet"), on_delete=models.CASCADE, related_name="items")
    variant = models.ForeignKey(
        "orbis.ProductVariant",
        verbose_name=_("varyant"),
        on_delete=models.SET_NULL,
        null=True,
        related_name="cart_items",
    )
    quantity = models.PositiveIntegerField(_("adet"), default=1)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("sepet kalemi")
        verbose_name_plural = _("sepet kalemleri")
        ordering = ("id",)
        constraints = [
            models.UniqueConstraint(fields=["cart", "variant"], name="uniq_cart_item_variant"),
            models.CheckConstraint(condition=Q(quantity__gt=0), name="cart_item_qty_positive"),
        ]

    def __str__(self) -> str:
        return f"{self.variant_id} x {self.quantity}"
