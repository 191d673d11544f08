from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class PriceList(models.Model):
    """
    Named set of override prices targeted at one commercial role.

    Only entries of active lists whose role matches the shopper's role are
    considered by the price resolver.
    """

    name = models.CharField(_("ad"), max_length=120)
    slug = models.SlugField(_("slug"), max_length=140, unique=True)
    currency = models.CharField(_("para birimi"), max_length=3, default="TRY")
    role = models.CharField(_("rol"), max_length=16, default="b2b", db_index=True)
    is_active = models.BooleanField(_("aktif"), default=True)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("fiyat listesi")
        verbose_name_plural = _("fiyat listeleri")
        ordering = ("name",)

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"


class VariantPrice(models.Model):
    """
    Price list entry: (variant, price list) -> price.

    When several active entries apply to the same variant, the most recently
    created one wins (ties broken by id).
    """

    variant = models.ForeignKey(
        "orbis.ProductVariant",
        verbose_name=_("varyant"),
        on_delete=models.CASCADE,
        related_name="prices",
    )
    price_list = models.ForeignKey(
        PriceList,
        verbose_name=_("fiyat listesi"),
        on_delete=models.CASCADE,
        related_name="entries",
    )
    price = models.DecimalField(_("fiyat"), max_digits=12, decimal_places=2)
    is_active = models.BooleanField(_("aktif"), default=True, db_index=True)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("liste fiyatı")
        verbose_name_plural = _("liste fiyatları")
        constraints = [
            models.UniqueConstraint(
                fields=["variant", "price_list"],
                name="uniq_variant_price_list",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="variant_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.variant_id}@{self.price_list_id}: {self.price}"
