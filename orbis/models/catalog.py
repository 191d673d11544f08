from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    name = models.CharField(_("ad"), max_length=120)
    slug = models.SlugField(_("slug"), max_length=140, unique=True)
    display_order = models.IntegerField(_("sıra"), default=0)

    class Meta:
        app_label = "orbis"
        verbose_name = _("kategori")
        verbose_name_plural = _("kategoriler")
        ordering = ("display_order", "name")

    def __str__(self) -> str:
        return self.name


class Product(models.Model):
    """
    Catalog product. Sellable units are its variants.
    """

    name = models.CharField(_("ad"), max_length=200)
    slug = models.SlugField(_("slug"), max_length=220, unique=True)
    description = models.TextField(_("açıklama"), blank=True, default="")
    category = models.ForeignKey(
        Category,
        verbose_name=_("kategori"),
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    # Opaque blob-storage URL; not managed here.
    image_url = models.URLField(_("görsel"), max_length=500, blank=True, default="")
    is_active = models.BooleanField(_("aktif"), default=True, db_index=True)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("ürün")
        verbose_name_plural = _("ürünler")
        ordering = ("-created_at", "id")

    def __str__(self) -> str:
        return self.name


class ProductVariant(models.Model):
    """
    Purchasable SKU.

    base_price is the retail (b2c) price and the fallback for every role.
    stock and is_active are re-read at checkout time.
    """

    product = models.ForeignKey(
        Product,
        verbose_name=_("ürün"),
        on_delete=models.CASCADE,
        related_name="variants",
    )
    name = models.CharField(_("ad"), max_length=200)
    sku = models.CharField(_("SKU"), max_length=64, unique=True)
    base_price = models.DecimalField(_("taban fiyat"), max_digits=12, decimal_places=2)
    stock = models.PositiveIntegerField(_("stok"), default=0)
    is_active = models.BooleanField(_("aktif"), default=True, db_index=True)
    attributes = models.JSONField(_("özellikler"), default=dict, blank=True)

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("varyant")
        verbose_name_plural = _("varyantlar")
        ordering = ("product_id", "name")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(base_price__gte=0),
                name="variant_base_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
