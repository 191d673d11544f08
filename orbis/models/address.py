from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Address(models.Model):
    class Type(models.TextChoices):
        SHIPPING = "shipping", _("teslimat")
        BILLING = "billing", _("fatura")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name=_("kullanıcı"),
        on_delete=models.CASCADE,
        related_name="addresses",
    )
    type = models.CharField(_("tip"), max_length=16, choices=Type.choices, default=Type.SHIPPING)
    full_name = models.CharField(_("ad soyad"), max_length=200)
    phone = models.CharField(_("telefon"), max_length=32)
    country = models.CharField(_("ülke"), max_length=64, default="Türkiye")
    city = models.CharField(_("il"), max_length=64)
    district = models.CharField(_("ilçe"), max_length=64)
    address_line = models.CharField(_("adres"), max_length=500)
    postal_code = models.CharField(_("posta kodu"), max_length=16, blank=True, default="")

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("adres")
        verbose_name_plural = _("adresler")
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.full_name} - {self.district}/{self.city}"

    def to_snapshot(self) -> dict:
        """Plain copy stored on the order; later edits to the address do not leak."""
        return {
            "type": self.type,
            "full_name": self.full_name,
            "phone": self.phone,
            "country": self.country,
            "city": self.city,
            "district": self.district,
            "address_line": self.address_line,
            "postal_code": self.postal_code,
        }
