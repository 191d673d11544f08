from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class DealerApplication(models.Model):
    """
    Request from a retail user to be promoted to the b2b (dealer) role.

    Approval is the only path in this app that writes Profile.role.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("beklemede")
        APPROVED = "approved", _("onaylandı")
        REJECTED = "rejected", _("reddedildi")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name=_("kullanıcı"),
        on_delete=models.CASCADE,
        related_name="dealer_applications",
    )
    company_name = models.CharField(_("firma adı"), max_length=200)
    contact_name = models.CharField(_("yetkili adı"), max_length=200)
    phone = models.CharField(_("telefon"), max_length=32)
    email = models.EmailField(_("e-posta"))
    address = models.TextField(_("adres"))
    activity_field = models.CharField(_("faaliyet alanı"), max_length=200)
    tax_office = models.CharField(_("vergi dairesi"), max_length=120)
    tax_number = models.CharField(_("vergi no / TCKN"), max_length=32)

    status = models.CharField(
        _("durum"),
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    processed_by = models.CharField(_("işleyen"), max_length=150, blank=True, default="")
    processed_at = models.DateTimeField(_("işlenme"), null=True, blank=True)
    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("bayilik başvurusu")
        verbose_name_plural = _("bayilik başvuruları")
        ordering = ("-created_at", "id")

    def __str__(self) -> str:
        return f"{self.company_name} [{self.status}]"
