from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Profile(models.Model):
    """
    Commercial profile of an authenticated user.

    `role` gates which price rows the user may see. It is written only by the
    dealer approval workflow (or staff), never by pricing or checkout. Values
    other than "b2c"/"b2b" are stored and returned as-is.
    """

    class Role(models.TextChoices):
        B2C = "b2c", _("bireysel")
        B2B = "b2b", _("bayi")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        verbose_name=_("kullanıcı"),
        on_delete=models.CASCADE,
        related_name="profile",
    )
    role = models.CharField(
        _("rol"),
        max_length=16,
        choices=Role.choices,
        default=Role.B2C,
        null=True,
        blank=True,
    )
    full_name = models.CharField(_("ad soyad"), max_length=200, blank=True, default="")
    phone = models.CharField(_("telefon"), max_length=32, blank=True, default="")

    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)
    updated_at = models.DateTimeField(_("güncellenme"), auto_now=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("profil")
        verbose_name_plural = _("profiller")

    def __str__(self) -> str:
        return f"{self.user} ({self.role or '-'})"
