from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class IdempotencyKey(models.Model):
    """
    Dedupe/replay guard for checkout submissions.
    """

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", _("devam ediyor")
        DONE = "done", _("tamamlandı")
        FAILED = "failed", _("başarısız")

    scope = models.CharField(_("kapsam"), max_length=64)
    key = models.CharField(_("anahtar"), max_length=128)

    status = models.CharField(_("durum"), max_length=16, choices=Status.choices, default=Status.IN_PROGRESS)

    response_code = models.IntegerField(_("yanıt kodu"), null=True, blank=True)
    response_body = models.JSONField(_("yanıt gövdesi"), null=True, blank=True)

    expires_at = models.DateTimeField(_("son geçerlilik"), null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(_("oluşturulma"), auto_now_add=True)

    class Meta:
        app_label = "orbis"
        verbose_name = _("tekrar koruma anahtarı")
        verbose_name_plural = _("tekrar koruma anahtarları")
        constraints = [
            models.UniqueConstraint(fields=["scope", "key"], name="uniq_idempotency_scope_key"),
        ]

    def __str__(self) -> str:
        return f"{self.scope}:{self.key}"
