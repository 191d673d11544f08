"""
Django AppConfig for orbis.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class OrbisConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orbis"
    label = "orbis"
    verbose_name = _("Mağaza")
