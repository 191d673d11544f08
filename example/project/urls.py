"""
URL configuration for the Orbis example project.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("orbis.api.urls")),
]
