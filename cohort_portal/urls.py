"""
URL configuration for the cohort portal.

The engine is exposed as a JSON API under /api/, admin content management
is also available through the Django admin.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.training.urls", namespace="training")),
    path("api/notifications/", include("apps.notification.urls", namespace="notification")),
]
