# apps/notification/urls.py
from django.urls import path
from . import views

app_name = "notification"

urlpatterns = [
    path("", views.NotificationListView.as_view(), name="api_list"),
    path("<int:notification_id>/read/", views.mark_notification_read, name="api_mark_read"),
]
