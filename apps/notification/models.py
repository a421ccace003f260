# apps/notification/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone


class Notification(models.Model):
    """
    Stores in-app notifications for a user.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    event_type = models.CharField(max_length=100)
    payload = models.JSONField(default=dict)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Notification({self.event_type} for {self.user})"

    def mark_read(self):
        if not self.read:
            self.read = True
            self.save(update_fields=['read'])


class NotificationPreference(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notification_preference"
    )
    email_enabled = models.BooleanField(default=True)
    in_app_enabled = models.BooleanField(default=True)

    def __str__(self):
        return f"Preferences({self.user})"

    @classmethod
    def for_user(cls, user_id):
        """Stored preferences, or an unsaved all-enabled default."""
        if user_id is None:
            return cls(email_enabled=True, in_app_enabled=True)
        try:
            return cls.objects.get(user_id=user_id)
        except cls.DoesNotExist:
            return cls(user_id=user_id, email_enabled=True, in_app_enabled=True)
