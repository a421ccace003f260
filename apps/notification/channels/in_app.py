# apps/notification/channels/in_app.py
from ..models import Notification


def send_notification(event):
    """Persist the event in the recipient's notification history."""
    user_id = event.payload.get("user_id")
    if not user_id:
        return None

    return Notification.objects.create(
        user_id=user_id,
        event_type=event.event_type,
        payload=event.payload,
    )
