# apps/notification/engine.py
import logging
from typing import List

from .channels import in_app
from .domain_events import DomainEvent
from .models import NotificationPreference
from .tasks import send_email_task

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = ["in_app", "email"]


def dispatch_event(event: DomainEvent, channels: List[str] = None):
    """
    Dispatch a domain event to the delivery channels respecting user
    preferences. Delivery is best-effort: a failing channel is logged and
    never propagates to the caller.
    """
    if channels is None:
        channels = DEFAULT_CHANNELS

    prefs = NotificationPreference.for_user(event.payload.get("user_id"))
    delivered = []

    if "in_app" in channels and prefs.in_app_enabled:
        try:
            if in_app.send_notification(event) is not None:
                delivered.append("in_app")
        except Exception as e:
            logger.error(f"In-app notification for {event.event_type} failed: {e}")

    if "email" in channels and prefs.email_enabled:
        try:
            send_email_task.delay(event.to_dict())  # async via Celery
            delivered.append("email")
        except Exception as e:
            logger.error(f"Queueing email for {event.event_type} failed: {e}")

    return delivered
