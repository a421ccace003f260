# apps/notification/tasks.py
import logging

from celery import shared_task

from .channels import email
from .domain_events import DomainEvent

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_email_task(self, event_data):
    """
    Celery task to send email notifications.
    """
    event = DomainEvent(**event_data)
    try:
        return email.send_notification(event)
    except Exception as exc:
        logger.warning(f"Email for event {event.id} ({event.event_type}) failed: {exc}")
        raise self.retry(exc=exc)
