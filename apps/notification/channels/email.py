# apps/notification/channels/email.py
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string


def send_notification(event):
    """
    Send email notifications based on event type and payload
    """
    user_email = event.payload.get("user_email")
    if not user_email:
        return 0

    subject = f"{settings.NOTIFICATION_SUBJECT_PREFIX}: {event.event_type.replace('_', ' ').title()}"
    message = render_to_string(f"notifications/{event.event_type}.txt", {"payload": event.payload})

    return send_mail(
        subject,
        message,
        settings.NOTIFICATION_FROM_EMAIL,
        [user_email],
        fail_silently=False,
    )
