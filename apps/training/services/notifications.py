# apps/training/services/notifications.py
import logging

from django.db import transaction

from apps.notification.domain_events import DomainEvent
from apps.notification.engine import dispatch_event

from ..models import CohortMembership

logger = logging.getLogger(__name__)


def _user_payload(user):
    return {
        "user_id": user.pk,
        "user_email": user.email,
        "user_name": user.get_short_name(),
    }


def notify_user(event_type, user, payload):
    """
    Queue a notification for one user once the surrounding transaction
    commits. Failures are logged, never raised.
    """
    data = {**payload, **_user_payload(user)}
    transaction.on_commit(lambda: _dispatch(event_type, [data]))


def notify_enrolled(event_type, cohort, payload):
    """Queue the same notification for every learner enrolled in `cohort`."""
    memberships = (
        CohortMembership.objects
        .filter(cohort=cohort, status=CohortMembership.Status.ENROLLED)
        .select_related("learner")
    )
    batch = [{**payload, **_user_payload(m.learner)} for m in memberships]
    if batch:
        transaction.on_commit(lambda: _dispatch(event_type, batch))


def _dispatch(event_type, batch):
    for data in batch:
        try:
            dispatch_event(DomainEvent(event_type=event_type, payload=data))
        except Exception as e:
            logger.error(f"Failed to dispatch {event_type} for user {data.get('user_id')}: {e}")
