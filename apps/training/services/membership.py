"""
Cohort membership lifecycle.

ENROLLED points the learner's current_cohort at the cohort; GRADUATED and
REMOVED clear it when it points here; SUSPENDED only changes the status.
A learner holds at most one ENROLLED membership at a time.
"""
# apps/training/services/membership.py
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from .. import transitions
from ..exceptions import CohortInactive, MultipleActiveEnrollments, NotAMember, NotFound
from ..models import Cohort, CohortMembership
from .notifications import notify_user

logger = logging.getLogger(__name__)

Status = CohortMembership.Status

STATUS_EVENTS = {
    Status.ENROLLED: "user_assigned_to_cohort",
    Status.GRADUATED: "user_graduated",
    Status.REMOVED: "user_removed_from_cohort",
    Status.SUSPENDED: "user_suspended",
}


def set_membership_status(learner_id, cohort_id, new_status, actor=None, now=None):
    status = transitions.parse_membership_status(new_status)
    now = now or timezone.now()
    User = get_user_model()

    with transaction.atomic():
        try:
            learner = User.objects.select_for_update().get(pk=learner_id)
        except User.DoesNotExist:
            raise NotFound(f"User {learner_id} not found.")
        try:
            cohort = Cohort.objects.get(pk=cohort_id)
        except Cohort.DoesNotExist:
            raise NotFound(f"Cohort {cohort_id} not found.")

        membership = (
            CohortMembership.objects.select_for_update()
            .filter(learner=learner, cohort=cohort)
            .first()
        )
        if membership is None and status != Status.ENROLLED:
            raise NotAMember()

        if status == Status.ENROLLED:
            if not cohort.is_active:
                raise CohortInactive()
            enrolled_elsewhere = (
                CohortMembership.objects
                .filter(learner=learner, status=Status.ENROLLED)
                .exclude(cohort=cohort)
                .exists()
            )
            if enrolled_elsewhere:
                raise MultipleActiveEnrollments()

        if membership is None:
            membership = CohortMembership(learner=learner, cohort=cohort)
            previous = None
        else:
            previous = membership.status

        membership.status = status
        membership.status_changed_at = now
        membership.status_changed_by = actor
        if status == Status.GRADUATED:
            membership.graduated_at = now
            membership.graduated_by = actor

        try:
            with transaction.atomic():
                membership.save()
        except IntegrityError:
            raise MultipleActiveEnrollments()

        if status == Status.ENROLLED:
            if learner.current_cohort_id != cohort.pk:
                learner.current_cohort = cohort
                learner.save(update_fields=['current_cohort'])
        elif status in (Status.GRADUATED, Status.REMOVED):
            if learner.current_cohort_id == cohort.pk:
                learner.current_cohort = None
                learner.save(update_fields=['current_cohort'])

        logger.info(f"Membership {learner.pk}@{cohort.pk}: {previous} -> {status}")
        if previous != status:
            notify_user(STATUS_EVENTS[status], learner, {
                "cohort_id": str(cohort.pk),
                "cohort_name": str(cohort),
                "status": status,
            })

    return membership
