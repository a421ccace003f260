"""
Release scheduler.

Modules and assignments are released by an admin. Mini-questions are
released either by an admin or by the periodic sweep once their
release_date has passed and their assignment is out; releasing an
assignment catches up its own overdue mini-questions. Every release is a conditional update on
`is_released=False`, so the first transition wins and its timestamp is
never overwritten.
"""
# apps/training/services/release.py
import logging

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidPayload, NotFound
from ..models import Assignment, MiniQuestion, Module
from .notifications import notify_enrolled

logger = logging.getLogger(__name__)

RELEASABLE = {
    "module": Module,
    "assignment": Assignment,
    "mini_question": MiniQuestion,
}


def release_node(kind, node_id, now=None):
    """
    Release a module, assignment or mini-question. Idempotent: releasing an
    already released node returns it unchanged.
    """
    model = RELEASABLE.get(kind)
    if model is None:
        raise InvalidPayload(f"Unknown release kind {kind!r}.")
    now = now or timezone.now()

    with transaction.atomic():
        try:
            node = model.objects.select_for_update().get(pk=node_id)
        except model.DoesNotExist:
            raise NotFound(f"{model.__name__} {node_id} not found.")

        if model is MiniQuestion:
            released = _release_mini_question(node.pk, now)
        else:
            released = model.objects.filter(pk=node.pk, is_released=False).update(
                is_released=True, released_at=now
            )

        caught_up = []
        if model is Assignment:
            caught_up = catch_up_assignment(node.pk, now)

        node.refresh_from_db()

        if released:
            logger.info(f"Released {kind} {node.pk}")
            _notify_release(kind, node)
        if caught_up:
            logger.info(f"Assignment {node.pk} release caught up {len(caught_up)} mini-question(s)")

    return node


def sweep_mini_question_releases(now=None):
    """
    Release every unreleased mini-question of a released assignment whose
    release_date is at or before `now`. Mini-questions of unreleased
    assignments wait for the assignment's own release. Returns the number
    of mini-questions released by this call.
    """
    now = now or timezone.now()
    with transaction.atomic():
        released = _sweep(MiniQuestion.objects.filter(section__assignment__is_released=True), now)

    if released:
        logger.info(f"Mini-question sweep released {len(released)} item(s) at {now.isoformat()}")
    return len(released)


def catch_up_assignment(assignment_id, now=None):
    """Release the assignment's mini-questions already due at `now`."""
    now = now or timezone.now()
    return _sweep(MiniQuestion.objects.filter(section__assignment_id=assignment_id), now)


def next_release_info(cohort, now=None):
    """Earliest pending dated mini-question release in the cohort, or None."""
    now = now or timezone.now()
    upcoming = (
        MiniQuestion.objects
        .filter(
            section__assignment__cohort=cohort,
            is_released=False,
            release_date__gt=now,
        )
        .select_related("section__assignment")
        .order_by("release_date")
        .first()
    )
    if upcoming is None:
        return None
    return {
        "mini_question_id": str(upcoming.pk),
        "title": upcoming.title,
        "assignment_id": str(upcoming.section.assignment_id),
        "release_date": upcoming.release_date,
    }


def _release_mini_question(mini_question_id, now):
    return MiniQuestion.objects.filter(pk=mini_question_id, is_released=False).update(
        is_released=True, actual_release_date=now
    )


def _sweep(queryset, now):
    due = list(
        queryset
        .filter(is_released=False, release_date__isnull=False, release_date__lte=now)
        .select_related("section__assignment__cohort")
    )
    released = []
    for mini_question in due:
        # a concurrent sweep may have taken this row already
        if _release_mini_question(mini_question.pk, now):
            mini_question.is_released = True
            mini_question.actual_release_date = now
            released.append(mini_question)
            _notify_release("mini_question", mini_question)
    return released


def _notify_release(kind, node):
    if kind == "assignment":
        notify_enrolled("assignment_released", node.cohort, {
            "assignment_id": str(node.pk),
            "assignment_title": node.title,
            "ordinal": node.ordinal,
            "deadline": node.deadline.isoformat(),
        })
    elif kind == "mini_question":
        assignment = node.section.assignment
        notify_enrolled("mini_question_released", assignment.cohort, {
            "mini_question_id": str(node.pk),
            "mini_question_title": node.title,
            "assignment_id": str(assignment.pk),
            "assignment_title": assignment.title,
        })
