"""
Availability resolver: the single place that decides what a learner may
do with an assignment. The result is derived from stored release, answer
and membership state on every call and is never persisted.

Mini-questions gate an assignment from the moment their release_date
passes, whether or not the periodic sweep has flipped their flag yet.
"""
# apps/training/services/availability.py
from django.db import models
from django.db.models import Q
from django.utils import timezone

from ..models import Answer, Assignment, CohortMembership, MiniAnswer, MiniQuestion


class Availability(models.TextChoices):
    LOCKED = 'locked', 'Locked'
    MINI_QUESTIONS_REQUIRED = 'mini_questions_required', 'Mini-questions required'
    AVAILABLE = 'available', 'Available'
    SUBMITTED = 'submitted', 'Submitted'
    COMPLETED = 'completed', 'Completed'


def current_step_for(learner, cohort_id):
    """The learner's step in the cohort; 0 when they hold no membership there."""
    step = (
        CohortMembership.objects
        .filter(learner=learner, cohort_id=cohort_id)
        .values_list("current_step", flat=True)
        .first()
    )
    return step or 0


def latest_answer(learner, assignment):
    return (
        Answer.objects
        .filter(learner=learner, assignment=assignment)
        .order_by("-submitted_at", "-created_at")
        .first()
    )


def gating_mini_questions(assignment, now):
    """Mini-questions of the assignment that are out at `now`."""
    queryset = MiniQuestion.objects.filter(section__assignment=assignment)
    if not assignment.is_released:
        return queryset.filter(is_released=True)
    return queryset.filter(Q(is_released=True) | Q(release_date__isnull=False, release_date__lte=now))


def mini_question_counts(learner, assignment, now=None):
    """(answered, released) counts of the assignment's mini-questions out at `now`."""
    released = gating_mini_questions(assignment, now or timezone.now())
    answered = (
        MiniAnswer.objects
        .filter(learner=learner, mini_question__in=released)
        .values("mini_question")
        .distinct()
        .count()
    )
    return answered, released.count()


def resolve_availability(learner, assignment, now=None, current_step=None):
    now = now or timezone.now()
    if current_step is None:
        current_step = current_step_for(learner, assignment.cohort_id)

    if assignment.ordinal > current_step + 1:
        return Availability.LOCKED

    answered, released = mini_question_counts(learner, assignment, now)
    if released and answered < released:
        return Availability.MINI_QUESTIONS_REQUIRED

    answer = latest_answer(learner, assignment)
    if answer is not None:
        if answer.status == Answer.Status.APPROVED:
            return Availability.COMPLETED
        return Availability.SUBMITTED

    return Availability.AVAILABLE


def resolve_for_cohort(learner, cohort, now=None):
    """
    Availability of every released assignment in the cohort, in ordinal
    order, for the learner dashboard.
    """
    now = now or timezone.now()
    current_step = current_step_for(learner, cohort.pk)
    assignments = Assignment.objects.released().filter(cohort=cohort).order_by("ordinal")
    return [
        (assignment, resolve_availability(learner, assignment, now=now, current_step=current_step))
        for assignment in assignments
    ]
