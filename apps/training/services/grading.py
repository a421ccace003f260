"""
Answer submission, grading and the two resubmission flows.

Answers: PENDING -> APPROVED | REJECTED, either through a grade
(GOLD / SILVER / COPPER / NEEDS_RESUBMISSION) or the legacy binary review.
Mini-answers are completion only; an admin may flag them for resubmission
and then approve or deny the request once.
"""
# apps/training/services/grading.py
import logging

from django.core.exceptions import ValidationError
from django.core.validators import URLValidator
from django.db import IntegrityError, transaction
from django.utils import timezone

from .. import transitions
from ..exceptions import (
    AlreadyApproved,
    AlreadyPending,
    AlreadyReviewed,
    AlreadySubmitted,
    AssignmentLocked,
    AssignmentNotReleased,
    InvalidPayload,
    MiniQuestionsIncomplete,
    NoResubmissionRequested,
    NotEnrolled,
    NotFound,
)
from ..models import Answer, Assignment, CohortMembership, MiniAnswer, MiniQuestion
from .availability import Availability, latest_answer, resolve_availability
from .notifications import notify_user
from .release import catch_up_assignment

logger = logging.getLogger(__name__)


def _enrolled_membership(learner, cohort_id):
    membership = CohortMembership.objects.filter(
        learner=learner, cohort_id=cohort_id, status=CohortMembership.Status.ENROLLED
    ).first()
    if membership is None:
        raise NotEnrolled()
    return membership


def _get_answer(answer_id, **filters):
    try:
        return (
            Answer.objects.select_for_update()
            .select_related("assignment", "learner")
            .get(pk=answer_id, **filters)
        )
    except Answer.DoesNotExist:
        raise NotFound(f"Answer {answer_id} not found.")


def _get_mini_answer(mini_answer_id):
    try:
        return (
            MiniAnswer.objects.select_for_update()
            .select_related("mini_question", "learner")
            .get(pk=mini_answer_id)
        )
    except MiniAnswer.DoesNotExist:
        raise NotFound(f"Mini-answer {mini_answer_id} not found.")


def _advance_step(learner_id, cohort_id, ordinal):
    # conditional update keeps current_step monotonic under concurrent grading
    return CohortMembership.objects.filter(
        learner_id=learner_id, cohort_id=cohort_id, current_step__lt=ordinal
    ).update(current_step=ordinal)


# ---------- Answers ----------

def submit_answer(learner, assignment_id, payload, now=None):
    content = transitions.clean_text(payload.get("content"), "content")
    notes = (payload.get("notes") or "").strip()
    now = now or timezone.now()

    with transaction.atomic():
        try:
            assignment = Assignment.objects.get(pk=assignment_id)
        except Assignment.DoesNotExist:
            raise NotFound(f"Assignment {assignment_id} not found.")
        if not assignment.is_released:
            raise AssignmentNotReleased()

        membership = _enrolled_membership(learner, assignment.cohort_id)

        latest = latest_answer(learner, assignment)
        if not transitions.can_submit_new_answer(latest):
            if latest.status == Answer.Status.PENDING:
                raise AlreadyPending()
            raise AlreadyApproved()

        state = resolve_availability(learner, assignment, now=now, current_step=membership.current_step)
        if state == Availability.LOCKED:
            raise AssignmentLocked()
        if state == Availability.MINI_QUESTIONS_REQUIRED:
            raise MiniQuestionsIncomplete()

        try:
            with transaction.atomic():
                answer = Answer.objects.create(
                    learner=learner,
                    assignment=assignment,
                    cohort_id=assignment.cohort_id,
                    content=content,
                    notes=notes,
                    submitted_at=now,
                )
        except IntegrityError:
            raise AlreadyPending()

        logger.info(f"Answer {answer.pk} submitted by {learner.pk} for assignment {assignment.pk}")
        notify_user("answer_submitted", learner, {
            "answer_id": str(answer.pk),
            "assignment_title": assignment.title,
            "ordinal": assignment.ordinal,
        })

    return answer


def grade_answer(answer_id, grade, feedback, actor, now=None):
    now = now or timezone.now()

    with transaction.atomic():
        answer = _get_answer(answer_id)
        outcome = transitions.grade_outcome(answer.status, grade, feedback)

        fields = {
            "status": outcome.status,
            "grade": grade,
            "grade_points": outcome.points,
            "feedback": transitions.clean_feedback(feedback),
            "reviewed_at": now,
            "reviewed_by": actor,
        }
        if outcome.resubmission:
            requested, approved = outcome.resubmission
            fields.update(
                resubmission_requested=requested,
                resubmission_approved=approved,
                resubmission_requested_at=now,
            )

        if not Answer.objects.filter(pk=answer.pk, status=Answer.Status.PENDING).update(**fields):
            raise AlreadyReviewed()

        if outcome.status == Answer.Status.APPROVED:
            _advance_step(answer.learner_id, answer.cohort_id, answer.assignment.ordinal)

        answer.refresh_from_db()
        logger.info(f"Answer {answer.pk} graded {grade} ({outcome.points} pts) by {getattr(actor, 'pk', None)}")
        notify_user("answer_graded", answer.learner, {
            "answer_id": str(answer.pk),
            "assignment_title": answer.assignment.title,
            "grade": answer.grade,
            "grade_points": answer.grade_points,
            "status": answer.status,
            "feedback": answer.feedback,
        })

    return answer


def review_answer(answer_id, status, feedback, actor, now=None):
    """Legacy binary review: approve or reject without a grade."""
    now = now or timezone.now()

    with transaction.atomic():
        answer = _get_answer(answer_id)
        new_status = transitions.review_outcome(answer.status, status, feedback)

        updated = Answer.objects.filter(pk=answer.pk, status=Answer.Status.PENDING).update(
            status=new_status,
            grade=None,
            grade_points=None,
            feedback=transitions.clean_feedback(feedback),
            reviewed_at=now,
            reviewed_by=actor,
        )
        if not updated:
            raise AlreadyReviewed()

        if new_status == Answer.Status.APPROVED:
            _advance_step(answer.learner_id, answer.cohort_id, answer.assignment.ordinal)

        answer.refresh_from_db()
        logger.info(f"Answer {answer.pk} reviewed {new_status} by {getattr(actor, 'pk', None)}")
        notify_user("answer_graded", answer.learner, {
            "answer_id": str(answer.pk),
            "assignment_title": answer.assignment.title,
            "grade": None,
            "grade_points": None,
            "status": answer.status,
            "feedback": answer.feedback,
        })

    return answer


def request_answer_resubmission(answer_id, learner, now=None):
    """The learner asks to replace one of their reviewed answers."""
    now = now or timezone.now()

    with transaction.atomic():
        answer = _get_answer(answer_id, learner=learner)
        if answer.status == Answer.Status.PENDING:
            raise AlreadyPending("This answer has not been reviewed yet.")
        if answer.resubmission_approved is True:
            raise AlreadyApproved("A resubmission is already approved for this answer.")
        if not transitions.can_request_resubmission(answer.resubmission_requested, answer.resubmission_approved):
            raise AlreadyPending("A resubmission request is already waiting for a decision.")

        Answer.objects.filter(pk=answer.pk).update(
            resubmission_requested=True,
            resubmission_approved=None,
            resubmission_requested_at=now,
        )
        answer.refresh_from_db()
        logger.info(f"Resubmission requested for answer {answer.pk}")

    return answer


def decide_answer_resubmission(answer_id, approve, actor):
    with transaction.atomic():
        answer = _get_answer(answer_id)
        if not answer.resubmission_requested:
            raise NoResubmissionRequested()
        if not transitions.can_decide_resubmission(answer.resubmission_requested, answer.resubmission_approved):
            raise AlreadyReviewed("This resubmission request has already been decided.")

        updated = Answer.objects.filter(
            pk=answer.pk, resubmission_requested=True, resubmission_approved__isnull=True
        ).update(resubmission_approved=bool(approve))
        if not updated:
            raise AlreadyReviewed("This resubmission request has already been decided.")

        answer.refresh_from_db()
        logger.info(f"Resubmission for answer {answer.pk} {'approved' if approve else 'denied'} by {getattr(actor, 'pk', None)}")
        notify_user("resubmission_decided", answer.learner, {
            "answer_id": str(answer.pk),
            "title": answer.assignment.title,
            "approved": answer.resubmission_approved,
        })

    return answer


# ---------- Mini-answers ----------

def submit_mini_answer(learner, mini_question_id, link_url, notes="", now=None):
    link_url = (link_url or "").strip()
    try:
        URLValidator(schemes=["http", "https"])(link_url)
    except ValidationError:
        raise InvalidPayload("link_url must be a valid http(s) URL.")
    notes = (notes or "").strip()
    now = now or timezone.now()

    with transaction.atomic():
        try:
            mini_question = (
                MiniQuestion.objects.select_related("section__assignment")
                .get(pk=mini_question_id, section__assignment__is_released=True)
            )
        except MiniQuestion.DoesNotExist:
            raise NotFound(f"Mini-question {mini_question_id} not found.")

        assignment = mini_question.section.assignment
        if not mini_question.is_released:
            if mini_question.release_date is None or mini_question.release_date > now:
                raise NotFound(f"Mini-question {mini_question_id} not found.")
            # due but not swept yet
            catch_up_assignment(assignment.pk, now)

        membership = _enrolled_membership(learner, assignment.cohort_id)
        if assignment.ordinal > membership.current_step + 1:
            raise AssignmentLocked()

        existing = MiniAnswer.objects.select_for_update().filter(
            learner=learner, mini_question=mini_question, cohort_id=assignment.cohort_id
        ).first()

        if existing is not None:
            if existing.resubmission_approved is not True:
                raise AlreadySubmitted()
            existing.link_url = link_url
            existing.notes = notes
            existing.submitted_at = now
            existing.resubmission_requested = False
            existing.resubmission_approved = None
            existing.resubmission_requested_at = None
            existing.save(update_fields=[
                'link_url', 'notes', 'submitted_at', 'resubmission_requested',
                'resubmission_approved', 'resubmission_requested_at', 'updated_at',
            ])
            logger.info(f"Mini-answer {existing.pk} resubmitted by {learner.pk}")
            return existing

        try:
            with transaction.atomic():
                mini_answer = MiniAnswer.objects.create(
                    learner=learner,
                    mini_question=mini_question,
                    cohort_id=assignment.cohort_id,
                    link_url=link_url,
                    notes=notes,
                    submitted_at=now,
                )
        except IntegrityError:
            raise AlreadySubmitted()

        logger.info(f"Mini-answer {mini_answer.pk} submitted by {learner.pk}")

    return mini_answer


def request_mini_resubmission(mini_answer_id, actor, now=None):
    """Flag a mini-answer for resubmission. Reopens any earlier decision."""
    now = now or timezone.now()

    with transaction.atomic():
        mini_answer = _get_mini_answer(mini_answer_id)
        mini_answer.resubmission_requested = True
        mini_answer.resubmission_approved = None
        mini_answer.resubmission_requested_at = now
        mini_answer.resubmission_requested_by = actor
        mini_answer.resubmission_decided_by = None
        mini_answer.save(update_fields=[
            'resubmission_requested', 'resubmission_approved', 'resubmission_requested_at',
            'resubmission_requested_by', 'resubmission_decided_by', 'updated_at',
        ])

        logger.info(f"Resubmission requested for mini-answer {mini_answer.pk}")
        notify_user("mini_answer_resubmission_requested", mini_answer.learner, {
            "mini_answer_id": str(mini_answer.pk),
            "mini_question_title": mini_answer.mini_question.title,
        })

    return mini_answer


def decide_mini_resubmission(mini_answer_id, approve, actor):
    with transaction.atomic():
        mini_answer = _get_mini_answer(mini_answer_id)
        if not mini_answer.resubmission_requested:
            raise NoResubmissionRequested()
        if not transitions.can_decide_resubmission(mini_answer.resubmission_requested, mini_answer.resubmission_approved):
            raise AlreadyReviewed("This resubmission request has already been decided.")

        updated = MiniAnswer.objects.filter(
            pk=mini_answer.pk, resubmission_requested=True, resubmission_approved__isnull=True
        ).update(resubmission_approved=bool(approve), resubmission_decided_by=actor)
        if not updated:
            raise AlreadyReviewed("This resubmission request has already been decided.")

        mini_answer.refresh_from_db()
        logger.info(f"Resubmission for mini-answer {mini_answer.pk} {'approved' if approve else 'denied'}")
        notify_user("resubmission_decided", mini_answer.learner, {
            "mini_answer_id": str(mini_answer.pk),
            "title": mini_answer.mini_question.title,
            "approved": mini_answer.resubmission_approved,
        })

    return mini_answer
