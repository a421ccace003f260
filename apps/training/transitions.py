"""
Pure state-transition rules for answers, mini-answers and memberships.

Nothing here touches the database: services load rows, ask these functions
what the next state is, then write it with a conditional update.
"""
# apps/training/transitions.py
from collections import namedtuple

from .exceptions import (
    AlreadyReviewed,
    InvalidGrade,
    InvalidPayload,
    InvalidStatus,
    MissingFeedback,
)
from .models import Answer, CohortMembership


GradeOutcome = namedtuple("GradeOutcome", ["status", "points", "resubmission"])

# resubmission is (requested, approved) or None to leave the triple untouched
GRADE_TABLE = {
    Answer.Grade.GOLD: GradeOutcome(Answer.Status.APPROVED, 100, None),
    Answer.Grade.SILVER: GradeOutcome(Answer.Status.APPROVED, 85, None),
    Answer.Grade.COPPER: GradeOutcome(Answer.Status.APPROVED, 70, None),
    Answer.Grade.NEEDS_RESUBMISSION: GradeOutcome(Answer.Status.REJECTED, 0, (True, True)),
}


def grade_outcome(current_status, grade, feedback):
    """
    Validate a grading request against the answer's current status and
    return the GradeOutcome. The status check comes first so a reviewed
    answer always reports AlreadyReviewed.
    """
    if current_status != Answer.Status.PENDING:
        raise AlreadyReviewed()
    clean_feedback(feedback)
    try:
        return GRADE_TABLE[Answer.Grade(grade)]
    except ValueError:
        raise InvalidGrade()


def review_outcome(current_status, status, feedback):
    """Legacy binary review: APPROVED or REJECTED without a grade."""
    if current_status != Answer.Status.PENDING:
        raise AlreadyReviewed()
    clean_feedback(feedback)
    if status not in (Answer.Status.APPROVED, Answer.Status.REJECTED):
        raise InvalidStatus(f"Review status must be APPROVED or REJECTED, got {status!r}.")
    return Answer.Status(status)


def can_request_resubmission(requested, approved):
    """A request is open when requested and not yet decided."""
    return not (requested and approved is None)


def can_decide_resubmission(requested, approved):
    return requested and approved is None


def can_submit_new_answer(latest):
    """
    Whether a learner may create another Answer given their latest one
    (or None).
    """
    if latest is None:
        return True
    if latest.status == Answer.Status.PENDING:
        return False
    if latest.status == Answer.Status.REJECTED:
        return True
    return latest.resubmission_approved is True


def parse_membership_status(value):
    try:
        return CohortMembership.Status(value)
    except ValueError:
        raise InvalidStatus(f"Unknown membership status {value!r}.")


def clean_text(value, field_name, required=True):
    if value is not None and not isinstance(value, str):
        raise InvalidPayload(f"{field_name} must be text.")
    text = (value or "").strip()
    if required and not text:
        raise InvalidPayload(f"{field_name} is required.")
    return text


def clean_feedback(feedback):
    """Stripped review feedback; blank or missing feedback is rejected."""
    text = clean_text(feedback, "feedback", required=False)
    if not text:
        raise MissingFeedback()
    return text
