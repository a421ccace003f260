# apps/training/exceptions.py


class TrainingError(Exception):
    """Base class for every error raised by the training engine."""
    code = "training_error"
    http_status = 400
    default_detail = "Training operation failed."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# ---------- Validation (400) ----------

class ValidationFailed(TrainingError):
    http_status = 400


class MissingFeedback(ValidationFailed):
    code = "missing_feedback"
    default_detail = "Feedback is required when reviewing an answer."


class InvalidGrade(ValidationFailed):
    code = "invalid_grade"
    default_detail = "Grade must be one of GOLD, SILVER, COPPER or NEEDS_RESUBMISSION."


class InvalidPayload(ValidationFailed):
    code = "invalid_payload"
    default_detail = "The submitted data is invalid."


class InvalidStatus(ValidationFailed):
    code = "invalid_status"
    default_detail = "Unknown status."


# ---------- Not found (404) ----------

class NotFound(TrainingError):
    code = "not_found"
    http_status = 404
    default_detail = "The requested object does not exist."


# ---------- Conflict (409) ----------

class Conflict(TrainingError):
    http_status = 409


class AlreadyReviewed(Conflict):
    code = "already_reviewed"
    default_detail = "This submission has already been reviewed."


class AlreadyPending(Conflict):
    code = "already_pending"
    default_detail = "An answer for this assignment is already waiting for review."


class AlreadyApproved(Conflict):
    code = "already_approved"
    default_detail = "This assignment has already been approved."


class MiniQuestionsIncomplete(Conflict):
    code = "mini_questions_incomplete"
    default_detail = "Complete all released mini-questions before submitting."


class AssignmentLocked(Conflict):
    code = "assignment_locked"
    default_detail = "Complete the previous assignment first."


class AssignmentNotReleased(Conflict):
    code = "assignment_not_released"
    default_detail = "This assignment has not been released yet."


class NotEnrolled(Conflict):
    code = "not_enrolled"
    default_detail = "You are not enrolled in this cohort."


class NotAMember(Conflict):
    code = "not_a_member"
    default_detail = "The user is not a member of this cohort."


class MultipleActiveEnrollments(Conflict):
    code = "multiple_active_enrollments"
    default_detail = "The user is already enrolled in another cohort."


class CohortInactive(Conflict):
    code = "cohort_inactive"
    default_detail = "The cohort is not active."


class DuplicateOrdinal(Conflict):
    code = "duplicate_ordinal"
    default_detail = "That number is already used in this cohort."


class DuplicateCohort(Conflict):
    code = "duplicate_cohort"
    default_detail = "A cohort with this name and number already exists."


class DeadlineConflict(Conflict):
    code = "deadline_conflict"

    def __init__(self, release_date, deadline):
        self.release_date = release_date
        self.deadline = deadline
        super().__init__(
            f"Mini-question release date {release_date.isoformat()} is after "
            f"the assignment deadline {deadline.isoformat()}."
        )


class HasDependentSubmissions(Conflict):
    code = "has_dependent_submissions"
    default_detail = "Cannot delete content that learners have already answered."


class AlreadySubmitted(Conflict):
    code = "already_submitted"
    default_detail = "You have already answered this mini-question."


class NoResubmissionRequested(Conflict):
    code = "no_resubmission_requested"
    default_detail = "No resubmission has been requested."
