import pytest

from apps.training import transitions
from apps.training.exceptions import (
    AlreadyReviewed,
    InvalidGrade,
    InvalidPayload,
    InvalidStatus,
    MissingFeedback,
)
from apps.training.models import Answer, CohortMembership


class TestGradeOutcome:

    @pytest.mark.parametrize("grade, status, points", [
        ("GOLD", Answer.Status.APPROVED, 100),
        ("SILVER", Answer.Status.APPROVED, 85),
        ("COPPER", Answer.Status.APPROVED, 70),
        ("NEEDS_RESUBMISSION", Answer.Status.REJECTED, 0),
    ])
    def test_grade_table(self, grade, status, points):
        outcome = transitions.grade_outcome(Answer.Status.PENDING, grade, "Feedback")

        assert outcome.status == status
        assert outcome.points == points

    def test_needs_resubmission_self_approves(self):
        outcome = transitions.grade_outcome(Answer.Status.PENDING, "NEEDS_RESUBMISSION", "Try again")
        assert outcome.resubmission == (True, True)

    @pytest.mark.parametrize("current", [Answer.Status.APPROVED, Answer.Status.REJECTED])
    @pytest.mark.parametrize("grade", ["GOLD", "NEEDS_RESUBMISSION", "PLATINUM", ""])
    def test_reviewed_answer_always_reports_already_reviewed(self, current, grade):
        with pytest.raises(AlreadyReviewed):
            transitions.grade_outcome(current, grade, "")

    @pytest.mark.parametrize("feedback", ["", "   ", None])
    def test_feedback_required(self, feedback):
        with pytest.raises(MissingFeedback):
            transitions.grade_outcome(Answer.Status.PENDING, "GOLD", feedback)

    @pytest.mark.parametrize("feedback", [123, ["Nice"]])
    def test_feedback_must_be_text(self, feedback):
        with pytest.raises(InvalidPayload):
            transitions.grade_outcome(Answer.Status.PENDING, "GOLD", feedback)
        with pytest.raises(InvalidPayload):
            transitions.review_outcome(Answer.Status.PENDING, "APPROVED", feedback)

    def test_unknown_grade(self):
        with pytest.raises(InvalidGrade):
            transitions.grade_outcome(Answer.Status.PENDING, "PLATINUM", "Nice")


class TestReviewOutcome:

    def test_binary_review(self):
        assert transitions.review_outcome(Answer.Status.PENDING, "APPROVED", "ok") == Answer.Status.APPROVED
        assert transitions.review_outcome(Answer.Status.PENDING, "REJECTED", "no") == Answer.Status.REJECTED

    def test_pending_is_not_a_review_result(self):
        with pytest.raises(InvalidStatus):
            transitions.review_outcome(Answer.Status.PENDING, "PENDING", "hmm")


class TestHelpers:

    def test_resubmission_request_rules(self):
        assert transitions.can_request_resubmission(False, None)
        assert not transitions.can_request_resubmission(True, None)
        assert transitions.can_request_resubmission(True, False)
        assert transitions.can_decide_resubmission(True, None)
        assert not transitions.can_decide_resubmission(True, True)
        assert not transitions.can_decide_resubmission(False, None)

    def test_can_submit_new_answer(self):
        assert transitions.can_submit_new_answer(None)
        assert not transitions.can_submit_new_answer(Answer(status=Answer.Status.PENDING))
        assert transitions.can_submit_new_answer(Answer(status=Answer.Status.REJECTED))
        assert not transitions.can_submit_new_answer(Answer(status=Answer.Status.APPROVED))
        assert transitions.can_submit_new_answer(
            Answer(status=Answer.Status.APPROVED, resubmission_approved=True)
        )

    def test_parse_membership_status(self):
        assert transitions.parse_membership_status("GRADUATED") == CohortMembership.Status.GRADUATED
        with pytest.raises(InvalidStatus):
            transitions.parse_membership_status("ALUMNI")

    def test_clean_text(self):
        assert transitions.clean_text("  hi ", "content") == "hi"
        with pytest.raises(InvalidPayload):
            transitions.clean_text("   ", "content")

    def test_clean_feedback(self):
        assert transitions.clean_feedback("  Nice work ") == "Nice work"
        with pytest.raises(MissingFeedback):
            transitions.clean_feedback(None)
