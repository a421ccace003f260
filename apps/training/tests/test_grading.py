import pytest

from apps.training.exceptions import (
    AlreadyApproved,
    AlreadyPending,
    AlreadyReviewed,
    AlreadySubmitted,
    AssignmentLocked,
    AssignmentNotReleased,
    InvalidGrade,
    InvalidPayload,
    InvalidStatus,
    MiniQuestionsIncomplete,
    MissingFeedback,
    NoResubmissionRequested,
    NotEnrolled,
    NotFound,
)
from apps.training.models import Answer, CohortMembership
from apps.training.services.grading import (
    decide_answer_resubmission,
    decide_mini_resubmission,
    grade_answer,
    request_answer_resubmission,
    request_mini_resubmission,
    review_answer,
    submit_answer,
    submit_mini_answer,
)
from .helpers import at


@pytest.mark.django_db
class TestSubmitAnswer:

    @pytest.fixture(autouse=True)
    def setup(self, learner, cohort, enroll, make_assignment):
        self.learner = learner
        self.membership = enroll(learner, cohort)
        self.assignment = make_assignment(1)

    def test_creates_pending_answer(self):
        answer = submit_answer(self.learner, self.assignment.pk, {"content": "  my work ", "notes": "n"}, now=at(2025, 8, 3))

        assert answer.status == Answer.Status.PENDING
        assert answer.content == "my work"
        assert answer.cohort_id == self.assignment.cohort_id
        assert answer.submitted_at == at(2025, 8, 3)

    def test_blank_content_rejected(self):
        with pytest.raises(InvalidPayload):
            submit_answer(self.learner, self.assignment.pk, {"content": "   "})

    def test_second_submission_while_pending(self):
        submit_answer(self.learner, self.assignment.pk, {"content": "first"})

        with pytest.raises(AlreadyPending):
            submit_answer(self.learner, self.assignment.pk, {"content": "second"})

    def test_submission_after_approval(self, cohort_admin):
        answer = submit_answer(self.learner, self.assignment.pk, {"content": "first"})
        grade_answer(answer.pk, "GOLD", "Great", cohort_admin)

        with pytest.raises(AlreadyApproved):
            submit_answer(self.learner, self.assignment.pk, {"content": "again"})

    def test_submission_after_rejection(self, cohort_admin):
        answer = submit_answer(self.learner, self.assignment.pk, {"content": "first"}, now=at(2025, 8, 3))
        review_answer(answer.pk, "REJECTED", "Not yet", cohort_admin)

        retry = submit_answer(self.learner, self.assignment.pk, {"content": "second"}, now=at(2025, 8, 4))
        assert retry.status == Answer.Status.PENDING

    def test_mini_questions_must_be_complete(self, make_mini_question):
        make_mini_question(self.assignment)

        with pytest.raises(MiniQuestionsIncomplete):
            submit_answer(self.learner, self.assignment.pk, {"content": "work"})

    def test_due_mini_question_gates_before_the_sweep(self, make_mini_question):
        make_mini_question(self.assignment, released=False, release_date=at(2025, 8, 1))

        with pytest.raises(MiniQuestionsIncomplete):
            submit_answer(self.learner, self.assignment.pk, {"content": "work"}, now=at(2025, 8, 3))

    def test_future_mini_question_does_not_gate(self, make_mini_question):
        make_mini_question(self.assignment, released=False, release_date=at(2025, 8, 30))

        answer = submit_answer(self.learner, self.assignment.pk, {"content": "work"}, now=at(2025, 8, 3))
        assert answer.status == Answer.Status.PENDING

    def test_locked_assignment(self, make_assignment):
        with pytest.raises(AssignmentLocked):
            submit_answer(self.learner, make_assignment(3).pk, {"content": "work"})

    def test_unreleased_assignment(self, make_assignment):
        with pytest.raises(AssignmentNotReleased):
            submit_answer(self.learner, make_assignment(2, released=False).pk, {"content": "work"})

    def test_requires_enrolment(self):
        CohortMembership.objects.filter(pk=self.membership.pk).update(status=CohortMembership.Status.SUSPENDED)

        with pytest.raises(NotEnrolled):
            submit_answer(self.learner, self.assignment.pk, {"content": "work"})

    def test_notifies_learner_on_commit(self, django_capture_on_commit_callbacks, mailoutbox):
        with django_capture_on_commit_callbacks(execute=True):
            submit_answer(self.learner, self.assignment.pk, {"content": "work"})

        assert len(mailoutbox) == 1
        assert "Answer Submitted" in mailoutbox[0].subject
        assert self.assignment.title in mailoutbox[0].body


@pytest.mark.django_db
class TestGradeAnswer:

    @pytest.fixture(autouse=True)
    def setup(self, learner, cohort, enroll, make_assignment, cohort_admin):
        self.learner = learner
        self.admin = cohort_admin
        self.membership = enroll(learner, cohort, current_step=1)
        self.assignment = make_assignment(2)
        self.answer = submit_answer(learner, self.assignment.pk, {"content": "work"})

    @pytest.mark.parametrize("grade, points", [("GOLD", 100), ("SILVER", 85), ("COPPER", 70)])
    def test_passing_grades_approve_and_advance(self, grade, points):
        answer = grade_answer(self.answer.pk, grade, "Nice", self.admin, now=at(2025, 8, 5))

        assert answer.status == Answer.Status.APPROVED
        assert answer.grade == grade
        assert answer.grade_points == points
        assert answer.reviewed_by == self.admin
        assert answer.reviewed_at == at(2025, 8, 5)
        self.membership.refresh_from_db()
        assert self.membership.current_step == 2

    def test_needs_resubmission(self):
        answer = grade_answer(self.answer.pk, "NEEDS_RESUBMISSION", "Try again", self.admin, now=at(2025, 8, 5))

        assert answer.status == Answer.Status.REJECTED
        assert answer.grade_points == 0
        assert answer.resubmission_requested is True
        assert answer.resubmission_approved is True
        assert answer.resubmission_requested_at == at(2025, 8, 5)
        self.membership.refresh_from_db()
        assert self.membership.current_step == 1

        # the learner may submit again straight away
        assert submit_answer(self.learner, self.assignment.pk, {"content": "v2"}).status == Answer.Status.PENDING

    def test_step_never_regresses(self):
        CohortMembership.objects.filter(pk=self.membership.pk).update(current_step=5)

        grade_answer(self.answer.pk, "GOLD", "Nice", self.admin)

        self.membership.refresh_from_db()
        assert self.membership.current_step == 5

    @pytest.mark.parametrize("grade", ["GOLD", "NEEDS_RESUBMISSION", "BOGUS"])
    def test_no_double_grading(self, grade):
        grade_answer(self.answer.pk, "SILVER", "ok", self.admin)

        with pytest.raises(AlreadyReviewed):
            grade_answer(self.answer.pk, grade, "again", self.admin)

    def test_missing_feedback_leaves_answer_pending(self):
        with pytest.raises(MissingFeedback):
            grade_answer(self.answer.pk, "GOLD", "  ", self.admin)

        self.answer.refresh_from_db()
        assert self.answer.status == Answer.Status.PENDING

    @pytest.mark.parametrize("review", [grade_answer, review_answer])
    def test_non_text_feedback(self, review):
        verdict = "GOLD" if review is grade_answer else "APPROVED"

        with pytest.raises(InvalidPayload):
            review(self.answer.pk, verdict, 123, self.admin)

        self.answer.refresh_from_db()
        assert self.answer.status == Answer.Status.PENDING

    def test_invalid_grade(self):
        with pytest.raises(InvalidGrade):
            grade_answer(self.answer.pk, "PLATINUM", "ok", self.admin)

    def test_unknown_answer(self):
        with pytest.raises(NotFound):
            grade_answer("6f1b4b7e-3f0a-4c55-9c43-8a8d0f4b7a11", "GOLD", "ok", self.admin)

    def test_legacy_review(self):
        answer = review_answer(self.answer.pk, "APPROVED", "Fine", self.admin)

        assert answer.status == Answer.Status.APPROVED
        assert answer.grade is None and answer.grade_points is None
        self.membership.refresh_from_db()
        assert self.membership.current_step == 2

        with pytest.raises(AlreadyReviewed):
            review_answer(self.answer.pk, "REJECTED", "Changed my mind", self.admin)

    def test_legacy_review_status_must_be_terminal(self):
        with pytest.raises(InvalidStatus):
            review_answer(self.answer.pk, "PENDING", "hmm", self.admin)

    def test_grade_notification(self, django_capture_on_commit_callbacks, mailoutbox):
        with django_capture_on_commit_callbacks(execute=True):
            grade_answer(self.answer.pk, "SILVER", "Good job", self.admin)

        assert len(mailoutbox) == 1
        assert "Good job" in mailoutbox[0].body
        assert self.learner.notifications.get().payload["grade_points"] == 85


@pytest.mark.django_db
class TestAnswerResubmission:

    @pytest.fixture(autouse=True)
    def setup(self, learner, cohort, enroll, make_assignment, cohort_admin):
        self.learner = learner
        self.admin = cohort_admin
        enroll(learner, cohort)
        self.assignment = make_assignment(1)
        self.answer = submit_answer(learner, self.assignment.pk, {"content": "work"})

    def test_cannot_request_while_pending(self):
        with pytest.raises(AlreadyPending):
            request_answer_resubmission(self.answer.pk, self.learner)

    def test_request_and_approve(self):
        grade_answer(self.answer.pk, "COPPER", "Meh", self.admin)

        answer = request_answer_resubmission(self.answer.pk, self.learner, now=at(2025, 8, 6))
        assert answer.resubmission_requested is True
        assert answer.resubmission_approved is None
        assert answer.resubmission_requested_at == at(2025, 8, 6)

        with pytest.raises(AlreadyPending):
            request_answer_resubmission(self.answer.pk, self.learner)

        answer = decide_answer_resubmission(self.answer.pk, True, self.admin)
        assert answer.resubmission_approved is True

        with pytest.raises(AlreadyReviewed):
            decide_answer_resubmission(self.answer.pk, False, self.admin)

        assert submit_answer(self.learner, self.assignment.pk, {"content": "better"}).status == Answer.Status.PENDING

    def test_denied_request_keeps_answer_final(self):
        grade_answer(self.answer.pk, "COPPER", "Meh", self.admin)
        request_answer_resubmission(self.answer.pk, self.learner)
        decide_answer_resubmission(self.answer.pk, False, self.admin)

        with pytest.raises(AlreadyApproved):
            submit_answer(self.learner, self.assignment.pk, {"content": "better"})

    def test_decision_requires_request(self):
        grade_answer(self.answer.pk, "GOLD", "Great", self.admin)

        with pytest.raises(NoResubmissionRequested):
            decide_answer_resubmission(self.answer.pk, True, self.admin)

    def test_only_owner_may_request(self, other_learner):
        grade_answer(self.answer.pk, "GOLD", "Great", self.admin)

        with pytest.raises(NotFound):
            request_answer_resubmission(self.answer.pk, other_learner)


@pytest.mark.django_db
class TestMiniAnswers:

    @pytest.fixture(autouse=True)
    def setup(self, learner, cohort, enroll, make_assignment, make_mini_question, cohort_admin):
        self.learner = learner
        self.admin = cohort_admin
        enroll(learner, cohort)
        self.assignment = make_assignment(1)
        self.mini = make_mini_question(self.assignment)

    def test_submit(self):
        mini_answer = submit_mini_answer(self.learner, self.mini.pk, "https://example.com/x", "notes", now=at(2025, 8, 2))

        assert mini_answer.link_url == "https://example.com/x"
        assert mini_answer.cohort_id == self.assignment.cohort_id
        assert mini_answer.submitted_at == at(2025, 8, 2)

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/file"])
    def test_malformed_url(self, url):
        with pytest.raises(InvalidPayload):
            submit_mini_answer(self.learner, self.mini.pk, url)

    def test_unreleased_mini_question_is_hidden(self, make_mini_question):
        hidden = make_mini_question(self.assignment, 2, released=False)

        with pytest.raises(NotFound):
            submit_mini_answer(self.learner, hidden.pk, "https://example.com/x")

    def test_future_mini_question_is_hidden(self, make_mini_question):
        upcoming = make_mini_question(self.assignment, 2, released=False, release_date=at(2025, 8, 30))

        with pytest.raises(NotFound):
            submit_mini_answer(self.learner, upcoming.pk, "https://example.com/x", now=at(2025, 8, 2))

    def test_due_mini_question_is_released_on_answer(self, make_mini_question):
        due = make_mini_question(self.assignment, 2, released=False, release_date=at(2025, 8, 1))

        mini_answer = submit_mini_answer(self.learner, due.pk, "https://example.com/x", now=at(2025, 8, 2))

        assert mini_answer.mini_question_id == due.pk
        due.refresh_from_db()
        assert due.is_released
        assert due.actual_release_date == at(2025, 8, 2)

    def test_mini_question_of_unreleased_assignment_is_hidden(self, make_assignment, make_mini_question):
        draft = make_mini_question(make_assignment(2, released=False))

        with pytest.raises(NotFound):
            submit_mini_answer(self.learner, draft.pk, "https://example.com/x")

    def test_locked_assignment(self, make_assignment, make_mini_question):
        locked_mini = make_mini_question(make_assignment(3))

        with pytest.raises(AssignmentLocked):
            submit_mini_answer(self.learner, locked_mini.pk, "https://example.com/x")

    def test_second_submission_needs_approved_resubmission(self):
        mini_answer = submit_mini_answer(self.learner, self.mini.pk, "https://example.com/v1")

        with pytest.raises(AlreadySubmitted):
            submit_mini_answer(self.learner, self.mini.pk, "https://example.com/v2")

        request_mini_resubmission(mini_answer.pk, self.admin, now=at(2025, 8, 4))
        decide_mini_resubmission(mini_answer.pk, True, self.admin)

        replaced = submit_mini_answer(self.learner, self.mini.pk, "https://example.com/v2")
        assert replaced.pk == mini_answer.pk
        assert replaced.link_url == "https://example.com/v2"
        assert replaced.resubmission_requested is False
        assert replaced.resubmission_approved is None

    def test_resubmission_decided_once(self):
        mini_answer = submit_mini_answer(self.learner, self.mini.pk, "https://example.com/v1")

        with pytest.raises(NoResubmissionRequested):
            decide_mini_resubmission(mini_answer.pk, True, self.admin)

        flagged = request_mini_resubmission(mini_answer.pk, self.admin, now=at(2025, 8, 4))
        assert flagged.resubmission_requested is True
        assert flagged.resubmission_approved is None
        assert flagged.resubmission_requested_by == self.admin

        decided = decide_mini_resubmission(mini_answer.pk, False, self.admin)
        assert decided.resubmission_approved is False
        assert decided.resubmission_decided_by == self.admin

        with pytest.raises(AlreadyReviewed):
            decide_mini_resubmission(mini_answer.pk, True, self.admin)

    def test_request_notifies_learner(self, django_capture_on_commit_callbacks, mailoutbox):
        mini_answer = submit_mini_answer(self.learner, self.mini.pk, "https://example.com/v1")

        with django_capture_on_commit_callbacks(execute=True):
            request_mini_resubmission(mini_answer.pk, self.admin)

        assert len(mailoutbox) == 1
        assert self.mini.title in mailoutbox[0].body
