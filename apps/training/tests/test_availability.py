import pytest

from apps.training.models import Answer
from apps.training.services.availability import (
    Availability,
    resolve_availability,
    resolve_for_cohort,
)
from .helpers import at


def _answer(learner, assignment, status=Answer.Status.PENDING, submitted_at=None):
    return Answer.objects.create(
        learner=learner,
        assignment=assignment,
        cohort=assignment.cohort,
        content="my answer",
        status=status,
        submitted_at=submitted_at or at(2025, 8, 3),
    )


@pytest.mark.django_db
class TestResolveAvailability:

    @pytest.fixture(autouse=True)
    def setup(self, learner, cohort, enroll):
        self.learner = learner
        self.membership = enroll(learner, cohort, current_step=2)

    def test_sequential_unlock(self, make_assignment):
        assert resolve_availability(self.learner, make_assignment(3)) == Availability.AVAILABLE
        for ordinal in (4, 5, 9):
            assert resolve_availability(self.learner, make_assignment(ordinal)) == Availability.LOCKED

    def test_without_membership_only_first_assignment_is_open(self, other_learner, make_assignment):
        assert resolve_availability(other_learner, make_assignment(1)) == Availability.AVAILABLE
        assert resolve_availability(other_learner, make_assignment(2)) == Availability.LOCKED

    def test_gating_completeness(self, make_assignment, make_mini_question, answer_mini):
        assignment = make_assignment(3)
        minis = [make_mini_question(assignment, i) for i in (1, 2, 3)]

        for mini in minis[:2]:
            answer_mini(self.learner, mini)
            assert resolve_availability(self.learner, assignment) == Availability.MINI_QUESTIONS_REQUIRED

        answer_mini(self.learner, minis[2])
        assert resolve_availability(self.learner, assignment) == Availability.AVAILABLE

    def test_unreleased_mini_questions_do_not_gate(self, make_assignment, make_mini_question):
        assignment = make_assignment(3)
        make_mini_question(assignment, released=False, release_date=at(2025, 8, 30))
        make_mini_question(assignment, 2, released=False)

        assert resolve_availability(self.learner, assignment, now=at(2025, 8, 1)) == Availability.AVAILABLE

    def test_due_mini_question_gates_before_the_sweep(self, make_assignment, make_mini_question, answer_mini):
        assignment = make_assignment(3)
        due = make_mini_question(assignment, released=False, release_date=at(2025, 8, 1))

        assert resolve_availability(self.learner, assignment, now=at(2025, 7, 31)) == Availability.AVAILABLE
        assert resolve_availability(self.learner, assignment, now=at(2025, 8, 1)) == Availability.MINI_QUESTIONS_REQUIRED

        due.refresh_from_db()
        assert not due.is_released

        answer_mini(self.learner, due)
        assert resolve_availability(self.learner, assignment, now=at(2025, 8, 2)) == Availability.AVAILABLE

    def test_due_mini_question_of_unreleased_assignment_does_not_gate(self, make_assignment, make_mini_question):
        assignment = make_assignment(3, released=False)
        make_mini_question(assignment, released=False, release_date=at(2025, 8, 1))

        assert resolve_availability(self.learner, assignment, now=at(2025, 8, 2)) == Availability.AVAILABLE

    def test_resolve_for_cohort_uses_the_given_instant(self, cohort, make_assignment, make_mini_question):
        assignment = make_assignment(1)
        make_mini_question(assignment, released=False, release_date=at(2025, 8, 1))

        assert resolve_for_cohort(self.learner, cohort, now=at(2025, 7, 1)) == [(assignment, Availability.AVAILABLE)]
        assert resolve_for_cohort(self.learner, cohort, now=at(2025, 8, 1)) == [
            (assignment, Availability.MINI_QUESTIONS_REQUIRED)
        ]

    def test_other_learners_mini_answers_do_not_count(self, other_learner, make_assignment, make_mini_question, answer_mini):
        assignment = make_assignment(3)
        answer_mini(other_learner, make_mini_question(assignment))

        assert resolve_availability(self.learner, assignment) == Availability.MINI_QUESTIONS_REQUIRED

    def test_pending_answer_is_submitted(self, make_assignment):
        assignment = make_assignment(3)
        _answer(self.learner, assignment)

        assert resolve_availability(self.learner, assignment) == Availability.SUBMITTED

    def test_latest_answer_decides(self, make_assignment):
        assignment = make_assignment(2)
        _answer(self.learner, assignment, Answer.Status.REJECTED, submitted_at=at(2025, 8, 1))
        _answer(self.learner, assignment, Answer.Status.APPROVED, submitted_at=at(2025, 8, 4))

        assert resolve_availability(self.learner, assignment) == Availability.COMPLETED

    def test_locked_wins_over_everything(self, make_assignment):
        assignment = make_assignment(6)
        _answer(self.learner, assignment, Answer.Status.APPROVED)

        assert resolve_availability(self.learner, assignment) == Availability.LOCKED

    def test_resolve_for_cohort_lists_released_assignments_in_order(self, cohort, make_assignment):
        make_assignment(4)
        make_assignment(1)
        make_assignment(3)
        make_assignment(2, released=False)

        rows = resolve_for_cohort(self.learner, cohort)

        assert [(a.ordinal, state) for a, state in rows] == [
            (1, Availability.AVAILABLE),
            (3, Availability.AVAILABLE),
            (4, Availability.LOCKED),
        ]
