import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.training.models import (
    Assignment,
    Cohort,
    CohortMembership,
    ContentSection,
    MiniAnswer,
    MiniQuestion,
    Module,
)
from .helpers import at

User = get_user_model()


@pytest.fixture
def cohort_admin(db):
    return User.objects.create_admin(email="admin@example.com", password="pass123")


@pytest.fixture
def learner(db):
    return User.objects.create_user(email="learner@example.com", password="pass123", full_name="Ada Learner")


@pytest.fixture
def other_learner(db):
    return User.objects.create_user(email="other@example.com", password="pass123")


@pytest.fixture
def cohort(db):
    return Cohort.objects.create(name="Data Bootcamp", number=1, start_date=at(2025, 7, 1))


@pytest.fixture
def module(cohort):
    return Module.objects.create(cohort=cohort, ordinal=1, title="Foundations", is_released=True, released_at=at(2025, 7, 1))


@pytest.fixture
def enroll():
    def _enroll(user, cohort, current_step=0):
        membership = CohortMembership.objects.create(learner=user, cohort=cohort, current_step=current_step)
        user.current_cohort = cohort
        user.save(update_fields=["current_cohort"])
        return membership
    return _enroll


@pytest.fixture
def make_assignment(cohort, module):
    def _make(ordinal, released=True, deadline=None, **fields):
        return Assignment.objects.create(
            cohort=cohort,
            module=fields.pop("module", module),
            ordinal=ordinal,
            title=fields.pop("title", f"Assignment {ordinal}"),
            deadline=deadline or at(2025, 9, 1),
            is_released=released,
            released_at=at(2025, 7, 1) if released else None,
            **fields,
        )
    return _make


@pytest.fixture
def make_mini_question():
    def _make(assignment, order_index=1, released=True, release_date=None):
        section, _ = ContentSection.objects.get_or_create(
            assignment=assignment, order_index=1, defaults={"title": "Reading"}
        )
        return MiniQuestion.objects.create(
            section=section,
            title=f"Activity {order_index}",
            prompt="Share a link to your notes",
            order_index=order_index,
            release_date=release_date,
            is_released=released,
            actual_release_date=at(2025, 7, 1) if released else None,
        )
    return _make


@pytest.fixture
def answer_mini():
    def _answer(user, mini_question):
        return MiniAnswer.objects.create(
            learner=user,
            mini_question=mini_question,
            cohort=mini_question.section.assignment.cohort,
            link_url="https://example.com/notes",
            submitted_at=at(2025, 8, 2),
        )
    return _answer


@pytest.fixture
def api_client():
    return APIClient()
