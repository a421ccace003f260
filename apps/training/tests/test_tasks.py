from datetime import timedelta

import pytest
from django.utils import timezone

from apps.training.models import MiniQuestion
from apps.training.tasks import sweep_mini_question_releases_task
from .helpers import at


@pytest.mark.django_db
class TestSweepTask:

    def test_releases_due_mini_questions(self, make_assignment, make_mini_question):
        assignment = make_assignment(1)
        make_mini_question(assignment, 1, released=False, release_date=at(2025, 8, 1))
        make_mini_question(assignment, 2, released=False, release_date=timezone.now() + timedelta(days=1))

        assert sweep_mini_question_releases_task() == 1
        assert MiniQuestion.objects.filter(is_released=True).count() == 1

    def test_beat_schedule(self, settings):
        entry = settings.CELERY_BEAT_SCHEDULE["sweep-mini-question-releases"]

        assert entry["task"] == "apps.training.tasks.sweep_mini_question_releases_task"
