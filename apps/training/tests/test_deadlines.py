import pytest

from apps.training.exceptions import DeadlineConflict
from apps.training.services.deadlines import mini_questions_in, validate_deadline
from .helpers import at


class TestValidateDeadline:

    def test_release_dates_on_or_before_deadline_pass(self):
        validate_deadline(at(2025, 9, 1), [
            {"release_date": at(2025, 8, 1)},
            {"release_date": at(2025, 9, 1)},
            {"release_date": None},
        ])

    def test_later_release_date_conflicts(self):
        with pytest.raises(DeadlineConflict) as excinfo:
            validate_deadline(at(2025, 9, 1), [
                {"release_date": at(2025, 8, 1)},
                {"release_date": at(2025, 9, 2)},
            ])

        assert excinfo.value.release_date == at(2025, 9, 2)
        assert excinfo.value.deadline == at(2025, 9, 1)
        assert excinfo.value.http_status == 409

    def test_no_mini_questions(self):
        validate_deadline(at(2025, 9, 1), [])

    def test_mini_questions_in_flattens_sections(self):
        sections = [
            {"title": "A", "mini_questions": [{"title": "1"}, {"title": "2"}]},
            {"title": "B"},
            {"title": "C", "mini_questions": [{"title": "3"}]},
        ]
        assert [mq["title"] for mq in mini_questions_in(sections)] == ["1", "2", "3"]
