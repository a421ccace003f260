# apps/training/services/deadlines.py
from ..exceptions import DeadlineConflict


def _release_date(mini_question):
    if isinstance(mini_question, dict):
        return mini_question.get("release_date")
    return getattr(mini_question, "release_date", None)


def validate_deadline(deadline, mini_questions):
    """
    Raise DeadlineConflict for the first mini-question scheduled to release
    after `deadline`. Accepts model instances or dicts with `release_date`.
    """
    for mini_question in mini_questions:
        release_date = _release_date(mini_question)
        if release_date is not None and release_date > deadline:
            raise DeadlineConflict(release_date, deadline)


def mini_questions_in(sections):
    """Flatten the mini-question payloads of a content section list."""
    for section in sections or []:
        yield from section.get("mini_questions") or []
