# apps/training/tasks.py
import logging

from celery import shared_task
from django.utils import timezone

from .services.release import sweep_mini_question_releases

logger = logging.getLogger(__name__)


@shared_task
def sweep_mini_question_releases_task():
    """
    Periodic release of dated mini-questions. Scheduled by Celery beat, see
    CELERY_BEAT_SCHEDULE.
    """
    now = timezone.now()
    released = sweep_mini_question_releases(now)
    logger.info(f"Mini-question sweep at {now.isoformat()} released {released}")
    return released
