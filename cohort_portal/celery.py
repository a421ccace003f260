"""
Celery application for background work.

Start a worker:  celery -A cohort_portal worker -l info
Start beat:      celery -A cohort_portal beat -l info
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cohort_portal.settings")

app = Celery("cohort_portal")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
