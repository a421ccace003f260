# apps/training/urls.py
from django.urls import path

from .views import admin_api, learner_api

app_name = "training"

urlpatterns = [
    # Admin
    path("admin/release/<str:kind>/<uuid:node_id>/", admin_api.release_node, name="release_node"),
    path("admin/mini-questions/sweep/", admin_api.sweep_mini_questions, name="sweep_mini_questions"),
    path("admin/cohorts/", admin_api.create_cohort, name="create_cohort"),
    path("admin/cohorts/<uuid:cohort_id>/copy/", admin_api.copy_cohort, name="copy_cohort"),
    path("admin/cohorts/<uuid:cohort_id>/progress/", admin_api.cohort_progress, name="cohort_progress"),
    path("admin/cohorts/<uuid:cohort_id>/assignments/", admin_api.create_assignment, name="create_assignment"),
    path("admin/assignments/<uuid:assignment_id>/", admin_api.assignment_detail, name="assignment_detail"),
    path("admin/answers/<uuid:answer_id>/grade/", admin_api.grade_answer, name="grade_answer"),
    path("admin/answers/<uuid:answer_id>/review/", admin_api.review_answer, name="review_answer"),
    path("admin/answers/<uuid:answer_id>/resubmission/", admin_api.decide_answer_resubmission, name="decide_answer_resubmission"),
    path("admin/mini-answers/<uuid:mini_answer_id>/resubmission-request/", admin_api.request_mini_resubmission, name="request_mini_resubmission"),
    path("admin/mini-answers/<uuid:mini_answer_id>/resubmission/", admin_api.decide_mini_resubmission, name="decide_mini_resubmission"),
    path("admin/memberships/", admin_api.set_membership_status, name="set_membership_status"),

    # Learner
    path("learner/dashboard/", learner_api.dashboard, name="dashboard"),
    path("learner/progress/", learner_api.progress, name="progress"),
    path("learner/assignments/<uuid:assignment_id>/availability/", learner_api.assignment_availability, name="assignment_availability"),
    path("learner/assignments/<uuid:assignment_id>/answer/", learner_api.submit_answer, name="submit_answer"),
    path("learner/answers/<uuid:answer_id>/resubmission-request/", learner_api.request_answer_resubmission, name="request_answer_resubmission"),
    path("learner/mini-questions/<uuid:mini_question_id>/answer/", learner_api.submit_mini_answer, name="submit_mini_answer"),
]
