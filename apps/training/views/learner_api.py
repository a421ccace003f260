# apps/training/views/learner_api.py
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .. import services
from ..exceptions import NotEnrolled, NotFound
from ..models import Assignment
from ..serializers import (
    AnswerSerializer,
    AnswerSubmitSerializer,
    MiniAnswerSerializer,
    MiniAnswerSubmitSerializer,
)
from .errors import invalid_payload


def _released_assignment(assignment_id):
    try:
        return Assignment.objects.released().get(pk=assignment_id)
    except Assignment.DoesNotExist:
        raise NotFound(f"Assignment {assignment_id} not found.")


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """
    Released assignments of the learner's current cohort with their
    availability, plus the learner's progress. Due mini-questions are
    released first so the view never lags the schedule.
    """
    cohort = request.user.current_cohort
    if cohort is None:
        raise NotEnrolled("You are not enrolled in any cohort.")

    now = timezone.now()
    services.sweep_mini_question_releases(now)
    rows = services.resolve_for_cohort(request.user, cohort, now=now)

    return Response({
        "cohort": {"id": str(cohort.pk), "name": str(cohort), "theme": cohort.default_theme},
        "assignments": [
            {
                "id": str(assignment.pk),
                "ordinal": assignment.ordinal,
                "title": assignment.title,
                "deadline": assignment.deadline,
                "points": assignment.points,
                "state": state,
            }
            for assignment, state in rows
        ],
        "progress": services.compute_learner_progress(request.user, cohort),
        "next_release": services.next_release_info(cohort, now=now),
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def assignment_availability(request, assignment_id):
    assignment = _released_assignment(assignment_id)
    state = services.resolve_availability(request.user, assignment, now=timezone.now())
    return Response({"assignment_id": str(assignment.pk), "state": state})


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def submit_answer(request, assignment_id):
    serializer = AnswerSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    answer = services.submit_answer(request.user, assignment_id, serializer.validated_data)
    return Response(AnswerSerializer(answer).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def request_answer_resubmission(request, answer_id):
    answer = services.request_answer_resubmission(answer_id, request.user)
    return Response(AnswerSerializer(answer).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def submit_mini_answer(request, mini_question_id):
    serializer = MiniAnswerSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    mini_answer = services.submit_mini_answer(
        request.user,
        mini_question_id,
        serializer.validated_data["link_url"],
        serializer.validated_data["notes"],
    )
    return Response(MiniAnswerSerializer(mini_answer).data, status=status.HTTP_201_CREATED)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def progress(request):
    return Response(services.compute_learner_progress(request.user))
