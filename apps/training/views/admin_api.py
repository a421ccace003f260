# apps/training/views/admin_api.py
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from .. import services
from ..exceptions import NotFound
from ..models import Cohort
from ..serializers import (
    AnswerSerializer,
    AssignmentInputSerializer,
    AssignmentSerializer,
    CohortCopySerializer,
    CohortInputSerializer,
    CohortSerializer,
    DecisionSerializer,
    GradeSerializer,
    MembershipSerializer,
    MembershipStatusSerializer,
    MiniAnswerSerializer,
    ModuleSerializer,
    MiniQuestionSerializer,
    ReviewSerializer,
)
from .errors import invalid_payload

RELEASE_SERIALIZERS = {
    "module": ModuleSerializer,
    "assignment": AssignmentSerializer,
    "mini_question": MiniQuestionSerializer,
}


def _get_cohort(cohort_id):
    try:
        return Cohort.objects.get(pk=cohort_id)
    except Cohort.DoesNotExist:
        raise NotFound(f"Cohort {cohort_id} not found.")


# ---------- Release ----------

@api_view(["POST"])
@permission_classes([IsAdminUser])
def release_node(request, kind, node_id):
    node = services.release_node(kind, node_id)
    return Response(RELEASE_SERIALIZERS[kind](node).data)


@api_view(["POST"])
@permission_classes([IsAdminUser])
def sweep_mini_questions(request):
    released = services.sweep_mini_question_releases()
    return Response({"released": released})


# ---------- Cohorts ----------

@api_view(["POST"])
@permission_classes([IsAdminUser])
def create_cohort(request):
    serializer = CohortInputSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    data = dict(serializer.validated_data)
    cohort = services.create_cohort(data.pop("name"), data.pop("start_date"), number=data.pop("number", None), **data)
    return Response(CohortSerializer(cohort).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([IsAdminUser])
def copy_cohort(request, cohort_id):
    serializer = CohortCopySerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    cohort = services.copy_cohort(cohort_id, **serializer.validated_data)
    return Response(CohortSerializer(cohort).data, status=status.HTTP_201_CREATED)


@api_view(["GET"])
@permission_classes([IsAdminUser])
def cohort_progress(request, cohort_id):
    cohort = _get_cohort(cohort_id)
    summary = services.compute_cohort_progress(cohort)
    summary["next_release"] = services.next_release_info(cohort)
    return Response(summary)


# ---------- Assignments ----------

@api_view(["POST"])
@permission_classes([IsAdminUser])
def create_assignment(request, cohort_id):
    serializer = AssignmentInputSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    fields, sections = serializer.split()
    assignment = services.create_assignment(cohort_id, fields, sections)
    return Response(AssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)


@api_view(["PATCH", "DELETE"])
@permission_classes([IsAdminUser])
def assignment_detail(request, assignment_id):
    if request.method == "DELETE":
        services.delete_assignment(assignment_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = AssignmentInputSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    fields, sections = serializer.split()
    assignment = services.update_assignment(assignment_id, fields, sections)
    return Response(AssignmentSerializer(assignment).data)


# ---------- Review ----------

@api_view(["POST"])
@permission_classes([IsAdminUser])
def grade_answer(request, answer_id):
    serializer = GradeSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    answer = services.grade_answer(
        answer_id,
        serializer.validated_data["grade"],
        serializer.validated_data["feedback"],
        request.user,
    )
    return Response(AnswerSerializer(answer).data)


@api_view(["POST"])
@permission_classes([IsAdminUser])
def review_answer(request, answer_id):
    serializer = ReviewSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    answer = services.review_answer(
        answer_id,
        serializer.validated_data["status"],
        serializer.validated_data["feedback"],
        request.user,
    )
    return Response(AnswerSerializer(answer).data)


@api_view(["POST"])
@permission_classes([IsAdminUser])
def decide_answer_resubmission(request, answer_id):
    serializer = DecisionSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    answer = services.decide_answer_resubmission(answer_id, serializer.validated_data["approve"], request.user)
    return Response(AnswerSerializer(answer).data)


@api_view(["POST"])
@permission_classes([IsAdminUser])
def request_mini_resubmission(request, mini_answer_id):
    mini_answer = services.request_mini_resubmission(mini_answer_id, request.user)
    return Response(MiniAnswerSerializer(mini_answer).data)


@api_view(["POST"])
@permission_classes([IsAdminUser])
def decide_mini_resubmission(request, mini_answer_id):
    serializer = DecisionSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    mini_answer = services.decide_mini_resubmission(mini_answer_id, serializer.validated_data["approve"], request.user)
    return Response(MiniAnswerSerializer(mini_answer).data)


# ---------- Memberships ----------

@api_view(["PUT"])
@permission_classes([IsAdminUser])
def set_membership_status(request):
    serializer = MembershipStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_payload(serializer.errors)

    data = serializer.validated_data
    membership = services.set_membership_status(
        data["learner_id"], data["cohort_id"], data["status"], actor=request.user
    )
    return Response(MembershipSerializer(membership).data)
