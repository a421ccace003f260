# apps/training/serializers.py
from rest_framework import serializers

from .models import (
    Answer,
    Assignment,
    Cohort,
    CohortMembership,
    ContentSection,
    MiniAnswer,
    MiniQuestion,
    Module,
)


# ---------- Output ----------

class CohortSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cohort
        fields = [
            "id", "name", "number", "description", "is_active",
            "default_theme", "start_date", "end_date", "created_at",
        ]


class ModuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Module
        fields = ["id", "cohort", "ordinal", "title", "description", "theme", "is_released", "released_at"]


class MiniQuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = MiniQuestion
        fields = [
            "id", "title", "prompt", "description", "resource_url", "order_index",
            "release_date", "is_released", "actual_release_date",
        ]


class ContentSectionSerializer(serializers.ModelSerializer):
    mini_questions = MiniQuestionSerializer(many=True, read_only=True)

    class Meta:
        model = ContentSection
        fields = ["id", "title", "material", "order_index", "mini_questions"]


class AssignmentSerializer(serializers.ModelSerializer):
    sections = ContentSectionSerializer(many=True, read_only=True)

    class Meta:
        model = Assignment
        fields = [
            "id", "cohort", "module", "ordinal", "title", "description", "deadline",
            "points", "bonus_points", "is_released", "released_at", "sections",
        ]


class AnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Answer
        fields = [
            "id", "learner", "assignment", "cohort", "content", "notes", "submitted_at",
            "status", "grade", "grade_points", "feedback", "reviewed_at", "reviewed_by",
            "resubmission_requested", "resubmission_approved", "resubmission_requested_at",
        ]


class MiniAnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = MiniAnswer
        fields = [
            "id", "learner", "mini_question", "cohort", "link_url", "notes", "submitted_at",
            "resubmission_requested", "resubmission_approved", "resubmission_requested_at",
        ]


class MembershipSerializer(serializers.ModelSerializer):
    class Meta:
        model = CohortMembership
        fields = [
            "id", "learner", "cohort", "status", "current_step", "joined_at",
            "status_changed_at", "status_changed_by", "graduated_at", "graduated_by",
        ]


# ---------- Input ----------

class MiniQuestionInputSerializer(serializers.Serializer):
    title = serializers.CharField()
    prompt = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    resource_url = serializers.URLField(required=False, allow_blank=True, default="")
    release_date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class ContentSectionInputSerializer(serializers.Serializer):
    title = serializers.CharField()
    material = serializers.CharField(required=False, allow_blank=True, default="")
    mini_questions = MiniQuestionInputSerializer(many=True, required=False, default=list)


class AssignmentInputSerializer(serializers.Serializer):
    ordinal = serializers.IntegerField(min_value=1)
    title = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True)
    deadline = serializers.DateTimeField()
    points = serializers.IntegerField(min_value=0, required=False)
    bonus_points = serializers.IntegerField(min_value=0, required=False)
    module = serializers.UUIDField(required=False, allow_null=True)
    content_sections = ContentSectionInputSerializer(many=True, required=False)

    def split(self):
        """(assignment fields, content sections or None)"""
        data = dict(self.validated_data)
        sections = data.pop("content_sections", None)
        return data, sections


class CohortInputSerializer(serializers.Serializer):
    name = serializers.CharField()
    number = serializers.IntegerField(min_value=1, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    default_theme = serializers.CharField(required=False)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)


class CohortCopySerializer(serializers.Serializer):
    new_name = serializers.CharField()
    new_number = serializers.IntegerField(min_value=1, required=False)
    start_date = serializers.DateTimeField(required=False)


class GradeSerializer(serializers.Serializer):
    # grade and feedback are checked by the grading rules so that a
    # reviewed answer always reports already_reviewed first
    grade = serializers.CharField(allow_blank=True, required=False, default="")
    feedback = serializers.CharField(allow_blank=True, required=False, default="")


class ReviewSerializer(serializers.Serializer):
    status = serializers.CharField(allow_blank=True, required=False, default="")
    feedback = serializers.CharField(allow_blank=True, required=False, default="")


class DecisionSerializer(serializers.Serializer):
    approve = serializers.BooleanField()


class MembershipStatusSerializer(serializers.Serializer):
    learner_id = serializers.IntegerField()
    cohort_id = serializers.UUIDField()
    status = serializers.CharField()


class AnswerSubmitSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, required=False, default="")
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class MiniAnswerSubmitSerializer(serializers.Serializer):
    link_url = serializers.CharField(allow_blank=True, required=False, default="")
    notes = serializers.CharField(allow_blank=True, required=False, default="")
