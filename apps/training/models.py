"""
Cohort
    → Module (ordinal, release flag)
    → Assignment (ordinal unique per cohort, deadline, points)
        → ContentSection (order_index)
            → MiniQuestion (order_index, release_date, auto release)

Learner state
    → CohortMembership (status, current_step)
    → Answer (graded submission to an Assignment)
    → MiniAnswer (completion-only submission to a MiniQuestion)

Release flags, review state and membership status are written only by
apps.training.services; the rules for each transition live in
apps.training.transitions.
"""

# apps/training/models.py
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q, UniqueConstraint


# ---------- Utilities / Abstracts ----------

class TimeStampedModel(models.Model):
    """Abstract model that provides created/updated timestamps."""
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ReleasableQuerySet(models.QuerySet):
    def released(self):
        return self.filter(is_released=True)


# ---------- Cohorts ----------

class Cohort(TimeStampedModel):
    """
    A run of the curriculum. `number` tells apart cohorts sharing a name
    ("Data Bootcamp" #1, #2 ...). Cohorts are deactivated, never deleted.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    number = models.PositiveIntegerField(default=1)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    default_theme = models.CharField(max_length=50, default='trains')
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["name", "number"]
        constraints = [
            UniqueConstraint(fields=['name', 'number'], name='unique_cohort_name_number'),
        ]

    def __str__(self):
        return f"{self.name} #{self.number}"


class CohortMembership(TimeStampedModel):
    class Status(models.TextChoices):
        ENROLLED = 'ENROLLED', 'Enrolled'
        GRADUATED = 'GRADUATED', 'Graduated'
        REMOVED = 'REMOVED', 'Removed'
        SUSPENDED = 'SUSPENDED', 'Suspended'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cohort = models.ForeignKey(Cohort, on_delete=models.PROTECT, related_name='memberships')
    learner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='cohort_memberships')
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ENROLLED, db_index=True)
    # high-water mark of the highest approved assignment ordinal
    current_step = models.PositiveIntegerField(default=0)
    joined_at = models.DateTimeField(auto_now_add=True)

    status_changed_at = models.DateTimeField(null=True, blank=True)
    status_changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    graduated_at = models.DateTimeField(null=True, blank=True)
    graduated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    class Meta:
        ordering = ["-current_step", "joined_at"]
        constraints = [
            UniqueConstraint(fields=['cohort', 'learner'], name='unique_cohort_membership'),
            UniqueConstraint(
                fields=['learner'],
                condition=Q(status='ENROLLED'),
                name='single_active_enrollment_per_learner',
            ),
        ]
        indexes = [
            models.Index(fields=["cohort", "status"], name="training_co_cohort__a4f0d9_idx"),
        ]

    def __str__(self):
        return f"CohortMembership({self.cohort_id}, {self.learner_id}, {self.status})"


# ---------- Curriculum ----------

class Module(TimeStampedModel):
    """Groups assignments within a cohort. Ordered by `ordinal`."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cohort = models.ForeignKey(Cohort, on_delete=models.PROTECT, related_name='modules')
    ordinal = models.PositiveIntegerField()
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    theme = models.CharField(max_length=50, default='trains')

    is_released = models.BooleanField(default=False, db_index=True)
    released_at = models.DateTimeField(null=True, blank=True)

    objects = ReleasableQuerySet.as_manager()

    class Meta:
        ordering = ["cohort", "ordinal"]
        constraints = [
            UniqueConstraint(fields=['cohort', 'ordinal'], name='unique_module_ordinal_per_cohort'),
        ]

    def __str__(self):
        return f"{self.cohort} / Module {self.ordinal}: {self.title}"


class Assignment(TimeStampedModel):
    """
    A graded unit of work (a.k.a. question or topic). `ordinal` drives the
    sequential unlock: a learner sees at most one assignment past their
    current step.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cohort = models.ForeignKey(Cohort, on_delete=models.PROTECT, related_name='assignments')
    module = models.ForeignKey(
        Module, on_delete=models.PROTECT, related_name='assignments', null=True, blank=True
    )
    ordinal = models.PositiveIntegerField()
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    deadline = models.DateTimeField()
    points = models.PositiveIntegerField(default=100, validators=[MinValueValidator(0)])
    bonus_points = models.PositiveIntegerField(default=50, validators=[MinValueValidator(0)])

    is_released = models.BooleanField(default=False, db_index=True)
    released_at = models.DateTimeField(null=True, blank=True)

    objects = ReleasableQuerySet.as_manager()

    class Meta:
        ordering = ["cohort", "ordinal"]
        constraints = [
            UniqueConstraint(fields=['cohort', 'ordinal'], name='unique_assignment_ordinal_per_cohort'),
        ]
        indexes = [
            models.Index(fields=["cohort", "is_released"], name="training_as_cohort__5e1c2a_idx"),
        ]

    def __str__(self):
        return f"{self.cohort} / Assignment {self.ordinal}: {self.title}"

    def mini_questions(self):
        return MiniQuestion.objects.filter(section__assignment=self)


class ContentSection(TimeStampedModel):
    """Learning material attached to an assignment. Ordered by `order_index`."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    assignment = models.ForeignKey(Assignment, on_delete=models.CASCADE, related_name='sections')
    title = models.CharField(max_length=255)
    material = models.TextField(blank=True)
    order_index = models.PositiveIntegerField()

    class Meta:
        ordering = ["order_index"]
        constraints = [
            UniqueConstraint(fields=['assignment', 'order_index'], name='unique_section_order_per_assignment'),
        ]

    def __str__(self):
        return f"{self.assignment.title} / {self.title}"


class MiniQuestion(TimeStampedModel):
    """
    Ungraded self-learning task. Released either by an admin or by the
    periodic sweep once `release_date` has passed and its assignment is
    released; `actual_release_date` is stamped once, on the first transition.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    section = models.ForeignKey(ContentSection, on_delete=models.CASCADE, related_name='mini_questions')
    title = models.CharField(max_length=255)
    prompt = models.TextField()
    description = models.TextField(blank=True)
    resource_url = models.URLField(blank=True)
    order_index = models.PositiveIntegerField()

    release_date = models.DateTimeField(null=True, blank=True, db_index=True)
    is_released = models.BooleanField(default=False, db_index=True)
    actual_release_date = models.DateTimeField(null=True, blank=True)

    objects = ReleasableQuerySet.as_manager()

    class Meta:
        ordering = ["order_index"]
        constraints = [
            UniqueConstraint(fields=['section', 'order_index'], name='unique_mini_question_order_per_section'),
        ]
        indexes = [
            models.Index(fields=["is_released", "release_date"], name="training_mi_is_rele_8b7d41_idx"),
        ]

    def __str__(self):
        return f"MiniQuestion({self.title})"


# ---------- Submissions ----------

class Answer(TimeStampedModel):
    """One learner's submission to one assignment within one cohort."""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending review'
        APPROVED = 'APPROVED', 'Approved'
        REJECTED = 'REJECTED', 'Rejected'

    class Grade(models.TextChoices):
        GOLD = 'GOLD', 'Gold'
        SILVER = 'SILVER', 'Silver'
        COPPER = 'COPPER', 'Copper'
        NEEDS_RESUBMISSION = 'NEEDS_RESUBMISSION', 'Needs resubmission'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    learner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='answers')
    assignment = models.ForeignKey(Assignment, on_delete=models.PROTECT, related_name='answers')
    cohort = models.ForeignKey(Cohort, on_delete=models.PROTECT, related_name='answers')
    content = models.TextField()
    notes = models.TextField(blank=True)
    submitted_at = models.DateTimeField(db_index=True)

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)
    grade = models.CharField(max_length=24, choices=Grade.choices, null=True, blank=True)
    grade_points = models.PositiveIntegerField(null=True, blank=True)
    feedback = models.TextField(blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviewed_answers'
    )

    resubmission_requested = models.BooleanField(default=False)
    resubmission_approved = models.BooleanField(null=True, blank=True)
    resubmission_requested_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-submitted_at"]
        get_latest_by = "submitted_at"
        constraints = [
            # at most one open answer per learner and assignment
            UniqueConstraint(
                fields=['learner', 'assignment'],
                condition=Q(status='PENDING'),
                name='single_open_answer_per_learner_assignment',
            ),
        ]
        indexes = [
            models.Index(fields=["learner", "assignment", "submitted_at"], name="training_an_learner_3c9e7b_idx"),
            models.Index(fields=["cohort", "status"], name="training_an_cohort__f21d60_idx"),
        ]

    def __str__(self):
        return f"Answer({self.assignment_id}, {self.learner_id}, {self.status})"


class MiniAnswer(TimeStampedModel):
    """Link submission to a mini-question. Completion only, never graded."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    learner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='mini_answers')
    mini_question = models.ForeignKey(MiniQuestion, on_delete=models.PROTECT, related_name='answers')
    cohort = models.ForeignKey(Cohort, on_delete=models.PROTECT, related_name='mini_answers')
    link_url = models.URLField(max_length=1000)
    notes = models.TextField(blank=True)
    submitted_at = models.DateTimeField()

    resubmission_requested = models.BooleanField(default=False)
    resubmission_approved = models.BooleanField(null=True, blank=True)
    resubmission_requested_at = models.DateTimeField(null=True, blank=True)
    resubmission_requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    resubmission_decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    class Meta:
        ordering = ["-submitted_at"]
        constraints = [
            UniqueConstraint(
                fields=['learner', 'mini_question', 'cohort'],
                name='unique_mini_answer_per_learner_question_cohort',
            ),
        ]

    def __str__(self):
        return f"MiniAnswer({self.mini_question_id}, {self.learner_id})"
