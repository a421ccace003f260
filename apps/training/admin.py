from django.contrib import admin

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
from .services.release import release_node


class ReleaseActionMixin:
    release_kind = None

    @admin.action(description="Release selected items")
    def release_selected(self, request, queryset):
        released = 0

        for node in queryset.filter(is_released=False):
            release_node(self.release_kind, node.pk)
            released += 1

        self.message_user(request, f"{released} item(s) released.")


@admin.register(Cohort)
class CohortAdmin(admin.ModelAdmin):
    list_display = ('name', 'number', 'is_active', 'start_date', 'end_date')
    list_filter = ('is_active',)
    search_fields = ('name',)

    def has_delete_permission(self, request, obj=None):
        return False  # Cohorts are deactivated, not deleted


@admin.register(CohortMembership)
class CohortMembershipAdmin(admin.ModelAdmin):
    list_display = ('learner', 'cohort', 'status', 'current_step', 'joined_at')
    list_filter = ('status', 'cohort')
    search_fields = ('learner__email',)
    # status changes go through set_membership_status
    readonly_fields = (
        'status', 'current_step', 'status_changed_at', 'status_changed_by',
        'graduated_at', 'graduated_by',
    )


@admin.register(Module)
class ModuleAdmin(ReleaseActionMixin, admin.ModelAdmin):
    release_kind = "module"
    list_display = ('title', 'cohort', 'ordinal', 'is_released', 'released_at')
    list_filter = ('cohort', 'is_released')
    readonly_fields = ('is_released', 'released_at')
    ordering = ('cohort', 'ordinal')
    actions = ['release_selected']


class ContentSectionInline(admin.TabularInline):
    model = ContentSection
    extra = 0


@admin.register(Assignment)
class AssignmentAdmin(ReleaseActionMixin, admin.ModelAdmin):
    release_kind = "assignment"
    list_display = ('title', 'cohort', 'module', 'ordinal', 'deadline', 'is_released')
    list_filter = ('cohort', 'is_released')
    search_fields = ('title',)
    readonly_fields = ('is_released', 'released_at')
    ordering = ('cohort', 'ordinal')
    inlines = [ContentSectionInline]
    actions = ['release_selected']


@admin.register(MiniQuestion)
class MiniQuestionAdmin(ReleaseActionMixin, admin.ModelAdmin):
    release_kind = "mini_question"
    list_display = ('title', 'section', 'release_date', 'is_released', 'actual_release_date')
    list_filter = ('is_released',)
    readonly_fields = ('is_released', 'actual_release_date')
    actions = ['release_selected']


@admin.register(Answer)
class AnswerAdmin(admin.ModelAdmin):
    list_display = ('learner', 'assignment', 'status', 'grade', 'grade_points', 'submitted_at')
    list_filter = ('status', 'grade', 'cohort')
    search_fields = ('learner__email', 'assignment__title')
    readonly_fields = (
        'status', 'grade', 'grade_points', 'reviewed_at', 'reviewed_by',
        'resubmission_requested', 'resubmission_approved', 'resubmission_requested_at',
    )


@admin.register(MiniAnswer)
class MiniAnswerAdmin(admin.ModelAdmin):
    list_display = ('learner', 'mini_question', 'submitted_at', 'resubmission_requested', 'resubmission_approved')
    list_filter = ('resubmission_requested', 'cohort')
    search_fields = ('learner__email',)
