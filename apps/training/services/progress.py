"""
Read-side progress figures. Nothing here writes to the database.
"""
# apps/training/services/progress.py
from django.db.models import Max

from ..exceptions import NotEnrolled
from ..models import Answer, Assignment, CohortMembership


def effective_total_steps(cohort):
    """Released assignments in released modules, floored at 1."""
    released = Assignment.objects.filter(
        cohort=cohort, is_released=True, module__is_released=True
    ).count()
    return max(1, released)


def _points(learner, cohort):
    best = (
        Answer.objects
        .filter(learner=learner, cohort=cohort, status=Answer.Status.APPROVED)
        .values("assignment")
        .annotate(best=Max("grade_points"))
    )
    return sum(row["best"] or 0 for row in best)


def compute_learner_progress(learner, cohort=None):
    """
    Step-based progress: current_step / effective_total_steps.

    fraction is not capped. current_step counts every approved ordinal,
    while the total only counts released assignments in released modules,
    so approvals on module-less assignments or under an unreleased module can
    push fraction (and percent) past 1.0.
    """
    cohort = cohort or learner.current_cohort
    if cohort is None:
        raise NotEnrolled("The learner is not enrolled in any cohort.")

    membership = CohortMembership.objects.filter(learner=learner, cohort=cohort).first()
    current_step = membership.current_step if membership else 0
    total_steps = effective_total_steps(cohort)
    fraction = current_step / total_steps

    return {
        "learner_id": learner.pk,
        "cohort_id": str(cohort.pk),
        "status": membership.status if membership else None,
        "current_step": current_step,
        "total_steps": total_steps,
        "fraction": fraction,
        "percent": round(fraction * 100, 1),
        "points": _points(learner, cohort),
    }


def compute_cohort_progress(cohort):
    total_steps = effective_total_steps(cohort)
    enrolled = list(
        CohortMembership.objects
        .filter(cohort=cohort, status=CohortMembership.Status.ENROLLED, learner__is_staff=False)
        .select_related("learner")
        .order_by("-current_step", "joined_at")
    )

    fractions = [m.current_step / total_steps for m in enrolled]
    average = round(sum(fractions) / len(fractions) * 100, 1) if fractions else 0.0

    answers = Answer.objects.filter(cohort=cohort)
    return {
        "cohort_id": str(cohort.pk),
        "cohort": str(cohort),
        "members": len(enrolled),
        "total_steps": total_steps,
        "average_progress": average,
        "total_answers": answers.count(),
        "pending_answers": answers.filter(status=Answer.Status.PENDING).count(),
        "leaderboard": [
            {
                "learner_id": m.learner_id,
                "name": m.learner.get_short_name(),
                "current_step": m.current_step,
                "fraction": fraction,
            }
            for m, fraction in zip(enrolled, fractions)
        ],
    }
