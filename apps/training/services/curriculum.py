"""
Curriculum authoring: cohorts, modules, assignments, content sections and
mini-questions.

Assignment writes take an optional list of content sections:

    [{"title": ..., "material": ...,
      "mini_questions": [{"title": ..., "prompt": ..., "description": ...,
                          "resource_url": ..., "release_date": datetime}]}]

Sections and mini-questions are matched to existing rows by position, so an
update keeps the ids (and the learners' mini-answers) of everything that is
still present. The deadline check runs over the whole payload before any
row is written.
"""
# apps/training/services/curriculum.py
import logging

from django.db import IntegrityError, transaction
from django.db.models import Max

from .. import transitions
from ..exceptions import (
    DuplicateCohort,
    DuplicateOrdinal,
    HasDependentSubmissions,
    InvalidPayload,
    NotFound,
)
from ..models import (
    Answer,
    Assignment,
    Cohort,
    ContentSection,
    MiniAnswer,
    MiniQuestion,
    Module,
)
from .deadlines import mini_questions_in, validate_deadline

logger = logging.getLogger(__name__)

COHORT_FIELDS = ("name", "number", "description", "is_active", "default_theme", "start_date", "end_date")
MODULE_FIELDS = ("ordinal", "title", "description", "theme")
ASSIGNMENT_FIELDS = ("ordinal", "title", "description", "deadline", "points", "bonus_points", "module")
MINI_QUESTION_FIELDS = ("title", "prompt", "description", "resource_url", "release_date")


def _get(model, pk, **filters):
    try:
        return model.objects.select_for_update().get(pk=pk, **filters)
    except model.DoesNotExist:
        raise NotFound(f"{model.__name__} {pk} not found.")


def _non_negative_int(value, field_name):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidPayload(f"{field_name} must be a non-negative integer.")
    return value


def _positive_int(value, field_name):
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidPayload(f"{field_name} must be a positive integer.")
    return value


def _save(instance, duplicate_error, **kwargs):
    try:
        with transaction.atomic():
            instance.save(**kwargs)
    except IntegrityError:
        raise duplicate_error()
    return instance


# ---------- Cohorts ----------

def next_cohort_number(name):
    current = Cohort.objects.filter(name=name).aggregate(top=Max("number"))["top"]
    return (current or 0) + 1


def create_cohort(name, start_date, number=None, **fields):
    name = transitions.clean_text(name, "name")
    with transaction.atomic():
        if number is None:
            number = next_cohort_number(name)
        else:
            _positive_int(number, "number")
        if Cohort.objects.filter(name=name, number=number).exists():
            raise DuplicateCohort()

        cohort = Cohort(name=name, number=number, start_date=start_date)
        for key, value in fields.items():
            if key not in COHORT_FIELDS:
                raise InvalidPayload(f"Unknown cohort field {key!r}.")
            setattr(cohort, key, value)
        _save(cohort, DuplicateCohort)

    logger.info(f"Created cohort {cohort}")
    return cohort


def update_cohort(cohort_id, **fields):
    with transaction.atomic():
        cohort = _get(Cohort, cohort_id)
        for key, value in fields.items():
            if key not in COHORT_FIELDS:
                raise InvalidPayload(f"Unknown cohort field {key!r}.")
            if key == "name":
                value = transitions.clean_text(value, "name")
            if key == "number":
                _positive_int(value, "number")
            setattr(cohort, key, value)
        _save(cohort, DuplicateCohort)
    return cohort


def deactivate_cohort(cohort_id):
    with transaction.atomic():
        cohort = _get(Cohort, cohort_id)
        if cohort.is_active:
            cohort.is_active = False
            cohort.save(update_fields=['is_active', 'updated_at'])
            logger.info(f"Deactivated cohort {cohort}")
    return cohort


def copy_cohort(source_id, new_name, new_number=None, start_date=None):
    """
    Deep-copy the curriculum of a cohort into a new, inactive cohort.
    Copied nodes start unreleased; release dates are kept.
    """
    with transaction.atomic():
        try:
            source = Cohort.objects.get(pk=source_id)
        except Cohort.DoesNotExist:
            raise NotFound(f"Cohort {source_id} not found.")

        target = create_cohort(
            new_name,
            start_date or source.start_date,
            number=new_number,
            description=source.description,
            default_theme=source.default_theme,
            end_date=source.end_date,
            is_active=False,
        )

        module_map = {}
        for module in source.modules.order_by("ordinal"):
            module_map[module.pk] = Module.objects.create(
                cohort=target,
                ordinal=module.ordinal,
                title=module.title,
                description=module.description,
                theme=module.theme,
            )

        assignments = source.assignments.order_by("ordinal").prefetch_related("sections__mini_questions")
        for assignment in assignments:
            new_assignment = Assignment.objects.create(
                cohort=target,
                module=module_map.get(assignment.module_id),
                ordinal=assignment.ordinal,
                title=assignment.title,
                description=assignment.description,
                deadline=assignment.deadline,
                points=assignment.points,
                bonus_points=assignment.bonus_points,
            )
            for section in assignment.sections.all():
                new_section = ContentSection.objects.create(
                    assignment=new_assignment,
                    title=section.title,
                    material=section.material,
                    order_index=section.order_index,
                )
                MiniQuestion.objects.bulk_create([
                    MiniQuestion(
                        section=new_section,
                        title=mq.title,
                        prompt=mq.prompt,
                        description=mq.description,
                        resource_url=mq.resource_url,
                        order_index=mq.order_index,
                        release_date=mq.release_date,
                    )
                    for mq in section.mini_questions.all()
                ])

    logger.info(f"Copied cohort {source} into {target}")
    return target


# ---------- Modules ----------

def create_module(cohort_id, ordinal, title, description="", theme=None):
    with transaction.atomic():
        cohort = _get(Cohort, cohort_id)
        module = Module(
            cohort=cohort,
            ordinal=_positive_int(ordinal, "ordinal"),
            title=transitions.clean_text(title, "title"),
            description=description or "",
            theme=theme or cohort.default_theme,
        )
        _save(module, DuplicateOrdinal)
    return module


def update_module(module_id, **fields):
    with transaction.atomic():
        module = _get(Module, module_id)
        for key, value in fields.items():
            if key not in MODULE_FIELDS:
                raise InvalidPayload(f"Unknown module field {key!r}.")
            if key == "ordinal":
                _positive_int(value, "ordinal")
            setattr(module, key, value)
        _save(module, DuplicateOrdinal)
    return module


def delete_module(module_id):
    """Deletes an empty module. Modules with assignments must be emptied first."""
    with transaction.atomic():
        module = _get(Module, module_id)
        if module.assignments.exists():
            raise HasDependentSubmissions("Move or delete the module's assignments first.")
        module.delete()
    logger.info(f"Deleted module {module_id}")


# ---------- Assignments ----------

def _clean_assignment_fields(fields, cohort):
    cleaned = {}
    for key, value in fields.items():
        if key not in ASSIGNMENT_FIELDS:
            raise InvalidPayload(f"Unknown assignment field {key!r}.")
        if key == "ordinal":
            _positive_int(value, "ordinal")
        elif key in ("points", "bonus_points"):
            _non_negative_int(value, key)
        elif key == "title":
            value = transitions.clean_text(value, "title")
        elif key == "module" and value is not None:
            if not isinstance(value, Module):
                value = _get(Module, value, cohort=cohort)
            elif value.cohort_id != cohort.pk:
                raise InvalidPayload("The module belongs to another cohort.")
        cleaned[key] = value
    return cleaned


def create_assignment(cohort_id, fields, content_sections=None):
    with transaction.atomic():
        cohort = _get(Cohort, cohort_id)
        cleaned = _clean_assignment_fields(fields, cohort)
        for required in ("ordinal", "title", "deadline"):
            if required not in cleaned:
                raise InvalidPayload(f"{required} is required.")

        if content_sections:
            validate_deadline(cleaned["deadline"], mini_questions_in(content_sections))

        assignment = _save(Assignment(cohort=cohort, **cleaned), DuplicateOrdinal)
        if content_sections:
            _write_sections(assignment, content_sections)

    logger.info(f"Created assignment {assignment.pk} ({assignment.ordinal}) in cohort {cohort}")
    return assignment


def update_assignment(assignment_id, fields, content_sections=None):
    with transaction.atomic():
        assignment = _get(Assignment, assignment_id)
        cleaned = _clean_assignment_fields(fields, assignment.cohort)

        if content_sections is not None:
            deadline = cleaned.get("deadline", assignment.deadline)
            validate_deadline(deadline, mini_questions_in(content_sections))
        elif "deadline" in cleaned:
            validate_deadline(cleaned["deadline"], assignment.mini_questions())

        for key, value in cleaned.items():
            setattr(assignment, key, value)
        _save(assignment, DuplicateOrdinal)

        if content_sections is not None:
            _write_sections(assignment, content_sections)

    logger.info(f"Updated assignment {assignment.pk}")
    return assignment


def _write_sections(assignment, content_sections):
    existing = list(assignment.sections.order_by("order_index"))

    for position, payload in enumerate(content_sections, start=1):
        title = transitions.clean_text(payload.get("title"), "section title")
        if position <= len(existing):
            section = existing[position - 1]
            section.title = title
            section.material = payload.get("material") or ""
            section.order_index = position
            section.save()
        else:
            section = ContentSection.objects.create(
                assignment=assignment,
                title=title,
                material=payload.get("material") or "",
                order_index=position,
            )
        _write_mini_questions(section, payload.get("mini_questions") or [])

    for section in existing[len(content_sections):]:
        _delete_section(section)


def _write_mini_questions(section, payloads):
    existing = list(section.mini_questions.order_by("order_index"))

    for position, payload in enumerate(payloads, start=1):
        values = {
            "title": transitions.clean_text(payload.get("title"), "mini-question title"),
            "prompt": transitions.clean_text(payload.get("prompt"), "mini-question prompt"),
            "description": payload.get("description") or "",
            "resource_url": payload.get("resource_url") or "",
            "release_date": payload.get("release_date"),
            "order_index": position,
        }
        if position <= len(existing):
            mini_question = existing[position - 1]
            for key, value in values.items():
                setattr(mini_question, key, value)
            mini_question.save()
        else:
            MiniQuestion.objects.create(section=section, **values)

    for mini_question in existing[len(payloads):]:
        _delete_mini_question(mini_question)


def _delete_mini_question(mini_question):
    if MiniAnswer.objects.filter(mini_question=mini_question).exists():
        raise HasDependentSubmissions(
            f"Mini-question {mini_question.pk} has answers and cannot be removed."
        )
    mini_question.delete()


def _delete_section(section):
    if MiniAnswer.objects.filter(mini_question__section=section).exists():
        raise HasDependentSubmissions(
            f"Content section {section.pk} has answered mini-questions and cannot be removed."
        )
    section.delete()


def delete_assignment(assignment_id):
    with transaction.atomic():
        assignment = _get(Assignment, assignment_id)
        if Answer.objects.filter(assignment=assignment).exists():
            raise HasDependentSubmissions("Learners have already answered this assignment.")
        if MiniAnswer.objects.filter(mini_question__section__assignment=assignment).exists():
            raise HasDependentSubmissions("Learners have already answered its mini-questions.")
        assignment.delete()
    logger.info(f"Deleted assignment {assignment_id}")


def delete_content_section(section_id):
    with transaction.atomic():
        _delete_section(_get(ContentSection, section_id))
    logger.info(f"Deleted content section {section_id}")


def delete_mini_question(mini_question_id):
    with transaction.atomic():
        _delete_mini_question(_get(MiniQuestion, mini_question_id))
    logger.info(f"Deleted mini-question {mini_question_id}")


# ---------- Mini-questions ----------

def add_mini_question(section_id, title, prompt, release_date=None, description="", resource_url=""):
    with transaction.atomic():
        section = _get(ContentSection, section_id)
        assignment = section.assignment
        validate_deadline(assignment.deadline, [{"release_date": release_date}])

        position = (section.mini_questions.aggregate(top=Max("order_index"))["top"] or 0) + 1
        mini_question = MiniQuestion.objects.create(
            section=section,
            title=transitions.clean_text(title, "title"),
            prompt=transitions.clean_text(prompt, "prompt"),
            description=description or "",
            resource_url=resource_url or "",
            release_date=release_date,
            order_index=position,
        )
    return mini_question


def update_mini_question(mini_question_id, **fields):
    with transaction.atomic():
        mini_question = _get(MiniQuestion, mini_question_id)
        for key, value in fields.items():
            if key not in MINI_QUESTION_FIELDS:
                raise InvalidPayload(f"Unknown mini-question field {key!r}.")
            if key in ("title", "prompt"):
                value = transitions.clean_text(value, key)
            setattr(mini_question, key, value)

        validate_deadline(mini_question.section.assignment.deadline, [mini_question])
        mini_question.save()
    return mini_question
