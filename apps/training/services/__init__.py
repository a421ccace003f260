from .availability import Availability, resolve_availability, resolve_for_cohort
from .curriculum import (
    add_mini_question,
    copy_cohort,
    create_assignment,
    create_cohort,
    create_module,
    deactivate_cohort,
    delete_assignment,
    delete_content_section,
    delete_mini_question,
    delete_module,
    update_assignment,
    update_cohort,
    update_mini_question,
    update_module,
)
from .deadlines import validate_deadline
from .grading import (
    decide_answer_resubmission,
    decide_mini_resubmission,
    grade_answer,
    request_answer_resubmission,
    request_mini_resubmission,
    review_answer,
    submit_answer,
    submit_mini_answer,
)
from .membership import set_membership_status
from .progress import compute_cohort_progress, compute_learner_progress
from .release import next_release_info, release_node, sweep_mini_question_releases
