from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from progressreport.core.models import (
    CLASS_I,
    CLASS_II,
    CLASS_III,
    CLASS_IV,
    CLASS_IX,
    CLASS_V,
    CLASS_VI,
    CLASS_VII,
    CLASS_VIII,
    CLASS_X,
    GRADES_LIST,
    KINDERGARTEN,
    NURSERY,
    RESULT_FAIL,
    RESULT_PASS,
    RESULT_SIMPLE_PASS,
)


@dataclass(frozen=True)
class GradePolicy:
    band: str
    has_activities: bool
    # Exam-component pass mark when marks are split into exam + activity
    exam_pass_mark: float
    # Single-mark pass mark when the grade has no activity component
    pass_mark: float
    any_failure_fails: bool = False
    awards_division: bool = False
    # Final term marks recorded as SA (summative) + FA (formative)
    split_final_term: bool = False
    sa_pass_mark: float = 27
    split_full_marks: float = 100


PRIMARY = GradePolicy(
    band="Nursery-II",
    has_activities=False,
    exam_pass_mark=20,
    pass_mark=35,
    any_failure_fails=True,
)
MIDDLE = GradePolicy(
    band="III-VIII",
    has_activities=True,
    exam_pass_mark=20,
    pass_mark=35,
)
SECONDARY = GradePolicy(
    band="IX-X",
    has_activities=False,
    exam_pass_mark=20,
    pass_mark=33,
    awards_division=True,
    split_final_term=True,
)

POLICY_BY_GRADE: Dict[str, GradePolicy] = {
    NURSERY: PRIMARY,
    KINDERGARTEN: PRIMARY,
    CLASS_I: PRIMARY,
    CLASS_II: PRIMARY,
    CLASS_III: MIDDLE,
    CLASS_IV: MIDDLE,
    CLASS_V: MIDDLE,
    CLASS_VI: MIDDLE,
    CLASS_VII: MIDDLE,
    CLASS_VIII: MIDDLE,
    CLASS_IX: SECONDARY,
    CLASS_X: SECONDARY,
}

SPLIT_TERM_EXAM_ID = "terminal3"

DIVISION_BANDS: Tuple[Tuple[float, str], ...] = (
    (75, "Distinction"),
    (60, "I Div"),
    (45, "II Div"),
    (35, "III Div"),
)

# Lower bounds are exclusive: 89.5% is an "O", 89% is an "A".
LETTER_BANDS: Tuple[Tuple[float, str], ...] = (
    (89, "O"),
    (79, "A"),
    (69, "B"),
    (59, "C"),
)

REMARK_BANDS: Tuple[Tuple[float, str], ...] = (
    (90, "Outstanding performance!"),
    (75, "Excellent performance."),
    (60, "Good performance."),
    (45, "Satisfactory performance."),
)


def policy_for_grade(grade: str) -> GradePolicy:
    return POLICY_BY_GRADE.get(grade, MIDDLE)


def decide_result(failed_numeric: int, categorical_passed: int, categorical_total: int, policy: GradePolicy) -> str:
    if categorical_passed < categorical_total:
        return RESULT_FAIL
    if failed_numeric > 1:
        return RESULT_FAIL
    if failed_numeric == 1:
        return RESULT_FAIL if policy.any_failure_fails else RESULT_SIMPLE_PASS
    return RESULT_PASS


def to_division(percentage: float, result: str, policy: GradePolicy) -> str:
    if not policy.awards_division or result != RESULT_PASS:
        return "-"
    for lower, label in DIVISION_BANDS:
        if percentage >= lower:
            return label
    return "-"


def to_academic_grade(percentage: float, result: str) -> str:
    if result == RESULT_FAIL:
        return "E"
    for lower, letter in LETTER_BANDS:
        if percentage > lower:
            return letter
    return "D"


def to_remark(percentage: float, result: str, failed_subjects: Tuple[str, ...]) -> str:
    if result == RESULT_FAIL:
        suffix = f" in {', '.join(failed_subjects)}" if failed_subjects else ""
        return f"Needs significant improvement{suffix}."
    if result == RESULT_SIMPLE_PASS:
        return f"Simple Pass. Focus on improving in {', '.join(failed_subjects)}."
    for lower, remark in REMARK_BANDS:
        if percentage >= lower:
            return remark
    return "Passed. Needs to work harder."


def next_grade(grade: str) -> Optional[str]:
    if grade not in GRADES_LIST:
        return None
    index = GRADES_LIST.index(grade)
    if index >= len(GRADES_LIST) - 1:
        return None
    return GRADES_LIST[index + 1]
