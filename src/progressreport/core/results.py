from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from progressreport.app_logger import get_logger
from progressreport.core.models import (
    NO_RANK,
    OABC_GRADES,
    RESULT_FAIL,
    RESULT_PASS,
    TERMINAL_EXAMS,
    Exam,
    GradeDefinition,
    Student,
    SubjectDefinition,
    SubjectMark,
    TermSummary,
)
from progressreport.core.policy import (
    SPLIT_TERM_EXAM_ID,
    GradePolicy,
    decide_result,
    policy_for_grade,
    to_academic_grade,
    to_division,
    to_remark,
)
from progressreport.core.subjects import find_subject_mark

logger = get_logger(__name__)

LEGACY_EXAM_NAMES: Dict[str, Tuple[str, ...]] = {
    "terminal1": ("first terminal examination", "i terminal examination"),
    "terminal2": ("second terminal examination", "ii terminal examination"),
    "terminal3": ("third terminal examination", "iii terminal examination"),
}

SORT_ROLL_NO = "rollNo"
SORT_NAME = "name"
SORT_TOTAL_MARKS = "totalMarks"
SORT_CRITERIA = (SORT_ROLL_NO, SORT_NAME, SORT_TOTAL_MARKS)


@dataclass(frozen=True)
class SubjectScore:
    subject: str
    exam_part: float
    activity_part: float
    total: float
    full_marks: float
    failed: bool


@dataclass(frozen=True)
class ExamScore:
    student_id: str
    exam_total: float
    activity_total: float
    grand_total: float
    full_marks_total: float
    failed_subjects: Tuple[str, ...]
    categorical_passed: int
    categorical_total: int
    result: str

    @property
    def percentage(self) -> float:
        if self.full_marks_total <= 0:
            return 0
        return (self.grand_total / self.full_marks_total) * 100


def find_exam(student: Student, exam_id: str) -> Optional[Exam]:
    """Locate a terminal exam on a student by slot id, display name or legacy name."""
    template_name = TERMINAL_EXAMS.get(exam_id, "").strip().lower()
    legacy_names = LEGACY_EXAM_NAMES.get(exam_id, ())
    for exam in student.academic_performance:
        if exam.id == exam_id:
            return exam
        name = exam.name.strip().lower()
        if not name:
            continue
        if template_name and name == template_name:
            return exam
        if name in legacy_names:
            return exam
    return None


def _number(value: Optional[float]) -> float:
    return value if value is not None else 0


def score_subject(
    mark: Optional[SubjectMark],
    subject_def: SubjectDefinition,
    policy: GradePolicy,
    exam_id: str,
) -> SubjectScore:
    if policy.has_activities:
        exam_part = _number(mark.exam_marks if mark else None)
        activity_part = _number(mark.activity_marks if mark else None)
        return SubjectScore(
            subject=subject_def.name,
            exam_part=exam_part,
            activity_part=activity_part,
            total=exam_part + activity_part,
            full_marks=subject_def.exam_full_marks + subject_def.activity_full_marks,
            failed=exam_part < policy.exam_pass_mark,
        )

    if policy.split_final_term and exam_id == SPLIT_TERM_EXAM_ID:
        # FA carries no pass mark; a plain "marks" entry stands in for SA
        sa_recorded = mark is not None and mark.sa_marks is not None
        sa = _number(mark.sa_marks if sa_recorded else (mark.marks if mark else None))
        if sa_recorded:
            total = sa + _number(mark.fa_marks)
        else:
            total = _number(mark.marks if mark else None)
        return SubjectScore(
            subject=subject_def.name,
            exam_part=total,
            activity_part=0,
            total=total,
            full_marks=policy.split_full_marks,
            failed=sa < policy.sa_pass_mark,
        )

    total = _number(mark.marks if mark else None)
    return SubjectScore(
        subject=subject_def.name,
        exam_part=total,
        activity_part=0,
        total=total,
        full_marks=subject_def.exam_full_marks,
        failed=total < policy.pass_mark,
    )


def score_exam(
    student_id: str,
    grade: str,
    exam: Optional[Exam],
    grade_definition: GradeDefinition,
    exam_id: str,
) -> ExamScore:
    policy = policy_for_grade(grade)
    results = exam.results if exam else ()
    numeric = [sd for sd in grade_definition.subjects if not sd.is_categorical]
    categorical = [sd for sd in grade_definition.subjects if sd.is_categorical]

    exam_total = activity_total = grand_total = full_marks_total = 0
    failed: List[str] = []
    for subject_def in numeric:
        score = score_subject(find_subject_mark(results, subject_def), subject_def, policy, exam_id)
        exam_total += score.exam_part
        activity_total += score.activity_part
        grand_total += score.total
        full_marks_total += score.full_marks
        if score.failed:
            failed.append(score.subject)

    categorical_passed = 0
    for subject_def in categorical:
        mark = find_subject_mark(results, subject_def)
        if mark is not None and mark.grade in OABC_GRADES:
            categorical_passed += 1

    return ExamScore(
        student_id=student_id,
        exam_total=exam_total,
        activity_total=activity_total,
        grand_total=grand_total,
        full_marks_total=full_marks_total,
        failed_subjects=tuple(failed),
        categorical_passed=categorical_passed,
        categorical_total=len(categorical),
        result=decide_result(len(failed), categorical_passed, len(categorical), policy),
    )


def rank_passing(scores: Iterable[ExamScore]) -> Dict[str, Union[int, str]]:
    """Rank full passes by distinct grand total; everyone else gets "-".

    Ties share a rank and the next distinct total takes the next number, so
    totals 150, 150, 140 rank 1, 1, 2.
    """
    scores = list(scores)
    distinct = sorted({s.grand_total for s in scores if s.result == RESULT_PASS}, reverse=True)
    positions = {total: index + 1 for index, total in enumerate(distinct)}
    return {
        s.student_id: positions[s.grand_total] if s.result == RESULT_PASS else NO_RANK
        for s in scores
    }


def _summarize(score: ExamScore, rank: Union[int, str], grade: str) -> TermSummary:
    policy = policy_for_grade(grade)
    percentage = score.percentage
    return TermSummary(
        student_id=score.student_id,
        exam_total=score.exam_total,
        activity_total=score.activity_total,
        grand_total=score.grand_total,
        full_marks_total=score.full_marks_total,
        percentage=percentage,
        result=score.result,
        division=to_division(percentage, score.result, policy),
        academic_grade=to_academic_grade(percentage, score.result),
        remark=to_remark(percentage, score.result, score.failed_subjects),
        rank=rank,
        failed_subjects=score.failed_subjects,
    )


def active_roster(grade: str, students: Iterable[Student]) -> List[Student]:
    roster: List[Student] = []
    seen = set()
    for s in students:
        if s.grade != grade or not s.is_active or s.id in seen:
            continue
        seen.add(s.id)
        roster.append(s)
    return roster


def _score_roster(
    roster: Sequence[Student],
    exam_id: str,
    grade_definition: GradeDefinition,
    overrides: Optional[Dict[str, Optional[Exam]]] = None,
) -> List[ExamScore]:
    overrides = overrides or {}
    scores = []
    for s in roster:
        exam = overrides[s.id] if s.id in overrides else find_exam(s, exam_id)
        scores.append(score_exam(s.id, s.grade, exam, grade_definition, exam_id))
    return scores


def compute_term_summary(
    student: Student,
    exam_id: str,
    grade_definition: Optional[GradeDefinition],
    classmates: Iterable[Student],
    exam: Optional[Exam] = None,
) -> Optional[TermSummary]:
    """Compute one student's result for a terminal exam, ranked against the class.

    ``classmates`` may hold the whole school; only Active students of the
    student's grade take part in ranking. ``exam`` overrides the record found
    on the student for ``exam_id``.

    Returns ``None`` when there is nothing to report: no subjects defined for
    the grade, no exam record, or the student is not an active member of the
    grade.
    """
    if grade_definition is None or not grade_definition.subjects:
        logger.debug("No subjects defined for %s; skipping summary", student.grade)
        return None

    if exam is None:
        exam = find_exam(student, exam_id)
    if exam is None:
        logger.debug("Student %s has no %s record", student.id, exam_id)
        return None

    if not student.is_active:
        logger.debug("Student %s is not active; no ranked summary", student.id)
        return None

    roster = active_roster(student.grade, classmates)
    if all(s.id != student.id for s in roster):
        roster.append(student)

    scores = _score_roster(roster, exam_id, grade_definition, {student.id: exam})
    ranks = rank_passing(scores)
    own = next(s for s in scores if s.student_id == student.id)
    return _summarize(own, ranks[student.id], student.grade)


def _sort_key_total(row: Tuple[Student, TermSummary]):
    summary = row[1]
    return (summary.result == RESULT_FAIL, -summary.grand_total)


def build_class_statement(
    grade: str,
    exam_id: str,
    grade_definition: Optional[GradeDefinition],
    students: Iterable[Student],
    sort_by: str = SORT_ROLL_NO,
) -> List[Tuple[Student, TermSummary]]:
    """Summaries for every active student of ``grade``, as on the class mark statement.

    Students with no record for the exam are scored as having zero marks.
    """
    if sort_by not in SORT_CRITERIA:
        raise ValueError(f"Unsupported sort order: {sort_by}. Use one of: {', '.join(SORT_CRITERIA)}")
    if grade_definition is None or not grade_definition.subjects:
        return []

    roster = active_roster(grade, students)
    scores = _score_roster(roster, exam_id, grade_definition)
    ranks = rank_passing(scores)
    rows = [
        (student, _summarize(score, ranks[student.id], grade))
        for student, score in zip(roster, scores)
    ]

    if sort_by == SORT_NAME:
        rows.sort(key=lambda row: row[0].name.casefold())
    elif sort_by == SORT_TOTAL_MARKS:
        rows.sort(key=_sort_key_total)
    else:
        rows.sort(key=lambda row: row[0].roll_no)
    logger.debug("Built %s statement for %s with %d rows", exam_id, grade, len(rows))
    return rows
