from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from progressreport.core.models import (
    CLASS_X,
    RESULT_FAIL,
    RESULT_PASS,
    RESULT_SIMPLE_PASS,
    TERMINAL_EXAMS,
    Exam,
    GradeDefinition,
    Student,
    TermSummary,
)
from progressreport.core.policy import next_grade
from progressreport.core.results import active_roster, compute_term_summary, find_exam

FINAL_EXAM_ID = "terminal3"
AWAITING_RESULTS = "Awaiting final results."


@dataclass(frozen=True)
class ProgressReport:
    student_id: str
    grade: str
    summaries: Dict[str, Optional[TermSummary]]
    attendance: Dict[str, Optional[float]]
    final_remark: str


def _with_notice(text: str, notice: Optional[str]) -> str:
    return f"{text}. {notice}" if notice else text


def final_remark(
    student: Student,
    final_summary: Optional[TermSummary],
    final_exam: Optional[Exam],
    reopening_notice: Optional[str] = None,
) -> str:
    result = final_summary.result if final_summary else None
    if result in (RESULT_PASS, RESULT_SIMPLE_PASS):
        if student.grade == CLASS_X:
            return _with_notice("Passed Class X", reopening_notice)
        upcoming = next_grade(student.grade)
        return _with_notice(f"Promoted to {upcoming}" if upcoming else "Promoted", reopening_notice)
    if result == RESULT_FAIL:
        return "Detained"
    if final_exam is not None and final_exam.teacher_remarks:
        return final_exam.teacher_remarks
    if final_summary is not None and final_summary.remark:
        return final_summary.remark
    return AWAITING_RESULTS


def build_progress_report(
    student: Student,
    grade_definition: Optional[GradeDefinition],
    classmates: Iterable[Student],
    reopening_notice: Optional[str] = None,
) -> ProgressReport:
    """Combine the three terminal summaries into the year-end report."""
    classmates = list(classmates)
    summaries: Dict[str, Optional[TermSummary]] = {}
    attendance: Dict[str, Optional[float]] = {}
    exams: Dict[str, Optional[Exam]] = {}

    for exam_id in TERMINAL_EXAMS:
        exam = find_exam(student, exam_id)
        exams[exam_id] = exam
        summaries[exam_id] = compute_term_summary(student, exam_id, grade_definition, classmates, exam=exam)
        attendance[exam_id] = exam.attendance.percentage if exam and exam.attendance else None

    return ProgressReport(
        student_id=student.id,
        grade=student.grade,
        summaries=summaries,
        attendance=attendance,
        final_remark=final_remark(student, summaries[FINAL_EXAM_ID], exams[FINAL_EXAM_ID], reopening_notice),
    )


def build_class_progress_reports(
    grade: str,
    grade_definition: Optional[GradeDefinition],
    students: Iterable[Student],
    reopening_notice: Optional[str] = None,
) -> List[ProgressReport]:
    """Year-end reports for every active student of ``grade``, in roll-number order."""
    roster = sorted(active_roster(grade, students), key=lambda s: s.roll_no)
    return [
        build_progress_report(student, grade_definition, roster, reopening_notice=reopening_notice)
        for student in roster
    ]
