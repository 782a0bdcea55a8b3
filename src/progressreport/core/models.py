from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union


NURSERY = "Nursery"
KINDERGARTEN = "Kindergarten"
CLASS_I = "Class I"
CLASS_II = "Class II"
CLASS_III = "Class III"
CLASS_IV = "Class IV"
CLASS_V = "Class V"
CLASS_VI = "Class VI"
CLASS_VII = "Class VII"
CLASS_VIII = "Class VIII"
CLASS_IX = "Class IX"
CLASS_X = "Class X"

GRADES_LIST: Tuple[str, ...] = (
    NURSERY,
    KINDERGARTEN,
    CLASS_I,
    CLASS_II,
    CLASS_III,
    CLASS_IV,
    CLASS_V,
    CLASS_VI,
    CLASS_VII,
    CLASS_VIII,
    CLASS_IX,
    CLASS_X,
)

STATUS_ACTIVE = "Active"
STATUS_TRANSFERRED = "Transferred"

TERMINAL_EXAMS: Dict[str, str] = {
    "terminal1": "First Terminal Examination",
    "terminal2": "Second Terminal Examination",
    "terminal3": "Third Terminal Examination",
}

OABC = "OABC"
OABC_GRADES: Tuple[str, ...] = ("O", "A", "B", "C")

RESULT_PASS = "PASS"
RESULT_SIMPLE_PASS = "SIMPLE PASS"
RESULT_FAIL = "FAIL"
NO_RANK = "-"


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class SubjectDefinition:
    name: str
    exam_full_marks: float = 0
    activity_full_marks: float = 0
    grading_system: Optional[str] = None

    @property
    def is_categorical(self) -> bool:
        return self.grading_system == OABC

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubjectDefinition":
        return cls(
            name=str(data.get("name") or ""),
            exam_full_marks=_to_number(data.get("examFullMarks")) or 0,
            activity_full_marks=_to_number(data.get("activityFullMarks")) or 0,
            grading_system=data.get("gradingSystem"),
        )


@dataclass(frozen=True)
class GradeDefinition:
    subjects: Tuple[SubjectDefinition, ...] = ()
    class_teacher_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GradeDefinition":
        data = data or {}
        return cls(
            subjects=tuple(SubjectDefinition.from_dict(s) for s in data.get("subjects") or []),
            class_teacher_id=data.get("classTeacherId"),
        )


@dataclass(frozen=True)
class SubjectMark:
    subject: str
    marks: Optional[float] = None
    exam_marks: Optional[float] = None
    activity_marks: Optional[float] = None
    sa_marks: Optional[float] = None
    fa_marks: Optional[float] = None
    grade: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubjectMark":
        return cls(
            subject=str(data.get("subject") or ""),
            marks=_to_number(data.get("marks")),
            exam_marks=_to_number(data.get("examMarks")),
            activity_marks=_to_number(data.get("activityMarks")),
            sa_marks=_to_number(data.get("saMarks")),
            fa_marks=_to_number(data.get("faMarks")),
            grade=data.get("grade"),
        )


@dataclass(frozen=True)
class Attendance:
    total_working_days: float = 0
    days_present: float = 0

    @property
    def percentage(self) -> Optional[float]:
        if self.total_working_days <= 0:
            return None
        return (self.days_present / self.total_working_days) * 100

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Attendance"]:
        if not data:
            return None
        return cls(
            total_working_days=_to_number(data.get("totalWorkingDays")) or 0,
            days_present=_to_number(data.get("daysPresent")) or 0,
        )


@dataclass(frozen=True)
class Exam:
    id: str
    name: str = ""
    results: Tuple[SubjectMark, ...] = ()
    teacher_remarks: Optional[str] = None
    attendance: Optional[Attendance] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Exam":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            results=tuple(SubjectMark.from_dict(r) for r in data.get("results") or []),
            teacher_remarks=data.get("teacherRemarks") or None,
            attendance=Attendance.from_dict(data.get("attendance")),
        )


@dataclass(frozen=True)
class Student:
    id: str
    grade: str
    name: str = ""
    roll_no: int = 0
    status: str = STATUS_ACTIVE
    academic_performance: Tuple[Exam, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @classmethod
    def from_dict(cls, data: Dict[str, Any], student_id: Optional[str] = None) -> "Student":
        return cls(
            id=str(student_id or data.get("id") or ""),
            grade=str(data.get("grade") or ""),
            name=str(data.get("name") or ""),
            roll_no=int(_to_number(data.get("rollNo")) or 0),
            status=str(data.get("status") or ""),
            academic_performance=tuple(Exam.from_dict(e) for e in data.get("academicPerformance") or []),
        )


@dataclass(frozen=True)
class TermSummary:
    student_id: str
    exam_total: float
    activity_total: float
    grand_total: float
    full_marks_total: float
    percentage: float
    result: str
    division: str
    academic_grade: str
    remark: str
    rank: Union[int, str]
    failed_subjects: Tuple[str, ...] = ()
