from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from progressreport.app_logger import setup_logging
from progressreport.config.settings import settings
from progressreport.core.models import (
    STATUS_ACTIVE,
    TERMINAL_EXAMS,
    Attendance,
    Exam,
    GradeDefinition,
    Student,
    SubjectDefinition,
    SubjectMark,
    TermSummary,
)
from progressreport.core.results import SORT_ROLL_NO, compute_term_summary
from progressreport.services.firestore_service import (
    FirestoreService,
    FirestoreServiceError,
    StudentNotFoundError,
)


logger = setup_logging()

app = FastAPI(title="Progress Report API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SubjectDefinitionPayload(BaseModel):
    name: str
    exam_full_marks: float = 0
    activity_full_marks: float = 0
    grading_system: Optional[str] = None


class GradeDefinitionPayload(BaseModel):
    subjects: List[SubjectDefinitionPayload] = Field(default_factory=list)
    class_teacher_id: Optional[str] = None


class SubjectMarkPayload(BaseModel):
    subject: str
    marks: Optional[float] = None
    exam_marks: Optional[float] = None
    activity_marks: Optional[float] = None
    sa_marks: Optional[float] = None
    fa_marks: Optional[float] = None
    grade: Optional[str] = None


class AttendancePayload(BaseModel):
    total_working_days: float = 0
    days_present: float = 0


class ExamPayload(BaseModel):
    id: str
    name: str = ""
    results: List[SubjectMarkPayload] = Field(default_factory=list)
    teacher_remarks: Optional[str] = None
    attendance: Optional[AttendancePayload] = None


class StudentPayload(BaseModel):
    id: str
    grade: str
    name: str = ""
    roll_no: int = 0
    status: str = STATUS_ACTIVE
    academic_performance: List[ExamPayload] = Field(default_factory=list)


class TermSummaryPayload(BaseModel):
    student: StudentPayload
    exam_id: str
    grade_definition: Optional[GradeDefinitionPayload] = None
    classmates: List[StudentPayload] = Field(default_factory=list)


def _to_grade_definition(payload: Optional[GradeDefinitionPayload]) -> Optional[GradeDefinition]:
    if payload is None:
        return None
    return GradeDefinition(
        subjects=tuple(SubjectDefinition(**s.model_dump()) for s in payload.subjects),
        class_teacher_id=payload.class_teacher_id,
    )


def _to_exam(payload: ExamPayload) -> Exam:
    return Exam(
        id=payload.id,
        name=payload.name,
        results=tuple(SubjectMark(**r.model_dump()) for r in payload.results),
        teacher_remarks=payload.teacher_remarks,
        attendance=Attendance(**payload.attendance.model_dump()) if payload.attendance else None,
    )


def _to_student(payload: StudentPayload) -> Student:
    return Student(
        id=payload.id,
        grade=payload.grade,
        name=payload.name,
        roll_no=payload.roll_no,
        status=payload.status,
        academic_performance=tuple(_to_exam(e) for e in payload.academic_performance),
    )


def _required_exam_id(exam_id: str) -> str:
    if exam_id not in TERMINAL_EXAMS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown exam id: {exam_id}. Use one of: {', '.join(TERMINAL_EXAMS)}",
        )
    return exam_id


def _summary_dict(summary: Optional[TermSummary]) -> Optional[Dict]:
    return asdict(summary) if summary is not None else None


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/results/term-summary")
def term_summary(payload: TermSummaryPayload) -> Optional[Dict]:
    exam_id = _required_exam_id(payload.exam_id)
    summary = compute_term_summary(
        _to_student(payload.student),
        exam_id,
        _to_grade_definition(payload.grade_definition),
        [_to_student(s) for s in payload.classmates],
    )
    return _summary_dict(summary)


@app.get("/students/{student_id}/results/{exam_id}")
def student_term_summary(student_id: str, exam_id: str) -> Optional[Dict]:
    exam_id = _required_exam_id(exam_id)
    fs = FirestoreService.from_settings()
    try:
        return _summary_dict(fs.get_term_summary(student_id, exam_id))
    except StudentNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except FirestoreServiceError as exc:
        logger.warning("Firestore request failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.get("/students/{student_id}/progress-report")
def progress_report(student_id: str) -> Dict:
    fs = FirestoreService.from_settings()
    try:
        report = fs.get_progress_report(student_id)
    except StudentNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except FirestoreServiceError as exc:
        logger.warning("Firestore request failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return asdict(report)


@app.get("/classes/{grade}/statement/{exam_id}")
def class_statement(grade: str, exam_id: str, sort_by: str = SORT_ROLL_NO) -> List[Dict]:
    exam_id = _required_exam_id(exam_id)
    fs = FirestoreService.from_settings()
    try:
        rows = fs.get_class_statement(grade, exam_id, sort_by=sort_by)
    except FirestoreServiceError as exc:
        logger.warning("Firestore request failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [
        {"name": student.name, "roll_no": student.roll_no, **asdict(summary)}
        for student, summary in rows
    ]


@app.get("/classes/{grade}/progress-reports")
def class_progress_reports(grade: str) -> List[Dict]:
    fs = FirestoreService.from_settings()
    try:
        reports = fs.get_class_progress_reports(grade)
    except FirestoreServiceError as exc:
        logger.warning("Firestore request failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [asdict(report) for report in reports]
