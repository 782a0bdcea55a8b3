from typing import List, Optional, Tuple

try:
    from google.cloud import firestore
except ModuleNotFoundError as exc:
    raise ModuleNotFoundError(
        "Missing dependency 'google-cloud-firestore'. Run pip install -e . to install it."
    ) from exc

from progressreport.app_logger import get_logger
from progressreport.config.settings import settings
from progressreport.core.models import STATUS_ACTIVE, GradeDefinition, Student, TermSummary
from progressreport.core.report import ProgressReport, build_class_progress_reports, build_progress_report
from progressreport.core.results import SORT_ROLL_NO, build_class_statement, compute_term_summary

logger = get_logger(__name__)


class FirestoreServiceError(Exception):
    pass


class StudentNotFoundError(FirestoreServiceError):
    pass


class FirestoreService:
    def __init__(self, project_id: str, client=None) -> None:
        if client is None:
            if not project_id:
                raise FirestoreServiceError("Missing FIREBASE_PROJECT_ID in environment")
            client = firestore.Client(project=project_id)
        self.db = client

    @classmethod
    def from_settings(cls) -> "FirestoreService":
        return cls(settings.firebase_project_id)

    def get_student(self, student_id: str) -> Student:
        snap = self.db.collection(settings.students_collection_id).document(student_id).get()
        if not snap.exists:
            raise StudentNotFoundError(f"Student not found: {student_id}")
        return Student.from_dict(snap.to_dict() or {}, student_id=snap.id)

    def get_active_classmates(self, grade: str) -> List[Student]:
        docs = (
            self.db.collection(settings.students_collection_id)
            .where("grade", "==", grade)
            .where("status", "==", STATUS_ACTIVE)
            .stream()
        )
        results: List[Student] = []
        for doc in docs:
            results.append(Student.from_dict(doc.to_dict() or {}, student_id=doc.id))
        logger.info("Loaded %d active students for %s", len(results), grade)
        return results

    def get_grade_definition(self, grade: str) -> Optional[GradeDefinition]:
        snap = (
            self.db.collection(settings.config_collection_id)
            .document(settings.grade_definitions_document_id)
            .get()
        )
        if not snap.exists:
            logger.warning("Grade definitions document is missing")
            return None
        data = snap.to_dict() or {}
        if grade not in data:
            logger.warning("No grade definition stored for %s", grade)
            return None
        return GradeDefinition.from_dict(data[grade])

    def get_term_summary(self, student_id: str, exam_id: str) -> Optional[TermSummary]:
        student = self.get_student(student_id)
        return compute_term_summary(
            student,
            exam_id,
            self.get_grade_definition(student.grade),
            self.get_active_classmates(student.grade),
        )

    def get_progress_report(self, student_id: str) -> ProgressReport:
        student = self.get_student(student_id)
        return build_progress_report(
            student,
            self.get_grade_definition(student.grade),
            self.get_active_classmates(student.grade),
            reopening_notice=settings.reopening_notice or None,
        )

    def get_class_progress_reports(self, grade: str) -> List[ProgressReport]:
        return build_class_progress_reports(
            grade,
            self.get_grade_definition(grade),
            self.get_active_classmates(grade),
            reopening_notice=settings.reopening_notice or None,
        )

    def get_class_statement(
        self,
        grade: str,
        exam_id: str,
        sort_by: str = SORT_ROLL_NO,
    ) -> List[Tuple[Student, TermSummary]]:
        try:
            return build_class_statement(
                grade,
                exam_id,
                self.get_grade_definition(grade),
                self.get_active_classmates(grade),
                sort_by=sort_by,
            )
        except ValueError as exc:
            raise FirestoreServiceError(str(exc)) from exc
