import unittest

from progressreport.core.models import Attendance, Exam, GradeDefinition, Student, SubjectDefinition, SubjectMark
from progressreport.core.report import build_class_progress_reports, build_progress_report


DEFINITION = GradeDefinition(subjects=(SubjectDefinition("Math", exam_full_marks=100),))


def exam(exam_id, marks=None, remarks=None, attendance=None):
    results = (SubjectMark(subject="Math", marks=marks),) if marks is not None else ()
    return Exam(id=exam_id, results=results, teacher_remarks=remarks, attendance=attendance)


class FinalRemarkTests(unittest.TestCase):
    def test_promotion_to_next_grade(self):
        kid = Student(id="k", grade="Class I", academic_performance=(exam("terminal3", 80),))
        report = build_progress_report(kid, DEFINITION, [kid])
        self.assertEqual(report.final_remark, "Promoted to Class II")
        self.assertEqual(report.summaries["terminal3"].rank, 1)
        self.assertIsNone(report.summaries["terminal1"])

    def test_reopening_notice_is_appended(self):
        kid = Student(id="k", grade="Class IX", academic_performance=(exam("terminal3", 80),))
        report = build_progress_report(kid, DEFINITION, [kid], reopening_notice="School reopens on April 1, 2026")
        self.assertEqual(report.final_remark, "Promoted to Class X. School reopens on April 1, 2026")

    def test_class_x_passes_out(self):
        kid = Student(id="k", grade="Class X", academic_performance=(exam("terminal3", 80),))
        self.assertEqual(build_progress_report(kid, DEFINITION, [kid]).final_remark, "Passed Class X")

    def test_failure_is_detained(self):
        kid = Student(id="k", grade="Class II", academic_performance=(exam("terminal3", 10),))
        self.assertEqual(build_progress_report(kid, DEFINITION, [kid]).final_remark, "Detained")

    def test_teacher_remark_when_no_result(self):
        kid = Student(id="k", grade="Class II", academic_performance=(exam("terminal3", remarks="Well behaved"),))
        report = build_progress_report(kid, GradeDefinition(), [kid])
        self.assertIsNone(report.summaries["terminal3"])
        self.assertEqual(report.final_remark, "Well behaved")

    def test_awaiting_results(self):
        kid = Student(id="k", grade="Class II", academic_performance=(exam("terminal1", 80),))
        report = build_progress_report(kid, DEFINITION, [kid])
        self.assertEqual(report.final_remark, "Awaiting final results.")
        self.assertEqual(report.summaries["terminal1"].result, "PASS")


class AttendanceTests(unittest.TestCase):
    def test_attendance_percentage_per_term(self):
        kid = Student(
            id="k",
            grade="Class VI",
            academic_performance=(
                exam("terminal1", attendance=Attendance(total_working_days=200, days_present=180)),
                exam("terminal2", attendance=Attendance(total_working_days=0, days_present=0)),
            ),
        )
        report = build_progress_report(kid, DEFINITION, [kid])
        self.assertAlmostEqual(report.attendance["terminal1"], 90.0)
        self.assertIsNone(report.attendance["terminal2"])
        self.assertIsNone(report.attendance["terminal3"])


class ClassProgressReportTests(unittest.TestCase):
    def test_active_students_of_the_grade_in_roll_order(self):
        students = [
            Student(id="c", grade="Class I", roll_no=3, academic_performance=(exam("terminal3", 80),)),
            Student(id="a", grade="Class I", roll_no=1, academic_performance=(exam("terminal3", 90),)),
            Student(id="t", grade="Class I", roll_no=4, status="Transferred", academic_performance=(exam("terminal3", 99),)),
            Student(id="o", grade="Class II", roll_no=1, academic_performance=(exam("terminal3", 99),)),
            Student(id="b", grade="Class I", roll_no=2, academic_performance=(exam("terminal3", 80),)),
        ]
        reports = build_class_progress_reports("Class I", DEFINITION, students, reopening_notice="Reopens in April")
        self.assertEqual([r.student_id for r in reports], ["a", "b", "c"])
        self.assertEqual([r.summaries["terminal3"].rank for r in reports], [1, 2, 2])
        self.assertEqual({r.final_remark for r in reports}, {"Promoted to Class II. Reopens in April"})

    def test_no_grade_definition_gives_empty_summaries(self):
        kid = Student(id="k", grade="Class I", roll_no=1, academic_performance=(exam("terminal3", 80),))
        reports = build_class_progress_reports("Class I", None, [kid])
        self.assertEqual(len(reports), 1)
        self.assertIsNone(reports[0].summaries["terminal3"])
        self.assertEqual(reports[0].final_remark, "Awaiting final results.")


if __name__ == "__main__":
    unittest.main()
