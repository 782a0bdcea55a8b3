import unittest
from unittest import mock

from fastapi.testclient import TestClient

from fakes import FakeFirestoreClient, school_collections
from progressreport.app import app
from progressreport.services.firestore_service import FirestoreService


def _student(student_id, math, science):
    return {
        "id": student_id,
        "grade": "Class X",
        "academic_performance": [
            {
                "id": "terminal1",
                "results": [
                    {"subject": "Math", "marks": math},
                    {"subject": "Science", "marks": science},
                ],
            }
        ],
    }


GRADE_DEFINITION = {
    "subjects": [
        {"name": "Math", "exam_full_marks": 100},
        {"name": "Science", "exam_full_marks": 100},
    ]
}


class ComputeEndpointTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_term_summary_from_posted_roster(self):
        roster = [_student("b", 40, 30), _student("c", 80, 70), _student("d", 75, 75), _student("e", 70, 70)]
        res = self.client.post(
            "/results/term-summary",
            json={
                "student": roster[3],
                "exam_id": "terminal1",
                "grade_definition": GRADE_DEFINITION,
                "classmates": roster,
            },
        )
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["rank"], 2)
        self.assertEqual(body["result"], "PASS")
        self.assertEqual(body["division"], "I Div")

    def test_absent_exam_returns_null(self):
        res = self.client.post(
            "/results/term-summary",
            json={"student": _student("b", 40, 30), "exam_id": "terminal2", "grade_definition": GRADE_DEFINITION},
        )
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(res.json())

    def test_unknown_exam_id(self):
        res = self.client.post(
            "/results/term-summary",
            json={"student": _student("b", 40, 30), "exam_id": "midterm", "grade_definition": GRADE_DEFINITION},
        )
        self.assertEqual(res.status_code, 422)


class FirestoreEndpointTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        service = FirestoreService("", client=FakeFirestoreClient(school_collections()))
        patcher = mock.patch.object(FirestoreService, "from_settings", return_value=service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_student_result(self):
        res = self.client.get("/students/s3/results/terminal1")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["rank"], 2)

    def test_unknown_student(self):
        self.assertEqual(self.client.get("/students/zz/results/terminal1").status_code, 404)
        self.assertEqual(self.client.get("/students/zz/progress-report").status_code, 404)

    def test_progress_report(self):
        body = self.client.get("/students/s1/progress-report").json()
        self.assertEqual(body["summaries"]["terminal1"]["rank"], 1)
        self.assertIsNone(body["summaries"]["terminal2"])
        self.assertEqual(body["final_remark"], "Awaiting final results.")

    def test_class_statement(self):
        res = self.client.get("/classes/Class X/statement/terminal1", params={"sort_by": "name"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual([row["name"] for row in res.json()], ["Amy", "Ben", "Cal"])

    def test_class_statement_bad_sort(self):
        with self.assertLogs("progressreport", level="WARNING") as logs:
            res = self.client.get("/classes/Class X/statement/terminal1", params={"sort_by": "height"})
        self.assertEqual(res.status_code, 400)
        self.assertIn("Unsupported sort order", logs.output[-1])

    def test_class_progress_reports(self):
        res = self.client.get("/classes/Class X/progress-reports")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual([r["student_id"] for r in body], ["s1", "s2", "s3"])
        self.assertEqual([r["summaries"]["terminal1"]["rank"] for r in body], [1, 1, 2])
        self.assertEqual(body[0]["final_remark"], "Awaiting final results.")


if __name__ == "__main__":
    unittest.main()
