import unittest

from progressreport.core.models import SubjectDefinition, SubjectMark
from progressreport.core.subjects import find_subject_mark, normalize_subject_name, subjects_match


class NormalizeTests(unittest.TestCase):
    def test_strips_case_space_and_punctuation(self):
        self.assertEqual(normalize_subject_name("  English - II "), "englishii")
        self.assertEqual(normalize_subject_name("Eng-I"), "engi")
        self.assertEqual(normalize_subject_name(None), "")


class AliasTests(unittest.TestCase):
    def test_math_names_are_equivalent_both_ways(self):
        self.assertTrue(subjects_match("Math", "Mathematics"))
        self.assertTrue(subjects_match("Mathematics", "Math"))
        self.assertTrue(subjects_match("maths", "MATH"))

    def test_documented_aliases(self):
        self.assertTrue(subjects_match("English", "English I"))
        self.assertTrue(subjects_match("English - II", "English II"))
        self.assertTrue(subjects_match("Social Studies", "Social Science"))
        self.assertTrue(subjects_match("Social Science", "Social Studies"))
        self.assertTrue(subjects_match("Eng-I", "English"))
        self.assertTrue(subjects_match("Eng-I", "English I"))
        self.assertTrue(subjects_match("Eng-II", "English - II"))
        self.assertTrue(subjects_match("Spellings", "Spelling"))
        self.assertTrue(subjects_match("Rhymes", "Rhyme"))

    def test_unrelated_subjects_do_not_match(self):
        self.assertFalse(subjects_match("English", "English II"))
        self.assertFalse(subjects_match("Science", "Social Science"))
        self.assertFalse(subjects_match("Mizo", "Lushei"))
        self.assertFalse(subjects_match("", ""))


class FindSubjectMarkTests(unittest.TestCase):
    def test_returns_first_match(self):
        results = [
            SubjectMark(subject="Science", marks=50),
            SubjectMark(subject="Mathematics", marks=70),
            SubjectMark(subject="Maths", marks=10),
        ]
        mark = find_subject_mark(results, SubjectDefinition(name="Math", exam_full_marks=100))
        self.assertEqual(mark.marks, 70)

    def test_missing_inputs_give_none(self):
        subject = SubjectDefinition(name="Math")
        self.assertIsNone(find_subject_mark(None, subject))
        self.assertIsNone(find_subject_mark([], subject))
        self.assertIsNone(find_subject_mark([SubjectMark(subject="Math")], None))
        self.assertIsNone(find_subject_mark([SubjectMark(subject="Hindi")], subject))


if __name__ == "__main__":
    unittest.main()
