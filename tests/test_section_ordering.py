import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumefit.features.section_ordering import (  # noqa: E402
    RECOMMENDED_ORDER,
    detect_section_order,
    validate_section_order,
)


class RecommendedOrderTests(unittest.TestCase):
    def test_orders(self):
        self.assertEqual(RECOMMENDED_ORDER["coop"][0], "skills")
        self.assertEqual(RECOMMENDED_ORDER["fulltime"][0], "summary")
        fulltime = RECOMMENDED_ORDER["fulltime"]
        self.assertLess(fulltime.index("experience"), fulltime.index("education"))
        changer = RECOMMENDED_ORDER["career_changer"]
        self.assertLess(changer.index("education"), changer.index("experience"))


class ValidateSectionOrderTests(unittest.TestCase):
    def test_empty_and_single(self):
        self.assertTrue(validate_section_order([], "coop").is_correct_order)
        self.assertTrue(validate_section_order(["experience"], "coop").is_correct_order)

    def test_partial_resume_in_order(self):
        result = validate_section_order(["skills", "education"], "coop")
        self.assertTrue(result.is_correct_order)
        self.assertEqual(result.recommended_order, list(RECOMMENDED_ORDER["coop"]))

    def test_unknown_sections_are_ignored(self):
        result = validate_section_order(["skills", "hobbies", "education", "experience"], "coop")
        self.assertTrue(result.is_correct_order)
        self.assertEqual(result.violations, [])

    def test_coop_experience_before_education(self):
        result = validate_section_order(["skills", "experience", "education"], "coop")
        self.assertFalse(result.is_correct_order)
        by_section = {v.section: v for v in result.violations}
        self.assertEqual(set(by_section), {"experience", "education"})
        self.assertEqual(by_section["experience"].actual_position, 1)
        self.assertEqual(by_section["experience"].expected_position, 2)
        self.assertEqual(
            by_section["experience"].description,
            '"experience" appears at position 2 but should be at position 3 for coop candidates',
        )

    def test_fulltime_correct(self):
        result = validate_section_order(["summary", "skills", "experience", "education"], "fulltime")
        self.assertTrue(result.is_correct_order)


class DetectSectionOrderTests(unittest.TestCase):
    def test_follows_heading_positions(self):
        text = "Jane Doe\njane@example.com\nSkills\nPython\nEducation:\nBSc CS\nWork Experience\nAcme\n"
        self.assertEqual(detect_section_order(text), ["skills", "education", "experience"])

    def test_headings_must_stand_alone(self):
        text = "Built skills matrix for the education team\nExperience with Python\n"
        self.assertEqual(detect_section_order(text), [])

    def test_filters_to_present_sections(self):
        text = "Summary\nEngineer\nProjects\nScheduler\nExperience\nAcme\n"
        self.assertEqual(detect_section_order(text, ["experience", "summary"]), ["summary", "experience"])

    def test_missing_text(self):
        self.assertEqual(detect_section_order(None), [])
        self.assertEqual(detect_section_order(""), [])


if __name__ == "__main__":
    unittest.main()
