import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumefit.core.errors import InputValidationError  # noqa: E402
from resumefit.schemas.resume import EducationEntry, JobEntry, ParsedResume, Skill  # noqa: E402
from resumefit.schemas.scoring import (  # noqa: E402
    ActionItem,
    ExperienceRequirement,
    JDQualifications,
    KeywordMatchV21,
    ResumeQualifications,
)
from resumefit.scoring.ats_score_v21 import (  # noqa: E402
    calculate_ats_score_v21,
    get_score_tier,
    prioritize_action_items,
)
from resumefit.scoring.content_quality import classify_action_verb, extract_quantifications  # noqa: E402
from resumefit.scoring.keyword_score import calculate_keyword_score_v21  # noqa: E402
from resumefit.scoring.qualification_fit import (  # noqa: E402
    calculate_qualification_fit,
    extract_experience_years,
)
from resumefit.scoring.role_detection import (  # noqa: E402
    detect_job_role,
    detect_seniority,
    select_component_weights,
)

JD_TEXT = (
    "Senior Software Engineer. 5+ years building backend services in Python and AWS. "
    "Experience with Docker and PostgreSQL preferred."
)

RESUME_TEXT = (
    "Alex Rivera\n"
    "alex@example.com | (555) 010-2000 | linkedin.com/in/alexr | github.com/alexr\n"
    "Professional Summary\n"
    "Backend engineer with 6 years of experience building Python services on AWS.\n"
    "Skills\n"
    "Python, AWS, Docker, PostgreSQL, Kubernetes\n"
    "Experience\n"
    "Senior Engineer, Acme Corp, Jan 2019 - Present\n"
    "- Led migration of 40 services to Kubernetes, cutting infrastructure cost by 35%\n"
    "- Built Python APIs serving 2M requests per day\n"
    "- Designed PostgreSQL schemas for billing platform\n"
    "Education\n"
    "B.S. Computer Science, State University, 2014 - 2018\n"
)


def _resume() -> ParsedResume:
    return ParsedResume(
        summary="Backend engineer with 6 years of experience building Python services on AWS.",
        skills=[Skill(name=name) for name in ("Python", "AWS", "Docker", "PostgreSQL", "Kubernetes")],
        experience=[
            JobEntry(
                company="Acme Corp",
                title="Senior Engineer",
                dates="Jan 2019 - Present",
                bullet_points=[
                    "Led migration of 40 services to Kubernetes, cutting infrastructure cost by 35%",
                    "Built Python APIs serving 2M requests per day",
                    "Designed PostgreSQL schemas for billing platform",
                ],
            )
        ],
        education=[EducationEntry(degree="B.S. Computer Science", institution="State University", dates="2018")],
        raw_text=RESUME_TEXT,
    )


def _keywords() -> list[KeywordMatchV21]:
    return [
        KeywordMatchV21(keyword="Python", importance="high", requirement="required", found=True,
                        match_type="exact", placement="skills_section"),
        KeywordMatchV21(keyword="AWS", importance="high", requirement="required", found=True,
                        match_type="exact", placement="experience_bullet"),
        KeywordMatchV21(keyword="Docker", importance="medium", requirement="preferred", found=True,
                        match_type="exact", placement="skills_section"),
        KeywordMatchV21(keyword="Terraform", importance="low", requirement="preferred", found=False),
    ]


class KeywordScoreTests(unittest.TestCase):
    def test_all_required_found_in_skills(self):
        result = calculate_keyword_score_v21([
            KeywordMatchV21(keyword="Python", importance="high", requirement="required", found=True,
                            match_type="exact", placement="skills_section"),
        ])
        self.assertEqual(result.score, 100)
        self.assertEqual(result.missing_required, [])

    def test_missing_required_penalty(self):
        result = calculate_keyword_score_v21([
            KeywordMatchV21(keyword="Python", importance="high", requirement="required", found=True,
                            match_type="exact", placement="skills_section"),
            KeywordMatchV21(keyword="Go", importance="high", requirement="required", found=False),
        ])
        self.assertEqual(result.score, 44)
        self.assertEqual(result.penalty_multiplier, 0.88)
        self.assertEqual(result.missing_required, ["Go"])

    def test_no_keywords(self):
        self.assertEqual(calculate_keyword_score_v21([]).score, 100)


class QualificationFitTests(unittest.TestCase):
    def test_experience_below_requirement(self):
        result = calculate_qualification_fit(
            JDQualifications(experience_required=ExperienceRequirement(min_years=5)),
            ResumeQualifications(total_experience_years=3),
        )
        self.assertEqual(result.experience_score, 40)
        self.assertFalse(result.experience_met)
        self.assertEqual(result.score, 76)

    def test_no_requirements_is_full_marks(self):
        result = calculate_qualification_fit(JDQualifications(), ResumeQualifications())
        self.assertEqual(result.score, 100)

    def test_extract_experience_years(self):
        self.assertEqual(extract_experience_years("2019 - 2021"), 2.5)
        self.assertEqual(extract_experience_years("Jan 2020 - Present", current_year=2022), 2.5)
        self.assertEqual(extract_experience_years(""), 0.0)


class ContentQualityTests(unittest.TestCase):
    def test_action_verbs(self):
        self.assertEqual(classify_action_verb("Led a team of five"), "strong")
        self.assertEqual(classify_action_verb("Helped with onboarding"), "weak")
        self.assertEqual(classify_action_verb("Was responsible for deploys"), "weak")

    def test_quantifications(self):
        self.assertTrue(extract_quantifications("Cut cost by 35%"))
        self.assertEqual(extract_quantifications("Wrote documentation"), [])


class RoleAndWeightTests(unittest.TestCase):
    def test_role_and_seniority(self):
        self.assertEqual(detect_job_role(JD_TEXT), "software_engineer")
        self.assertEqual(detect_job_role("Head chef wanted"), "general")
        self.assertEqual(detect_seniority(JD_TEXT), "senior")
        self.assertEqual(detect_seniority(JD_TEXT, "coop"), "mid")
        self.assertEqual(detect_seniority("Junior analyst"), "entry")

    def test_base_weights_sum_to_one(self):
        weights, warning = select_component_weights("general", "mid", "fulltime")
        self.assertIsNone(warning)
        total = weights.keywords + weights.qualification_fit + weights.content_quality + weights.sections + weights.format
        self.assertAlmostEqual(total, 1.0, places=2)

    def test_role_adjustment_applied(self):
        base, _ = select_component_weights("general", "mid", "fulltime")
        adjusted, warning = select_component_weights("software_engineer", "mid", "fulltime")
        self.assertIsNone(warning)
        self.assertAlmostEqual(adjusted.keywords, base.keywords + 0.03, places=2)
        self.assertAlmostEqual(adjusted.sections, base.sections - 0.03, places=2)

    def test_weight_sum_mismatch_warns_but_is_not_fatal(self):
        skewed = {"keywords": 0.5, "qualification_fit": 0.2, "content_quality": 0.2, "sections": 0.15, "format": 0.1}
        with patch("resumefit.scoring.role_detection.get_weight_table", return_value=skewed):
            with self.assertLogs("resumefit.scoring.role_detection", level="WARNING") as logs:
                weights, warning = select_component_weights("general", "mid", "fulltime")

        self.assertIsNotNone(warning)
        self.assertIn("scoring_weight_sum_mismatch", logs.output[0])
        self.assertEqual(weights.keywords, 0.43)
        self.assertEqual(weights.format, 0.09)


class TierAndActionItemTests(unittest.TestCase):
    def test_tiers(self):
        self.assertEqual(get_score_tier(85), "excellent")
        self.assertEqual(get_score_tier(84), "strong")
        self.assertEqual(get_score_tier(70), "strong")
        self.assertEqual(get_score_tier(69), "moderate")
        self.assertEqual(get_score_tier(55), "moderate")
        self.assertEqual(get_score_tier(54), "weak")

    def test_prioritize_orders_by_priority_then_impact(self):
        items = [
            ActionItem(priority="low", category="Format", message="a", potential_impact=2),
            ActionItem(priority="high", category="Content", message="b", potential_impact=5),
            ActionItem(priority="critical", category="Keywords", message="c", potential_impact=15),
            ActionItem(priority="high", category="Keywords", message="d", potential_impact=10),
        ]
        ordered = prioritize_action_items(items)
        self.assertEqual([item.message for item in ordered], ["c", "d", "b", "a"])

    def test_prioritize_caps_list(self):
        items = [
            ActionItem(priority="low", category="Format", message=str(i), potential_impact=i) for i in range(12)
        ]
        self.assertEqual(len(prioritize_action_items(items)), 8)
        self.assertEqual(len(prioritize_action_items(items, limit=3)), 3)


class ATSScoreV21Tests(unittest.TestCase):
    def _score(self, **overrides):
        kwargs = dict(
            keywords=_keywords(),
            jd_qualifications=JDQualifications(experience_required=ExperienceRequirement(min_years=5)),
            resume_qualifications=ResumeQualifications(total_experience_years=6),
            resume=_resume(),
            jd_text=JD_TEXT,
            archetype="fulltime",
        )
        kwargs.update(overrides)
        return calculate_ats_score_v21(**kwargs)

    def test_scores_are_bounded_and_consistent(self):
        result = self._score()
        self.assertGreaterEqual(result.overall, 0)
        self.assertLessEqual(result.overall, 100)
        self.assertEqual(result.tier, get_score_tier(result.overall))
        self.assertLessEqual(len(result.action_items), 8)
        for component in (
            result.breakdown_v21.keywords,
            result.breakdown_v21.qualification_fit,
            result.breakdown_v21.content_quality,
            result.breakdown_v21.sections,
            result.breakdown_v21.format,
        ):
            self.assertGreaterEqual(component.score, 0)
            self.assertLessEqual(component.score, 100)
            self.assertAlmostEqual(component.weighted, component.score * component.weight, places=1)

    def test_metadata(self):
        result = self._score()
        self.assertEqual(result.metadata.detected_role, "software_engineer")
        self.assertEqual(result.metadata.detected_seniority, "senior")
        self.assertIsNone(result.metadata.weight_warning)
        self.assertEqual(result.breakdown.keyword_score, result.breakdown_v21.keywords.score)

    def test_missing_required_keyword_is_critical_action(self):
        keywords = _keywords() + [KeywordMatchV21(keyword="Go", importance="high", requirement="required")]
        result = self._score(keywords=keywords)
        self.assertEqual(result.action_items[0].priority, "critical")
        self.assertIn("Go", result.action_items[0].message)

    def test_empty_job_description(self):
        with self.assertRaises(InputValidationError):
            self._score(jd_text="  ")

    def test_missing_raw_text(self):
        resume = _resume()
        resume.raw_text = None
        with self.assertRaises(InputValidationError):
            self._score(resume=resume)


if __name__ == "__main__":
    unittest.main()
