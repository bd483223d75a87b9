import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumefit.core.errors import InputValidationError  # noqa: E402
from resumefit.schemas.resume import EducationEntry, JobEntry, ParsedResume, Skill  # noqa: E402
from resumefit.schemas.suggestions import NO_CHANGES_SENTINEL, Suggestion  # noqa: E402
from resumefit.services.merge_service import merge_accepted_suggestions  # noqa: E402

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _resume() -> ParsedResume:
    return ParsedResume(
        summary="Engineer with a focus on reliability.",
        contact="jane@example.com",
        projects="Scheduler: built a course planner\nChess engine in Rust",
        skills=[Skill(name="Python"), Skill(name="Javascript")],
        education=[EducationEntry(degree="BSc Computer Science", institution="State University", dates="2019")],
        experience=[
            JobEntry(
                company="Acme",
                title="Software Engineer",
                dates="2020 - 2023",
                bullet_points=["Worked on the billing service", "Helped with deployments"],
            ),
            JobEntry(company="Globex", title="Intern", dates="2019", bullet_points=["Wrote unit tests"]),
        ],
        raw_text="...",
    )


def _suggestion(sid, original, suggested, *, section="experience", item_index=0, status="accepted", offset=0):
    return Suggestion(
        id=sid,
        section=section,
        item_index=item_index,
        original_text=original,
        suggested_text=suggested,
        status=status,
        created_at=T0 + timedelta(minutes=offset),
    )


class MergeServiceTests(unittest.TestCase):
    def test_applies_accepted_bullet_rewrite(self):
        result = merge_accepted_suggestions(
            _resume(),
            [_suggestion("s1", "Worked on the billing service", "Rebuilt the billing service, cutting errors 40%")],
        )
        self.assertEqual(result.applied_count, 1)
        self.assertEqual(result.skipped_count, 0)
        self.assertEqual(
            result.merged_content.experience[0].bullet_points[0],
            "Rebuilt the billing service, cutting errors 40%",
        )
        self.assertEqual(len(result.diffs), 1)
        self.assertTrue(result.diffs[0].is_diff_content)
        self.assertEqual(result.diffs[0].original, "Worked on the billing service")

    def test_earlier_suggestion_wins_on_same_target(self):
        later = _suggestion("later", "Helped with deployments", "Automated deployments", offset=5)
        earlier = _suggestion("earlier", "Helped with deployments", "Owned deployments", offset=1)

        result = merge_accepted_suggestions(_resume(), [later, earlier])

        self.assertEqual(result.merged_content.experience[0].bullet_points[1], "Owned deployments")
        self.assertEqual(result.applied_count, 1)
        self.assertEqual(result.skipped_count, 1)
        self.assertEqual(result.applied_count + result.skipped_count, 2)
        self.assertEqual(result.warnings[0].suggestion_id, "later")
        self.assertEqual(result.warnings[0].reason, "not found")

    def test_input_is_not_mutated(self):
        resume = _resume()
        before = resume.model_dump()
        merge_accepted_suggestions(
            resume,
            [
                _suggestion("s1", "Worked on the billing service", "Rebuilt billing"),
                _suggestion("s2", "Python", "Python 3", section="skills", item_index=None, offset=1),
            ],
        )
        self.assertEqual(resume.model_dump(), before)

    def test_pending_and_rejected_are_ignored(self):
        result = merge_accepted_suggestions(
            _resume(),
            [
                _suggestion("p", "Worked on the billing service", "X", status="pending"),
                _suggestion("r", "Helped with deployments", "Y", status="rejected"),
            ],
        )
        self.assertEqual(result.merged_content, _resume())
        self.assertEqual((result.applied_count, result.skipped_count, result.noop_count), (0, 0, 0))
        self.assertEqual(result.diffs, [])

    def test_sentinel_is_noop(self):
        result = merge_accepted_suggestions(
            _resume(), [_suggestion("n", "Worked on the billing service", NO_CHANGES_SENTINEL)]
        )
        self.assertEqual(result.noop_count, 1)
        self.assertEqual(result.applied_count, 0)
        self.assertEqual(result.skipped_count, 0)
        self.assertEqual(result.merged_content.experience[0].bullet_points[0], "Worked on the billing service")
        self.assertEqual(result.diffs, [])

    def test_counts_add_up_to_accepted(self):
        suggestions = [
            _suggestion("a", "Worked on the billing service", "Rebuilt billing"),
            _suggestion("b", "Does not exist", "Whatever", offset=1),
            _suggestion("c", "Helped with deployments", NO_CHANGES_SENTINEL, offset=2),
            _suggestion("d", "Helped with deployments", "Z", status="rejected", offset=3),
        ]
        result = merge_accepted_suggestions(_resume(), suggestions)
        self.assertEqual(result.applied_count + result.skipped_count + result.noop_count, 3)

    def test_match_is_exact_and_case_sensitive(self):
        result = merge_accepted_suggestions(
            _resume(), [_suggestion("s", "worked on the billing service", "Rebuilt billing")]
        )
        self.assertEqual(result.skipped_count, 1)
        self.assertEqual(result.merged_content.experience[0].bullet_points[0], "Worked on the billing service")

    def test_item_index_scopes_the_search(self):
        result = merge_accepted_suggestions(_resume(), [_suggestion("s", "Wrote unit tests", "Wrote 200 unit tests")])
        self.assertEqual(result.skipped_count, 1)

        result = merge_accepted_suggestions(
            _resume(), [_suggestion("s", "Wrote unit tests", "Wrote 200 unit tests", item_index=1)]
        )
        self.assertEqual(result.merged_content.experience[1].bullet_points[0], "Wrote 200 unit tests")

    def test_out_of_range_index_is_skipped(self):
        result = merge_accepted_suggestions(_resume(), [_suggestion("s", "Wrote unit tests", "X", item_index=9)])
        self.assertEqual(result.skipped_count, 1)

    def test_job_title_field(self):
        result = merge_accepted_suggestions(
            _resume(), [_suggestion("t", "Software Engineer", "Backend Engineer")]
        )
        self.assertEqual(result.merged_content.experience[0].title, "Backend Engineer")

    def test_other_sections(self):
        suggestions = [
            _suggestion("sk", "Javascript", "JavaScript", section="skills", item_index=1),
            _suggestion("ed", "BSc Computer Science", "B.Sc. Computer Science", section="education", offset=1),
            _suggestion("pr", "Chess engine in Rust", "Chess engine in Rust (2,000 Elo)", section="projects",
                        item_index=None, offset=2),
            _suggestion("fm", "Engineer with a focus on reliability.", "Site reliability engineer.",
                        section="format", item_index=None, offset=3),
        ]
        result = merge_accepted_suggestions(_resume(), suggestions)
        merged = result.merged_content
        self.assertEqual(result.applied_count, 4)
        self.assertEqual(merged.skills[1].name, "JavaScript")
        self.assertEqual(merged.education[0].degree, "B.Sc. Computer Science")
        self.assertEqual(merged.projects, "Scheduler: built a course planner\nChess engine in Rust (2,000 Elo)")
        self.assertEqual(merged.summary, "Site reliability engineer.")

    def test_chained_edits_follow_creation_order(self):
        first = _suggestion("1", "Worked on the billing service", "Rebuilt the billing service", offset=0)
        second = _suggestion("2", "Rebuilt the billing service", "Rebuilt the billing service in Go", offset=1)
        result = merge_accepted_suggestions(_resume(), [second, first])
        self.assertEqual(result.applied_count, 2)
        self.assertEqual(result.merged_content.experience[0].bullet_points[0], "Rebuilt the billing service in Go")

    def test_missing_resume(self):
        with self.assertRaises(InputValidationError):
            merge_accepted_suggestions(None, [])


if __name__ == "__main__":
    unittest.main()
