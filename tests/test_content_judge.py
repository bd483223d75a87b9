import asyncio
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumefit.ai.content_judge import judge_content_quality, parse_quality_scores  # noqa: E402
from resumefit.core.errors import AIInvocationError, OutputParseError  # noqa: E402
from resumefit.schemas.resume import JobEntry, ParsedResume, Skill  # noqa: E402

JD_TEXT = "Backend engineer, Python, contact hiring@corp.com"


class _SectionGenerator:
    """Answers by section type found in the prompt."""

    def __init__(self, answers):
        self.answers = answers
        self.prompts: list[str] = []

    async def generate(self, messages, *, json_mode=False):
        prompt = messages[-1].content
        self.prompts.append(prompt)
        for section, answer in self.answers.items():
            if f'type="{section}"' in prompt:
                if isinstance(answer, Exception):
                    raise answer
                return answer
        return '{"relevance": 0, "clarity": 0, "impact": 0}'


class _SlowGenerator:
    async def generate(self, messages, *, json_mode=False):
        await asyncio.sleep(5)
        return "{}"


async def _no_sleep(_seconds: float) -> None:
    return None


def _resume() -> ParsedResume:
    return ParsedResume(
        summary="Engineer. Reach me at jane@example.com.",
        skills=[Skill(name="Python")],
        experience=[JobEntry(company="Acme", title="Engineer", bullet_points=["Built APIs"])],
        raw_text="x",
    )


class ParseQualityScoresTests(unittest.TestCase):
    def test_mean_of_dimensions(self):
        self.assertEqual(parse_quality_scores('{"relevance": 85, "clarity": 90, "impact": 76}'), 84)

    def test_fenced_json(self):
        self.assertEqual(parse_quality_scores('```json\n{"relevance": 50, "clarity": 50, "impact": 50}\n```'), 50)

    def test_out_of_range_is_parse_error(self):
        with self.assertRaises(OutputParseError):
            parse_quality_scores('{"relevance": 150, "clarity": 90, "impact": 75}')

    def test_missing_dimension_is_parse_error(self):
        with self.assertRaises(OutputParseError):
            parse_quality_scores('{"relevance": 50, "clarity": 90}')


class JudgeContentQualityTests(unittest.IsolatedAsyncioTestCase):
    async def test_averages_sections(self):
        generator = _SectionGenerator({
            "summary": '{"relevance": 80, "clarity": 80, "impact": 80}',
            "skills": '{"relevance": 60, "clarity": 60, "impact": 60}',
            "experience": '{"relevance": 91, "clarity": 91, "impact": 91}',
        })
        score = await judge_content_quality(_resume(), JD_TEXT, generator, sleep=_no_sleep)
        self.assertEqual(score, 77)
        self.assertEqual(len(generator.prompts), 3)

    async def test_pii_is_redacted_before_the_call(self):
        generator = _SectionGenerator({})
        await judge_content_quality(_resume(), JD_TEXT, generator, sleep=_no_sleep)
        joined = "\n".join(generator.prompts)
        self.assertNotIn("jane@example.com", joined)
        self.assertNotIn("hiring@corp.com", joined)
        self.assertIn("[EMAIL_1]", joined)

    async def test_partial_failure_uses_remaining_sections(self):
        generator = _SectionGenerator({
            "summary": "garbage",
            "skills": '{"relevance": 60, "clarity": 60, "impact": 60}',
            "experience": '{"relevance": 80, "clarity": 80, "impact": 80}',
        })
        score = await judge_content_quality(_resume(), JD_TEXT, generator, sleep=_no_sleep)
        self.assertEqual(score, 70)

    async def test_all_sections_failing_raises(self):
        boom = ValueError("something odd")
        generator = _SectionGenerator({"summary": boom, "skills": boom, "experience": boom})
        with self.assertRaises(AIInvocationError) as ctx:
            await judge_content_quality(_resume(), JD_TEXT, generator, sleep=_no_sleep)
        self.assertEqual(ctx.exception.type, "unknown")

    async def test_no_content_returns_zero(self):
        generator = _SectionGenerator({})
        score = await judge_content_quality(ParsedResume(raw_text="x"), JD_TEXT, generator)
        self.assertEqual(score, 0)
        self.assertEqual(generator.prompts, [])

    async def test_section_timeout_is_classified(self):
        with self.assertRaises(AIInvocationError) as ctx:
            await judge_content_quality(_resume(), JD_TEXT, _SlowGenerator(), timeout_s=0.01)
        self.assertEqual(ctx.exception.type, "timeout")


if __name__ == "__main__":
    unittest.main()
