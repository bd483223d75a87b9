import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumefit.ai.pii import contains_pii, redact_pii, restore_pii  # noqa: E402


class PIIRedactionTests(unittest.TestCase):
    SAMPLE = (
        "Jane Doe\n"
        "jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe\n"
        "1234 Maple Street, Springfield, IL 62704\n"
        "Senior Engineer at Acme Corp. Built Python services for 500 users.\n"
        "Backup contact: jdoe@work.io, +1 555-987-6543"
    )

    def test_emails_and_phones_are_tokenized_in_order(self):
        result = redact_pii(self.SAMPLE)
        self.assertIn("[EMAIL_1]", result.redacted_text)
        self.assertIn("[EMAIL_2]", result.redacted_text)
        self.assertIn("[PHONE_1]", result.redacted_text)
        self.assertIn("[PHONE_2]", result.redacted_text)
        self.assertNotIn("jane.doe@example.com", result.redacted_text)
        self.assertNotIn("123-4567", result.redacted_text)
        self.assertEqual(result.mapping["[EMAIL_1]"], "jane.doe@example.com")
        self.assertEqual(result.mapping["[EMAIL_2]"], "jdoe@work.io")

    def test_profile_and_address_are_tokenized(self):
        result = redact_pii(self.SAMPLE)
        self.assertIn("[PROFILE_1]", result.redacted_text)
        self.assertIn("[ADDRESS_1]", result.redacted_text)
        self.assertNotIn("linkedin.com/in/janedoe", result.redacted_text)
        self.assertNotIn("Maple Street", result.redacted_text)
        self.assertEqual(result.stats.total, 6)

    def test_ordinary_resume_prose_is_untouched(self):
        prose = (
            "Led a team of 3 junior engineers at Globex Inc.\n"
            "Migrated 500 users in one place to Kubernetes, cutting costs 40%.\n"
            "Organized the 2023 Holiday Toy Drive, raising $5K for local families\n"
            "Skills: Python, SQL, React, Machine Learning"
        )
        result = redact_pii(prose)
        self.assertEqual(result.redacted_text, prose)
        self.assertEqual(result.mapping, {})
        self.assertFalse(contains_pii(prose))

    def test_bare_ten_digit_run_is_not_a_phone(self):
        text = "Employee ID 5551234567 since 2019"
        result = redact_pii(text)
        self.assertEqual(result.redacted_text, text)
        self.assertFalse(contains_pii(text))

    def test_round_trip_reproduces_original(self):
        result = redact_pii(self.SAMPLE)
        self.assertEqual(result.restore(result.redacted_text), self.SAMPLE)

    def test_restore_handles_repeated_tokens(self):
        result = redact_pii("Email me at a.b@example.com")
        generated = "Reach [EMAIL_1] today. Again: [EMAIL_1]."
        self.assertEqual(
            restore_pii(generated, result.mapping),
            "Reach a.b@example.com today. Again: a.b@example.com.",
        )

    def test_repeated_value_reuses_token(self):
        result = redact_pii("x@example.com and x@example.com")
        self.assertEqual(result.redacted_text, "[EMAIL_1] and [EMAIL_1]")
        self.assertEqual(len(result.mapping), 1)

    def test_unknown_tokens_are_left_alone(self):
        self.assertEqual(restore_pii("[EMAIL_9] stays", {"[EMAIL_1]": "a@b.co"}), "[EMAIL_9] stays")

    def test_empty_text(self):
        result = redact_pii("")
        self.assertEqual(result.redacted_text, "")
        self.assertEqual(result.mapping, {})


if __name__ == "__main__":
    unittest.main()
