import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumefit.services.text_diff import DiffChunk, count_changes, diff_texts  # noqa: E402


def _pairs(chunks):
    return [(chunk.type, chunk.value) for chunk in chunks]


class DiffTextsTests(unittest.TestCase):
    def test_word_replacement(self):
        self.assertEqual(
            _pairs(diff_texts("Led the team", "Led a team")),
            [("equal", "Led "), ("delete", "the"), ("insert", "a"), ("equal", " team")],
        )

    def test_identical(self):
        self.assertEqual(_pairs(diff_texts("Same text", "Same text")), [("equal", "Same text")])

    def test_empty_sides(self):
        self.assertEqual(_pairs(diff_texts("", "New text")), [("insert", "New text")])
        self.assertEqual(_pairs(diff_texts("Old text", "")), [("delete", "Old text")])
        self.assertEqual(diff_texts("", ""), [])

    def test_whitespace_is_normalized(self):
        self.assertEqual(_pairs(diff_texts("  Hello   world  ", "Hello world")), [("equal", "Hello world")])

    def test_case_sensitive(self):
        chunks = diff_texts("hello world", "Hello World")
        self.assertTrue(any(chunk.type != "equal" for chunk in chunks))

    def test_concatenating_sides_restores_texts(self):
        original = "Led team to deliver project under budget"
        suggested = "Led cross-functional team of 8 to deliver $2M project 15% under budget"
        chunks = diff_texts(original, suggested)
        self.assertEqual("".join(c.value for c in chunks if c.type != "insert"), original)
        self.assertEqual("".join(c.value for c in chunks if c.type != "delete"), suggested)
        self.assertTrue(any(c.type == "insert" for c in chunks))


class CountChangesTests(unittest.TestCase):
    def test_counts_words(self):
        chunks = [
            DiffChunk(type="equal", value="Hello "),
            DiffChunk(type="insert", value="beautiful amazing "),
            DiffChunk(type="delete", value="old "),
            DiffChunk(type="equal", value="world"),
        ]
        stats = count_changes(chunks)
        self.assertEqual(stats.insertions, 2)
        self.assertEqual(stats.deletions, 1)
        self.assertEqual(stats.total_changes, 3)

    def test_no_changes(self):
        stats = count_changes(diff_texts("same", "same"))
        self.assertEqual(stats.total_changes, 0)


if __name__ == "__main__":
    unittest.main()
