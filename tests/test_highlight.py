"""Tests for diff sanitizing and Pygments diff coloring."""

from __future__ import annotations

import unittest

from lazyrepos.highlight import NO_DIFF_TEXT, diff_lines, sanitize_terminal_text

SAMPLE_DIFF = "--- a/x.py\n+++ b/x.py\n@@ -1 +1 @@\n-old\n+new\n"


class DiffLinesTests(unittest.TestCase):
    def test_empty_diff_uses_placeholder(self) -> None:
        self.assertEqual(diff_lines("", colorize=False), [NO_DIFF_TEXT])
        self.assertEqual(diff_lines("\n  \n", colorize=True), [NO_DIFF_TEXT])

    def test_plain_lines_are_split_without_trailing_blank(self) -> None:
        self.assertEqual(
            diff_lines(SAMPLE_DIFF, colorize=False),
            ["--- a/x.py", "+++ b/x.py", "@@ -1 +1 @@", "-old", "+new"],
        )

    def test_colorized_lines_carry_escapes(self) -> None:
        lines = diff_lines(SAMPLE_DIFF, colorize=True)

        self.assertEqual(len(lines), 5)
        self.assertTrue(any("\x1b[" in line for line in lines))

    def test_control_bytes_are_neutralized(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x07b\tc"), "a\\x07b\tc")
        self.assertEqual(diff_lines("+bell\x07\n", colorize=False), ["+bell\\x07"])


if __name__ == "__main__":
    unittest.main()
