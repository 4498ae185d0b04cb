"""Pygments highlighting per line."""

from __future__ import annotations

import unittest

from twinpane.render.ansi import ANSI_ESCAPE_RE
from twinpane.render.highlight import highlight_lines, sanitize_terminal_text


class HighlightLinesTests(unittest.TestCase):
    def test_output_has_one_entry_per_input_line(self) -> None:
        lines = ["", "def f():", '    """doc', '    string"""', "    return 1"]

        rendered = highlight_lines(lines, "module.py")

        self.assertEqual(len(rendered), len(lines))
        self.assertTrue(any("\x1b[" in line for line in rendered))
        self.assertEqual([ANSI_ESCAPE_RE.sub("", line) for line in rendered], lines)

    def test_unknown_extension_uses_plain_text_lexer(self) -> None:
        rendered = highlight_lines(["just words"], "notes.unknown-ext")
        self.assertEqual([ANSI_ESCAPE_RE.sub("", line) for line in rendered], ["just words"])

    def test_unknown_style_falls_back_to_default(self) -> None:
        with self.assertLogs("twinpane.render.highlight", level="WARNING"):
            rendered = highlight_lines(["x = 1"], "a.py", style="no-such-style-anywhere")
        self.assertEqual(ANSI_ESCAPE_RE.sub("", rendered[0]), "x = 1")

    def test_empty_input(self) -> None:
        self.assertEqual(highlight_lines([], "a.py"), [])

    def test_control_bytes_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x07b\x1bc"), "a\\x07b\\x1bc")
        self.assertEqual(sanitize_terminal_text("tab\tok"), "tab\tok")


if __name__ == "__main__":
    unittest.main()
