from __future__ import annotations

import unittest

from terrax.ansi import clip_ansi_line, display_width, pad_to_width, strip_ansi, truncate_text


class AnsiHelperTests(unittest.TestCase):
    def test_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[1mplan\033[0m"), 4)
        self.assertEqual(display_width("vpc 📦"), 6)

    def test_clip_preserves_escape_sequences(self) -> None:
        clipped = clip_ansi_line("\033[31mabcdef\033[0m", 3)
        self.assertEqual(strip_ansi(clipped), "abc")
        self.assertTrue(clipped.startswith("\033[31m"))
        self.assertTrue(clipped.endswith("\033[0m"))

    def test_variation_selector_has_no_width(self) -> None:
        self.assertEqual(display_width("\u2714\ufe0f"), 1)

    def test_clip_does_not_split_wide_chars(self) -> None:
        self.assertEqual(clip_ansi_line("ab📦", 3), "ab")

    def test_truncate_adds_ellipsis_only_when_cut(self) -> None:
        self.assertEqual(truncate_text("staging", 10), "staging")
        self.assertEqual(truncate_text("production", 5), "prod…")
        self.assertEqual(truncate_text("x", 0), "")

    def test_pad_to_width(self) -> None:
        self.assertEqual(pad_to_width("ab", 4), "ab  ")
        self.assertEqual(pad_to_width("abcdef", 4), "abcdef")


if __name__ == "__main__":
    unittest.main()
