import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "surface"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "toolkit"))

from glyphgrid_toolkit.text import TextMetrics, measure, wrap


class WrapTests(unittest.TestCase):
    def test_wraps_on_word_boundaries(self):
        result = wrap("Hello world this is a long string", 10)
        self.assertEqual(result, TextMetrics(text="Hello\nworld this\nis a long\nstring", num_lines=4, max_width=10))

    def test_long_word_is_not_broken(self):
        result = wrap("abcdefgh ij", 4)
        self.assertEqual(result.text, "abcdefgh\nij")
        self.assertEqual(result.num_lines, 2)
        self.assertEqual(result.max_width, 8)

    def test_existing_breaks_are_kept(self):
        result = wrap("ab cd\nef", 20)
        self.assertEqual(result.text, "ab cd\nef")
        self.assertEqual(result.num_lines, 2)

    def test_trailing_newline_not_counted(self):
        result = wrap("ab\n", 5)
        self.assertEqual(result.text, "ab\n")
        self.assertEqual(result.num_lines, 1)

    def test_zero_width_only_measures(self):
        self.assertEqual(wrap("Hello\nWorld", 0), measure("Hello\nWorld"))


class MeasureTests(unittest.TestCase):
    def test_counts_lines_and_width(self):
        self.assertEqual(measure("Hello\nWorld!\nTest"), TextMetrics("Hello\nWorld!\nTest", 3, 6))
        self.assertEqual(measure("Single line"), TextMetrics("Single line", 1, 11))
        self.assertEqual(measure(""), TextMetrics("", 0, 0))


if __name__ == "__main__":
    unittest.main()
