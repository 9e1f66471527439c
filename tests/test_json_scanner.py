"""
Tests for json_scanner — line classification and sibling detection.

Run: python -m pytest tests/test_json_scanner.py -v
  or: python -m unittest tests.test_json_scanner -v
"""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

_SCRIPT_DIR = Path(__file__).resolve().parent
_SRC_DIR = _SCRIPT_DIR.parent / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from json_scanner import (
    LineRole,
    classify_line,
    ends_in_open_string,
    ends_with_value,
    indent_of,
    is_scalar_token,
    is_sibling,
    line_depth_delta,
    mask_strings,
    next_significant,
    string_spans,
)


class TestStringMasking(unittest.TestCase):

    def test_mask_keeps_quotes_and_length(self):
        text = '{"a": "x,y"}'
        masked = mask_strings(text)
        self.assertEqual(masked, '{"#": "###"}')
        self.assertEqual(len(masked), len(text))

    def test_escaped_quote_stays_inside_string(self):
        self.assertEqual(mask_strings(r'"a\"b"'), '"####"')

    def test_structure_inside_string_is_hidden(self):
        self.assertEqual(mask_strings('"{[,:]}"'), '"######"')

    def test_unterminated_string_masked_to_end(self):
        self.assertEqual(mask_strings('{"a": "xy'), '{"#": "##')

    def test_newline_ends_string(self):
        spans, open_at_end = string_spans('"abc\n}')
        self.assertEqual(spans, [(0, 4, False)])
        self.assertFalse(open_at_end)

    def test_ends_in_open_string(self):
        self.assertTrue(ends_in_open_string('{"a": "x'))
        self.assertFalse(ends_in_open_string('{"a": "x"}'))
        self.assertFalse(ends_in_open_string('"abc\n}'))


class TestLineGeometry(unittest.TestCase):

    def test_indent_of(self):
        self.assertEqual(indent_of("    x"), 4)
        self.assertEqual(indent_of("x"), 0)
        self.assertEqual(indent_of("\t\"a\": 1"), 1)

    def test_line_depth_delta(self):
        self.assertEqual(line_depth_delta('{"a": ['), 2)
        self.assertEqual(line_depth_delta("  ]},"), -2)
        self.assertEqual(line_depth_delta('"{["'), 0)

    def test_next_significant_skips_blank_lines(self):
        self.assertEqual(next_significant(["a", "", "   ", "b"], 0), 3)
        self.assertIsNone(next_significant(["a", "  "], 0))
        self.assertIsNone(next_significant(["a"], 0))


class TestClassifyLine(unittest.TestCase):

    def test_property(self):
        self.assertEqual(classify_line('  "name": "x",'), LineRole.PROPERTY)
        self.assertEqual(classify_line("  name: 1"), LineRole.PROPERTY)

    def test_closer(self):
        self.assertEqual(classify_line("  },"), LineRole.CLOSER)
        self.assertEqual(classify_line("]"), LineRole.CLOSER)
        self.assertEqual(classify_line('  } "next": 1'), LineRole.CLOSER)

    def test_opener(self):
        self.assertEqual(classify_line('  "deps": {'), LineRole.OPENER)
        self.assertEqual(classify_line("["), LineRole.OPENER)
        self.assertEqual(classify_line("  {"), LineRole.OPENER)

    def test_element(self):
        self.assertEqual(classify_line('  "dist",'), LineRole.ELEMENT)
        self.assertEqual(classify_line("  42"), LineRole.ELEMENT)
        self.assertEqual(classify_line("  -1.5e3"), LineRole.ELEMENT)
        self.assertEqual(classify_line("true"), LineRole.ELEMENT)
        self.assertEqual(classify_line("null,"), LineRole.ELEMENT)
        self.assertEqual(classify_line("  [1, 2]"), LineRole.ELEMENT)

    def test_colon_inside_string_is_not_a_property(self):
        self.assertEqual(classify_line('  "a:b"'), LineRole.ELEMENT)

    def test_empty_and_other(self):
        self.assertEqual(classify_line("   "), LineRole.EMPTY)
        self.assertEqual(classify_line("hello world"), LineRole.OTHER)


class TestEndsWithValue(unittest.TestCase):

    def test_values(self):
        for line in ['"a": "x"', '"a": 1', '"a": -2.5', '"a": true', '"a": null', "  }", "]"]:
            with self.subTest(line=line):
                self.assertTrue(ends_with_value(line))

    def test_non_values(self):
        for line in ['"a": {', '"a":', '"a": "x",', "hello", '"a": "abc', ""]:
            with self.subTest(line=line):
                self.assertFalse(ends_with_value(line))

    def test_scalar_tokens(self):
        self.assertTrue(is_scalar_token("12"))
        self.assertTrue(is_scalar_token("false"))
        self.assertFalse(is_scalar_token("1.0.0"))
        self.assertFalse(is_scalar_token("undefined"))


class TestIsSibling(unittest.TestCase):

    def test_same_indent_property(self):
        self.assertTrue(is_sibling('  "a": 1', '  "b": 2'))

    def test_shallower_next_line(self):
        self.assertTrue(is_sibling('    }', '  "x": 1'))

    def test_deeper_next_line_is_not_sibling(self):
        self.assertFalse(is_sibling('  "a": 1', '    "b": 2'))

    def test_nested_child_after_closer_is_not_sibling(self):
        self.assertFalse(is_sibling("  }", '      "x": 1'))

    def test_line_leaving_container_open_accepts_deeper_line(self):
        self.assertTrue(is_sibling('{"name": "x"', '  "version": "1.0.0"'))

    def test_closer_is_never_a_sibling(self):
        self.assertFalse(is_sibling('  "a": 1', "  }"))
        self.assertFalse(is_sibling('  "a": 1', "]"))

    def test_opener_and_element_are_siblings(self):
        self.assertTrue(is_sibling("  }", "  {"))
        self.assertTrue(is_sibling('    "a"', '    "b"'))


if __name__ == "__main__":
    unittest.main()
