from __future__ import annotations

import unittest
from unittest.mock import patch

from contracts.alignment import PaddingInstruction
from layout.module import format_lines, format_text, preview_lines

ALIGNED_A = ['name:    "app"', 'version: "1.0"', "debug:   true"]


class _BoomProducer:
    def engine_id(self) -> str:
        return "boom"

    def parse(self, *, lines, language, start_line, end_line):
        raise RuntimeError("parser crashed")


class TestFormatPipeline(unittest.TestCase):
    def test_format_canonicalizes_then_aligns(self) -> None:
        result = format_lines(['name:   "app"', 'version: "1.0"', "debug:       true"], language="yaml")
        self.assertTrue(result.ok)
        self.assertTrue(result.changed)
        self.assertEqual(result.lines, ALIGNED_A)
        self.assertEqual(result.meta["counts"]["groups"], 1)

    def test_format_of_aligned_output_is_identity(self) -> None:
        result = format_lines(ALIGNED_A, language="yaml")
        self.assertTrue(result.ok)
        self.assertFalse(result.changed)
        self.assertEqual(result.lines, ALIGNED_A)

    def test_logical_operators(self) -> None:
        result = format_lines(['isError && "x"', 'isWarning && "y"'], language="javascript")
        self.assertEqual(result.lines, ['isError   && "x"', 'isWarning && "y"'])

    def test_json_document_is_idempotent(self) -> None:
        src = ["{", '  "name":"app",', '  "version"  :   "1.0",', '  "debug": true', "}"]
        expected = ["{", '  "name":    "app",', '  "version": "1.0",', '  "debug":   true', "}"]

        first = format_lines(src, language="json")
        self.assertEqual(first.lines, expected)

        second = format_lines(first.lines, language="json")
        self.assertFalse(second.changed)
        self.assertEqual(second.lines, expected)

    def test_python_dict_values_align(self) -> None:
        src = ["config = {", '    "a": 1,', '    "long_key": 2,', "}"]
        result = format_lines(src, language="py")
        self.assertEqual(result.lines, ["config = {", '    "a":' + " " * 8 + "1,", '    "long_key": 2,', "}"])

    def test_multiline_string_contents_are_preserved(self) -> None:
        src = ['s = """', "a   =   b", '"""', "x   =   1"]
        result = format_lines(src, language="python")
        self.assertEqual(result.lines, ['s = """', "a   =   b", '"""', "x = 1"])

    def test_format_text_keeps_crlf_and_final_newline(self) -> None:
        text, result = format_text("a:   1\r\nbb: 2\r\n", language="yaml")
        self.assertTrue(result.changed)
        self.assertEqual(text, "a:  1\r\nbb: 2\r\n")

        same, result = format_text("a:  1\nbb: 2\n", language="yaml")
        self.assertFalse(result.changed)
        self.assertEqual(same, "a:  1\nbb: 2\n")

    def test_unsupported_language_is_a_noop(self) -> None:
        result = format_lines(["a  :  b"], language="markdown")
        self.assertTrue(result.ok)
        self.assertFalse(result.changed)
        self.assertEqual(result.lines, ["a  :  b"])
        self.assertEqual(result.meta["warnings"][0]["code"], "GROUP_UNSUPPORTED_LANGUAGE")

    def test_producer_failure_leaves_lines_untouched(self) -> None:
        src = ["a:   1", "bb: 2"]
        with patch("lexing.module.get_engine", return_value=_BoomProducer()):
            result = format_lines(src, language="yaml")
        self.assertFalse(result.ok)
        self.assertFalse(result.changed)
        self.assertEqual(result.lines, src)
        self.assertEqual([e.code for e in result.errors], ["LEX_FAILED"])

    def test_preview_does_not_modify_lines(self) -> None:
        lines = ['name: "app"', 'version: "1.0"', "debug: true"]
        before = list(lines)
        result = preview_lines(lines, language="yaml")
        self.assertEqual(lines, before)
        self.assertTrue(result.ok)
        self.assertEqual(result.instructions, [PaddingInstruction(0, 5, 3), PaddingInstruction(2, 6, 2)])

    def test_preview_of_blank_separated_lines_has_no_padding(self) -> None:
        result = preview_lines(["a: 1", "", "bbb: 2"], language="yaml")
        self.assertEqual(result.instructions, [])
        self.assertEqual(result.meta["counts"]["groups"], 2)


if __name__ == "__main__":
    unittest.main()
