from __future__ import annotations

import unittest

from contracts.alignment import AlignmentGroup, LayoutMode, PaddingInstruction
from contracts.tokens import Token
from layout.apply import apply_layout, build_padding_instructions, render_preview, write_padding

SCENARIO_A = ['name: "app"', 'version: "1.0"', "debug: true"]


def _colon(line: int, column: int) -> Token:
    return Token(line=line, column=column, text=":", kind="colon")


def _scenario_a_group() -> AlignmentGroup:
    return AlignmentGroup(
        kind="colon",
        ordinal=0,
        tokens=(_colon(0, 4), _colon(1, 7), _colon(2, 5)),
        target_column=8,
        pad_after=True,
    )


class TestPaddingInstructions(unittest.TestCase):
    def test_one_instruction_per_padded_token(self) -> None:
        self.assertEqual(
            build_padding_instructions([_scenario_a_group()]),
            [PaddingInstruction(0, 5, 3), PaddingInstruction(2, 6, 2)],
        )

    def test_collapse_keeps_max_not_sum(self) -> None:
        t = _colon(0, 5)
        g1 = AlignmentGroup(kind="colon", ordinal=0, tokens=(t,), target_column=10, pad_after=True)
        g2 = AlignmentGroup(kind="colon", ordinal=1, tokens=(t,), target_column=8, pad_after=True)
        self.assertEqual(build_padding_instructions([g1, g2]), [PaddingInstruction(0, 6, 4)])
        self.assertEqual(build_padding_instructions([g2, g1]), [PaddingInstruction(0, 6, 4)])

    def test_padding_before_operator(self) -> None:
        g = AlignmentGroup(
            kind="logical",
            ordinal=0,
            tokens=(
                Token(line=0, column=8, text="&&", kind="logical"),
                Token(line=1, column=10, text="&&", kind="logical"),
            ),
            target_column=10,
            pad_after=False,
        )
        self.assertEqual(build_padding_instructions([g]), [PaddingInstruction(0, 8, 2)])


class TestWritePadding(unittest.TestCase):
    def test_inserts_right_to_left(self) -> None:
        lines, skipped = write_padding(["a:b:c"], [PaddingInstruction(0, 2, 2), PaddingInstruction(0, 4, 1)])
        self.assertEqual(lines, ["a:  b: c"])
        self.assertEqual(skipped, [])

    def test_stale_instructions_are_skipped(self) -> None:
        stale = [PaddingInstruction(0, 5, 1), PaddingInstruction(3, 0, 1), PaddingInstruction(0, 2, 1)]
        lines, skipped = write_padding(["ab"], stale)
        self.assertEqual(lines, ["ab"])
        self.assertEqual(skipped, sorted(stale))

    def test_preview_never_touches_lines(self) -> None:
        lines = list(SCENARIO_A)
        out = apply_layout(lines, [_scenario_a_group()], LayoutMode.PREVIEW)
        self.assertEqual(lines, SCENARIO_A)
        self.assertEqual(out, [PaddingInstruction(0, 5, 3), PaddingInstruction(2, 6, 2)])

    def test_write_mode_returns_padded_lines(self) -> None:
        out = apply_layout(SCENARIO_A, [_scenario_a_group()], LayoutMode.WRITE)
        self.assertEqual(out, ['name:    "app"', 'version: "1.0"', "debug:   true"])

    def test_render_preview(self) -> None:
        painted = render_preview(SCENARIO_A, build_padding_instructions([_scenario_a_group()]))
        self.assertEqual(painted, ['name:··· "app"', 'version: "1.0"', "debug:·· true"])
        with self.assertRaises(ValueError):
            render_preview(SCENARIO_A, [], filler="ab")


if __name__ == "__main__":
    unittest.main()
