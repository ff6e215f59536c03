from __future__ import annotations

import logging
from typing import Iterable, Sequence

from contracts.alignment import AlignmentGroup, LayoutMode, PaddingInstruction

logger = logging.getLogger(__name__)

PREVIEW_FILLER = "·"


def build_padding_instructions(groups: Iterable[AlignmentGroup]) -> list[PaddingInstruction]:
    """
    Flatten groups into one instruction per padded token.

    Two groups may ask for padding at the same (line, column); the larger
    request wins. Sums would over-pad.
    """

    best: dict[tuple[int, int], int] = {}
    for g in groups:
        for t in g.tokens:
            pad = g.padding_for(t)
            if pad <= 0:
                continue
            key = (t.line, g.insert_column(t))
            if pad > best.get(key, 0):
                best[key] = pad
    return [PaddingInstruction(line=ln, insert_column=col, space_count=n) for (ln, col), n in sorted(best.items())]


def _is_applicable(lines: Sequence[str], ins: PaddingInstruction) -> bool:
    # At exactly the line end the padding would only be trailing whitespace.
    return 0 <= ins.line < len(lines) and ins.insert_column < len(lines[ins.line])


def _insert(
    lines: Sequence[str], instructions: Iterable[PaddingInstruction], fill: str
) -> tuple[list[str], list[PaddingInstruction]]:
    out = list(lines)
    skipped: list[PaddingInstruction] = []

    by_line: dict[int, list[PaddingInstruction]] = {}
    for ins in instructions:
        if ins.space_count <= 0:
            continue
        if not _is_applicable(lines, ins):
            skipped.append(ins)
            continue
        by_line.setdefault(ins.line, []).append(ins)

    for line_no, items in by_line.items():
        text = out[line_no]
        # Right to left, so earlier insert columns stay valid.
        for ins in sorted(items, key=lambda i: i.insert_column, reverse=True):
            text = text[: ins.insert_column] + fill * ins.space_count + text[ins.insert_column :]
        out[line_no] = text

    return out, sorted(skipped)


def write_padding(
    lines: Sequence[str], instructions: Iterable[PaddingInstruction]
) -> tuple[list[str], list[PaddingInstruction]]:
    """
    Insert padding into a copy of `lines`.

    Instructions pointing past the end of their line, or at a line that no
    longer exists, are stale and skipped rather than raised; so are
    instructions at exactly the line end. Returns the new lines and the
    skipped instructions.
    """

    out, skipped = _insert(lines, instructions, " ")
    if skipped:
        logger.debug("skipped %d stale padding instruction(s): %s", len(skipped), skipped)
    return out, skipped


def filter_stale(
    lines: Sequence[str], instructions: Iterable[PaddingInstruction]
) -> tuple[list[PaddingInstruction], list[PaddingInstruction]]:
    """Split instructions into (applicable, stale) against the current lines."""
    keep: list[PaddingInstruction] = []
    stale: list[PaddingInstruction] = []
    for ins in instructions:
        (keep if _is_applicable(lines, ins) else stale).append(ins)
    if stale:
        logger.debug("dropped %d stale preview instruction(s)", len(stale))
    return keep, stale


def apply_layout(
    lines: Sequence[str], groups: Sequence[AlignmentGroup], mode: LayoutMode
) -> list[PaddingInstruction] | list[str]:
    """
    Preview: return the padding instructions; `lines` is not touched.
    Write: return new lines with the padding inserted.
    """

    instructions = build_padding_instructions(groups)
    if mode == LayoutMode.PREVIEW:
        keep, _ = filter_stale(lines, instructions)
        return keep
    if mode == LayoutMode.WRITE:
        new_lines, _ = write_padding(lines, instructions)
        return new_lines
    raise ValueError(f"Unsupported layout mode: {mode}")


def render_preview(
    lines: Sequence[str], instructions: Iterable[PaddingInstruction], filler: str = PREVIEW_FILLER
) -> list[str]:
    """
    Paint preview padding into a copy of the lines as visible filler
    characters, the way an editor decoration shows it.
    """

    if len(filler) != 1:
        raise ValueError("filler must be a single character")
    out, _ = _insert(lines, instructions, filler)
    return out
