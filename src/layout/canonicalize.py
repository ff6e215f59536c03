from __future__ import annotations

from typing import Sequence

from contracts.alignment import AnchorRule
from lexing.profiles import LanguageProfile, get_profile
from lexing.scanner import ScanState, lex_line

_WS = " \t"


def _split_ws(gap: str) -> tuple[str, str, str]:
    """Split `gap` into (leading whitespace, core, trailing whitespace)."""
    core = gap.strip(_WS)
    if core == "":
        return gap, "", ""
    lead = gap[: len(gap) - len(gap.lstrip(_WS))]
    trail = gap[len(gap.rstrip(_WS)) :]
    return lead, core, trail


def canonicalize_line(
    line: str,
    rules: Sequence[AnchorRule],
    profile: LanguageProfile,
    state: ScanState | None = None,
) -> tuple[str, ScanState]:
    """
    Rewrite the whitespace around every anchor occurrence on one line.

    Before an anchor: exactly `space_before`, except that indentation in
    front of an anchor opening the line is kept. After an anchor: exactly
    `space_after`, or nothing when the anchor ends the line. Text inside
    strings, regexes and comments is never looked at, so it is copied
    verbatim. Returns the new line and the scan state for the next line.
    """

    rule_by_kind = {r.kind: r for r in rules}
    tokens, next_state = lex_line(line, 0, profile, state)
    anchors = [t for t in tokens if t.kind in rule_by_kind]
    if not anchors:
        return line, next_state

    out: list[str] = []
    cursor = 0
    prev: AnchorRule | None = None
    for t in anchors:
        rule = rule_by_kind[t.kind]
        gap = line[cursor : t.column]
        lead, core, trail = _split_ws(gap)

        if prev is None:
            if core == "" and cursor == 0:
                out.append(gap)  # indentation
            else:
                out.append(lead + core + rule.space_before)
        elif core == "":
            joined = prev.space_after + rule.space_before
            # Two anchors must never fuse into one operator.
            out.append(joined if joined or not gap else " ")
        else:
            out.append(prev.space_after + core + rule.space_before)

        out.append(t.text)
        cursor = t.end_column
        prev = rule

    tail = line[cursor:]
    rest = tail.lstrip(_WS)
    if rest:
        out.append(prev.space_after + rest)

    return "".join(out), next_state


def canonicalize(
    line: str, rules: Sequence[AnchorRule], *, language: str, state: ScanState | None = None
) -> str:
    profile = get_profile(language)
    if profile is None:
        return line
    new_line, _ = canonicalize_line(line, rules, profile, state)
    return new_line


def canonicalize_lines(lines: Sequence[str], rules: Sequence[AnchorRule], language: str) -> list[str]:
    """
    Canonicalize a whole document, carrying open multi-line literals and
    brackets from line to line. Unknown languages come back unchanged.
    """

    profile = get_profile(language)
    if profile is None or not rules:
        return list(lines)

    out: list[str] = []
    state = ScanState()
    for line in lines:
        new_line, state = canonicalize_line(line, rules, profile, state)
        out.append(new_line)
    return out
