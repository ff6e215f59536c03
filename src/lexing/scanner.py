from __future__ import annotations

from dataclasses import dataclass

from contracts.tokens import Token, TokenKind

from .profiles import LanguageProfile

_OPEN = {"(": ")", "[": "]", "{": "}"}
_CLOSE = {")": "(", "]": "[", "}": "{"}


@dataclass(frozen=True, slots=True)
class ScanState:
    """
    Lexical state carried from the end of one line to the start of the next.

    `ternaries` holds the count of unmatched `?` per bracket level, so it is
    always one longer than `brackets`.
    """

    brackets: tuple[str, ...] = ()
    ternaries: tuple[int, ...] = (0,)
    literal_close: str | None = None  # closing delimiter of an open multi-line literal
    literal_escapes: bool = False  # whether backslash escapes apply inside that literal


def leading_indent(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _match_any(line: str, i: int, candidates: tuple[str, ...]) -> str | None:
    for c in candidates:
        if c and line.startswith(c, i):
            return c
    return None


def _find_closing(line: str, start: int, close: str, *, escapes: bool) -> int:
    """Return the index just past `close`, or -1 if the line ends first."""
    j = start
    n = len(line)
    while j < n:
        if escapes and line[j] == "\\":
            j += 2
            continue
        if line.startswith(close, j):
            return j + len(close)
        j += 1
    return -1


def _find_regex_end(line: str, start: int) -> int:
    j = start
    n = len(line)
    in_class = False
    while j < n:
        ch = line[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            j += 1
            while j < n and line[j].isalpha():
                j += 1
            return j
        j += 1
    return -1


def _at_scalar_start(line: str, i: int) -> bool:
    before = line[:i].rstrip(" \t")
    return before == "" or before[-1] in ":-,[{?"


def _rest_is_blank(rest: str, profile: LanguageProfile) -> bool:
    stripped = rest.lstrip(" \t")
    if stripped == "":
        return True
    return _match_any(stripped, 0, profile.line_comments) is not None


def _classify(
    op: str,
    line: str,
    i: int,
    profile: LanguageProfile,
    brackets: list[str],
    ternaries: list[int],
) -> str:
    context = brackets[-1] if brackets else ""

    if op == ":":
        if profile.ternary and ternaries[-1] > 0:
            ternaries[-1] -= 1
            return TokenKind.TERNARY.value
        rest = line[i + 1 :]
        if _rest_is_blank(rest, profile):
            return TokenKind.OTHER_COLON.value
        if context not in profile.colon_contexts:
            return TokenKind.OTHER_COLON.value
        if profile.colon_requires_space and rest[:1] not in (" ", "\t"):
            return TokenKind.OTHER_COLON.value
        if profile.colon_skips_selectors and "{" in rest:
            # `a:hover {` is a selector, not a declaration
            return TokenKind.OTHER_COLON.value
        return TokenKind.COLON.value

    if op == "?" and profile.ternary:
        if line[i + 1 : i + 2] == ":":
            # optional member marker (`name?: string`)
            return TokenKind.OPERATOR.value
        ternaries[-1] += 1
        return TokenKind.TERNARY.value

    if op in profile.assignment_ops:
        if profile.assignment_top_level_only and brackets:
            return TokenKind.KEYWORD_ARGUMENT.value
        return TokenKind.ASSIGNMENT.value
    if op in profile.logical_ops:
        return TokenKind.LOGICAL.value
    if op in profile.arrow_ops:
        return TokenKind.ARROW.value
    if op == ",":
        return TokenKind.COMMA.value
    return TokenKind.OPERATOR.value


def lex_line(
    line: str,
    line_no: int,
    profile: LanguageProfile,
    state: ScanState | None = None,
) -> tuple[list[Token], ScanState]:
    """
    Classify the operator tokens of one line.

    Strings, regexes and comments are skipped entirely, so no token is ever
    emitted from inside a literal. Brackets update nesting but are not
    emitted. Returns the tokens (sorted by column) and the state to feed into
    the next line.
    """

    st = state or ScanState()
    brackets = list(st.brackets)
    ternaries = list(st.ternaries) or [0]
    while len(ternaries) < len(brackets) + 1:
        ternaries.append(0)

    indent = leading_indent(line)
    tokens: list[Token] = []
    n = len(line)
    i = 0
    regex_ok = True

    def _state(literal_close: str | None = None, literal_escapes: bool = False) -> ScanState:
        return ScanState(
            brackets=tuple(brackets),
            ternaries=tuple(ternaries),
            literal_close=literal_close,
            literal_escapes=literal_escapes,
        )

    if st.literal_close is not None:
        j = _find_closing(line, 0, st.literal_close, escapes=st.literal_escapes)
        if j < 0:
            return tokens, _state(st.literal_close, st.literal_escapes)
        i = j
        regex_ok = False

    while i < n:
        ch = line[i]

        if ch in " \t":
            i += 1
            continue

        if profile.block_comment and line.startswith(profile.block_comment[0], i):
            opener, closer = profile.block_comment
            j = _find_closing(line, i + len(opener), closer, escapes=False)
            if j < 0:
                return tokens, _state(closer, False)
            i = j
            continue

        if _match_any(line, i, profile.line_comments) is not None:
            if not profile.comment_requires_boundary or i == 0 or line[i - 1] in " \t":
                break

        mq = _match_any(line, i, profile.multiline_quotes)
        if mq is not None:
            j = _find_closing(line, i + len(mq), mq, escapes=True)
            if j < 0:
                return tokens, _state(mq, True)
            i = j
            regex_ok = False
            continue

        if ch in profile.quotes and (not profile.quote_requires_boundary or _at_scalar_start(line, i)):
            j = _find_closing(line, i + 1, ch, escapes=True)
            # an unterminated single-line string swallows the rest of the line
            i = n if j < 0 else j
            regex_ok = False
            continue

        if profile.regex_literals and ch == "/" and regex_ok and not line.startswith("/=", i):
            j = _find_regex_end(line, i + 1)
            if j > 0:
                i = j
                regex_ok = False
                continue

        if ch.isalnum() or ch in profile.word_extra_chars:
            j = i + 1
            while j < n and (line[j].isalnum() or line[j] in profile.word_extra_chars):
                j += 1
            word = line[i:j]
            if word in profile.logical_keywords:
                tokens.append(
                    Token(
                        line=line_no,
                        column=i,
                        text=word,
                        kind=TokenKind.LOGICAL.value,
                        depth=len(brackets),
                        indent=indent,
                    )
                )
                regex_ok = True
            else:
                regex_ok = word in profile.regex_keywords
            i = j
            continue

        if ch in _OPEN:
            brackets.append(ch)
            ternaries.append(0)
            regex_ok = True
            i += 1
            continue

        if ch in _CLOSE:
            # unbalanced closers are ignored rather than corrupting the stack
            if brackets and brackets[-1] == _CLOSE[ch]:
                brackets.pop()
                ternaries.pop()
            regex_ok = False
            i += 1
            continue

        op = _match_any(line, i, profile.operators)
        if op is None:
            regex_ok = False
            i += 1
            continue

        kind = _classify(op, line, i, profile, brackets, ternaries)
        tokens.append(
            Token(line=line_no, column=i, text=op, kind=kind, depth=len(brackets), indent=indent)
        )
        regex_ok = op not in ("++", "--")
        i += len(op)

    return tokens, _state()


def lex_lines(
    lines: list[str], profile: LanguageProfile, *, start_line: int = 0, end_line: int | None = None
) -> list[Token]:
    """
    Lex `lines[start_line:end_line + 1]`.

    Scanning always starts at line 0 so that literals and brackets opened
    above the requested range are honoured.
    """

    if not lines:
        return []
    last = len(lines) - 1 if end_line is None else min(end_line, len(lines) - 1)
    state = ScanState()
    out: list[Token] = []
    for idx in range(0, last + 1):
        toks, state = lex_line(lines[idx], idx, profile, state)
        if idx >= start_line:
            out.extend(toks)
    return out
