from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from contracts.alignment import FormatResult, LayoutError, PreviewResult
from contracts.tokens import TokenStream
from grouping.anchors import DEFAULT_ANCHOR_TABLE, AnchorTable
from grouping.config import GroupingConfig
from grouping.group_tokens import group_token_stream
from lexing.contracts import LexConfig, LexEngineName
from lexing.module import run_lex_on_lines
from lexing.text import detect_newline, join_lines, split_lines

from .apply import build_padding_instructions, filter_stale, write_padding
from .canonicalize import canonicalize_lines


@dataclass(frozen=True, slots=True)
class FormatConfig:
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    engine: LexEngineName = LexEngineName.LEXICAL

    def validate(self) -> None:
        self.grouping.validate()


def _stream_errors(stream: TokenStream) -> list[LayoutError]:
    return [LayoutError(code=e.code, message=e.message, detail=e.detail) for e in (stream.errors or [])]


def _unsupported(table: AnchorTable, language: str) -> dict[str, Any]:
    return {
        "code": "GROUP_UNSUPPORTED_LANGUAGE",
        "message": "No anchor rules configured for language",
        "detail": {"language": table.resolve(language)},
    }


def _lex(
    lines: Sequence[str], *, language: str, cfg: FormatConfig, start_line: int = 0, end_line: int | None = None
) -> TokenStream:
    return run_lex_on_lines(
        config=LexConfig(language=language, engine=cfg.engine, start_line=start_line, end_line=end_line),
        lines=list(lines),
    )


def canonical_lines_for(
    lines: Sequence[str], *, language: str, table: AnchorTable = DEFAULT_ANCHOR_TABLE
) -> list[str]:
    """First half of the Write path: the lines with anchor whitespace canonicalized."""
    return canonicalize_lines(lines, table.rules_for(language), table.resolve(language))


def preview_from_stream(
    lines: Sequence[str],
    stream: TokenStream,
    *,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: FormatConfig | None = None,
) -> PreviewResult:
    """
    Group an already produced token stream of `lines` into preview padding.

    Instructions that no longer fit `lines` are dropped as stale.
    """

    cfg = config or FormatConfig()
    cfg.validate()

    grouping = group_token_stream(stream, table, cfg.grouping)
    instructions, stale = filter_stale(lines, build_padding_instructions(grouping.groups))
    errors = _stream_errors(stream)

    return PreviewResult(
        ok=not errors,
        language=grouping.language,
        instructions=instructions,
        groups=grouping.groups,
        errors=errors,
        meta={
            "warnings": list(grouping.meta.get("warnings") or []),
            "counts": {"groups": len(grouping.groups), "instructions": len(instructions), "stale": len(stale)},
        },
    )


def preview_lines(
    lines: Sequence[str],
    *,
    language: str,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: FormatConfig | None = None,
    start_line: int = 0,
    end_line: int | None = None,
) -> PreviewResult:
    """
    Compute preview padding for `lines` as they are (no canonicalization).

    The lines are never modified; callers paint the returned instructions.
    """

    cfg = config or FormatConfig()
    cfg.validate()

    if not table.supports(language) or not lines:
        warnings = [] if table.supports(language) else [_unsupported(table, language)]
        return PreviewResult(
            ok=True,
            language=table.resolve(language),
            instructions=[],
            groups=[],
            errors=[],
            meta={"warnings": warnings, "counts": {"groups": 0, "instructions": 0, "stale": 0}},
        )

    stream = _lex(lines, language=language, cfg=cfg, start_line=start_line, end_line=end_line)
    return preview_from_stream(lines, stream, table=table, config=cfg)


def format_from_stream(
    original: Sequence[str],
    canonical: Sequence[str],
    stream: TokenStream,
    *,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: FormatConfig | None = None,
) -> FormatResult:
    """
    Second half of the Write path: group the token stream of the canonical
    lines and insert the padding.

    If the producer failed, the original lines come back untouched with
    `ok=False`.
    """

    cfg = config or FormatConfig()
    cfg.validate()

    grouping = group_token_stream(stream, table, cfg.grouping)
    warnings = list(grouping.meta.get("warnings") or [])
    errors = _stream_errors(stream)
    if errors:
        return FormatResult(
            ok=False,
            language=grouping.language,
            lines=list(original),
            changed=False,
            errors=errors,
            meta={"warnings": warnings, "counts": {}},
        )

    instructions = build_padding_instructions(grouping.groups)
    new_lines, skipped = write_padding(canonical, instructions)

    return FormatResult(
        ok=True,
        language=grouping.language,
        lines=new_lines,
        changed=new_lines != list(original),
        errors=[],
        meta={
            "warnings": warnings,
            "counts": {
                "canonicalized_lines": sum(1 for a, b in zip(original, canonical) if a != b),
                "groups": len(grouping.groups),
                "instructions": len(instructions),
                "skipped": len(skipped),
            },
        },
    )


def format_lines(
    lines: Sequence[str],
    *,
    language: str,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: FormatConfig | None = None,
) -> FormatResult:
    """
    Write path: canonicalize anchor whitespace, re-tokenize the canonical
    text, group it and insert the padding.

    Output depends only on the non-whitespace content around anchors, so
    formatting already formatted text returns it unchanged.
    """

    cfg = config or FormatConfig()
    cfg.validate()
    original = list(lines)

    if not table.supports(language):
        return FormatResult(
            ok=True,
            language=table.resolve(language),
            lines=original,
            changed=False,
            errors=[],
            meta={"warnings": [_unsupported(table, language)], "counts": {}},
        )

    canonical = canonical_lines_for(original, language=language, table=table)
    stream = _lex(canonical, language=language, cfg=cfg)
    return format_from_stream(original, canonical, stream, table=table, config=cfg)


def format_text(
    text: str,
    *,
    language: str,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: FormatConfig | None = None,
) -> tuple[str, FormatResult]:
    """Format a whole document, keeping its line ending style and final newline."""
    newline = detect_newline(text)
    result = format_lines(split_lines(text), language=language, table=table, config=config)
    if not result.changed:
        return text, result
    return join_lines(result.lines, newline), result
