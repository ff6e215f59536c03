from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from contracts.alignment import LayoutError
from grouping.anchors import DEFAULT_ANCHOR_TABLE, AnchorTable
from layout.module import FormatConfig, canonical_lines_for, format_from_stream

from .interfaces import ConcurrentWriteConflict, DocumentWriter, TextDocument
from .parser_service import ParserService, get_parser_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FormattingConfig:
    max_attempts: int = 3
    format: FormatConfig = field(default_factory=FormatConfig)

    def validate(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.format.validate()


@dataclass(frozen=True, slots=True)
class FormattingOutcome:
    ok: bool
    uri: str
    applied: bool  # an edit was committed
    attempts: int
    errors: list[LayoutError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "uri": self.uri,
            "applied": self.applied,
            "attempts": self.attempts,
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }


async def apply_formatting(
    document: TextDocument,
    writer: DocumentWriter,
    *,
    parser: ParserService | None = None,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: FormattingConfig | None = None,
) -> FormattingOutcome:
    """
    Write alignment into `document` as one edit.

    Each attempt reads the document at version V, canonicalizes, re-tokenizes,
    groups and pads, then commits against V. If the document moved on in the
    meantime the commit is refused, nothing is written, the conflict is
    recorded and the whole computation is retried on the new content.
    """

    cfg = config or FormattingConfig()
    cfg.validate()
    svc = parser or get_parser_service()
    language = document.language_id
    errors: list[LayoutError] = []

    if not table.supports(language):
        return FormattingOutcome(
            ok=True,
            uri=document.uri,
            applied=False,
            attempts=0,
            errors=[],
            meta={
                "warnings": [
                    {
                        "code": "GROUP_UNSUPPORTED_LANGUAGE",
                        "message": "No anchor rules configured for language",
                        "detail": {"language": table.resolve(language)},
                    }
                ]
            },
        )

    for attempt in range(1, cfg.max_attempts + 1):
        version = document.version
        original = document.get_lines()
        canonical = canonical_lines_for(original, language=language, table=table)
        stream = await svc.parse(lines=canonical, language=language)
        result = format_from_stream(original, canonical, stream, table=table, config=cfg.format)

        if not result.ok:
            return FormattingOutcome(
                ok=False,
                uri=document.uri,
                applied=False,
                attempts=attempt,
                errors=errors + list(result.errors),
                meta={"version": version, **result.meta},
            )
        if not result.changed:
            return FormattingOutcome(
                ok=True,
                uri=document.uri,
                applied=False,
                attempts=attempt,
                errors=errors,
                meta={"version": version, **result.meta},
            )

        try:
            writer.replace_lines(document, result.lines, expected_version=version)
        except ConcurrentWriteConflict as e:
            logger.warning("write conflict on attempt %d/%d: %s", attempt, cfg.max_attempts, e)
            errors.append(
                LayoutError(
                    code="FORMAT_WRITE_CONFLICT",
                    message=str(e),
                    detail={
                        "attempt": attempt,
                        "expected_version": e.expected_version,
                        "actual_version": e.actual_version,
                    },
                )
            )
            continue

        return FormattingOutcome(
            ok=True,
            uri=document.uri,
            applied=True,
            attempts=attempt,
            errors=errors,
            meta={"version": version, **result.meta},
        )

    return FormattingOutcome(
        ok=False,
        uri=document.uri,
        applied=False,
        attempts=cfg.max_attempts,
        errors=errors,
        meta={"version": document.version},
    )
