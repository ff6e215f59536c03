from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .tokens import Token


class LayoutMode(str, Enum):
    PREVIEW = "preview"
    WRITE = "write"


@dataclass(frozen=True, slots=True)
class AnchorRule:
    """
    One alignment anchor for a language.

    `space_before` / `space_after` are the canonical whitespace left around
    every occurrence by canonicalization. `pad_after=True` pads right after
    the anchor (keys stay tight, values move); `False` pads right before it
    (the operators themselves line up).
    """

    kind: str
    space_before: str = ""
    space_after: str = " "
    pad_after: bool = True

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("AnchorRule.kind must be non-empty")
        for s in (self.space_before, self.space_after):
            if s.strip(" \t") != "":
                raise ValueError(f"AnchorRule spacing must be whitespace only, got {s!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "space_before": self.space_before,
            "space_after": self.space_after,
            "pad_after": self.pad_after,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AnchorRule":
        return AnchorRule(
            kind=str(d["kind"]),
            space_before=str(d.get("space_before", "")),
            space_after=str(d.get("space_after", " ")),
            pad_after=bool(d.get("pad_after", True)),
        )


@dataclass(frozen=True, slots=True)
class AlignmentGroup:
    kind: str
    ordinal: int  # 0 = first occurrence of the kind on each line
    tokens: tuple[Token, ...]  # one per line, consecutive lines, same indent and depth
    target_column: int
    pad_after: bool

    def insert_column(self, token: Token) -> int:
        return token.end_column if self.pad_after else token.column

    def padding_for(self, token: Token) -> int:
        return self.target_column - self.insert_column(token)

    @property
    def first_line(self) -> int:
        return self.tokens[0].line if self.tokens else 0

    @property
    def last_line(self) -> int:
        return self.tokens[-1].line if self.tokens else 0

    def is_noop(self) -> bool:
        return all(self.padding_for(t) <= 0 for t in self.tokens)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "ordinal": self.ordinal,
            "tokens": [t.to_dict() for t in self.tokens],
            "target_column": self.target_column,
            "pad_after": self.pad_after,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AlignmentGroup":
        return AlignmentGroup(
            kind=str(d["kind"]),
            ordinal=int(d.get("ordinal", 0)),
            tokens=tuple(Token.from_dict(t) for t in (d.get("tokens") or [])),
            target_column=int(d["target_column"]),
            pad_after=bool(d["pad_after"]),
        )


@dataclass(frozen=True, slots=True, order=True)
class PaddingInstruction:
    line: int
    insert_column: int
    space_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "insert_column": self.insert_column, "space_count": self.space_count}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "PaddingInstruction":
        return PaddingInstruction(
            line=int(d["line"]),
            insert_column=int(d["insert_column"]),
            space_count=int(d["space_count"]),
        )


@dataclass(frozen=True, slots=True)
class LayoutError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class GroupingResult:
    ok: bool
    language: str
    groups: list[AlignmentGroup]
    errors: list[LayoutError]
    meta: dict[str, Any]  # deterministic config, counts, warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "language": self.language,
            "groups": [g.to_dict() for g in self.groups],
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "GroupingResult":
        groups_raw = d.get("groups") or []
        if not isinstance(groups_raw, list):
            raise TypeError("GroupingResult.groups must be a list")
        return GroupingResult(
            ok=bool(d.get("ok", False)),
            language=str(d.get("language", "")),
            groups=[AlignmentGroup.from_dict(g) for g in groups_raw],
            errors=[
                LayoutError(code=str(e["code"]), message=str(e.get("message", "")), detail=e.get("detail"))
                for e in (d.get("errors") or [])
            ],
            meta=dict(d.get("meta") or {}),
        )


@dataclass(frozen=True, slots=True)
class PreviewResult:
    ok: bool
    language: str
    instructions: list[PaddingInstruction]
    groups: list[AlignmentGroup]
    errors: list[LayoutError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "language": self.language,
            "instructions": [i.to_dict() for i in self.instructions],
            "groups": [g.to_dict() for g in self.groups],
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }


@dataclass(frozen=True, slots=True)
class FormatResult:
    ok: bool
    language: str
    lines: list[str]
    changed: bool
    errors: list[LayoutError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "language": self.language,
            "lines": list(self.lines),
            "changed": self.changed,
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }
