from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TokenKind(str, Enum):
    """
    Token roles emitted by the built-in lexical producer.

    Producers may emit kinds outside this enum; grouping only ever looks at
    kinds that have an anchor rule for the active language.
    """

    COLON = "colon"
    ASSIGNMENT = "assignment"
    LOGICAL = "logical"
    COMMA = "comma"
    ARROW = "arrow"
    TERNARY = "ternary"
    OTHER_COLON = "other_colon"
    KEYWORD_ARGUMENT = "keyword_argument"
    OPERATOR = "operator"


def _kind_str(kind: TokenKind | str) -> str:
    return kind.value if isinstance(kind, TokenKind) else str(kind)


@dataclass(frozen=True, slots=True)
class Token:
    line: int  # 0-based row
    column: int  # 0-based code point offset into the line
    text: str
    kind: str
    depth: int = 0  # bracket nesting depth at the token
    indent: int = 0  # leading whitespace characters on the token's line

    @property
    def end_column(self) -> int:
        return self.column + len(self.text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "text": self.text,
            "kind": self.kind,
            "depth": self.depth,
            "indent": self.indent,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Token":
        return Token(
            line=int(d["line"]),
            column=int(d["column"]),
            text=str(d["text"]),
            kind=_kind_str(d["kind"]),
            depth=int(d.get("depth", 0)),
            indent=int(d.get("indent", 0)),
        )


@dataclass(frozen=True, slots=True)
class LexError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LexError":
        detail = d.get("detail")
        return LexError(
            code=str(d["code"]),
            message=str(d.get("message", "")),
            detail=(None if detail is None else dict(detail)),
        )


@dataclass(frozen=True, slots=True)
class TokenStream:
    """
    Classified tokens for one snapshot of one document, over the inclusive
    line range [start_line, end_line].

    An empty stream is a valid outcome (nothing to align); `ok=False` only
    records that the producer could not parse the input.
    """

    language: str
    start_line: int
    end_line: int
    tokens: list[Token]  # sorted by (line, column)
    ok: bool = True
    errors: list[LexError] | None = None
    meta: dict[str, Any] | None = None

    @staticmethod
    def empty(
        *, language: str, start_line: int, end_line: int, errors: list[LexError] | None = None
    ) -> "TokenStream":
        return TokenStream(
            language=language,
            start_line=start_line,
            end_line=end_line,
            tokens=[],
            ok=not errors,
            errors=list(errors or []),
            meta={},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "tokens": [t.to_dict() for t in self.tokens],
            "ok": self.ok,
            "errors": [e.to_dict() for e in (self.errors or [])],
            "meta": dict(self.meta or {}),
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "TokenStream":
        tokens_raw = d.get("tokens") or []
        if not isinstance(tokens_raw, list):
            raise TypeError("TokenStream.tokens must be a list")
        errors_raw = d.get("errors") or []
        if not isinstance(errors_raw, list):
            raise TypeError("TokenStream.errors must be a list")

        tokens = sorted((Token.from_dict(t) for t in tokens_raw), key=lambda t: (t.line, t.column))
        return TokenStream(
            language=str(d.get("language", "")),
            start_line=int(d.get("start_line", 0)),
            end_line=int(d.get("end_line", 0)),
            tokens=tokens,
            ok=bool(d.get("ok", True)),
            errors=[LexError.from_dict(e) for e in errors_raw],
            meta=dict(d.get("meta") or {}),
        )
