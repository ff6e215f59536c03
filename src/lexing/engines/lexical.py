from __future__ import annotations

from contracts.tokens import LexError, TokenStream

from ..profiles import get_profile, resolve_language
from ..scanner import lex_lines
from .base import TokenProducer


class LexicalTokenProducer(TokenProducer):
    """
    Built-in producer backed by the per-language line scanner.

    It classifies operators by lexical context only (brackets, literals,
    pending ternaries); no syntax tree is built.
    """

    def engine_id(self) -> str:
        return "lexical"

    def parse(self, *, lines: list[str], language: str, start_line: int, end_line: int) -> TokenStream:
        lang = resolve_language(language)
        profile = get_profile(lang)
        meta = {"engine": self.engine_id()}

        if profile is None:
            return TokenStream(
                language=lang,
                start_line=start_line,
                end_line=end_line,
                tokens=[],
                ok=False,
                errors=[
                    LexError(
                        code="LEX_UNSUPPORTED_LANGUAGE",
                        message="No lexical profile for language",
                        detail={"language": lang},
                    )
                ],
                meta=meta,
            )

        last = min(end_line, len(lines) - 1)
        if not lines or start_line > last:
            return TokenStream(
                language=lang, start_line=start_line, end_line=end_line, tokens=[], ok=True, errors=[], meta=meta
            )

        tokens = lex_lines(lines, profile, start_line=start_line, end_line=last)
        return TokenStream(
            language=lang,
            start_line=start_line,
            end_line=end_line,
            tokens=tokens,
            ok=True,
            errors=[],
            meta={**meta, "lines_scanned": last + 1, "token_count": len(tokens)},
        )
