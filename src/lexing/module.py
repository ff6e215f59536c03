from __future__ import annotations

import logging
from pathlib import Path

from contracts.tokens import LexError, TokenStream

from .contracts import LexConfig, LexEngineName
from .engines.base import TokenProducer
from .engines.lexical import LexicalTokenProducer
from .text import split_lines

logger = logging.getLogger(__name__)


def get_engine(engine: LexEngineName) -> TokenProducer:
    if engine == LexEngineName.LEXICAL:
        return LexicalTokenProducer()
    raise ValueError(f"Unsupported lex engine: {engine}")


def run_lex_on_lines(
    *, config: LexConfig, lines: list[str], producer: TokenProducer | None = None
) -> TokenStream:
    """
    Tokenize an explicit list of lines, with `producer` or the engine named by
    `config.engine`.

    Never raises for unparseable input: a producer failure is recorded as a
    `LEX_FAILED` error on an empty stream, which downstream stages treat as
    "nothing to align".
    """

    end_line = (len(lines) - 1) if config.end_line is None else config.end_line
    end_line = max(end_line, config.start_line)

    engine = producer or get_engine(config.engine)
    try:
        return engine.parse(
            lines=list(lines),
            language=config.language,
            start_line=config.start_line,
            end_line=end_line,
        )
    except Exception as e:
        logger.warning("token producer %s failed for %s: %s", engine.engine_id(), config.language, e)
        return TokenStream.empty(
            language=config.language,
            start_line=config.start_line,
            end_line=end_line,
            errors=[
                LexError(
                    code="LEX_FAILED",
                    message=str(e),
                    detail={"engine": engine.engine_id(), "exception": type(e).__name__},
                )
            ],
        )


def run_lex_on_text(*, config: LexConfig, text: str) -> TokenStream:
    return run_lex_on_lines(config=config, lines=split_lines(text))


def run_lex_on_file(*, config: LexConfig, source_file: Path) -> TokenStream:
    return run_lex_on_text(config=config, text=source_file.read_text(encoding="utf-8"))
