from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from contracts.tokens import TokenStream
from lexing.contracts import LexConfig, LexEngineName
from lexing.engines.base import TokenProducer
from lexing.module import get_engine, run_lex_on_lines

logger = logging.getLogger(__name__)


class ParserServiceNotInitialized(RuntimeError):
    pass


class ParserService:
    """
    Shared token producer with an explicit lifecycle.

    `initialize()` must run before `parse()`; `dispose()` releases the
    producer. Parses run in a worker thread so the event loop stays free.
    """

    def __init__(self, engine: LexEngineName = LexEngineName.LEXICAL) -> None:
        self._engine = engine
        self._producer: TokenProducer | None = None

    @property
    def initialized(self) -> bool:
        return self._producer is not None

    def initialize(self) -> None:
        if self._producer is None:
            self._producer = get_engine(self._engine)
            logger.debug("parser service initialized (engine=%s)", self._engine.value)

    def dispose(self) -> None:
        if self._producer is not None:
            logger.debug("parser service disposed")
        self._producer = None

    async def parse(
        self,
        *,
        lines: Sequence[str],
        language: str,
        start_line: int = 0,
        end_line: int | None = None,
    ) -> TokenStream:
        producer = self._producer
        if producer is None:
            raise ParserServiceNotInitialized("ParserService.initialize() has not been called")
        config = LexConfig(language=language, engine=self._engine, start_line=start_line, end_line=end_line)
        return await asyncio.to_thread(run_lex_on_lines, config=config, lines=list(lines), producer=producer)


_service: ParserService | None = None


def get_parser_service() -> ParserService:
    """Lazily construct and return the process-wide ParserService (not initialized)."""
    global _service
    if _service is None:
        _service = ParserService()
    return _service


def dispose_parser_service() -> None:
    global _service
    if _service is not None:
        _service.dispose()
    _service = None
