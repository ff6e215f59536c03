from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass, field

from contracts.alignment import PaddingInstruction
from grouping.anchors import DEFAULT_ANCHOR_TABLE, AnchorTable
from layout.module import FormatConfig, preview_from_stream

from .interfaces import Renderer, TextDocument
from .parser_service import ParserService

logger = logging.getLogger(__name__)


def _log_failure(uri: str, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("%s: preview refresh failed: %s", uri, exc, exc_info=exc)


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    debounce_s: float = 0.15

    def validate(self) -> None:
        if self.debounce_s < 0:
            raise ValueError("debounce_s must be >= 0")


@dataclass(slots=True)
class _DocState:
    generation: int = 0  # bumped by every request; only the latest may paint
    pending: asyncio.Task | None = None
    debouncing: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)  # shared per uri, outlives cancel()


class DocumentScheduler:
    """
    Re-computes preview padding for open documents as they change.

    Requests are debounced per document; a newer request cancels one that is
    still waiting. At most one parse per document runs at a time, and any
    result that was superseded, or whose document version moved on while it
    was computed, is dropped instead of painted.
    """

    def __init__(
        self,
        parser: ParserService,
        renderer: Renderer,
        *,
        table: AnchorTable = DEFAULT_ANCHOR_TABLE,
        config: SchedulerConfig | None = None,
        format_config: FormatConfig | None = None,
    ) -> None:
        self._parser = parser
        self._renderer = renderer
        self._table = table
        self._config = config or SchedulerConfig()
        self._config.validate()
        self._format_config = format_config or FormatConfig()
        self._docs: dict[str, _DocState] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self.stats: dict[str, int] = {
            "requested": 0,
            "debounced": 0,
            "superseded": 0,
            "stale_dropped": 0,
            "painted": 0,
        }

    def notify_change(self, document: TextDocument) -> asyncio.Task:
        """Schedule a preview refresh for `document`; returns the request task."""
        st = self._docs.get(document.uri)
        if st is None:
            lock = self._locks.setdefault(document.uri, asyncio.Lock())
            st = self._docs[document.uri] = _DocState(lock=lock)
        if st.pending is not None and not st.pending.done() and st.debouncing:
            st.pending.cancel()
            self.stats["debounced"] += 1
        st.generation += 1
        self.stats["requested"] += 1
        st.debouncing = True
        st.pending = asyncio.create_task(self._refresh(document, st, st.generation))
        st.pending.add_done_callback(functools.partial(_log_failure, document.uri))
        return st.pending

    def cancel(self, uri: str) -> None:
        """Forget pending work for `uri` and clear its decorations."""
        st = self._docs.pop(uri, None)
        if st is not None:
            st.generation += 1
            if st.pending is not None and not st.pending.done() and st.debouncing:
                st.pending.cancel()
        self._renderer.clear(uri)

    async def wait_idle(self, uri: str) -> None:
        st = self._docs.get(uri)
        if st is None or st.pending is None:
            return
        # Failures are logged by the task callback; waiting never raises.
        await asyncio.wait({st.pending})

    async def _refresh(self, document: TextDocument, st: _DocState, generation: int) -> list[PaddingInstruction] | None:
        if self._config.debounce_s > 0:
            await asyncio.sleep(self._config.debounce_s)
        else:
            await asyncio.sleep(0)
        if generation == st.generation:
            st.debouncing = False

        async with st.lock:
            if generation != st.generation:
                self.stats["superseded"] += 1
                logger.debug("%s: request %d superseded before parse", document.uri, generation)
                return None
            if not self._table.supports(document.language_id):
                self._renderer.clear(document.uri)
                return []
            version = document.version
            lines = document.get_lines()
            stream = await self._parser.parse(lines=lines, language=document.language_id)

        if generation != st.generation:
            self.stats["superseded"] += 1
            logger.debug("%s: request %d superseded during parse", document.uri, generation)
            return None
        if document.version != version:
            self.stats["stale_dropped"] += 1
            logger.debug("%s: dropped result for version %d (now %d)", document.uri, version, document.version)
            return None

        result = preview_from_stream(lines, stream, table=self._table, config=self._format_config)
        self._renderer.clear(document.uri)
        self._renderer.paint(document.uri, result.instructions)
        self.stats["painted"] += 1
        return result.instructions
