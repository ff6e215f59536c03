from __future__ import annotations

import asyncio
import unittest

from contracts.alignment import PaddingInstruction
from lexing.contracts import LexConfig
from lexing.module import run_lex_on_lines
from session.interfaces import InMemoryDocument, InMemoryRenderer
from session.parser_service import (
    ParserService,
    ParserServiceNotInitialized,
    dispose_parser_service,
    get_parser_service,
)
from session.scheduler import DocumentScheduler, SchedulerConfig

SCENARIO_A = ['name: "app"', 'version: "1.0"', "debug: true"]
SCENARIO_A_PADDING = [PaddingInstruction(0, 5, 3), PaddingInstruction(2, 6, 2)]


class _GatedParser:
    """Parser whose results are held back until `gate` is set."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def parse(self, *, lines, language, start_line=0, end_line=None):
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self.gate.wait()
        finally:
            self.in_flight -= 1
        return run_lex_on_lines(config=LexConfig(language=language), lines=list(lines))


async def _until(predicate) -> None:
    for _ in range(1000):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


class TestParserService(unittest.IsolatedAsyncioTestCase):
    async def test_parse_requires_initialize(self) -> None:
        svc = ParserService()
        with self.assertRaises(ParserServiceNotInitialized):
            await svc.parse(lines=["a: 1"], language="yaml")

        svc.initialize()
        stream = await svc.parse(lines=["a: 1"], language="yaml")
        self.assertTrue(stream.ok)
        self.assertEqual([t.kind for t in stream.tokens], ["colon"])

        svc.dispose()
        self.assertFalse(svc.initialized)
        with self.assertRaises(ParserServiceNotInitialized):
            await svc.parse(lines=["a: 1"], language="yaml")

    async def test_singleton_lifecycle(self) -> None:
        try:
            svc = get_parser_service()
            self.assertIs(get_parser_service(), svc)
            self.assertFalse(svc.initialized)
        finally:
            dispose_parser_service()
        self.assertIsNot(get_parser_service(), svc)
        dispose_parser_service()


class TestDocumentScheduler(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.parser = ParserService()
        self.parser.initialize()
        self.renderer = InMemoryRenderer()

    async def asyncTearDown(self) -> None:
        self.parser.dispose()

    async def test_change_paints_preview(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(self.parser, self.renderer, config=SchedulerConfig(debounce_s=0))

        painted = await scheduler.notify_change(doc)

        self.assertEqual(painted, SCENARIO_A_PADDING)
        self.assertEqual(self.renderer.painted[doc.uri], SCENARIO_A_PADDING)
        self.assertEqual(doc.get_lines(), SCENARIO_A)
        self.assertEqual(scheduler.stats["painted"], 1)

    async def test_rapid_changes_are_debounced(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(self.parser, self.renderer, config=SchedulerConfig(debounce_s=0.05))

        first = scheduler.notify_change(doc)
        second = scheduler.notify_change(doc)
        await scheduler.wait_idle(doc.uri)

        self.assertTrue(first.cancelled())
        self.assertEqual(second.result(), SCENARIO_A_PADDING)
        self.assertEqual(scheduler.stats["debounced"], 1)
        self.assertEqual(self.renderer.paint_count, 1)

    async def test_result_for_outdated_version_is_dropped(self) -> None:
        parser = _GatedParser()
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(parser, self.renderer, config=SchedulerConfig(debounce_s=0))

        task = scheduler.notify_change(doc)
        await _until(lambda: parser.calls == 1)
        doc.replace_line(0, "n: 1")
        parser.gate.set()

        self.assertIsNone(await task)
        self.assertEqual(scheduler.stats["stale_dropped"], 1)
        self.assertNotIn(doc.uri, self.renderer.painted)

    async def test_superseded_parse_is_dropped_and_next_one_waits(self) -> None:
        parser = _GatedParser()
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(parser, self.renderer, config=SchedulerConfig(debounce_s=0))

        first = scheduler.notify_change(doc)
        await _until(lambda: parser.calls == 1)
        second = scheduler.notify_change(doc)
        await asyncio.sleep(0)
        self.assertEqual(parser.calls, 1)

        parser.gate.set()
        self.assertIsNone(await first)
        self.assertEqual(await second, SCENARIO_A_PADDING)
        self.assertEqual(parser.calls, 2)
        self.assertEqual(scheduler.stats["superseded"], 1)
        self.assertEqual(self.renderer.paint_count, 1)

    async def test_unsupported_language_clears_without_parsing(self) -> None:
        parser = _GatedParser()
        doc = InMemoryDocument("file:///a.md", "markdown", ["a: 1"])
        scheduler = DocumentScheduler(parser, self.renderer, config=SchedulerConfig(debounce_s=0))

        self.assertEqual(await scheduler.notify_change(doc), [])
        self.assertEqual(parser.calls, 0)

    async def test_cancel_during_parse_keeps_one_parse_per_document(self) -> None:
        parser = _GatedParser()
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(parser, self.renderer, config=SchedulerConfig(debounce_s=0))

        first = scheduler.notify_change(doc)
        await _until(lambda: parser.calls == 1)
        scheduler.cancel(doc.uri)
        second = scheduler.notify_change(doc)
        for _ in range(5):
            await asyncio.sleep(0)
        self.assertEqual(parser.calls, 1)

        parser.gate.set()
        self.assertIsNone(await first)
        self.assertEqual(await second, SCENARIO_A_PADDING)
        self.assertEqual(parser.max_in_flight, 1)
        self.assertEqual(self.renderer.painted[doc.uri], SCENARIO_A_PADDING)

    async def test_failed_refresh_is_logged(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(ParserService(), self.renderer, config=SchedulerConfig(debounce_s=0))

        with self.assertLogs("session.scheduler", level="ERROR") as logs:
            task = scheduler.notify_change(doc)
            await scheduler.wait_idle(doc.uri)

        self.assertIsInstance(task.exception(), ParserServiceNotInitialized)
        self.assertIn("preview refresh failed", logs.output[0])
        self.assertNotIn(doc.uri, self.renderer.painted)

    async def test_cancel_clears_decorations(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", SCENARIO_A)
        scheduler = DocumentScheduler(self.parser, self.renderer, config=SchedulerConfig(debounce_s=0))
        await scheduler.notify_change(doc)

        scheduler.cancel(doc.uri)
        self.assertNotIn(doc.uri, self.renderer.painted)

    def test_config_validation(self) -> None:
        with self.assertRaises(ValueError):
            SchedulerConfig(debounce_s=-1).validate()


if __name__ == "__main__":
    unittest.main()
