from __future__ import annotations

import unittest

from session.commands import AlignmentCommands, LanguageSettings
from session.formatting import FormattingConfig, apply_formatting
from session.interfaces import InMemoryDocument, InMemoryDocumentWriter, InMemoryRenderer
from session.parser_service import ParserService
from session.scheduler import DocumentScheduler, SchedulerConfig

UNALIGNED = ['name:   "app"', 'version: "1.0"', "debug: true"]
ALIGNED = ['name:    "app"', 'version: "1.0"', "debug:   true"]


class _RacingWriter(InMemoryDocumentWriter):
    """Edits the document right before committing, `races` times."""

    def __init__(self, races: int) -> None:
        super().__init__()
        self.races = races

    def replace_lines(self, document, lines, *, expected_version):
        if self.races > 0:
            self.races -= 1
            document.replace_line(0, document.get_lines()[0])
        super().replace_lines(document, lines, expected_version=expected_version)


class TestApplyFormatting(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.parser = ParserService()
        self.parser.initialize()

    async def asyncTearDown(self) -> None:
        self.parser.dispose()

    async def test_writes_aligned_lines_in_one_edit(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)
        writer = InMemoryDocumentWriter()

        outcome = await apply_formatting(doc, writer, parser=self.parser)

        self.assertTrue(outcome.ok)
        self.assertTrue(outcome.applied)
        self.assertEqual(outcome.attempts, 1)
        self.assertEqual(doc.get_lines(), ALIGNED)
        self.assertEqual(doc.version, 2)
        self.assertEqual(writer.commits, 1)

    async def test_second_application_is_a_noop(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", ALIGNED)
        writer = InMemoryDocumentWriter()

        outcome = await apply_formatting(doc, writer, parser=self.parser)

        self.assertTrue(outcome.ok)
        self.assertFalse(outcome.applied)
        self.assertEqual(writer.commits, 0)
        self.assertEqual(doc.version, 1)

    async def test_conflict_is_retried_on_new_version(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)
        writer = _RacingWriter(races=1)

        outcome = await apply_formatting(doc, writer, parser=self.parser)

        self.assertTrue(outcome.ok)
        self.assertTrue(outcome.applied)
        self.assertEqual(outcome.attempts, 2)
        self.assertEqual([e.code for e in outcome.errors], ["FORMAT_WRITE_CONFLICT"])
        self.assertEqual(outcome.errors[0].detail["attempt"], 1)
        self.assertEqual(doc.get_lines(), ALIGNED)

    async def test_gives_up_without_partial_write(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)
        writer = _RacingWriter(races=10)

        outcome = await apply_formatting(
            doc, writer, parser=self.parser, config=FormattingConfig(max_attempts=3)
        )

        self.assertFalse(outcome.ok)
        self.assertFalse(outcome.applied)
        self.assertEqual(outcome.attempts, 3)
        self.assertEqual([e.code for e in outcome.errors], ["FORMAT_WRITE_CONFLICT"] * 3)
        self.assertEqual(doc.get_lines(), UNALIGNED)
        self.assertEqual(writer.commits, 0)

    async def test_unsupported_language(self) -> None:
        doc = InMemoryDocument("file:///a.md", "markdown", ["a  :  b"])
        outcome = await apply_formatting(doc, InMemoryDocumentWriter(), parser=self.parser)
        self.assertTrue(outcome.ok)
        self.assertFalse(outcome.applied)
        self.assertEqual(outcome.meta["warnings"][0]["code"], "GROUP_UNSUPPORTED_LANGUAGE")

    def test_config_validation(self) -> None:
        with self.assertRaises(ValueError):
            FormattingConfig(max_attempts=0).validate()


class TestAlignmentCommands(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.parser = ParserService()
        self.parser.initialize()
        self.renderer = InMemoryRenderer()
        self.scheduler = DocumentScheduler(self.parser, self.renderer, config=SchedulerConfig(debounce_s=0))
        self.commands = AlignmentCommands(self.scheduler, InMemoryDocumentWriter(), parser=self.parser)

    async def asyncTearDown(self) -> None:
        self.parser.dispose()

    async def test_toggle_preview(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)

        self.assertTrue(self.commands.toggle_preview(doc))
        await self.scheduler.wait_idle(doc.uri)
        self.assertIn(doc.uri, self.renderer.painted)
        self.assertEqual(doc.get_lines(), UNALIGNED)

        self.assertFalse(self.commands.toggle_preview(doc))
        self.assertNotIn(doc.uri, self.renderer.painted)

    async def test_preview_failure_is_logged(self) -> None:
        scheduler = DocumentScheduler(ParserService(), self.renderer, config=SchedulerConfig(debounce_s=0))
        commands = AlignmentCommands(scheduler, InMemoryDocumentWriter(), parser=self.parser)
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)

        with self.assertLogs("session.scheduler", level="ERROR") as logs:
            self.assertTrue(commands.toggle_preview(doc))
            await scheduler.wait_idle(doc.uri)

        self.assertIn("ParserService.initialize()", logs.output[0])
        self.assertNotIn(doc.uri, self.renderer.painted)

    async def test_document_changes_only_refresh_while_previewing(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)
        self.assertIsNone(self.commands.on_document_changed(doc))

        self.commands.toggle_preview(doc)
        task = self.commands.on_document_changed(doc)
        self.assertIsNotNone(task)
        await self.scheduler.wait_idle(doc.uri)

    async def test_disable_and_enable_language(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)
        self.commands.toggle_preview(doc)
        await self.scheduler.wait_idle(doc.uri)

        self.commands.disable("yml")
        self.assertFalse(self.commands.settings.is_enabled("yaml"))
        self.assertNotIn(doc.uri, self.renderer.painted)

        outcome = await self.commands.apply_now(doc)
        self.assertFalse(outcome.applied)
        self.assertEqual(outcome.meta["warnings"][0]["code"], "ALIGN_DISABLED")
        self.assertEqual(doc.get_lines(), UNALIGNED)

        self.commands.enable("yaml")
        await self.scheduler.wait_idle(doc.uri)
        self.assertIn(doc.uri, self.renderer.painted)

    async def test_apply_now_writes(self) -> None:
        doc = InMemoryDocument("file:///a.yaml", "yaml", UNALIGNED)
        outcome = await self.commands.apply_now(doc)
        self.assertTrue(outcome.applied)
        self.assertEqual(doc.get_lines(), ALIGNED)

    def test_language_settings_precedence(self) -> None:
        s = LanguageSettings(
            enabled_languages=frozenset({"json"}),
            disabled_languages=frozenset({"json", "yaml"}),
            default_enabled=False,
        )
        self.assertFalse(s.is_enabled("json"))
        self.assertFalse(s.is_enabled("yaml"))
        self.assertFalse(s.is_enabled("python"))
        self.assertTrue(LanguageSettings().is_enabled("python"))


if __name__ == "__main__":
    unittest.main()
