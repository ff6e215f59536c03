from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass

from grouping.anchors import DEFAULT_ANCHOR_TABLE, AnchorTable

from .formatting import FormattingConfig, FormattingOutcome, apply_formatting
from .interfaces import DocumentWriter, TextDocument
from .parser_service import ParserService
from .scheduler import DocumentScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LanguageSettings:
    """
    Per-language enablement. An explicit disable wins over an explicit
    enable; languages named in neither follow `default_enabled`.
    """

    enabled_languages: frozenset[str] = frozenset()
    disabled_languages: frozenset[str] = frozenset()
    default_enabled: bool = True

    def is_enabled(self, language: str) -> bool:
        if language in self.disabled_languages:
            return False
        if language in self.enabled_languages:
            return True
        return self.default_enabled


class AlignmentCommands:
    """
    Host command surface: Preview toggling goes through the scheduler,
    "apply now" through `apply_formatting`.
    """

    def __init__(
        self,
        scheduler: DocumentScheduler,
        writer: DocumentWriter,
        *,
        parser: ParserService | None = None,
        table: AnchorTable = DEFAULT_ANCHOR_TABLE,
        settings: LanguageSettings | None = None,
        formatting: FormattingConfig | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._writer = writer
        self._parser = parser
        self._table = table
        self.settings = settings or LanguageSettings()
        self._formatting = formatting or FormattingConfig()
        self._previewing: dict[str, TextDocument] = {}

    def _language(self, document: TextDocument) -> str:
        return self._table.resolve(document.language_id)

    def is_previewing(self, uri: str) -> bool:
        return uri in self._previewing

    def toggle_preview(self, document: TextDocument) -> bool:
        """Flip Preview for `document`; returns whether it is now on."""
        if document.uri in self._previewing:
            del self._previewing[document.uri]
            self._scheduler.cancel(document.uri)
            return False
        self._previewing[document.uri] = document
        if self.settings.is_enabled(self._language(document)):
            self._scheduler.notify_change(document)
        return True

    def on_document_changed(self, document: TextDocument) -> asyncio.Task | None:
        if document.uri not in self._previewing or not self.settings.is_enabled(self._language(document)):
            return None
        return self._scheduler.notify_change(document)

    def enable(self, language: str | None = None) -> None:
        """Enable alignment for one language, or for every language without an override."""
        if language is None:
            self.settings = dataclasses.replace(self.settings, default_enabled=True)
        else:
            lang = self._table.resolve(language)
            self.settings = dataclasses.replace(
                self.settings,
                enabled_languages=self.settings.enabled_languages | {lang},
                disabled_languages=self.settings.disabled_languages - {lang},
            )
        for doc in self._previewing.values():
            if self.settings.is_enabled(self._language(doc)):
                self._scheduler.notify_change(doc)

    def disable(self, language: str | None = None) -> None:
        if language is None:
            self.settings = dataclasses.replace(self.settings, default_enabled=False)
        else:
            lang = self._table.resolve(language)
            self.settings = dataclasses.replace(
                self.settings,
                enabled_languages=self.settings.enabled_languages - {lang},
                disabled_languages=self.settings.disabled_languages | {lang},
            )
        for uri, doc in self._previewing.items():
            if not self.settings.is_enabled(self._language(doc)):
                self._scheduler.cancel(uri)

    async def apply_now(self, document: TextDocument) -> FormattingOutcome:
        if not self.settings.is_enabled(self._language(document)):
            logger.debug("%s: alignment disabled for %s", document.uri, document.language_id)
            return FormattingOutcome(
                ok=True,
                uri=document.uri,
                applied=False,
                attempts=0,
                errors=[],
                meta={
                    "warnings": [
                        {
                            "code": "ALIGN_DISABLED",
                            "message": "Alignment disabled for language",
                            "detail": {"language": self._language(document)},
                        }
                    ]
                },
            )
        outcome = await apply_formatting(
            document, self._writer, parser=self._parser, table=self._table, config=self._formatting
        )
        if outcome.applied and document.uri in self._previewing:
            self._scheduler.notify_change(document)
        return outcome
