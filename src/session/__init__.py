"""
Editor session layer.

Drives the pure alignment stages from asyncio: a shared parser service with
an explicit lifecycle, debounced per-document preview refreshes that drop
stale results, a retrying one-shot Write and the host command surface.
"""

from .commands import AlignmentCommands, LanguageSettings
from .formatting import FormattingConfig, FormattingOutcome, apply_formatting
from .interfaces import (
    ConcurrentWriteConflict,
    DocumentWriter,
    InMemoryDocument,
    InMemoryDocumentWriter,
    InMemoryRenderer,
    Renderer,
    TextDocument,
)
from .parser_service import ParserService, ParserServiceNotInitialized, dispose_parser_service, get_parser_service
from .scheduler import DocumentScheduler, SchedulerConfig

__all__ = [
    "AlignmentCommands",
    "ConcurrentWriteConflict",
    "DocumentScheduler",
    "DocumentWriter",
    "FormattingConfig",
    "FormattingOutcome",
    "InMemoryDocument",
    "InMemoryDocumentWriter",
    "InMemoryRenderer",
    "LanguageSettings",
    "ParserService",
    "ParserServiceNotInitialized",
    "Renderer",
    "SchedulerConfig",
    "TextDocument",
    "apply_formatting",
    "dispose_parser_service",
    "get_parser_service",
]
