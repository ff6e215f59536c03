from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from contracts.alignment import PaddingInstruction


class ConcurrentWriteConflict(RuntimeError):
    """The document changed between reading it and committing an edit."""

    def __init__(self, uri: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"{uri}: document changed during formatting (expected version {expected_version}, got {actual_version})"
        )
        self.uri = uri
        self.expected_version = expected_version
        self.actual_version = actual_version


class TextDocument(ABC):
    """
    Host-side view of one open document.

    `version` increases on every edit; the engine only ever reads.
    """

    @property
    @abstractmethod
    def uri(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def language_id(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def version(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_lines(self) -> list[str]:
        raise NotImplementedError


class Renderer(ABC):
    """Paints preview padding as non-destructive decorations."""

    @abstractmethod
    def clear(self, uri: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def paint(self, uri: str, instructions: Sequence[PaddingInstruction]) -> None:
        raise NotImplementedError


class DocumentWriter(ABC):
    @abstractmethod
    def replace_lines(self, document: TextDocument, lines: Sequence[str], *, expected_version: int) -> None:
        """
        Replace the whole content of `document` in one edit.

        Raises ConcurrentWriteConflict (and changes nothing) if the document
        is no longer at `expected_version`.
        """
        raise NotImplementedError


class InMemoryDocument(TextDocument):
    def __init__(self, uri: str, language_id: str, lines: Sequence[str], version: int = 1) -> None:
        self._uri = uri
        self._language_id = language_id
        self._lines = list(lines)
        self._version = version

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def language_id(self) -> str:
        return self._language_id

    @property
    def version(self) -> int:
        return self._version

    def get_lines(self) -> list[str]:
        return list(self._lines)

    def set_lines(self, lines: Sequence[str]) -> None:
        self._lines = list(lines)
        self._version += 1

    def replace_line(self, line: int, text: str) -> None:
        if not (0 <= line < len(self._lines)):
            raise IndexError(f"line {line} out of range")
        self._lines[line] = text
        self._version += 1


class InMemoryDocumentWriter(DocumentWriter):
    def __init__(self) -> None:
        self.commits = 0

    def replace_lines(self, document: TextDocument, lines: Sequence[str], *, expected_version: int) -> None:
        if not isinstance(document, InMemoryDocument):
            raise TypeError("InMemoryDocumentWriter only writes InMemoryDocument instances")
        if document.version != expected_version:
            raise ConcurrentWriteConflict(document.uri, expected_version, document.version)
        document.set_lines(lines)
        self.commits += 1


class InMemoryRenderer(Renderer):
    """Keeps the currently painted instructions per document."""

    def __init__(self) -> None:
        self.painted: dict[str, list[PaddingInstruction]] = {}
        self.paint_count = 0

    def clear(self, uri: str) -> None:
        self.painted.pop(uri, None)

    def paint(self, uri: str, instructions: Sequence[PaddingInstruction]) -> None:
        self.painted[uri] = list(instructions)
        self.paint_count += 1
