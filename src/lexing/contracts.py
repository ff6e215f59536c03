from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LexEngineName(str, Enum):
    """
    Token producer backends available to this module.
    """

    LEXICAL = "lexical"


@dataclass(frozen=True, slots=True)
class LexConfig:
    """
    Tokenization request.

    `end_line=None` means "through the last line". The range is inclusive.
    """

    language: str
    engine: LexEngineName = LexEngineName.LEXICAL
    start_line: int = 0
    end_line: int | None = None

    def __post_init__(self) -> None:
        if not self.language:
            raise ValueError("language must be non-empty")
        if self.start_line < 0:
            raise ValueError("start_line must be >= 0")
        if self.end_line is not None and self.end_line < self.start_line:
            raise ValueError("end_line must be >= start_line")
