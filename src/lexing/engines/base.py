from __future__ import annotations

from abc import ABC, abstractmethod

from contracts.tokens import TokenStream


class TokenProducer(ABC):
    """
    Interface for token producers.

    IMPORTANT:
    - Tokens must be sorted by (line, column) and never span a line break.
    - Tokens inside string/regex/comment literals must be omitted (or carry
      a kind that no anchor rule recognizes).
    - Unparseable input yields an empty stream; ordinary syntax errors must
      never raise.
    """

    @abstractmethod
    def engine_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def parse(self, *, lines: list[str], language: str, start_line: int, end_line: int) -> TokenStream:
        raise NotImplementedError
