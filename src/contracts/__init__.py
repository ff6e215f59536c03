"""
Canonical, authoritative alignment contracts.

These models are the schema boundary between stages:
- lexing produces a TokenStream
- grouping turns tokens into AlignmentGroups
- layout flattens groups into PaddingInstructions or rewritten lines

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .alignment import (
    AlignmentGroup,
    AnchorRule,
    FormatResult,
    GroupingResult,
    LayoutError,
    LayoutMode,
    PaddingInstruction,
    PreviewResult,
)
from .tokens import LexError, Token, TokenKind, TokenStream

__all__ = [
    "Token",
    "TokenKind",
    "TokenStream",
    "LexError",
    "AnchorRule",
    "AlignmentGroup",
    "PaddingInstruction",
    "LayoutMode",
    "LayoutError",
    "GroupingResult",
    "PreviewResult",
    "FormatResult",
]
