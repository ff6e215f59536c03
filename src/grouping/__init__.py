"""
Grouping stage (anchor table + grouper).

Contract:
- Input: TokenStream and the anchor rules of its language
- Output: AlignmentGroups ordered by first line, rule order, ordinal
- Constraints: deterministic; groups only span consecutive lines with equal
  indent and bracket depth; target_column is the minimal column aligning all
  members

No rewriting of text happens here.
"""

from .anchors import DEFAULT_ANCHOR_TABLE, DEFAULT_RULES, AnchorTable, load_anchor_table
from .config import GroupingConfig
from .group_tokens import group_token_stream, group_tokens

__all__ = [
    "DEFAULT_ANCHOR_TABLE",
    "DEFAULT_RULES",
    "AnchorTable",
    "GroupingConfig",
    "group_token_stream",
    "group_tokens",
    "load_anchor_table",
]
