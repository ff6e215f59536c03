"""
Layout stage (canonicalization + padding).

Contract:
- Preview: tokens as-is -> groups -> PaddingInstructions; source lines untouched
- Write: canonicalize anchor whitespace -> re-tokenize -> groups -> padded lines
- Constraints: only whitespace adjacent to anchors changes; Write is idempotent;
  stale instructions are skipped, never raised
"""

from .apply import (
    PREVIEW_FILLER,
    apply_layout,
    build_padding_instructions,
    filter_stale,
    render_preview,
    write_padding,
)
from .canonicalize import canonicalize, canonicalize_line, canonicalize_lines
from .module import (
    FormatConfig,
    canonical_lines_for,
    format_from_stream,
    format_lines,
    format_text,
    preview_from_stream,
    preview_lines,
)

__all__ = [
    "PREVIEW_FILLER",
    "FormatConfig",
    "apply_layout",
    "build_padding_instructions",
    "canonical_lines_for",
    "canonicalize",
    "canonicalize_line",
    "canonicalize_lines",
    "filter_stale",
    "format_from_stream",
    "format_lines",
    "format_text",
    "preview_from_stream",
    "preview_lines",
    "render_preview",
    "write_padding",
]
