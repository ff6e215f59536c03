"""
Lexing stage (token production only).

Contract:
- Input: source lines, a language id and an inclusive line range
- Output: TokenStream of classified operator tokens, sorted by (line, column)
- Constraints: nothing inside strings, regexes or comments is emitted;
  unsupported or unparseable input yields an empty stream, never an exception
"""

from .contracts import LexConfig, LexEngineName
from .engines import LexicalTokenProducer, TokenProducer
from .module import get_engine, run_lex_on_file, run_lex_on_lines, run_lex_on_text
from .profiles import LanguageProfile, get_profile, resolve_language
from .scanner import ScanState, lex_line, lex_lines

__all__ = [
    "LexConfig",
    "LexEngineName",
    "LanguageProfile",
    "LexicalTokenProducer",
    "ScanState",
    "TokenProducer",
    "get_engine",
    "get_profile",
    "lex_line",
    "lex_lines",
    "resolve_language",
    "run_lex_on_file",
    "run_lex_on_lines",
    "run_lex_on_text",
]
