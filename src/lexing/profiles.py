from __future__ import annotations

from dataclasses import dataclass, field


def _munch_order(ops: tuple[str, ...]) -> tuple[str, ...]:
    # Longest operators first so "===" wins over "==" and "=".
    return tuple(sorted(set(ops), key=lambda s: (-len(s), s)))


@dataclass(frozen=True, slots=True)
class LanguageProfile:
    """
    Lexical description of one language, enough to find anchor operators
    outside of strings, regexes and comments and to track bracket nesting.
    """

    language: str
    line_comments: tuple[str, ...] = ()
    block_comment: tuple[str, str] | None = None
    quotes: tuple[str, ...] = ('"', "'")
    multiline_quotes: tuple[str, ...] = ()  # may stay open across lines; checked before `quotes`
    quote_requires_boundary: bool = False  # YAML: quotes only open a scalar
    comment_requires_boundary: bool = False  # YAML: '#' must follow whitespace
    regex_literals: bool = False
    word_extra_chars: str = "_$"
    operators: tuple[str, ...] = ()
    colon_contexts: frozenset[str] = frozenset({"{"})  # innermost open bracket, "" = top level
    colon_requires_space: bool = False
    colon_skips_selectors: bool = False
    ternary: bool = False
    assignment_ops: frozenset[str] = frozenset()
    assignment_top_level_only: bool = False
    logical_ops: frozenset[str] = frozenset()
    logical_keywords: frozenset[str] = frozenset()
    arrow_ops: frozenset[str] = frozenset()
    regex_keywords: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "operators", _munch_order(self.operators))


_C_LIKE_OPERATORS = (
    ">>>=", "===", "!==", "**=", "<<=", ">>=", ">>>", "&&=", "||=", "??=", "...",
    "=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.", "+=", "-=", "*=", "/=",
    "%=", "&=", "|=", "^=", "++", "--", "**", "<<", ">>",
    ":", "=", ",", ";", "?", "+", "-", "*", "/", "%", "<", ">", "!", "&", "|", "^",
    "~", ".", "@", "#",
)

_JS_ASSIGNMENT = frozenset(
    {"=", "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=", "&=", "|=", "^=", "&&=", "||=", "??="}
)

_PY_OPERATORS = (
    "**=", "//=", ">>=", "<<=", "->", ":=", "==", "!=", "<=", ">=", "+=", "-=", "*=",
    "/=", "%=", "&=", "|=", "^=", "@=", "**", "//", "<<", ">>",
    ":", "=", ",", ";", "+", "-", "*", "/", "%", "<", ">", "&", "|", "^", "~", "@", ".", "!",
)

_PY_ASSIGNMENT = frozenset(
    {"=", "+=", "-=", "*=", "/=", "//=", "%=", "**=", ">>=", "<<=", "&=", "|=", "^=", "@="}
)

_CSS_OPERATORS = (":", ";", ",", ">", "+", "~", "*", "=", "!", ".", "#", "&", "%", "/", "@")


def _javascript(language: str) -> LanguageProfile:
    return LanguageProfile(
        language=language,
        line_comments=("//",),
        block_comment=("/*", "*/"),
        quotes=('"', "'"),
        multiline_quotes=("`",),
        regex_literals=True,
        operators=_C_LIKE_OPERATORS,
        colon_contexts=frozenset({"{"}),
        ternary=True,
        assignment_ops=_JS_ASSIGNMENT,
        logical_ops=frozenset({"&&", "||", "??"}),
        arrow_ops=frozenset({"=>"}),
        regex_keywords=frozenset({"return", "typeof", "case", "do", "else", "in", "of", "yield", "await", "void"}),
    )


def _css(language: str, *, line_comments: tuple[str, ...]) -> LanguageProfile:
    return LanguageProfile(
        language=language,
        line_comments=line_comments,
        block_comment=("/*", "*/"),
        word_extra_chars="_-$",
        operators=_CSS_OPERATORS,
        colon_contexts=frozenset({"{"}),
        colon_skips_selectors=True,
    )


PROFILES: dict[str, LanguageProfile] = {
    "json": LanguageProfile(
        language="json",
        quotes=('"',),
        operators=(":", ",", "-", "+", "."),
        colon_contexts=frozenset({"{"}),
    ),
    "jsonc": LanguageProfile(
        language="jsonc",
        line_comments=("//",),
        block_comment=("/*", "*/"),
        quotes=('"',),
        operators=(":", ",", "-", "+", "."),
        colon_contexts=frozenset({"{"}),
    ),
    "yaml": LanguageProfile(
        language="yaml",
        line_comments=("#",),
        quotes=('"', "'"),
        quote_requires_boundary=True,
        comment_requires_boundary=True,
        word_extra_chars="_-.$/",
        operators=(":", ",", "-", "?", "|", ">", "&", "*", "!", "%", "@", "="),
        colon_contexts=frozenset({"", "{"}),
        colon_requires_space=True,
    ),
    "javascript": _javascript("javascript"),
    "javascriptreact": _javascript("javascriptreact"),
    "typescript": _javascript("typescript"),
    "typescriptreact": _javascript("typescriptreact"),
    "python": LanguageProfile(
        language="python",
        line_comments=("#",),
        quotes=('"', "'"),
        multiline_quotes=('"""', "'''"),
        word_extra_chars="_",
        operators=_PY_OPERATORS,
        colon_contexts=frozenset({"{"}),
        assignment_ops=_PY_ASSIGNMENT,
        assignment_top_level_only=True,
        logical_keywords=frozenset({"and", "or"}),
        arrow_ops=frozenset({"->"}),
    ),
    "css": _css("css", line_comments=()),
    "scss": _css("scss", line_comments=("//",)),
    "less": _css("less", line_comments=("//",)),
}


LANGUAGE_ALIASES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescriptreact",
    "js": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "jsx": "javascriptreact",
    "json": "json",
    "jsonc": "jsonc",
    "yaml": "yaml",
    "yml": "yaml",
    "py": "python",
    "css": "css",
    "scss": "scss",
    "less": "less",
}


def resolve_language(name: str) -> str:
    """Map a file extension or language id to a canonical language id."""
    key = name.strip().lower().lstrip(".")
    return LANGUAGE_ALIASES.get(key, key)


def get_profile(language: str) -> LanguageProfile | None:
    return PROFILES.get(resolve_language(language))
