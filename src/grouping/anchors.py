from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from contracts.alignment import AnchorRule
from contracts.tokens import TokenKind
from lexing.profiles import LANGUAGE_ALIASES

_COLON = AnchorRule(kind=TokenKind.COLON.value, space_before="", space_after=" ", pad_after=True)
_ASSIGNMENT = AnchorRule(kind=TokenKind.ASSIGNMENT.value, space_before=" ", space_after=" ", pad_after=False)
_LOGICAL = AnchorRule(kind=TokenKind.LOGICAL.value, space_before=" ", space_after=" ", pad_after=False)

# JSX attributes use `=` too, so the react variants do not align assignments.
DEFAULT_RULES: dict[str, tuple[AnchorRule, ...]] = {
    "json": (_COLON,),
    "jsonc": (_COLON,),
    "yaml": (_COLON,),
    "css": (_COLON,),
    "scss": (_COLON,),
    "less": (_COLON,),
    "javascript": (_COLON, _ASSIGNMENT, _LOGICAL),
    "typescript": (_COLON, _ASSIGNMENT, _LOGICAL),
    "javascriptreact": (_COLON, _LOGICAL),
    "typescriptreact": (_COLON, _LOGICAL),
    "python": (_COLON, _ASSIGNMENT),
}


@dataclass(frozen=True, slots=True)
class AnchorTable:
    """
    Read-only mapping of language id to its ordered anchor rules.

    Lookups go through `aliases` first (file extensions, short names), so
    `rules_for("ts")` and `rules_for("typescript")` agree. Unknown languages
    resolve to no rules.
    """

    languages: Mapping[str, tuple[AnchorRule, ...]]
    aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        langs: dict[str, tuple[AnchorRule, ...]] = {}
        for lang, rules in self.languages.items():
            rules = tuple(rules)
            kinds = [r.kind for r in rules]
            if len(set(kinds)) != len(kinds):
                raise ValueError(f"duplicate anchor kind for language {lang!r}: {kinds}")
            langs[str(lang).lower()] = rules
        object.__setattr__(self, "languages", MappingProxyType(langs))
        object.__setattr__(
            self, "aliases", MappingProxyType({str(k).lower(): str(v).lower() for k, v in self.aliases.items()})
        )

    def resolve(self, language: str) -> str:
        key = language.strip().lower().lstrip(".")
        return self.aliases.get(key, key)

    def rules_for(self, language: str) -> tuple[AnchorRule, ...]:
        return self.languages.get(self.resolve(language), ())

    def supports(self, language: str) -> bool:
        return bool(self.rules_for(language))

    def to_dict(self) -> dict[str, Any]:
        return {
            "languages": {k: [r.to_dict() for r in v] for k, v in sorted(self.languages.items())},
            "aliases": dict(sorted(self.aliases.items())),
        }

    @staticmethod
    def from_dict(d: dict[str, Any], *, base: "AnchorTable | None" = None) -> "AnchorTable":
        """
        Build a table from `{"languages": {...}, "aliases": {...}}`.

        With `base`, the given languages replace (not merge with) the base
        entries of the same id; everything else is inherited.
        """

        langs_raw = d.get("languages") or {}
        if not isinstance(langs_raw, dict):
            raise TypeError("AnchorTable.languages must be an object")
        aliases_raw = d.get("aliases") or {}
        if not isinstance(aliases_raw, dict):
            raise TypeError("AnchorTable.aliases must be an object")

        languages: dict[str, tuple[AnchorRule, ...]] = dict(base.languages) if base else {}
        for lang, rules in langs_raw.items():
            if not isinstance(rules, list):
                raise TypeError(f"rules for {lang!r} must be a list")
            languages[str(lang).lower()] = tuple(AnchorRule.from_dict(r) for r in rules)

        aliases: dict[str, str] = dict(base.aliases) if base else {}
        aliases.update({str(k): str(v) for k, v in aliases_raw.items()})
        return AnchorTable(languages=languages, aliases=aliases)


DEFAULT_ANCHOR_TABLE = AnchorTable(languages=DEFAULT_RULES, aliases=LANGUAGE_ALIASES)


def load_anchor_table(path: Path, *, base: AnchorTable | None = DEFAULT_ANCHOR_TABLE) -> AnchorTable:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise TypeError("anchor table file must contain a JSON object")
    return AnchorTable.from_dict(raw, base=base)
