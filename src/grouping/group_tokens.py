from __future__ import annotations

from typing import Any, Iterable, Sequence

from contracts.alignment import AlignmentGroup, AnchorRule, GroupingResult
from contracts.tokens import Token, TokenStream

from .anchors import DEFAULT_ANCHOR_TABLE, AnchorTable
from .config import GroupingConfig


def _is_eligible(token: Token, rule: AnchorRule) -> bool:
    # Padding before an anchor that opens the line would change indentation.
    return rule.pad_after or token.column != token.indent


def _split_runs(candidates: Sequence[Token], rule: AnchorRule) -> list[list[Token]]:
    """
    Split line-ordered candidates into maximal runs of consecutive lines
    sharing indent and bracket depth.
    """

    runs: list[list[Token]] = []
    cur: list[Token] = []
    for t in candidates:
        if not _is_eligible(t, rule):
            if cur:
                runs.append(cur)
            cur = []
            continue
        if cur:
            prev = cur[-1]
            if t.line == prev.line + 1 and t.indent == cur[0].indent and t.depth == cur[0].depth:
                cur.append(t)
                continue
            runs.append(cur)
        cur = [t]
    if cur:
        runs.append(cur)
    return runs


def _build_group(run: list[Token], rule: AnchorRule, ordinal: int) -> AlignmentGroup:
    if rule.pad_after:
        target = max(t.end_column for t in run)
    else:
        target = max(t.column for t in run)
    return AlignmentGroup(
        kind=rule.kind,
        ordinal=ordinal,
        tokens=tuple(run),
        target_column=target,
        pad_after=rule.pad_after,
    )


def group_tokens(
    tokens: Iterable[Token],
    rules: Sequence[AnchorRule],
    config: GroupingConfig | None = None,
) -> list[AlignmentGroup]:
    """
    Partition classified tokens into alignment groups.

    Only tokens whose kind has a rule take part. For every kind, the first
    occurrence on each line (or, with `ordinal_groups`, the k-th occurrence)
    forms candidate runs over consecutive lines with equal indent and
    bracket depth. A line without a candidate ends the run.

    Output order: first line, then the kind's position in `rules`, then ordinal.
    """

    cfg = config or GroupingConfig()
    cfg.validate()

    rule_by_kind = {r.kind: r for r in rules}
    kind_rank = {r.kind: i for i, r in enumerate(rules)}

    by_kind: dict[str, dict[int, list[Token]]] = {}
    for t in sorted(tokens, key=lambda t: (t.line, t.column)):
        if t.kind not in rule_by_kind:
            continue
        by_kind.setdefault(t.kind, {}).setdefault(t.line, []).append(t)

    min_len = max(cfg.min_run_length, 1 if cfg.keep_singletons else 2)

    groups: list[AlignmentGroup] = []
    for kind, per_line in by_kind.items():
        rule = rule_by_kind[kind]
        ordinals = max(len(v) for v in per_line.values()) if cfg.ordinal_groups else 1
        for ordinal in range(ordinals):
            candidates = [toks[ordinal] for _, toks in sorted(per_line.items()) if len(toks) > ordinal]
            for run in _split_runs(candidates, rule):
                if len(run) < min_len:
                    continue
                groups.append(_build_group(run, rule, ordinal))

    groups.sort(key=lambda g: (g.first_line, kind_rank[g.kind], g.ordinal))
    return groups


def group_token_stream(
    stream: TokenStream,
    table: AnchorTable = DEFAULT_ANCHOR_TABLE,
    config: GroupingConfig | None = None,
) -> GroupingResult:
    """
    Resolve the stream's language against the anchor table and group its
    tokens. Never fails on input: unsupported languages and unparseable
    streams produce zero groups with a warning in `meta`.
    """

    cfg = config or GroupingConfig()
    cfg.validate()

    language = table.resolve(stream.language)
    rules = table.rules_for(language)
    warnings: list[dict[str, Any]] = []

    if not stream.ok:
        for e in stream.errors or []:
            warnings.append({"code": e.code, "message": e.message, "detail": e.detail})
    if not rules:
        warnings.append(
            {
                "code": "GROUP_UNSUPPORTED_LANGUAGE",
                "message": "No anchor rules configured for language",
                "detail": {"language": language},
            }
        )

    groups = group_tokens(stream.tokens, rules, cfg) if rules else []
    kinds = {r.kind for r in rules}

    meta: dict[str, Any] = {
        "config": cfg.to_dict(),
        "counts": {
            "tokens_in": len(stream.tokens),
            "eligible": sum(1 for t in stream.tokens if t.kind in kinds),
            "groups": len(groups),
            "padded_groups": sum(1 for g in groups if not g.is_noop()),
        },
        "rules": [r.to_dict() for r in rules],
        "warnings": sorted(warnings, key=lambda w: (w["code"], w["message"])),
    }
    return GroupingResult(ok=True, language=language, groups=groups, errors=[], meta=meta)
