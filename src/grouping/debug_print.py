from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from contracts.alignment import GroupingResult
from layout.apply import build_padding_instructions, render_preview
from lexing.text import split_lines


def _load_json(p: Path) -> dict[str, Any]:
    return json.loads(p.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="ae-group-debug-print")
    ap.add_argument("--input", required=True, type=Path, help="Source file the groups were computed for.")
    ap.add_argument("--groups", required=True, type=Path, help="Grouping JSON artifact (ae-group output).")
    ap.add_argument("--no-source", action="store_true", help="Only list groups, skip the painted source.")
    args = ap.parse_args(argv)

    lines = split_lines(args.input.read_text(encoding="utf-8"))
    grouped = GroupingResult.from_dict(_load_json(args.groups))

    print(f"=== {args.input} [{grouped.language}] groups={len(grouped.groups)} ===")
    for g in grouped.groups:
        side = "after" if g.pad_after else "before"
        print(
            f"{g.kind}#{g.ordinal} lines {g.first_line}-{g.last_line} "
            f"target={g.target_column} pad={side}"
        )
        for t in g.tokens:
            print(f"  - L{t.line:>4} col={t.column:>3} depth={t.depth} indent={t.indent} pad={g.padding_for(t)}")

    if not args.no_source:
        print("\n-- SOURCE (· = padding) --")
        for i, line in enumerate(render_preview(lines, build_padding_instructions(grouped.groups))):
            print(f"{i:>4} | {line}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
