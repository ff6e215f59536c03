from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from common.logging_service import init_logging
from grouping.anchors import DEFAULT_ANCHOR_TABLE, load_anchor_table
from grouping.config import GroupingConfig
from lexing.text import split_lines

from .apply import render_preview
from .module import FormatConfig, format_text, preview_lines

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ae-format",
        description="Canonicalize and column-align anchor operators (colons, assignments, logical operators).",
    )
    p.add_argument("files", nargs="+", type=Path, help="Source files to format.")
    p.add_argument(
        "--language",
        default=None,
        help="Language id or extension for every file (default: inferred per file from its extension).",
    )
    p.add_argument("--anchors", type=Path, default=None, help="Anchor table JSON overriding the defaults.")
    p.add_argument("--ordinal-groups", action="store_true", default=False)

    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--check", action="store_true", help="Exit 1 if any file would change; write nothing.")
    mode.add_argument("--write", action="store_true", help="Rewrite files in place.")
    mode.add_argument("--preview", action="store_true", help="Print files with '·' marking preview padding.")

    p.add_argument("--log-level", default="WARNING")
    return p


def _read(path: Path) -> str:
    # Bytes keep CRLF line endings intact.
    return path.read_bytes().decode("utf-8")


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    init_logging(args.log_level)

    table = load_anchor_table(args.anchors) if args.anchors else DEFAULT_ANCHOR_TABLE
    cfg = FormatConfig(grouping=GroupingConfig(ordinal_groups=args.ordinal_groups))

    failed = False
    would_change: list[Path] = []

    for path in args.files:
        language = args.language or path.suffix
        text = _read(path)

        if args.preview:
            lines = split_lines(text)
            preview = preview_lines(lines, language=language, table=table, config=cfg)
            if not preview.ok:
                failed = True
                for e in preview.errors:
                    print(f"{path}: {e.code}: {e.message}", file=sys.stderr)
                continue
            sys.stdout.write("\n".join(render_preview(lines, preview.instructions)))
            continue

        new_text, result = format_text(text, language=language, table=table, config=cfg)
        if not result.ok:
            failed = True
            for e in result.errors:
                print(f"{path}: {e.code}: {e.message}", file=sys.stderr)
            continue

        if args.check:
            if result.changed:
                would_change.append(path)
                print(f"would align {path}")
        elif args.write:
            if result.changed:
                path.write_bytes(new_text.encode("utf-8"))
                logger.info("aligned %s (%s)", path, result.meta.get("counts"))
                print(f"aligned {path}")
        else:
            sys.stdout.write(new_text)

    if failed:
        return 2
    if args.check and would_change:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
