from __future__ import annotations

import argparse
import json
from pathlib import Path

from common.logging_service import init_logging
from contracts.tokens import TokenStream

from .anchors import DEFAULT_ANCHOR_TABLE, load_anchor_table
from .artifacts import write_grouping_json_artifact
from .config import GroupingConfig
from .group_tokens import group_token_stream


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ae-group",
        description="Group classified tokens into alignment groups (tokens JSON -> groups JSON).",
    )
    p.add_argument("--tokens", required=True, type=Path, help="Token stream JSON artifact (ae-lex output).")
    p.add_argument("--out", required=True, type=Path, help="Path to write the grouping JSON artifact.")
    p.add_argument("--anchors", type=Path, default=None, help="Anchor table JSON overriding the defaults.")
    p.add_argument("--ordinal-groups", action="store_true", default=False)
    p.add_argument("--drop-singletons", action="store_false", dest="keep_singletons", default=True)
    p.add_argument("--min-run-length", type=_positive_int, default=1)
    p.add_argument("--log-level", default="WARNING")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    init_logging(args.log_level)

    stream = TokenStream.from_dict(json.loads(args.tokens.read_text(encoding="utf-8")))
    table = load_anchor_table(args.anchors) if args.anchors else DEFAULT_ANCHOR_TABLE

    cfg = GroupingConfig(
        ordinal_groups=args.ordinal_groups,
        keep_singletons=args.keep_singletons,
        min_run_length=args.min_run_length,
    )

    result = group_token_stream(stream, table, cfg)
    write_grouping_json_artifact(result=result, out_file=args.out)

    summary = {
        "ok": result.ok,
        "language": result.language,
        **result.meta["counts"],
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
