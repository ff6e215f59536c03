from __future__ import annotations

import argparse
from pathlib import Path

from common.logging_service import init_logging

from .artifacts import write_token_stream_json
from .contracts import LexConfig
from .module import run_lex_on_file


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ae-lex",
        description="Tokenize a source file into classified alignment tokens (JSON).",
    )
    p.add_argument("--input", required=True, type=Path, help="Source file to tokenize.")
    p.add_argument(
        "--language",
        default=None,
        help="Language id or extension (default: inferred from the input file extension).",
    )
    p.add_argument("--out", required=True, type=Path, help="Output token stream JSON file.")
    p.add_argument("--start-line", type=int, default=0, help="First line (0-based, inclusive).")
    p.add_argument("--end-line", type=int, default=None, help="Last line (0-based, inclusive).")
    p.add_argument("--log-level", default="WARNING")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    init_logging(args.log_level)

    config = LexConfig(
        language=args.language or args.input.suffix or "plaintext",
        start_line=args.start_line,
        end_line=args.end_line,
    )
    stream = run_lex_on_file(config=config, source_file=args.input)
    write_token_stream_json(stream=stream, out_file=args.out)

    return 0 if stream.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
