from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.tokens import TokenStream


def serialize_token_stream(stream: TokenStream) -> str:
    """
    Stable JSON serialization for token stream artifacts.
    """

    payload: dict[str, Any] = stream.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_token_stream_json(*, stream: TokenStream, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_token_stream(stream), encoding="utf-8")
