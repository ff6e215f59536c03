from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.alignment import GroupingResult


def serialize_grouping_result(result: GroupingResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_grouping_json_artifact(*, result: GroupingResult, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_grouping_result(result), encoding="utf-8")
