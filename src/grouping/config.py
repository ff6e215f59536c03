from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class GroupingConfig:
    """
    Deterministic grouping parameters.

    Defaults are explicit constants (no time/randomness).
    """

    # Group the k-th occurrence of a kind with the k-th occurrences on adjacent lines.
    # Off: only the first occurrence per line is aligned.
    ordinal_groups: bool = False

    # Singleton runs carry zero padding; keeping them makes every eligible token visible in artifacts.
    keep_singletons: bool = True

    min_run_length: int = 1

    def validate(self) -> None:
        if self.min_run_length < 1:
            raise ValueError("min_run_length must be >= 1")

    def to_dict(self) -> dict[str, Any]:
        return {
            "ordinal_groups": self.ordinal_groups,
            "keep_singletons": self.keep_singletons,
            "min_run_length": self.min_run_length,
        }
