from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def init_logging(level: str | int = "WARNING") -> None:
    """
    Configure the root logger for command-line entry points.

    Library modules only create module loggers; handlers are installed here,
    once, by whichever CLI runs.
    """

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)
    if not any(getattr(h, "_align_engine_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._align_engine_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
