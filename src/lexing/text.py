from __future__ import annotations


def detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def split_lines(text: str) -> list[str]:
    """
    Split source text into lines without their terminators.

    A trailing newline yields a final empty line, so `join_lines` restores the
    text exactly (modulo mixed line endings, which become the dominant one).
    """

    return text.replace("\r\n", "\n").split("\n")


def join_lines(lines: list[str], newline: str = "\n") -> str:
    return newline.join(lines)
