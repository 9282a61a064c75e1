"""Line-level rewrites applied to a file after its edits are computed."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from daily_update.task_parser import CHECKBOX_PATTERN, Span

_COMPLETION_TOKEN = re.compile(r" ?✅ \d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class LineEdit:
    index: int
    text: str


def replace_span(text: str, span: Span, replacement: str) -> str:
    start, end = span
    return text[:start] + replacement + text[end:]


def uncheck_line(line: str) -> str:
    """Reset ``- [x]`` to ``- [ ]`` and drop the completion date token."""
    body = line.rstrip("\r")
    ending = line[len(body) :]
    unchecked = CHECKBOX_PATTERN.sub("- [ ]", body, count=1)
    return _COMPLETION_TOKEN.sub("", unchecked, count=1).rstrip() + ending


def apply_edits(lines: Sequence[str], edits: Iterable[LineEdit]) -> tuple[list[str], int]:
    """Return a new line list with ``edits`` applied and the number of lines changed."""
    updated = list(lines)
    touched: set[int] = set()
    for edit in edits:
        if updated[edit.index] != edit.text:
            updated[edit.index] = edit.text
            touched.add(edit.index)
    changed = sum(1 for index in touched if updated[index] != lines[index])
    return updated, changed
