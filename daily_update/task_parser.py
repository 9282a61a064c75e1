"""Parse task lines and their indented metadata blocks into task records.

A task line starts with a checkbox (``- [ ]`` or ``- [x]``). Every other
field is an independent token anywhere on the line:

- priority ``[🎯:: 3]`` or the pending sentinel ``[🎯:: /]``
- deadline ``[⏳:: 2024-01-31]``
- recurrence marker ``🔁``
- completion date ``✅ 2024-01-30``

The metadata block is the run of indented list items directly below the
task line. Each item holds at most one ``key:: value`` pair; keys may appear
in any order and unknown items are skipped.

Nothing in this module raises on malformed input. A token that does not
parse is reported as absent so the rules that need it do not apply.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterator, Sequence

from daily_update.calendar_provider import DAY_LETTERS

PENDING_PRIORITY = "/"
RECURRENCE_MARKER = "🔁"

START_PRIO = "start_prio"
CREATED = "created"
DAYS_OF_WEEK = "daysOfWeek"
STREAK = "streak"
STREAK_START = "streak_start"
METADATA_KEYS = {
    key.lower(): key for key in (START_PRIO, CREATED, DAYS_OF_WEEK, STREAK, STREAK_START)
}

CHECKBOX_PATTERN = re.compile(r"^- \[(?P<mark>[ x])\]")
PRIORITY_PATTERN = re.compile(r"\[🎯::\s*(?P<value>[^\]\s]+)\s*\]")
DEADLINE_PATTERN = re.compile(r"\[⏳::\s*(?P<value>[^\]\s]+)\s*\]")
COMPLETION_PATTERN = re.compile(r"✅ (?P<value>\d{4}-\d{2}-\d{2})")
METADATA_LINE_PATTERN = re.compile(r"^[ \t]+- ")
METADATA_FIELD_PATTERN = re.compile(
    r"^[ \t]+-+\s*(?P<key>[A-Za-z_]+)::[ \t]*(?P<value>.*?)\s*$"
)
_ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
_DIGITS_PATTERN = re.compile(r"\d+")

Priority = int | str
Span = tuple[int, int]


@dataclass(frozen=True)
class MetadataField:
    key: str
    value: Any
    line_index: int
    value_span: Span


@dataclass(frozen=True)
class TaskRecord:
    """One task line plus the metadata harvested from the block below it."""

    line_index: int
    text: str
    checked: bool
    priority: Priority | None = None
    priority_span: Span | None = None
    deadline: date | None = None
    recurring: bool = False
    completion_date: date | None = None
    metadata: dict[str, MetadataField] = field(default_factory=dict)
    block_end: int = 0

    def meta(self, key: str) -> Any | None:
        entry = self.metadata.get(key)
        return entry.value if entry is not None else None


def parse_iso_date(raw: str) -> date | None:
    if not _ISO_DATE_PATTERN.fullmatch(raw):
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_priority_value(raw: str) -> Priority | None:
    if raw == PENDING_PRIORITY:
        return PENDING_PRIORITY
    if not _DIGITS_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    return value if value >= 1 else None


def format_priority(priority: Priority) -> str:
    return str(priority)


def parse_checkbox(line: str) -> bool | None:
    """Return the checked state, or None when the line is not a task line."""
    match = CHECKBOX_PATTERN.match(line)
    if not match:
        return None
    return match.group("mark") == "x"


def parse_priority(line: str) -> tuple[Priority, Span] | None:
    match = PRIORITY_PATTERN.search(line)
    if not match:
        return None
    value = parse_priority_value(match.group("value"))
    if value is None:
        return None
    return value, match.span("value")


def parse_deadline(line: str) -> date | None:
    match = DEADLINE_PATTERN.search(line)
    if not match:
        return None
    return parse_iso_date(match.group("value"))


def is_recurring(line: str) -> bool:
    return RECURRENCE_MARKER in line


def parse_completion_date(line: str) -> date | None:
    match = COMPLETION_PATTERN.search(line)
    if not match:
        return None
    return parse_iso_date(match.group("value"))


def parse_days_of_week(raw: str) -> frozenset[str] | None:
    """Parse ``W, s,U`` into ``{"W", "S", "U"}``; any unknown letter rejects the list."""
    compact = re.sub(r"\s+", "", raw)
    letters = [part.upper() for part in compact.split(",") if part]
    if not letters or any(letter not in DAY_LETTERS for letter in letters):
        return None
    return frozenset(letters)


def _parse_metadata_value(key: str, raw: str) -> Any | None:
    if key in (START_PRIO, STREAK):
        return int(raw) if _DIGITS_PATTERN.fullmatch(raw) else None
    if key in (CREATED, STREAK_START):
        return parse_iso_date(raw)
    if key == DAYS_OF_WEEK:
        return parse_days_of_week(raw)
    return None


def parse_metadata_line(line: str, line_index: int) -> MetadataField | None:
    match = METADATA_FIELD_PATTERN.match(line)
    if not match:
        return None
    key = METADATA_KEYS.get(match.group("key").lower())
    if key is None:
        return None
    value = _parse_metadata_value(key, match.group("value"))
    if value is None:
        return None
    return MetadataField(
        key=key, value=value, line_index=line_index, value_span=match.span("value")
    )


def scan_metadata_block(
    lines: Sequence[str], start: int
) -> tuple[dict[str, MetadataField], int]:
    """Collect metadata from ``lines[start:]`` until the first non-item line.

    Returns the fields (first occurrence of each key wins) and the index
    one past the end of the block.
    """
    fields: dict[str, MetadataField] = {}
    index = start
    while index < len(lines) and METADATA_LINE_PATTERN.match(lines[index]):
        entry = parse_metadata_line(lines[index], index)
        if entry is not None:
            fields.setdefault(entry.key, entry)
        index += 1
    return fields, index


def parse_task(lines: Sequence[str], index: int) -> TaskRecord | None:
    """Parse ``lines[index]`` and its metadata block, or return None for non-tasks."""
    line = lines[index]
    checked = parse_checkbox(line)
    if checked is None:
        return None

    priority = parse_priority(line)
    metadata, block_end = scan_metadata_block(lines, index + 1)
    return TaskRecord(
        line_index=index,
        text=line,
        checked=checked,
        priority=priority[0] if priority else None,
        priority_span=priority[1] if priority else None,
        deadline=parse_deadline(line),
        recurring=is_recurring(line),
        completion_date=parse_completion_date(line) if checked else None,
        metadata=metadata,
        block_end=block_end,
    )


def iter_task_records(lines: Sequence[str]) -> Iterator[TaskRecord]:
    for index in range(len(lines)):
        record = parse_task(lines, index)
        if record is not None:
            yield record
