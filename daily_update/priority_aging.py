"""Daily priority aging.

Weekly tasks (recurring, with ``daysOfWeek``) become priority 1 on their
days and pending (``/``) on every other day. Open tasks with a deadline
either wake up from pending on the deadline, or decay from ``start_prio``
by one step per day since ``created``. Decay stops at 1, and a task due
within two days is always 1.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from daily_update.calendar_provider import iso_day_letter
from daily_update.line_edits import LineEdit, replace_span
from daily_update.task_parser import (
    CREATED,
    DAYS_OF_WEEK,
    PENDING_PRIORITY,
    START_PRIO,
    Priority,
    TaskRecord,
    format_priority,
    iter_task_records,
)

logger = logging.getLogger(__name__)

MIN_PRIORITY = 1
DEADLINE_WINDOW_DAYS = 2


def _weekly_priority(record: TaskRecord, today: date) -> Priority | None:
    if not record.recurring:
        return None
    days = record.meta(DAYS_OF_WEEK)
    if days is None:
        return None
    return MIN_PRIORITY if iso_day_letter(today) in days else PENDING_PRIORITY


def _deadline_priority(record: TaskRecord, today: date) -> Priority | None:
    if record.checked or record.deadline is None:
        return None

    if record.priority == PENDING_PRIORITY:
        return MIN_PRIORITY if today >= record.deadline else PENDING_PRIORITY

    start_prio = record.meta(START_PRIO)
    created = record.meta(CREATED)
    if start_prio is None or created is None:
        return None

    days_since_created = (today - created).days
    priority = max(start_prio - days_since_created, MIN_PRIORITY)
    if (record.deadline - today).days <= DEADLINE_WINDOW_DAYS:
        priority = MIN_PRIORITY
    return priority


def target_priority(record: TaskRecord, today: date) -> Priority | None:
    """Return the priority ``record`` should carry on ``today``, or None if untracked."""
    if record.priority is None:
        return None
    weekly = _weekly_priority(record, today)
    if weekly is not None:
        return weekly
    return _deadline_priority(record, today)


def age_priority(record: TaskRecord, today: date) -> Priority | None:
    """Return the new priority, or None when the line should stay as it is."""
    target = target_priority(record, today)
    if target is None or target == record.priority:
        return None
    return target


def aging_edits(lines: Sequence[str], today: date) -> list[LineEdit]:
    edits: list[LineEdit] = []
    for record in iter_task_records(lines):
        new_priority = age_priority(record, today)
        if new_priority is None or record.priority_span is None:
            continue
        text = replace_span(record.text, record.priority_span, format_priority(new_priority))
        logger.debug(
            "line %d: priority %s -> %s",
            record.line_index + 1,
            record.priority,
            new_priority,
        )
        edits.append(LineEdit(record.line_index, text))
    return edits
