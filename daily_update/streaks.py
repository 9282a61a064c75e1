"""Streak maintenance for recurring tasks.

A streak is stored as ``streak:: N`` and ``streak_start:: YYYY-MM-DD`` in the
task's metadata block, meaning N consecutive days starting on streak_start.
The last counted day is therefore ``streak_start + (N - 1)``.

Each morning a box checked yesterday is absorbed into the streak and
unchecked again for today. A box checked before yesterday, or left unchecked
past the last counted day, breaks the streak: it restarts at zero from today.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from daily_update.line_edits import LineEdit, replace_span, uncheck_line
from daily_update.task_parser import STREAK, STREAK_START, TaskRecord, iter_task_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakUpdate:
    checked: bool
    streak: int
    streak_start: date


def last_done(streak: int, streak_start: date) -> date:
    return streak_start + timedelta(days=streak - 1)


def compute_streak(record: TaskRecord, today: date, yesterday: date) -> StreakUpdate | None:
    """Return the record's new checkbox and streak state, or None when nothing changes."""
    if not record.recurring:
        return None
    streak = record.meta(STREAK)
    streak_start = record.meta(STREAK_START)
    if streak is None or streak_start is None:
        return None

    if record.checked:
        done = record.completion_date
        if done is None or done == today:
            return None
        if done == yesterday:
            return StreakUpdate(checked=False, streak=streak + 1, streak_start=streak_start)
        # Completed before yesterday, or dated in the future.
        return StreakUpdate(checked=False, streak=0, streak_start=today)

    missed_days = (yesterday - last_done(streak, streak_start)).days
    if missed_days >= 1 and streak != 0:
        return StreakUpdate(checked=False, streak=0, streak_start=today)
    return None


def streak_edits(lines: Sequence[str], today: date, yesterday: date) -> list[LineEdit]:
    edits: list[LineEdit] = []
    for record in iter_task_records(lines):
        update = compute_streak(record, today, yesterday)
        if update is None:
            continue

        if record.checked and not update.checked:
            edits.append(LineEdit(record.line_index, uncheck_line(record.text)))

        streak_field = record.metadata[STREAK]
        if update.streak != streak_field.value:
            edits.append(
                LineEdit(
                    streak_field.line_index,
                    replace_span(
                        lines[streak_field.line_index],
                        streak_field.value_span,
                        str(update.streak),
                    ),
                )
            )

        start_field = record.metadata[STREAK_START]
        if update.streak_start != start_field.value:
            edits.append(
                LineEdit(
                    start_field.line_index,
                    replace_span(
                        lines[start_field.line_index],
                        start_field.value_span,
                        update.streak_start.isoformat(),
                    ),
                )
            )

        logger.debug(
            "line %d: streak %s -> %s (start %s)",
            record.line_index + 1,
            streak_field.value,
            update.streak,
            update.streak_start.isoformat(),
        )
    return edits
