"""Runs the aging and streak passes over every to-do file in the vault."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence, TypeVar

from daily_update.activity import append_activity, build_activity_entry
from daily_update.calendar_provider import SystemCalendar, yesterday
from daily_update.config import AppConfig
from daily_update.line_edits import LineEdit, apply_edits
from daily_update.notices import (
    PRIORITIES_UPDATED,
    STREAKS_UPDATED,
    UPDATE_FAILED_NOTICE,
    Notice,
    NoticeBoard,
)
from daily_update.priority_aging import aging_edits
from daily_update.streaks import streak_edits
from daily_update.vault import FileVault
from daily_update.vault_git import VaultHistory

logger = logging.getLogger(__name__)

UPDATE_PRIORITIES = "update_priorities"
UPDATE_STREAKS = "update_streaks"

T = TypeVar("T")
EditPlanner = Callable[[Sequence[str], date], list[LineEdit]]


class Calendar(Protocol):
    def today(self) -> date: ...


@dataclass
class PassSummary:
    operation: str
    files_scanned: int = 0
    files_changed: list[str] = field(default_factory=list)
    lines_changed: int = 0
    commit_sha: str | None = None
    notices: list[Notice] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "filesScanned": self.files_scanned,
            "filesChanged": list(self.files_changed),
            "linesChanged": self.lines_changed,
            "commitSha": self.commit_sha,
        }


@dataclass(frozen=True)
class RunSummary:
    priorities: PassSummary
    streaks: PassSummary

    @property
    def notices(self) -> list[Notice]:
        return self.priorities.notices + self.streaks.notices

    def to_dict(self) -> dict[str, Any]:
        return {"priorities": self.priorities.to_dict(), "streaks": self.streaks.to_dict()}


def _plan_streaks(lines: Sequence[str], today: date) -> list[LineEdit]:
    return streak_edits(lines, today, yesterday(today))


class DailyUpdater:
    """Applies the daily passes to a vault.

    Each pass reads every candidate file fresh, so the streak pass sees the
    text the aging pass just wrote. Storage and git errors propagate and stop
    the run; files written before the error stay written.
    """

    def __init__(
        self,
        vault: FileVault,
        calendar: Calendar,
        notices: NoticeBoard,
        *,
        history: VaultHistory | None = None,
        record_activity: bool = True,
    ) -> None:
        self.vault = vault
        self.calendar = calendar
        self.notices = notices
        self.history = history
        self.record_activity = record_activity

    def update_priorities(self) -> PassSummary:
        summary = self._run_pass(UPDATE_PRIORITIES, aging_edits, "Updated priorities in %s")
        summary.notices.append(self.notices.post(PRIORITIES_UPDATED))
        return summary

    def update_streaks(self) -> PassSummary:
        summary = self._run_pass(UPDATE_STREAKS, _plan_streaks, "Updated streaks in %s")
        summary.notices.append(self.notices.post(STREAKS_UPDATED))
        return summary

    def run(self) -> RunSummary:
        priorities = self.update_priorities()
        streaks = self.update_streaks()
        return RunSummary(priorities=priorities, streaks=streaks)

    def _run_pass(self, operation: str, plan: EditPlanner, message: str) -> PassSummary:
        logger.info("Starting %s", operation)
        today = self.calendar.today()
        summary = PassSummary(operation=operation)
        written: list[tuple[Path, int]] = []

        for path in self.vault.list_candidate_files():
            summary.files_scanned += 1
            lines = self.vault.read(path).split("\n")
            updated, changed = apply_edits(lines, plan(lines, today))
            if not changed:
                continue
            self.vault.write(path, "\n".join(updated))
            relative = self.vault.relative(path)
            logger.info(message, relative)
            summary.files_changed.append(relative)
            summary.lines_changed += changed
            written.append((path, changed))

        if written and self.history is not None:
            summary.commit_sha = self.history.commit([path for path, _ in written], operation)

        if self.record_activity:
            for path, changed in written:
                entry = build_activity_entry(
                    operation,
                    self.vault.relative(path),
                    f"{changed} line(s) changed",
                    summary.commit_sha,
                )
                append_activity(self.vault.root, entry)

        return summary


def build_updater(
    config: AppConfig,
    notices: NoticeBoard,
    calendar: Calendar | None = None,
) -> DailyUpdater:
    history = VaultHistory(config.vault_path) if config.commit_changes else None
    return DailyUpdater(
        FileVault(config.vault_path, config.file_prefix),
        calendar or SystemCalendar(),
        notices,
        history=history,
    )


def run_guarded(action: Callable[[], T], notices: NoticeBoard) -> T | None:
    """Top-level trigger handler: any failure is logged and reported once."""
    try:
        return action()
    except Exception:
        logger.exception("Daily update failed")
        notices.post(UPDATE_FAILED_NOTICE, level="error")
        return None
