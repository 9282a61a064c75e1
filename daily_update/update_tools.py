"""Tool endpoints that trigger and inspect daily updates."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import Request

from daily_update.activity import read_activity_entries
from daily_update.calendar_provider import FixedCalendar
from daily_update.config import AppConfig
from daily_update.errors import NOT_READY, UPDATE_FAILED, UpdateError, success_response
from daily_update.notices import NoticeBoard
from daily_update.orchestrator import DailyUpdater, build_updater, run_guarded
from daily_update.payload import (
    _ensure_payload_dict,
    _read_date,
    _read_datetime,
    _read_limit,
    _reject_unknown_fields,
)
from daily_update.router import update_router


def get_request_config(request: Request) -> AppConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise UpdateError(NOT_READY, "Service configuration is not loaded.")
    return config


def get_request_notices(request: Request) -> NoticeBoard:
    notices = getattr(request.app.state, "notices", None)
    if notices is None:
        notices = NoticeBoard()
        request.app.state.notices = notices
    return notices


def _run_tool(
    payload: Any,
    request: Request,
    operation: str,
    action: Callable[[DailyUpdater], Any],
) -> dict[str, Any]:
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"today"})
    today = _read_date(payload, "today")

    notices = get_request_notices(request)
    calendar = FixedCalendar(today) if today is not None else None
    updater = build_updater(get_request_config(request), notices, calendar)

    summary = run_guarded(lambda: action(updater), notices)
    if summary is None:
        raise UpdateError(
            UPDATE_FAILED,
            "Daily update failed.",
            {"operation": operation},
        )
    data = summary.to_dict()
    data["notices"] = [notice.to_dict() for notice in summary.notices]
    return success_response(data)


@update_router.post("/tool:run_daily_update")
def run_daily_update(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Age priorities, then maintain streaks, across all to-do files."""
    return _run_tool(payload, request, "run_daily_update", DailyUpdater.run)


@update_router.post("/tool:update_priorities")
def update_priorities(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Run only the priority aging pass."""
    return _run_tool(payload, request, "update_priorities", DailyUpdater.update_priorities)


@update_router.post("/tool:update_streaks")
def update_streaks(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Run only the streak pass."""
    return _run_tool(payload, request, "update_streaks", DailyUpdater.update_streaks)


@update_router.post("/tool:list_notices")
def list_notices(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"limit"})
    limit = _read_limit(payload, 20)
    notices = get_request_notices(request).recent(limit)
    return success_response({"notices": [notice.to_dict() for notice in notices]})


@update_router.post("/tool:read_activity_log")
def read_activity_log(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Read per-file entries from the vault's activity log."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"limit", "since"})
    limit = _read_limit(payload, 50)
    since = _read_datetime(payload, "since")

    vault_root = get_request_config(request).vault_path
    entries = read_activity_entries(vault_root, since, limit)
    return success_response({"entries": entries})
