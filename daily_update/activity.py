"""Per-file activity log kept inside the vault."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

ACTIVITY_DIRNAME = ".daily-update"
ACTIVITY_LOG_FILENAME = "activity.log"


def activity_log_path(vault_root: Path) -> Path:
    return vault_root / ACTIVITY_DIRNAME / ACTIVITY_LOG_FILENAME


def append_activity(vault_root: Path, entry: dict[str, Any]) -> None:
    log_path = activity_log_path(vault_root)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(entry, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    with log_path.open("a", encoding="utf-8") as log_file:
        log_file.write(payload + "\n")
        log_file.flush()
        os.fsync(log_file.fileno())


def build_activity_entry(
    operation: str,
    relative_path: str,
    summary: str,
    commit_sha: str | None,
) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "operation": operation,
        "path": relative_path,
        "summary": summary,
        "commitSha": commit_sha,
    }


def read_activity_entries(
    vault_root: Path, since: datetime | None, limit: int
) -> list[dict[str, Any]]:
    log_path = activity_log_path(vault_root)
    if not log_path.exists():
        return []
    if since is not None and since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)

    entries: list[dict[str, Any]] = []
    for raw in log_path.read_bytes().splitlines():
        try:
            entry = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            continue
        if not isinstance(entry, dict):
            continue
        if since:
            try:
                entry_time = datetime.fromisoformat(entry.get("timestamp"))
            except (TypeError, ValueError):
                entry_time = None
            if entry_time is not None and entry_time.tzinfo is None:
                entry_time = entry_time.replace(tzinfo=timezone.utc)
            if entry_time and entry_time < since:
                continue
        entries.append(entry)
    return entries[-limit:]
