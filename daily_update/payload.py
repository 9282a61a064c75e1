"""Payload validation helpers for tool endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from daily_update.errors import INVALID_DATE, INVALID_TYPE, UNKNOWN_FIELD, UpdateError
from daily_update.task_parser import parse_iso_date


def _ensure_payload_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise UpdateError(
            INVALID_TYPE,
            "Payload must be an object.",
            {"type": type(payload).__name__},
        )
    return payload


def _reject_unknown_fields(payload: dict[str, Any], allowed_fields: set[str]) -> None:
    unknown_fields = sorted(set(payload) - allowed_fields)
    if unknown_fields:
        raise UpdateError(
            UNKNOWN_FIELD,
            "Unknown fields are not allowed.",
            {"fields": unknown_fields},
        )


def _read_date(payload: dict[str, Any], key: str) -> date | None:
    raw = payload.get(key)
    if raw is None:
        return None
    parsed = parse_iso_date(raw) if isinstance(raw, str) else None
    if parsed is None:
        raise UpdateError(
            INVALID_DATE,
            f"{key} must be a YYYY-MM-DD date.",
            {key: str(raw)},
        )
    return parsed


def _read_datetime(payload: dict[str, Any], key: str) -> datetime | None:
    raw = payload.get(key)
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        raise UpdateError(
            INVALID_DATE,
            f"{key} must be ISO date-time.",
            {key: raw},
        )


def _read_limit(payload: dict[str, Any], default: int) -> int:
    limit = payload.get("limit", default)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise UpdateError(
            INVALID_TYPE,
            "limit must be a positive integer.",
            {"limit": str(limit)},
        )
    return limit
