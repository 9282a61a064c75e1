"""Shared router for tool endpoints."""

from __future__ import annotations

from fastapi import APIRouter

update_router = APIRouter()
