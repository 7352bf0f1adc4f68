"""Audit log schemas."""

from typing import Any

from pydantic import BaseModel


class LogEntryResponse(BaseModel):
    id: int
    timestamp: str
    level: str
    user_id: int | None
    username: str | None
    action: str
    details: Any = None
