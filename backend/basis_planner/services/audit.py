"""Append-only audit trail of mutating actions, kept in a size-bounded text file.

Each record is one line::

    [2026-03-01T08:15:00.123456+00:00] [INFO] [admin#1] LANDSCAPE_CREATE: {"id": 3, "name": "ERP"}

When the file reaches ``max_bytes`` the oldest 20% of lines are dropped and the
remainder is rewritten before the next line is appended. Write failures never
reach the caller; they are reported on the ``logging`` error channel. Request
handlers call ``record`` after their transaction has committed.
"""

import json
import logging
import re
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

LOG_LEVELS = ("INFO", "WARN", "ERROR")
ROTATION_DROP_FRACTION = 0.2
SYSTEM_ACTOR = "SYSTEM"

_LINE_RE = re.compile(
    r"^\[(?P<timestamp>[^\]]+)\] \[(?P<level>[A-Z]+)\] "
    r"\[(?P<username>[^\]#]*)(?:#(?P<user_id>\d+))?\] (?P<action>[A-Z0-9_]+):(?: (?P<details>.*))?$"
)


@dataclass
class LogEntry:
    timestamp: str
    level: str
    user_id: int | None
    username: str | None
    action: str
    details: Any = None
    # Position in the current file; shifts when rotation drops old lines
    id: int | None = None

    def format_line(self) -> str:
        actor = self.username or SYSTEM_ACTOR
        if self.user_id is not None:
            actor = f"{actor}#{self.user_id}"
        payload = json.dumps(self.details, ensure_ascii=False, default=str) if self.details is not None else ""
        return f"[{self.timestamp}] [{self.level}] [{actor}] {self.action}: {payload}".rstrip() + "\n"

    @classmethod
    def parse_line(cls, line: str, line_no: int | None = None) -> "LogEntry | None":
        match = _LINE_RE.match(line.rstrip("\n"))
        if not match:
            return None
        details = match.group("details")
        if details:
            try:
                details = json.loads(details)
            except json.JSONDecodeError:
                pass
        username = match.group("username")
        user_id = match.group("user_id")
        return cls(
            timestamp=match.group("timestamp"),
            level=match.group("level"),
            user_id=int(user_id) if user_id else None,
            username=None if username == SYSTEM_ACTOR else username,
            action=match.group("action"),
            details=details or None,
            id=line_no,
        )


class AuditLog:
    def __init__(self, path: str | Path, max_bytes: int = 1024 * 1024):
        self.path = Path(path)
        self.max_bytes = max_bytes
        self._lock = threading.Lock()

    def write(
        self,
        user_id: int | None,
        username: str | None,
        action: str,
        details: Any = None,
        level: str = "INFO",
    ) -> None:
        """Append one entry synchronously. Never raises."""
        entry = LogEntry(
            timestamp=datetime.now(UTC).isoformat(),
            level=level if level in LOG_LEVELS else "INFO",
            user_id=user_id,
            username=username,
            action=action,
            details=details,
        )
        try:
            with self._lock:
                self._rotate_if_needed()
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(entry.format_line())
        except Exception:
            logger.exception("Audit log write failed for action %s", action)

    async def record(
        self,
        user_id: int | None,
        username: str | None,
        action: str,
        details: Any = None,
        level: str = "INFO",
    ) -> None:
        """Append one entry from a worker thread."""
        await run_in_threadpool(self.write, user_id, username, action, details, level)

    def _rotate_if_needed(self) -> None:
        if not self.path.exists() or self.path.stat().st_size < self.max_bytes:
            return
        lines = self.path.read_text(encoding="utf-8").split("\n")
        drop = int(len(lines) * ROTATION_DROP_FRACTION)
        self.path.write_text("\n".join(lines[drop:]), encoding="utf-8")
        logger.info("Audit log rotated, dropped %d oldest lines", drop)

    def read(self) -> str:
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8")

    def entries(self) -> list[LogEntry]:
        parsed = (
            LogEntry.parse_line(line, line_no)
            for line_no, line in enumerate(self.read().splitlines(), start=1)
        )
        return [entry for entry in parsed if entry is not None]
