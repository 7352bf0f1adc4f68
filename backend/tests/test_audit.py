import sqlite3
from contextlib import closing

import pytest
from fastapi.testclient import TestClient

from basis_planner.services.audit import AuditLog, LogEntry


def test_line_format_and_parse():
    entry = LogEntry(
        timestamp="2026-03-01T08:15:00+00:00",
        level="INFO",
        user_id=1,
        username="admin",
        action="LANDSCAPE_CREATE",
        details={"id": 3, "name": "ERP"},
    )
    line = entry.format_line()
    assert line == '[2026-03-01T08:15:00+00:00] [INFO] [admin#1] LANDSCAPE_CREATE: {"id": 3, "name": "ERP"}\n'
    assert LogEntry.parse_line(line) == entry


def test_line_without_user_or_details():
    entry = LogEntry(
        timestamp="2026-03-01T08:15:00+00:00",
        level="WARN",
        user_id=None,
        username=None,
        action="STARTUP",
    )
    line = entry.format_line()
    assert line == "[2026-03-01T08:15:00+00:00] [WARN] [SYSTEM] STARTUP:\n"
    assert LogEntry.parse_line(line) == entry


def test_parse_rejects_garbage():
    assert LogEntry.parse_line("not an audit line") is None


def test_write_appends(tmp_path):
    log = AuditLog(tmp_path / "server.log")
    log.write(1, "admin", "LOGIN")
    log.write(None, "mallory", "LOGIN_FAILED", level="WARN")
    log.write(1, "admin", "SID_UPDATE", {"id": 4, "fields": ["notes"]}, level="DEBUG")

    entries = log.entries()
    assert [e.action for e in entries] == ["LOGIN", "LOGIN_FAILED", "SID_UPDATE"]
    assert entries[1].level == "WARN"
    assert entries[1].user_id is None
    assert entries[1].username == "mallory"
    # Unknown levels fall back to INFO
    assert entries[2].level == "INFO"
    assert entries[2].details == {"id": 4, "fields": ["notes"]}


def test_rotation_drops_oldest_lines(tmp_path):
    path = tmp_path / "server.log"
    path.write_text("".join(f"old line {i:03d}\n" for i in range(100)), encoding="utf-8")
    log = AuditLog(path, max_bytes=100)

    log.write(1, "admin", "LOGIN")

    lines = path.read_text(encoding="utf-8").splitlines()
    # 101 segments including the trailing empty one, so 20 are dropped
    assert lines[0] == "old line 020"
    assert lines[-2] == "old line 099"
    assert LogEntry.parse_line(lines[-1]).action == "LOGIN"
    assert len(lines) == 81


def test_small_file_is_not_rotated(tmp_path):
    path = tmp_path / "server.log"
    path.write_text("old line\n", encoding="utf-8")
    AuditLog(path).write(1, "admin", "LOGIN")
    assert path.read_text(encoding="utf-8").splitlines()[0] == "old line"


def test_write_failure_is_swallowed(tmp_path):
    # A directory cannot be opened for appending
    log = AuditLog(tmp_path)
    log.write(1, "admin", "LOGIN")


def test_missing_file_reads_empty(tmp_path):
    log = AuditLog(tmp_path / "absent.log")
    assert log.read() == ""
    assert log.entries() == []


def test_mutations_are_audited(admin_client: TestClient, app_settings):
    admin_client.post("/api/landscapes", json={"name": "ERP"})
    admin_client.post("/api/users", json={"username": "anna", "password": "anna-secret"})

    entries = AuditLog(app_settings.AUDIT_LOG_FILE).entries()
    actions = [e.action for e in entries]
    assert actions == ["LOGIN", "LANDSCAPE_CREATE", "USER_CREATE"]
    assert entries[1].username == "admin"
    assert entries[1].details["name"] == "ERP"
    assert "anna-secret" not in AuditLog(app_settings.AUDIT_LOG_FILE).read()


def test_logs_endpoint(admin_client: TestClient, viewer: dict):
    r = admin_client.get("/api/logs")
    assert r.status_code == 200
    assert "USER_CREATE" in r.json()["logs"]

    admin_client.cookies.clear()
    admin_client.post("/api/auth/login", json={"username": "viewer", "password": viewer["password"]})
    assert admin_client.get("/api/logs").status_code == 403


@pytest.mark.asyncio
async def test_record_writes_from_worker_thread(tmp_path):
    log = AuditLog(tmp_path / "server.log")
    await log.record(2, "maria", "SETTINGS_UPDATE", {"year": "2027"})
    assert [(e.id, e.username, e.details) for e in log.entries()] == [(1, "maria", {"year": "2027"})]


def test_entries_are_numbered_by_line(tmp_path):
    path = tmp_path / "server.log"
    path.write_text("garbage\n", encoding="utf-8")
    log = AuditLog(path)
    log.write(1, "admin", "LOGIN")
    log.write(1, "admin", "LOGOUT")

    assert [(e.id, e.action) for e in log.entries()] == [(2, "LOGIN"), (3, "LOGOUT")]


def test_audit_line_follows_commit(admin_client: TestClient, app_settings, monkeypatch):
    committed_at_write = []
    write = AuditLog.write

    def write_and_inspect(self, user_id, username, action, details=None, level="INFO"):
        if action == "LANDSCAPE_CREATE":
            with closing(sqlite3.connect(app_settings.DATABASE_PATH)) as conn:
                committed_at_write.append(conn.execute("SELECT name FROM landscapes").fetchall())
        write(self, user_id, username, action, details, level)

    monkeypatch.setattr(AuditLog, "write", write_and_inspect)
    admin_client.post("/api/landscapes", json={"name": "ERP"})

    assert committed_at_write == [[("ERP",)]]


def test_failed_change_leaves_no_audit_line(admin_client: TestClient, app_settings):
    assert admin_client.delete("/api/landscapes/999").status_code == 404
    actions = [e.action for e in AuditLog(app_settings.AUDIT_LOG_FILE).entries()]
    assert actions == ["LOGIN"]


def test_log_entries_endpoint(admin_client: TestClient):
    admin_client.post("/api/landscapes", json={"name": "ERP"})

    r = admin_client.get("/api/logs/entries")
    assert r.status_code == 200
    entries = r.json()
    assert [(e["id"], e["action"]) for e in entries] == [(1, "LOGIN"), (2, "LANDSCAPE_CREATE")]
    assert entries[1]["username"] == "admin"
    assert entries[1]["details"]["name"] == "ERP"
