"""Data endpoints: JSON import and audit log access."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from basis_planner.api.auth import require_admin
from basis_planner.api.deps import get_audit_log, get_importer
from basis_planner.schemas.import_data import ImportDocument
from basis_planner.schemas.logs import LogEntryResponse
from basis_planner.services.audit import AuditLog
from basis_planner.services.importer import JsonImporter
from basis_planner.services.sessions import CurrentUser

router = APIRouter(tags=["data"])
logger = logging.getLogger(__name__)


@router.post("/import/json")
async def import_json(
    document: ImportDocument,
    importer: JsonImporter = Depends(get_importer),
    audit: AuditLog = Depends(get_audit_log),
    admin: CurrentUser = Depends(require_admin),
):
    """Replace settings, activity types and the landscape tree in one transaction."""
    summary = await importer.run(document)
    await audit.record(admin.id, admin.username, "IMPORT_JSON", asdict(summary))
    return {"success": True, "message": "Daten erfolgreich importiert", "summary": asdict(summary)}


@router.get("/logs")
async def get_logs(
    audit: AuditLog = Depends(get_audit_log),
    _admin: CurrentUser = Depends(require_admin),
):
    return {"logs": await run_in_threadpool(audit.read)}


@router.get("/logs/entries", response_model=list[LogEntryResponse])
async def get_log_entries(
    audit: AuditLog = Depends(get_audit_log),
    _admin: CurrentUser = Depends(require_admin),
):
    """Parsed audit records, oldest first; lines that do not parse are skipped."""
    return [asdict(entry) for entry in await run_in_threadpool(audit.entries)]
