"""Versioning routes — drift check, preview, pull, history, restore."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from inspection_ledger.auth.middleware import current_user_id
from inspection_ledger.errors import NotFoundError
from inspection_ledger.models.version import (
    ChangeInfo,
    PreviewData,
    PullHistoryEntry,
    PullResult,
    VersionSnapshot,
)
from inspection_ledger.services.versioning import VersionStore

router = APIRouter(prefix="/inspections/{inspection_id}", tags=["versions"])


class NotesRequest(BaseModel):
    notes: str = ""


def _versions(request: Request) -> VersionStore:
    return VersionStore(request.app.state.store)


@router.get("/changes", response_model=ChangeInfo)
async def check_changes(
    request: Request, inspection_id: str, _user_id: str = Depends(current_user_id)
) -> ChangeInfo:
    return await _versions(request).check_for_changes(inspection_id)


@router.get("/preview", response_model=PreviewData)
async def preview(
    request: Request, inspection_id: str, _user_id: str = Depends(current_user_id)
) -> PreviewData:
    return await _versions(request).generate_preview_data(inspection_id)


@router.post("/pull", response_model=PullResult, status_code=201)
async def pull(
    request: Request,
    inspection_id: str,
    body: NotesRequest,
    user_id: str = Depends(current_user_id),
) -> PullResult:
    """Pull the live inspection into a new version."""
    return await _versions(request).pull_inspection_data(inspection_id, user_id, body.notes)


@router.get("/history", response_model=list[PullHistoryEntry])
async def history(
    request: Request, inspection_id: str, _user_id: str = Depends(current_user_id)
) -> list[PullHistoryEntry]:
    return await _versions(request).get_pull_history(inspection_id)


@router.get("/versions/current", response_model=VersionSnapshot)
async def current_version(
    request: Request, inspection_id: str, _user_id: str = Depends(current_user_id)
) -> VersionSnapshot:
    snapshot = await _versions(request).get_current_version(inspection_id)
    if snapshot is None:
        raise NotFoundError(f"inspection {inspection_id} has not been pulled yet")
    return snapshot


@router.get("/versions/{version}", response_model=VersionSnapshot)
async def version_snapshot(
    request: Request,
    inspection_id: str,
    version: int,
    _user_id: str = Depends(current_user_id),
) -> VersionSnapshot:
    return await _versions(request).get_version_snapshot(inspection_id, version)


@router.post("/versions/{version}/restore", response_model=PullResult, status_code=201)
async def restore(
    request: Request,
    inspection_id: str,
    version: int,
    body: NotesRequest,
    user_id: str = Depends(current_user_id),
) -> PullResult:
    """Restore an archived version as a new version."""
    return await _versions(request).restore_version(inspection_id, version, user_id, body.notes)
