"""Release routes — create, list, deliver, revert, edit block."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from inspection_ledger.auth.middleware import current_user_id
from inspection_ledger.models.release import Release, ReleaseResult
from inspection_ledger.services.releases import ReleaseWorkflow

router = APIRouter(prefix="/inspections/{inspection_id}", tags=["releases"])


class CreateReleaseRequest(BaseModel):
    inspection: dict[str, Any] = Field(default_factory=dict)
    notes: str = ""


class EditBlockRequest(BaseModel):
    blocked: bool


def _workflow(request: Request) -> ReleaseWorkflow:
    return ReleaseWorkflow(request.app.state.store)


@router.get("/releases", response_model=list[Release])
async def list_releases(
    request: Request, inspection_id: str, _user_id: str = Depends(current_user_id)
) -> list[Release]:
    return await _workflow(request).get_releases(inspection_id)


@router.post("/releases", response_model=ReleaseResult, status_code=201)
async def create_release(
    request: Request,
    inspection_id: str,
    body: CreateReleaseRequest,
    user_id: str = Depends(current_user_id),
) -> ReleaseResult:
    """Release the submitted inspection content."""
    return await _workflow(request).create_release(
        inspection_id, body.inspection, body.notes, user_id
    )


@router.get("/releases/{release_id}", response_model=Release)
async def get_release(
    request: Request,
    inspection_id: str,
    release_id: str,
    _user_id: str = Depends(current_user_id),
) -> Release:
    return await _workflow(request).get_release(release_id, inspection_id)


@router.post("/releases/{release_id}/deliver", response_model=Release)
async def deliver_release(
    request: Request,
    inspection_id: str,
    release_id: str,
    user_id: str = Depends(current_user_id),
) -> Release:
    return await _workflow(request).deliver_release(release_id, inspection_id, user_id)


@router.post("/releases/{release_id}/revert", response_model=Release)
async def revert_delivery(
    request: Request,
    inspection_id: str,
    release_id: str,
    user_id: str = Depends(current_user_id),
) -> Release:
    return await _workflow(request).revert_delivery(release_id, inspection_id, user_id)


@router.post("/edit-block")
async def toggle_edit_block(
    request: Request,
    inspection_id: str,
    body: EditBlockRequest,
    user_id: str = Depends(current_user_id),
) -> dict[str, bool]:
    blocked = await _workflow(request).toggle_edit_block(inspection_id, body.blocked, user_id)
    return {"inspection_edit_blocked": blocked}
