"""Staff roster endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from coaching_scheduler.api.sessions import current_customer, serialize_staff

if TYPE_CHECKING:
    from coaching_scheduler.containers import AppContainer

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", dependencies=[Depends(current_customer)])
async def list_staff(request: Request) -> dict[str, object]:
    """Return the sanitized staff roster."""
    container: AppContainer = request.app.state.container
    roster = container.staff_service.list_all()
    return {"staff": [serialize_staff(staff) for staff in roster]}
