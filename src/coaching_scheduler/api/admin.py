"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from coaching_scheduler.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/sessions/{session_id}/email-logs", dependencies=[Depends(require_admin)])
async def session_email_logs(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the notification audit trail for a session."""
    container: AppContainer = request.app.state.container
    logs = container.notification_logger.list_for_session(session_id)
    return {
        "email_logs": [
            {
                "id": str(log.id),
                "session_id": str(log.session_id),
                "to_email": log.to_email,
                "subject": log.subject,
                "status": log.status.value,
                "error_message": log.error_message,
                "created_at": log.created_at.isoformat(),
            }
            for log in logs
        ]
    }
