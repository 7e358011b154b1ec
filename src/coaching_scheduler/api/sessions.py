"""Customer-facing session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from coaching_scheduler.api.models import CreateSessionRequest, UpdateSessionRequest
from coaching_scheduler.domain.models import CustomerProfile  # noqa: TC001

if TYPE_CHECKING:
    from coaching_scheduler.containers import AppContainer
    from coaching_scheduler.domain.availability import StaffAvailability
    from coaching_scheduler.domain.models import StaffSummary
    from coaching_scheduler.domain.sessions import BookingResult, SessionRecord

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def current_customer(
    request: Request,
    x_customer_id: str | None = Header(default=None),
) -> CustomerProfile:
    """Resolve the authenticated caller from the X-Customer-Id header."""
    if not x_customer_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        customer_id = UUID(x_customer_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
    customer = _container(request).customer_service.get_profile(customer_id)
    if customer is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return customer


@router.get("")
async def list_sessions(
    request: Request, customer: CustomerProfile = Depends(current_customer)
) -> dict[str, object]:
    """Return the caller's sessions."""
    sessions = _container(request).booking_service.list_for_customer(customer)
    return {"sessions": [_serialize_session(session) for session in sessions]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    customer: CustomerProfile = Depends(current_customer),
) -> dict[str, object]:
    """Book a slot for the caller."""
    result = await _container(request).booking_service.create_session(
        customer,
        staff_id=body.staff_id,
        start_at=body.start_at,
        title=body.title,
    )
    return _serialize_result(result)


@router.get("/availability", dependencies=[Depends(current_customer)])
async def availability(request: Request, date: str | None = None) -> dict[str, object]:
    """Return per-staff slot grids for a YYYY-MM-DD date."""
    grids = _container(request).availability_service.get_availability(date)
    return {"availability": [_serialize_availability(grid) for grid in grids]}


@router.get("/{session_id}")
async def session_detail(
    session_id: UUID,
    request: Request,
    customer: CustomerProfile = Depends(current_customer),
) -> dict[str, object]:
    """Return one of the caller's sessions."""
    session = _container(request).booking_service.get_session_detail(
        customer, session_id
    )
    return _serialize_session(session)


@router.patch("/{session_id}")
async def reschedule_session(
    session_id: UUID,
    body: UpdateSessionRequest,
    request: Request,
    customer: CustomerProfile = Depends(current_customer),
) -> dict[str, object]:
    """Move one of the caller's sessions."""
    result = await _container(request).booking_service.reschedule_session(
        customer,
        session_id,
        staff_id=body.staff_id,
        start_at=body.start_at,
        title=body.title,
    )
    return _serialize_result(result)


@router.delete("/{session_id}")
async def cancel_session(
    session_id: UUID,
    request: Request,
    customer: CustomerProfile = Depends(current_customer),
) -> dict[str, object]:
    """Cancel one of the caller's sessions."""
    session = _container(request).booking_service.cancel_session(
        customer, session_id
    )
    return _serialize_session(session)


def serialize_staff(staff: StaffSummary | None) -> dict[str, object] | None:
    """Render a staff summary for API responses."""
    if staff is None:
        return None
    return {
        "id": str(staff.id),
        "code": staff.code,
        "name": staff.name,
        "email": staff.email,
    }


def _serialize_session(session: SessionRecord) -> dict[str, object]:
    return {
        "id": str(session.id),
        "customer_id": str(session.customer_id),
        "staff_id": str(session.staff_id),
        "start_at": session.start_at.isoformat(),
        "end_at": session.end_at.isoformat(),
        "title": session.title,
        "meet_url": session.meet_url,
        "external_id": session.external_id,
        "status": session.status.value,
        "created_at": session.created_at.isoformat(),
        "updated_at": session.updated_at.isoformat(),
        "staff": serialize_staff(session.staff),
    }


def _serialize_result(result: BookingResult) -> dict[str, object]:
    payload = _serialize_session(result.session)
    payload["email_status"] = result.email_status.value
    return payload


def _serialize_availability(grid: StaffAvailability) -> dict[str, object]:
    return {
        "staff": serialize_staff(grid.staff),
        "slots": [
            {"start_at": slot.start_at.isoformat(), "available": slot.available}
            for slot in grid.slots
        ],
    }
