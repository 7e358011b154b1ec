"""Pydantic models for session API payloads."""

from uuid import UUID

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Body of a booking request."""

    staff_id: UUID
    start_at: str = Field(description="ISO-8601 start of the requested slot")
    title: str | None = Field(default=None, max_length=200)


class UpdateSessionRequest(BaseModel):
    """Body of a reschedule request; omitted fields keep their value."""

    staff_id: UUID | None = None
    start_at: str | None = None
    title: str | None = Field(default=None, max_length=200)
