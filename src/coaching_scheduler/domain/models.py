"""Domain models for staff and customers."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class StaffRecord:
    """Represents a staff member stored in the database."""

    id: UUID
    code: str
    name: str
    email: str
    password_hash: str | None = None


@dataclass(frozen=True)
class StaffSummary:
    """Staff fields that are safe to expose."""

    id: UUID
    code: str
    name: str
    email: str


@dataclass(frozen=True)
class CustomerRecord:
    """Represents a customer stored in the database."""

    id: UUID
    name: str
    email: str
    phone: str | None = None
    password_hash: str | None = None


@dataclass(frozen=True)
class CustomerProfile:
    """Customer fields that are safe to expose."""

    id: UUID
    name: str
    email: str
    phone: str | None = None
