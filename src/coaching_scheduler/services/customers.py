"""Customer identity lookups."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from coaching_scheduler.domain.models import CustomerProfile, CustomerRecord


class CustomerRepository(Protocol):
    """Persistence interface for customers."""

    def get_customer(self, customer_id: UUID) -> CustomerRecord | None:
        """Return a customer by id, if present."""


@dataclass
class CustomerService:
    """Resolves authenticated callers to customer profiles."""

    repository: CustomerRepository

    def get_profile(self, customer_id: UUID) -> CustomerProfile | None:
        """Return the sanitized profile for a customer id, if present."""
        record = self.repository.get_customer(customer_id)
        if record is None:
            return None
        return self.sanitize(record)

    @staticmethod
    def sanitize(record: CustomerRecord) -> CustomerProfile:
        """Strip credentials from a customer record."""
        return CustomerProfile(
            id=record.id,
            name=record.name,
            email=record.email,
            phone=record.phone,
        )
