"""Supabase-backed customer repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from coaching_scheduler.domain.models import CustomerRecord
from coaching_scheduler.services.customers import CustomerRepository


@dataclass
class SupabaseCustomerRepository(CustomerRepository):
    """Supabase implementation for customer lookups."""

    client: Client

    def get_customer(self, customer_id: UUID) -> CustomerRecord | None:
        """Return a customer by id, if present."""
        response = (
            self.client.table("customers")
            .select("id, name, email, phone")
            .eq("id", str(customer_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return CustomerRecord(
            id=UUID(row["id"]),
            name=row["name"],
            email=row["email"],
            phone=row.get("phone"),
        )
