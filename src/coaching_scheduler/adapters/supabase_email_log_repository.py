"""Supabase repository for email audit rows."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from coaching_scheduler.domain.notifications import EmailLogRecord, EmailStatus
from coaching_scheduler.services.notifications import EmailLogRepository


@dataclass
class SupabaseEmailLogRepository(EmailLogRepository):
    """Supabase-backed email log repository."""

    client: Client

    def create_log(  # noqa: PLR0913
        self,
        session_id: UUID,
        to_email: str,
        subject: str,
        body: str,
        status: EmailStatus,
        error_message: str | None,
    ) -> EmailLogRecord:
        """Insert an email log row and return it."""
        response = (
            self.client.table("email_logs")
            .insert(
                {
                    "session_id": str(session_id),
                    "to_email": to_email,
                    "subject": subject,
                    "body": body,
                    "status": status.value,
                    "error_message": error_message,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create email log")
        return _to_record(response.data[0])

    def list_logs(self, session_id: UUID) -> list[EmailLogRecord]:
        """Return email log rows for a session, oldest first."""
        response = (
            self.client.table("email_logs")
            .select(
                "id, session_id, to_email, subject, body, status, error_message, "
                "created_at"
            )
            .eq("session_id", str(session_id))
            .order("created_at")
            .execute()
        )
        return [_to_record(row) for row in response.data or []]


def _to_record(row: dict[str, object]) -> EmailLogRecord:
    return EmailLogRecord(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        to_email=str(row["to_email"]),
        subject=str(row["subject"]),
        body=str(row["body"]),
        status=EmailStatus(str(row["status"])),
        error_message=row.get("error_message"),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
