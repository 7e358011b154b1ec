"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from coaching_scheduler.config import Settings
from coaching_scheduler.containers import AppContainer, build_slot_policy
from coaching_scheduler.domain.errors import DuplicateSlotError
from coaching_scheduler.domain.meetings import MeetingRequest, ProvisionedMeeting
from coaching_scheduler.domain.models import (
    CustomerProfile,
    CustomerRecord,
    StaffRecord,
    StaffSummary,
)
from coaching_scheduler.domain.notifications import (
    EmailLogRecord,
    EmailStatus,
    NotificationResult,
    SessionNotification,
)
from coaching_scheduler.domain.sessions import SessionRecord, SessionStatus, SlotWindow
from coaching_scheduler.services.availability import AvailabilityService
from coaching_scheduler.services.bookings import BookingService, SessionRepository
from coaching_scheduler.services.customers import CustomerRepository, CustomerService
from coaching_scheduler.services.meetings import MeetingProvisioner
from coaching_scheduler.services.notifications import (
    EmailLogRepository,
    NotificationLogger,
    NotificationSender,
)
from coaching_scheduler.services.slots import SlotPolicy
from coaching_scheduler.services.staff import StaffRepository, StaffService

FIXED_NOW = datetime(2025, 11, 28, 0, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


@dataclass
class InMemoryStaffRepository(StaffRepository):
    """In-memory staff repository for tests."""

    staff: dict[UUID, StaffRecord] = field(default_factory=dict)

    def add(self, code: str, name: str, email: str) -> StaffRecord:
        record = StaffRecord(
            id=uuid4(), code=code, name=name, email=email, password_hash="hashed"
        )
        self.staff[record.id] = record
        return record

    def get_staff(self, staff_id: UUID) -> StaffRecord | None:
        return self.staff.get(staff_id)

    def list_staff(self) -> list[StaffRecord]:
        return sorted(self.staff.values(), key=lambda record: record.code)


@dataclass
class InMemoryCustomerRepository(CustomerRepository):
    """In-memory customer repository for tests."""

    customers: dict[UUID, CustomerRecord] = field(default_factory=dict)

    def add(self, name: str, email: str) -> CustomerRecord:
        record = CustomerRecord(
            id=uuid4(), name=name, email=email, password_hash="hashed"
        )
        self.customers[record.id] = record
        return record

    def get_customer(self, customer_id: UUID) -> CustomerRecord | None:
        return self.customers.get(customer_id)


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository enforcing the active-slot uniqueness rule."""

    staff_repository: InMemoryStaffRepository
    sessions: dict[UUID, SessionRecord] = field(default_factory=dict)

    def create_session(  # noqa: PLR0913
        self,
        customer_id: UUID,
        staff_id: UUID,
        window: SlotWindow,
        title: str,
        meet_url: str,
        external_id: str | None,
    ) -> SessionRecord:
        self._check_unique(staff_id, window.start_at, exclude_session_id=None)
        now = datetime.now(tz=UTC)
        session = SessionRecord(
            id=uuid4(),
            customer_id=customer_id,
            staff_id=staff_id,
            start_at=window.start_at,
            end_at=window.end_at,
            title=title,
            meet_url=meet_url,
            external_id=external_id,
            status=SessionStatus.SCHEDULED,
            created_at=now,
            updated_at=now,
        )
        self.sessions[session.id] = session
        return self._with_staff(session)

    def update_booking(  # noqa: PLR0913
        self,
        session_id: UUID,
        staff_id: UUID,
        window: SlotWindow,
        title: str,
        meet_url: str,
        external_id: str | None,
    ) -> SessionRecord:
        self._check_unique(staff_id, window.start_at, exclude_session_id=session_id)
        updated = replace(
            self.sessions[session_id],
            staff_id=staff_id,
            start_at=window.start_at,
            end_at=window.end_at,
            title=title,
            meet_url=meet_url,
            external_id=external_id,
            status=SessionStatus.SCHEDULED,
            updated_at=datetime.now(tz=UTC),
        )
        self.sessions[session_id] = updated
        return self._with_staff(updated)

    def update_status(self, session_id: UUID, status: SessionStatus) -> SessionRecord:
        updated = replace(
            self.sessions[session_id], status=status, updated_at=datetime.now(tz=UTC)
        )
        self.sessions[session_id] = updated
        return self._with_staff(updated)

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        session = self.sessions.get(session_id)
        return self._with_staff(session) if session else None

    def find_active_at(
        self,
        staff_id: UUID,
        start_at: datetime,
        exclude_session_id: UUID | None = None,
    ) -> SessionRecord | None:
        for session in self.sessions.values():
            if (
                session.staff_id == staff_id
                and session.start_at == start_at
                and session.status != SessionStatus.CANCELLED
                and session.id != exclude_session_id
            ):
                return self._with_staff(session)
        return None

    def list_active_between(
        self, start: datetime, end: datetime
    ) -> list[SessionRecord]:
        return [
            self._with_staff(session)
            for session in self.sessions.values()
            if start <= session.start_at < end
            and session.status != SessionStatus.CANCELLED
        ]

    def list_for_customer(self, customer_id: UUID) -> list[SessionRecord]:
        owned = [
            self._with_staff(session)
            for session in self.sessions.values()
            if session.customer_id == customer_id
        ]
        return sorted(owned, key=lambda session: session.start_at, reverse=True)

    def _check_unique(
        self, staff_id: UUID, start_at: datetime, exclude_session_id: UUID | None
    ) -> None:
        for session in self.sessions.values():
            if (
                session.staff_id == staff_id
                and session.start_at == start_at
                and session.status != SessionStatus.CANCELLED
                and session.id != exclude_session_id
            ):
                raise DuplicateSlotError("duplicate key value violates unique index")

    def _with_staff(self, session: SessionRecord) -> SessionRecord:
        record = self.staff_repository.get_staff(session.staff_id)
        if record is None:
            return session
        return replace(session, staff=StaffService.sanitize(record))


@dataclass
class InMemoryEmailLogRepository(EmailLogRepository):
    """In-memory email log repository for tests."""

    logs: list[EmailLogRecord] = field(default_factory=list)

    def create_log(  # noqa: PLR0913
        self,
        session_id: UUID,
        to_email: str,
        subject: str,
        body: str,
        status: EmailStatus,
        error_message: str | None,
    ) -> EmailLogRecord:
        record = EmailLogRecord(
            id=uuid4(),
            session_id=session_id,
            to_email=to_email,
            subject=subject,
            body=body,
            status=status,
            error_message=error_message,
            created_at=datetime.now(tz=UTC),
        )
        self.logs.append(record)
        return record

    def list_logs(self, session_id: UUID) -> list[EmailLogRecord]:
        return [log for log in self.logs if log.session_id == session_id]


@dataclass
class FakeMeetingProvisioner(MeetingProvisioner):
    """Fake meeting provider that records requests."""

    enabled: bool = True
    error: Exception | None = None
    requests: list[tuple[StaffSummary, MeetingRequest]] = field(default_factory=list)

    def is_enabled(self) -> bool:
        return self.enabled

    async def create_meeting(
        self, staff: StaffSummary, request: MeetingRequest
    ) -> ProvisionedMeeting:
        self.requests.append((staff, request))
        if self.error is not None:
            raise self.error
        number = len(self.requests)
        return ProvisionedMeeting(
            meet_url=f"https://zoom.us/j/10000000{number}",
            external_id=f"zoom-{number}",
        )


@dataclass
class FakeMailSender(NotificationSender):
    """Fake notification sender with a configurable outcome."""

    result: NotificationResult = field(
        default_factory=lambda: NotificationResult(success=True)
    )
    error: Exception | None = None
    sent: list[SessionNotification] = field(default_factory=list)

    async def send_session_notification(
        self, notification: SessionNotification
    ) -> NotificationResult:
        self.sent.append(notification)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def policy() -> SlotPolicy:
    return SlotPolicy()


@pytest.fixture
def staff_repository() -> InMemoryStaffRepository:
    repository = InMemoryStaffRepository()
    repository.add("STAFF_A", "Coach A", "staff-a@example.com")
    repository.add("STAFF_B", "Coach B", "staff-b@example.com")
    return repository


@pytest.fixture
def staff_a(staff_repository: InMemoryStaffRepository) -> StaffRecord:
    return staff_repository.list_staff()[0]


@pytest.fixture
def staff_b(staff_repository: InMemoryStaffRepository) -> StaffRecord:
    return staff_repository.list_staff()[1]


@pytest.fixture
def customer_repository() -> InMemoryCustomerRepository:
    repository = InMemoryCustomerRepository()
    repository.add("Taro Yamada", "customer@example.com")
    return repository


@pytest.fixture
def customer(customer_repository: InMemoryCustomerRepository) -> CustomerProfile:
    record = next(iter(customer_repository.customers.values()))
    return CustomerService.sanitize(record)


@pytest.fixture
def session_repository(
    staff_repository: InMemoryStaffRepository,
) -> InMemorySessionRepository:
    return InMemorySessionRepository(staff_repository=staff_repository)


@pytest.fixture
def email_log_repository() -> InMemoryEmailLogRepository:
    return InMemoryEmailLogRepository()


@pytest.fixture
def meeting_provisioner() -> FakeMeetingProvisioner:
    return FakeMeetingProvisioner()


@pytest.fixture
def mail_sender() -> FakeMailSender:
    return FakeMailSender()


@pytest.fixture
def notification_logger(
    mail_sender: FakeMailSender, email_log_repository: InMemoryEmailLogRepository
) -> NotificationLogger:
    return NotificationLogger(sender=mail_sender, repository=email_log_repository)


@pytest.fixture
def booking_service(
    staff_repository: InMemoryStaffRepository,
    session_repository: InMemorySessionRepository,
    meeting_provisioner: FakeMeetingProvisioner,
    notification_logger: NotificationLogger,
    policy: SlotPolicy,
) -> BookingService:
    return BookingService(
        staff_service=StaffService(staff_repository),
        session_repository=session_repository,
        meeting_provisioner=meeting_provisioner,
        notification_logger=notification_logger,
        policy=policy,
        clock=fixed_clock,
    )


@pytest.fixture
def availability_service(
    staff_repository: InMemoryStaffRepository,
    session_repository: InMemorySessionRepository,
    policy: SlotPolicy,
) -> AvailabilityService:
    return AvailabilityService(
        staff_service=StaffService(staff_repository),
        session_repository=session_repository,
        policy=policy,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    staff_repository: InMemoryStaffRepository,
    customer_repository: InMemoryCustomerRepository,
    session_repository: InMemorySessionRepository,
    meeting_provisioner: FakeMeetingProvisioner,
    notification_logger: NotificationLogger,
) -> AppContainer:
    staff_service = StaffService(staff_repository)
    policy = build_slot_policy(settings)
    booking_service = BookingService(
        staff_service=staff_service,
        session_repository=session_repository,
        meeting_provisioner=meeting_provisioner,
        notification_logger=notification_logger,
        policy=policy,
        clock=fixed_clock,
    )
    availability_service = AvailabilityService(
        staff_service=staff_service,
        session_repository=session_repository,
        policy=policy,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        staff_service=staff_service,
        customer_service=CustomerService(customer_repository),
        meeting_provisioner=meeting_provisioner,
        notification_logger=notification_logger,
        booking_service=booking_service,
        availability_service=availability_service,
        close_resources=close_resources,
    )
