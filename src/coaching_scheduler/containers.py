"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from coaching_scheduler.adapters.console_mail_sender import ConsoleMailSender
from coaching_scheduler.adapters.supabase_customer_repository import (
    SupabaseCustomerRepository,
)
from coaching_scheduler.adapters.supabase_email_log_repository import (
    SupabaseEmailLogRepository,
)
from coaching_scheduler.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from coaching_scheduler.adapters.supabase_staff_repository import (
    SupabaseStaffRepository,
)
from coaching_scheduler.adapters.zoom_meeting_client import ZoomMeetingProvisioner
from coaching_scheduler.config import Settings
from coaching_scheduler.services.availability import AvailabilityService
from coaching_scheduler.services.bookings import BookingService
from coaching_scheduler.services.cache import AccessTokenCache
from coaching_scheduler.services.customers import CustomerService
from coaching_scheduler.services.meetings import (
    MeetingProvisioner,
    StubMeetingProvisioner,
    select_meeting_provisioner,
)
from coaching_scheduler.services.notifications import NotificationLogger
from coaching_scheduler.services.slots import SlotPolicy
from coaching_scheduler.services.staff import StaffService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    staff_service: StaffService
    customer_service: CustomerService
    meeting_provisioner: MeetingProvisioner
    notification_logger: NotificationLogger
    booking_service: BookingService
    availability_service: AvailabilityService
    close_resources: Callable[[], Awaitable[None]]


def build_slot_policy(settings: Settings) -> SlotPolicy:
    """Create the slot policy described by the settings."""
    return SlotPolicy(
        timezone_name=settings.business_timezone,
        start_hour=settings.slot_start_hour,
        end_hour=settings.slot_end_hour,
        duration_minutes=settings.slot_duration_minutes,
        horizon_days=settings.booking_horizon_days,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    staff_service = StaffService(SupabaseStaffRepository(supabase_client))
    customer_service = CustomerService(SupabaseCustomerRepository(supabase_client))
    session_repository = SupabaseSessionRepository(supabase_client)
    policy = build_slot_policy(resolved_settings)

    token_cache = AccessTokenCache()
    zoom_provisioner = ZoomMeetingProvisioner.create(
        account_id=resolved_settings.zoom_account_id,
        client_id=resolved_settings.zoom_client_id,
        client_secret=resolved_settings.zoom_client_secret,
        token_cache=token_cache,
        oauth_base_url=resolved_settings.zoom_oauth_base_url,
        api_base_url=resolved_settings.zoom_api_base_url,
        timezone=resolved_settings.meeting_timezone,
    )
    meeting_provisioner = select_meeting_provisioner(
        zoom_provisioner,
        StubMeetingProvisioner(meet_domain=resolved_settings.meet_domain),
    )
    notification_logger = NotificationLogger(
        sender=ConsoleMailSender(from_address=resolved_settings.mail_from),
        repository=SupabaseEmailLogRepository(supabase_client),
    )
    booking_service = BookingService(
        staff_service=staff_service,
        session_repository=session_repository,
        meeting_provisioner=meeting_provisioner,
        notification_logger=notification_logger,
        policy=policy,
    )
    availability_service = AvailabilityService(
        staff_service=staff_service,
        session_repository=session_repository,
        policy=policy,
    )

    async def close_resources() -> None:
        await zoom_provisioner.close()

    return AppContainer(
        settings=resolved_settings,
        staff_service=staff_service,
        customer_service=customer_service,
        meeting_provisioner=meeting_provisioner,
        notification_logger=notification_logger,
        booking_service=booking_service,
        availability_service=availability_service,
        close_resources=close_resources,
    )
