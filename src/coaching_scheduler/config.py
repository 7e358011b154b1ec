"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    business_timezone: str = "Asia/Tokyo"
    slot_start_hour: int = 10
    slot_end_hour: int = 19
    slot_duration_minutes: int = 60
    booking_horizon_days: int = 10
    zoom_account_id: str | None = None
    zoom_client_id: str | None = None
    zoom_client_secret: str | None = None
    zoom_oauth_base_url: str = "https://zoom.us"
    zoom_api_base_url: str = "https://api.zoom.us/v2"
    meeting_timezone: str = "Asia/Tokyo"
    meet_domain: str = "https://meet.google.com"
    mail_from: str = "no-reply@example.com"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
