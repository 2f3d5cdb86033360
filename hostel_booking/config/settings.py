"""Application settings and configuration management."""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class WidgetSettings(BaseSettings):
    """Booking widget configuration (heading, hand-off workflow, campaign mode)."""

    heading: str = "Book Your Stay"
    flow_api_name: Optional[str] = None  # Presence toggles hand-off vs. plain message
    campaign_type: Optional[str] = None  # Presence toggles date-window mode
    max_guest_options: int = 10

    # Opt-in enhancements; defaults keep the "last response wins" / no-timeout behaviour
    discard_stale_responses: bool = False
    submit_timeout_seconds: Optional[float] = None

    model_config = SettingsConfigDict(env_prefix="WIDGET_")


class BookingAPISettings(BaseSettings):
    """Booking backend API configuration."""

    base_url: str = "http://localhost:8080/api/hostel"
    api_key: str = ""
    request_timeout: int = 30
    max_retries: int = 3

    availability_path: str = "/availability"
    date_ranges_path: str = "/campaigns/date-ranges"
    reservations_path: str = "/reservations"

    model_config = SettingsConfigDict(env_prefix="BOOKING_API_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Sub-settings
    widget: WidgetSettings = WidgetSettings()
    booking_api: BookingAPISettings = BookingAPISettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def flow_api_name(self) -> Optional[str]:
        """Configured post-booking workflow name, or None when blank."""
        return (self.widget.flow_api_name or "").strip() or None

    @property
    def campaign_type(self) -> Optional[str]:
        """Configured campaign type, or None when blank."""
        return (self.widget.campaign_type or "").strip() or None


# Global settings instance
settings = Settings()
