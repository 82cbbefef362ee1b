"""
Configuration for the SPARKS care portal.

PRIVACY:
- OTP codes and passwords are never part of configuration or logs
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 30.0
    log_level: str = "INFO"

    # Password recovery
    otp_length: int = 6
    otp_expiry_seconds: int = 600
    otp_max_attempts: int = 5
    resend_cooldown_seconds: int = 60
    verification_token_expiry_seconds: int = 300
    token_secret: str = "sparks-dev-secret"
    success_redirect_seconds: int = 3

    # UI timing
    modal_auto_close_seconds: int = 2

    # Scheduling and billing
    slot_duration_minutes: int = 45
    therapist_share: float = 0.9

    # Demo data and identities used by the dashboards
    seed_demo_data: bool = True
    demo_parent_id: str = "parent-demo"
    demo_therapist_id: str = "therapist-demo"
    demo_manager_id: str = "manager-demo"

    model_config = {"env_prefix": "SPARKS_"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@dataclass(frozen=True)
class Palette:
    """Brand colour roles shared by the API's report charts and the dashboards."""

    primary: str = "#8159A8"
    primary_dark: str = "#6B4A8F"
    primary_soft: str = "#C4B5FD"
    accent: str = "#F59E0B"
    surface: str = "#F5F3FB"
    text: str = "#1F2937"
    muted: str = "#6B7280"
    success: str = "#10B981"
    warning: str = "#F59E0B"
    danger: str = "#EF4444"
    info: str = "#3B82F6"


@lru_cache
def get_palette() -> Palette:
    return Palette()
