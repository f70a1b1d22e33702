"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    site_url: str = "http://localhost:8000"
    oauth_provider: str = "google"
    auth_failure_redirect_seconds: int = 3
    profile_id_max_attempts: int = 3
    auth_cookie_max_age_seconds: int = 60 * 60 * 24 * 30
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def uses_secure_cookies(site_url: str) -> bool:
    """Return True when the public site is served over HTTPS."""
    return site_url.startswith("https://")


def build_redirect_url(site_url: str, path: str) -> str:
    """Join the public site URL and an application path."""
    return f"{site_url.rstrip('/')}/{path.lstrip('/')}"
