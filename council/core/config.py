"""Configuration management for the council meetings service."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(default="Council Meetings")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")

    database_url: str = Field(default="postgresql+psycopg://council:council@db:5432/council")

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=True)
    otel_exporter_endpoint: str | None = Field(default=None)
    audit_log_enabled: bool = Field(default=True)

    session_secret: str = Field(default="dev-secret-key-change-in-production")
    session_algorithm: str = Field(default="HS256")
    session_cookie_name: str = Field(default="council_session")
    session_cookie_secure: bool = Field(default=False)
    session_ttl_days: int = Field(default=7)
    magic_link_ttl_minutes: int = Field(default=15)

    staff_roles: list[str] = Field(default_factory=lambda: ["salaried"])

    default_opening_item_title: str = Field(default="Ouverture de la réunion")
    default_opening_item_duration: int = Field(default=5)

    brevo_api_key: str | None = Field(default=None)
    brevo_api_url: str = Field(default="https://api.brevo.com/v3")
    mail_sender_email: str = Field(default="noreply@council.local")
    mail_sender_name: str = Field(default="Council Meetings")
    mail_timeout_seconds: float = Field(default=5.0)

    seed_admin_email: str = Field(default="admin@council.local")
    seed_admin_password: str = Field(default="changeme")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
