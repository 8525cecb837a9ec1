"""Configuration loading for the Vespers admin diagnostics.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vespers.core.diagnostics_service import DEFAULT_TABLES


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. List-valued settings are read
    from JSON, e.g. DIAGNOSTIC_TABLES='["members", "events"]'.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase backend
    supabase_url: str = Field(
        default="http://localhost:54321",
        description="Supabase project URL",
    )
    supabase_anon_key: str = Field(
        default="",
        description="Supabase anonymous (public) API key",
    )
    supabase_access_token: str = Field(
        default="",
        description="Access token of the admin session to verify",
    )
    supabase_timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout for Supabase requests in seconds",
    )

    # Checks
    database_probe_table: str = Field(
        default="profiles",
        description="Table used for the generic database reachability probe",
    )
    diagnostic_tables: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TABLES),
        description="Tables checked for read access, in order",
    )
    storage_bucket: str = Field(
        default="images",
        description="Storage bucket listed by the storage check",
    )
    edge_function_name: str = Field(
        default="admin-operations",
        description="Edge function invoked by the edge function check",
    )
    dashboard_stats_function: str = Field(
        default="admin-operations",
        description="Edge function providing dashboard statistics",
    )
    required_env_vars: list[str] = Field(
        default_factory=lambda: ["SUPABASE_URL", "SUPABASE_ANON_KEY"],
        description="Environment variables that must be present",
    )
    required_capabilities: list[str] = Field(
        default_factory=lambda: ["ssl", "sqlite3", "zoneinfo"],
        description="Runtime capabilities expected to be available",
    )
    check_timeout_seconds: float | None = Field(
        default=None,
        description="Optional per-check timeout; unset means unbounded",
    )

    # Reporting
    report_backend: Literal["stdout", "markdown"] = Field(
        default="stdout",
        description="Report backend type",
    )
    report_output_dir: str = Field(
        default="./diagnostics",
        description="Output directory for markdown reports",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["cli", "interactive", "server"] = Field(
        default="cli",
        description="Run mode",
    )

    # HTTP server configuration
    server_host: str = Field(
        default="127.0.0.1",
        description="Host to listen on for the diagnostics server",
    )
    server_port: int = Field(
        default=8080,
        description="Port to listen on for the diagnostics server",
    )
    server_api_key: str = Field(
        default="",
        description="API key for diagnostics endpoint authentication",
    )
    server_require_auth: bool = Field(
        default=False,
        description="Require API key authentication for diagnostics endpoints",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose output",
    )

    @field_validator("supabase_timeout_seconds")
    @classmethod
    def validate_supabase_timeout(cls, v: float) -> float:
        """Ensure HTTP timeout is positive."""
        if v <= 0:
            raise ValueError("supabase_timeout_seconds must be positive")
        return v

    @field_validator("check_timeout_seconds")
    @classmethod
    def validate_check_timeout(cls, v: float | None) -> float | None:
        """Ensure the per-check timeout, when set, is positive."""
        if v is not None and v <= 0:
            raise ValueError("check_timeout_seconds must be positive")
        return v

    @field_validator("diagnostic_tables")
    @classmethod
    def validate_tables(cls, v: list[str]) -> list[str]:
        """Ensure at least one non-blank table is configured."""
        tables = [t.strip() for t in v if t.strip()]
        if not tables:
            raise ValueError("diagnostic_tables must name at least one table")
        return tables

    @field_validator("server_port")
    @classmethod
    def validate_server_port(cls, v: int) -> int:
        """Ensure server port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("server_port must be between 1 and 65535")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
