"""
Simple configuration management.

As with the rest of the service, configuration avoids a settings
library: the ``Settings`` dataclass reads its values directly from
environment variables and provides defaults for every field.  Tests
and tools may build their own ``Settings`` instance with keyword
arguments instead of touching the environment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Library API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    # Tokens are time-unbounded unless a positive lifetime is configured.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0"))

    # Password accepted for users registered without a password of
    # their own.  Users created with a password are checked against
    # their stored hash instead.
    shared_password: str = os.getenv("SHARED_PASSWORD", "secret")

    # When enabled, ``addBook`` and ``editAuthor`` refuse to run
    # without a valid token.
    require_token_for_mutations: bool = _env_flag("REQUIRE_TOKEN_FOR_MUTATIONS", "true")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "library.db")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
