"""
Runtime Environment Validation Module

Validates the environment at application startup. If validation fails, the
application refuses to start (exit code 1) instead of failing later on the
first request that touches the misconfigured piece.
"""

import logging
import os
import sys

from pydantic import ValidationError

from rentmaster.core.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_DEBUG_SCHEMES = ("postgresql", "sqlite")


def _fail(message: str) -> None:
    logger.critical("FATAL: %s", message)
    sys.exit(1)


def validate_environment() -> Settings:
    """
    Validate all required environment variables at startup.

    Returns:
        Settings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = Settings()
    except ValidationError as e:
        lines = []
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            lines.append(f"{field}: {error['msg']}")
        _fail("Environment validation failed; missing or invalid variables: " + "; ".join(lines))

    # 1. CORS: no wildcard outside debug
    if not settings.debug and "*" in settings.cors_origins:
        _fail("Wildcard CORS origin (*) is not allowed in production. Set ALLOWED_ORIGINS explicitly.")

    # 2. Database URL: PostgreSQL in production, SQLite tolerated in debug
    allowed_schemes = SUPPORTED_DEBUG_SCHEMES if settings.debug else ("postgresql",)
    if not settings.database_url.startswith(allowed_schemes):
        _fail(
            "DATABASE_URL must be a PostgreSQL connection string "
            "(postgresql+asyncpg://...); SQLite is only accepted with DEBUG=true"
        )

    # 3. Firebase: credentials path must exist when provided
    if settings.google_application_credentials and not os.path.exists(
        settings.google_application_credentials
    ):
        _fail(f"Firebase credentials file not found: {settings.google_application_credentials}")

    # 4. Uploads: positive size limit
    if settings.max_upload_size_mb <= 0:
        _fail("MAX_UPLOAD_SIZE_MB must be positive")

    logger.info(
        "Environment validation passed (app=%s, debug=%s, upload_dir=%s)",
        settings.app_name,
        settings.debug,
        settings.upload_dir,
    )
    return settings


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    validate_environment()
    print("All environment variables are valid!")
