"""
Startup configuration validation module.

Catches misconfigurations early (fail-fast) before the seeder touches the
database.

Usage:
    from shared.startup_validator import validate_startup_config, StartupValidationError

    try:
        settings = validate_startup_config()
    except StartupValidationError as e:
        logger.critical(f"Startup blocked: {e}")
        sys.exit(1)
"""

import logging

from pydantic import ValidationError

from shared.config import Settings, get_settings

logger = logging.getLogger(__name__)

MONGO_SCHEMES = ("mongodb://", "mongodb+srv://")


class StartupValidationError(Exception):
    """Raised when critical startup validation fails."""

    pass


def validate_startup_config() -> Settings:
    """
    Load settings and validate the critical ones.

    Returns:
        The loaded Settings instance

    Raises:
        StartupValidationError: If DB_CONNECTION is missing or malformed, or
            any other setting fails validation
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        missing = [
            ".".join(str(part) for part in error["loc"])
            for error in e.errors()
            if error["type"] == "missing"
        ]
        if missing:
            raise StartupValidationError(
                f"Missing required environment variables: {', '.join(missing)}"
            ) from e
        raise StartupValidationError(f"Invalid configuration: {e}") from e

    connection = settings.DB_CONNECTION.strip()
    if not connection:
        raise StartupValidationError("DB_CONNECTION is empty")
    if not connection.startswith(MONGO_SCHEMES):
        raise StartupValidationError(
            "DB_CONNECTION must start with mongodb:// or mongodb+srv://"
        )

    logger.info("  [OK] DB_CONNECTION configured")
    return settings
