"""
Serve the API with uvicorn: python -m api

Binding errors (port in use, permission denied) make uvicorn exit with
status 1.
"""

import logging
import sys

import uvicorn

from shared.logging_config import configure_logging
from shared.startup_validator import StartupValidationError, validate_startup_config

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    try:
        settings = validate_startup_config()
    except StartupValidationError as e:
        logger.critical(f"API startup blocked due to configuration errors: {e}")
        sys.exit(1)
    configure_logging(settings.LOG_LEVEL)

    logger.info(f"listening at http://localhost:{settings.API_PORT}")
    uvicorn.run("api.main:app", host="0.0.0.0", port=settings.API_PORT, log_config=None)


if __name__ == "__main__":
    main()
