"""
Main entrypoint: FastAPI trade journal server under uvicorn.

Env: DATABASE_URL, JWT_SECRET (required), JWT_TTL_HOURS, BCRYPT_ROUNDS,
API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT. A .env at the project root is
loaded first.

API only, no wrapper: uvicorn backend_journal.api_server.app:app --host 127.0.0.1 --port 9000
"""

import sys

# Configure structured JSON logging before other imports that may log
from backend_journal.journal_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Resolve settings, then run the API in the main thread."""
    from backend_journal.config import get_settings
    from backend_journal.core.exceptions import ConfigurationError

    try:
        settings = get_settings()
    except (ConfigurationError, ValueError) as e:
        logger.error("main_config_error", message=str(e))
        sys.exit(1)

    from backend_journal.api_server.server import create_app
    import uvicorn

    app = create_app(settings)
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
