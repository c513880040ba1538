"""Run the Brain server: ``python -m brain`` or the ``brain`` console script."""

import logging

import uvicorn

from brain.config import get_settings
from brain.logging_setup import configure_logging
from brain.main import app, get_store

logger = logging.getLogger("brain")


def main() -> None:
    """Prepare the task directory and serve until interrupted."""
    settings = get_settings()
    configure_logging(settings.log_level.upper())

    store = get_store(settings)
    logger.info("Storing tasks in %s", store.directory.resolve())

    scheme = "https" if settings.tls_enabled else "http"
    logger.info("Listening on %s://%s:%d", scheme, settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        ssl_certfile=str(settings.tls_cert_file) if settings.tls_enabled else None,
        ssl_keyfile=str(settings.tls_key_file) if settings.tls_enabled else None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
