import sys
from typing import Optional

from usersapi.config.properties import get_config, log_config_sources
from usersapi.core.logging import configure_logging, get_logger
from usersapi.core.server import UsersASGIApp, _start_uvicorn
from usersapi.exceptions import UsersApiException
from usersapi.version import get_version

logger = get_logger()


def run(host: Optional[str] = None, port: Optional[int] = None):
    """
    Start the users service.

    Configures logging, builds the application and serves it with uvicorn
    until the process is stopped.
    """
    config = get_config()

    level = str(config.get("logging.level", "INFO"))
    configure_logging(
        level=level,
        fmt=config.get("logging.format"),
        use_colors=config.get_bool("logging.colors", True) and sys.stderr.isatty(),
    )

    logger.info(f"users-api v{get_version()}")
    log_config_sources(config, logger)

    server = UsersASGIApp(config)

    host = host or config.get("server.host", "0.0.0.0")
    port = port or config.get_int("server.port", 8000)
    logger.info(f"Server starting on http://{host}:{port}")

    _start_uvicorn(
        server,
        config,
        host,
        port,
        level.lower(),
        config.get_bool("server.access_log", True),
    )


def main():
    """Console entry point."""
    try:
        run()
    except UsersApiException as e:
        logger.critical(str(e))
        sys.exit(1)
