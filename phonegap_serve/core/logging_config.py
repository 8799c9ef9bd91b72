"""
Central logging configuration for phonegap_serve.

Keeps the console readable while a device is hammering the dev server:
third-party access and event-loop chatter is suppressed, phonegap_serve's own
loggers follow the debug switch.
"""

import logging
import os
from typing import Optional


class RequestIdFilter(logging.Filter):
    """Add the current request ID to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Import here to avoid circular dependency
        from phonegap_serve.api.middleware import get_request_id

        record.request_id = get_request_id()
        return True


SUPPRESSED_LOGGERS = (
    "aiohttp.access",
    "aiohttp.server",
    "aiohttp.web_log",
    "asyncio",
    "charset_normalizer",
)

SERVE_LOGGERS = (
    "phonegap_serve",
    "phonegap_serve.serve",
    "phonegap_serve.api.server",
    "phonegap_serve.pipeline",
)


def configure_serve_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logger levels for phonegap_serve.

    Args:
        debug_mode: Whether to enable debug logging for phonegap_serve modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        PHONEGAP_SERVE_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        PHONEGAP_SERVE_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("PHONEGAP_SERVE_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("PHONEGAP_SERVE_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    # Don't use force=True so the colour formatter from _init_logging survives
    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    request_id_filter = RequestIdFilter()

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        formatter = logging.Formatter(
            "[%(asctime)s] [%(request_id)s] %(levelname)s - %(name)s - %(message)s"
        )
        handler.setFormatter(formatter)
        handler.addFilter(request_id_filter)
        root_logger.addHandler(handler)
    else:
        for existing_handler in root_logger.handlers:
            if not any(isinstance(f, RequestIdFilter) for f in existing_handler.filters):
                existing_handler.addFilter(request_id_filter)

    logger_config: dict[str, int] = {name: logging.WARNING for name in SUPPRESSED_LOGGERS}
    logger_config["aiohttp.web"] = logging.INFO

    serve_level = logging.DEBUG if final_debug else logging.INFO
    for module in SERVE_LOGGERS:
        logger_config[module] = serve_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.debug("Debug logging enabled for phonegap_serve modules")


def reset_logging_to_debug() -> None:
    """Reset all loggers, suppressed ones included, to DEBUG level."""
    logging.getLogger().setLevel(logging.DEBUG)

    for logger_name in SUPPRESSED_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in ("phonegap_serve", "aiohttp.access", "aiohttp.server", "asyncio"):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
