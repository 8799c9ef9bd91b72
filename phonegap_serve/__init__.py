"""phonegap_serve - serve a PhoneGap/Cordova app to a device on the local network.

``listen()`` starts an HTTP server for the app and returns it; the server is
also the event bus for ``complete``, ``log`` and ``error`` events.
"""

__version__ = "0.1.0"

from typing import Optional

from .api.server import AppServer, ListenerState, ReadyInfo
from .serve import listen

__all__ = ["AppServer", "ListenerState", "ReadyInfo", "__version__", "listen", "run_server"]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Honors PHONEGAP_SERVE_DEBUG (truthy values: "1", "true", "yes", "on"),
    which forces DEBUG verbosity.
    """
    import logging
    import os
    import sys

    debug_env = os.environ.get("PHONEGAP_SERVE_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure basic handler if no handlers are present to avoid duplicate output.
    if not root.handlers:
        from colorlog import ColoredFormatter

        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, only the level is colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def run_server(args: Optional[object] = None) -> int:
    """Serve in the foreground until interrupted.

    Options come from the environment (and a ``.env`` file), then from the
    command line namespace ``args`` (``port``, ``host``, ``www``, ``debug``)
    where those are set.

    Returns:
        Process exit code
    """
    import asyncio
    import logging
    import os

    from .core.config_manager import ConfigManager
    from .core.logging_config import configure_serve_logging
    from .runner import serve_until_stopped

    _init_logging(os.environ.get("PHONEGAP_SERVE_LOG_LEVEL"))
    logger = logging.getLogger(__name__)

    options = ConfigManager().load_full_config()
    for key in ("port", "host", "www"):
        value = getattr(args, key, None)
        if value is not None:
            options[key] = value
    if getattr(args, "debug", False):
        options["debug_logging"] = True

    configure_serve_logging(debug_mode=bool(options.get("debug_logging", False)))
    logger.debug("Options: %s", options)

    try:
        return asyncio.run(serve_until_stopped(options))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
