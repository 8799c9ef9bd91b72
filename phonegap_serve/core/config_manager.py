"""Configuration management for the phonegap_serve server."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"  # nosec B104

_TRUTHY = ("1", "true", "yes", "on")


class ServerConfiguration(BaseModel):
    """Resolved server options.

    ``port`` is the only option interpreted here. Every other key is kept as
    an extra field, untouched, and handed to the pipeline factory.

    Attributes:
        port: TCP port to bind (1-65535, default 3000)
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    port: int = Field(DEFAULT_PORT, gt=0, le=65535, description="TCP port to listen on")

    @field_validator("port", mode="before")
    @classmethod
    def default_falsy_port(cls, v: Any) -> Any:
        """Treat None, 0, "" and other falsy values as "use the default"."""
        return v or DEFAULT_PORT

    def as_options(self) -> dict[str, Any]:
        """Return every option, port included, as a plain dict."""
        return {"port": self.port, **(self.model_extra or {})}

    def get(self, key: str, default: Any = None) -> Any:
        return self.as_options().get(key, default)


def resolve_config(
    options: Union[Mapping[str, Any], ServerConfiguration, None] = None,
) -> ServerConfiguration:
    """Resolve caller options into a ServerConfiguration.

    Args:
        options: Caller options; None means "all defaults". Never mutated.

    Returns:
        Frozen configuration with ``port`` defaulted

    Raises:
        pydantic.ValidationError: ``port`` is not a positive integer
    """
    if isinstance(options, ServerConfiguration):
        return options
    return ServerConfiguration.model_validate(dict(options or {}))


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Args:
        path: Path to .env file

    Returns:
        Dictionary of key-value pairs from the .env file.
        Empty dict if file doesn't exist or cannot be read.

    Note:
        - Skips empty lines and comments (lines starting with #)
        - Strips quotes (both single and double) from values
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("Failed to read .env file (continuing): %s", str(path), exc_info=True)
        return {}

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip('"').strip("'")

        if key:
            result[key] = val

    return result


class ConfigManager:
    """Builds server options from environment variables and .env files."""

    def __init__(self, env_file_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file into os.environ without overriding existing variables.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        set_keys = []
        for key, val in parse_env_file(self.env_file_path).items():
            if key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build an options mapping from environment variables.

        Recognizes:
        - PHONEGAP_SERVE_PORT -> 'port' (int)
        - PHONEGAP_SERVE_HOST -> 'host'
        - PHONEGAP_SERVE_WWW -> 'www'
        - PHONEGAP_SERVE_DEBUG -> 'debug_logging' (bool)

        Returns:
            Options mapping accepted by ``listen()``
        """
        cfg: dict[str, Any] = {}

        port = os.environ.get("PHONEGAP_SERVE_PORT")
        if port:
            try:
                cfg["port"] = int(port)
            except ValueError:
                logger.warning("Invalid PHONEGAP_SERVE_PORT=%r; ignoring", port)

        host = os.environ.get("PHONEGAP_SERVE_HOST")
        if host:
            cfg["host"] = host

        www = os.environ.get("PHONEGAP_SERVE_WWW")
        if www:
            cfg["www"] = www

        debug = os.environ.get("PHONEGAP_SERVE_DEBUG")
        if debug:
            cfg["debug_logging"] = debug.strip().lower() in _TRUTHY

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file, then build options from the environment."""
        self.load_env_file()
        return self.build_config_from_env()


def get_config_value(config: Any, key: str, default: Any = None) -> Any:
    """Get configuration value supporting both dict and attribute-style objects.

    Args:
        config: Mapping, ServerConfiguration or any object with attributes
        key: Configuration key to retrieve
        default: Default value if key not found
    """
    if isinstance(config, (Mapping, ServerConfiguration)):
        return config.get(key, default)
    return getattr(config, key, default)
