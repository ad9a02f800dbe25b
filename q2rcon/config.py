"""Configuration management for the RCON client.

This module provides utilities for loading and validating configuration
from environment variables, optionally seeded from a dotenv file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from dotenv import load_dotenv

from .rconclient import DEFAULT_TIMEOUT_MS, RconSession, TransportKind

if TYPE_CHECKING:
    from pathlib import Path

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)


def configure_logging(config: RconConfig) -> None:
    """Install a root handler at the configured level, replacing any other.

    :param config: The client configuration instance
    """
    logging.basicConfig(level=config.log_level, force=True)


@dataclass
class RconConfig:
    """RCON client configuration loaded from environment variables.

    Every field defaults to its environment variable, so ``RconConfig()``
    reads the current environment and keyword arguments override it.

    **Usage:**

    .. code-block:: python

        config = load_config_from_env(".env")
        configure_logging(config)
        with config.open_session() as session:
            session.send("status")
    """

    DEFAULT_HOST: ClassVar[str] = "localhost"
    DEFAULT_PORT: ClassVar[int] = 27910
    PORT_UPPER_BOUND: ClassVar[int] = 65535

    host: str = field(
        default_factory=lambda: os.getenv("RCON_HOST", RconConfig.DEFAULT_HOST),
    )
    port: int = field(
        default_factory=lambda: RconConfig._getenv_int_required(
            "RCON_PORT",
            RconConfig.DEFAULT_PORT,
        ),
    )
    password: str = field(
        default_factory=lambda: RconConfig._getenv_str_required("RCON_PASSWORD"),
        repr=False,
    )
    timeout_ms: int = field(
        default_factory=lambda: RconConfig._getenv_int_required(
            "RCON_TIMEOUT_MS",
            DEFAULT_TIMEOUT_MS,
        ),
    )
    transport: str = field(
        default_factory=lambda: os.getenv(
            "RCON_TRANSPORT",
            TransportKind.DATAGRAM.value,
        ),
    )

    logging_level: str | None = field(
        default_factory=lambda: os.getenv("LOGGING_LEVEL"),
    )

    def __post_init__(self) -> None:
        """Post-initialization validation."""
        if not self.host:
            msg = "RCON_HOST must not be empty"
            raise ValueError(msg)
        if not 0 < self.port <= self.PORT_UPPER_BOUND:
            msg = f"RCON_PORT must be between 1 and {self.PORT_UPPER_BOUND}"
            raise ValueError(msg)
        if self.timeout_ms <= 0:
            msg = "RCON_TIMEOUT_MS must be a positive integer"
            raise ValueError(msg)
        if self.transport not in {kind.value for kind in TransportKind}:
            msg = f"RCON_TRANSPORT has invalid value: {self.transport}"
            raise ValueError(msg)
        if (
            self.logging_level
            and self.logging_level.upper() not in logging.getLevelNamesMapping()
        ):
            msg = f"LOGGING_LEVEL has invalid value: {self.logging_level}"
            raise ValueError(msg)

    @property
    def transport_kind(self) -> TransportKind:
        return TransportKind(self.transport)

    @property
    def log_level(self) -> int:
        """Numeric logging level, INFO when LOGGING_LEVEL is unset."""
        if not self.logging_level:
            return logging.INFO
        return logging.getLevelNamesMapping()[self.logging_level.upper()]

    def open_session(self) -> RconSession:
        """Open and validate an RconSession using this configuration.

        :return: An open RconSession
        :rtype: RconSession
        """
        return RconSession.open(
            self.host,
            self.port,
            self.password,
            transport=self.transport_kind,
            timeout_ms=self.timeout_ms,
        )

    @staticmethod
    def _getenv_str_required(key: str) -> str:
        """Get a required string environment variable.

        :param key: Environment variable name
        :type key: str
        :return: The environment variable value
        :rtype: str
        :raises ValueError: If variable is not set
        """
        value = os.getenv(key)
        if value is None:
            msg = f"Required environment variable {key} is not set"
            raise ValueError(msg)
        return value

    @staticmethod
    def _getenv_int_required(key: str, default: int) -> int:
        """Get an integer environment variable with a default.

        :param key: Environment variable name
        :type key: str
        :param default: Default value if not set
        :type default: int
        :return: The environment variable value as integer or default
        :rtype: int
        :raises ValueError: If value cannot be converted to int
        """
        value_str = os.getenv(key)

        if value_str is None or value_str == "":
            return default

        try:
            return int(value_str)
        except ValueError as e:
            msg = f"Environment variable {key} must be an integer, got: {value_str}"
            raise ValueError(msg) from e


def load_config_from_env(env_file: str | Path | None = None) -> RconConfig:
    """Load client configuration from environment variables.

    Values already present in the environment win over the dotenv file.

    :param env_file: Optional dotenv file to load first
    :return: An RconConfig instance populated with environment variable values
    """
    if env_file:
        loaded = load_dotenv(dotenv_path=env_file)
        LOGGER.debug("Loaded dotenv file %s: %s", env_file, loaded)

    return RconConfig()
