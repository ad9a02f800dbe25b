"""Quake II remote console (RCON) client library."""

from .config import RconConfig, configure_logging, load_config_from_env
from .rconclient import (
    RCONClientAuthenticationFailed,
    RCONClientCloseFailed,
    RCONClientConnectionFailed,
    RCONClientError,
    RCONClientInvalidConfig,
    RCONClientInvalidInput,
    RCONClientNotConnected,
    RCONClientNotSupported,
    RCONClientReceiveFailed,
    RCONClientSendFailed,
    RCONClientTimeout,
    RconSession,
    TransportKind,
)

__all__ = [
    "RCONClientAuthenticationFailed",
    "RCONClientCloseFailed",
    "RCONClientConnectionFailed",
    "RCONClientError",
    "RCONClientInvalidConfig",
    "RCONClientInvalidInput",
    "RCONClientNotConnected",
    "RCONClientNotSupported",
    "RCONClientReceiveFailed",
    "RCONClientSendFailed",
    "RCONClientTimeout",
    "RconConfig",
    "RconSession",
    "TransportKind",
    "configure_logging",
    "load_config_from_env",
]
