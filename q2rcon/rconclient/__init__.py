"""Provides blocking Quake II RCON sessions over UDP."""

from .codec import (
    BAD_RCON_REPLIES,
    DEFAULT_TIMEOUT_MS,
    RCON_REPLY_HEADER,
    RCON_SEND_PREFIX,
    decode_response,
    encode_command,
    is_bad_password_reply,
    strip_reply_header,
)
from .errors import (
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
)
from .session import RconSession, SessionState
from .transport import (
    DatagramTransport,
    StreamTransport,
    Transport,
    TransportKind,
    create_transport,
)

__all__ = [
    "BAD_RCON_REPLIES",
    "DEFAULT_TIMEOUT_MS",
    "RCON_REPLY_HEADER",
    "RCON_SEND_PREFIX",
    "DatagramTransport",
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
    "RconSession",
    "SessionState",
    "StreamTransport",
    "Transport",
    "TransportKind",
    "create_transport",
    "decode_response",
    "encode_command",
    "is_bad_password_reply",
    "strip_reply_header",
]
