"""Custom exceptions for the RCON client module."""


class RCONClientError(Exception):
    """Base class for every error raised by the RCON client."""

    pass


class RCONClientInvalidConfig(RCONClientError, ValueError):
    """Raised when a session is opened with a bad host or port."""

    pass


class RCONClientInvalidInput(RCONClientError, ValueError):
    """Raised when a command is missing, empty, or cannot be encoded."""

    pass


class RCONClientConnectionFailed(RCONClientError):
    """Raised when the transport cannot be opened."""

    pass


class RCONClientAuthenticationFailed(RCONClientError):
    """Raised when the server rejects the RCON password."""

    pass


class RCONClientTimeout(RCONClientError, TimeoutError):
    """Raised when no reply arrives within the timeout window."""

    pass


class RCONClientSendFailed(RCONClientError):
    """Raised when a command packet cannot be transmitted."""

    pass


class RCONClientReceiveFailed(RCONClientError):
    """Raised when reading a reply fails for a reason other than a timeout."""

    pass


class RCONClientNotConnected(RCONClientError):
    """Raised when the session or transport is not open."""

    pass


class RCONClientNotSupported(RCONClientError):
    """Raised when a transport variant is not implemented."""

    pass


class RCONClientCloseFailed(RCONClientError):
    """Raised when a stream transport fails to release its socket."""

    pass
