"""
Dead-simple Quake II RCON packet creation and parsing.

Pure functions only, no sockets. A command packet is the connectionless
prefix followed by "rcon <password> <command>"; there is no length field
since every packet travels in its own datagram. Replies come back as one
or more datagrams, each carrying a "print" header that has to be removed
before the text is joined together.

Usage:
packet = encode_command(password, "status")
body = strip_reply_header(datagram)
text = decode_response(body)
"""

from .errors import RCONClientInvalidInput

RCON_SEND_PREFIX = b"\xff\xff\xff\xff"
RCON_REPLY_HEADER = RCON_SEND_PREFIX + b"print\n"
RCON_COMMAND_FORMAT = "rcon %s %s"

BAD_RCON_REPLIES = ("Bad rcon_password.", "Invalid password.")
STATUS_COMMAND = "status"

# milliseconds, shared by every transport
DEFAULT_TIMEOUT_MS = 1000
MAX_DATAGRAM_SIZE = 4096

_RESPONSE_ENCODING = "latin-1"


def encode_command(password: str, command: str | None) -> bytes:
    """
    Formats a command packet to be sent to the RCON server.

    The password is embedded in every packet and is not checked here,
    the server decides whether it is acceptable.

    Args:
        password: The RCON password.
        command: The console command to execute.

    Returns:
        The formatted packet as bytes.

    Raises:
        RCONClientInvalidInput: if the command is missing or empty, or if the
            password or command contains non-ASCII characters.
    """
    if not command:
        msg = "No command supplied"
        raise RCONClientInvalidInput(msg)

    try:
        body = (RCON_COMMAND_FORMAT % (password, command)).encode("ascii")
    except UnicodeEncodeError as e:
        msg = "RCON commands must be ASCII"
        raise RCONClientInvalidInput(msg) from e

    return RCON_SEND_PREFIX + body


def strip_reply_header(fragment: bytes) -> bytes:
    """
    Removes every reply header from a received datagram.

    Servers may repeat the header inside a datagram, so all occurrences are
    removed rather than just a leading one.

    Args:
        fragment: The raw datagram payload.

    Returns:
        The payload without any reply header, otherwise unchanged.
    """
    return fragment.replace(RCON_REPLY_HEADER, b"")


def decode_response(data: bytes) -> str:
    """
    Decodes the joined reply bytes into trimmed text.

    Quake II servers send high-bit characters for colored text, which are
    not valid UTF-8, so every byte is mapped one to one.
    """
    return data.decode(_RESPONSE_ENCODING).strip()


def is_bad_password_reply(response: str) -> bool:
    """Check whether a reply is one of the server's bad password messages."""
    return response.strip() in BAD_RCON_REPLIES
