"""Return codes, connection states, protocol enumerations and the library error type."""

from __future__ import annotations

import enum

MAX_WIRE_MTU = 1500
MAX_MTU = 1350

WIRE_MINIMUM_PROTOCOL_MAJOR_VERSION = 1
WIRE_MINIMUM_PROTOCOL_MINOR_VERSION = 0
WIRE_MAXIMUM_PROTOCOL_MAJOR_VERSION = 1
WIRE_MAXIMUM_PROTOCOL_MINOR_VERSION = 1

CONFIG_TEXT_FIELD_LENGTH = 50
MAX_IPV4_STRING_LENGTH = 24

PACKET_SESSION_REJECT = 0xFFFFFFFFFFFFFFFF
PACKET_SESSION_EMPTY = 0x0000000000000000

AUTH_STATUS_SUCCESS = 0
AUTH_STATUS_FAILURE = 1

EXT_TYPE_REQUEST = 1
EXT_TYPE_RESPONSE = 2
EXT_ID_BLOCK_DNS_OVER_TLS = 1
EXT_PAYLOAD_TYPE_MSGPACK = 1
EXT_PAYLOAD_TYPE_BINARY = 2
EXT_PAYLOAD_TYPE_INT16 = 3

WOLF_MAX_HEADER_SIZE = 37
IPV4_HEADER_SIZE = 20
TCP_HEADER_SIZE = 20
UDP_HEADER_SIZE = 8
HEADER_SAFE_GAP = 28

_WIRE_HEADER_SIZE = 16
_DEPRECATED_MSG_13_SIZE = 5

PACKET_OVERHEAD = (
    _DEPRECATED_MSG_13_SIZE
    + _WIRE_HEADER_SIZE
    + IPV4_HEADER_SIZE
    + UDP_HEADER_SIZE
    + WOLF_MAX_HEADER_SIZE
    + HEADER_SAFE_GAP
)
MSS_OVERHEAD = IPV4_HEADER_SIZE + UDP_HEADER_SIZE


class ReturnCode(enum.IntEnum):
    """Every result the library can report."""

    SUCCESS = 0
    ERR_STRING_TOO_LONG = -1
    ERR_EMPTY_STRING = -2
    ERR_INVALID_CONN_STATE = -3
    ERR_NULL_POINTER = -4
    ERR_EMPTY_PACKET = -5
    ERR_PACKET_TOO_SMALL = -6
    ERR_ZERO_SIZE = -7
    ERR_NEGATIVE_NUMBER = -8
    ERR_INIT_FAILED = -9
    ERR_NO_MEMORY = -10
    ERR_NOT_HE_PACKET = -11
    ERR_SSL_BAD_FILETYPE = -12
    ERR_SSL_BAD_FILE = -13
    ERR_SSL_OUT_OF_MEMORY = -14
    ERR_SSL_ASN_INPUT = -15
    ERR_SSL_BUFFER = -16
    ERR_SSL_CERT = -17
    ERR_SSL_ERROR = -18
    ERR_CONF_USERNAME_NOT_SET = -19
    ERR_CONF_PASSWORD_NOT_SET = -20
    ERR_CONF_CA_NOT_SET = -21
    ERR_CONF_MTU_NOT_SET = -22
    WANT_READ = -23
    WANT_WRITE = -24
    ERR_CONF_OUTSIDE_WRITE_CB_NOT_SET = -25
    ERR_CONNECT_FAILED = -26
    CONNECTION_TIMED_OUT = -27
    ERR_NOT_CONNECTED = -28
    ERR_UNSUPPORTED_PACKET_TYPE = -29
    ERR_CONNECTION_WAS_CLOSED = -30
    ERR_BAD_PACKET = -31
    ERR_CALLBACK_FAILED = -32
    ERR_FAILED = -33
    ERR_SERVER_DN_MISMATCH = -34
    ERR_CANNOT_VERIFY_SERVER_CERT = -35
    ERR_NEVER_CONNECTED = -36
    ERR_INVALID_MTU_SIZE = -37
    ERR_CLEANUP_FAILED = -38
    ERR_REJECTED_SESSION = -39
    ERR_ACCESS_DENIED = -40
    ERR_PACKET_TOO_LARGE = -41
    ERR_INACTIVITY_TIMEOUT = -42
    ERR_POINTER_WOULD_OVERFLOW = -43
    ERR_INVALID_CONNECTION_TYPE = -46
    ERR_RNG_FAILURE = -47
    ERR_CONF_AUTH_CB_NOT_SET = -48
    ERR_PLUGIN_DROP = -49
    ERR_UNKNOWN_SESSION = -50
    ERR_SSL_ERROR_NONFATAL = -51
    ERR_INCORRECT_PROTOCOL_VERSION = -52
    ERR_CONF_CONFLICTING_AUTH_METHODS = -53
    ERR_ACCESS_DENIED_NO_AUTH_BUF_HANDLER = -54
    ERR_ACCESS_DENIED_NO_AUTH_USERPASS_HANDLER = -55
    ERR_SERVER_GOODBYE = -56
    ERR_INVALID_AUTH_TYPE = -57

    @property
    def description(self) -> str:
        """A short human-readable explanation of the code."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ReturnCode.SUCCESS: "The call completed successfully",
    ReturnCode.ERR_STRING_TOO_LONG: "String parameter is too long to be stored",
    ReturnCode.ERR_EMPTY_STRING: "Configuration parameter cannot be an empty string",
    ReturnCode.ERR_INVALID_CONN_STATE: "Connection is not in a suitable state",
    ReturnCode.ERR_NULL_POINTER: "A required argument was missing",
    ReturnCode.ERR_EMPTY_PACKET: "An empty packet was passed",
    ReturnCode.ERR_PACKET_TOO_SMALL: "Packet is too small to be valid",
    ReturnCode.ERR_ZERO_SIZE: "Length was zero",
    ReturnCode.ERR_NEGATIVE_NUMBER: "A negative value was given where only unsigned is allowed",
    ReturnCode.ERR_INIT_FAILED: "Initialisation failed",
    ReturnCode.ERR_NO_MEMORY: "Could not allocate memory",
    ReturnCode.ERR_NOT_HE_PACKET: "Packet does not have a Helium header",
    ReturnCode.ERR_SSL_BAD_FILETYPE: "SSL certificate is not in PEM format",
    ReturnCode.ERR_SSL_BAD_FILE: "SSL certificate is corrupt or missing",
    ReturnCode.ERR_SSL_OUT_OF_MEMORY: "SSL layer ran out of memory",
    ReturnCode.ERR_SSL_ASN_INPUT: "SSL certificate is not in the correct format",
    ReturnCode.ERR_SSL_BUFFER: "SSL layer ran out of buffers",
    ReturnCode.ERR_SSL_CERT: "Generic issue with the SSL certificate",
    ReturnCode.ERR_SSL_ERROR: "Generic issue with the SSL layer",
    ReturnCode.ERR_CONF_USERNAME_NOT_SET: "Username not set in config",
    ReturnCode.ERR_CONF_PASSWORD_NOT_SET: "Password not set in config",
    ReturnCode.ERR_CONF_CA_NOT_SET: "CA not set in config",
    ReturnCode.ERR_CONF_MTU_NOT_SET: "MTU not set in config",
    ReturnCode.WANT_READ: "More data needs to be read before continuing",
    ReturnCode.WANT_WRITE: "More data needs to be written before continuing",
    ReturnCode.ERR_CONF_OUTSIDE_WRITE_CB_NOT_SET: "Outside write callback not set in config",
    ReturnCode.ERR_CONNECT_FAILED: "Connection failed",
    ReturnCode.CONNECTION_TIMED_OUT: "Connection timed out",
    ReturnCode.ERR_NOT_CONNECTED: "Not connected",
    ReturnCode.ERR_UNSUPPORTED_PACKET_TYPE: "Only IPv4 and IPv6 packets are supported",
    ReturnCode.ERR_CONNECTION_WAS_CLOSED: "The connection was closed",
    ReturnCode.ERR_BAD_PACKET: "The packet was invalid",
    ReturnCode.ERR_CALLBACK_FAILED: "Callback failed",
    ReturnCode.ERR_FAILED: "Generic failure",
    ReturnCode.ERR_SERVER_DN_MISMATCH: "Server certificate name did not match",
    ReturnCode.ERR_CANNOT_VERIFY_SERVER_CERT: "Unable to verify the server certificate",
    ReturnCode.ERR_NEVER_CONNECTED: "Disconnect was called before connect",
    ReturnCode.ERR_INVALID_MTU_SIZE: "MTU size was invalid",
    ReturnCode.ERR_CLEANUP_FAILED: "Failed to clean up global state",
    ReturnCode.ERR_REJECTED_SESSION: "The server rejected or could not find the session",
    ReturnCode.ERR_ACCESS_DENIED: "The server rejected the login",
    ReturnCode.ERR_PACKET_TOO_LARGE: "Packet was too large",
    ReturnCode.ERR_INACTIVITY_TIMEOUT: "Disconnected due to inactivity",
    ReturnCode.ERR_POINTER_WOULD_OVERFLOW: "Buffer offset would overflow",
    ReturnCode.ERR_INVALID_CONNECTION_TYPE: "Unknown connection type",
    ReturnCode.ERR_RNG_FAILURE: "Random number generator failure",
    ReturnCode.ERR_CONF_AUTH_CB_NOT_SET: "Auth callback not set on a server",
    ReturnCode.ERR_PLUGIN_DROP: "A plugin requested that the packet be dropped",
    ReturnCode.ERR_UNKNOWN_SESSION: "Inconsistent session received",
    ReturnCode.ERR_SSL_ERROR_NONFATAL: "Non-fatal SSL error on a packet",
    ReturnCode.ERR_INCORRECT_PROTOCOL_VERSION: "Protocol version changed after creation",
    ReturnCode.ERR_CONF_CONFLICTING_AUTH_METHODS: "Both username/password and auth buffer are set",
    ReturnCode.ERR_ACCESS_DENIED_NO_AUTH_BUF_HANDLER: "No handler configured for auth buffers",
    ReturnCode.ERR_ACCESS_DENIED_NO_AUTH_USERPASS_HANDLER: "No handler configured for username/password auth",
    ReturnCode.ERR_SERVER_GOODBYE: "The server said goodbye",
    ReturnCode.ERR_INVALID_AUTH_TYPE: "Invalid authentication type",
}


class ConnState(enum.IntEnum):
    """Lifecycle states of a connection."""

    NONE = 0
    DISCONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 4
    AUTHENTICATING = 5
    LINK_UP = 6
    ONLINE = 7
    CONFIGURING = 8


class ConnEvent(enum.IntEnum):
    """Events reported to the host application."""

    FIRST_MESSAGE_RECEIVED = 1
    PONG = 2
    REJECTED_FRAGMENTED_PACKETS_SENT_BY_HOST = 3
    SECURE_RENEGOTIATION_STARTED = 4
    SECURE_RENEGOTIATION_COMPLETED = 5
    PENDING_SESSION_ACKNOWLEDGED = 6


class PaddingType(enum.IntEnum):
    """How data packets are padded before encryption."""

    NONE = 0
    FULL = 1
    ROUND_450 = 2


class ConnectionType(enum.IntEnum):
    """Datagram (UDP) or stream (TCP) transport."""

    DATAGRAM = 0
    STREAM = 1


class MsgId(enum.IntEnum):
    """Identifiers of the messages carried inside the secure channel."""

    NOOP = 1
    PING = 2
    PONG = 3
    AUTH = 4
    DATA = 5
    CONFIG_IPV4 = 6
    AUTH_RESPONSE = 7
    AUTH_RESPONSE_WITH_CONFIG = 8
    EXTENSION = 9
    SESSION_REQUEST = 10
    SESSION_RESPONSE = 11
    GOODBYE = 12
    DEPRECATED_13 = 13


class AuthType(enum.IntEnum):
    """Authentication methods a client may use."""

    USERPASS = 1
    CB = 23


class HeError(Exception):
    """An error carrying a library return code."""

    def __init__(self, code, message=None):
        self.code = ReturnCode(code)
        if self.code is ReturnCode.SUCCESS:
            raise ValueError("HeError cannot be built from a success code")
        self.message = message if message is not None else self.code.description
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"


def raise_for_code(code) -> ReturnCode:
    """Return SUCCESS for a success code; raise HeError for any other known code."""
    try:
        result = ReturnCode(code)
    except ValueError:
        raise ValueError(f"unknown return code: {code!r}") from None
    if result is not ReturnCode.SUCCESS:
        raise HeError(result)
    return result