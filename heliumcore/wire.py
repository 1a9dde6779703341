"""Binary layouts of the outer wire header and the messages inside the secure channel.

Multi-byte integers are little-endian. Text fields are fixed-width and NUL-padded.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from .codes import (
    AUTH_STATUS_SUCCESS,
    CONFIG_TEXT_FIELD_LENGTH,
    MAX_IPV4_STRING_LENGTH,
    MAX_MTU,
    PACKET_SESSION_EMPTY,
    WIRE_MAXIMUM_PROTOCOL_MAJOR_VERSION,
    WIRE_MAXIMUM_PROTOCOL_MINOR_VERSION,
    AuthType,
    HeError,
    MsgId,
    PaddingType,
    ReturnCode,
)

_PADDING_STEP = 450


def _pack(layout: struct.Struct, *values) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"value out of range for wire field: {exc}") from None


def _require(data, size: int) -> None:
    if len(data) < size:
        raise HeError(
            ReturnCode.ERR_PACKET_TOO_SMALL,
            f"need {size} bytes, got {len(data)}",
        )


def _check_msgid(actual: int, *expected: MsgId) -> MsgId:
    if actual not in expected:
        raise HeError(ReturnCode.ERR_BAD_PACKET, f"unexpected message id {actual}")
    return MsgId(actual)


def _encode_text(text: str, width: int, *, terminated: bool) -> bytes:
    raw = text.encode("utf-8")
    limit = width - 1 if terminated else width
    if len(raw) > limit:
        raise HeError(
            ReturnCode.ERR_STRING_TOO_LONG,
            f"{len(raw)} bytes do not fit in a {limit}-byte field",
        )
    return raw


def _decode_text(raw: bytes) -> str:
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError:
        raise HeError(ReturnCode.ERR_BAD_PACKET, "text field is not valid UTF-8") from None


def _decode_terminated(raw: bytes) -> str:
    return _decode_text(bytes(raw).split(b"\0", 1)[0])


@dataclass(frozen=True)
class WireHeader:
    """The outer header that prefixes every packet sent on the wire."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<2sBBB3sQ")
    SIZE: ClassVar[int] = _LAYOUT.size
    MAGIC: ClassVar[bytes] = b"He"

    major_version: int = WIRE_MAXIMUM_PROTOCOL_MAJOR_VERSION
    minor_version: int = WIRE_MAXIMUM_PROTOCOL_MINOR_VERSION
    aggressive_mode: bool = False
    session: int = PACKET_SESSION_EMPTY

    def pack(self) -> bytes:
        return _pack(
            self._LAYOUT,
            self.MAGIC,
            self.major_version,
            self.minor_version,
            1 if self.aggressive_mode else 0,
            b"\0\0\0",
            self.session,
        )

    @classmethod
    def unpack(cls, data) -> WireHeader:
        _require(data, cls.SIZE)
        magic, major, minor, aggressive, _reserved, session = cls._LAYOUT.unpack_from(data)
        if magic != cls.MAGIC:
            raise HeError(ReturnCode.ERR_NOT_HE_PACKET)
        return cls(major, minor, bool(aggressive), session)


@dataclass(frozen=True)
class PingMessage:
    """A keepalive ping, or the pong that answers it."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<BI")
    SIZE: ClassVar[int] = _LAYOUT.size

    payload: int = 0
    msg_id: MsgId = MsgId.PING

    def __post_init__(self) -> None:
        if self.msg_id not in (MsgId.PING, MsgId.PONG):
            raise ValueError(f"ping message id must be PING or PONG, not {self.msg_id!r}")

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, self.msg_id, self.payload)

    @classmethod
    def unpack(cls, data) -> PingMessage:
        _require(data, cls.SIZE)
        msg_id, payload = cls._LAYOUT.unpack_from(data)
        return cls(payload, _check_msgid(msg_id, MsgId.PING, MsgId.PONG))


@dataclass(frozen=True)
class AuthMessage:
    """Username and password authentication request."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(
        f"<BBBB{CONFIG_TEXT_FIELD_LENGTH}s{CONFIG_TEXT_FIELD_LENGTH}s"
    )
    SIZE: ClassVar[int] = _LAYOUT.size

    username: str
    password: str
    auth_type: int = AuthType.USERPASS

    def pack(self) -> bytes:
        user = _encode_text(self.username, CONFIG_TEXT_FIELD_LENGTH, terminated=False)
        secret = _encode_text(self.password, CONFIG_TEXT_FIELD_LENGTH, terminated=False)
        return _pack(
            self._LAYOUT, MsgId.AUTH, self.auth_type, len(user), len(secret), user, secret
        )

    @classmethod
    def unpack(cls, data) -> AuthMessage:
        _require(data, cls.SIZE)
        msg_id, auth_type, user_len, secret_len, user, secret = cls._LAYOUT.unpack_from(data)
        _check_msgid(msg_id, MsgId.AUTH)
        if auth_type != AuthType.USERPASS:
            raise HeError(ReturnCode.ERR_INVALID_AUTH_TYPE)
        if user_len > CONFIG_TEXT_FIELD_LENGTH or secret_len > CONFIG_TEXT_FIELD_LENGTH:
            raise HeError(ReturnCode.ERR_BAD_PACKET, "credential length out of range")
        return cls(
            _decode_text(user[:user_len]),
            _decode_text(secret[:secret_len]),
            AuthType(auth_type),
        )


@dataclass(frozen=True)
class AuthBufferMessage:
    """Authentication request carrying an opaque buffer for the host to interpret."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<BBH")
    HEADER_SIZE: ClassVar[int] = _LAYOUT.size

    buffer: bytes
    auth_type: int = AuthType.CB

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, MsgId.AUTH, self.auth_type, len(self.buffer)) + bytes(
            self.buffer
        )

    @classmethod
    def unpack(cls, data) -> AuthBufferMessage:
        _require(data, cls.HEADER_SIZE)
        msg_id, auth_type, length = cls._LAYOUT.unpack_from(data)
        _check_msgid(msg_id, MsgId.AUTH)
        _require(data, cls.HEADER_SIZE + length)
        start = cls.HEADER_SIZE
        return cls(bytes(data[start : start + length]), auth_type)


@dataclass(frozen=True)
class ConfigIPv4Message:
    """Network configuration pushed from the server to the client."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(
        "<B" + f"{MAX_IPV4_STRING_LENGTH}s" * 4 + "Q"
    )
    SIZE: ClassVar[int] = _LAYOUT.size

    local_ip: str
    peer_ip: str
    dns_ip: str
    mtu: int
    session: int = PACKET_SESSION_EMPTY

    def pack(self) -> bytes:
        fields = [
            _encode_text(text, MAX_IPV4_STRING_LENGTH, terminated=True)
            for text in (self.local_ip, self.peer_ip, self.dns_ip, str(self.mtu))
        ]
        return _pack(self._LAYOUT, MsgId.CONFIG_IPV4, *fields, self.session)

    @classmethod
    def unpack(cls, data) -> ConfigIPv4Message:
        _require(data, cls.SIZE)
        msg_id, local_ip, peer_ip, dns_ip, mtu, session = cls._LAYOUT.unpack_from(data)
        _check_msgid(msg_id, MsgId.CONFIG_IPV4)
        mtu_text = _decode_terminated(mtu)
        try:
            mtu_value = int(mtu_text)
        except ValueError:
            raise HeError(ReturnCode.ERR_BAD_PACKET, f"invalid MTU {mtu_text!r}") from None
        return cls(
            _decode_terminated(local_ip),
            _decode_terminated(peer_ip),
            _decode_terminated(dns_ip),
            mtu_value,
            session,
        )


@dataclass(frozen=True)
class DataMessage:
    """A tunnelled packet; any bytes after the declared length are padding."""

    _DATA_LAYOUT: ClassVar[struct.Struct] = struct.Struct("<BH")
    _DEPRECATED_LAYOUT: ClassVar[struct.Struct] = struct.Struct("<BHH")

    payload: bytes
    msg_id: MsgId = MsgId.DATA

    def __post_init__(self) -> None:
        if self.msg_id not in (MsgId.DATA, MsgId.DEPRECATED_13):
            raise ValueError(f"data message id must be DATA or DEPRECATED_13, not {self.msg_id!r}")

    @classmethod
    def _layout(cls, msg_id: int) -> struct.Struct:
        return cls._DATA_LAYOUT if msg_id == MsgId.DATA else cls._DEPRECATED_LAYOUT

    @property
    def header_size(self) -> int:
        return self._layout(self.msg_id).size

    def pack(self) -> bytes:
        layout = self._layout(self.msg_id)
        values = (self.msg_id, len(self.payload))
        if self.msg_id == MsgId.DEPRECATED_13:
            values += (0,)
        return _pack(layout, *values) + bytes(self.payload)

    @classmethod
    def unpack(cls, data) -> DataMessage:
        _require(data, 1)
        msg_id = _check_msgid(data[0], MsgId.DATA, MsgId.DEPRECATED_13)
        layout = cls._layout(msg_id)
        _require(data, layout.size)
        length = layout.unpack_from(data)[1]
        _require(data, layout.size + length)
        return cls(bytes(data[layout.size : layout.size + length]), msg_id)


@dataclass(frozen=True)
class AuthResponseMessage:
    """The server's answer to an authentication request."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<BBB{CONFIG_TEXT_FIELD_LENGTH}s")
    SIZE: ClassVar[int] = _LAYOUT.size

    status: int = AUTH_STATUS_SUCCESS
    status_msg: str = ""

    def pack(self) -> bytes:
        text = _encode_text(self.status_msg, CONFIG_TEXT_FIELD_LENGTH, terminated=False)
        return _pack(self._LAYOUT, MsgId.AUTH_RESPONSE, self.status, len(text), text)

    @classmethod
    def unpack(cls, data) -> AuthResponseMessage:
        _require(data, cls.SIZE)
        msg_id, status, length, text = cls._LAYOUT.unpack_from(data)
        _check_msgid(msg_id, MsgId.AUTH_RESPONSE)
        if length > CONFIG_TEXT_FIELD_LENGTH:
            raise HeError(ReturnCode.ERR_BAD_PACKET, "status message length out of range")
        return cls(status, _decode_text(text[:length]))


@dataclass(frozen=True)
class SessionResponseMessage:
    """Carries a newly assigned session identifier."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<BQ")
    SIZE: ClassVar[int] = _LAYOUT.size

    session: int

    def pack(self) -> bytes:
        return _pack(self._LAYOUT, MsgId.SESSION_RESPONSE, self.session)

    @classmethod
    def unpack(cls, data) -> SessionResponseMessage:
        _require(data, cls.SIZE)
        msg_id, session = cls._LAYOUT.unpack_from(data)
        _check_msgid(msg_id, MsgId.SESSION_RESPONSE)
        return cls(session)


@dataclass(frozen=True)
class ExtensionMessage:
    """A protocol extension request or response with a typed payload."""

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<BHBBH")
    HEADER_SIZE: ClassVar[int] = _LAYOUT.size

    extension_id: int
    msg_type: int
    payload_type: int
    payload: bytes = b""

    def pack(self) -> bytes:
        header = _pack(
            self._LAYOUT,
            MsgId.EXTENSION,
            self.extension_id,
            self.msg_type,
            self.payload_type,
            len(self.payload),
        )
        return header + bytes(self.payload)

    @classmethod
    def unpack(cls, data) -> ExtensionMessage:
        _require(data, cls.HEADER_SIZE)
        msg_id, extension_id, msg_type, payload_type, length = cls._LAYOUT.unpack_from(data)
        _check_msgid(msg_id, MsgId.EXTENSION)
        _require(data, cls.HEADER_SIZE + length)
        start = cls.HEADER_SIZE
        return cls(extension_id, msg_type, payload_type, bytes(data[start : start + length]))


def calculate_padded_length(padding_type, length: int) -> int:
    """Return the size a data packet of ``length`` bytes is padded to."""
    padding = PaddingType(padding_type)
    if padding is PaddingType.NONE:
        return length
    if padding is PaddingType.FULL:
        return MAX_MTU
    if length <= _PADDING_STEP:
        return _PADDING_STEP
    if length <= 2 * _PADDING_STEP:
        return 2 * _PADDING_STEP
    return MAX_MTU