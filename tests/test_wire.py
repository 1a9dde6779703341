import pytest

from heliumcore.codes import (
    AUTH_STATUS_FAILURE,
    CONFIG_TEXT_FIELD_LENGTH,
    EXT_ID_BLOCK_DNS_OVER_TLS,
    EXT_PAYLOAD_TYPE_INT16,
    EXT_TYPE_REQUEST,
    MAX_MTU,
    PACKET_SESSION_REJECT,
    WIRE_MAXIMUM_PROTOCOL_MAJOR_VERSION,
    WIRE_MAXIMUM_PROTOCOL_MINOR_VERSION,
    AuthType,
    HeError,
    MsgId,
    PaddingType,
    ReturnCode,
)
from heliumcore.wire import (
    AuthBufferMessage,
    AuthMessage,
    AuthResponseMessage,
    ConfigIPv4Message,
    DataMessage,
    ExtensionMessage,
    PingMessage,
    SessionResponseMessage,
    WireHeader,
    calculate_padded_length,
)


def _code_of(excinfo):
    return excinfo.value.code


# Wire header


def test_header_standard_layout():
    data = WireHeader().pack()
    assert len(data) == 16
    assert data[0:2] == b"He"
    assert data[2] == WIRE_MAXIMUM_PROTOCOL_MAJOR_VERSION
    assert data[3] == WIRE_MAXIMUM_PROTOCOL_MINOR_VERSION
    assert data[4] == 0x00
    assert data[5:8] == b"\x00\x00\x00"


def test_header_aggressive_mode_flag():
    data = WireHeader(aggressive_mode=True, session=0x1234567891234567).pack()
    assert data[4] == 0x01


def test_header_carries_session():
    session = 0x1234567891234567
    data = WireHeader(session=session).pack()
    assert data[8:16] == session.to_bytes(8, "little")


def test_header_reject_session_is_all_ones():
    data = WireHeader(session=PACKET_SESSION_REJECT).pack()
    assert data[8:16] == b"\xff" * 8


def test_header_accepts_any_version():
    header = WireHeader(major_version=0xFF, minor_version=0x99)
    data = header.pack()
    assert data[2] == 0xFF
    assert data[3] == 0x99
    assert WireHeader.unpack(data) == header


def test_header_round_trip_ignores_trailing_payload():
    header = WireHeader(aggressive_mode=True, session=0x9876543219876543)
    assert WireHeader.unpack(header.pack() + b"payload") == header


def test_header_rejects_bad_magic():
    data = b"Xx" + WireHeader().pack()[2:]
    with pytest.raises(HeError) as info:
        WireHeader.unpack(data)
    assert _code_of(info) is ReturnCode.ERR_NOT_HE_PACKET


def test_header_rejects_short_data():
    with pytest.raises(HeError) as info:
        WireHeader.unpack(WireHeader().pack()[:-1])
    assert _code_of(info) is ReturnCode.ERR_PACKET_TOO_SMALL


def test_header_session_out_of_range():
    with pytest.raises(ValueError):
        WireHeader(session=PACKET_SESSION_REJECT + 1).pack()


# Ping / pong


@pytest.mark.parametrize("msg_id", [MsgId.PING, MsgId.PONG])
def test_ping_round_trip(msg_id):
    message = PingMessage(payload=0xDEADBEEF, msg_id=msg_id)
    data = message.pack()
    assert data[0] == msg_id
    assert PingMessage.unpack(data) == message


def test_ping_rejects_other_message_id():
    data = bytes([MsgId.DATA]) + PingMessage(payload=1).pack()[1:]
    with pytest.raises(HeError) as info:
        PingMessage.unpack(data)
    assert _code_of(info) is ReturnCode.ERR_BAD_PACKET


def test_ping_constructor_rejects_wrong_id():
    with pytest.raises(ValueError):
        PingMessage(payload=1, msg_id=MsgId.DATA)


# Username / password auth


def test_auth_round_trip():
    password = "password"
    message = AuthMessage(username="user", password=password)
    data = message.pack()
    assert data[0] == MsgId.AUTH
    assert data[1] == AuthType.USERPASS
    assert AuthMessage.unpack(data) == message


def test_auth_fixed_size():
    password = "password"
    assert len(AuthMessage(username="user", password=password).pack()) == 104


def test_auth_accepts_maximum_length_username():
    password = "password"
    longest = "a" * CONFIG_TEXT_FIELD_LENGTH
    message = AuthMessage(username=longest, password=password)
    assert AuthMessage.unpack(message.pack()).username == longest


def test_auth_username_too_long():
    password = "password"
    with pytest.raises(HeError) as info:
        AuthMessage(username="a" * (CONFIG_TEXT_FIELD_LENGTH + 1), password=password).pack()
    assert _code_of(info) is ReturnCode.ERR_STRING_TOO_LONG


def test_auth_rejects_other_auth_type():
    password = "password"
    data = bytearray(AuthMessage(username="user", password=password).pack())
    data[1] = AuthType.CB
    with pytest.raises(HeError) as info:
        AuthMessage.unpack(bytes(data))
    assert _code_of(info) is ReturnCode.ERR_INVALID_AUTH_TYPE


def test_auth_rejects_oversized_length_field():
    password = "password"
    data = bytearray(AuthMessage(username="user", password=password).pack())
    data[2] = CONFIG_TEXT_FIELD_LENGTH + 1
    with pytest.raises(HeError) as info:
        AuthMessage.unpack(bytes(data))
    assert _code_of(info) is ReturnCode.ERR_BAD_PACKET


# Auth buffer


def test_auth_buffer_round_trip():
    message = AuthBufferMessage(buffer=b"\x45\x00\x00\x1c opaque")
    data = message.pack()
    assert data[0] == MsgId.AUTH
    assert data[1] == AuthType.CB
    assert AuthBufferMessage.unpack(data + b"\x00\x00") == message


def test_auth_buffer_truncated():
    data = AuthBufferMessage(buffer=b"abcdef").pack()[:-1]
    with pytest.raises(HeError) as info:
        AuthBufferMessage.unpack(data)
    assert _code_of(info) is ReturnCode.ERR_PACKET_TOO_SMALL


# IPv4 config


def test_config_round_trip():
    message = ConfigIPv4Message("10.125.0.2", "10.125.0.1", "10.125.0.1", MAX_MTU, 0xDEADBEEF)
    data = message.pack()
    assert data[0] == MsgId.CONFIG_IPV4
    assert ConfigIPv4Message.unpack(data) == message


def test_config_mtu_is_text():
    data = ConfigIPv4Message("10.0.0.2", "10.0.0.1", "10.0.0.1", MAX_MTU).pack()
    assert b"1350\x00" in data


def test_config_ip_too_long():
    with pytest.raises(HeError) as info:
        ConfigIPv4Message("1" * 24, "10.0.0.1", "10.0.0.1", MAX_MTU).pack()
    assert _code_of(info) is ReturnCode.ERR_STRING_TOO_LONG


def test_config_bad_mtu_text():
    good = ConfigIPv4Message("10.0.0.2", "10.0.0.1", "10.0.0.1", MAX_MTU).pack()
    bad = good.replace(b"1350\x00", b"abcd\x00")
    with pytest.raises(HeError) as info:
        ConfigIPv4Message.unpack(bad)
    assert _code_of(info) is ReturnCode.ERR_BAD_PACKET


# Data


@pytest.mark.parametrize("msg_id", [MsgId.DATA, MsgId.DEPRECATED_13])
def test_data_round_trip(msg_id):
    message = DataMessage(payload=b"\x45" + bytes(range(40)), msg_id=msg_id)
    data = message.pack()
    assert data[0] == msg_id
    assert len(data) == message.header_size + len(message.payload)
    assert DataMessage.unpack(data) == message


def test_data_padding_is_ignored():
    message = DataMessage(payload=b"hello")
    padded = message.pack() + b"\x00" * 100
    assert DataMessage.unpack(padded).payload == b"hello"


def test_data_deprecated_header_is_longer():
    plain = DataMessage(payload=b"x")
    old = DataMessage(payload=b"x", msg_id=MsgId.DEPRECATED_13)
    assert old.header_size > plain.header_size


def test_data_truncated():
    data = DataMessage(payload=b"hello world").pack()[:-3]
    with pytest.raises(HeError) as info:
        DataMessage.unpack(data)
    assert _code_of(info) is ReturnCode.ERR_PACKET_TOO_SMALL


def test_data_rejects_other_message_id():
    with pytest.raises(HeError) as info:
        DataMessage.unpack(PingMessage(payload=7).pack())
    assert _code_of(info) is ReturnCode.ERR_BAD_PACKET


# Auth response


def test_auth_response_round_trip():
    message = AuthResponseMessage(status=AUTH_STATUS_FAILURE, status_msg="access denied")
    data = message.pack()
    assert data[0] == MsgId.AUTH_RESPONSE
    assert AuthResponseMessage.unpack(data) == message


def test_auth_response_message_too_long():
    with pytest.raises(HeError) as info:
        AuthResponseMessage(status_msg="x" * (CONFIG_TEXT_FIELD_LENGTH + 1)).pack()
    assert _code_of(info) is ReturnCode.ERR_STRING_TOO_LONG


# Session response


def test_session_response_round_trip():
    message = SessionResponseMessage(session=0x00FF00FF00FF00FF)
    data = message.pack()
    assert data[0] == MsgId.SESSION_RESPONSE
    assert SessionResponseMessage.unpack(data) == message


def test_session_response_short():
    with pytest.raises(HeError) as info:
        SessionResponseMessage.unpack(bytes([MsgId.SESSION_RESPONSE]))
    assert _code_of(info) is ReturnCode.ERR_PACKET_TOO_SMALL


# Extension


def test_extension_round_trip():
    message = ExtensionMessage(
        EXT_ID_BLOCK_DNS_OVER_TLS, EXT_TYPE_REQUEST, EXT_PAYLOAD_TYPE_INT16, b"\x01\x00"
    )
    data = message.pack()
    assert data[0] == MsgId.EXTENSION
    assert ExtensionMessage.unpack(data) == message


def test_extension_truncated_payload():
    data = ExtensionMessage(1, 1, 2, b"abcdef").pack()[:-2]
    with pytest.raises(HeError) as info:
        ExtensionMessage.unpack(data)
    assert _code_of(info) is ReturnCode.ERR_PACKET_TOO_SMALL


# Padding


@pytest.mark.parametrize(
    "padding, length, expected",
    [
        (PaddingType.NONE, 10, 10),
        (PaddingType.NONE, 460, 460),
        (PaddingType.NONE, 910, 910),
        (PaddingType.FULL, 10, MAX_MTU),
        (PaddingType.FULL, 460, MAX_MTU),
        (PaddingType.FULL, 910, MAX_MTU),
        (PaddingType.ROUND_450, 10, 450),
        (PaddingType.ROUND_450, 460, 900),
        (PaddingType.ROUND_450, 910, MAX_MTU),
        (PaddingType.ROUND_450, 450, 450),
        (PaddingType.ROUND_450, 900, 900),
        (PaddingType.ROUND_450, MAX_MTU, MAX_MTU),
    ],
)
def test_calculate_padded_length(padding, length, expected):
    assert calculate_padded_length(padding, length) == expected


def test_calculate_padded_length_rejects_unknown_type():
    with pytest.raises(ValueError):
        calculate_padded_length(99, 10)