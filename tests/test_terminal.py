"""Tests for terminal message dispatch."""

import pytest

from conftest import ok, sw
from tzledger.core.base import Message
from tzledger.core.base.errors import TRANSPORT_ERROR
from tzledger.core.base.path import PathError, serialize_path
from tzledger.core.device import TransportError
from tzledger.core.tezos import (
    AuthorizeBakingMessage,
    Curve,
    DeauthorizeBakingMessage,
    GetAddressMessage,
    GetAppInfoMessage,
    GetVersionMessage,
    LegacyAuthorizeBakingMessage,
    LegacyDeauthorizeBakingMessage,
    LegacyGetGitMessage,
    LegacyGetPublicKeyMessage,
    LegacyGetVersionMessage,
    LegacyGetWatermarkMessage,
    LegacyHMACMessage,
    LegacyQueryAuthKeyMessage,
    LegacyResetWatermarkMessage,
    LegacySetupMessage,
    LegacySignMessage,
    MessageKind,
    QueryAuthKeyMessage,
    RawAPDUMessage,
    SignBakerMessage,
    SignMessage,
    public_key_to_address,
)

PATH = "m/44'/1729'/0'/0'"
SERIALIZED = serialize_path(PATH)
ED25519_KEY = b"\x00" + bytes(range(32))


def test_connect_disconnect(link, terminal):
    terminal.connect()
    assert link.connected
    terminal.disconnect()
    assert not link.connected


def test_reconnect(link, terminal):
    """Reconnect leaves the link open."""
    terminal.connect()
    terminal.reconnect()
    assert link.connected


def test_supported_messages(terminal):
    supported = terminal.supported_messages
    assert GetVersionMessage in supported
    assert LegacySignMessage in supported
    assert RawAPDUMessage in supported


def test_unsupported_message(terminal):
    with pytest.raises(ValueError, match="unsupported"):
        terminal.send(Message())


def test_get_version(link, terminal):
    link.queue(ok(bytes([0, 3, 0, 1, 0])))
    result = terminal.send(GetVersionMessage())
    assert link.calls() == [(0x80, 0x10, 0x00, 0x00, b"")]
    assert result.success
    assert (result.major, result.minor, result.patch) == (3, 0, 1)


def test_get_version_app_closed(link, terminal):
    link.queue(sw(0x6E00))
    result = terminal.send(GetVersionMessage())
    assert result.return_code == 0x6E00
    assert result.error_message == "App does not seem to be open"


def test_transport_failure_becomes_result(link, terminal):
    link.queue(TransportError("no device"))
    result = terminal.send(GetVersionMessage())
    assert result.return_code == 0xFFFF
    assert result.error_message == "no device"


def test_app_info(link, terminal):
    link.queue(ok(bytes([1, 5]) + b"Tezos" + bytes([5]) + b"3.0.0" + bytes([1, 0])))
    result = terminal.send(GetAppInfoMessage())
    assert link.calls()[0][:2] == (0xB0, 0x01)
    assert result.app_name == "Tezos"


def test_get_address_show(link, terminal):
    address = public_key_to_address(ED25519_KEY, Curve.ED25519)
    link.queue(ok(bytes([33]) + ED25519_KEY + address.encode()))
    result = terminal.send(GetAddressMessage(path=PATH, curve=Curve.ED25519, show=True))
    assert link.calls() == [(0x80, 0x11, 0x01, 0x03, SERIALIZED)]
    assert result.address == address
    assert result.public_key == ED25519_KEY


def test_get_address_curve_by_name(link, terminal):
    link.queue(sw(0x6985))
    result = terminal.send(GetAddressMessage(curve="secp256k1"))
    assert link.calls()[0][2:4] == (0x00, 0x01)
    assert result.error_message == "Conditions not satisfied"


def test_get_address_bad_path(link, terminal):
    with pytest.raises(PathError):
        terminal.send(GetAddressMessage(path="m/1/2/3"))
    assert link.sent == []


def test_get_address_bad_curve(link, terminal):
    with pytest.raises(ValueError):
        terminal.send(GetAddressMessage(curve=9))
    assert link.sent == []


def test_sign(link, terminal):
    link.queue(ok(), ok(bytes(32) + b"\x01" * 64))
    result = terminal.send(SignMessage(message=b"\xaa", path=PATH, curve=Curve.ED25519))
    assert [c[1] for c in link.calls()] == [0x12, 0x12]
    assert result.signature == b"\x01" * 64


def test_sign_baker(link, terminal):
    block = bytearray(100)
    block[90] = 0x02
    link.queue(ok(), ok(bytes(32) + b"\x01" * 64))
    result = terminal.send(SignBakerMessage(message=bytes(block), kind=MessageKind.BLOCK))
    calls = link.calls()
    assert [c[1] for c in calls] == [0xAF, 0xAF]
    assert calls[1][4][0] == 0x11
    assert result.success


def test_authorize_baking(link, terminal):
    link.queue(ok(bytes([33]) + ED25519_KEY))
    result = terminal.send(AuthorizeBakingMessage(path=PATH, curve=Curve.ED25519))
    assert link.calls() == [(0x80, 0xA1, 0x01, 0x03, SERIALIZED)]
    assert result.address == public_key_to_address(ED25519_KEY, Curve.ED25519)


def test_deauthorize_baking(link, terminal):
    link.queue(ok())
    result = terminal.send(DeauthorizeBakingMessage())
    assert link.calls() == [(0x80, 0xAC, 0x00, 0x00, b"")]
    assert result.success


def test_query_auth_key(link, terminal):
    link.queue(ok(bytes([Curve.ED25519]) + SERIALIZED))
    result = terminal.send(QueryAuthKeyMessage(confirm=True))
    assert link.calls() == [(0x80, 0xAD, 0x01, 0x00, b"")]
    assert result.curve is Curve.ED25519
    assert result.path == PATH


def test_legacy_authorize_baking(link, terminal):
    """Legacy authorize always asks for confirmation and returns the key."""
    link.queue(ok(bytes([33]) + ED25519_KEY))
    result = terminal.send(LegacyAuthorizeBakingMessage(path=PATH, curve=Curve.SECP256K1))
    assert link.calls() == [(0x80, 0x01, 0x01, 0x01, SERIALIZED)]
    assert result.public_key == ED25519_KEY


def test_legacy_authorize_rejected(link, terminal):
    link.queue(sw(0x6985))
    result = terminal.send(LegacyAuthorizeBakingMessage())
    assert not result.success
    assert result.return_code == 0x6985
    assert result.address == ""


def test_legacy_deauthorize(link, terminal):
    link.queue(ok())
    result = terminal.send(LegacyDeauthorizeBakingMessage())
    assert link.calls() == [(0x80, 0x0C, 0x01, 0x00, b"")]
    assert result.success


def test_legacy_query_auth_key_with_curve(link, terminal):
    link.queue(ok(bytes([Curve.SECP256R1]) + SERIALIZED))
    result = terminal.send(LegacyQueryAuthKeyMessage())
    assert link.calls() == [(0x80, 0x0D, 0x00, 0x00, b"")]
    assert result.curve is Curve.SECP256R1
    assert result.path == PATH


def test_legacy_query_auth_key_path_only(link, terminal):
    link.queue(ok(SERIALIZED))
    result = terminal.send(LegacyQueryAuthKeyMessage(confirm=True, with_curve=False))
    assert link.calls() == [(0x80, 0x07, 0x01, 0x00, b"")]
    assert result.curve is None
    assert result.path == PATH


@pytest.mark.parametrize("message, body", [
    (GetAppInfoMessage(), b"\x01\x05Tez"),
    (QueryAuthKeyMessage(), b"\x07" + SERIALIZED),
    (QueryAuthKeyMessage(), bytes([Curve.ED25519, 4]) + SERIALIZED[1:9]),
    (AuthorizeBakingMessage(), bytes([5]) + bytes(5)),
    (LegacyQueryAuthKeyMessage(with_curve=False), b"\x02\x80"),
])
def test_malformed_body_is_reported(link, terminal, message, body):
    """A success status over a body that does not parse becomes a failed result."""
    link.queue(ok(body))
    result = terminal.send(message)
    assert not result.success
    assert result.return_code == TRANSPORT_ERROR
    assert result.error_message


def test_legacy_version_and_git(link, terminal):
    link.queue(ok(bytes([0, 2, 3, 4])), ok(b"0123abcd\x00"))
    version = terminal.send(LegacyGetVersionMessage())
    git = terminal.send(LegacyGetGitMessage())
    assert [c[1] for c in link.calls()] == [0x00, 0x09]
    assert not version.baking
    assert (version.major, version.minor, version.patch) == (2, 3, 4)
    assert git.commit_hash == "0123abcd"


def test_legacy_public_key_prompt(link, terminal):
    link.queue(ok(bytes([33]) + ED25519_KEY))
    result = terminal.send(
        LegacyGetPublicKeyMessage(path=PATH, curve=Curve.ED25519_SLIP10, prompt=True)
    )
    assert link.calls() == [(0x80, 0x03, 0x00, 0x00, SERIALIZED)]
    assert result.address.startswith("tz1")


def test_legacy_reset_watermark(link, terminal):
    link.queue(ok())
    result = terminal.send(LegacyResetWatermarkMessage(level=42))
    assert link.calls() == [(0x80, 0x06, 0x00, 0x00, b"\x00\x00\x00\x2a")]
    assert result.success


@pytest.mark.parametrize("all_counters, ins", [(False, 0x08), (True, 0x0B)])
def test_legacy_watermark(link, terminal, all_counters, ins):
    link.queue(ok(bytes(12)))
    result = terminal.send(LegacyGetWatermarkMessage(all=all_counters))
    assert link.calls()[0][1] == ins
    assert result.main == 0
    assert (result.chain_id is None) is not all_counters


def test_legacy_setup(link, terminal):
    link.queue(ok(bytes([33]) + ED25519_KEY))
    result = terminal.send(LegacySetupMessage(
        main=1, test=2, chain_id=0x7A06A770, path=PATH, curve=Curve.ED25519,
    ))
    expected = bytes.fromhex("7a06a770" "00000001" "00000002") + SERIALIZED
    assert link.calls() == [(0x80, 0x0A, 0x00, 0x03, expected)]
    assert result.public_key == ED25519_KEY


def test_legacy_hmac(link, terminal):
    link.queue(ok(b"\x22" * 32))
    result = terminal.send(LegacyHMACMessage(message=b"hello", path=PATH, curve=Curve.SECP256K1))
    assert link.calls() == [(0x80, 0x0E, 0x00, 0x01, SERIALIZED + b"hello")]
    assert result.hmac == b"\x22" * 32


def test_legacy_sign(link, terminal):
    link.queue(ok(), ok(bytes(32) + b"\x01" * 64))
    result = terminal.send(LegacySignMessage(message=b"\x00", variant="unsafe"))
    assert [c[1] for c in link.calls()] == [0x05, 0x05]
    assert result.hash == bytes(32)
    assert result.signature == bytes(32) + b"\x01" * 64


def test_raw_apdu_any_status(link, terminal):
    link.queue(sw(0x6D00, b"\x01\x02"))
    result = terminal.send(RawAPDUMessage(cla=0xE0, ins=0x01, p1=0, p2=0, data=b"\xff"))
    assert link.calls() == [(0xE0, 0x01, 0x00, 0x00, b"\xff")]
    assert result.return_code == 0x6D00
    assert result.data == b"\x01\x02"


def test_raw_apdu_too_long(link, terminal):
    with pytest.raises(ValueError):
        terminal.send(RawAPDUMessage(cla=0x80, ins=0x00, p1=0, p2=0, data=bytes(256)))
    assert link.sent == []
