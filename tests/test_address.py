"""Tests for address derivation and decoding."""

import hashlib

import base58
import pytest

from tzledger.core.tezos.address import (
    TZ1_PREFIX,
    TZ2_PREFIX,
    TZ3_PREFIX,
    address_to_hash,
    hash_to_address,
    key_bytes,
    public_key_hash,
    public_key_to_address,
)
from tzledger.core.tezos.constants import Curve

ED25519_KEY = b"\x00" + bytes(range(32))
# 0x04 || X || Y, Y odd
SECP_KEY = b"\x04" + bytes(range(1, 33)) + bytes(range(33, 64)) + b"\x41"

KNOWN_TZ1 = "tz1QZ6KY7d3BuZDT1d19dUxoQrtFPN2QJ3hn"

# published key/address pair
KNOWN_EDPK = "edpkuBknW28nW72KG6RoHtYW7p12T6GKc7nAbwYX5m8Wd9sDVC9yav"
KNOWN_EDPK_TZ1 = "tz1KqTpEZ7Yob7QbPE4Hy4Wo8fHG8LhKxZSx"


@pytest.mark.parametrize("curve, key, start", [
    (Curve.ED25519, ED25519_KEY, "tz1"),
    (Curve.ED25519_SLIP10, ED25519_KEY, "tz1"),
    (Curve.SECP256K1, SECP_KEY, "tz2"),
    (Curve.SECP256R1, SECP_KEY, "tz3"),
])
def test_prefix_per_curve(curve, key, start):
    address = public_key_to_address(key, curve)
    assert address.startswith(start)
    assert len(address) == 36


def test_ed25519_drops_tag_byte():
    assert key_bytes(ED25519_KEY, Curve.ED25519) == bytes(range(32))


def test_secp_compressed_from_parity():
    compressed = key_bytes(SECP_KEY, Curve.SECP256K1)
    assert compressed == b"\x03" + bytes(range(1, 33))
    even = SECP_KEY[:-1] + b"\x40"
    assert key_bytes(even, Curve.SECP256K1)[0] == 0x02


def test_secp_compressed_key_accepted():
    compressed = b"\x03" + bytes(range(1, 33))
    assert public_key_to_address(compressed, Curve.SECP256K1) == public_key_to_address(
        SECP_KEY, Curve.SECP256K1
    )


@pytest.mark.parametrize("curve, key", [
    (Curve.ED25519, bytes(32)),
    (Curve.SECP256K1, bytes(64)),
    (Curve.SECP256R1, b"\x05" + bytes(32)),
])
def test_bad_key_length(curve, key):
    with pytest.raises(ValueError):
        public_key_to_address(key, curve)


def test_deterministic():
    assert public_key_to_address(ED25519_KEY, Curve.ED25519) == public_key_to_address(
        ED25519_KEY, Curve.ED25519
    )
    assert public_key_to_address(SECP_KEY, Curve.SECP256K1) != public_key_to_address(
        SECP_KEY, Curve.SECP256R1
    )


def test_hash_is_20_bytes():
    assert len(public_key_hash(ED25519_KEY, Curve.ED25519)) == 20


def test_derived_address_decodes_to_key_hash():
    address = public_key_to_address(SECP_KEY, Curve.SECP256R1)
    prefix, key_hash = address_to_hash(address)
    assert prefix == TZ3_PREFIX
    assert key_hash == public_key_hash(SECP_KEY, Curve.SECP256R1)


def test_known_address_round_trip():
    prefix, key_hash = address_to_hash(KNOWN_TZ1)
    assert prefix == TZ1_PREFIX
    assert len(key_hash) == 20
    assert hash_to_address(key_hash, Curve.ED25519) == KNOWN_TZ1


def test_tz2_prefix_bytes():
    prefix, _ = address_to_hash(public_key_to_address(SECP_KEY, Curve.SECP256K1))
    assert prefix == TZ2_PREFIX


def test_bad_checksum():
    raw = bytearray(base58.b58decode(KNOWN_TZ1))
    raw[-1] ^= 0x01
    with pytest.raises(ValueError, match="checksum"):
        address_to_hash(base58.b58encode(bytes(raw)).decode())


def test_bad_length():
    with pytest.raises(ValueError, match="length"):
        address_to_hash(base58.b58encode(TZ1_PREFIX + bytes(10)).decode())


def test_known_ed25519_key():
    """Address of a published edpk key, with the device's leading tag byte."""
    raw = base58.b58decode_check(KNOWN_EDPK)
    assert raw[:4] == bytes([0x0D, 0x0F, 0x25, 0xD9])
    key = raw[4:]
    assert len(key) == 32
    assert public_key_to_address(b"\x02" + key, Curve.ED25519) == KNOWN_EDPK_TZ1
    assert public_key_to_address(b"\x02" + key, Curve.ED25519_SLIP10) == KNOWN_EDPK_TZ1


def _reference_address(prefix: bytes, compressed_key: bytes) -> str:
    digest = hashlib.blake2b(compressed_key, digest_size=20).digest()
    return base58.b58encode_check(prefix + digest).decode()


@pytest.mark.parametrize("curve, prefix, start", [
    (Curve.SECP256K1, bytes([0x06, 0xA1, 0xA1]), "tz2"),
    (Curve.SECP256R1, bytes([0x06, 0xA1, 0xA4]), "tz3"),
])
def test_secp_matches_reference_derivation(curve, prefix, start):
    """Odd Y compresses to 0x03 || X, even Y to 0x02 || X, then BLAKE2b-160."""
    x = bytes(range(1, 33))
    odd = _reference_address(prefix, b"\x03" + x)
    even = _reference_address(prefix, b"\x02" + x)
    assert public_key_to_address(SECP_KEY, curve) == odd
    assert public_key_to_address(SECP_KEY[:-1] + b"\x40", curve) == even
    assert odd.startswith(start)
    assert odd != even
