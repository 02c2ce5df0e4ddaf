"""Tezos implicit account addresses (tz1, tz2, tz3) from raw public keys."""

from __future__ import annotations

from types import MappingProxyType

import base58
from cryptography.hazmat.primitives import hashes
from nacl.encoding import RawEncoder
from nacl.hash import blake2b

from tzledger.core.tezos.constants import Curve

HASH_SIZE = 20
CHECKSUM_SIZE = 4

TZ1_PREFIX = bytes([0x06, 0xA1, 0x9F])
TZ2_PREFIX = bytes([0x06, 0xA1, 0xA1])
TZ3_PREFIX = bytes([0x06, 0xA1, 0xA4])

CURVE_PREFIX: MappingProxyType[Curve, bytes] = MappingProxyType({
    Curve.ED25519: TZ1_PREFIX,
    Curve.ED25519_SLIP10: TZ1_PREFIX,
    Curve.SECP256K1: TZ2_PREFIX,
    Curve.SECP256R1: TZ3_PREFIX,
})

_ED25519_KEY_SIZE = 33
_UNCOMPRESSED_KEY_SIZE = 65
_COMPRESSED_KEY_SIZE = 33


def _sha256(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def sha256x2(data: bytes) -> bytes:
    """SHA-256 applied twice."""
    return _sha256(_sha256(data))


def key_bytes(public_key: bytes, curve: Curve) -> bytes:
    """Extract the canonical key bytes that get hashed into the address.

    Ed25519 keys lose their leading tag byte. Uncompressed secp keys are
    rewritten in compressed form, the parity taken from the last byte.
    """
    curve = Curve(curve)
    public_key = bytes(public_key)
    if CURVE_PREFIX[curve] == TZ1_PREFIX:
        if len(public_key) != _ED25519_KEY_SIZE:
            raise ValueError(f"ed25519 key must be {_ED25519_KEY_SIZE} bytes, got {len(public_key)}")
        return public_key[1:]
    if len(public_key) == _UNCOMPRESSED_KEY_SIZE:
        first = 0x02 + (public_key[64] & 0x01)
        return bytes([first]) + public_key[1:33]
    if len(public_key) == _COMPRESSED_KEY_SIZE and public_key[0] in (0x02, 0x03):
        return public_key
    raise ValueError(f"unexpected {curve.name} key length {len(public_key)}")


def public_key_hash(public_key: bytes, curve: Curve) -> bytes:
    """BLAKE2b-160 of the canonical key bytes."""
    return blake2b(key_bytes(public_key, curve), digest_size=HASH_SIZE, encoder=RawEncoder)


def hash_to_address(key_hash: bytes, curve: Curve) -> str:
    prefix = CURVE_PREFIX[Curve(curve)]
    payload = prefix + bytes(key_hash)
    checksum = sha256x2(payload)[:CHECKSUM_SIZE]
    return base58.b58encode(payload + checksum).decode("ascii")


def public_key_to_address(public_key: bytes, curve: Curve) -> str:
    """Derive the base58check address the device shows for this key."""
    return hash_to_address(public_key_hash(public_key, curve), curve)


def address_to_hash(address: str) -> tuple[bytes, bytes]:
    """Decode an address into (prefix, key hash), verifying the checksum."""
    raw = base58.b58decode(address)
    if len(raw) != len(TZ1_PREFIX) + HASH_SIZE + CHECKSUM_SIZE:
        raise ValueError(f"invalid address length: {address}")
    payload, checksum = raw[:-CHECKSUM_SIZE], raw[-CHECKSUM_SIZE:]
    if sha256x2(payload)[:CHECKSUM_SIZE] != checksum:
        raise ValueError(f"invalid address checksum: {address}")
    prefix, key_hash = payload[:3], payload[3:]
    if prefix not in CURVE_PREFIX.values():
        raise ValueError(f"unknown address prefix {prefix.hex()}: {address}")
    return prefix, key_hash
