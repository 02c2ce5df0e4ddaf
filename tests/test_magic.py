"""Tests for magic byte selection."""

import pytest

from tzledger.core.tezos.constants import MessageKind
from tzledger.core.tezos.magic import (
    ENDORSEMENT_TAG_OFFSET,
    FITNESS_VERSION_OFFSET,
    magic_byte,
    with_magic,
)


def _block(fitness_version: int) -> bytes:
    raw = bytearray(120)
    raw[FITNESS_VERSION_OFFSET] = fitness_version
    return bytes(raw)


def _endorsement(tag: int) -> bytes:
    raw = bytearray(60)
    raw[ENDORSEMENT_TAG_OFFSET] = tag
    return bytes(raw)


@pytest.mark.parametrize("kind, magic", [
    (MessageKind.OPERATION, 0x03),
    (MessageKind.DELEGATION, 0x03),
    (MessageKind.MICHELSON, 0x05),
])
def test_fixed_magic(kind, magic):
    assert magic_byte(kind, b"\x00" * 4) == magic


def test_kind_by_value():
    assert magic_byte("michelson", b"") == 0x05


def test_emmy_block():
    assert magic_byte(MessageKind.BLOCK, _block(0x01)) == 0x01


def test_tenderbake_block():
    assert magic_byte(MessageKind.BLOCK, _block(0x02)) == 0x11


@pytest.mark.parametrize("tag, magic", [(0, 0x02), (20, 0x12), (21, 0x13)])
def test_endorsement_tags(tag, magic):
    assert magic_byte(MessageKind.ENDORSEMENT, _endorsement(tag)) == magic


def test_unknown_endorsement_tag():
    with pytest.raises(ValueError):
        magic_byte(MessageKind.ENDORSEMENT, _endorsement(7))


def test_short_blobs():
    with pytest.raises(ValueError):
        magic_byte(MessageKind.BLOCK, bytes(FITNESS_VERSION_OFFSET))
    with pytest.raises(ValueError):
        magic_byte(MessageKind.ENDORSEMENT, bytes(ENDORSEMENT_TAG_OFFSET))


def test_unknown_kind():
    with pytest.raises(ValueError):
        magic_byte("transfer", b"")


def test_with_magic_prefixes():
    assert with_magic(MessageKind.OPERATION, b"\xaa\xbb") == b"\x03\xaa\xbb"
