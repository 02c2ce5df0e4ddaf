"""Magic byte selection for messages handed to the sign instructions.

Block and endorsement blobs come in two consensus encodings (Emmy and
Tenderbake). The encoding is read from fixed offsets in the blob, which
holds only for the protocol versions these offsets were taken from.
"""

from __future__ import annotations

from types import MappingProxyType

from tzledger.core.tezos.constants import MessageKind

MAGIC_BLOCK = 0x01
MAGIC_ENDORSEMENT = 0x02
MAGIC_OPERATION = 0x03
MAGIC_MICHELSON = 0x05
MAGIC_TENDERBAKE_BLOCK = 0x11
MAGIC_PREENDORSEMENT = 0x12
MAGIC_TENDERBAKE_ENDORSEMENT = 0x13

# chain_id(4) + branch(32), then the endorsement tag
ENDORSEMENT_TAG_OFFSET = 36
# chain_id(4) + level(4) + proto(1) + predecessor(32) + timestamp(8)
# + validation_pass(1) + operations_hash(32) + fitness length(4)
# + first fitness element length(4), then the fitness version
FITNESS_VERSION_OFFSET = 90

TENDERBAKE_FITNESS_VERSION = 0x02

_ENDORSEMENT_MAGIC: MappingProxyType[int, int] = MappingProxyType({
    0x00: MAGIC_ENDORSEMENT,
    20: MAGIC_PREENDORSEMENT,
    21: MAGIC_TENDERBAKE_ENDORSEMENT,
})

_FIXED_MAGIC: MappingProxyType[MessageKind, int] = MappingProxyType({
    MessageKind.OPERATION: MAGIC_OPERATION,
    MessageKind.DELEGATION: MAGIC_OPERATION,
    MessageKind.MICHELSON: MAGIC_MICHELSON,
})


def magic_byte(kind: MessageKind, raw: bytes) -> int:
    """Return the magic byte identifying ``raw`` as a ``kind`` message."""
    kind = MessageKind(kind)
    if kind in _FIXED_MAGIC:
        return _FIXED_MAGIC[kind]

    if kind is MessageKind.ENDORSEMENT:
        if len(raw) <= ENDORSEMENT_TAG_OFFSET:
            raise ValueError(f"endorsement too short: {len(raw)} bytes")
        tag = raw[ENDORSEMENT_TAG_OFFSET]
        magic = _ENDORSEMENT_MAGIC.get(tag)
        if magic is None:
            raise ValueError(f"unrecognized endorsement tag {tag:#04x}")
        return magic

    if len(raw) <= FITNESS_VERSION_OFFSET:
        raise ValueError(f"block header too short: {len(raw)} bytes")
    if raw[FITNESS_VERSION_OFFSET] == TENDERBAKE_FITNESS_VERSION:
        return MAGIC_TENDERBAKE_BLOCK
    return MAGIC_BLOCK


def with_magic(kind: MessageKind, raw: bytes) -> bytes:
    """Prefix ``raw`` with its magic byte."""
    return bytes([magic_byte(kind, raw)]) + bytes(raw)
