"""Tezos application command set: instruction codes and parameter values.

Two generations of the application coexist on the device. The legacy set
selects the key family per call and marks the last frame by OR-ing 0x80
into the ADD tag; the modern set takes the curve in P2 and uses a
distinct LAST tag.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from types import MappingProxyType

from tzledger.core.base.chunks import CHUNK_SIZE

CLA = 0x80

# Dashboard-level app info query, answered by the OS rather than the app.
APP_INFO_CLA = 0xB0
APP_INFO_INS = 0x01

SIGN_HASH_SIZE = 32


class Generation(Enum):
    LEGACY = "legacy"
    MODERN = "modern"


class Ins(IntEnum):
    GET_VERSION = 0x10
    GET_ADDR = 0x11
    SIGN = 0x12
    AUTHORIZE_BAKING = 0xA1
    DEAUTHORIZE_BAKING = 0xAC
    QUERY_AUTH_KEY_WITH_CURVE = 0xAD
    BAKER_SIGN = 0xAF


class LegacyIns(IntEnum):
    VERSION = 0x00
    AUTHORIZE_BAKING = 0x01
    PUBLIC_KEY = 0x02
    PROMPT_PUBLIC_KEY = 0x03
    SIGN = 0x04
    SIGN_UNSAFE = 0x05
    RESET = 0x06
    QUERY_AUTH_KEY = 0x07
    QUERY_MAIN_HWM = 0x08
    GIT = 0x09
    SETUP = 0x0A
    QUERY_ALL_HWM = 0x0B
    DEAUTHORIZE = 0x0C
    QUERY_AUTH_KEY_WITH_CURVE = 0x0D
    HMAC = 0x0E
    SIGN_WITH_HASH = 0x0F


class PayloadType(IntEnum):
    INIT = 0x00
    ADD = 0x01
    LAST = 0x02


class LegacyPayloadType(IntEnum):
    INIT = 0x00
    ADD = 0x01
    LAST_FLAG = 0x80


class P1(IntEnum):
    ONLY_RETRIEVE = 0x00
    SHOW_ADDRESS_IN_DEVICE = 0x01


class Curve(IntEnum):
    """Curve selector, sent as P2."""

    ED25519_SLIP10 = 0
    SECP256K1 = 1
    SECP256R1 = 2
    ED25519 = 3

    @classmethod
    def parse(cls, value: int | str | Curve) -> Curve:
        """Resolve a curve from its number or (case-insensitive) name."""
        if isinstance(value, str) and not value.isdecimal():
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"unsupported curve: {value}") from None
        try:
            return cls(int(value))
        except ValueError:
            raise ValueError(f"unsupported curve: {value}") from None


class MessageKind(Enum):
    OPERATION = "operation"
    BLOCK = "blocklevel"
    ENDORSEMENT = "endorsement"
    MICHELSON = "michelson"
    DELEGATION = "delegation"


# Status codes a sign frame returns as data instead of raising.
SIGN_ACCEPTED_CODES = (0x9000, 0x6984, 0x6A80, 0x6F01)

INSTRUCTION_NAMES: MappingProxyType[tuple[Generation, int], str] = MappingProxyType({
    **{(Generation.MODERN, int(i)): i.name for i in Ins},
    **{(Generation.LEGACY, int(i)): i.name for i in LegacyIns},
})
