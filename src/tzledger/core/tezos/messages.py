"""Tezos application messages and results.

Each operation has a Message/Result pair. Results always carry the
device status (``return_code``/``error_message``); the command fields
keep their defaults when the exchange failed.
"""

from __future__ import annotations

from dataclasses import dataclass

from tzledger.core.base import Message, Result
from tzledger.core.tezos.constants import Curve, MessageKind

DEFAULT_PATH = "m/44'/1729'/0'/0'"

# LegacySignMessage variants
SIGN = "sign"
SIGN_WITH_HASH = "with_hash"
SIGN_UNSAFE = "unsafe"


# --- results ---


@dataclass
class StatusResult(Result):
    """Outcome of a command with no response body."""


@dataclass
class VersionResult(Result):
    test_mode: bool = False
    major: int = 0
    minor: int = 0
    patch: int = 0
    device_locked: bool = False
    target_id: str = ""


@dataclass
class AppInfoResult(Result):
    app_name: str = "err"
    app_version: str = "err"
    flag_len: int = 0
    flags_value: int = 0
    flag_recovery: bool = False
    flag_signed_mcu_code: bool = False
    flag_onboarded: bool = False
    flag_pin_validated: bool = False


@dataclass
class AddressResult(Result):
    public_key: bytes = b""
    address: str = ""


@dataclass
class SignResult(Result):
    hash: bytes | None = None
    signature: bytes | None = None


@dataclass
class WatermarkResult(Result):
    main: int | None = None
    test: int | None = None
    chain_id: int | None = None


@dataclass
class AuthKeyResult(Result):
    curve: Curve | None = None
    path: str = ""


@dataclass
class LegacyVersionResult(Result):
    baking: bool = False
    major: int = 0
    minor: int = 0
    patch: int = 0


@dataclass
class GitResult(Result):
    commit_hash: str = ""


@dataclass
class HMACResult(Result):
    hmac: bytes = b""


@dataclass
class RawAPDUResult(Result):
    data: bytes = b""


# --- modern instruction set ---


@dataclass
class GetVersionMessage(Message):
    """Request the application version."""


@dataclass
class GetAppInfoMessage(Message):
    """Request name, version and flags of the running application."""


@dataclass
class GetAddressMessage(Message):
    """Retrieve a public key and address, optionally confirming on screen."""

    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519
    show: bool = False


@dataclass
class SignMessage(Message):
    """Sign an operation or packed Michelson expression."""

    message: bytes
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519
    kind: MessageKind = MessageKind.OPERATION


@dataclass
class SignBakerMessage(Message):
    """Sign a block, (pre)endorsement or delegation with the baking key."""

    message: bytes
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519
    kind: MessageKind = MessageKind.ENDORSEMENT


@dataclass
class AuthorizeBakingMessage(Message):
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519


@dataclass
class DeauthorizeBakingMessage(Message):
    pass


@dataclass
class QueryAuthKeyMessage(Message):
    """Ask which key is authorized for baking."""

    confirm: bool = False


# --- legacy instruction set ---


@dataclass
class LegacyGetVersionMessage(Message):
    pass


@dataclass
class LegacyGetGitMessage(Message):
    pass


@dataclass
class LegacyGetPublicKeyMessage(Message):
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519
    prompt: bool = False


@dataclass
class LegacyAuthorizeBakingMessage(Message):
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519


@dataclass
class LegacyDeauthorizeBakingMessage(Message):
    pass


@dataclass
class LegacyQueryAuthKeyMessage(Message):
    """Ask which key is authorized; without curve the reply is the path only."""

    confirm: bool = False
    with_curve: bool = True


@dataclass
class LegacyResetWatermarkMessage(Message):
    level: int


@dataclass
class LegacyGetWatermarkMessage(Message):
    """Read the main high watermark, or all three counters."""

    all: bool = False


@dataclass
class LegacySetupMessage(Message):
    """Set up baking with an initial watermark triple."""

    main: int
    test: int
    chain_id: int
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519


@dataclass
class LegacyHMACMessage(Message):
    message: bytes
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519


@dataclass
class LegacySignMessage(Message):
    """Sign through a legacy sign instruction (sign, with_hash, unsafe)."""

    message: bytes
    path: str = DEFAULT_PATH
    curve: Curve = Curve.ED25519
    kind: MessageKind = MessageKind.OPERATION
    variant: str = SIGN_WITH_HASH


@dataclass
class RawAPDUMessage(Message):
    """Send a raw APDU to the device."""

    cla: int
    ins: int
    p1: int
    p2: int
    data: bytes = b""
