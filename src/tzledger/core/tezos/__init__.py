from tzledger.core.tezos.address import address_to_hash, public_key_to_address
from tzledger.core.tezos.constants import Curve, Generation, MessageKind
from tzledger.core.tezos.messages import (
    AddressResult,
    AppInfoResult,
    AuthKeyResult,
    AuthorizeBakingMessage,
    DeauthorizeBakingMessage,
    GetAddressMessage,
    GetAppInfoMessage,
    GetVersionMessage,
    GitResult,
    HMACResult,
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
    LegacyVersionResult,
    QueryAuthKeyMessage,
    RawAPDUMessage,
    RawAPDUResult,
    SignBakerMessage,
    SignMessage,
    SignResult,
    StatusResult,
    VersionResult,
    WatermarkResult,
)
from tzledger.core.tezos.protocol import TezosProtocol
from tzledger.core.tezos.session import LegacySession, ModernSession, SignState
from tzledger.core.tezos.terminal import TezosTerminal

__all__ = [
    "AddressResult",
    "AppInfoResult",
    "AuthKeyResult",
    "AuthorizeBakingMessage",
    "Curve",
    "DeauthorizeBakingMessage",
    "Generation",
    "GetAddressMessage",
    "GetAppInfoMessage",
    "GetVersionMessage",
    "GitResult",
    "HMACResult",
    "LegacyAuthorizeBakingMessage",
    "LegacyDeauthorizeBakingMessage",
    "LegacyGetGitMessage",
    "LegacyGetPublicKeyMessage",
    "LegacyGetVersionMessage",
    "LegacyGetWatermarkMessage",
    "LegacyHMACMessage",
    "LegacyQueryAuthKeyMessage",
    "LegacyResetWatermarkMessage",
    "LegacySession",
    "LegacySetupMessage",
    "LegacySignMessage",
    "LegacyVersionResult",
    "MessageKind",
    "ModernSession",
    "QueryAuthKeyMessage",
    "RawAPDUMessage",
    "RawAPDUResult",
    "SignBakerMessage",
    "SignMessage",
    "SignResult",
    "SignState",
    "StatusResult",
    "TezosProtocol",
    "TezosTerminal",
    "VersionResult",
    "WatermarkResult",
    "address_to_hash",
    "public_key_to_address",
]
