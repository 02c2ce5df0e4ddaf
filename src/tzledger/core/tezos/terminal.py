"""Tezos application terminal.

Each @handles method receives a typed Message dataclass and returns a
typed Result dataclass. Device status errors and link failures are
folded into the result; client-side validation errors (bad path, bad
curve, unknown message kind) propagate as ValueError before any I/O.
"""

from __future__ import annotations

from tzledger.core.base import Agent, Terminal
from tzledger.core.base.terminal import handles
from tzledger.core.tezos import decoder
from tzledger.core.tezos.constants import Curve, Generation
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
from tzledger.core.tezos.session import session_for


class TezosTerminal(Terminal):
    """Terminal for the Tezos wallet and baking application."""

    def __init__(self, agent: Agent) -> None:
        super().__init__(agent)
        self._proto = TezosProtocol(agent.send)

    # -- modern --

    @handles(GetVersionMessage)
    def _get_version(self, message: GetVersionMessage) -> VersionResult:
        return self._exchange(VersionResult, self._proto.send_get_version, decoder.decode_version)

    @handles(GetAppInfoMessage)
    def _get_app_info(self, message: GetAppInfoMessage) -> AppInfoResult:
        return self._exchange(AppInfoResult, self._proto.send_get_app_info, decoder.decode_app_info)

    @handles(GetAddressMessage)
    def _get_address(self, message: GetAddressMessage) -> AddressResult:
        curve = Curve.parse(message.curve)
        return self._exchange(
            AddressResult,
            lambda: self._proto.send_get_address(message.path, curve, message.show),
            decoder.decode_address,
        )

    @handles(SignMessage)
    def _sign(self, message: SignMessage) -> SignResult:
        session = session_for(Generation.MODERN, self._proto)
        return session.sign(message.path, message.curve, message.message, message.kind)

    @handles(SignBakerMessage)
    def _sign_baker(self, message: SignBakerMessage) -> SignResult:
        session = session_for(Generation.MODERN, self._proto)
        return session.sign(
            message.path, message.curve, message.message, message.kind, baker=True,
        )

    @handles(AuthorizeBakingMessage)
    def _authorize_baking(self, message: AuthorizeBakingMessage) -> AddressResult:
        curve = Curve.parse(message.curve)
        return self._exchange(
            AddressResult,
            lambda: self._proto.send_authorize_baking(message.path, curve),
            lambda raw: decoder.decode_public_key(raw, curve),
        )

    @handles(DeauthorizeBakingMessage)
    def _deauthorize_baking(self, message: DeauthorizeBakingMessage) -> StatusResult:
        return self._exchange(StatusResult, self._proto.send_deauthorize_baking, decoder.decode_status)

    @handles(QueryAuthKeyMessage)
    def _query_auth_key(self, message: QueryAuthKeyMessage) -> AuthKeyResult:
        return self._exchange(
            AuthKeyResult,
            lambda: self._proto.send_query_auth_key(message.confirm),
            decoder.decode_auth_key,
        )

    # -- legacy --

    @handles(LegacyGetVersionMessage)
    def _legacy_version(self, message: LegacyGetVersionMessage) -> LegacyVersionResult:
        return self._exchange(
            LegacyVersionResult, self._proto.send_legacy_version, decoder.decode_legacy_version,
        )

    @handles(LegacyGetGitMessage)
    def _legacy_git(self, message: LegacyGetGitMessage) -> GitResult:
        return self._exchange(GitResult, self._proto.send_legacy_git, decoder.decode_git)

    @handles(LegacyGetPublicKeyMessage)
    def _legacy_public_key(self, message: LegacyGetPublicKeyMessage) -> AddressResult:
        curve = Curve.parse(message.curve)
        return self._exchange(
            AddressResult,
            lambda: self._proto.send_legacy_public_key(message.path, curve, message.prompt),
            lambda raw: decoder.decode_public_key(raw, curve),
        )

    @handles(LegacyAuthorizeBakingMessage)
    def _legacy_authorize_baking(self, message: LegacyAuthorizeBakingMessage) -> AddressResult:
        curve = Curve.parse(message.curve)
        return self._exchange(
            AddressResult,
            lambda: self._proto.send_legacy_authorize_baking(message.path, curve),
            lambda raw: decoder.decode_public_key(raw, curve),
        )

    @handles(LegacyDeauthorizeBakingMessage)
    def _legacy_deauthorize(self, message: LegacyDeauthorizeBakingMessage) -> StatusResult:
        return self._exchange(StatusResult, self._proto.send_legacy_deauthorize, decoder.decode_status)

    @handles(LegacyQueryAuthKeyMessage)
    def _legacy_query_auth_key(self, message: LegacyQueryAuthKeyMessage) -> AuthKeyResult:
        return self._exchange(
            AuthKeyResult,
            lambda: self._proto.send_legacy_query_auth_key(message.confirm, message.with_curve),
            lambda raw: decoder.decode_auth_key(raw, message.with_curve),
        )

    @handles(LegacyResetWatermarkMessage)
    def _legacy_reset(self, message: LegacyResetWatermarkMessage) -> StatusResult:
        return self._exchange(
            StatusResult,
            lambda: self._proto.send_legacy_reset(message.level),
            decoder.decode_status,
        )

    @handles(LegacyGetWatermarkMessage)
    def _legacy_watermark(self, message: LegacyGetWatermarkMessage) -> WatermarkResult:
        return self._exchange(
            WatermarkResult,
            lambda: self._proto.send_legacy_query_watermark(message.all),
            lambda raw: decoder.decode_watermark(raw, message.all),
        )

    @handles(LegacySetupMessage)
    def _legacy_setup(self, message: LegacySetupMessage) -> AddressResult:
        curve = Curve.parse(message.curve)
        return self._exchange(
            AddressResult,
            lambda: self._proto.send_legacy_setup(
                message.path, curve, message.main, message.test, message.chain_id,
            ),
            lambda raw: decoder.decode_public_key(raw, curve),
        )

    @handles(LegacyHMACMessage)
    def _legacy_hmac(self, message: LegacyHMACMessage) -> HMACResult:
        curve = Curve.parse(message.curve)
        return self._exchange(
            HMACResult,
            lambda: self._proto.send_legacy_hmac(message.path, curve, message.message),
            decoder.decode_hmac,
        )

    @handles(LegacySignMessage)
    def _legacy_sign(self, message: LegacySignMessage) -> SignResult:
        session = session_for(Generation.LEGACY, self._proto)
        return session.sign(
            message.path, message.curve, message.message, message.kind,
            variant=message.variant,
        )

    # -- raw --

    @handles(RawAPDUMessage)
    def _raw_apdu(self, message: RawAPDUMessage) -> RawAPDUResult:
        return self._exchange(
            RawAPDUResult,
            lambda: self._proto.send_raw(
                message.cla, message.ins, message.p1, message.p2, message.data,
            ),
            decoder.decode_raw,
        )
