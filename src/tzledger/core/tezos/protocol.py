"""Tezos application protocol operations.

Each method maps to a single APDU and uses the ``send_`` prefix. The
protocol class receives ``agent.send`` as a callable and returns the raw
response (body + status word); decoding is left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from tzledger.core.base.errors import NO_ERRORS, StatusError
from tzledger.core.base.path import serialize_path
from tzledger.core.device.logging import PROTOCOL, colored_status
from tzledger.core.tezos.constants import (
    APP_INFO_CLA,
    APP_INFO_INS,
    CLA,
    INSTRUCTION_NAMES,
    P1,
    SIGN_ACCEPTED_CODES,
    Curve,
    Generation,
    Ins,
    LegacyIns,
)

lg = logging.getLogger(__name__)

Send = Callable[..., bytes]


class TezosProtocol:
    """Protocol operations for both generations of the Tezos application."""

    def __init__(self, send: Send) -> None:
        self._send_apdu = send

    def _send(
        self,
        label: str,
        ins: int,
        p1: int = 0,
        p2: int = 0,
        data: bytes = b"",
        accepted: Iterable[int] = (NO_ERRORS,),
        cla: int = CLA,
    ) -> bytes:
        try:
            raw = self._send_apdu(cla, ins, p1, p2, data, accepted=tuple(accepted))
        except StatusError as exc:
            lg.log(PROTOCOL, "%s %s", label, colored_status(exc.status_code))
            raise
        lg.log(PROTOCOL, "%s %s", label, colored_status(int.from_bytes(raw[-2:], "big")))
        return raw

    # -- modern commands --

    def send_get_version(self) -> bytes:
        """GET VERSION (80 10)."""
        return self._send("GET VERSION", Ins.GET_VERSION)

    def send_get_app_info(self) -> bytes:
        """Dashboard APP INFO (B0 01), answered by the OS."""
        return self._send("APP INFO", APP_INFO_INS, cla=APP_INFO_CLA)

    def send_get_address(self, path: str, curve: Curve, show: bool = False) -> bytes:
        """GET ADDR (80 11), P1 selects on-screen confirmation."""
        p1 = P1.SHOW_ADDRESS_IN_DEVICE if show else P1.ONLY_RETRIEVE
        curve = Curve.parse(curve)
        return self._send(
            f"GET ADDR {curve.name}{' show' if show else ''}",
            Ins.GET_ADDR, p1, curve, serialize_path(path),
        )

    def send_authorize_baking(self, path: str, curve: Curve) -> bytes:
        """AUTHORIZE BAKING (80 A1), always confirmed on the device."""
        curve = Curve.parse(curve)
        return self._send(
            f"AUTHORIZE BAKING {curve.name}",
            Ins.AUTHORIZE_BAKING, P1.SHOW_ADDRESS_IN_DEVICE, curve,
            serialize_path(path),
        )

    def send_deauthorize_baking(self) -> bytes:
        """DEAUTHORIZE BAKING (80 AC)."""
        return self._send("DEAUTHORIZE BAKING", Ins.DEAUTHORIZE_BAKING)

    def send_query_auth_key(self, confirm: bool = False) -> bytes:
        """QUERY AUTH KEY WITH CURVE (80 AD)."""
        p1 = P1.SHOW_ADDRESS_IN_DEVICE if confirm else P1.ONLY_RETRIEVE
        return self._send("QUERY AUTH KEY", Ins.QUERY_AUTH_KEY_WITH_CURVE, p1)

    # -- legacy commands --

    def send_legacy_version(self) -> bytes:
        """VERSION (80 00)."""
        return self._send("LEGACY VERSION", LegacyIns.VERSION)

    def send_legacy_git(self) -> bytes:
        """GIT (80 09)."""
        return self._send("LEGACY GIT", LegacyIns.GIT)

    def send_legacy_public_key(self, path: str, curve: Curve, prompt: bool = False) -> bytes:
        """PUBLIC KEY (80 02) or PROMPT PUBLIC KEY (80 03)."""
        ins = LegacyIns.PROMPT_PUBLIC_KEY if prompt else LegacyIns.PUBLIC_KEY
        curve = Curve.parse(curve)
        return self._send(f"LEGACY {ins.name} {curve.name}", ins, 0, curve, serialize_path(path))

    def send_legacy_authorize_baking(self, path: str, curve: Curve) -> bytes:
        """AUTHORIZE BAKING (80 01); the device refuses it without confirmation."""
        curve = Curve.parse(curve)
        return self._send(
            f"LEGACY AUTHORIZE BAKING {curve.name}",
            LegacyIns.AUTHORIZE_BAKING, P1.SHOW_ADDRESS_IN_DEVICE, curve,
            serialize_path(path),
        )

    def send_legacy_deauthorize(self) -> bytes:
        """DEAUTHORIZE (80 0C), confirmed on the device."""
        return self._send("LEGACY DEAUTHORIZE", LegacyIns.DEAUTHORIZE, P1.SHOW_ADDRESS_IN_DEVICE)

    def send_legacy_query_auth_key(self, confirm: bool = False, with_curve: bool = True) -> bytes:
        """QUERY AUTH KEY (80 07) or QUERY AUTH KEY WITH CURVE (80 0D)."""
        ins = LegacyIns.QUERY_AUTH_KEY_WITH_CURVE if with_curve else LegacyIns.QUERY_AUTH_KEY
        p1 = P1.SHOW_ADDRESS_IN_DEVICE if confirm else P1.ONLY_RETRIEVE
        return self._send(f"LEGACY {ins.name}", ins, p1)

    def send_legacy_reset(self, level: int) -> bytes:
        """RESET (80 06), main watermark set to level."""
        return self._send(f"LEGACY RESET level={level}", LegacyIns.RESET, data=level.to_bytes(4, "big"))

    def send_legacy_query_watermark(self, all_counters: bool = False) -> bytes:
        """QUERY MAIN HWM (80 08) or QUERY ALL HWM (80 0B)."""
        ins = LegacyIns.QUERY_ALL_HWM if all_counters else LegacyIns.QUERY_MAIN_HWM
        return self._send(f"LEGACY {ins.name}", ins)

    def send_legacy_setup(
        self, path: str, curve: Curve, main: int, test: int, chain_id: int,
    ) -> bytes:
        """SETUP (80 0A): chain id, main and test levels, then the path."""
        curve = Curve.parse(curve)
        data = (
            chain_id.to_bytes(4, "big")
            + main.to_bytes(4, "big")
            + test.to_bytes(4, "big")
            + serialize_path(path)
        )
        return self._send(f"LEGACY SETUP {curve.name}", LegacyIns.SETUP, 0, curve, data)

    def send_legacy_hmac(self, path: str, curve: Curve, message: bytes) -> bytes:
        """HMAC (80 0E): path then the message."""
        curve = Curve.parse(curve)
        data = serialize_path(path) + bytes(message)
        return self._send(f"LEGACY HMAC {curve.name}", LegacyIns.HMAC, 0, curve, data)

    # -- multi-frame --

    def send_frame(
        self, generation: Generation, ins: int, tag: int, p2: int, chunk: bytes,
        final: bool = False,
    ) -> bytes:
        """One frame of a chunked exchange.

        Intermediate frames accept success only; the last frame also lets
        the diagnostic sign codes through as data.
        """
        accepted = SIGN_ACCEPTED_CODES if final else (NO_ERRORS,)
        name = INSTRUCTION_NAMES.get((Generation(generation), int(ins)), f"{ins:02X}")
        return self._send(f"{name} tag={tag:02X} len={len(chunk)}", ins, tag, p2, chunk, accepted)

    def send_raw(self, cla: int, ins: int, p1: int, p2: int, data: bytes = b"") -> bytes:
        """Arbitrary APDU; every status word is returned as data."""
        return self._send(
            f"APDU {cla:02X} {ins:02X} {p1:02X} {p2:02X}", ins, p1, p2, data,
            accepted=range(0x10000), cla=cla,
        )
