"""Multi-frame sign exchanges.

A signing session frames the path and the magic-prefixed message into
chunks and streams them in order, one response per frame. The curve
travels in P2 of the first frame only. The first failing frame ends the
exchange and the result carries no signature.
"""

from __future__ import annotations

import logging
from enum import Enum

from tzledger.core.base.chunks import prepare_chunks
from tzledger.core.base.errors import StatusError, process_error_response
from tzledger.core.base.path import serialize_path
from tzledger.core.device import PROTOCOL, TransportError
from tzledger.core.tezos.constants import (
    Curve,
    Generation,
    Ins,
    LegacyIns,
    LegacyPayloadType,
    MessageKind,
    PayloadType,
)
from tzledger.core.tezos.decoder import decode_sign
from tzledger.core.tezos.magic import with_magic
from tzledger.core.tezos.messages import SIGN, SIGN_UNSAFE, SIGN_WITH_HASH, SignResult
from tzledger.core.tezos.protocol import TezosProtocol

lg = logging.getLogger(__name__)

_LEGACY_VARIANTS = {
    SIGN: (LegacyIns.SIGN, False),
    SIGN_WITH_HASH: (LegacyIns.SIGN_WITH_HASH, True),
    SIGN_UNSAFE: (LegacyIns.SIGN_UNSAFE, False),
}


class SignState(Enum):
    IDLE = "idle"
    FRAMING = "framing"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


class SigningSession:
    """Base class for the chunked sign exchange of one app generation."""

    generation: Generation

    def __init__(self, protocol: TezosProtocol) -> None:
        self._proto = protocol
        self.state = SignState.IDLE

    def _set_state(self, state: SignState) -> None:
        lg.log(PROTOCOL, "%s sign: %s -> %s", self.generation.value, self.state.value, state.value)
        self.state = state

    def frame_tags(self, count: int) -> list[int]:
        """Payload type of each of ``count`` frames."""
        raise NotImplementedError

    def sign(self, path: str, curve: Curve, message: bytes,
             kind: MessageKind, **options) -> SignResult:
        raise NotImplementedError

    def _prepare(self, path: str, curve: Curve | None, message: bytes,
                 kind: MessageKind) -> tuple[Curve, list[bytes]]:
        if curve is None:
            raise ValueError("a curve is required on the first frame")
        curve = Curve.parse(curve)
        chunks = prepare_chunks(with_magic(MessageKind(kind), message), serialize_path(path))
        return curve, chunks

    def _exchange(self, ins: int, path: str, curve: Curve | None, message: bytes,
                  kind: MessageKind, with_hash: bool = True) -> SignResult:
        self._set_state(SignState.FRAMING)
        try:
            curve, chunks = self._prepare(path, curve, message, kind)
        except ValueError:
            self._set_state(SignState.FAILED)
            raise

        self._set_state(SignState.STREAMING)
        tags = self.frame_tags(len(chunks))
        last = len(chunks) - 1
        try:
            for i, chunk in enumerate(chunks):
                p2 = curve if i == 0 else 0
                raw = self._proto.send_frame(
                    self.generation, ins, tags[i], p2, chunk, final=i == last,
                )
        except (StatusError, TransportError) as exc:
            code, message_text = process_error_response(exc)
            self._set_state(SignState.FAILED)
            return SignResult(return_code=code, error_message=message_text)

        result = decode_sign(raw, with_hash)
        done = result.success and result.signature is not None
        self._set_state(SignState.COMPLETED if done else SignState.FAILED)
        return result


class ModernSession(SigningSession):
    """Sign through SIGN (80 12) or BAKER SIGN (80 AF)."""

    generation = Generation.MODERN

    def frame_tags(self, count: int) -> list[int]:
        tags = [PayloadType.ADD] * count
        tags[0] = PayloadType.INIT
        if count > 1:
            tags[-1] = PayloadType.LAST
        return [int(t) for t in tags]

    def sign(self, path: str, curve: Curve, message: bytes,
             kind: MessageKind = MessageKind.OPERATION, baker: bool = False) -> SignResult:
        ins = Ins.BAKER_SIGN if baker else Ins.SIGN
        return self._exchange(ins, path, curve, message, kind)


class LegacySession(SigningSession):
    """Sign through the legacy SIGN, SIGN WITH HASH or SIGN UNSAFE instructions.

    The last frame is tagged ADD with the 0x80 flag set.
    """

    generation = Generation.LEGACY

    def frame_tags(self, count: int) -> list[int]:
        tags = [LegacyPayloadType.ADD] * count
        tags[0] = LegacyPayloadType.INIT
        if count > 1:
            tags[-1] = LegacyPayloadType.ADD | LegacyPayloadType.LAST_FLAG
        return [int(t) for t in tags]

    def sign(self, path: str, curve: Curve, message: bytes,
             kind: MessageKind = MessageKind.OPERATION,
             variant: str = SIGN_WITH_HASH) -> SignResult:
        if variant not in _LEGACY_VARIANTS:
            raise ValueError(f"unknown sign variant: {variant}")
        ins, with_hash = _LEGACY_VARIANTS[variant]
        return self._exchange(ins, path, curve, message, kind, with_hash)


def session_for(generation: Generation, protocol: TezosProtocol) -> SigningSession:
    """Pick the session implementation for an app generation."""
    if Generation(generation) is Generation.LEGACY:
        return LegacySession(protocol)
    return ModernSession(protocol)
