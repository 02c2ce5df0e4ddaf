from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from tzledger.core.base.errors import NO_ERRORS, StatusError
from tzledger.core.device import APDU, Response, TransportError

lg = logging.getLogger(__name__)


class Link(Protocol):
    """Protocol for a byte-level device link."""

    def connect(self) -> None: ...
    def disconnect(self) -> None: ...
    def exchange(self, apdu: bytes) -> bytes: ...


class Agent:
    """Agent that manages device connectivity and APDU transmission.

    Protocol classes receive agent.send as a callable; send() is the only
    path to the device. One exchange at a time: callers must not start a
    new command while a multi-frame exchange is in flight.
    """

    def __init__(self, link: Link) -> None:
        self._link = link

    def connect(self) -> None:
        self._link.connect()
        lg.info("connected")

    def disconnect(self) -> None:
        self._link.disconnect()

    def send(
        self,
        cla: int,
        ins: int,
        p1: int,
        p2: int,
        data: bytes = b"",
        accepted: Iterable[int] = (NO_ERRORS,),
    ) -> bytes:
        """Exchange one APDU and return the raw response (body + status).

        Raises StatusError when the status word is not in ``accepted`` and
        TransportError when the link returns something that is not a
        status-bearing buffer.
        """
        apdu = APDU(cla=cla, ins=ins, p1=p1, p2=p2, data=bytes(data)).to_bytes()
        raw = self._link.exchange(apdu)
        if not isinstance(raw, (bytes, bytearray)):
            raise TransportError(f"malformed response: {raw!r}")
        try:
            resp = Response.from_bytes(raw)
        except ValueError as exc:
            raise TransportError(str(exc)) from exc
        if resp.sw not in set(accepted):
            raise StatusError(resp.sw)
        return resp.to_bytes()
