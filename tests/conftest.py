"""Shared fixtures: a scripted device link driving the real Agent."""

from __future__ import annotations

from collections import deque

import pytest

from tzledger.core.base import Agent
from tzledger.core.tezos import TezosTerminal
from tzledger.core.tezos.protocol import TezosProtocol


class ScriptedLink:
    """Records every APDU and answers with queued raw responses.

    A queued exception is raised instead of being returned.
    """

    def __init__(self) -> None:
        self.sent: list[bytes] = []
        self.responses: deque = deque()
        self.connected = False

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def exchange(self, apdu: bytes) -> bytes:
        self.sent.append(apdu)
        if not self.responses:
            raise AssertionError(f"unexpected APDU {apdu.hex()}")
        response = self.responses.popleft()
        if isinstance(response, Exception):
            raise response
        return response

    def calls(self) -> list[tuple[int, int, int, int, bytes]]:
        """Sent APDUs as (cla, ins, p1, p2, data)."""
        return [(a[0], a[1], a[2], a[3], a[5:]) for a in self.sent]


def ok(body: bytes = b"") -> bytes:
    return body + b"\x90\x00"


def sw(code: int, body: bytes = b"") -> bytes:
    return body + code.to_bytes(2, "big")


@pytest.fixture
def link() -> ScriptedLink:
    return ScriptedLink()


@pytest.fixture
def agent(link) -> Agent:
    return Agent(link)


@pytest.fixture
def protocol(agent) -> TezosProtocol:
    return TezosProtocol(agent.send)


@pytest.fixture
def terminal(agent) -> TezosTerminal:
    return TezosTerminal(agent)
