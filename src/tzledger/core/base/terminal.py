from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from tzledger.core.base.agent import Agent
from tzledger.core.base.errors import TRANSPORT_ERROR, StatusError, process_error_response
from tzledger.core.base.message import Message, Result
from tzledger.core.device import TransportError

lg = logging.getLogger(__name__)

R = TypeVar("R", bound=Result)


def handles(message_cls: type[Message]) -> Callable:
    """Mark a terminal method as the handler for ``message_cls``."""

    def decorator(method: Callable) -> Callable:
        method._handles_message = message_cls
        return method

    return decorator


class Terminal:
    """Base terminal: turns Message objects into device exchanges.

    Handlers are collected from the class body and its bases when a
    subclass is created. Each handler returns a Result; device status
    errors and link failures are reported in that Result rather than
    raised, see ``_exchange``.
    """

    _handlers: dict[type[Message], str] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        table = dict(cls._handlers)
        table.update(
            (attr._handles_message, name)
            for name, attr in vars(cls).items()
            if hasattr(attr, "_handles_message")
        )
        cls._handlers = table

    def __init__(self, agent: Agent) -> None:
        self._agent = agent

    def connect(self) -> None:
        self._agent.connect()

    def disconnect(self) -> None:
        self._agent.disconnect()

    def reconnect(self) -> None:
        self._agent.disconnect()
        self._agent.connect()

    @property
    def supported_messages(self) -> list[type[Message]]:
        return list(self._handlers)

    def send(self, message: Message) -> Result:
        """Run the handler registered for the message's type."""
        try:
            name = self._handlers[type(message)]
        except KeyError:
            raise ValueError(f"unsupported message: {type(message).__name__}") from None
        return getattr(self, name)(message)

    def _exchange(self, result_cls: type[R], send: Callable[[], bytes],
                  decode: Callable[[bytes], R]) -> R:
        """Send, then decode; any failure becomes a bare result.

        Status and link errors keep their code. A body that does not match
        the expected layout is reported as TRANSPORT_ERROR with the reason.
        """
        try:
            raw = send()
        except (StatusError, TransportError) as exc:
            code, text = process_error_response(exc)
            return result_cls(return_code=code, error_message=text)
        try:
            return decode(raw)
        except (ValueError, IndexError) as exc:
            return result_cls(return_code=TRANSPORT_ERROR, error_message=str(exc))

    def on_error(self, error: Exception) -> None:
        code, text = process_error_response(error)
        lg.error("terminal error %04X: %s", code, text)
