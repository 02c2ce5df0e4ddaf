from __future__ import annotations

from dataclasses import dataclass

from tzledger.core.base.errors import NO_ERRORS


@dataclass
class Message:
    """Base class for messages sent to a terminal."""


@dataclass
class Result:
    """Base class for typed results from a terminal operation.

    Every result carries the device status and its message; a failed
    exchange leaves the command-specific fields at their defaults.
    """

    return_code: int
    error_message: str

    @property
    def success(self) -> bool:
        return self.return_code == NO_ERRORS
