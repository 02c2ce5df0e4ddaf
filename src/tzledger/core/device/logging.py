"""Extra log levels and formatting helpers for device traffic.

TRACE carries raw HID/APDU bytes, PROTOCOL one line per command.
"""

from __future__ import annotations

import logging

TRACE = 15
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

LINE_BYTES = 16

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"


def _trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


logging.Logger.trace = _trace


def colored_status(sw: int) -> str:
    """Status word as 4 hex digits, green for 9000 and red otherwise."""
    color = _GREEN if sw == 0x9000 else _RED
    return f"{color}{sw:04X}{_RESET}"


def log_hex(logger: logging.Logger, prefix: str, data: bytes) -> None:
    """Hex dump at TRACE, LINE_BYTES per line, continuation lines aligned."""
    pad = " " * len(prefix)
    for i in range(0, len(data), LINE_BYTES):
        chunk = data[i : i + LINE_BYTES].hex(" ").upper()
        logger.trace("%s%s", prefix if i == 0 else pad, chunk)
