"""Key selection settings and state display."""

from __future__ import annotations

import logging

from tzledger.app.tezos.display import format_device_info
from tzledger.core.base import Result, serialize_path
from tzledger.core.tezos import Curve, Generation

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no conversion).
_raw_commands: set[str] = set()


def parse_flag(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.lower() in ("true", "yes", "1")


def resolve_key(runner, path: str = "", curve: str = "") -> tuple[str, Curve]:
    """Per-command path/curve, falling back to the runner settings."""
    return path or runner._path, Curve.parse(curve) if curve else runner._curve


def check(label: str, result: Result) -> bool:
    """Log a failed result; True when the device reported success."""
    if not result.success:
        lg.error("%s failed: %s (%04X)", label, result.error_message, result.return_code)
    return result.success


def _set_path(runner, value: str) -> None:
    serialize_path(value)
    runner._path = value
    lg.info("path = %s", value)


def _set_curve(runner, value: str) -> None:
    runner._curve = Curve.parse(value)
    lg.info("curve = %s", runner._curve.name)


def _set_legacy(runner, value: str) -> None:
    runner._generation = Generation.LEGACY if parse_flag(value) else Generation.MODERN
    lg.info("generation = %s", runner._generation.value)


_settings: dict[str, callable] = {
    "path": _set_path,
    "curve": _set_curve,
    "legacy": _set_legacy,
}


def cmd_display(runner) -> bool:
    """Display collected device information."""
    lg.info("\n%s", format_device_info(runner._info))
    return True
