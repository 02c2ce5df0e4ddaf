"""Tezos application information collected during a session.

Runner commands store what they read here (e.g. ``runner._info.address``).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tzledger.app.generic.deviceinfo import DeviceInfo


@dataclass
class TezosDeviceInfo(DeviceInfo):
    """Device information for the Tezos application."""

    version: str = ""
    baking: bool | None = None
    commit_hash: str = ""
    public_key: bytes = b""
    address: str = ""
    authorized_path: str = ""
    watermarks: dict[str, int | None] = field(default_factory=dict)
    signature: bytes = b""
