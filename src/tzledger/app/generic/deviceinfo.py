"""Base device information data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DeviceInfo:
    """What the dashboard reports about the running application."""

    app_name: str = ""
    app_version: str = ""
    flags: int = 0
