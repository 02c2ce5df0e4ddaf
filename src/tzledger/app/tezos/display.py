"""Human-readable Tezos device information formatting."""

from __future__ import annotations

from tzledger.app.tezos.deviceinfo import TezosDeviceInfo

_FLAG_NAMES: list[tuple[int, str]] = [
    (0x01, "recovery"),
    (0x02, "signed MCU code"),
    (0x04, "onboarded"),
    (0x80, "PIN validated"),
]


def _hex(data: bytes) -> str:
    return data.hex(" ").upper() if data else ""


def format_flags(flags: int) -> str:
    names = [name for mask, name in _FLAG_NAMES if flags & mask]
    return ", ".join(names) if names else "none"


def format_device_info(info: TezosDeviceInfo) -> str:
    """Format everything read so far, one section per topic."""
    sections: list[str] = []
    if info.app_name:
        sections.append(
            f"--- Application ---\n"
            f"  {info.app_name} {info.app_version}\n"
            f"  flags {info.flags:02X} ({format_flags(info.flags)})"
        )
    if info.version:
        line = f"  version {info.version}"
        if info.baking is not None:
            line += " (baking)" if info.baking else " (wallet)"
        if info.commit_hash:
            line += f"  git {info.commit_hash}"
        sections.append(f"--- Version ---\n{line}")
    if info.address:
        sections.append(
            f"--- Key ---\n  {info.address}\n  {_hex(info.public_key)}"
        )
    if info.authorized_path:
        sections.append(f"--- Baking key ---\n  {info.authorized_path}")
    if info.watermarks:
        lines = "\n".join(
            f"  {name:8s} {value}" for name, value in info.watermarks.items() if value is not None
        )
        sections.append(f"--- High watermarks ---\n{lines}")
    if info.signature:
        sections.append(f"--- Last signature ---\n  {_hex(info.signature)}")
    return "\n\n".join(sections) if sections else "(nothing read yet)"
