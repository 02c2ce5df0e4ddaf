"""BIP32-style derivation paths, serialized with every index hardened."""

from __future__ import annotations

HARDENED = 0x80000000

_EXAMPLE = "m/44'/1729'/0'/0'"


class PathError(ValueError):
    """Malformed derivation path."""


def serialize_path(path: str) -> bytes:
    """Serialize ``m/i1'/.../in'`` as ``[n][be-u32]*n`` with n in (2, 4).

    Every index is hardened whether or not it carries an apostrophe.
    """
    if not path.startswith("m"):
        raise PathError(f'path should start with "m" (e.g. "{_EXAMPLE}")')

    components = path.split("/")[1:]
    if len(components) not in (2, 4):
        raise PathError(f'invalid path: expected 2 or 4 indices (e.g. "{_EXAMPLE}")')

    buf = bytearray([len(components)])
    for child in components:
        if child.endswith("'"):
            child = child[:-1]
        if not (child.isascii() and child.isdigit()):
            raise PathError(f"invalid path: {child!r} is not a number")
        value = int(child)
        if value >= HARDENED:
            raise PathError("incorrect child value (bigger or equal to 0x80000000)")
        buf.extend((HARDENED + value).to_bytes(4, "big"))
    return bytes(buf)


def deserialize_path(data: bytes) -> str:
    """Render a serialized path back as text, hardened indices marked."""
    if not data:
        raise PathError("empty path buffer")
    count = data[0]
    if len(data) < 1 + 4 * count:
        raise PathError(f"path buffer truncated: {count} indices, {len(data) - 1} bytes")
    parts = ["m"]
    for i in range(count):
        word = int.from_bytes(data[1 + 4 * i : 5 + 4 * i], "big")
        if word & HARDENED:
            parts.append(f"{word - HARDENED}'")
        else:
            parts.append(str(word))
    return "/".join(parts)
