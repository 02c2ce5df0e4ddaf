from __future__ import annotations

from dataclasses import dataclass

MAX_DATA_LENGTH = 255


@dataclass
class APDU:
    """Short command APDU as understood by the device application."""

    cla: int
    ins: int
    p1: int
    p2: int
    data: bytes = b""

    def to_bytes(self) -> bytes:
        if len(self.data) > MAX_DATA_LENGTH:
            raise ValueError(
                f"APDU data too long: {len(self.data)} > {MAX_DATA_LENGTH} bytes"
            )
        for name in ("cla", "ins", "p1", "p2"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} out of range: {value:#x}")
        buf = bytearray([self.cla, self.ins, self.p1, self.p2, len(self.data)])
        buf.extend(self.data)
        return bytes(buf)

    def __repr__(self) -> str:
        return self.to_bytes().hex(" ").upper()


@dataclass
class Response:
    """Response APDU: body followed by a big-endian status word."""

    data: bytes
    sw1: int
    sw2: int

    @classmethod
    def from_bytes(cls, raw: bytes) -> Response:
        if len(raw) < 2:
            raise ValueError(f"response too short: {bytes(raw).hex()!r}")
        return cls(data=bytes(raw[:-2]), sw1=raw[-2], sw2=raw[-1])

    def to_bytes(self) -> bytes:
        return self.data + bytes([self.sw1, self.sw2])

    @property
    def sw(self) -> int:
        return (self.sw1 << 8) | self.sw2

    @property
    def success(self) -> bool:
        return self.sw1 == 0x90 and self.sw2 == 0x00

    def __repr__(self) -> str:
        sw = f"SW={self.sw:04X}"
        if self.data:
            return f"{self.data.hex(' ').upper()} {sw}"
        return sw
