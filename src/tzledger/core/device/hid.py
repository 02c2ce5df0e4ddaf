"""USB HID link to the signing device.

Command APDUs are wrapped in 64-byte HID reports: each report starts with
the channel id (2 bytes), the command tag 0x05 and a big-endian sequence
number. The first report of a message also carries the total APDU length.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from tzledger.core.device.logging import PROTOCOL, colored_status, log_hex

lg = logging.getLogger(__name__)

LEDGER_VENDOR_ID = 0x2C97
LEDGER_USAGE_PAGE = 0xFFA0
CHANNEL = 0x0101
TAG_APDU = 0x05
PACKET_SIZE = 64


class TransportError(ConnectionError):
    """The device link failed or returned a malformed HID stream."""


def wrap_command(apdu: bytes, channel: int = CHANNEL,
                 packet_size: int = PACKET_SIZE) -> list[bytes]:
    """Split an APDU into HID reports of exactly packet_size bytes."""
    payload = len(apdu).to_bytes(2, "big") + apdu
    header_size = 5
    chunk = packet_size - header_size
    packets = []
    for seq, offset in enumerate(range(0, len(payload), chunk)):
        header = channel.to_bytes(2, "big") + bytes([TAG_APDU]) + seq.to_bytes(2, "big")
        body = payload[offset : offset + chunk]
        packets.append((header + body).ljust(packet_size, b"\x00"))
    return packets


def unwrap_response(read: Callable[[], bytes], channel: int = CHANNEL) -> bytes:
    """Reassemble a response from successive HID reports."""
    buf = bytearray()
    expected: int | None = None
    seq = 0
    while expected is None or len(buf) < expected:
        packet = read()
        if len(packet) < 5:
            raise TransportError(f"short HID report ({len(packet)} bytes)")
        if int.from_bytes(packet[0:2], "big") != channel:
            raise TransportError(f"unexpected channel {packet[0:2].hex()}")
        if packet[2] != TAG_APDU:
            raise TransportError(f"unexpected tag {packet[2]:#04x}")
        if int.from_bytes(packet[3:5], "big") != seq:
            raise TransportError(f"out of sequence report {packet[3:5].hex()}")
        body = packet[5:]
        if expected is None:
            if len(body) < 2:
                raise TransportError("missing response length")
            expected = int.from_bytes(body[0:2], "big")
            body = body[2:]
        buf.extend(body)
        seq += 1
    return bytes(buf[:expected])


class HIDLink:
    """Raw HID device wrapper, one APDU exchange at a time.

    The link blocks on reads; whatever timeout applies is the one given
    here, not one chosen by the protocol layer.
    """

    def __init__(self, vendor_id: int = LEDGER_VENDOR_ID,
                 timeout_ms: int = 0) -> None:
        self._vendor_id = vendor_id
        self._timeout_ms = timeout_ms
        self._device = None

    @property
    def connected(self) -> bool:
        return self._device is not None

    @staticmethod
    def list_devices(vendor_id: int = LEDGER_VENDOR_ID) -> list[dict]:
        import hid

        return [
            info for info in hid.enumerate(vendor_id, 0)
            if info.get("interface_number") == 0
            or info.get("usage_page") == LEDGER_USAGE_PAGE
        ]

    def connect(self, path: bytes | None = None) -> None:
        import hid

        if path is None:
            available = self.list_devices(self._vendor_id)
            if not available:
                raise TransportError("no device found")
            path = available[0]["path"]
        device = hid.device()
        try:
            device.open_path(path)
        except OSError as exc:
            raise TransportError(f"cannot open {path!r}: {exc}") from exc
        device.set_nonblocking(False)
        self._device = device
        lg.log(PROTOCOL, "connect")

    def disconnect(self) -> None:
        if self._device is not None:
            self._device.close()
            self._device = None
            lg.log(PROTOCOL, "disconnect")

    def _read(self) -> bytes:
        data = self._device.read(PACKET_SIZE, self._timeout_ms)
        if not data:
            raise TransportError("read timed out")
        return bytes(data)

    def exchange(self, apdu: bytes) -> bytes:
        """Send one APDU and return the raw response (body + status word)."""
        if self._device is None:
            raise TransportError("not connected to a device")
        log_hex(lg, ">> ", apdu)
        try:
            for packet in wrap_command(apdu):
                # hidapi expects a leading report id
                self._device.write(b"\x00" + packet)
            raw = unwrap_response(self._read)
        except OSError as exc:
            raise TransportError(str(exc)) from exc
        if len(raw) > 2:
            log_hex(lg, "<< ", raw[:-2])
        if len(raw) >= 2:
            lg.trace("<< %s", colored_status(int.from_bytes(raw[-2:], "big")))
        return raw
