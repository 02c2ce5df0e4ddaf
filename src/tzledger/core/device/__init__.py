from tzledger.core.device.hid import HIDLink, TransportError
from tzledger.core.device.logging import PROTOCOL, TRACE
from tzledger.core.device.types import APDU, Response

__all__ = ["APDU", "HIDLink", "PROTOCOL", "Response", "TRACE", "TransportError"]
