"""Decoders from raw device responses (body + status word) to results.

The status word is always reported; fields a failed exchange cannot fill
keep their defaults.
"""

from __future__ import annotations

from tzledger.core.base.errors import LedgerError, error_code_to_string
from tzledger.core.base.path import deserialize_path
from tzledger.core.tezos.address import public_key_to_address
from tzledger.core.tezos.constants import SIGN_HASH_SIZE, Curve
from tzledger.core.tezos.messages import (
    AddressResult,
    AppInfoResult,
    AuthKeyResult,
    GitResult,
    HMACResult,
    LegacyVersionResult,
    RawAPDUResult,
    SignResult,
    StatusResult,
    VersionResult,
    WatermarkResult,
)

APP_INFO_FORMAT_ID = 1

FLAG_RECOVERY = 0x01
FLAG_SIGNED_MCU_CODE = 0x02
FLAG_ONBOARDED = 0x04
FLAG_PIN_VALIDATED = 0x80

# status codes whose body carries a diagnostic text
_DIAGNOSTIC_CODES = (
    LedgerError.BAD_KEY_HANDLE,
    LedgerError.DATA_IS_INVALID,
    LedgerError.SIGN_VERIFY_ERROR,
)


def split_response(raw: bytes) -> tuple[bytes, int]:
    """Split a raw response into (body, status code)."""
    if len(raw) < 2:
        raise ValueError(f"response too short: {len(raw)} bytes")
    return bytes(raw[:-2]), int.from_bytes(raw[-2:], "big")


def _status(code: int) -> dict:
    return {"return_code": code, "error_message": error_code_to_string(code)}


def _be32(data: bytes, offset: int) -> int | None:
    if len(data) < offset + 4:
        return None
    return int.from_bytes(data[offset : offset + 4], "big")


def decode_status(raw: bytes) -> StatusResult:
    _, code = split_response(raw)
    return StatusResult(**_status(code))


def decode_raw(raw: bytes) -> RawAPDUResult:
    body, code = split_response(raw)
    return RawAPDUResult(data=body, **_status(code))


def decode_version(raw: bytes) -> VersionResult:
    """Decode the modern version layout.

    test mode, major, minor, patch, locked flag, then the 4-byte target id
    when the response is long enough.
    """
    body, code = split_response(raw)
    result = VersionResult(**_status(code))
    if len(body) >= 4:
        result.test_mode = body[0] != 0
        result.major, result.minor, result.patch = body[1], body[2], body[3]
    if len(body) >= 5:
        result.device_locked = body[4] == 1
    target_id = _be32(body, 5) or 0
    result.target_id = format(target_id, "x")
    return result


def decode_app_info(raw: bytes) -> AppInfoResult:
    """Decode the dashboard app info layout (format id 1 only)."""
    body, code = split_response(raw)
    result = AppInfoResult(**_status(code))
    if not body or body[0] != APP_INFO_FORMAT_ID:
        result.return_code = LedgerError.DEVICE_IS_BUSY
        result.error_message = "response format ID not recognized"
        return result

    idx = 1
    name_len = body[idx]
    idx += 1
    result.app_name = body[idx : idx + name_len].decode("ascii")
    idx += name_len
    version_len = body[idx]
    idx += 1
    result.app_version = body[idx : idx + version_len].decode("ascii")
    idx += version_len
    if idx < len(body):
        result.flag_len = body[idx]
        idx += 1
    if idx < len(body):
        result.flags_value = body[idx]

    flags = result.flags_value
    result.flag_recovery = bool(flags & FLAG_RECOVERY)
    result.flag_signed_mcu_code = bool(flags & FLAG_SIGNED_MCU_CODE)
    result.flag_onboarded = bool(flags & FLAG_ONBOARDED)
    result.flag_pin_validated = bool(flags & FLAG_PIN_VALIDATED)
    return result


def decode_address(raw: bytes, key_length: int | None = None) -> AddressResult:
    """Decode a public key followed by its ascii address.

    With ``key_length`` the key has that fixed size; otherwise the first
    byte of the body is the key length.
    """
    body, code = split_response(raw)
    result = AddressResult(**_status(code))
    if code != LedgerError.NO_ERRORS or not body:
        return result
    if key_length is None:
        key_length = body[0]
        body = body[1:]
    result.public_key = body[:key_length]
    result.address = body[key_length:].decode("ascii")
    return result


def decode_public_key(raw: bytes, curve: Curve) -> AddressResult:
    """Decode a length-prefixed public key and derive its address."""
    body, code = split_response(raw)
    result = AddressResult(**_status(code))
    if code != LedgerError.NO_ERRORS or not body:
        return result
    result.public_key = body[1 : 1 + body[0]]
    result.address = public_key_to_address(result.public_key, curve)
    return result


def decode_sign(raw: bytes, with_hash: bool = True) -> SignResult:
    """Decode the last sign frame.

    With hash the body is the 32-byte digest then the signature; without,
    the whole body is the signature and the digest is all zeroes. A
    success status with an empty body carries neither.
    """
    body, code = split_response(raw)
    result = SignResult(**_status(code))
    if code in _DIAGNOSTIC_CODES:
        result.error_message = f"{result.error_message} : {body.decode('ascii', 'replace')}"
        return result
    if code != LedgerError.NO_ERRORS or not body:
        return result
    if with_hash:
        result.hash = body[:SIGN_HASH_SIZE]
        result.signature = body[SIGN_HASH_SIZE:]
    else:
        result.hash = bytes(SIGN_HASH_SIZE)
        result.signature = body
    return result


def decode_watermark(raw: bytes, all_counters: bool = False) -> WatermarkResult:
    """Decode the main high watermark, or main, test and chain id."""
    body, code = split_response(raw)
    result = WatermarkResult(**_status(code))
    if code != LedgerError.NO_ERRORS:
        return result
    result.main = _be32(body, 0)
    if all_counters:
        result.test = _be32(body, 4)
        result.chain_id = _be32(body, 8)
    return result


def decode_auth_key(raw: bytes, with_curve: bool = True) -> AuthKeyResult:
    """Decode the baking key: curve byte (when present), index count, path words."""
    body, code = split_response(raw)
    result = AuthKeyResult(**_status(code))
    if code != LedgerError.NO_ERRORS or len(body) < 1 + with_curve:
        return result
    if with_curve:
        result.curve = Curve.parse(body[0])
        body = body[1:]
    result.path = deserialize_path(body)
    return result


def decode_legacy_version(raw: bytes) -> LegacyVersionResult:
    body, code = split_response(raw)
    result = LegacyVersionResult(**_status(code))
    if len(body) >= 4:
        result.baking = body[0] != 0
        result.major, result.minor, result.patch = body[1], body[2], body[3]
    return result


def decode_git(raw: bytes) -> GitResult:
    body, code = split_response(raw)
    return GitResult(commit_hash=body.split(b"\x00", 1)[0].decode("ascii"), **_status(code))


def decode_hmac(raw: bytes) -> HMACResult:
    body, code = split_response(raw)
    return HMACResult(hmac=body, **_status(code))
