"""Status words reported by the device and their canonical messages."""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType


class LedgerError(IntEnum):
    U2F_UNKNOWN = 1
    U2F_BAD_REQUEST = 2
    U2F_CONFIGURATION_UNSUPPORTED = 3
    U2F_DEVICE_INELIGIBLE = 4
    U2F_TIMEOUT = 5
    TIMEOUT = 14
    NO_ERRORS = 0x9000
    DEVICE_IS_BUSY = 0x9001
    ERROR_DERIVING_KEYS = 0x6802
    EXECUTION_ERROR = 0x6400
    WRONG_LENGTH = 0x6700
    EMPTY_BUFFER = 0x6982
    OUTPUT_BUFFER_TOO_SMALL = 0x6983
    DATA_IS_INVALID = 0x6984
    CONDITIONS_NOT_SATISFIED = 0x6985
    TRANSACTION_REJECTED = 0x6986
    BAD_KEY_HANDLE = 0x6A80
    INVALID_P1P2 = 0x6B00
    INSTRUCTION_NOT_SUPPORTED = 0x6D00
    APP_DOES_NOT_SEEM_TO_BE_OPEN = 0x6E00
    UNKNOWN_ERROR = 0x6F00
    SIGN_VERIFY_ERROR = 0x6F01


NO_ERRORS = LedgerError.NO_ERRORS

# Catch-all code for transport failures and malformed responses.
TRANSPORT_ERROR = 0xFFFF

ERROR_DESCRIPTION: MappingProxyType[int, str] = MappingProxyType({
    LedgerError.U2F_UNKNOWN: "U2F: Unknown",
    LedgerError.U2F_BAD_REQUEST: "U2F: Bad request",
    LedgerError.U2F_CONFIGURATION_UNSUPPORTED: "U2F: Configuration unsupported",
    LedgerError.U2F_DEVICE_INELIGIBLE: "U2F: Device Ineligible",
    LedgerError.U2F_TIMEOUT: "U2F: Timeout",
    LedgerError.TIMEOUT: "Timeout",
    LedgerError.NO_ERRORS: "No errors",
    LedgerError.DEVICE_IS_BUSY: "Device is busy",
    LedgerError.ERROR_DERIVING_KEYS: "Error deriving keys",
    LedgerError.EXECUTION_ERROR: "Execution Error",
    LedgerError.WRONG_LENGTH: "Wrong Length",
    LedgerError.EMPTY_BUFFER: "Empty Buffer",
    LedgerError.OUTPUT_BUFFER_TOO_SMALL: "Output buffer too small",
    LedgerError.DATA_IS_INVALID: "Data is invalid",
    LedgerError.CONDITIONS_NOT_SATISFIED: "Conditions not satisfied",
    LedgerError.TRANSACTION_REJECTED: "Transaction rejected",
    LedgerError.BAD_KEY_HANDLE: "Bad key handle",
    LedgerError.INVALID_P1P2: "Invalid P1/P2",
    LedgerError.INSTRUCTION_NOT_SUPPORTED: "Instruction not supported",
    LedgerError.APP_DOES_NOT_SEEM_TO_BE_OPEN: "App does not seem to be open",
    LedgerError.UNKNOWN_ERROR: "Unknown error",
    LedgerError.SIGN_VERIFY_ERROR: "Sign/verify error",
})


class StatusError(Exception):
    """The device answered with a status word outside the accepted set."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"{error_code_to_string(status_code)} ({status_code:04X})")
        self.status_code = status_code


def error_code_to_string(status_code: int) -> str:
    """Return the canonical message for a status code."""
    message = ERROR_DESCRIPTION.get(status_code)
    if message is None:
        return f"Unknown Status Code: {int(status_code)}"
    return message


def process_error_response(error: BaseException) -> tuple[int, str]:
    """Normalize a failed exchange into (return_code, error_message)."""
    if isinstance(error, StatusError):
        return error.status_code, error_code_to_string(error.status_code)
    return TRANSPORT_ERROR, str(error)
