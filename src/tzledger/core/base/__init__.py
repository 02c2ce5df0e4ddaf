from tzledger.core.base.agent import Agent, Link
from tzledger.core.base.chunks import CHUNK_SIZE, prepare_chunks
from tzledger.core.base.errors import (
    TRANSPORT_ERROR,
    LedgerError,
    StatusError,
    error_code_to_string,
    process_error_response,
)
from tzledger.core.base.message import Message, Result
from tzledger.core.base.path import HARDENED, PathError, serialize_path
from tzledger.core.base.terminal import Terminal

__all__ = [
    "Agent",
    "CHUNK_SIZE",
    "HARDENED",
    "LedgerError",
    "Link",
    "Message",
    "PathError",
    "Result",
    "StatusError",
    "TRANSPORT_ERROR",
    "Terminal",
    "error_code_to_string",
    "prepare_chunks",
    "process_error_response",
    "serialize_path",
]
