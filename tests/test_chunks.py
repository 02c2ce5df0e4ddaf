"""Tests for chunked message framing."""

from tzledger.core.base.chunks import CHUNK_SIZE, prepare_chunks
from tzledger.core.base.path import serialize_path


def test_chunk_size():
    assert CHUNK_SIZE == 250


def test_path_travels_alone_first():
    path = serialize_path("m/44'/1729'/0'/0'")
    chunks = prepare_chunks(b"\x03" * 10, path)
    assert chunks[0] == path
    assert chunks[1] == b"\x03" * 10


def test_600_byte_message():
    message = bytes(range(200)) * 3
    chunks = prepare_chunks(message, b"\x02\x80\x00\x00\x2c\x80\x00\x06\xc1")
    assert [len(c) for c in chunks] == [9, 250, 250, 100]
    assert b"".join(chunks[1:]) == message


def test_without_path():
    chunks = prepare_chunks(b"\xaa" * 251)
    assert [len(c) for c in chunks] == [250, 1]


def test_exact_multiple():
    chunks = prepare_chunks(b"\x00" * 500)
    assert [len(c) for c in chunks] == [250, 250]


def test_empty_message_keeps_path():
    assert prepare_chunks(b"", b"\x02") == [b"\x02"]
    assert prepare_chunks(b"") == []


def test_custom_chunk_size():
    assert prepare_chunks(b"abcdefg", chunk_size=3) == [b"abc", b"def", b"g"]
