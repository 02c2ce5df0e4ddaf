from __future__ import annotations

CHUNK_SIZE = 250


def prepare_chunks(
    message: bytes, serialized_path: bytes | None = None, chunk_size: int = CHUNK_SIZE,
) -> list[bytes]:
    """Split a message into frames of at most chunk_size bytes.

    The serialized path, when given, travels alone as the first frame.
    """
    chunks: list[bytes] = []
    if serialized_path is not None:
        chunks.append(bytes(serialized_path))
    message = bytes(message)
    for i in range(0, len(message), chunk_size):
        chunks.append(message[i : i + chunk_size])
    return chunks
