"""Chunk decoding: raw transport bytes to UTF-8 text fragments."""
from __future__ import annotations

import base64

Chunk = bytes | bytearray | memoryview


def encode_to_base64(data: Chunk) -> str:
    """Base64-encode raw bytes and return as a string."""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_base64_text(encoded: str) -> str:
    """Decode a Base64 string and interpret the bytes as UTF-8.

    Malformed UTF-8 sequences become U+FFFD instead of raising.
    """
    return base64.b64decode(encoded).decode("utf-8", errors="replace")


def decode_chunk(chunk: Chunk, *, via_base64: bool = True) -> str:
    """Decode one delivered chunk into a text fragment.

    By default the chunk takes the binary-safe Base64 round trip
    (bytes -> Base64 -> bytes -> UTF-8).  With ``via_base64=False`` the
    bytes are decoded directly; the result is identical.
    """
    if via_base64:
        return decode_base64_text(encode_to_base64(chunk))
    return bytes(chunk).decode("utf-8", errors="replace")
