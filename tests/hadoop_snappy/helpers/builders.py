"""
Builders for Hadoop snappy test streams.

The package ships no encoder, so tests assemble streams by hand. Blocks are
encoded as literals only, which is valid raw snappy; copy elements are
exercised directly through hand-written tag bytes.
"""

from __future__ import annotations

from collections.abc import Sequence

MAX_LITERAL_RUN = 1 << 16
"""Largest literal emitted per tag by `make_block`."""


def make_varint32(value: int) -> bytes:
    """Encode a 32-bit varint."""
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def make_literal_tag(length: int) -> bytes:
    """Literal tag for `length` bytes, inline up to 60 and extended beyond."""
    n = length - 1
    if n < 60:
        return bytes([n << 2])
    size = (n.bit_length() + 7) // 8
    return bytes([(59 + size) << 2]) + n.to_bytes(size, "little")


def make_copy_1_tag(length: int, offset: int) -> bytes:
    """Copy with 1-byte offset: 4 <= length <= 11, offset < 2048."""
    return bytes([((offset >> 8) << 5) | ((length - 4) << 2) | 0b01, offset & 0xFF])


def make_copy_2_tag(length: int, offset: int) -> bytes:
    """Copy with 2-byte offset: 1 <= length <= 64."""
    return bytes([((length - 1) << 2) | 0b10]) + offset.to_bytes(2, "little")


def make_copy_4_tag(length: int, offset: int) -> bytes:
    """Copy with 4-byte offset: 1 <= length <= 64."""
    return bytes([((length - 1) << 2) | 0b11]) + offset.to_bytes(4, "little")


def make_block(payload: bytes) -> bytes:
    """Raw snappy block decoding to `payload`, made of literals only."""
    out = bytearray(make_varint32(len(payload)))
    for start in range(0, len(payload), MAX_LITERAL_RUN):
        run = payload[start : start + MAX_LITERAL_RUN]
        out += make_literal_tag(len(run))
        out += run
    return bytes(out)


def make_header(value: int) -> bytes:
    """Big-endian uint32 frame or block header."""
    return value.to_bytes(4, "big")


def make_frame(*payloads: bytes) -> bytes:
    """Frame holding one block per payload."""
    out = bytearray(make_header(sum(len(p) for p in payloads)))
    for payload in payloads:
        block = make_block(payload)
        out += make_header(len(block))
        out += block
    return bytes(out)


def make_stream(frames: Sequence[Sequence[bytes]]) -> bytes:
    """Stream of frames, each given as its list of block payloads."""
    return b"".join(make_frame(*payloads) for payloads in frames)
