"""Test helpers for hadoop_snappy unit tests."""

from __future__ import annotations

from .builders import (
    make_block,
    make_copy_1_tag,
    make_copy_2_tag,
    make_copy_4_tag,
    make_frame,
    make_header,
    make_literal_tag,
    make_stream,
    make_varint32,
)
from .sources import FailingSource, InjectedSourceError, TrickleSource

HELLO_WORLD_STREAM = bytes(
    [
        # Frame header: 13 decompressed bytes.
        0x00, 0x00, 0x00, 0x0D,
        # Block header: 15 compressed bytes.
        0x00, 0x00, 0x00, 0x0F,
        # Preamble (13), literal tag for 13 bytes, then "Hello, world!".
        0x0D, 0x30,
        0x48, 0x65, 0x6C, 0x6C, 0x6F, 0x2C, 0x20, 0x77, 0x6F, 0x72, 0x6C, 0x64, 0x21,
    ]
)  # fmt: skip
"""The string "Hello, world!" as a single-frame, single-block stream."""

__all__ = [
    "HELLO_WORLD_STREAM",
    "FailingSource",
    "InjectedSourceError",
    "TrickleSource",
    "make_block",
    "make_copy_1_tag",
    "make_copy_2_tag",
    "make_copy_4_tag",
    "make_frame",
    "make_header",
    "make_literal_tag",
    "make_stream",
    "make_varint32",
]
