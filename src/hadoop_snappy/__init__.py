"""Streaming decoder for the Hadoop snappy container format.

Hadoop's snappy codec does not write the standard snappy framing format.
It writes big-endian length-prefixed frames, each holding one or more
length-prefixed raw snappy blocks. This package reads that format.

Usage::

    from hadoop_snappy import HadoopSnappyReader, decompress

    # Stream from any binary file object
    with open("part-00000.snappy", "rb") as f:
        for line in HadoopSnappyReader(f):
            ...

    # Decode a whole buffer at once
    original = decompress(compressed)
"""

from __future__ import annotations

from .codec import BlockCodec, SnappyBlockCodec
from .config import ReaderConfig
from .exceptions import (
    CorruptBlockError,
    DecompressedTooLargeError,
    EmptyBlockError,
    HadoopSnappyError,
    MalformedPreambleError,
    SnappyDecompressionError,
    StreamFormatError,
    UnexpectedEndOfStreamError,
)
from .reader import HadoopSnappyReader, decompress, decompress_stream, iter_decompressed

__all__ = [
    # Streaming API
    "HadoopSnappyReader",
    "ReaderConfig",
    # Whole-stream helpers
    "decompress",
    "decompress_stream",
    "iter_decompressed",
    # Block codec
    "BlockCodec",
    "SnappyBlockCodec",
    # Exceptions
    "HadoopSnappyError",
    "StreamFormatError",
    "UnexpectedEndOfStreamError",
    "EmptyBlockError",
    "DecompressedTooLargeError",
    "SnappyDecompressionError",
    "MalformedPreambleError",
    "CorruptBlockError",
]
