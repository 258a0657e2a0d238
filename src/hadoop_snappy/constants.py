"""
Constants for the Hadoop snappy container and the raw snappy block format.

References:
    Hadoop BlockCompressorStream:
        https://github.com/apache/hadoop/blob/trunk/hadoop-common-project/hadoop-common/src/main/java/org/apache/hadoop/io/compress/BlockCompressorStream.java
    Snappy format description:
        https://github.com/google/snappy/blob/main/format_description.txt
"""

from __future__ import annotations

from typing_extensions import Final

# ===========================================================================
# Container Constants
# ===========================================================================
#
# A Hadoop snappy stream is a sequence of frames. Both the frame header and
# the block header are a single big-endian uint32:
#
#   [frame_header: total decompressed size]
#       [block_header: compressed size][raw snappy block]
#       [block_header: compressed size][raw snappy block]
#       ...

HEADER_LENGTH: Final = 4
"""Length in bytes of both the frame header and the block header."""

HEADER_BYTE_ORDER: Final = "big"
"""Headers are big-endian, unlike the little-endian fields inside a block."""

DEFAULT_COPY_BUFFER_SIZE: Final = 64 * 1024
"""Default chunk size used when copying a whole decoded stream."""

DEFAULT_MAX_READ_SIZE: Final = 1024 * 1024
"""Default upper bound on the size of a single read from the source."""

# ===========================================================================
# Tag Type Identifiers
# ===========================================================================
#
# Each element of a raw snappy block starts with a tag byte. The lower 2 bits
# identify the element type:
#
#   00 = Literal (uncompressed bytes)
#   01 = Copy with 1-byte offset (max 2047 bytes back)
#   10 = Copy with 2-byte offset (max 65535 bytes back)
#   11 = Copy with 4-byte offset

TAG_TYPE_MASK: Final = 0b11
"""Mask selecting the element type from a tag byte."""

LITERAL: Final = 0b00
"""Tag type for literal data copied verbatim to the output."""

COPY_1_BYTE_OFFSET: Final = 0b01
"""Tag type for a copy of 4-11 bytes with an 11-bit offset."""

COPY_2_BYTE_OFFSET: Final = 0b10
"""Tag type for a copy of 1-64 bytes with a 16-bit little-endian offset."""

COPY_4_BYTE_OFFSET: Final = 0b11
"""Tag type for a copy of 1-64 bytes with a 32-bit little-endian offset."""

# ===========================================================================
# Literal Length Encoding
# ===========================================================================
#
#   1-60 bytes:   (length - 1) stored in the upper 6 bits of the tag byte.
#   61+ bytes:    upper 6 bits are 60..63, meaning 1..4 little-endian
#                 length bytes follow the tag.

LITERAL_LENGTH_1_BYTE: Final = 60
"""Tag marker: 1 additional length byte follows."""

# ===========================================================================
# Varint Encoding
# ===========================================================================
#
# Every raw snappy block starts with its decoded length as a varint.

MAX_VARINT_LENGTH: Final = 5
"""Maximum bytes in a 32-bit varint (5 x 7 bits >= 32 bits)."""

MAX_VARINT_VALUE: Final = 0xFFFFFFFF
"""Largest value a 32-bit varint may carry."""

VARINT_CONTINUATION_BIT: Final = 0x80
"""High bit set in varint bytes to indicate more bytes follow."""

VARINT_DATA_MASK: Final = 0x7F
"""Mask to extract the 7 data bits from a varint byte."""
