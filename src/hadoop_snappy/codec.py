"""
Raw snappy block decoding.

The container layer treats each block body as opaque and hands it to a block
codec. This module defines that collaborator's interface and ships a pure
Python implementation of it for the raw snappy block format.


BLOCK LAYOUT
------------
A raw snappy block is::

    [varint: decoded length][element][element]...

Each element is either:

  LITERAL: "Here are N raw bytes, copy them to output."
      Input:  [tag] [optional length bytes] [N bytes of data]

  COPY: "Go back X bytes in the output, copy Y bytes."
      Input:  [tag] [1, 2 or 4 offset bytes]


OVERLAPPING COPIES
------------------
If offset < length the copy reads bytes it is currently writing. This is how
runs are encoded: "A" followed by copy(offset=1, length=3) produces "AAAA".


Reference: https://github.com/google/snappy/blob/main/format_description.txt
"""

from __future__ import annotations

from typing import NamedTuple, Protocol, runtime_checkable

from .constants import (
    COPY_1_BYTE_OFFSET,
    COPY_2_BYTE_OFFSET,
    LITERAL,
    LITERAL_LENGTH_1_BYTE,
    MAX_VARINT_LENGTH,
    MAX_VARINT_VALUE,
    TAG_TYPE_MASK,
    VARINT_CONTINUATION_BIT,
    VARINT_DATA_MASK,
)
from .exceptions import CorruptBlockError, MalformedPreambleError


@runtime_checkable
class BlockCodec(Protocol):
    """
    Capability the stream reader calls into for each block.

    Implementations must be able to report how many bytes a block will
    produce without decoding it, and then decode it.
    """

    def decoded_length(self, data: bytes | bytearray) -> int:
        """Return the decoded length declared by the block preamble."""
        ...

    def decode(self, data: bytes | bytearray) -> bytes | bytearray:
        """Decode a block into raw bytes."""
        ...


class Tag(NamedTuple):
    """A decoded element tag."""

    kind: int
    """LITERAL or one of the COPY_* tag types."""

    length: int
    """Number of literal bytes, or number of bytes to copy."""

    offset: int
    """For copies, how far back to copy from. Zero for literals."""

    size: int
    """Bytes consumed by the tag itself (excluding literal data)."""


def decode_varint32(data: bytes | bytearray, offset: int = 0) -> tuple[int, int]:
    """
    Decode a 32-bit varint at the given offset.

    Args:
        data: Byte sequence containing the varint.
        offset: Position in data where the varint starts.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        ValueError: If the varint is truncated, longer than 5 bytes, or
            exceeds 32 bits.
    """
    result = 0
    shift = 0
    bytes_read = 0

    while True:
        if offset + bytes_read >= len(data):
            raise ValueError("Truncated varint: unexpected end of data")

        byte = data[offset + bytes_read]
        bytes_read += 1

        result |= (byte & VARINT_DATA_MASK) << shift
        shift += 7

        if not byte & VARINT_CONTINUATION_BIT:
            break

        if bytes_read >= MAX_VARINT_LENGTH:
            raise ValueError(f"Varint too long: exceeds {MAX_VARINT_LENGTH} bytes")

    if result > MAX_VARINT_VALUE:
        raise ValueError(f"Varint overflow: {result} exceeds 32 bits")

    return result, bytes_read


def decode_tag(data: bytes | bytearray, offset: int = 0) -> Tag:
    """
    Decode the element tag at `offset`.

    Args:
        data: Block bytes.
        offset: Position of the tag byte.

    Returns:
        The decoded tag.

    Raises:
        ValueError: If the tag or its trailing length/offset bytes are truncated.
    """
    if offset >= len(data):
        raise ValueError("No tag byte at offset")

    tag = data[offset]
    kind = tag & TAG_TYPE_MASK

    if kind == LITERAL:
        # Upper 6 bits hold (length - 1) directly, or 60..63 meaning that
        # 1..4 little-endian length bytes follow.
        indicator = tag >> 2
        if indicator < LITERAL_LENGTH_1_BYTE:
            return Tag(LITERAL, indicator + 1, 0, 1)

        extra = indicator - LITERAL_LENGTH_1_BYTE + 1
        if offset + extra >= len(data):
            raise ValueError(f"Truncated literal tag: expected {extra} length bytes")
        length = int.from_bytes(data[offset + 1 : offset + 1 + extra], "little")
        return Tag(LITERAL, length + 1, 0, 1 + extra)

    if kind == COPY_1_BYTE_OFFSET:
        if offset + 1 >= len(data):
            raise ValueError("Truncated copy-1 tag: expected offset byte")
        length = ((tag >> 2) & 0x07) + 4
        copy_offset = ((tag >> 5) << 8) | data[offset + 1]
        return Tag(kind, length, copy_offset, 2)

    # Copy-2 and copy-4 share the length encoding and differ in offset width.
    width = 2 if kind == COPY_2_BYTE_OFFSET else 4
    if offset + width >= len(data):
        raise ValueError(f"Truncated copy-{width} tag: expected {width} offset bytes")
    copy_offset = int.from_bytes(data[offset + 1 : offset + 1 + width], "little")
    return Tag(kind, (tag >> 2) + 1, copy_offset, 1 + width)


class SnappyBlockCodec:
    """Decode-only raw snappy codec."""

    def decoded_length(self, data: bytes | bytearray) -> int:
        """
        Read the decoded length from a block without decoding it.

        Raises:
            MalformedPreambleError: If the length varint is missing or invalid.
        """
        return self._read_preamble(data)[0]

    def decode(self, data: bytes | bytearray, dst: bytearray | None = None) -> bytearray:
        """
        Decode a raw snappy block.

        Args:
            data: The complete block, preamble included.
            dst: Optional buffer to decode into. It is cleared first and
                returned, so callers can reuse one buffer across blocks.

        Returns:
            The decoded bytes.

        Raises:
            MalformedPreambleError: If the length varint is missing or invalid.
            CorruptBlockError: If the elements are malformed, reference data
                outside the output, or do not produce exactly the declared
                length from exactly the given input.
        """
        decoded_length, pos = self._read_preamble(data)

        output = dst if dst is not None else bytearray()
        output.clear()

        while pos < len(data):
            try:
                tag = decode_tag(data, pos)
            except ValueError as e:
                raise CorruptBlockError(str(e), position=pos) from e

            start = pos
            pos += tag.size

            if tag.kind == LITERAL:
                if pos + tag.length > len(data):
                    raise CorruptBlockError(
                        f"literal needs {tag.length} bytes but only {len(data) - pos} remain",
                        position=start,
                    )
                if len(output) + tag.length > decoded_length:
                    raise CorruptBlockError(
                        f"literal would overflow declared length {decoded_length}",
                        position=start,
                    )
                output += data[pos : pos + tag.length]
                pos += tag.length
                continue

            if tag.offset < 1 or tag.offset > len(output):
                raise CorruptBlockError(
                    f"copy offset {tag.offset} outside {len(output)} decoded bytes",
                    position=start,
                )
            if len(output) + tag.length > decoded_length:
                raise CorruptBlockError(
                    f"copy would overflow declared length {decoded_length}",
                    position=start,
                )
            _copy_back(output, tag.offset, tag.length)

        if len(output) != decoded_length:
            raise CorruptBlockError(
                f"decoded {len(output)} bytes, preamble declared {decoded_length}"
            )

        return output

    @staticmethod
    def _read_preamble(data: bytes | bytearray) -> tuple[int, int]:
        if not data:
            raise MalformedPreambleError("snappy: corrupt input: empty block")
        try:
            return decode_varint32(data, 0)
        except ValueError as e:
            raise MalformedPreambleError(
                f"snappy: corrupt input: invalid length varint: {e}"
            ) from e


def _copy_back(output: bytearray, offset: int, length: int) -> None:
    """
    Append `length` bytes starting `offset` bytes before the end of `output`.

    When offset < length the source overlaps the bytes being written, so the
    result is the last `offset` bytes repeated until `length` is reached.
    """
    start = len(output) - offset
    if offset >= length:
        output += output[start : start + length]
        return

    pattern = bytes(output[start:])
    repeats = length // offset + 1
    output += (pattern * repeats)[:length]
