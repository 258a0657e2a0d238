"""Exception hierarchy for the Hadoop snappy decoder."""

from __future__ import annotations


class HadoopSnappyError(Exception):
    """
    Base exception for all errors raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class StreamFormatError(HadoopSnappyError):
    """Base class for structural errors in the frame/block container."""


class UnexpectedEndOfStreamError(StreamFormatError, EOFError):
    """
    Raised when the source is exhausted where more bytes were required.

    A clean end of stream happens only at a frame boundary, before any byte of
    the next frame header. Everything else is truncation.

    Attributes:
        operation: What was being read (e.g. "frame header", "block").
        expected_bytes: Number of bytes required.
        actual_bytes: Number of bytes the source delivered before exhausting.
    """

    def __init__(self, operation: str, *, expected_bytes: int, actual_bytes: int) -> None:
        self.operation = operation
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes

        super().__init__(
            f"hadoop-snappy: unexpected end of stream while reading {operation}: "
            f"expected {expected_bytes} bytes, got {actual_bytes}"
        )


class EmptyBlockError(StreamFormatError):
    """
    Raised when a zero-length block appears before its frame is complete.

    Attributes:
        remaining: Decompressed bytes the frame still owed.
    """

    def __init__(self, remaining: int) -> None:
        self.remaining = remaining

        super().__init__(
            f"hadoop-snappy: zero length block in input stream "
            f"({remaining} bytes still expected in frame)"
        )


class DecompressedTooLargeError(StreamFormatError):
    """
    Raised when a block decodes to more bytes than its frame has left.

    Attributes:
        decoded_length: Decoded length reported by the block preamble.
        remaining: Decompressed bytes the frame still owed.
    """

    def __init__(self, decoded_length: int, remaining: int) -> None:
        self.decoded_length = decoded_length
        self.remaining = remaining

        super().__init__(
            f"hadoop-snappy: decompressed frame larger than expected: "
            f"block decodes to {decoded_length} bytes, frame has {remaining} left"
        )


class SnappyDecompressionError(HadoopSnappyError):
    """Base class for errors raised by a block codec."""


class MalformedPreambleError(SnappyDecompressionError):
    """Raised when the decoded-length varint at the start of a block is invalid."""


class CorruptBlockError(SnappyDecompressionError):
    """
    Raised when a block body cannot be decoded.

    Attributes:
        position: Byte offset within the block where decoding failed (if known).
    """

    def __init__(self, detail: str, *, position: int | None = None) -> None:
        self.detail = detail
        self.position = position

        msg = f"snappy: corrupt input: {detail}"
        if position is not None:
            msg = f"{msg} (at byte offset {position})"

        super().__init__(msg)
