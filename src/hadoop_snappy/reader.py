"""
Streaming reader for the Hadoop snappy container format.

Hadoop's BlockCompressorStream wraps raw snappy blocks in a simple container.
There is no magic number, no version and no checksum at this layer::

    stream       := frame*
    frame        := frame_header block+
    frame_header := uint32 BE   total decompressed size of the frame
    block        := block_header block_body
    block_header := uint32 BE   length of block_body
    block_body   := raw snappy block

A frame ends once the decoded lengths of its blocks add up to the frame
header. The next four bytes are then either a new frame header or nothing.


END OF STREAM VS. TRUNCATION
----------------------------
The stream may only end cleanly at a frame boundary, before any byte of the
next frame header:

  - 0 bytes of a frame header available:    clean end of stream.
  - 1-3 bytes of a frame header available:  truncated.
  - missing block header, short block body: truncated.


USAGE
-----
The reader is a regular raw binary stream::

    with open("part-00000.snappy", "rb") as f:
        reader = HadoopSnappyReader(f)
        data = reader.read()

Reading from a stream that is not in this format is undefined. With no
signature to check, the reader can only try to decode and will most likely
raise, but it may also return garbage.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import IO

from typing_extensions import Buffer

from .codec import BlockCodec, SnappyBlockCodec
from .config import ReaderConfig
from .constants import HEADER_BYTE_ORDER, HEADER_LENGTH
from .exceptions import (
    DecompressedTooLargeError,
    EmptyBlockError,
    UnexpectedEndOfStreamError,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FrameState:
    """Progress through the current frame."""

    declared_size: int
    """Decompressed size promised by the frame header."""

    remaining: int
    """Decompressed bytes still owed by blocks of this frame."""


class HadoopSnappyReader(io.RawIOBase):
    """
    Decompress a Hadoop snappy stream as it is read.

    Decoding is pull based: every `readinto` call is served from the block
    decoded last, and only when that block is used up does the reader touch
    the source again. The compressed block buffer is owned by the reader and
    reused across blocks. Bytes are always copied out to the caller.

    The first error is terminal. Every later read raises the same exception.
    Not safe for concurrent use; give each consumer its own reader.
    """

    def __init__(
        self,
        source: IO[bytes],
        codec: BlockCodec | None = None,
        config: ReaderConfig | None = None,
    ) -> None:
        """
        Wrap a readable binary source.

        Args:
            source: Anything with a blocking `read(size)` returning bytes.
                Short reads are fine; an empty result means exhausted.
            codec: Block codec. Defaults to the built-in raw snappy decoder.
            config: Reader settings. Defaults to `ReaderConfig()`.
        """
        super().__init__()
        self._source = source
        self._codec: BlockCodec = codec if codec is not None else SnappyBlockCodec()
        self._config = config if config is not None else ReaderConfig()

        self._frame: FrameState | None = None
        self._frames_started = 0

        # Reused across blocks.
        self._compressed = bytearray()
        self._decoded: bytes | bytearray = b""
        self._cursor = 0

        self._error: Exception | None = None

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Buffer) -> int:
        """
        Fill `buffer` with decoded bytes.

        Returns as soon as any bytes are available, so the count may be
        smaller than the buffer even mid-stream. Returns 0 only at the end of
        the stream or for an empty buffer.

        Raises:
            UnexpectedEndOfStreamError: The source ended mid-header or mid-block.
            EmptyBlockError: A zero-length block appeared mid-frame.
            DecompressedTooLargeError: A block overran its frame's declared size.
            SnappyDecompressionError: The codec rejected a block.
            Exception: Whatever the source raised, unchanged.
        """
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        if self._error is not None:
            raise self._error

        with memoryview(buffer) as view, view.cast("B") as out:
            if len(out) == 0:
                return 0

            try:
                # Blocks that decode to nothing are skipped: returning 0 here
                # would read as end of stream.
                while self._cursor >= len(self._decoded):
                    frame = self._frame
                    if frame is None or frame.remaining == 0:
                        frame = self._next_frame()
                        if frame is None:
                            return 0
                    self._next_block(frame)
            except Exception as e:
                self._error = e
                logger.debug("Hadoop snappy reader failed: %r", e)
                raise

            n = min(len(out), len(self._decoded) - self._cursor)
            out[:n] = self._decoded[self._cursor : self._cursor + n]
            self._cursor += n
            return n

    def close(self) -> None:
        """Close the reader, and the source too if `config.close_source` is set."""
        if self.closed:
            return
        try:
            if self._config.close_source:
                self._source.close()
        finally:
            self._compressed.clear()
            self._decoded = b""
            self._cursor = 0
            super().close()

    def _next_frame(self) -> FrameState | None:
        """Start the next frame. Returns None on a clean end of stream."""
        declared_size = self._read_header("frame header")
        if declared_size is None:
            # The start of a frame is the one place the stream may end.
            logger.debug("Hadoop snappy stream ended after %d frames", self._frames_started)
            return None

        self._frame = FrameState(declared_size=declared_size, remaining=declared_size)
        self._frames_started += 1
        logger.debug("Frame %d declares %d bytes", self._frames_started, declared_size)
        return self._frame

    def _next_block(self, frame: FrameState) -> None:
        """Read the next block of `frame` and decode it."""
        block_length = self._read_header("block header")
        if block_length is None:
            # The frame is open, so a block header is owed.
            raise UnexpectedEndOfStreamError(
                "block header", expected_bytes=HEADER_LENGTH, actual_bytes=0
            )

        if block_length == 0:
            if frame.remaining != 0:
                raise EmptyBlockError(frame.remaining)
            self._decoded = b""
            self._cursor = 0
            return

        self._compressed.clear()
        self._fill(self._compressed, block_length, "block")
        if len(self._compressed) < block_length:
            raise UnexpectedEndOfStreamError(
                "block", expected_bytes=block_length, actual_bytes=len(self._compressed)
            )

        self._decompress(frame)

    def _decompress(self, frame: FrameState) -> None:
        try:
            decoded_length = self._codec.decoded_length(self._compressed)
        except Exception as e:
            e.add_note("hadoop-snappy: determine block decoded length")
            raise

        if decoded_length > frame.remaining:
            raise DecompressedTooLargeError(decoded_length, frame.remaining)

        frame.remaining -= decoded_length

        try:
            self._decoded = self._codec.decode(self._compressed)
        except Exception as e:
            e.add_note("hadoop-snappy: decompress block")
            raise

        self._cursor = 0
        logger.debug(
            "Decoded %d byte block into %d bytes, %d left in frame",
            len(self._compressed),
            decoded_length,
            frame.remaining,
        )

    def _read_header(self, operation: str) -> int | None:
        """
        Read a 4-byte big-endian header.

        Returns None if the source was already exhausted. A partial header is
        always an error.
        """
        header = bytearray()
        self._fill(header, HEADER_LENGTH, operation)
        if not header:
            return None
        if len(header) < HEADER_LENGTH:
            raise UnexpectedEndOfStreamError(
                operation, expected_bytes=HEADER_LENGTH, actual_bytes=len(header)
            )
        return int.from_bytes(header, HEADER_BYTE_ORDER)

    def _fill(self, target: bytearray, size: int, operation: str) -> None:
        """Append up to `size` bytes from the source to an empty `target`."""
        while len(target) < size:
            wanted = min(size - len(target), self._config.max_read_size)
            try:
                chunk = self._source.read(wanted)
            except Exception as e:
                e.add_note(f"hadoop-snappy: read {operation}")
                raise
            if not chunk:
                break
            target += chunk


def iter_decompressed(
    source: IO[bytes],
    codec: BlockCodec | None = None,
    config: ReaderConfig | None = None,
) -> Iterator[bytes]:
    """Yield the decoded stream in chunks of at most `config.copy_buffer_size` bytes."""
    config = config if config is not None else ReaderConfig()
    with HadoopSnappyReader(source, codec, config) as reader:
        while chunk := reader.read(config.copy_buffer_size):
            yield chunk


def decompress_stream(
    source: IO[bytes],
    destination: IO[bytes],
    codec: BlockCodec | None = None,
    config: ReaderConfig | None = None,
) -> int:
    """
    Decode `source` into `destination`.

    Returns:
        The number of decoded bytes written.
    """
    written = 0
    for chunk in iter_decompressed(source, codec, config):
        destination.write(chunk)
        written += len(chunk)
    return written


def decompress(
    data: bytes,
    codec: BlockCodec | None = None,
    config: ReaderConfig | None = None,
) -> bytes:
    """Decode a complete in-memory Hadoop snappy stream."""
    with HadoopSnappyReader(io.BytesIO(data), codec, config) as reader:
        return reader.readall()
