"""Byte sources with controllable behaviour for reader tests."""

from __future__ import annotations


class InjectedSourceError(Exception):
    """Error raised on purpose by a test source."""


class TrickleSource:
    """
    Source that delivers at most `chunk_size` bytes per read.

    Records every requested size so tests can inspect the read pattern.
    """

    def __init__(self, data: bytes, chunk_size: int = 1) -> None:
        """Serve `data` in pieces of at most `chunk_size` bytes."""
        self._data = data
        self._pos = 0
        self._chunk_size = chunk_size
        self.requested: list[int] = []
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        """Return the next piece, or empty bytes once exhausted."""
        self.requested.append(size)
        if size < 0:
            size = len(self._data) - self._pos
        n = min(size, self._chunk_size)
        chunk = self._data[self._pos : self._pos + n]
        self._pos += len(chunk)
        return chunk

    def close(self) -> None:
        """Mark the source as closed."""
        self.closed = True


class FailingSource(TrickleSource):
    """Source that serves `data` and then raises `error` instead of ending."""

    def __init__(self, data: bytes, error: Exception) -> None:
        """Serve `data` in one piece, then raise on every further read."""
        super().__init__(data, chunk_size=max(len(data), 1))
        self.error = error

    def read(self, size: int = -1) -> bytes:
        """Return remaining data, or raise once it is gone."""
        chunk = super().read(size)
        if not chunk:
            raise self.error
        return chunk
