"""Reader configuration."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, PositiveInt

from .constants import DEFAULT_COPY_BUFFER_SIZE, DEFAULT_MAX_READ_SIZE


class StrictBaseModel(BaseModel):
    """A strict, immutable pydantic base model."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))


class ReaderConfig(StrictBaseModel):
    """
    Settings for a HadoopSnappyReader and the whole-stream helpers.

    None of these change how the wire format is interpreted.
    """

    copy_buffer_size: PositiveInt = DEFAULT_COPY_BUFFER_SIZE
    """Chunk size used by `decompress_stream` and `iter_decompressed`."""

    max_read_size: PositiveInt = DEFAULT_MAX_READ_SIZE
    """
    Upper bound on the size passed to a single `read` call on the source.

    Block headers are untrusted, so a corrupt header declaring a huge block
    must not turn into a huge allocation before the shortfall is noticed.
    """

    close_source: bool = False
    """
    Whether closing the reader also closes the underlying source.

    Off by default, matching the standard library wrappers that accept an
    already-open file object.
    """
