# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Chunk assembly buffer: ordered Base64 chunks in, one Blob out.

Each add/append call decodes one Base64 string into a Segment tagged with a
position. `get_blob` concatenates the Segments by ascending position and
memoizes the result until the next mutation.

Invariants:
  - Decoding and validation finish before any state changes, so a rejected
    call leaves segments, cache and counter exactly as they were.
  - Explicit positions are unique; the check is a pure set lookup.
  - The next append position is always greater than every position used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter

from .blob import TRANSPARENT, Blob, check_endings
from .caps import Caps
from .codec import DEFAULT_DECODE_CHUNK_WIDTH, BlobbifyError, decode_segments
from .registry import ObjectUrlRegistry, default_registry

logger = logging.getLogger(__name__)


class DuplicatePositionError(BlobbifyError, ValueError):
    """Raised when an explicit position is already taken."""


@dataclass(frozen=True)
class Segment:
    """Decoded bytes of one add/append call, kept as width-bounded pieces."""

    position: int
    pieces: tuple[bytes, ...]

    @property
    def size(self) -> int:
        return sum(len(piece) for piece in self.pieces)


class Blobbify:
    """Collect Base64 chunks and assemble them into a Blob on demand."""

    def __init__(
        self,
        decode_chunk_width: int = DEFAULT_DECODE_CHUNK_WIDTH,
        mime_type: str = "",
        line_ending_mode: str = TRANSPARENT,
        registry: ObjectUrlRegistry | None = None,
    ) -> None:
        self._segments: list[Segment] = []
        self._positions: set[int] = set()
        self._next_position = 0
        self._blob: Blob | None = None
        self._registry = registry if registry is not None else default_registry

        self.decode_chunk_width = decode_chunk_width
        self.mime_type = mime_type
        self.line_ending_mode = line_ending_mode

    @property
    def decode_chunk_width(self) -> int:
        """Bytes per sub-segment while decoding. Has no effect on output."""
        return self._decode_chunk_width

    @decode_chunk_width.setter
    def decode_chunk_width(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("decode_chunk_width must be an int")
        if value < 1:
            raise ValueError("decode_chunk_width must be a positive integer")
        self._decode_chunk_width = value

    @property
    def mime_type(self) -> str:
        return self._mime_type

    @mime_type.setter
    def mime_type(self, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("mime_type must be a str")
        self._mime_type = value
        self._invalidate()

    @property
    def line_ending_mode(self) -> str:
        return self._line_ending_mode

    @line_ending_mode.setter
    def line_ending_mode(self, value: str) -> None:
        self._line_ending_mode = check_endings(value)
        self._invalidate()

    @property
    def next_position(self) -> int:
        return self._next_position

    @property
    def positions(self) -> list[int]:
        return sorted(self._positions)

    @property
    def segment_count(self) -> int:
        """Number of width-bounded pieces across all Segments."""
        return sum(len(segment.pieces) for segment in self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def append_base64(self, text: str) -> None:
        """Decode `text` and store it after everything added so far.

        Raises:
            InvalidInputError: If `text` is not Base64 text.
        """
        pieces = decode_segments(text, self._decode_chunk_width)
        position = self._next_position
        self._store(Segment(position, pieces))
        self._next_position = position + 1

    def add_base64(self, position: int, text: str) -> None:
        """Decode `text` and store it at an explicit `position`.

        A later `append_base64` continues after the highest position used.

        Raises:
            DuplicatePositionError: If `position` is already taken.
            InvalidInputError: If `text` is not Base64 text.
        """
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError("position must be an int")
        if position in self._positions:
            raise DuplicatePositionError(
                f"position {position} already exists in the items that make up the blob"
            )
        pieces = decode_segments(text, self._decode_chunk_width)
        self._store(Segment(position, pieces))
        self._next_position = max(self._next_position, position + 1)

    def get_blob(self) -> Blob:
        """Return the assembled Blob, building it if the cache is empty."""
        if self._blob is not None:
            return self._blob

        ordered = sorted(self._segments, key=attrgetter("position"))
        parts = [piece for segment in ordered for piece in segment.pieces]
        self._blob = Blob(parts, type=self._mime_type, endings=self._line_ending_mode)
        logger.debug(
            "Assembled %d bytes from %d segments (type=%r)",
            self._blob.size,
            len(ordered),
            self._blob.type,
        )
        return self._blob

    def create_object_url(self) -> str:
        """Register the assembled Blob and return its object URL.

        The caller must pass the URL to `revoke_object_url` once done with it.
        """
        return self._registry.create(self.get_blob())

    def describe_object_url(self, url: str) -> Caps:
        """Describe the Blob behind `url`, with the URL as its RDF subject."""
        return self._registry.describe(url)

    def revoke_object_url(self, url: str) -> None:
        self._registry.revoke(url)

    def _store(self, segment: Segment) -> None:
        self._invalidate()
        self._segments.append(segment)
        self._positions.add(segment.position)
        logger.debug(
            "Stored segment at position %d (%d bytes, %d pieces)",
            segment.position,
            segment.size,
            len(segment.pieces),
        )

    def _invalidate(self) -> None:
        self._blob = None
