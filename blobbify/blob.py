# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Immutable binary objects and sequential readers over them."""

from __future__ import annotations

import base64
import hashlib
import os
import re
from collections.abc import Iterable
from typing import Union

from .caps import Caps

TRANSPARENT = "transparent"
NATIVE = "native"
LINE_ENDING_MODES = (TRANSPARENT, NATIVE)

_LINE_BREAK = re.compile(rb"\r\n|\r|\n")

BlobPart = Union[bytes, bytearray, memoryview, "Blob"]


def check_endings(endings: str) -> str:
    """Validate a line-ending mode and return it."""
    if endings not in LINE_ENDING_MODES:
        raise ValueError(f"endings must be one of {LINE_ENDING_MODES}, got {endings!r}")
    return endings


def normalize_line_endings(data: bytes, linesep: str | None = None) -> bytes:
    """Rewrite every CRLF, CR and LF in `data` to the host line separator."""
    sep = (linesep if linesep is not None else os.linesep).encode("ascii")
    return _LINE_BREAK.sub(sep, data)


class Blob:
    """Immutable byte sequence tagged with a MIME type and line-ending mode.

    A Blob is built from an ordered sequence of parts. With `endings="native"`
    the line breaks of every part are converted to the host convention when
    the Blob is created; `"transparent"` keeps the bytes untouched.
    """

    __slots__ = ("_data", "_type", "_endings")

    def __init__(
        self,
        parts: Iterable[BlobPart] = (),
        type: str = "",
        endings: str = TRANSPARENT,
    ):
        check_endings(endings)
        chunks = []
        for part in parts:
            if isinstance(part, Blob):
                chunks.append(part._data)
            elif isinstance(part, (bytes, bytearray, memoryview)):
                chunks.append(bytes(part))
            else:
                raise TypeError(f"unsupported blob part: {part.__class__.__name__}")
        data = b"".join(chunks)
        if endings == NATIVE:
            data = normalize_line_endings(data)
        self._data = data
        # MIME types are ASCII and case-insensitive; anything else is dropped.
        self._type = type.lower() if type.isascii() else ""
        self._endings = endings

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def type(self) -> str:
        return self._type

    @property
    def endings(self) -> str:
        return self._endings

    def bytes(self) -> bytes:
        return self._data

    def to_base64(self) -> str:
        return base64.b64encode(self._data).decode("ascii")

    def slice(self, start: int = 0, end: int | None = None, content_type: str = "") -> Blob:
        """Return a new Blob with the bytes in [start, end).

        Negative offsets count from the end, as with Python slicing.
        """
        return Blob([self._data[start:end]], type=content_type)

    def open(self) -> BlobReader:
        """Return a fresh reader positioned at the first byte."""
        return BlobReader(self)

    @property
    def caps(self) -> Caps:
        return self.describe()

    def describe(self, uri: str | None = None) -> Caps:
        """Describe this blob as Caps (media type, size, endings, digest).

        `uri` names the object URL the blob is registered under, if any.
        """
        return Caps(
            media_type=self._type or None,
            params={
                "uri": uri,
                "size": self.size,
                "endings": self._endings,
                "sha256": hashlib.sha256(self._data).hexdigest(),
            },
        )

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return (self._data, self._type, self._endings) == (other._data, other._type, other._endings)

    def __hash__(self) -> int:
        return hash((self._data, self._type, self._endings))

    def __repr__(self) -> str:
        return f"Blob(size={self.size}, type={self._type!r}, endings={self._endings!r})"


class BlobReader:
    """Sequential reader over the bytes of a Blob.

    Reads return copies of at most the requested size; the Blob itself is
    never copied as a whole.
    """

    def __init__(self, blob: Blob):
        self._view = memoryview(blob.bytes())
        self._offset = 0

    def read(self, size: int | None = -1) -> bytes:
        """Return the next `size` bytes, or everything left when `size` is negative or None."""
        stop = len(self._view)
        if size is not None and size >= 0:
            stop = min(self._offset + size, stop)
        data = self._view[self._offset : stop].tobytes()
        self._offset = stop
        return data

    def iter_chunks(self, size: int):
        """Yield the unread bytes in pieces of at most `size`."""
        if size < 1:
            raise ValueError("size must be a positive integer")
        while self._offset < len(self._view):
            yield self.read(size)

    def tell(self) -> int:
        return self._offset

    def seek(self, offset: int) -> int:
        """Move to `offset`, clamped to the blob's bounds, and return it."""
        self._offset = max(0, min(offset, len(self._view)))
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._view) - self._offset
