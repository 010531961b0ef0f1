# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Base64 decoding helpers for chunk assembly.

Decoding follows the forgiving rules browsers apply in `atob`:
  - ASCII whitespace anywhere in the input is ignored.
  - Missing `=` padding is restored before decoding; partial padding is rejected.
  - Anything else outside the Base64 alphabet is rejected.

The decoded bytes are split into sub-segments of a fixed width so a caller
never holds more than one width-sized copy per iteration.
"""

from __future__ import annotations

import base64
import binascii
import re

DEFAULT_DECODE_CHUNK_WIDTH = 512

_WHITESPACE = re.compile(r"[\t\n\f\r ]+")


class BlobbifyError(Exception):
    """Base exception for chunk assembly failures."""


class InvalidInputError(BlobbifyError, ValueError):
    """Raised when a decode target is absent, not text, or not valid Base64."""


def decode_base64(text: object) -> bytes:
    """Decode a Base64 string into raw bytes.

    Raises:
        InvalidInputError: If `text` is None, not a str, or not Base64.
    """
    if not isinstance(text, str):
        raise InvalidInputError("text must be a Base64 encoded string that is not None")

    compact = _WHITESPACE.sub("", text)
    remainder = len(compact) % 4
    if remainder == 1:
        raise InvalidInputError("Base64 text has an impossible length")
    if remainder:
        if "=" in compact:
            raise InvalidInputError("Base64 padding is only allowed on a full quantum")
        compact += "=" * (4 - remainder)

    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as error:
        raise InvalidInputError(f"text is not valid Base64: {error}") from error


def split_width(data: bytes, width: int = DEFAULT_DECODE_CHUNK_WIDTH) -> list[bytes]:
    """Split `data` into consecutive pieces of at most `width` bytes.

    Empty input yields no pieces.
    """
    if width < 1:
        raise ValueError("width must be a positive integer")
    view = memoryview(data)
    return [bytes(view[offset : offset + width]) for offset in range(0, len(data), width)]


def decode_segments(text: object, width: int = DEFAULT_DECODE_CHUNK_WIDTH) -> tuple[bytes, ...]:
    """Decode `text` and return its width-bounded sub-segments in order."""
    return tuple(split_width(decode_base64(text), width))
