# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial

"""Assemble ordered Base64 chunks into in-memory blobs."""

from .assembler import Blobbify, DuplicatePositionError, Segment
from .blob import NATIVE, TRANSPARENT, Blob, BlobReader
from .caps import Caps, caps_to_turtle, summarize_caps
from .codec import BlobbifyError, InvalidInputError, decode_base64
from .registry import (
    ObjectUrlRegistry,
    UnknownObjectUrlError,
    create_object_url,
    describe_object_url,
    resolve_object_url,
    revoke_object_url,
)

__all__ = [
    "Blob",
    "BlobReader",
    "Blobbify",
    "BlobbifyError",
    "Caps",
    "DuplicatePositionError",
    "InvalidInputError",
    "NATIVE",
    "ObjectUrlRegistry",
    "Segment",
    "TRANSPARENT",
    "UnknownObjectUrlError",
    "caps_to_turtle",
    "create_object_url",
    "decode_base64",
    "describe_object_url",
    "resolve_object_url",
    "revoke_object_url",
    "summarize_caps",
]
