# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Process-local object URL registry.

Maps short-lived `blob:<origin>/<uuid>` strings to Blobs, the way a browser's
`URL.createObjectURL` does. A registered Blob stays alive until its URL is
revoked; callers own that lifetime.
"""

from __future__ import annotations

import logging
import threading
import uuid

from .blob import Blob
from .caps import Caps
from .codec import BlobbifyError

logger = logging.getLogger(__name__)

SCHEME = "blob:"
DEFAULT_ORIGIN = "null"


class UnknownObjectUrlError(BlobbifyError, LookupError):
    """Raised when resolving a URL that was never registered or was revoked."""


class ObjectUrlRegistry:
    """Thread-safe mapping of object URLs to Blobs."""

    def __init__(self, origin: str = DEFAULT_ORIGIN):
        self.origin = origin
        self._entries: dict[str, Blob] = {}
        self._lock = threading.Lock()

    def create(self, blob: Blob) -> str:
        """Register `blob` and return a new URL for it."""
        if not isinstance(blob, Blob):
            raise TypeError("create requires a Blob")
        url = f"{SCHEME}{self.origin}/{uuid.uuid4()}"
        with self._lock:
            self._entries[url] = blob
        logger.debug("Registered %s (%d bytes)", url, blob.size)
        return url

    def resolve(self, url: str) -> Blob:
        with self._lock:
            blob = self._entries.get(url)
        if blob is None:
            raise UnknownObjectUrlError(f"no blob registered for {url}")
        return blob

    def describe(self, url: str) -> Caps:
        """Describe the Blob registered under `url`, with `url` as the subject."""
        return self.resolve(url).describe(uri=url)

    def revoke(self, url: str) -> None:
        """Release `url`. Unknown URLs are ignored."""
        with self._lock:
            blob = self._entries.pop(url, None)
        if blob is None:
            logger.warning("Revoke of unknown object URL %s", url)
            return
        logger.debug("Revoked %s", url)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


default_registry = ObjectUrlRegistry()


def create_object_url(blob: Blob) -> str:
    return default_registry.create(blob)


def resolve_object_url(url: str) -> Blob:
    return default_registry.resolve(url)


def describe_object_url(url: str) -> Caps:
    return default_registry.describe(url)


def revoke_object_url(url: str) -> None:
    default_registry.revoke(url)
