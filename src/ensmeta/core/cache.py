"""Lazily populated metadata cache.

The cache moves through EMPTY -> POPULATING -> POPULATED. A failed load moves
it to FAILED, which is treated like EMPTY on the next call so the load can be
retried from scratch. The transition out of EMPTY/FAILED is serialized by a
per-instance lock; once POPULATED, reads do not take the lock.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable

from ensmeta.core.index import MetadataIndex


class CacheState(str, Enum):
    """Lifecycle states of a MetadataCache."""

    EMPTY = "EMPTY"
    POPULATING = "POPULATING"
    POPULATED = "POPULATED"
    FAILED = "FAILED"


class MetadataCache:
    """Holds one MetadataIndex, loaded at most once per instance."""

    def __init__(self, loader: Callable[[], MetadataIndex]):
        """
        Create an empty cache.

        Args:
            loader: Zero-argument callable building the index.
        """
        self._loader = loader
        self._lock = threading.Lock()
        self._state = CacheState.EMPTY
        self._index: MetadataIndex | None = None

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def is_populated(self) -> bool:
        return self._state is CacheState.POPULATED

    def ensure_populated(self) -> MetadataIndex:
        """Return the index, running the loader if this is the first read."""
        index = self._index
        if index is not None:
            return index

        with self._lock:
            if self._index is not None:
                return self._index
            self._state = CacheState.POPULATING
            try:
                index = self._loader()
            except BaseException:
                self._state = CacheState.FAILED
                raise
            self._index = index
            self._state = CacheState.POPULATED
            return index

    def get(self) -> MetadataIndex:
        """Return the index; only valid after population."""
        if self._index is None:
            raise RuntimeError(
                f"Metadata cache is not populated (state: {self._state.value})."
            )
        return self._index
