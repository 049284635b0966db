"""Content-hash cache — bounded, insertion-ordered result memo per scanner."""

from __future__ import annotations

import logging
import zlib
from collections import OrderedDict
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 100

V = TypeVar("V")


def content_hash(text: str, context: str | None = None) -> str:
    """Fast non-cryptographic digest of *text*, optionally discriminated by *context*.

    Identical inputs always produce identical keys. CRC-32 and Adler-32 are
    combined with the byte length so a collision needs all three to agree.
    """
    data = text.encode("utf-8", errors="surrogatepass")
    if context:
        data += b"\x00" + context.encode("utf-8", errors="surrogatepass")
    return f"{zlib.crc32(data):08x}{zlib.adler32(data):08x}{len(data):x}"


class ContentCache(Generic[V]):
    """Maps content hashes to previously computed results.

    Eviction is FIFO by insertion: reads never refresh an entry, and when the
    cache is full the oldest-inserted key is dropped before a new one is added.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"Cache size must be at least 1, got {max_size}")
        self._max_size = max_size
        self._entries: OrderedDict[str, V] = OrderedDict()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: str) -> V | None:
        return self._entries.get(key)

    def put(self, key: str, value: V) -> None:
        if key in self._entries:
            # Replacing keeps the existing insertion slot
            self._entries[key] = value
            return
        if len(self._entries) >= self._max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full (%d), evicted %s", self._max_size, evicted)
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        """Keys in insertion order, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
