"""
Read-through memoization cache for layout results.

Keys are ``LayoutRequest.cache_key`` tuples. Results are immutable values, so
a hit returns the stored object as is. The cache is only ever invalidated as a
whole.
"""

import logging
from collections import OrderedDict
from typing import Any, Hashable, Optional

from models import LayoutOutcome

logger = logging.getLogger(__name__)


class LayoutCache:
    """Bounded insertion-ordered cache with hit/miss accounting"""

    def __init__(self, max_entries: int = 128):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, LayoutOutcome]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get(self, key: Hashable) -> Optional[LayoutOutcome]:
        outcome = self._entries.get(key)
        if outcome is None:
            self._misses += 1
            return None
        self._hits += 1
        return outcome

    def put(self, key: Hashable, outcome: LayoutOutcome) -> None:
        self._entries[key] = outcome
        while len(self._entries) > self.max_entries:
            evicted_key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted layout cache entry {evicted_key}")

    def clear(self) -> None:
        """Drop every entry; statistics are kept"""
        if self._entries:
            logger.debug(f"Clearing {len(self._entries)} layout cache entries")
        self._entries.clear()

    def reset_stats(self) -> None:
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def stats(self) -> dict[str, Any]:
        lookups = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": self._hits / lookups if lookups else 0.0,
        }
