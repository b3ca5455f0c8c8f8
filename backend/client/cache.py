"""
Read cache for the client.

Entries are keyed by (path, sorted query params). Any mutation or provider
change drops every entry; the next read re-fetches.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

CacheKey = tuple


def make_key(path: str, params: Optional[dict] = None) -> CacheKey:
    items = tuple(sorted((k, v) for k, v in (params or {}).items() if v is not None))
    return (path, items)


class QueryCache:
    def __init__(self):
        self._entries: dict[CacheKey, Any] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._entries:
            return self._entries[key]
        value = await fetch()
        self._entries[key] = value
        return value

    def invalidate(self, path_prefix: str) -> None:
        """Drop entries whose path starts with path_prefix."""
        self._entries = {k: v for k, v in self._entries.items() if not k[0].startswith(path_prefix)}

    def invalidate_all(self) -> None:
        if self._entries:
            logger.debug(f"Invalidating {len(self._entries)} cached reads")
        self._entries.clear()
