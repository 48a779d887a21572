"""
Search Cache port interface.

Caches the raw (unfiltered, unsorted, unpaginated) result of a search
by trip signature, so re-filtering, re-sorting and paging never hit the
providers again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flight_results.schemas.search import RawSearchResult


@runtime_checkable
class SearchCache(Protocol):
    """
    Protocol for search-scope caches.

    Implementations must be safe for concurrent access within a process.
    A get-miss followed by set from two concurrent requests is allowed to
    race: the worst outcome is a duplicate upstream fetch, since every
    set fully replaces the previous value.
    """

    def get(self, signature: str) -> Optional[RawSearchResult]:
        """
        Get a live entry or None.

        Expired entries are removed on read and reported as a miss.
        """
        ...

    def set(self, signature: str, entry: RawSearchResult) -> None:
        """Store an entry, replacing any previous value."""
        ...

    def clear(self) -> None:
        """Drop all entries."""
        ...

    def __len__(self) -> int:
        ...
