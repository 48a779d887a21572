"""Search cache adapters."""

from flight_results.adapters.cache.in_memory_search_cache import InMemorySearchCache

__all__ = ["InMemorySearchCache"]
