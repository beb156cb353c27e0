"""In-process TTL + LRU cache and its key builders."""

from .keys import package_info_key, package_readme_key, recipe_details_key, search_key
from .memory_cache import CacheEntry, MemoryCache, estimate_entry_size

__all__ = [
    "MemoryCache",
    "CacheEntry",
    "estimate_entry_size",
    "package_info_key",
    "package_readme_key",
    "recipe_details_key",
    "search_key",
]
