"""
Per-run cache of parsed .gitignore rules, keyed by directory
"""

from collections import OrderedDict
from typing import Dict, List, Optional, Tuple
import threading

from .types import IgnoreRule
from ...utils import get_logger

logger = get_logger(__name__)

DEFAULT_CACHE_SIZE = 10000


class LRUCache:
    """Thread-safe LRU cache implementation"""

    def __init__(self, max_size: int):
        self.max_size = max_size
        self._cache: OrderedDict = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def lookup(self, key: str) -> Tuple[bool, Optional[object]]:
        """Return ``(found, value)``; ``value`` may legitimately be None"""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self._hits += 1
                return True, self._cache[key]
            self._misses += 1
            return False, None

    def put(self, key: str, value: object):
        """Put value in cache"""
        with self._lock:
            self._cache[key] = value
            self._cache.move_to_end(key)
            if len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def clear(self):
        """Clear entire cache"""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict[str, float]:
        """Get cache statistics"""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0
            return {
                'size': len(self._cache),
                'max_size': self.max_size,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': hit_rate
            }


class IgnoreFileCache:
    """
    Read-through cache of the rules declared in each directory's ignore file.

    A directory without an ignore file is cached as an empty rule list, so
    repeated lookups skip the existence check too. The cache assumes a
    static filesystem and must be cleared between runs.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        self._rules = LRUCache(max_size)

    def get_rules(self, directory: str) -> Optional[List[IgnoreRule]]:
        """Cached rules for ``directory``, or None when not cached yet"""
        found, rules = self._rules.lookup(directory)
        return rules if found else None

    def cache_rules(self, directory: str, rules: List[IgnoreRule]):
        self._rules.put(directory, list(rules))

    def clear(self):
        logger.debug("Clearing ignore file cache")
        self._rules.clear()

    def get_stats(self) -> Dict[str, float]:
        return self._rules.get_stats()
