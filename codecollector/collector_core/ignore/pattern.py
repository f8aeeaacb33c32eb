"""
Glob-to-regex translation for ignore patterns

Patterns are a restricted glob over ``/``-separated paths:

    **      alone: matches everything
    **      elsewhere: zero or more whole directory levels
    *       any run of characters except ``/``
    ?       exactly one character except ``/``

Everything else matches literally. The two ends are anchored independently:
a pattern that does not start with ``*`` must match at the start of the
candidate, and one that does not end with ``*`` must match at its end.
"""

import re
import threading
from typing import Dict, Union

from ..errors import PatternError

# Characters that carry meaning in a regex and must match literally
REGEX_META = set('.+()|[]{}^$')

MATCH_EVERYTHING = "**"


def translate_pattern(pattern: str) -> str:
    """
    Translate an ignore pattern into regular expression source

    Args:
        pattern: Glob-like pattern

    Returns:
        Regex source using search semantics (anchors added explicitly)
    """
    parts = []
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == '*':
            if i + 1 < length and pattern[i + 1] == '*':
                # Zero or more directories; a following separator belongs to the wildcard
                parts.append('(?:.*/)?')
                i += 2
                if i < length and pattern[i] == '/':
                    i += 1
                continue
            parts.append('[^/]*')
        elif char == '?':
            parts.append('[^/]')
        elif char in REGEX_META:
            parts.append('\\' + char)
        elif char == '\\':
            parts.append('\\\\')
        else:
            parts.append(char)
        i += 1

    regex = ''.join(parts)
    if not pattern.startswith('*'):
        regex = '^' + regex
    if not pattern.endswith('*'):
        regex += '$'
    return regex


class PatternMatcher:
    """
    Matches ignore patterns against candidate paths, memoising compiled
    expressions. Safe to share between threads.
    """

    def __init__(self):
        self._compiled_cache: Dict[str, Union[re.Pattern, PatternError]] = {}
        self._lock = threading.Lock()

    def compile(self, pattern: str) -> re.Pattern:
        """
        Compile a pattern, reusing an earlier compilation when possible

        Raises:
            PatternError: If the translated expression does not compile
        """
        with self._lock:
            cached = self._compiled_cache.get(pattern)
        if cached is None:
            try:
                cached = re.compile(translate_pattern(pattern))
            except re.error as e:
                cached = PatternError(pattern, str(e))
            with self._lock:
                self._compiled_cache[pattern] = cached

        if isinstance(cached, PatternError):
            raise cached
        return cached

    def matches(self, pattern: str, candidate: str) -> bool:
        """
        Test one pattern against one ``/``-separated candidate path

        Raises:
            PatternError: If the pattern cannot be compiled
        """
        if pattern == MATCH_EVERYTHING:
            return True
        return self.compile(pattern).search(candidate) is not None

    def clear_cache(self):
        """Drop all compiled expressions"""
        with self._lock:
            self._compiled_cache.clear()


_default_matcher = PatternMatcher()


def matches(pattern: str, candidate: str) -> bool:
    """Module-level convenience wrapper around a shared PatternMatcher"""
    return _default_matcher.matches(pattern, candidate)
