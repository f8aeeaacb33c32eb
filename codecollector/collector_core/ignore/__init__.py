"""
Ignore rule processing for codecollector

This package provides the layered exclusion system used during a walk:
- Glob-like patterns compiled to anchored regular expressions
- Global rules from configuration plus built-in defaults
- Nested .gitignore files discovered on the way from a path to the root
- A per-run cache of parsed .gitignore files
"""

from .constants import IGNORE_FILENAME, DEFAULT_IGNORE_PATTERNS, USER_CONFIG_SOURCE, BUILTIN_SOURCE
from .types import IgnoreRule
from .pattern import PatternMatcher, matches, translate_pattern
from .file_loader import IgnoreFileLoader, IgnoreFileInfo, parse_ignore_lines
from .cache import IgnoreFileCache
from .rule_set import IgnoreRuleSet, candidate_paths, relative_path

__all__ = [
    'IGNORE_FILENAME',
    'DEFAULT_IGNORE_PATTERNS',
    'USER_CONFIG_SOURCE',
    'BUILTIN_SOURCE',
    'IgnoreRule',
    'PatternMatcher',
    'matches',
    'translate_pattern',
    'IgnoreFileLoader',
    'IgnoreFileInfo',
    'parse_ignore_lines',
    'IgnoreFileCache',
    'IgnoreRuleSet',
    'candidate_paths',
    'relative_path',
]
