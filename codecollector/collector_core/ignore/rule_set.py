"""
Layered ignore rules: global rules plus nested .gitignore files
"""

import os
import threading
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from .cache import IgnoreFileCache, DEFAULT_CACHE_SIZE
from .constants import BUILTIN_SOURCE, DEFAULT_IGNORE_PATTERNS, USER_CONFIG_SOURCE
from .file_loader import IgnoreFileLoader
from .pattern import PatternMatcher
from .types import IgnoreRule
from ..errors import PathResolutionError, PatternError
from ...utils import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


def relative_path(full_path: PathLike, root_dir: PathLike) -> str:
    """
    Express ``full_path`` relative to ``root_dir`` with ``/`` separators

    Raises:
        PathResolutionError: If no relative form exists
    """
    try:
        rel = os.path.relpath(os.path.abspath(full_path), os.path.abspath(root_dir))
    except ValueError as e:
        raise PathResolutionError(os.fspath(full_path), os.fspath(root_dir), e) from e
    return rel.replace(os.sep, '/')


def candidate_paths(rel_path: str) -> Tuple[str, ...]:
    """
    Every form of ``rel_path`` a pattern is tested against

    For each leading prefix of the path this yields the joined prefix and
    its last segment on its own. Prefixes that are ancestors of the path
    are also yielded with a trailing ``/`` so directory-only patterns
    (``vendor/``) cover everything below that directory.
    """
    segments = rel_path.split('/')
    last = len(segments)
    candidates = []
    for i in range(1, last + 1):
        prefix = '/'.join(segments[:i])
        forms = [prefix]
        if i > 1:
            forms.append(segments[i - 1])
        if i < last:
            forms.extend([form + '/' for form in forms])
        candidates.extend(forms)
    return tuple(dict.fromkeys(candidates))


class IgnoreRuleSet:
    """
    Answers "is this path ignored?" for one traversal root.

    Global rules are checked first, in order; then the .gitignore files of
    every directory from the path's parent up to the root. All matching is
    relative to the traversal root, whichever file a rule came from. The
    first rule that matches any candidate form of the path wins.
    """

    def __init__(self,
                 global_rules: Optional[Iterable[IgnoreRule]] = None,
                 use_cache: bool = True,
                 cache_size: int = DEFAULT_CACHE_SIZE,
                 matcher: Optional[PatternMatcher] = None,
                 loader: Optional[IgnoreFileLoader] = None):
        """
        Args:
            global_rules: Rules applying everywhere under the root
            use_cache: Cache parsed .gitignore files per directory for a run
            cache_size: Maximum number of cached directories
            matcher: Pattern matcher to use (a private one by default)
            loader: Ignore file loader to use
        """
        self._global_rules: List[IgnoreRule] = list(global_rules or [])
        self._matcher = matcher or PatternMatcher()
        self._loader = loader or IgnoreFileLoader()
        self._cache = IgnoreFileCache(cache_size) if use_cache else None
        self._frozen = False

        self.pattern_errors: Dict[str, PatternError] = {}
        self._reported_files: Set[str] = set()
        self._lock = threading.Lock()

    @classmethod
    def from_patterns(cls, patterns: Iterable[str], use_defaults: bool = True,
                      **kwargs) -> 'IgnoreRuleSet':
        """
        Build a rule set from configured ignore patterns

        Args:
            patterns: User patterns, in order; empty strings are skipped
            use_defaults: Start with the built-in default rules
        """
        rules = []
        if use_defaults:
            rules.extend(IgnoreRule(p, BUILTIN_SOURCE) for p in DEFAULT_IGNORE_PATTERNS)
        rules.extend(IgnoreRule(p, USER_CONFIG_SOURCE) for p in patterns if p)
        return cls(rules, **kwargs)

    @property
    def global_rules(self) -> Tuple[IgnoreRule, ...]:
        return tuple(self._global_rules)

    @property
    def ignore_filename(self) -> str:
        return self._loader.ignore_filename

    def add_rule(self, pattern: str, source: str = USER_CONFIG_SOURCE):
        """
        Append a global rule. Only allowed before traversal starts.

        Raises:
            RuntimeError: If a run has already begun
        """
        if self._frozen:
            raise RuntimeError("Global ignore rules are read-only once traversal has started")
        if pattern:
            self._global_rules.append(IgnoreRule(pattern, source))

    def begin_run(self):
        """Freeze the global rules and drop anything cached by an earlier run"""
        with self._lock:
            self._frozen = True
            self._reported_files.clear()
        if self._cache is not None:
            self._cache.clear()

    def is_ignored(self, full_path: PathLike, root_dir: PathLike) -> bool:
        """
        Check whether a path is excluded from the traversal

        Args:
            full_path: Path to check, as found during the walk
            root_dir: Traversal root the path belongs to

        Returns:
            True if any global or .gitignore rule matches
        """
        logger.trace(f"Checking if ignored: {full_path}")
        try:
            rel_path = relative_path(full_path, root_dir)
        except PathResolutionError as e:
            logger.warning(f"{e}; treating as not ignored")
            return False

        candidates = candidate_paths(rel_path)

        for rule in self._global_rules:
            if self._rule_matches(rule, candidates):
                logger.trace(f"Path {rel_path} matched global ignore rule {rule.pattern}")
                return True

        # The root itself and paths outside it only answer to global rules
        if rel_path == '.' or rel_path == '..' or rel_path.startswith('../'):
            return False

        root_abs = os.path.abspath(root_dir)
        directory = os.path.dirname(os.path.abspath(full_path))
        while True:
            for rule in self._rules_for_directory(directory):
                if self._rule_matches(rule, candidates):
                    logger.trace(
                        f"Path {rel_path} matched {self.ignore_filename} rule "
                        f"{rule.pattern} from {rule.source}"
                    )
                    return True
            if directory == root_abs:
                break
            parent = os.path.dirname(directory)
            if parent == directory:
                break
            directory = parent

        logger.trace(f"Path not ignored: {rel_path}")
        return False

    def matches_any_part(self, pattern: str, rel_path: str) -> bool:
        """Test one pattern against every candidate form of a relative path"""
        return self._rule_matches(IgnoreRule(pattern, USER_CONFIG_SOURCE),
                                  candidate_paths(rel_path))

    def _rule_matches(self, rule: IgnoreRule, candidates: Tuple[str, ...]) -> bool:
        try:
            return any(self._matcher.matches(rule.pattern, c) for c in candidates)
        except PatternError as e:
            self._record_pattern_error(rule, e)
            return False

    def _record_pattern_error(self, rule: IgnoreRule, error: PatternError):
        with self._lock:
            first_time = rule.pattern not in self.pattern_errors
            self.pattern_errors[rule.pattern] = error
        if first_time:
            logger.warning(f"Error matching pattern {rule.pattern} from {rule.source}: {error.reason}")

    def _rules_for_directory(self, directory: str) -> List[IgnoreRule]:
        """Rules declared by ``directory``'s ignore file (empty if it has none)"""
        if self._cache is not None:
            cached = self._cache.get_rules(directory)
            if cached is not None:
                return cached

        rules: List[IgnoreRule] = []
        ignore_file = self._loader.ignore_file_for(directory)
        logger.trace(f"Checking for {self.ignore_filename} in: {directory}")
        try:
            has_ignore_file = ignore_file.is_file()
        except OSError as e:
            # Directory listed but not searchable
            logger.warning(f"Cannot check {ignore_file}: {e}; no rules loaded from it")
            has_ignore_file = False
        if has_ignore_file:
            info = self._loader.load_file(ignore_file)
            self._report_file(info)
            rules = info.rules

        if self._cache is not None:
            self._cache.cache_rules(directory, rules)
        return rules

    def _report_file(self, info):
        key = str(info.path)
        with self._lock:
            if key in self._reported_files:
                return
            self._reported_files.add(key)

        logger.debug(f"Found {self.ignore_filename} at: {info.path} ({len(info.rules)} rules)")
        for error in info.errors:
            logger.error(f"{info.path}:{error.line}: {error.message}")
        for warning in info.warnings:
            logger.warning(f"{info.path}:{warning.line}: {warning.pattern}: {warning.message}")

    def get_stats(self) -> Dict[str, object]:
        """
        Get rule statistics

        Returns:
            Dictionary with rule counts, pattern errors and cache stats
        """
        return {
            'global_rules': len(self._global_rules),
            'pattern_errors': len(self.pattern_errors),
            'cache': self._cache.get_stats() if self._cache is not None else None,
        }
