#!/usr/bin/env python3
"""
Tests for glob-to-regex translation and pattern matching
"""

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from codecollector.collector_core.errors import PatternError
from codecollector.collector_core.ignore import (
    IgnoreRule, IgnoreRuleSet, PatternMatcher, matches, translate_pattern
)


def test_translate_star_patterns():
    """Single stars stay within one path segment"""
    assert translate_pattern("*.go") == r"[^/]*\.go$"
    assert translate_pattern("foo*") == r"^foo[^/]*"
    assert translate_pattern("a?c") == r"^a[^/]c$"


def test_translate_double_star_consumes_separator():
    assert translate_pattern("a/**/b") == r"^a/(?:.*/)?b$"
    assert translate_pattern("**/test") == r"(?:.*/)?test$"


def test_translate_escapes_regex_metacharacters():
    assert translate_pattern("a+b(c).txt") == r"^a\+b\(c\)\.txt$"
    assert translate_pattern("x[1]") == r"^x\[1\]$"
    assert translate_pattern("a\\b") == "^a\\\\b$"


def test_match_everything():
    assert matches("**", "")
    assert matches("**", "a/b/c.go")
    assert matches("**", "anything at all")


def test_double_star_directory_levels():
    """`**` spans zero or more whole directories"""
    assert matches("a/**/b", "a/b")
    assert matches("a/**/b", "a/x/b")
    assert matches("a/**/b", "a/x/y/b")
    assert not matches("a/**/b", "a/xb")
    assert not matches("a/**/b", "c/a/b")


def test_anchoring_is_independent_per_end():
    # No leading '*': anchored at the start
    assert matches("foo*", "foobar")
    assert not matches("foo*", "xfoo")
    # No trailing '*': anchored at the end
    assert matches("*.go", "main.go")
    assert not matches("*.go", "main.go.bak")
    # Neither end: exact match only
    assert matches("build", "build")
    assert not matches("build", "build2")
    assert not matches("build", "mybuild")


def test_single_star_does_not_cross_separators():
    assert matches("src/*.py", "src/app.py")
    assert not matches("src/*.py", "src/pkg/app.py")


def test_question_mark():
    assert matches("file?.txt", "file1.txt")
    assert not matches("file?.txt", "file12.txt")
    assert not matches("a?b", "a/b")


def test_metacharacters_match_literally():
    assert matches("file.txt", "file.txt")
    assert not matches("file.txt", "fileXtxt")
    assert matches("a+b", "a+b")
    assert not matches("a+b", "aab")
    assert matches("notes(1).md", "notes(1).md")


def test_compiled_patterns_are_memoised():
    matcher = PatternMatcher()
    first = matcher.compile("*.log")
    assert matcher.compile("*.log") is first

    matcher.clear_cache()
    assert matcher.compile("*.log") is not first


class FailingMatcher(PatternMatcher):
    """Matcher that refuses to compile one specific pattern"""

    def __init__(self, bad_pattern):
        super().__init__()
        self.bad_pattern = bad_pattern
        self.attempts = 0

    def compile(self, pattern):
        if pattern == self.bad_pattern:
            self.attempts += 1
            raise PatternError(pattern, "unterminated character set")
        return super().compile(pattern)


def test_pattern_error_is_recorded_and_treated_as_non_matching(tmp_path):
    """A broken rule never aborts matching; later rules still apply"""
    matcher = FailingMatcher("broken")
    rule_set = IgnoreRuleSet(
        [IgnoreRule("broken", "user-config"), IgnoreRule("*.log", "user-config")],
        matcher=matcher,
    )

    assert not rule_set.is_ignored(tmp_path / "main.go", tmp_path)
    assert rule_set.is_ignored(tmp_path / "debug.log", tmp_path)

    assert "broken" in rule_set.pattern_errors
    assert isinstance(rule_set.pattern_errors["broken"], PatternError)
    assert rule_set.get_stats()['pattern_errors'] == 1


def test_pattern_error_carries_pattern_and_reason():
    error = PatternError("x[", "unterminated character set")
    assert error.pattern == "x["
    assert error.reason == "unterminated character set"
    assert "x[" in str(error)


@pytest.mark.parametrize("pattern,candidate,expected", [
    ("*.min.js", "app.min.js", True),
    ("*.min.js", "app.js", False),
    ("node_modules", "node_modules", True),
    ("docs/*", "docs/readme.md", True),
    ("docs/*", "docs", False),
    ("vendor/", "vendor/", True),
    ("vendor/", "vendor", False),
])
def test_assorted_patterns(pattern, candidate, expected):
    assert matches(pattern, candidate) is expected
