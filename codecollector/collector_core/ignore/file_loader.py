"""
File loader for parsing and validating .gitignore files
"""

from pathlib import Path
from typing import List, Dict, Optional, Union
from dataclasses import dataclass, field

import pathspec

from .constants import IGNORE_FILENAME, MAX_IGNORE_FILE_SIZE, MAX_PATTERNS_PER_FILE
from .types import IgnoreRule
from ...utils import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationError:
    """Represents an error that prevented (part of) an ignore file from loading"""
    line: int
    pattern: str
    message: str


@dataclass
class ValidationWarning:
    """Represents a pattern that loads but probably does not do what was meant"""
    line: int
    pattern: str
    message: str


@dataclass
class IgnoreFileInfo:
    """Information about a loaded ignore file"""
    path: Path
    rules: List[IgnoreRule] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def patterns(self) -> List[str]:
        return [rule.pattern for rule in self.rules]

    @property
    def is_valid(self) -> bool:
        """Check if file has no errors"""
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        """Check if file has warnings"""
        return len(self.warnings) > 0

    def fail(self, message: str) -> 'IgnoreFileInfo':
        """Record a file-level error (line 0) and return self"""
        self.errors.append(ValidationError(line=0, pattern="", message=message))
        return self


def parse_ignore_lines(text: str, source: str) -> List[IgnoreRule]:
    """
    Turn ignore file text into rules, keeping declaration order

    Blank lines and lines starting with ``#`` (after stripping) are skipped.
    """
    rules = []
    for line in text.split('\n'):
        stripped = line.strip()
        if stripped and not stripped.startswith('#'):
            rules.append(IgnoreRule(pattern=stripped, source=source))
    return rules


class IgnoreFileLoader:
    """
    Handles loading, parsing, and validating ignore files
    """

    def __init__(self, ignore_filename: str = IGNORE_FILENAME, validate: bool = True):
        """
        Initialize loader

        Args:
            ignore_filename: Name of ignore files to look for
            validate: Collect pattern warnings while loading
        """
        self.ignore_filename = ignore_filename
        self.validate = validate

    def ignore_file_for(self, directory: Union[str, Path]) -> Path:
        """Path of the ignore file that would govern ``directory``"""
        return Path(directory) / self.ignore_filename

    def load_file(self, file_path: Union[str, Path]) -> IgnoreFileInfo:
        """
        Load and validate an ignore file

        Args:
            file_path: Path to the ignore file

        Returns:
            IgnoreFileInfo with rules and validation results. Unreadable
            files produce an info with errors and no rules.
        """
        file_path = Path(file_path)
        info = IgnoreFileInfo(
            path=file_path,
            stats={
                'total_lines': 0,
                'empty_lines': 0,
                'comment_lines': 0,
                'pattern_lines': 0,
            }
        )

        try:
            file_size = file_path.stat().st_size
            if file_size > MAX_IGNORE_FILE_SIZE:
                return info.fail(f"File too large: {file_size} bytes (max: {MAX_IGNORE_FILE_SIZE})")
            text = file_path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            return info.fail(f"Cannot read file: {e}")

        lines = text.split('\n')
        info.stats['total_lines'] = len(lines)
        for line in lines:
            stripped = line.strip()
            if not stripped:
                info.stats['empty_lines'] += 1
            elif stripped.startswith('#'):
                info.stats['comment_lines'] += 1
            else:
                info.stats['pattern_lines'] += 1

        info.rules = parse_ignore_lines(text, str(file_path))

        if self.validate:
            self._collect_warnings(info, lines)

        if len(info.rules) > MAX_PATTERNS_PER_FILE:
            info.fail(f"Too many patterns: {len(info.rules)} (max: {MAX_PATTERNS_PER_FILE}); keeping the first {MAX_PATTERNS_PER_FILE}")
            info.rules = info.rules[:MAX_PATTERNS_PER_FILE]

        return info

    def _collect_warnings(self, info: IgnoreFileInfo, lines: List[str]):
        for line_num, line in enumerate(lines, 1):
            stripped = line.strip()
            if not stripped or stripped.startswith('#'):
                continue

            gitignore_error = self._check_gitignore_syntax(stripped)
            if gitignore_error:
                info.warnings.append(ValidationWarning(
                    line=line_num,
                    pattern=stripped,
                    message=f"Not valid gitignore syntax ({gitignore_error}); matched as a plain glob"
                ))

            for warning_msg in self._check_pattern_warnings(stripped):
                info.warnings.append(ValidationWarning(
                    line=line_num,
                    pattern=stripped,
                    message=warning_msg
                ))

    def _check_gitignore_syntax(self, pattern: str) -> Optional[str]:
        """
        Check a pattern against git's own syntax rules

        Returns:
            Error message, or None when git would accept the pattern
        """
        try:
            pathspec.GitIgnoreSpec.from_lines([pattern])
        except Exception as e:
            return str(e)
        return None

    def _check_pattern_warnings(self, pattern: str) -> List[str]:
        """
        Check pattern for constructs whose meaning differs from git's

        Args:
            pattern: Pattern to check

        Returns:
            List of warning messages
        """
        warnings = []

        if pattern.startswith('!'):
            warnings.append(
                "Negation is not supported; the '!' is matched literally"
            )

        if pattern.startswith('/') and len(pattern) > 1:
            warnings.append(
                f"Leading '/' is matched literally and will never match. "
                f"Did you mean '{pattern[1:]}'?"
            )

        if '\\' in pattern:
            warnings.append(
                "Pattern contains backslash. Use forward slashes for paths."
            )

        if pattern in ['*', '**', '**/*']:
            warnings.append(
                "Very broad pattern - will exclude every file"
            )

        return warnings
