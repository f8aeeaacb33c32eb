"""
Exception types raised by the collector core
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .result import TraversalResult


class CollectorError(Exception):
    """Base class for every codecollector error."""
    pass


class PatternError(CollectorError):
    """Raised when an ignore pattern cannot be translated into a matcher."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid pattern {pattern}: {reason}")
        self.pattern = pattern
        self.reason = reason


class FileReadError(CollectorError):
    """Raised when a single included file cannot be read."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"error reading {path}: {cause}")
        self.path = path
        self.cause = cause


class PathResolutionError(CollectorError):
    """Raised when a path cannot be expressed relative to the traversal root."""

    def __init__(self, path: str, root_dir: str, cause: Exception):
        super().__init__(f"cannot resolve {path} relative to {root_dir}: {cause}")
        self.path = path
        self.root_dir = root_dir
        self.cause = cause


class WalkError(CollectorError):
    """
    Raised when a directory cannot be enumerated during traversal.

    The walk stops, but file reads that were already dispatched still
    finish; whatever they produced is attached as ``partial_result``.
    """

    def __init__(self, path: str, cause: Exception,
                 partial_result: Optional['TraversalResult'] = None):
        super().__init__(f"error walking {path}: {cause}")
        self.path = path
        self.cause = cause
        self.partial_result = partial_result


class ConfigError(CollectorError):
    """Raised when a configuration file cannot be loaded."""
    pass


class RepositoryError(CollectorError):
    """Raised when a remote repository cannot be fetched."""
    pass


class UnsupportedFormatError(CollectorError):
    """Raised for an unknown export format."""
    pass
