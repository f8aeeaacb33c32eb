"""
Inclusion policy: extension allow-list combined with ignore rules
"""

import os
from typing import Iterable, Optional, Tuple, Union

from .ignore import IgnoreRuleSet

PathLike = Union[str, os.PathLike]


def file_extension(path: PathLike) -> str:
    """
    Extension of a path's final element, dot included

    Everything from the last ``.`` of the name counts, so ``.gitignore``
    has the extension ``.gitignore`` and ``a.tar.gz`` has ``.gz``.
    """
    name = os.path.basename(os.fspath(path))
    dot = name.rfind('.')
    return name[dot:] if dot >= 0 else ''


class InclusionPolicy:
    """Decides whether a regular file's content is collected"""

    def __init__(self, rule_set: IgnoreRuleSet,
                 include_extensions: Optional[Iterable[str]] = None):
        """
        Args:
            rule_set: Ignore rules for the run
            include_extensions: Allowed extensions (e.g. ``.go``); empty or
                None disables the extension filter
        """
        self.rule_set = rule_set
        self.include_extensions: Tuple[str, ...] = tuple(include_extensions or ())

    def matches_extension(self, path: PathLike) -> bool:
        """True when there is no allow-list or the extension is on it"""
        if not self.include_extensions:
            return True
        return file_extension(path) in self.include_extensions

    def is_included(self, path: PathLike, root_dir: PathLike) -> bool:
        if not self.matches_extension(path):
            return False
        return not self.rule_set.is_ignored(path, root_dir)
