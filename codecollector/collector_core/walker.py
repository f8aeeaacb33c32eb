"""
Sequential, pruning directory walk shared by the tree renderer and the
collection pipeline
"""

import os
import stat
from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union

from .errors import WalkError
from .ignore import IgnoreRuleSet
from ..utils import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class WalkEntry:
    """One non-ignored entry produced by the walk"""
    path: str
    rel_path: str  # '/'-separated, '.' for the root itself
    name: str
    is_dir: bool
    is_file: bool  # regular file; False for directories, pipes, sockets and devices

    @property
    def depth(self) -> int:
        """Number of separators in the relative path"""
        return self.rel_path.count('/')


def root_name(root_dir: str) -> str:
    name = os.path.basename(os.path.normpath(root_dir))
    if name in ('', '.', '..'):
        name = os.path.basename(os.path.abspath(root_dir)) or os.path.abspath(root_dir)
    return name


class DirectoryWalker:
    """
    Walks a tree in sorted-name order, skipping ignored entries.

    The root is yielded first. An ignored directory is never listed, so
    nothing beneath it is visited. Symbolic links are reported but never
    followed into.
    """

    def __init__(self, rule_set: IgnoreRuleSet):
        self.rule_set = rule_set

    def walk(self, root_dir: PathLike) -> Iterator[WalkEntry]:
        """
        Yield every non-ignored entry under ``root_dir``

        Raises:
            WalkError: When the root or any directory cannot be enumerated.
                Entries yielded before the failure stay valid.
        """
        root_dir = os.fspath(root_dir)
        try:
            root_stat = os.stat(root_dir)
        except OSError as e:
            raise WalkError(root_dir, e) from e
        root_is_dir = stat.S_ISDIR(root_stat.st_mode)
        root_is_file = stat.S_ISREG(root_stat.st_mode)

        if self.rule_set.is_ignored(root_dir, root_dir):
            logger.debug(f"Traversal root ignored: {root_dir}")
            return

        yield WalkEntry(path=root_dir, rel_path='.', name=root_name(root_dir),
                        is_dir=root_is_dir, is_file=root_is_file)
        if root_is_dir:
            yield from self._walk_directory(root_dir, '.', root_dir)

    def _walk_directory(self, directory: str, rel_dir: str, root_dir: str) -> Iterator[WalkEntry]:
        try:
            children = self.list_directory(directory)
        except OSError as e:
            logger.error(f"Error reading directory {directory}: {e}")
            raise WalkError(directory, e) from e

        for name, is_dir, is_file in children:
            path = os.path.join(directory, name)
            rel_path = name if rel_dir == '.' else f"{rel_dir}/{name}"
            if self.rule_set.is_ignored(path, root_dir):
                logger.debug(f"{'Directory' if is_dir else 'File'} ignored: {rel_path}")
                continue

            yield WalkEntry(path=path, rel_path=rel_path, name=name, is_dir=is_dir, is_file=is_file)
            if is_dir:
                yield from self._walk_directory(path, rel_path, root_dir)

    def list_directory(self, directory: str) -> List[Tuple[str, bool, bool]]:
        """
        List ``(name, is_dir, is_file)`` triples for a directory, sorted by name

        ``is_file`` follows symlinks, so a link to a regular file counts as
        one; ``is_dir`` does not, so linked directories are never entered.

        Raises:
            OSError: If the directory cannot be read
        """
        with os.scandir(directory) as it:
            entries = [(entry.name, self._is_dir(entry), self._is_file(entry)) for entry in it]
        entries.sort(key=lambda item: item[0])
        return entries

    @staticmethod
    def _is_dir(entry: os.DirEntry) -> bool:
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError:
            return False

    @staticmethod
    def _is_file(entry: os.DirEntry) -> bool:
        try:
            return entry.is_file()
        except OSError:
            return False
