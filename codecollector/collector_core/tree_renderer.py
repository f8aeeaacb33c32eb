"""
Plain indented rendering of a directory structure
"""

import os
from typing import List, Optional, Union

from .errors import CollectorError
from .ignore import IgnoreRuleSet
from .inclusion import InclusionPolicy
from .walker import DirectoryWalker
from ..utils import get_logger

logger = get_logger(__name__)

INDENT = "  "


class TreeRenderer:
    """
    Renders the non-ignored part of a tree, one entry per line.

    Entries are indented two spaces per separator in their root-relative
    path, so the root and its direct children share the first column.
    Directories carry a trailing ``/``.
    """

    def __init__(self, rule_set: IgnoreRuleSet,
                 inclusion_policy: Optional[InclusionPolicy] = None,
                 walker: Optional[DirectoryWalker] = None):
        """
        Args:
            rule_set: Ignore rules for the run
            inclusion_policy: When given, files it rejects are left out of
                the listing too; otherwise only ignored entries are
            walker: Walker to use (one over ``rule_set`` by default)
        """
        self.rule_set = rule_set
        self.inclusion_policy = inclusion_policy
        self.walker = walker or DirectoryWalker(rule_set)

    def render_tree(self, root_dir: Union[str, os.PathLike]) -> str:
        """
        Render the tree under ``root_dir``

        Never raises for filesystem problems: a failed walk is reported as
        the whole text, ``"Error generating tree: <message>"``.
        """
        logger.debug(f"Generating tree for {root_dir}")
        lines: List[str] = []
        try:
            for entry in self.walker.walk(root_dir):
                indent = INDENT * entry.depth
                if entry.is_dir:
                    lines.append(f"{indent}{entry.name}/\n")
                elif self.inclusion_policy is None or self.inclusion_policy.matches_extension(entry.path):
                    lines.append(f"{indent}{entry.name}\n")
                else:
                    logger.trace(f"Not included in tree: {entry.rel_path}")
        except CollectorError as e:
            logger.error(f"Error generating tree: {e}")
            return f"Error generating tree: {e}"

        logger.debug(f"Tree generation complete ({len(lines)} entries)")
        return ''.join(lines)
