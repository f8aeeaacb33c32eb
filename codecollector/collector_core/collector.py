"""
Per-run orchestration: build the rule set, render, collect, assemble
"""

import os
from typing import Optional, Union

from .config import CollectorConfig
from .ignore import IgnoreRuleSet
from .inclusion import InclusionPolicy
from .parallel_config import ParallelConfig
from .pipeline import CollectionPipeline
from .result import TraversalResult
from .tree_renderer import TreeRenderer
from ..utils import get_logger

logger = get_logger(__name__)


class CodeCollector:
    """
    Wires one configuration into the components of a collection run.

    Every component shares a single IgnoreRuleSet, so the tree listing and
    the collected files always agree on what is ignored.
    """

    def __init__(self,
                 config: Optional[CollectorConfig] = None,
                 parallel_config: Optional[ParallelConfig] = None,
                 use_defaults: bool = True,
                 use_cache: bool = True,
                 tree_included_only: bool = False):
        """
        Args:
            config: Extensions and ignore patterns for the run
            parallel_config: Worker pool settings (auto-detected by default)
            use_defaults: Seed the rules with the built-in defaults
            use_cache: Cache parsed .gitignore files during a run
            tree_included_only: Leave files that fail the extension filter
                out of the tree listing
        """
        self.config = config or CollectorConfig()
        self.rule_set = IgnoreRuleSet.from_patterns(
            self.config.ignore_patterns,
            use_defaults=use_defaults,
            use_cache=use_cache,
        )
        self.inclusion_policy = InclusionPolicy(self.rule_set, self.config.include_extensions)
        self.tree_renderer = TreeRenderer(
            self.rule_set,
            inclusion_policy=self.inclusion_policy if tree_included_only else None,
        )
        self.pipeline = CollectionPipeline(
            self.rule_set,
            inclusion_policy=self.inclusion_policy,
            config=parallel_config,
            tree_renderer=self.tree_renderer,
        )

    @property
    def stats(self):
        return self.pipeline.stats

    def collect(self, root_dir: Union[str, os.PathLike]) -> TraversalResult:
        """
        Run a full collection over ``root_dir``

        Raises:
            WalkError: With the partial result attached, if the walk fails
        """
        self.rule_set.begin_run()

        logger.info("Global ignore rules:")
        for rule in self.rule_set.global_rules:
            logger.info(f"- Pattern: {rule.pattern}, Source: {rule.source}")

        return self.pipeline.collect(root_dir)
