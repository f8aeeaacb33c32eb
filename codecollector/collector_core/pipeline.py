"""
Concurrent collection of file contents during a single pruning walk
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from tqdm import tqdm

from .errors import FileReadError, WalkError
from .ignore import IgnoreRuleSet
from .inclusion import InclusionPolicy
from .parallel_config import ParallelConfig, get_optimal_config
from .result import FileRecord, TraversalResult, assemble_result
from .tree_renderer import TreeRenderer
from .walker import DirectoryWalker
from ..utils import get_logger, log_with_context

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


class PipelineState(Enum):
    IDLE = "idle"
    WALKING = "walking"
    DRAINING = "draining"
    DONE = "done"


@dataclass
class CollectionStats:
    """Counters for one collection run"""
    included: int = 0
    collected: int = 0
    failed: int = 0
    failures: List[FileReadError] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Every included file was either collected or reported as failed"""
        return self.collected + self.failed == self.included


def read_file_record(path: str, relative_path: str) -> FileRecord:
    """
    Read one file in full

    Raises:
        FileReadError: If the file cannot be read
    """
    try:
        with open(path, 'rb') as f:
            content = f.read()
    except OSError as e:
        raise FileReadError(relative_path, e) from e
    return FileRecord(relative_path=relative_path, content=content)


class CollectionPipeline:
    """
    Walks a tree once and reads every included file on a bounded thread pool.

    The walk itself is sequential and never waits on reads; once it ends,
    the pipeline drains every submitted read before returning. Records come
    back in completion order.
    """

    def __init__(self,
                 rule_set: IgnoreRuleSet,
                 inclusion_policy: Optional[InclusionPolicy] = None,
                 config: Optional[ParallelConfig] = None,
                 tree_renderer: Optional[TreeRenderer] = None,
                 walker: Optional[DirectoryWalker] = None):
        """
        Args:
            rule_set: Ignore rules for the run
            inclusion_policy: Decides which files are read (no extension
                filter by default)
            config: Worker pool configuration (auto-detected by default)
            tree_renderer: Renderer for the tree half of the result
            walker: Walker to drive (one over ``rule_set`` by default)
        """
        self.rule_set = rule_set
        self.inclusion_policy = inclusion_policy or InclusionPolicy(rule_set)
        self.config = config or get_optimal_config()
        self.walker = walker or DirectoryWalker(rule_set)
        self.tree_renderer = tree_renderer or TreeRenderer(rule_set, walker=self.walker)

        self.state = PipelineState.IDLE
        self.stats = CollectionStats()

    def collect(self, root_dir: PathLike) -> TraversalResult:
        """
        Render the tree and collect every included file under ``root_dir``

        Raises:
            WalkError: If a directory cannot be enumerated. Its
                ``partial_result`` holds the tree and every record read
                before the walk stopped.
        """
        logger.info(f"Collecting code from {root_dir}")
        tree = self.tree_renderer.render_tree(root_dir)
        records, walk_error = self.collect_files(root_dir)
        result = assemble_result(tree, records)

        if walk_error is not None:
            walk_error.partial_result = result
            raise walk_error
        return result

    def collect_files(self, root_dir: PathLike) -> Tuple[List[FileRecord], Optional[WalkError]]:
        """
        Collect included files without rendering a tree

        Returns:
            Tuple of (records, walk error or None). Records gathered before a
            walk error are still returned.
        """
        self.stats = CollectionStats()
        records: List[FileRecord] = []
        walk_error: Optional[WalkError] = None

        with ThreadPoolExecutor(max_workers=self.config.max_workers,
                                thread_name_prefix="codecollector-read") as executor:
            self.state = PipelineState.WALKING
            futures: Dict[Future, str] = {}
            try:
                for entry in self.walker.walk(root_dir):
                    if entry.is_dir:
                        continue
                    if not entry.is_file:
                        logger.debug(f"Skipping special file: {entry.rel_path}")
                        continue
                    if not self.inclusion_policy.matches_extension(entry.path):
                        logger.trace(f"File not included: {entry.rel_path}")
                        continue

                    relative = entry.name if entry.rel_path == '.' else entry.rel_path
                    logger.trace(f"Processing file: {relative}")
                    self.stats.included += 1
                    futures[executor.submit(read_file_record, entry.path, relative)] = relative
            except WalkError as e:
                logger.error(f"Walk aborted: {e}")
                walk_error = e
            logger.debug(f"Walk completed, {len(futures)} files dispatched")

            self.state = PipelineState.DRAINING
            with tqdm(total=len(futures), desc="Reading files", unit="file",
                      disable=not self.config.show_progress) as pbar:
                for future in as_completed(futures):
                    try:
                        record = future.result()
                    except FileReadError as e:
                        logger.warning(f"Error processing file {e.path}: {e.cause}")
                        self.stats.failed += 1
                        self.stats.failures.append(e)
                    else:
                        records.append(record)
                        self.stats.collected += 1
                    pbar.update(1)

        self.state = PipelineState.DONE
        log_with_context(
            logger, logging.INFO,
            f"Collected {self.stats.collected} files "
            f"({self.stats.failed} failed, {self.stats.included} included)",
            included=self.stats.included,
            collected=self.stats.collected,
            failed=self.stats.failed,
        )
        return records, walk_error
