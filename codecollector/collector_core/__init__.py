"""
Core traversal engine for codecollector
"""

from .errors import (
    CollectorError,
    ConfigError,
    FileReadError,
    PathResolutionError,
    PatternError,
    RepositoryError,
    UnsupportedFormatError,
    WalkError,
)
from .ignore import IgnoreRule, IgnoreRuleSet, PatternMatcher, matches
from .inclusion import InclusionPolicy, file_extension
from .walker import DirectoryWalker, WalkEntry
from .tree_renderer import TreeRenderer
from .result import FileRecord, TraversalResult, assemble_result
from .parallel_config import ParallelConfig, get_optimal_config
from .pipeline import CollectionPipeline, CollectionStats, PipelineState
from .config import CollectorConfig, load_config, resolve_config
from .collector import CodeCollector
from .exporters import export_output, get_exporter

__all__ = [
    'CollectorError',
    'ConfigError',
    'FileReadError',
    'PathResolutionError',
    'PatternError',
    'RepositoryError',
    'UnsupportedFormatError',
    'WalkError',
    'IgnoreRule',
    'IgnoreRuleSet',
    'PatternMatcher',
    'matches',
    'InclusionPolicy',
    'file_extension',
    'DirectoryWalker',
    'WalkEntry',
    'TreeRenderer',
    'FileRecord',
    'TraversalResult',
    'assemble_result',
    'ParallelConfig',
    'get_optimal_config',
    'CollectionPipeline',
    'CollectionStats',
    'PipelineState',
    'CollectorConfig',
    'load_config',
    'resolve_config',
    'CodeCollector',
    'export_output',
    'get_exporter',
]
