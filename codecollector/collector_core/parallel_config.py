"""
Configuration for the concurrent file-read pool
Provides auto-detection of a sensible worker count
"""

import os
from dataclasses import dataclass
from typing import Optional

import psutil

from ..utils import get_logger

logger = get_logger(__name__)

MIN_WORKERS = 1
MAX_WORKERS = 32


@dataclass
class ParallelConfig:
    """Configuration for concurrent file reads"""
    max_workers: int
    show_progress: bool = False

    def __post_init__(self):
        """Validate configuration values"""
        self.max_workers = max(MIN_WORKERS, min(self.max_workers, MAX_WORKERS))


class ParallelConfigManager:
    """Works out how many reader threads a run should use"""

    def __init__(self):
        self._cached_config = None
        self._system_info = self._detect_system_capabilities()

    def _detect_system_capabilities(self) -> dict:
        """Detect system capabilities for optimal configuration"""
        try:
            cpu_count = psutil.cpu_count(logical=True) or os.cpu_count() or 1
            memory = psutil.virtual_memory()
            system_info = {
                'cpu_count': cpu_count,
                'available_memory_mb': memory.available // (1024 * 1024),
                'is_containerized': self._detect_containerization(),
            }
            logger.debug(f"System capabilities: {system_info}")
            return system_info

        except Exception as e:
            logger.warning(f"Failed to detect system capabilities: {e}")
            return {
                'cpu_count': os.cpu_count() or 1,
                'available_memory_mb': 1024,  # Conservative default
                'is_containerized': False,
            }

    def _detect_containerization(self) -> bool:
        """Detect if running in a container environment"""
        container_indicators = [
            os.path.exists('/.dockerenv'),
            os.path.exists('/run/.containerenv'),
            'container' in os.environ.get('container', ''),
            os.environ.get('DOCKER_CONTAINER') == 'true',
        ]
        return any(container_indicators)

    def _calculate_optimal_workers(self, info: dict, file_count: Optional[int] = None) -> int:
        """Calculate the number of reader threads"""
        # Reads are I/O bound, so run a few more threads than cores
        workers = min(MAX_WORKERS, info['cpu_count'] + 4)

        if info['is_containerized']:
            workers = min(workers, 8)

        if info['available_memory_mb'] < 512:
            workers = min(workers, 4)

        if file_count:
            workers = min(workers, file_count)

        return max(MIN_WORKERS, workers)

    def get_optimal_config(self, file_count: Optional[int] = None) -> ParallelConfig:
        """
        Generate a configuration from system capabilities

        Args:
            file_count: Estimated number of files to read
        """
        if self._cached_config and not file_count:
            return self._cached_config

        config = ParallelConfig(max_workers=self._calculate_optimal_workers(self._system_info, file_count))
        if not file_count:
            self._cached_config = config

        logger.debug(f"Optimal config: {config.max_workers} reader threads")
        return config

    def get_config_from_env(self) -> Optional[ParallelConfig]:
        """Load configuration from environment variables"""
        raw = os.environ.get('CODECOLLECTOR_MAX_WORKERS')
        if not raw:
            return None
        try:
            max_workers = int(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid CODECOLLECTOR_MAX_WORKERS value: {raw!r}")
            return None
        if max_workers <= 0:
            return None

        logger.debug("Loaded parallel configuration from environment variables")
        return ParallelConfig(max_workers=max_workers)

    def get_config(self, file_count: Optional[int] = None) -> ParallelConfig:
        """
        Get the best available configuration

        Priority: environment variables > optimal detection
        """
        env_config = self.get_config_from_env()
        if env_config:
            return env_config
        return self.get_optimal_config(file_count)


_config_manager = None


def get_config_manager() -> ParallelConfigManager:
    """Get the shared configuration manager"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ParallelConfigManager()
    return _config_manager


def get_optimal_config(file_count: Optional[int] = None) -> ParallelConfig:
    """Get configuration for concurrent reads"""
    return get_config_manager().get_config(file_count)
