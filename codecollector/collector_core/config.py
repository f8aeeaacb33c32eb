"""
Collector configuration and YAML loading
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Union

import yaml

from .errors import ConfigError
from ..utils import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = "config.yaml"

CONFIG_KEYS = ('include_extensions', 'ignore_patterns')


@dataclass
class CollectorConfig:
    """
    Resolved configuration for a run

    An empty ``include_extensions`` means every non-ignored file is
    collected.
    """
    include_extensions: List[str] = field(default_factory=list)
    ignore_patterns: List[str] = field(default_factory=list)


def _string_list(value, key: str, path: Path) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{path}: '{key}' must be a list, got {type(value).__name__}")
    return ['' if item is None else str(item) for item in value]


def load_config(path: Union[str, Path], base: Optional[CollectorConfig] = None) -> CollectorConfig:
    """
    Load a YAML configuration file

    Keys present in the file replace the corresponding values of ``base``;
    keys absent from it keep them.

    Args:
        path: YAML file with ``include_extensions`` and/or ``ignore_patterns``
        base: Configuration to overlay (empty by default)

    Raises:
        ConfigError: If the file cannot be read or has the wrong shape
    """
    path = Path(path)
    config = replace(base) if base is not None else CollectorConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    for key in data:
        if key not in CONFIG_KEYS:
            logger.warning(f"{path}: unknown configuration key '{key}'")

    if 'include_extensions' in data:
        config.include_extensions = _string_list(data['include_extensions'], 'include_extensions', path)
    if 'ignore_patterns' in data:
        config.ignore_patterns = _string_list(data['ignore_patterns'], 'ignore_patterns', path)

    logger.debug(f"Loaded configuration from {path}: {config}")
    return config


def resolve_config(config_path: Optional[Union[str, Path]] = None,
                   search_dir: Optional[Union[str, Path]] = None) -> CollectorConfig:
    """
    Build the configuration for a run

    ``config.yaml`` in ``search_dir`` (the working directory by default) is
    loaded first when it exists; ``config_path`` is then laid over it.
    """
    config = CollectorConfig()
    default_path = Path(search_dir or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    if default_path.is_file():
        config = load_config(default_path, config)
    if config_path:
        config = load_config(config_path, config)
    return config
