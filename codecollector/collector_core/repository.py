"""
Fetching remote repositories into a local directory
"""

import shutil
import subprocess
import tempfile
from pathlib import Path

from .errors import RepositoryError
from ..utils import get_logger

logger = get_logger(__name__)

DEFAULT_BRANCH = "main"


def clone_repository(url: str, branch: str = DEFAULT_BRANCH) -> Path:
    """
    Shallow-clone a single branch into a fresh temporary directory

    The caller owns the returned directory and must remove it.

    Raises:
        RepositoryError: If git is missing or the clone fails
    """
    temp_dir = Path(tempfile.mkdtemp(prefix="repo-"))
    cmd = [
        'git', 'clone',
        '--depth', '1',
        '--single-branch',
        '--branch', branch,
        url, str(temp_dir),
    ]
    logger.info(f"Cloning {url} (branch {branch}) into {temp_dir}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise RepositoryError(f"Cannot run git: {e}") from e

    if result.returncode != 0:
        shutil.rmtree(temp_dir, ignore_errors=True)
        message = result.stderr.strip() or f"git exited with status {result.returncode}"
        raise RepositoryError(f"Failed to clone {url}: {message}")

    return temp_dir


def remove_clone(path: Path):
    """Delete a directory created by clone_repository"""
    logger.debug(f"Removing cloned repository {path}")
    shutil.rmtree(path, ignore_errors=True)
