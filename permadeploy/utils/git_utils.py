"""Git operation utilities"""

import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from ..api.exceptions import VersionControlError

logger = logging.getLogger(__name__)


def _run_git(path: Path, *args: str) -> subprocess.CompletedProcess:
    """Run a git command in the given directory"""
    return subprocess.run(
        ['git', *args],
        cwd=path,
        capture_output=True,
        text=True,
    )


def is_git_repository(path: Path) -> bool:
    """
    Check if directory is inside a Git working tree

    Args:
        path: Directory path

    Returns:
        True if it's inside a Git working tree
    """
    try:
        result = _run_git(path, 'rev-parse', '--is-inside-work-tree')
        return result.returncode == 0 and result.stdout.strip() == 'true'
    except (FileNotFoundError, NotADirectoryError):
        return False


def get_repository_root(path: Path) -> Optional[Path]:
    """
    Get the top-level directory of the working tree

    Args:
        path: Any directory inside the working tree

    Returns:
        Working tree root or None
    """
    try:
        result = _run_git(path, 'rev-parse', '--show-toplevel')
    except (FileNotFoundError, NotADirectoryError):
        return None
    if result.returncode != 0:
        return None
    return Path(result.stdout.strip()).resolve()


def list_index_files(path: Path) -> List[str]:
    """
    List files recorded in the Git index below a directory

    Staged files are included; untracked and ignored files are not.

    Args:
        path: Directory inside the working tree

    Returns:
        Paths relative to `path`, in git's sort order

    Raises:
        VersionControlError: If git fails
    """
    try:
        result = subprocess.run(
            ['git', 'ls-files', '-z', '--cached'],
            cwd=path,
            capture_output=True,
            check=True
        )
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode('utf-8', errors='replace').strip()
        raise VersionControlError(f"git ls-files failed in {path}: {stderr}") from e
    except FileNotFoundError as e:
        raise VersionControlError(f"git executable not available: {e}") from e

    output = result.stdout.decode('utf-8', errors='surrogateescape')
    return [entry for entry in output.split('\0') if entry]


def get_commit_id(path: Path) -> str:
    """
    Get the full id of the HEAD commit

    Args:
        path: Repository path

    Returns:
        40 character commit id

    Raises:
        VersionControlError: If HEAD cannot be resolved (e.g. no commits yet)
    """
    try:
        result = _run_git(path, 'rev-parse', 'HEAD')
    except FileNotFoundError as e:
        raise VersionControlError(f"git executable not available: {e}") from e

    if result.returncode != 0:
        raise VersionControlError(
            f"Failed to resolve HEAD commit in {path}: {result.stderr.strip()}"
        )
    return result.stdout.strip()


def get_commit_info(path: Path, short_length: int = 16) -> Dict[str, str]:
    """
    Get information about the HEAD commit

    Args:
        path: Repository path
        short_length: Length of the short commit id

    Returns:
        Dictionary with full_hash, short_hash, message, author and date
    """
    full_hash = get_commit_id(path)
    info = {
        'full_hash': full_hash,
        'short_hash': full_hash[:short_length],
        'message': 'Unknown commit',
        'author': 'Unknown',
        'date': '',
    }

    result = _run_git(path, 'log', '-1', '--format=%s%x00%an%x00%aI', full_hash)
    if result.returncode == 0:
        parts = result.stdout.rstrip('\n').split('\0')
        if len(parts) == 3:
            info['message'], info['author'], info['date'] = parts
    else:
        logger.debug("git log failed for %s: %s", full_hash, result.stderr.strip())

    return info
