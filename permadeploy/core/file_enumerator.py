"""Tracked file enumeration"""

import logging
from pathlib import Path
from typing import List, Union

from ..api.exceptions import ConfigurationError
from ..constants import BOOKKEEPING_FILES
from ..utils.file_utils import normalize_path
from ..utils.git_utils import is_git_repository, list_index_files

logger = logging.getLogger(__name__)


class TrackedFileEnumerator:
    """Lists the payload files of an application directory

    A file is payload when it exists on disk, is recorded in the git
    index (committed or staged) and is not one of the bookkeeping files
    kept at the application root.
    """

    def __init__(self, excluded_files=BOOKKEEPING_FILES):
        self.excluded_files = frozenset(excluded_files)

    def list_tracked_files(self, app_dir: Union[str, Path]) -> List[Path]:
        """
        List tracked files below app_dir

        Args:
            app_dir: Application directory

        Returns:
            Absolute file paths sorted by their forward-slash relative path

        Raises:
            ConfigurationError: If app_dir is not inside a git working tree
            VersionControlError: If git fails
        """
        app_dir = Path(app_dir).resolve()

        if not app_dir.is_dir():
            raise ConfigurationError(f"Application directory not found: {app_dir}")
        if not is_git_repository(app_dir):
            raise ConfigurationError(f"Not a git working tree: {app_dir}")

        tracked = set()
        for entry in list_index_files(app_dir):
            relative = normalize_path(entry)
            if relative in self.excluded_files:
                continue

            file_path = app_dir / relative
            # Tracked but removed from disk counts as deleted, not as payload
            if not file_path.is_file():
                logger.debug(f"Tracked file missing on disk: {relative}")
                continue
            tracked.add(relative)

        if logger.isEnabledFor(logging.DEBUG):
            self._log_untracked(app_dir, tracked)

        return [app_dir / relative for relative in sorted(tracked)]

    def _log_untracked(self, app_dir: Path, tracked: set) -> None:
        """Report files on disk that will not be published"""
        for file_path in sorted(app_dir.rglob('*')):
            if '.git' in file_path.relative_to(app_dir).parts:
                continue
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(app_dir).as_posix()
            if relative not in tracked and relative not in self.excluded_files:
                logger.debug(f"Ignoring untracked file: {relative}")
