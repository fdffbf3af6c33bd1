"""Change detection against the last deployment"""

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from ..models.change_set import ChangeSet
from ..utils.file_utils import normalize_path, relative_key
from .hasher import ContentHasher

logger = logging.getLogger(__name__)


class ChangeSetResolver:
    """Compares current content hashes with the stored ones

    Detection is keyed on path and content only. A moved file shows up
    as one deleted path plus one new path.
    """

    def __init__(self, hasher: Optional[ContentHasher] = None):
        self.hasher = hasher or ContentHasher()

    def resolve(self,
                tracked_files: Iterable[Path],
                stored_hashes: Mapping[str, str],
                app_dir: Union[str, Path]) -> ChangeSet:
        """
        Classify tracked files as new, modified or unchanged

        Args:
            tracked_files: Absolute paths from TrackedFileEnumerator
            stored_hashes: Path to hash mapping from the tracker
            app_dir: Directory the relative paths are computed against

        Returns:
            ChangeSet for this cycle

        Raises:
            ContentHashError: If a tracked file cannot be read
        """
        app_dir = Path(app_dir).resolve()
        stored = {normalize_path(path): value for path, value in stored_hashes.items()}

        change_set = ChangeSet()

        for file_path in tracked_files:
            relative = relative_key(Path(file_path), app_dir)
            current_hash = self.hasher.hash(Path(file_path))

            change_set.current_tracked_paths.append(relative)
            change_set.current_hashes[relative] = current_hash
            change_set.files[relative] = Path(file_path)

            previous_hash = stored.get(relative)
            if previous_hash is None:
                change_set.changed_paths.add(relative)
                change_set.new_paths.add(relative)
            elif previous_hash != current_hash:
                change_set.changed_paths.add(relative)

        change_set.deleted_paths = set(stored) - set(change_set.current_hashes)

        self._log_change_set(change_set)
        return change_set

    @staticmethod
    def _log_change_set(change_set: ChangeSet) -> None:
        for path in sorted(change_set.new_paths):
            logger.info(f"New: {path}")
        for path in sorted(change_set.modified_paths):
            logger.info(f"Modified: {path}")
        for path in sorted(change_set.deleted_paths):
            logger.info(f"Deleted: {path}")

        logger.debug(
            f"{len(change_set.current_tracked_paths)} tracked, "
            f"{len(change_set.changed_paths)} changed, "
            f"{len(change_set.deleted_paths)} deleted"
        )

