"""Content hashing for change detection"""

import logging
from pathlib import Path

from ..api.exceptions import ContentHashError
from ..constants import DEFAULT_CHUNK_SIZE
from ..utils.hash_utils import (
    calculate_git_blob_hash,
    calculate_git_blob_hash_async,
)

logger = logging.getLogger(__name__)


class ContentHasher:
    """Deterministic per-file content hash

    Uses git's blob object id, so a stored hash can be compared with
    `git hash-object` output from any machine.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def hash(self, file_path: Path) -> str:
        """
        Hash a file's bytes

        Args:
            file_path: File to hash

        Returns:
            40 character hex digest

        Raises:
            ContentHashError: If the file cannot be read
        """
        try:
            return calculate_git_blob_hash(file_path, self.chunk_size)
        except OSError as e:
            raise ContentHashError(str(file_path), e.strerror or str(e)) from e

    async def hash_async(self, file_path: Path) -> str:
        """Asynchronous variant of `hash`"""
        try:
            return await calculate_git_blob_hash_async(file_path, self.chunk_size)
        except OSError as e:
            raise ContentHashError(str(file_path), e.strerror or str(e)) from e
