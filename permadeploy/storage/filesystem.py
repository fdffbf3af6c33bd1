"""Filesystem content store implementation"""

import asyncio
import json
import logging
import secrets
from pathlib import Path
from typing import Dict, Any, Optional

import aiofiles

from .base import ContentStore
from ..api.exceptions import UploadError
from ..constants import DEFAULT_STORE_DIR
from ..utils.file_utils import atomic_write, dump_json
from ..utils.hash_utils import calculate_sha256

logger = logging.getLogger(__name__)


class FilesystemContentStore(ContentStore):
    """Local directory standing in for a permanent store

    Every upload gets a fresh random 43 character base64url address,
    the shape of a permanent-storage transaction id. Content lives in
    ``<base>/<address>`` next to a ``<address>.json`` metadata sidecar.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize filesystem store

        Args:
            config: Configuration including:
                - path: Store directory (default: .permadeploy-store)
        """
        super().__init__(config)
        self.base_path = Path(self.config.get('path') or DEFAULT_STORE_DIR)

    async def _do_initialize(self) -> None:
        """Ensure the store directory exists"""
        self.base_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _new_address() -> str:
        # 32 random bytes encode to exactly 43 base64url characters
        return secrets.token_urlsafe(32)

    async def upload(self,
                     data: bytes,
                     content_type: str,
                     tags: Optional[Dict[str, str]] = None) -> str:
        """
        Write content under a new address

        Args:
            data: Content bytes
            content_type: MIME type
            tags: Metadata tags

        Returns:
            New content address
        """
        await self.initialize()

        address = self._new_address()
        while (self.base_path / address).exists():
            address = self._new_address()

        metadata = {
            'id': address,
            'contentType': content_type,
            'size': len(data),
            'sha256': calculate_sha256(data),
            'tags': dict(tags or {}),
        }

        try:
            async with aiofiles.open(self.base_path / address, 'wb') as f:
                await f.write(data)
            await asyncio.get_running_loop().run_in_executor(
                None,
                atomic_write,
                self.base_path / f"{address}.json",
                dump_json(metadata),
            )
        except OSError as e:
            raise UploadError(f"Failed to store content in {self.base_path}: {e}") from e

        logger.debug(f"Stored {len(data)} bytes as {address}")
        return address

    async def get(self, address: str) -> Optional[bytes]:
        """
        Read content back

        Args:
            address: Content address

        Returns:
            Content bytes or None if not found
        """
        content_path = self.base_path / address
        if not content_path.is_file():
            return None

        async with aiofiles.open(content_path, 'rb') as f:
            return await f.read()

    async def get_metadata(self, address: str) -> Optional[Dict[str, Any]]:
        """
        Get content metadata

        Args:
            address: Content address

        Returns:
            Metadata dictionary or None if not found
        """
        metadata_path = self.base_path / f"{address}.json"
        if not metadata_path.is_file():
            return None

        async with aiofiles.open(metadata_path, 'r', encoding='utf-8') as f:
            return json.loads(await f.read())
