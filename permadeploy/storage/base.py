# permadeploy/storage/base.py
"""Content store abstract base class"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class ContentStore(ABC):
    """Abstract base class for permanent content-addressed stores

    Uploading the same bytes twice may return two different addresses;
    callers never rely on deduplication by the store.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize content store

        Args:
            config: Store-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    @property
    def is_dry_run(self) -> bool:
        """Whether addresses returned by this store are placeholders"""
        return False

    async def initialize(self) -> None:
        """Initialize content store (e.g., open connections)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def upload(self,
                     data: bytes,
                     content_type: str,
                     tags: Optional[Dict[str, str]] = None) -> str:
        """
        Store content permanently

        Args:
            data: Content bytes
            content_type: MIME type served for the content
            tags: Metadata tags attached to the upload

        Returns:
            Content address assigned by the store

        Raises:
            UploadError: If the content could not be stored
        """
        pass

    async def close(self) -> None:
        """Close store connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
