# permadeploy/registry/base.py
"""Name registry abstract base class"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


class RegistrationStatus(Enum):
    """Outcome of a registry write"""
    CREATED = "created"
    UPDATED = "updated"
    ALREADY_EXISTS = "already_exists"
    TIMEOUT = "timeout"
    FAILED = "failed"


@dataclass
class NameRecord:
    """A name pointing at a content address"""
    name: str
    address: str
    ttl: int
    record_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'transactionId': self.address,
            'ttlSeconds': self.ttl,
            'recordId': self.record_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NameRecord':
        """Create from dictionary"""
        return cls(
            name=data['name'],
            address=data['transactionId'],
            ttl=int(data.get('ttlSeconds', 0)),
            record_id=data.get('recordId'),
        )


@dataclass
class RegistrationResult:
    """Result of `create` or `update`"""
    status: RegistrationStatus
    name: str
    record_id: Optional[str] = None
    message: Optional[str] = None
    existing_address: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status in (RegistrationStatus.CREATED, RegistrationStatus.UPDATED)


class NameRegistry(ABC):
    """Abstract base class for mutable name to address registries"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize name registry

        Args:
            config: Registry-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize registry (e.g., open connections)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def lookup(self, name: str) -> Optional[NameRecord]:
        """
        Read a record

        Args:
            name: Record name

        Returns:
            NameRecord or None if the name is not registered

        Raises:
            NameRegistryError: If the registry could not be queried
        """
        pass

    @abstractmethod
    async def create(self, name: str, address: str, ttl: int) -> RegistrationResult:
        """
        Register a new name

        Expected outcomes are reported through the result status rather
        than raised: an existing name is ALREADY_EXISTS, an
        unacknowledged write is TIMEOUT.

        Args:
            name: Record name
            address: Content address the name resolves to
            ttl: Cache TTL in seconds

        Returns:
            RegistrationResult
        """
        pass

    @abstractmethod
    async def update(self, name: str, address: str, ttl: int) -> RegistrationResult:
        """
        Point an existing name at a new address

        Args:
            name: Record name
            address: Content address the name resolves to
            ttl: Cache TTL in seconds

        Returns:
            RegistrationResult
        """
        pass

    async def close(self) -> None:
        """Close registry connections"""
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
