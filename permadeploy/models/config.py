"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any

from ..constants import (
    StorageType,
    RegistryType,
    DEFAULT_APP_NAME,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_REGISTRY_TTL,
    DEFAULT_REGISTRY_TIMEOUT,
    DEFAULT_NAME_LENGTH,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_UPLOAD_CONCURRENCY,
    DEFAULT_UPLOAD_TAGS,
    DEFAULT_STORE_DIR,
    DEFAULT_REGISTRY_FILE,
)


@dataclass
class ContentStoreConfig:
    """Configuration for the content store"""

    type: str = StorageType.FILESYSTEM.value

    # Filesystem specific
    path: Optional[str] = None

    # Gateway specific
    url: Optional[str] = None
    token: Optional[str] = None
    timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self):
        """Validate store configuration"""
        storage_type = StorageType(self.type)

        if storage_type == StorageType.GATEWAY and not self.url:
            raise ValueError("Gateway content store requires 'url'")

    @property
    def storage_type(self) -> StorageType:
        """Get StorageType enum"""
        return StorageType(self.type)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"type": self.type, "timeout": self.timeout}
        if self.path:
            data["path"] = self.path
        if self.url:
            data["url"] = self.url
        if self.token:
            data["token"] = self.token
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentStoreConfig':
        """Create from dictionary"""
        return cls(
            type=data.get("type", StorageType.FILESYSTEM.value),
            path=data.get("path"),
            url=data.get("url"),
            token=data.get("token"),
            timeout=float(data.get("timeout", DEFAULT_HTTP_TIMEOUT)),
        )


@dataclass
class NameRegistryConfig:
    """Configuration for the name registry"""

    type: str = RegistryType.FILESYSTEM.value

    # Filesystem specific
    path: Optional[str] = None

    # HTTP specific
    url: Optional[str] = None
    token: Optional[str] = None
    timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self):
        """Validate registry configuration"""
        registry_type = RegistryType(self.type)

        if registry_type == RegistryType.HTTP and not self.url:
            raise ValueError("HTTP name registry requires 'url'")

    @property
    def registry_type(self) -> RegistryType:
        """Get RegistryType enum"""
        return RegistryType(self.type)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"type": self.type, "timeout": self.timeout}
        if self.path:
            data["path"] = self.path
        if self.url:
            data["url"] = self.url
        if self.token:
            data["token"] = self.token
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NameRegistryConfig':
        """Create from dictionary"""
        return cls(
            type=data.get("type", RegistryType.FILESYSTEM.value),
            path=data.get("path"),
            url=data.get("url"),
            token=data.get("token"),
            timeout=float(data.get("timeout", DEFAULT_HTTP_TIMEOUT)),
        )


@dataclass
class DeployConfig:
    """Deployment configuration"""

    app_name: str = DEFAULT_APP_NAME
    content_store: ContentStoreConfig = field(
        default_factory=lambda: ContentStoreConfig(path=DEFAULT_STORE_DIR)
    )
    name_registry: NameRegistryConfig = field(
        default_factory=lambda: NameRegistryConfig(path=DEFAULT_REGISTRY_FILE)
    )
    registry_ttl: int = DEFAULT_REGISTRY_TTL
    registry_timeout: float = DEFAULT_REGISTRY_TIMEOUT
    name_length: int = DEFAULT_NAME_LENGTH
    history_limit: int = DEFAULT_HISTORY_LIMIT
    upload_concurrency: int = DEFAULT_UPLOAD_CONCURRENCY
    strict_name_claims: bool = False
    tags: Dict[str, str] = field(default_factory=dict)

    def upload_tags(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Tags attached to every upload, later sources winning"""
        tags = dict(DEFAULT_UPLOAD_TAGS)
        tags["App-Name"] = self.app_name
        tags.update(self.tags)
        if extra:
            tags.update(extra)
        return tags

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "app_name": self.app_name,
            "content_store": self.content_store.to_dict(),
            "name_registry": self.name_registry.to_dict(),
            "registry_ttl": self.registry_ttl,
            "registry_timeout": self.registry_timeout,
            "name_length": self.name_length,
            "history_limit": self.history_limit,
            "upload_concurrency": self.upload_concurrency,
            "strict_name_claims": self.strict_name_claims,
            "tags": dict(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        """Create from dictionary"""
        config = cls()

        config.app_name = data.get("app_name", DEFAULT_APP_NAME)
        if "content_store" in data:
            store = dict(data["content_store"])
            store.setdefault("path", DEFAULT_STORE_DIR)
            config.content_store = ContentStoreConfig.from_dict(store)
        if "name_registry" in data:
            registry = dict(data["name_registry"])
            registry.setdefault("path", DEFAULT_REGISTRY_FILE)
            config.name_registry = NameRegistryConfig.from_dict(registry)

        config.registry_ttl = int(data.get("registry_ttl", DEFAULT_REGISTRY_TTL))
        config.registry_timeout = float(data.get("registry_timeout", DEFAULT_REGISTRY_TIMEOUT))
        config.name_length = int(data.get("name_length", DEFAULT_NAME_LENGTH))
        config.history_limit = int(data.get("history_limit", DEFAULT_HISTORY_LIMIT))
        config.upload_concurrency = int(data.get("upload_concurrency", DEFAULT_UPLOAD_CONCURRENCY))
        config.strict_name_claims = bool(data.get("strict_name_claims", False))
        config.tags = {str(k): str(v) for k, v in (data.get("tags") or {}).items()}

        return config
