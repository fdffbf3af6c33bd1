"""Content store factory"""

from typing import Dict, List, Type

from .base import ContentStore
from .filesystem import FilesystemContentStore
from .gateway import GatewayContentStore
from ..constants import StorageType
from ..models.config import ContentStoreConfig


class StorageFactory:
    """Factory for creating content store instances"""

    # Registry of content stores
    _stores: Dict[StorageType, Type[ContentStore]] = {
        StorageType.FILESYSTEM: FilesystemContentStore,
        StorageType.GATEWAY: GatewayContentStore,
    }

    @classmethod
    def create(cls, config: ContentStoreConfig) -> ContentStore:
        """Create content store from configuration

        Args:
            config: Content store configuration

        Returns:
            Content store instance

        Raises:
            ValueError: If the store type is not supported
        """
        storage_type = config.storage_type

        if storage_type not in cls._stores:
            raise ValueError(f"Unsupported content store type: {storage_type.value}")

        store_class = cls._stores[storage_type]
        return store_class(config.to_dict())

    @classmethod
    def register_store(cls, storage_type: StorageType, store_class: Type[ContentStore]):
        """Register a new content store type

        Args:
            storage_type: Storage type enum
            store_class: Store class
        """
        cls._stores[storage_type] = store_class

    @classmethod
    def get_supported_types(cls) -> List[str]:
        """Get list of supported content store types"""
        return [st.value for st in cls._stores.keys()]
