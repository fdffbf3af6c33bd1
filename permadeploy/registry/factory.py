"""Name registry factory"""

from typing import Dict, List, Type

from .base import NameRegistry
from .filesystem import FilesystemNameRegistry
from .http import HttpNameRegistry
from ..constants import RegistryType
from ..models.config import NameRegistryConfig


class RegistryFactory:
    """Factory for creating name registry instances"""

    _registries: Dict[RegistryType, Type[NameRegistry]] = {
        RegistryType.FILESYSTEM: FilesystemNameRegistry,
        RegistryType.HTTP: HttpNameRegistry,
    }

    @classmethod
    def create(cls, config: NameRegistryConfig) -> NameRegistry:
        """Create name registry from configuration

        Args:
            config: Name registry configuration

        Returns:
            Name registry instance

        Raises:
            ValueError: If the registry type is not supported
        """
        registry_type = config.registry_type

        if registry_type not in cls._registries:
            raise ValueError(f"Unsupported name registry type: {registry_type.value}")

        return cls._registries[registry_type](config.to_dict())

    @classmethod
    def register_registry(cls, registry_type: RegistryType,
                          registry_class: Type[NameRegistry]):
        """Register a new name registry type"""
        cls._registries[registry_type] = registry_class

    @classmethod
    def get_supported_types(cls) -> List[str]:
        """Get list of supported name registry types"""
        return [rt.value for rt in cls._registries.keys()]
