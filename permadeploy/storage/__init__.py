# permadeploy/storage/__init__.py
"""Content stores for permadeploy"""

from .base import ContentStore
from .filesystem import FilesystemContentStore
from .gateway import GatewayContentStore
from .dry_run import DryRunContentStore, is_placeholder_address
from .factory import StorageFactory

__all__ = [
    'ContentStore',
    'FilesystemContentStore',
    'GatewayContentStore',
    'DryRunContentStore',
    'is_placeholder_address',
    'StorageFactory',
]
