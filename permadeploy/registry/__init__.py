# permadeploy/registry/__init__.py
"""Name registries for permadeploy"""

from .base import NameRegistry, NameRecord, RegistrationResult, RegistrationStatus
from .filesystem import FilesystemNameRegistry
from .http import HttpNameRegistry
from .factory import RegistryFactory

__all__ = [
    'NameRegistry',
    'NameRecord',
    'RegistrationResult',
    'RegistrationStatus',
    'FilesystemNameRegistry',
    'HttpNameRegistry',
    'RegistryFactory',
]
