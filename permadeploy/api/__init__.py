# permadeploy/api/__init__.py
"""API layer for permadeploy"""

from .exceptions import (
    PermadeployError,
    ConfigurationError,
    VersionControlError,
    ContentHashError,
    UploadError,
    ManifestIOError,
    NameRegistryError,
    NameClaimedError,
)
from .deployer import Deployer, deploy

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

    # Exceptions
    "PermadeployError",
    "ConfigurationError",
    "VersionControlError",
    "ContentHashError",
    "UploadError",
    "ManifestIOError",
    "NameRegistryError",
    "NameClaimedError",
]
