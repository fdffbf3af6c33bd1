"""PermaDeploy - incremental deployment of static applications to permanent storage.

Detects which tracked files of an application changed since its last
deployment, uploads only those to a content-addressed store, publishes an
updated path manifest and points a commit-derived name at it.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Exceptions
from .api.exceptions import (
    PermadeployError,
    ConfigurationError,
    VersionControlError,
    ContentHashError,
    UploadError,
    ManifestIOError,
    NameRegistryError,
    NameClaimedError,
)

# Core API
from .api.deployer import Deployer, deploy

# Data models
from .models import (
    Manifest,
    ManualOverrides,
    DeploymentTracker,
    ChangeSet,
    DeployConfig,
    DeploymentPhase,
    DeploymentResult,
    DeploymentStats,
    DeploymentInfo,
    ValidationReport,
    OperationStatus,
)

# Engine components
from .core import (
    ContentHasher,
    TrackedFileEnumerator,
    ChangeSetResolver,
    ManifestReconciler,
)
from .services import DeploymentOrchestrator
from .storage import ContentStore, StorageFactory
from .registry import NameRegistry, RegistryFactory

# Display helpers
from .utils.output import setup_logging, format_deploy_result

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",
    "DeploymentOrchestrator",

    # Core API functions
    "deploy",

    # Engine components
    "ContentHasher",
    "TrackedFileEnumerator",
    "ChangeSetResolver",
    "ManifestReconciler",
    "ContentStore",
    "StorageFactory",
    "NameRegistry",
    "RegistryFactory",

    # Data models
    "Manifest",
    "ManualOverrides",
    "DeploymentTracker",
    "ChangeSet",
    "DeployConfig",
    "DeploymentPhase",
    "DeploymentResult",
    "DeploymentStats",
    "DeploymentInfo",
    "ValidationReport",
    "OperationStatus",

    # Exceptions
    "PermadeployError",
    "ConfigurationError",
    "VersionControlError",
    "ContentHashError",
    "UploadError",
    "ManifestIOError",
    "NameRegistryError",
    "NameClaimedError",

    # Display helpers
    "setup_logging",
    "format_deploy_result",
]
