# permadeploy/models/__init__.py
"""Data models for permadeploy"""

from .manifest import Manifest, ManualOverrides
from .tracker import DeploymentTracker, DeploymentRecord
from .change_set import ChangeSet
from .result import (
    OperationStatus,
    DeploymentPhase,
    DeploymentStats,
    DeploymentResult,
    ValidationReport,
    DeploymentInfo,
)
from .config import DeployConfig, ContentStoreConfig, NameRegistryConfig

__all__ = [
    # Manifest models
    "Manifest",
    "ManualOverrides",

    # Tracker models
    "DeploymentTracker",
    "DeploymentRecord",
    "ChangeSet",

    # Result models
    "OperationStatus",
    "DeploymentPhase",
    "DeploymentStats",
    "DeploymentResult",
    "ValidationReport",
    "DeploymentInfo",

    # Config models
    "DeployConfig",
    "ContentStoreConfig",
    "NameRegistryConfig",
]
