# permadeploy/services/__init__.py
"""Business logic services for permadeploy"""

from .config_service import ConfigService
from .deploy_service import DeploymentOrchestrator

__all__ = [
    "ConfigService",
    "DeploymentOrchestrator",
]
