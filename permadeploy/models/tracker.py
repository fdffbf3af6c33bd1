# permadeploy/models/tracker.py
"""Deployment tracker models"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from ..constants import DEFAULT_HISTORY_LIMIT


@dataclass
class DeploymentRecord:
    """Audit entry for one past deployment"""
    reference: str
    content_address: str
    changed_paths: List[str] = field(default_factory=list)
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'reference': self.reference,
            'contentAddress': self.content_address,
            'changedPaths': list(self.changed_paths),
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeploymentRecord':
        """Create from dictionary"""
        return cls(
            reference=data['reference'],
            content_address=data['contentAddress'],
            changed_paths=list(data.get('changedPaths', [])),
            timestamp=data.get('timestamp'),
        )


@dataclass
class DeploymentTracker:
    """Durable memory of the previous deployment of one application"""
    last_deployed_reference: Optional[str] = None
    file_hashes: Dict[str, str] = field(default_factory=dict)
    deployment_count: int = 0
    last_deployed_at: Optional[str] = None
    recent_deployments: List[DeploymentRecord] = field(default_factory=list)

    @property
    def has_deployed(self) -> bool:
        return self.last_deployed_reference is not None

    def advance(self,
                reference: str,
                content_address: str,
                changed_paths: List[str],
                file_hashes: Dict[str, str],
                timestamp: str,
                history_limit: int = DEFAULT_HISTORY_LIMIT) -> 'DeploymentTracker':
        """Return the tracker state after a successful deployment

        `file_hashes` replaces the stored hashes wholesale, so paths that
        are no longer tracked disappear.

        Raises:
            ValueError: If history_limit is below 1
        """
        if history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {history_limit}")

        history = list(self.recent_deployments)
        history.append(DeploymentRecord(
            reference=reference,
            content_address=content_address,
            changed_paths=sorted(changed_paths),
            timestamp=timestamp,
        ))
        history = history[-history_limit:]

        return DeploymentTracker(
            last_deployed_reference=reference,
            file_hashes=dict(sorted(file_hashes.items())),
            deployment_count=self.deployment_count + 1,
            last_deployed_at=timestamp,
            recent_deployments=history,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'lastDeployedReference': self.last_deployed_reference,
            'fileHashes': dict(sorted(self.file_hashes.items())),
            'deploymentCount': self.deployment_count,
            'lastDeployedAt': self.last_deployed_at,
            'recentDeployments': [r.to_dict() for r in self.recent_deployments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeploymentTracker':
        """Create from dictionary"""
        return cls(
            last_deployed_reference=data.get('lastDeployedReference'),
            file_hashes=dict(data.get('fileHashes') or {}),
            deployment_count=int(data.get('deploymentCount', 0)),
            last_deployed_at=data.get('lastDeployedAt'),
            recent_deployments=[
                DeploymentRecord.from_dict(r)
                for r in data.get('recentDeployments') or []
            ],
        )
