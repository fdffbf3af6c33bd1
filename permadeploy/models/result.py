"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Any


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class DeploymentPhase(Enum):
    """States of one deployment cycle"""
    INIT = "init"
    VALIDATING = "validating"
    DETECTING_CHANGES = "detecting_changes"
    NO_CHANGES = "no_changes"
    UPLOADING = "uploading"
    RECONCILING_MANIFEST = "reconciling_manifest"
    PUBLISHING_MANIFEST = "publishing_manifest"
    REGISTERING_NAME = "registering_name"
    PERSISTING_STATE = "persisting_state"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DeploymentStats:
    """Numbers describing one deployment"""
    uploaded_files: int = 0
    uploaded_bytes: int = 0
    deleted_files: int = 0
    manifest_entries: int = 0
    duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'uploaded_files': self.uploaded_files,
            'uploaded_bytes': self.uploaded_bytes,
            'deleted_files': self.deleted_files,
            'manifest_entries': self.manifest_entries,
            'duration': self.duration,
        }


@dataclass
class DeploymentResult:
    """Outcome of `deploy`

    Exactly one of three shapes, selected by `status`:
    SKIPPED (reason, reference), SUCCESS (reference, manifest_address,
    name, changed_paths, stats) or FAILED (reason, failed_phase).
    """
    status: OperationStatus
    app_dir: str
    reference: Optional[str] = None
    reason: Optional[str] = None
    manifest_address: Optional[str] = None
    name: Optional[str] = None
    changed_paths: List[str] = field(default_factory=list)
    deleted_paths: List[str] = field(default_factory=list)
    stats: Optional[DeploymentStats] = None
    failed_phase: Optional[DeploymentPhase] = None
    error_code: Optional[str] = None
    dry_run: bool = False
    verified_after_timeout: bool = False
    commit: Dict[str, str] = field(default_factory=dict)
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_skipped(self) -> bool:
        return self.status == OperationStatus.SKIPPED

    @property
    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED

    @classmethod
    def skipped(cls, app_dir: str, reason: str, reference: Optional[str],
                **kwargs) -> 'DeploymentResult':
        return cls(status=OperationStatus.SKIPPED, app_dir=app_dir,
                   reason=reason, reference=reference, **kwargs)

    @classmethod
    def succeeded(cls, app_dir: str, reference: str, manifest_address: str,
                  name: Optional[str], changed_paths: List[str],
                  stats: DeploymentStats, **kwargs) -> 'DeploymentResult':
        return cls(status=OperationStatus.SUCCESS, app_dir=app_dir,
                   reference=reference, manifest_address=manifest_address,
                   name=name, changed_paths=sorted(changed_paths),
                   stats=stats, **kwargs)

    @classmethod
    def failed(cls, app_dir: str, reason: str, phase: DeploymentPhase,
               error_code: Optional[str] = None, **kwargs) -> 'DeploymentResult':
        return cls(status=OperationStatus.FAILED, app_dir=app_dir,
                   reason=reason, failed_phase=phase, error_code=error_code,
                   **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'status': self.status.value,
            'app_dir': self.app_dir,
            'dry_run': self.dry_run,
        }

        if self.reference:
            data['reference'] = self.reference
        if self.reason:
            data['reason'] = self.reason
        if self.is_success:
            data['manifest_address'] = self.manifest_address
            data['name'] = self.name
            data['changed_paths'] = self.changed_paths
            data['deleted_paths'] = self.deleted_paths
            data['verified_after_timeout'] = self.verified_after_timeout
        if self.stats:
            data['stats'] = self.stats.to_dict()
        if self.failed_phase:
            data['failed_phase'] = self.failed_phase.value
        if self.error_code:
            data['error_code'] = self.error_code

        return data


@dataclass
class ValidationReport:
    """Pre-flight check result"""
    app_dir: str
    valid: bool
    error: Optional[str] = None
    tracked_files: int = 0
    entry_point: Optional[str] = None


@dataclass
class DeploymentInfo:
    """Current deployment state of one application"""
    app_dir: str
    spec_version: str
    entry_point: Optional[str]
    file_count: int
    deployment_count: int
    last_deployed_at: Optional[str] = None
    last_deployed_reference: Optional[str] = None
    current_reference: Optional[str] = None
    current_commit_message: Optional[str] = None

    @property
    def is_current(self) -> bool:
        """Whether HEAD is the last deployed commit"""
        return (
            self.current_reference is not None
            and self.current_reference == self.last_deployed_reference
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'app_dir': self.app_dir,
            'spec_version': self.spec_version,
            'entry_point': self.entry_point,
            'file_count': self.file_count,
            'deployment_count': self.deployment_count,
            'last_deployed_at': self.last_deployed_at,
            'last_deployed_reference': self.last_deployed_reference,
            'current_reference': self.current_reference,
            'current_commit_message': self.current_commit_message,
        }
