# permadeploy/models/manifest.py
"""Manifest models"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any

from ..constants import MANIFEST_TYPE, MANIFEST_SPEC_VERSION
from ..utils.file_utils import normalize_path


@dataclass
class Manifest:
    """Path manifest of one published version of an application

    `paths` maps forward-slash relative paths to content addresses.
    On disk and on the wire the manifest uses the Arweave path-manifest
    layout, where every address is wrapped as ``{"id": address}``.
    """
    entry_point: Optional[str] = None
    paths: Dict[str, str] = field(default_factory=dict)
    spec_version: str = MANIFEST_SPEC_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'manifest': MANIFEST_TYPE,
            'version': self.spec_version,
        }
        if self.entry_point:
            data['index'] = {'path': self.entry_point}
        data['paths'] = {
            path: {'id': address}
            for path, address in sorted(self.paths.items())
        }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Manifest':
        """Create from dictionary"""
        index = data.get('index') or {}
        return cls(
            entry_point=index.get('path'),
            paths={
                path: entry['id'] if isinstance(entry, dict) else entry
                for path, entry in (data.get('paths') or {}).items()
            },
            spec_version=data.get('version', MANIFEST_SPEC_VERSION),
        )

    @classmethod
    def empty(cls) -> 'Manifest':
        return cls()

    def copy(self) -> 'Manifest':
        return Manifest(
            entry_point=self.entry_point,
            paths=dict(self.paths),
            spec_version=self.spec_version,
        )

    @property
    def file_count(self) -> int:
        return len(self.paths)


@dataclass
class ManualOverrides:
    """Operator-authored manifest entries for externally hosted content"""
    entry_point: Optional[str] = None
    paths: Dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.entry_point and not self.paths

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ManualOverrides':
        """Create from dictionary

        Raises:
            ValueError: If the structure is not an overrides object
        """
        if not isinstance(data, dict):
            raise ValueError("overrides must be a JSON object")

        entry_point = data.get('entryPoint', data.get('index'))
        if isinstance(entry_point, dict):
            entry_point = entry_point.get('path')
        if entry_point is not None and not isinstance(entry_point, str):
            raise ValueError("entryPoint must be a string")

        raw_paths = data.get('paths', {})
        if not isinstance(raw_paths, dict):
            raise ValueError("paths must be an object")

        paths = {}
        for path, value in raw_paths.items():
            if isinstance(value, dict):
                value = value.get('id')
            if not isinstance(value, str) or not value:
                raise ValueError(f"override for {path} has no address")
            paths[normalize_path(path)] = value

        return cls(
            entry_point=normalize_path(entry_point) if entry_point else None,
            paths=paths,
        )
