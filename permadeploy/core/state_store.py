"""Per-application state files"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema

from ..api.exceptions import ManifestIOError
from ..constants import (
    MANIFEST_FILE,
    TRACKER_FILE,
    OVERRIDES_FILE,
    UPLOAD_TAGS_FILE,
)
from ..models.manifest import Manifest, ManualOverrides
from ..models.tracker import DeploymentTracker
from ..storage.dry_run import is_placeholder_address
from ..utils.file_utils import atomic_write, dump_json
from .schemas import MANIFEST_SCHEMA, TRACKER_SCHEMA

logger = logging.getLogger(__name__)


class AppStateStore:
    """Reads and writes the bookkeeping files of one application

    The manifest and the tracker are loaded strictly: unreadable or
    corrupt files raise ManifestIOError and are never repaired. The
    override and upload tag files are optional and a broken one only
    logs a warning.
    """

    def __init__(self, app_dir: Union[str, Path]):
        self.app_dir = Path(app_dir).resolve()

    @property
    def manifest_path(self) -> Path:
        return self.app_dir / MANIFEST_FILE

    @property
    def tracker_path(self) -> Path:
        return self.app_dir / TRACKER_FILE

    @property
    def overrides_path(self) -> Path:
        return self.app_dir / OVERRIDES_FILE

    @property
    def upload_tags_path(self) -> Path:
        return self.app_dir / UPLOAD_TAGS_FILE

    def _read_state_file(self, path: Path, schema: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Load and validate a state file, None if it does not exist"""
        if not path.exists():
            return None

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except OSError as e:
            raise ManifestIOError(f"Cannot read {path.name}: {e}", str(path)) from e
        except ValueError as e:
            raise ManifestIOError(f"Corrupt JSON in {path.name}: {e}", str(path)) from e

        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ManifestIOError(
                f"Invalid {path.name}: {e.message}", str(path)
            ) from e

        return data

    def load_manifest(self) -> Manifest:
        """
        Load the current manifest

        Returns:
            Manifest, empty when the application was never deployed

        Raises:
            ManifestIOError: If the file is unreadable or corrupt
        """
        data = self._read_state_file(self.manifest_path, MANIFEST_SCHEMA)
        if data is None:
            return Manifest.empty()
        return Manifest.from_dict(data)

    def load_tracker(self) -> DeploymentTracker:
        """
        Load the deployment tracker

        Returns:
            DeploymentTracker, empty when the application was never deployed

        Raises:
            ManifestIOError: If the file is unreadable or corrupt
        """
        data = self._read_state_file(self.tracker_path, TRACKER_SCHEMA)
        if data is None:
            return DeploymentTracker()
        return DeploymentTracker.from_dict(data)

    def load_overrides(self) -> ManualOverrides:
        """Load manual overrides; a missing or broken file means none"""
        if not self.overrides_path.exists():
            return ManualOverrides()

        try:
            data = json.loads(self.overrides_path.read_text(encoding='utf-8'))
            overrides = ManualOverrides.from_dict(data)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring malformed {OVERRIDES_FILE}: {e}")
            return ManualOverrides()

        if not overrides.is_empty:
            logger.info(
                f"Loaded {len(overrides.paths)} manual override(s)"
                + (f", entry point {overrides.entry_point}" if overrides.entry_point else "")
            )
        return overrides

    def load_upload_tags(self) -> Dict[str, str]:
        """Load per-application custom upload tags"""
        if not self.upload_tags_path.exists():
            return {}

        try:
            data = json.loads(self.upload_tags_path.read_text(encoding='utf-8'))
            custom_tags = data.get('customTags', {}) if isinstance(data, dict) else None
            if not isinstance(custom_tags, dict):
                raise ValueError("customTags must be an object")
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring malformed {UPLOAD_TAGS_FILE}: {e}")
            return {}

        return {str(name): str(value) for name, value in custom_tags.items()}

    def save_manifest(self, manifest: Manifest) -> None:
        """
        Atomically rewrite the manifest file

        Raises:
            ManifestIOError: If the manifest holds dry-run addresses or
                the write fails
        """
        placeholders = sorted(
            path for path, address in manifest.paths.items()
            if is_placeholder_address(address)
        )
        if placeholders:
            raise ManifestIOError(
                f"Refusing to persist dry-run addresses for: {', '.join(placeholders)}",
                str(self.manifest_path),
            )

        self._write(self.manifest_path, manifest.to_dict())

    def save_tracker(self, tracker: DeploymentTracker) -> None:
        """Atomically rewrite the tracker file"""
        self._write(self.tracker_path, tracker.to_dict())

    def save(self, manifest: Manifest, tracker: DeploymentTracker) -> None:
        """Persist a completed deployment, manifest first"""
        self.save_manifest(manifest)
        self.save_tracker(tracker)

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        try:
            atomic_write(path, dump_json(data))
        except OSError as e:
            raise ManifestIOError(f"Failed to write {path.name}: {e}", str(path)) from e
        logger.debug(f"Wrote {path}")
