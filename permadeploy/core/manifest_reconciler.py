"""Manifest reconciliation"""

import logging
from typing import Dict, List, Optional, Sequence

from ..api.exceptions import ConfigurationError
from ..constants import DEFAULT_ENTRY_POINTS, MANIFEST_SPEC_VERSION
from ..models.manifest import Manifest, ManualOverrides

logger = logging.getLogger(__name__)


class ManifestReconciler:
    """Produces the next manifest version of an application

    Order of application: entries of the current manifest that are still
    tracked, then the addresses uploaded in this cycle, then manual
    overrides. Later steps win for the same path.
    """

    def __init__(self, entry_points: Optional[Sequence[str]] = None):
        self.entry_points = list(entry_points or DEFAULT_ENTRY_POINTS)

    def resolve_entry_point(self,
                            tracked_paths: Sequence[str],
                            overrides: Optional[ManualOverrides] = None) -> str:
        """
        Pick the path served by default

        Args:
            tracked_paths: Relative paths in enumeration order
            overrides: Manual overrides, whose entry point wins

        Returns:
            Entry point path

        Raises:
            ConfigurationError: If there is nothing to choose from
        """
        if overrides and overrides.entry_point:
            return overrides.entry_point

        available = set(tracked_paths)
        for candidate in self.entry_points:
            if candidate in available:
                return candidate

        if tracked_paths:
            return tracked_paths[0]

        raise ConfigurationError("No tracked files, cannot resolve an entry point")

    def reconcile(self,
                  current_manifest: Manifest,
                  newly_uploaded: Dict[str, str],
                  current_tracked_paths: List[str],
                  manual_overrides: Optional[ManualOverrides] = None) -> Manifest:
        """
        Merge uploads, deletions and overrides into a new manifest

        Args:
            current_manifest: Manifest of the last deployment
            newly_uploaded: Path to address mapping uploaded this cycle
            current_tracked_paths: Relative paths currently tracked
            manual_overrides: Operator overrides, applied last

        Returns:
            New Manifest; `current_manifest` is not modified

        Raises:
            ConfigurationError: If no entry point can be resolved
        """
        overrides = manual_overrides or ManualOverrides()
        tracked = set(current_tracked_paths)

        paths = {}
        for path, address in current_manifest.paths.items():
            if path in tracked:
                paths[path] = address
            elif path in overrides.paths:
                # Re-applied below
                continue
            else:
                logger.info(f"Dropping stale manifest entry: {path} -> {address}")

        paths.update(newly_uploaded)
        paths.update(overrides.paths)

        entry_point = self.resolve_entry_point(current_tracked_paths, overrides)

        if entry_point != current_manifest.entry_point and current_manifest.entry_point:
            logger.info(
                f"Entry point changed: {current_manifest.entry_point} -> {entry_point}"
            )

        return Manifest(
            entry_point=entry_point,
            paths=dict(sorted(paths.items())),
            spec_version=MANIFEST_SPEC_VERSION,
        )
