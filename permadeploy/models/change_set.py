"""Change set model"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set


@dataclass
class ChangeSet:
    """Difference between the working tree and the last deployment

    Transient: its effects are persisted through the manifest and the
    tracker, never the change set itself.
    """
    changed_paths: Set[str] = field(default_factory=set)
    deleted_paths: Set[str] = field(default_factory=set)
    current_tracked_paths: List[str] = field(default_factory=list)
    current_hashes: Dict[str, str] = field(default_factory=dict)
    new_paths: Set[str] = field(default_factory=set)
    files: Dict[str, Path] = field(default_factory=dict)

    @property
    def modified_paths(self) -> Set[str]:
        return self.changed_paths - self.new_paths

    @property
    def has_changes(self) -> bool:
        return bool(self.changed_paths or self.deleted_paths)

    def mark_changed(self, path: str) -> None:
        """Force a tracked path into the changed set"""
        if path not in self.current_hashes:
            raise KeyError(path)
        self.changed_paths.add(path)
