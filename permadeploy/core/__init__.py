"""Core change detection and reconciliation engine"""

from .hasher import ContentHasher
from .file_enumerator import TrackedFileEnumerator
from .change_resolver import ChangeSetResolver
from .manifest_reconciler import ManifestReconciler
from .state_store import AppStateStore

__all__ = [
    "ContentHasher",
    "TrackedFileEnumerator",
    "ChangeSetResolver",
    "ManifestReconciler",
    "AppStateStore",
]
