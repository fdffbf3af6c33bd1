"""Deployment orchestration service"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import aiofiles

from ..api.exceptions import (
    PermadeployError,
    ConfigurationError,
    UploadError,
    NameRegistryError,
    NameClaimedError,
)
from ..core.change_resolver import ChangeSetResolver
from ..core.file_enumerator import TrackedFileEnumerator
from ..core.manifest_reconciler import ManifestReconciler
from ..core.state_store import AppStateStore
from ..models.change_set import ChangeSet
from ..models.config import DeployConfig
from ..models.manifest import Manifest, ManualOverrides
from ..models.result import DeploymentPhase, DeploymentResult, DeploymentStats
from ..registry.base import NameRegistry, RegistrationResult, RegistrationStatus
from ..storage.base import ContentStore
from ..storage.dry_run import DryRunContentStore
from ..utils.async_utils import run_in_chunks
from ..utils.file_utils import dump_json, get_mime_type, relative_key, format_size
from ..utils.git_utils import is_git_repository, get_commit_info
from ..constants import (
    ErrorCode,
    MANIFEST_CONTENT_TYPE,
    SKIP_REASON_NO_CHANGES,
)

logger = logging.getLogger(__name__)


class DeploymentOrchestrator:
    """Runs one incremental deployment cycle of an application

    Phases run strictly in order; each network call completes before the
    next phase starts. The manifest and tracker files are written only
    after the manifest is published and its name is registered, so a
    failure at any phase leaves them as they were.

    No lock is taken. Callers deploying the same application from
    several processes should wrap `deploy` in an external lock.
    """

    def __init__(self,
                 config: DeployConfig,
                 content_store: ContentStore,
                 name_registry: Optional[NameRegistry] = None,
                 enumerator: Optional[TrackedFileEnumerator] = None,
                 resolver: Optional[ChangeSetResolver] = None,
                 reconciler: Optional[ManifestReconciler] = None):
        """
        Initialize orchestrator

        Args:
            config: Deployment configuration
            content_store: Store receiving files and manifests
            name_registry: Registry for deployment names (required unless
                every deployment is a dry run)
            enumerator: Tracked file enumerator
            resolver: Change set resolver
            reconciler: Manifest reconciler
        """
        self.config = config
        self.content_store = content_store
        self.name_registry = name_registry
        self.enumerator = enumerator or TrackedFileEnumerator()
        self.resolver = resolver or ChangeSetResolver()
        self.reconciler = reconciler or ManifestReconciler()
        self._phase = DeploymentPhase.INIT

    @property
    def phase(self) -> DeploymentPhase:
        """Phase of the current (or last) cycle"""
        return self._phase

    def _enter(self, phase: DeploymentPhase) -> None:
        logger.debug(f"Phase: {self._phase.value} -> {phase.value}")
        self._phase = phase

    async def deploy(self, app_dir: Union[str, Path], dry_run: bool = False) -> DeploymentResult:
        """
        Deploy an application directory

        Args:
            app_dir: Application directory inside a git working tree
            dry_run: Simulate uploads and skip name registration and
                state persistence

        Returns:
            DeploymentResult; errors are reported as a FAILED result
        """
        started = time.monotonic()
        app_dir = Path(app_dir).resolve()
        dry_run = dry_run or self.content_store.is_dry_run
        self._phase = DeploymentPhase.INIT

        try:
            return await self._run(app_dir, dry_run, started)
        except PermadeployError as e:
            failed_phase = self._phase
            self._enter(DeploymentPhase.FAILED)
            logger.error(f"Deployment of {app_dir.name} failed during {failed_phase.value}: {e}")
            return DeploymentResult.failed(
                str(app_dir), str(e), failed_phase, e.error_code, dry_run=dry_run
            )
        except Exception as e:
            failed_phase = self._phase
            self._enter(DeploymentPhase.FAILED)
            logger.exception(f"Unexpected error during {failed_phase.value}")
            return DeploymentResult.failed(
                str(app_dir), f"Unexpected error: {e}", failed_phase,
                ErrorCode.UNEXPECTED_ERROR, dry_run=dry_run
            )

    async def _run(self, app_dir: Path, dry_run: bool, started: float) -> DeploymentResult:
        # Init
        if not app_dir.is_dir():
            raise ConfigurationError(f"Application directory not found: {app_dir}")
        if not is_git_repository(app_dir):
            raise ConfigurationError(f"Not a git working tree: {app_dir}")

        commit = get_commit_info(app_dir, self.config.name_length)
        reference = commit['full_hash']
        logger.info(
            f"Deploying {app_dir.name} at {commit['short_hash']}: {commit['message']}"
            + (" (dry run)" if dry_run else "")
        )

        # Validating
        self._enter(DeploymentPhase.VALIDATING)
        state = AppStateStore(app_dir)
        tracked_files = self.enumerator.list_tracked_files(app_dir)
        if not tracked_files:
            raise ConfigurationError(f"No tracked files in {app_dir}")

        manifest = state.load_manifest()
        tracker = state.load_tracker()
        overrides = state.load_overrides()
        tracked_paths = [relative_key(file_path, app_dir) for file_path in tracked_files]
        self.reconciler.resolve_entry_point(tracked_paths, overrides)

        # Detecting changes
        self._enter(DeploymentPhase.DETECTING_CHANGES)
        change_set = self.resolver.resolve(tracked_files, tracker.file_hashes, app_dir)
        self._require_manifest_entries(change_set, manifest, overrides)

        if not change_set.has_changes:
            preview = self.reconciler.reconcile(manifest, {}, tracked_paths, overrides)
            if preview == manifest:
                self._enter(DeploymentPhase.NO_CHANGES)
                logger.info(f"No changes in {app_dir.name} since {tracker.last_deployed_reference}")
                return DeploymentResult.skipped(
                    str(app_dir), SKIP_REASON_NO_CHANGES, reference,
                    dry_run=dry_run, commit=commit
                )
            logger.info("File content unchanged, republishing updated manifest")

        # Uploading
        self._enter(DeploymentPhase.UPLOADING)
        store = self.content_store
        if dry_run and not store.is_dry_run:
            store = DryRunContentStore()

        tags = self.config.upload_tags(state.load_upload_tags())
        uploaded, uploaded_bytes = await self._upload_changed(store, change_set, tags)

        # Reconciling manifest
        self._enter(DeploymentPhase.RECONCILING_MANIFEST)
        new_manifest = self.reconciler.reconcile(manifest, uploaded, tracked_paths, overrides)

        # Publishing manifest
        self._enter(DeploymentPhase.PUBLISHING_MANIFEST)
        manifest_address = await store.upload(
            dump_json(new_manifest.to_dict()).encode('utf-8'),
            MANIFEST_CONTENT_TYPE,
            {**tags, 'Type': 'manifest'},
        )
        logger.info(f"Published manifest: {manifest_address}")

        # Registering name
        self._enter(DeploymentPhase.REGISTERING_NAME)
        name = commit['short_hash'].lower()
        verified_after_timeout = False
        if dry_run:
            logger.info(f"[dry-run] Would register {name} -> {manifest_address}")
        else:
            verified_after_timeout = await self._register_name(name, manifest_address)

        # Persisting state
        self._enter(DeploymentPhase.PERSISTING_STATE)
        if dry_run:
            logger.info("[dry-run] Manifest and tracker left unchanged")
        else:
            timestamp = datetime.now(timezone.utc).isoformat()
            new_tracker = tracker.advance(
                reference=reference,
                content_address=manifest_address,
                changed_paths=sorted(change_set.changed_paths),
                file_hashes=change_set.current_hashes,
                timestamp=timestamp,
                history_limit=self.config.history_limit,
            )
            state.save(new_manifest, new_tracker)

        self._enter(DeploymentPhase.DONE)
        stats = DeploymentStats(
            uploaded_files=len(uploaded),
            uploaded_bytes=uploaded_bytes,
            deleted_files=len(change_set.deleted_paths),
            manifest_entries=new_manifest.file_count,
            duration=time.monotonic() - started,
        )
        logger.info(
            f"Deployed {app_dir.name}: {stats.uploaded_files} file(s), "
            f"{format_size(stats.uploaded_bytes)}, {stats.deleted_files} deleted"
        )

        return DeploymentResult.succeeded(
            str(app_dir), reference, manifest_address, name,
            list(change_set.changed_paths), stats,
            deleted_paths=sorted(change_set.deleted_paths),
            dry_run=dry_run,
            verified_after_timeout=verified_after_timeout,
            commit=commit,
        )

    @staticmethod
    def _require_manifest_entries(change_set: ChangeSet,
                                  manifest: Manifest,
                                  overrides: ManualOverrides) -> None:
        """Re-upload unchanged files the manifest has no address for"""
        for path in change_set.current_tracked_paths:
            if path in change_set.changed_paths:
                continue
            if path in manifest.paths or path in overrides.paths:
                continue
            logger.info(f"Missing from manifest, re-uploading: {path}")
            change_set.mark_changed(path)

    async def _upload_changed(self,
                              store: ContentStore,
                              change_set: ChangeSet,
                              tags: Dict[str, str]) -> Tuple[Dict[str, str], int]:
        """Upload every changed file, returning path -> address and byte count"""
        paths = [p for p in change_set.current_tracked_paths if p in change_set.changed_paths]

        async def upload_one(path: str) -> Tuple[str, str, int]:
            file_path = change_set.files[path]
            try:
                async with aiofiles.open(file_path, 'rb') as f:
                    data = await f.read()
            except OSError as e:
                raise UploadError(f"Cannot read {path}: {e}", path) from e

            try:
                address = await store.upload(data, get_mime_type(path), tags)
            except UploadError as e:
                if e.path is None:
                    e.path = path
                raise
            logger.info(f"Uploaded {path} ({format_size(len(data))}) -> {address}")
            return path, address, len(data)

        results: List[Tuple[str, str, int]] = []
        if self.config.upload_concurrency <= 1:
            for path in paths:
                results.append(await upload_one(path))
        else:
            results = await run_in_chunks(paths, upload_one, self.config.upload_concurrency)

        uploaded = {path: address for path, address, _ in results}
        return uploaded, sum(size for _, _, size in results)

    async def _register_name(self, name: str, address: str) -> bool:
        """
        Point the deployment name at the manifest

        Returns:
            True when success was only established by the verification
            lookup after a timed out write

        Raises:
            NameRegistryError: If the name could not be registered
            NameClaimedError: If strict claims are on and the name points
                elsewhere
        """
        if self.name_registry is None:
            raise NameRegistryError("No name registry configured", name)

        timeout = self.config.registry_timeout
        try:
            result = await asyncio.wait_for(
                self.name_registry.create(name, address, self.config.registry_ttl),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            result = RegistrationResult(
                status=RegistrationStatus.TIMEOUT,
                name=name,
                message=f"no answer within {timeout:g}s",
            )

        if result.status == RegistrationStatus.CREATED:
            logger.info(f"Registered {name} -> {address}")
            return False

        if result.status == RegistrationStatus.ALREADY_EXISTS:
            existing = result.existing_address
            if existing is None and self.config.strict_name_claims:
                try:
                    record = await asyncio.wait_for(
                        self.name_registry.lookup(name),
                        timeout=timeout,
                    )
                except asyncio.TimeoutError as e:
                    raise NameRegistryError(
                        f"Name {name} already registered and its record lookup timed out",
                        name,
                    ) from e
                existing = record.address if record else None
            self._check_claim(name, existing, address)
            logger.warning(
                f"Name {name} already registered"
                + (f" -> {existing}" if existing else "")
                + ", keeping existing record"
            )
            return False

        if result.status == RegistrationStatus.TIMEOUT:
            logger.warning(f"Registering {name} timed out ({result.message}), verifying")
            return await self._verify_after_timeout(name, address)

        raise NameRegistryError(f"Failed to register {name}: {result.message}", name)

    async def _verify_after_timeout(self, name: str, address: str) -> bool:
        # Exactly one lookup, the write is never retried
        try:
            record = await asyncio.wait_for(
                self.name_registry.lookup(name),
                timeout=self.config.registry_timeout,
            )
        except asyncio.TimeoutError as e:
            raise NameRegistryError(
                f"Registering {name} timed out and verification timed out", name
            ) from e
        except NameRegistryError as e:
            raise NameRegistryError(
                f"Registering {name} timed out and verification failed: {e}", name
            ) from e

        if record is None:
            raise NameRegistryError(
                f"Registering {name} timed out and no record exists", name
            )

        if record.address != address:
            self._check_claim(name, record.address, address)
            logger.warning(f"Name {name} exists but points at {record.address}")

        logger.info(f"Verified {name} -> {record.address} after timeout")
        return True

    def _check_claim(self, name: str, existing: Optional[str], address: str) -> None:
        if self.config.strict_name_claims and existing and existing != address:
            raise NameClaimedError(name, existing, address)
