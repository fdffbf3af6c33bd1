"""Deployer API for deployment operations"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core import (
    TrackedFileEnumerator,
    ManifestReconciler,
    AppStateStore,
)
from ..models import (
    DeployConfig,
    DeploymentInfo,
    DeploymentPhase,
    DeploymentResult,
    ValidationReport,
)
from ..registry import NameRegistry, RegistryFactory
from ..services import ConfigService, DeploymentOrchestrator
from ..storage import ContentStore, DryRunContentStore, StorageFactory
from ..utils.async_utils import run_async
from ..utils.file_utils import relative_key
from ..utils.git_utils import is_git_repository, get_commit_info
from .exceptions import (
    PermadeployError,
    ConfigurationError,
    VersionControlError,
)

logger = logging.getLogger(__name__)


class Deployer:
    """Deployer class for deployment operations

    Content store and name registry are injected or built from the
    configuration for each deployment. Injected clients are left open
    for the caller to close.
    """

    def __init__(self,
                 config: Optional[DeployConfig] = None,
                 content_store: Optional[ContentStore] = None,
                 name_registry: Optional[NameRegistry] = None,
                 config_path: Optional[Path] = None):
        """
        Initialize deployer

        Args:
            config: Deployment configuration; loaded from the project
                configuration file of each application when omitted
            content_store: Content store client
            name_registry: Name registry client
            config_path: Explicit configuration file
        """
        self.config = config
        self.content_store = content_store
        self.name_registry = name_registry
        self.config_path = config_path
        self.enumerator = TrackedFileEnumerator()
        self.reconciler = ManifestReconciler()

    def _load_config(self, app_dir: Path) -> DeployConfig:
        if self.config is not None:
            return self.config
        return ConfigService(app_dir, self.config_path).load_config()

    def deploy(self, app_dir: Union[str, Path], dry_run: bool = False) -> DeploymentResult:
        """
        Deploy application directory

        Args:
            app_dir: Application directory
            dry_run: Simulate the deployment without uploads or writes

        Returns:
            DeploymentResult: Deployment result
        """
        return run_async(self.deploy_async(app_dir, dry_run))

    async def deploy_async(self, app_dir: Union[str, Path],
                           dry_run: bool = False) -> DeploymentResult:
        """Asynchronous variant of `deploy`"""
        app_dir = Path(app_dir).resolve()

        try:
            config = self._load_config(app_dir)
        except PermadeployError as e:
            logger.error(f"Cannot load configuration for {app_dir.name}: {e}")
            return DeploymentResult.failed(
                str(app_dir), str(e), DeploymentPhase.INIT, e.error_code, dry_run=dry_run
            )

        owned = []
        store = self.content_store
        if store is None:
            store = DryRunContentStore() if dry_run else StorageFactory.create(config.content_store)
            owned.append(store)

        registry = self.name_registry
        if registry is None and not dry_run:
            registry = RegistryFactory.create(config.name_registry)
            owned.append(registry)

        orchestrator = DeploymentOrchestrator(
            config,
            store,
            registry,
            enumerator=self.enumerator,
            reconciler=self.reconciler,
        )

        try:
            return await orchestrator.deploy(app_dir, dry_run=dry_run)
        finally:
            for client in owned:
                await client.close()

    def deploy_all(self, apps_root: Union[str, Path],
                   dry_run: bool = False) -> Dict[str, DeploymentResult]:
        """
        Deploy every application below apps_root

        Applications are deployed one after another; a failed one does
        not stop the rest.

        Args:
            apps_root: Directory whose subdirectories are applications
            dry_run: Simulate the deployments

        Returns:
            Results keyed by application directory name

        Raises:
            ConfigurationError: If apps_root is not inside a git working tree
        """
        return run_async(self.deploy_all_async(apps_root, dry_run))

    async def deploy_all_async(self, apps_root: Union[str, Path],
                               dry_run: bool = False) -> Dict[str, DeploymentResult]:
        """Asynchronous variant of `deploy_all`"""
        results = {}
        for app_dir in self.discover_apps(apps_root):
            results[app_dir.name] = await self.deploy_async(app_dir, dry_run)

        deployed = sum(1 for r in results.values() if r.is_success)
        skipped = sum(1 for r in results.values() if r.is_skipped)
        failed = sum(1 for r in results.values() if r.is_failed)
        logger.info(f"Deployed {deployed}, skipped {skipped}, failed {failed} application(s)")
        return results

    def discover_apps(self, apps_root: Union[str, Path]) -> List[Path]:
        """
        Find application directories

        Args:
            apps_root: Directory to scan

        Returns:
            Immediate subdirectories holding at least one tracked file
        """
        apps_root = Path(apps_root).resolve()
        if not apps_root.is_dir():
            raise ConfigurationError(f"Applications directory not found: {apps_root}")
        if not is_git_repository(apps_root):
            raise ConfigurationError(f"Not a git working tree: {apps_root}")

        apps = []
        for candidate in sorted(apps_root.iterdir()):
            if not candidate.is_dir() or candidate.name.startswith('.'):
                continue
            if self.enumerator.list_tracked_files(candidate):
                apps.append(candidate)
            else:
                logger.debug(f"Skipping {candidate.name}: no tracked files")
        return apps

    def validate(self, app_dir: Union[str, Path]) -> ValidationReport:
        """
        Check an application can be deployed, without side effects

        Args:
            app_dir: Application directory

        Returns:
            ValidationReport
        """
        app_dir = Path(app_dir).resolve()
        report = ValidationReport(app_dir=str(app_dir), valid=False)

        try:
            self._load_config(app_dir)
            tracked_files = self.enumerator.list_tracked_files(app_dir)
            report.tracked_files = len(tracked_files)
            if not tracked_files:
                raise ConfigurationError(f"No tracked files in {app_dir}")

            state = AppStateStore(app_dir)
            state.load_manifest()
            state.load_tracker()
            overrides = state.load_overrides()

            tracked_paths = [relative_key(f, app_dir) for f in tracked_files]
            report.entry_point = self.reconciler.resolve_entry_point(tracked_paths, overrides)
        except PermadeployError as e:
            report.error = str(e)
            return report

        report.valid = True
        return report

    def info(self, app_dir: Union[str, Path]) -> DeploymentInfo:
        """
        Describe the deployment state of an application

        Args:
            app_dir: Application directory

        Returns:
            DeploymentInfo

        Raises:
            ManifestIOError: If the state files are corrupt
        """
        app_dir = Path(app_dir).resolve()
        state = AppStateStore(app_dir)
        manifest = state.load_manifest()
        tracker = state.load_tracker()

        info = DeploymentInfo(
            app_dir=str(app_dir),
            spec_version=manifest.spec_version,
            entry_point=manifest.entry_point,
            file_count=manifest.file_count,
            deployment_count=tracker.deployment_count,
            last_deployed_at=tracker.last_deployed_at,
            last_deployed_reference=tracker.last_deployed_reference,
        )

        if is_git_repository(app_dir):
            try:
                commit = get_commit_info(app_dir)
                info.current_reference = commit['full_hash']
                info.current_commit_message = commit['message']
            except VersionControlError as e:
                logger.debug(f"No current commit for {app_dir}: {e}")

        return info


def deploy(app_dir: Union[str, Path],
           dry_run: bool = False,
           config: Optional[DeployConfig] = None) -> DeploymentResult:
    """
    Deploy an application directory (convenience function)

    Args:
        app_dir: Application directory inside a git working tree
        dry_run: Simulate the deployment without uploads or writes
        config: Deployment configuration (loaded from file when omitted)

    Returns:
        DeploymentResult: Deployment result
    """
    return Deployer(config=config).deploy(app_dir, dry_run=dry_run)
