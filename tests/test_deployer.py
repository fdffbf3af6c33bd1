"""End-to-end tests for the Deployer API."""

import json
import logging
from pathlib import Path

import pytest
from rich.console import Console
from rich.logging import RichHandler

from permadeploy import Deployer, deploy, format_deploy_result, setup_logging
from permadeploy.api.exceptions import ConfigurationError
from permadeploy.models.result import DeploymentPhase, DeploymentResult
from permadeploy.utils.output import format_deploy_summary, format_deployment_info

from conftest import GitRepo


def registry_records(repo: GitRepo) -> dict:
    return json.loads((repo.root / ".permadeploy-registry.json").read_text())


class TestDeploy:
    def test_deploy_with_default_config(self, repo: GitRepo, app_dir: Path) -> None:
        result = Deployer().deploy(app_dir)

        assert result.is_success
        records = registry_records(repo)
        assert records[result.name]["transactionId"] == result.manifest_address

        stored_manifest = json.loads(
            (repo.root / ".permadeploy-store" / result.manifest_address).read_bytes()
        )
        assert stored_manifest == json.loads((app_dir / "manifest.json").read_text())

    def test_second_deploy_skipped(self, app_dir: Path) -> None:
        deployer = Deployer()
        assert deployer.deploy(app_dir).is_success
        assert deployer.deploy(app_dir).is_skipped

    def test_config_file_paths(self, repo: GitRepo, app_dir: Path) -> None:
        repo.write(".permadeploy.yaml", (
            "app_name: Site\n"
            "content_store:\n  type: filesystem\n  path: build/blobs\n"
            "name_registry:\n  type: filesystem\n  path: build/names.json\n"
        ))
        result = deploy(app_dir)

        assert result.is_success
        names = json.loads((repo.root / "build" / "names.json").read_text())
        assert result.name in names
        sidecar = json.loads(
            (repo.root / "build" / "blobs" / f"{result.manifest_address}.json").read_text()
        )
        assert sidecar["tags"]["App-Name"] == "Site"

    def test_dry_run_creates_nothing(self, repo: GitRepo, app_dir: Path) -> None:
        result = deploy(app_dir, dry_run=True)

        assert result.is_success
        assert result.dry_run
        assert not (repo.root / ".permadeploy-store").exists()
        assert not (repo.root / ".permadeploy-registry.json").exists()
        assert not (app_dir / "manifest.json").exists()

    def test_invalid_config_reported(self, repo: GitRepo, app_dir: Path) -> None:
        repo.write(".permadeploy.yaml", "registry_ttl: -5\n")
        result = Deployer().deploy(app_dir)

        assert result.is_failed
        assert result.failed_phase == DeploymentPhase.INIT
        assert result.error_code == "PD001"


class TestDeployAll:
    def test_deploys_each_app(self, repo: GitRepo, app_dir: Path) -> None:
        repo.write("apps/blog/index.html", "<h1>blog</h1>\n")
        repo.write("apps/.hidden/index.html", "hidden\n")
        repo.track("apps/blog", "apps/.hidden")
        repo.commit("blog")
        (repo.root / "apps" / "scratch").mkdir()
        (repo.root / "apps" / "scratch" / "notes.txt").write_text("untracked")

        deployer = Deployer()
        assert [p.name for p in deployer.discover_apps(repo.root / "apps")] == ["blog", "site"]

        results = deployer.deploy_all(repo.root / "apps")

        assert sorted(results) == ["blog", "site"]
        assert all(r.is_success for r in results.values())
        # Both applications share the commit and so the name; the first one claims it
        assert results["blog"].name == results["site"].name
        assert registry_records(repo)[results["blog"].name]["transactionId"] == \
            results["blog"].manifest_address

        again = deployer.deploy_all(repo.root / "apps")
        assert all(r.is_skipped for r in again.values())

    def test_not_a_git_tree(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            Deployer().discover_apps(tmp_path)


class TestValidateAndInfo:
    def test_validate(self, app_dir: Path) -> None:
        report = Deployer().validate(app_dir)
        assert report.valid
        assert report.tracked_files == 3
        assert report.entry_point == "index.html"

    def test_validate_corrupt_tracker(self, app_dir: Path) -> None:
        (app_dir / "deployment-tracker.json").write_text("nope")
        report = Deployer().validate(app_dir)
        assert not report.valid
        assert "deployment-tracker.json" in report.error

    def test_info(self, repo: GitRepo, app_dir: Path) -> None:
        deployer = Deployer()
        before = deployer.info(app_dir)
        assert before.deployment_count == 0
        assert not before.is_current

        deployer.deploy(app_dir)
        after = deployer.info(app_dir)
        assert after.deployment_count == 1
        assert after.file_count == 3
        assert after.entry_point == "index.html"
        assert after.current_reference == repo.head()
        assert after.is_current


class TestOutput:
    def test_result_panels(self, app_dir: Path) -> None:
        deployer = Deployer()
        out = Console(record=True, width=120)

        result = deployer.deploy(app_dir)
        format_deploy_result(result, out)
        format_deploy_result(deployer.deploy(app_dir), out)

        text = out.export_text()
        assert "Deploy Result" in text
        assert result.name in text
        assert "Deploy Skipped" in text
        assert "no_changes" in text

    def test_failure_panel(self, tmp_path: Path) -> None:
        out = Console(record=True, width=120)
        format_deploy_result(Deployer().deploy(tmp_path / "missing"), out)
        text = out.export_text()
        assert "Deploy Error" in text
        assert "PD001" in text

    def test_panel_names_app_by_directory(self, tmp_path: Path) -> None:
        out = Console(record=True, width=200)
        app_dir = tmp_path / "apps" / "site"
        format_deploy_result(DeploymentResult.skipped(str(app_dir), "no_changes", "abc"), out)

        text = out.export_text()
        assert "site skipped: no_changes" in text
        assert str(app_dir.parent) not in text

    def test_summary_and_info(self, app_dir: Path) -> None:
        deployer = Deployer()
        out = Console(record=True, width=120)

        format_deploy_summary({"site": deployer.deploy(app_dir)}, out)
        format_deployment_info(deployer.info(app_dir), out)

        text = out.export_text()
        assert "site" in text
        assert "deployed" in text
        assert "Up to date" in text


class TestLogging:
    @pytest.fixture
    def root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield root
        root.handlers[:] = handlers
        root.setLevel(level)

    @pytest.mark.parametrize("verbose, debug, level", [
        (False, False, logging.WARNING),
        (True, False, logging.INFO),
        (True, True, logging.DEBUG),
    ])
    def test_levels(self, root_logger, verbose, debug, level) -> None:
        setup_logging(verbose=verbose, debug=debug, log_console=Console(record=True))
        assert root_logger.level == level
        assert isinstance(root_logger.handlers[0], RichHandler)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_records_rendered(self, root_logger, app_dir: Path) -> None:
        out = Console(record=True, width=200)
        setup_logging(verbose=True, log_console=out)

        Deployer().deploy(app_dir)

        assert "Published manifest" in out.export_text()
