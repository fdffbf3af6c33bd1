"""Tests for configuration loading."""

from pathlib import Path

import pytest

from permadeploy.api.exceptions import ConfigurationError
from permadeploy.services.config_service import ConfigService

from conftest import GitRepo


class TestLoadConfig:
    def test_defaults_without_file(self, repo: GitRepo, app_dir: Path) -> None:
        config = ConfigService(app_dir).load_config()

        assert config.app_name == "PermaDeploy"
        assert config.registry_ttl == 60
        assert config.registry_timeout == 120.0
        assert config.name_length == 16
        assert config.history_limit == 10
        assert config.upload_concurrency == 1
        assert not config.strict_name_claims
        assert Path(config.content_store.path) == repo.root.resolve() / ".permadeploy-store"
        assert Path(config.name_registry.path) == repo.root.resolve() / ".permadeploy-registry.json"

    def test_file_in_app_dir(self, app_dir: Path) -> None:
        (app_dir / ".permadeploy.yaml").write_text(
            "app_name: Site\nregistry_ttl: 300\ntags:\n  Team: web\n"
        )
        config = ConfigService(app_dir).load_config()

        assert config.app_name == "Site"
        assert config.registry_ttl == 300
        assert config.upload_tags()["Team"] == "web"
        assert config.upload_tags()["App-Name"] == "Site"

    def test_file_found_at_repository_root(self, repo: GitRepo, app_dir: Path) -> None:
        repo.write(".permadeploy.yaml", "content_store:\n  type: filesystem\n  path: blobs\n")
        config = ConfigService(app_dir).load_config()
        assert Path(config.content_store.path) == repo.root.resolve() / "blobs"

    def test_environment_variables_expanded(self, app_dir: Path,
                                            monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GATEWAY_TOKEN", "s3cret")
        (app_dir / ".permadeploy.yaml").write_text(
            "content_store:\n  type: gateway\n  url: https://gw.test\n  token: ${GATEWAY_TOKEN}\n"
        )
        config = ConfigService(app_dir).load_config()
        assert config.content_store.token == "s3cret"

    def test_environment_overrides(self, app_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERMADEPLOY_APP_NAME", "FromEnv")
        monkeypatch.setenv("PERMADEPLOY_REGISTRY_URL", "https://names.test")
        monkeypatch.setenv("PERMADEPLOY_REGISTRY_TTL", "900")
        (app_dir / ".permadeploy.yaml").write_text("app_name: FromFile\n")

        config = ConfigService(app_dir).load_config()

        assert config.app_name == "FromEnv"
        assert config.name_registry.type == "http"
        assert config.name_registry.url == "https://names.test"
        assert config.registry_ttl == 900

    def test_invalid_ttl_env(self, app_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERMADEPLOY_REGISTRY_TTL", "soon")
        with pytest.raises(ConfigurationError):
            ConfigService(app_dir).load_config()

    def test_schema_violation(self, app_dir: Path) -> None:
        (app_dir / ".permadeploy.yaml").write_text("upload_concurrency: 0\n")
        with pytest.raises(ConfigurationError, match="upload_concurrency"):
            ConfigService(app_dir).load_config()

    def test_unknown_key(self, app_dir: Path) -> None:
        (app_dir / ".permadeploy.yaml").write_text("colour: blue\n")
        with pytest.raises(ConfigurationError):
            ConfigService(app_dir).load_config()

    def test_invalid_yaml(self, app_dir: Path) -> None:
        (app_dir / ".permadeploy.yaml").write_text("app_name: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigService(app_dir).load_config()

    def test_gateway_without_url(self, app_dir: Path) -> None:
        (app_dir / ".permadeploy.yaml").write_text("content_store:\n  type: gateway\n")
        with pytest.raises(ConfigurationError):
            ConfigService(app_dir).load_config()

    def test_explicit_path(self, tmp_path: Path, app_dir: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("history_limit: 3\n")
        config = ConfigService(app_dir, config_file).load_config()
        assert config.history_limit == 3

    def test_history_limit_must_be_positive(self, app_dir: Path) -> None:
        (app_dir / ".permadeploy.yaml").write_text("history_limit: 0\n")
        with pytest.raises(ConfigurationError, match="history_limit"):
            ConfigService(app_dir).load_config()
