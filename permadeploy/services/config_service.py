"""Configuration loading service"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Any, Union

import jsonschema
import yaml

from ..api.exceptions import ConfigurationError
from ..core.schemas import CONFIG_SCHEMA
from ..models.config import DeployConfig
from ..utils.git_utils import get_repository_root
from ..constants import (
    PROJECT_CONFIG_FILE,
    DEFAULT_STORE_DIR,
    DEFAULT_REGISTRY_FILE,
    StorageType,
    RegistryType,
    ENV_CONFIG_PATH,
    ENV_APP_NAME,
    ENV_STORE_URL,
    ENV_STORE_TOKEN,
    ENV_REGISTRY_URL,
    ENV_REGISTRY_TOKEN,
    ENV_REGISTRY_TTL,
)

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading deployment configuration

    The YAML file is searched in the application directory first, then
    in each parent up to the root of the git working tree. Relative
    store and registry paths are resolved against the directory holding
    the file (the working tree root when there is no file).
    """

    def __init__(self, app_dir: Union[str, Path], config_path: Optional[Path] = None):
        """Initialize config service

        Args:
            app_dir: Application directory
            config_path: Explicit configuration file (skips the search)
        """
        self.app_dir = Path(app_dir).resolve()
        self._explicit_path = Path(config_path) if config_path else None

    def find_config_file(self) -> Optional[Path]:
        """Locate the configuration file

        Returns:
            Path to the configuration file or None
        """
        if self._explicit_path:
            return self._explicit_path

        env_path = os.environ.get(ENV_CONFIG_PATH)
        if env_path:
            return Path(env_path)

        stop_at = get_repository_root(self.app_dir)
        current = self.app_dir
        while True:
            candidate = current / PROJECT_CONFIG_FILE
            if candidate.is_file():
                return candidate
            if current == stop_at or current.parent == current:
                return None
            current = current.parent

    def _base_dir(self, config_file: Optional[Path]) -> Path:
        if config_file is not None:
            return config_file.resolve().parent
        return get_repository_root(self.app_dir) or self.app_dir

    def load_config(self) -> DeployConfig:
        """Load configuration from file and environment

        Returns:
            Loaded configuration

        Raises:
            ConfigurationError: If the file is unreadable or invalid
        """
        config_file = self.find_config_file()
        data: Dict[str, Any] = {}

        if config_file is not None:
            data = self._read_file(config_file)
            logger.debug(f"Loaded configuration from {config_file}")

        self._apply_env_overrides(data)

        try:
            jsonschema.validate(data, CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = '.'.join(str(part) for part in e.absolute_path) or 'root'
            raise ConfigurationError(
                f"Invalid configuration ({location}): {e.message}"
            ) from e

        self._resolve_paths(data, self._base_dir(config_file))

        try:
            return DeployConfig.from_dict(data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @staticmethod
    def _read_file(config_file: Path) -> Dict[str, Any]:
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {config_file}: {e}") from e

        # Expand environment variables in the file
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_file} must contain a mapping")
        return data

    @staticmethod
    def _apply_env_overrides(data: Dict[str, Any]) -> None:
        """Environment variables win over the file"""
        if os.environ.get(ENV_APP_NAME):
            data['app_name'] = os.environ[ENV_APP_NAME]

        if os.environ.get(ENV_STORE_URL):
            store = data.setdefault('content_store', {})
            store['url'] = os.environ[ENV_STORE_URL]
            store.setdefault('type', StorageType.GATEWAY.value)
        if os.environ.get(ENV_STORE_TOKEN):
            data.setdefault('content_store', {})['token'] = os.environ[ENV_STORE_TOKEN]

        if os.environ.get(ENV_REGISTRY_URL):
            registry = data.setdefault('name_registry', {})
            registry['url'] = os.environ[ENV_REGISTRY_URL]
            registry.setdefault('type', RegistryType.HTTP.value)
        if os.environ.get(ENV_REGISTRY_TOKEN):
            data.setdefault('name_registry', {})['token'] = os.environ[ENV_REGISTRY_TOKEN]

        if os.environ.get(ENV_REGISTRY_TTL):
            try:
                data['registry_ttl'] = int(os.environ[ENV_REGISTRY_TTL])
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_REGISTRY_TTL} must be an integer, got {os.environ[ENV_REGISTRY_TTL]!r}"
                ) from e

    @staticmethod
    def _resolve_paths(data: Dict[str, Any], base_dir: Path) -> None:
        store = data.setdefault('content_store', {})
        if store.get('type', StorageType.FILESYSTEM.value) == StorageType.FILESYSTEM.value:
            store['path'] = str(base_dir / store.get('path', DEFAULT_STORE_DIR))

        registry = data.setdefault('name_registry', {})
        if registry.get('type', RegistryType.FILESYSTEM.value) == RegistryType.FILESYSTEM.value:
            registry['path'] = str(base_dir / registry.get('path', DEFAULT_REGISTRY_FILE))
