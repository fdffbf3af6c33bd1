"""Shared test fixtures for permadeploy."""

import asyncio
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

from permadeploy.api.exceptions import UploadError
from permadeploy.models.config import DeployConfig
from permadeploy.registry.base import (
    NameRegistry,
    NameRecord,
    RegistrationResult,
    RegistrationStatus,
)
from permadeploy.storage.base import ContentStore


def run_git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test User",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


class GitRepo:
    """Throwaway git working tree driven through the git CLI."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        run_git(self.root, "init", "-q")

    def write(self, rel_path: str, content: Union[str, bytes]) -> Path:
        path = self.root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    def track(self, *rel_paths: str) -> None:
        run_git(self.root, "add", "--", *rel_paths)

    def remove(self, rel_path: str) -> None:
        run_git(self.root, "rm", "-q", "--", rel_path)

    def commit(self, message: str = "update") -> str:
        run_git(self.root, "commit", "-q", "--allow-empty", "-m", message)
        return self.head()

    def head(self) -> str:
        return run_git(self.root, "rev-parse", "HEAD")


class FakeContentStore(ContentStore):
    """In-memory store returning sequential 43 character addresses."""

    def __init__(self, fail_on: Optional[int] = None) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.calls = 0
        self.uploads: List[Dict] = []

    async def _do_initialize(self) -> None:
        pass

    async def upload(self, data: bytes, content_type: str,
                     tags: Optional[Dict[str, str]] = None) -> str:
        self.calls += 1
        if self.fail_on is not None and self.calls == self.fail_on:
            raise UploadError(f"simulated failure on upload {self.calls}")
        address = f"tx{self.calls:041d}"
        self.uploads.append({
            "address": address,
            "data": data,
            "content_type": content_type,
            "tags": dict(tags or {}),
        })
        return address

    def by_address(self, address: str) -> Dict:
        return next(u for u in self.uploads if u["address"] == address)


class FakeNameRegistry(NameRegistry):
    """In-memory registry with switches for slow and failing writes."""

    def __init__(self, hang: bool = False, write_lands: bool = True,
                 fail: bool = False) -> None:
        super().__init__()
        self.hang = hang
        self.write_lands = write_lands
        self.fail = fail
        self.records: Dict[str, NameRecord] = {}
        self.create_calls: List[tuple] = []
        self.lookup_calls: List[str] = []

    async def _do_initialize(self) -> None:
        pass

    async def lookup(self, name: str) -> Optional[NameRecord]:
        self.lookup_calls.append(name)
        return self.records.get(name)

    async def create(self, name: str, address: str, ttl: int) -> RegistrationResult:
        self.create_calls.append((name, address, ttl))

        if self.fail:
            return RegistrationResult(RegistrationStatus.FAILED, name, message="boom")

        if self.hang:
            # The write reaches the registry but the acknowledgement never arrives
            if self.write_lands:
                self.records[name] = NameRecord(name, address, ttl, record_id="late")
            await asyncio.sleep(3600)

        existing = self.records.get(name)
        if existing is not None:
            return RegistrationResult(
                RegistrationStatus.ALREADY_EXISTS, name,
                record_id=existing.record_id,
                existing_address=existing.address,
            )

        self.records[name] = NameRecord(name, address, ttl, record_id=f"rec-{len(self.records)}")
        return RegistrationResult(RegistrationStatus.CREATED, name,
                                  record_id=self.records[name].record_id)

    async def update(self, name: str, address: str, ttl: int) -> RegistrationResult:
        self.records[name] = NameRecord(name, address, ttl)
        return RegistrationResult(RegistrationStatus.UPDATED, name)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PERMADEPLOY_CONFIG", "PERMADEPLOY_APP_NAME", "PERMADEPLOY_STORE_URL",
                 "PERMADEPLOY_STORE_TOKEN", "PERMADEPLOY_REGISTRY_URL",
                 "PERMADEPLOY_REGISTRY_TOKEN", "PERMADEPLOY_REGISTRY_TTL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def repo(tmp_path: Path) -> GitRepo:
    return GitRepo(tmp_path / "repo")


@pytest.fixture
def app_dir(repo: GitRepo) -> Path:
    """Application with three committed files."""
    repo.write("apps/site/index.html", "<h1>hello</h1>\n")
    repo.write("apps/site/style.css", "body { color: red; }\n")
    repo.write("apps/site/js/app.js", "console.log('hi');\n")
    repo.track("apps/site")
    repo.commit("add site")
    return repo.root / "apps" / "site"


@pytest.fixture
def config() -> DeployConfig:
    cfg = DeployConfig()
    cfg.registry_timeout = 0.2
    return cfg


@pytest.fixture
def store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def registry() -> FakeNameRegistry:
    return FakeNameRegistry()
