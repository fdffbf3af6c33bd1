"""Tests for name registries."""

import json
from pathlib import Path

import httpx
import pytest

from permadeploy.api.exceptions import NameRegistryError
from permadeploy.models.config import NameRegistryConfig
from permadeploy.registry import (
    FilesystemNameRegistry,
    HttpNameRegistry,
    RegistrationStatus,
    RegistryFactory,
)


class TestFilesystemNameRegistry:
    @pytest.mark.asyncio
    async def test_create_then_lookup(self, tmp_path: Path) -> None:
        async with FilesystemNameRegistry({"path": str(tmp_path / "records.json")}) as registry:
            result = await registry.create("abc123", "manifest-1", 60)
            assert result.status == RegistrationStatus.CREATED
            assert result.is_success

            record = await registry.lookup("abc123")
            assert record.address == "manifest-1"
            assert record.ttl == 60
            assert record.record_id == result.record_id

    @pytest.mark.asyncio
    async def test_duplicate_create(self, tmp_path: Path) -> None:
        registry = FilesystemNameRegistry({"path": str(tmp_path / "records.json")})
        await registry.create("abc123", "manifest-1", 60)

        result = await registry.create("abc123", "manifest-2", 60)

        assert result.status == RegistrationStatus.ALREADY_EXISTS
        assert result.existing_address == "manifest-1"
        assert (await registry.lookup("abc123")).address == "manifest-1"

    @pytest.mark.asyncio
    async def test_update(self, tmp_path: Path) -> None:
        registry = FilesystemNameRegistry({"path": str(tmp_path / "records.json")})
        assert (await registry.update("abc", "m", 60)).status == RegistrationStatus.FAILED

        await registry.create("abc", "m1", 60)
        result = await registry.update("abc", "m2", 120)

        assert result.status == RegistrationStatus.UPDATED
        record = await registry.lookup("abc")
        assert (record.address, record.ttl) == ("m2", 120)

    @pytest.mark.asyncio
    async def test_lookup_unknown(self, tmp_path: Path) -> None:
        registry = FilesystemNameRegistry({"path": str(tmp_path / "records.json")})
        assert await registry.lookup("nope") is None

    @pytest.mark.asyncio
    async def test_corrupt_records_file(self, tmp_path: Path) -> None:
        path = tmp_path / "records.json"
        path.write_text("{oops")
        registry = FilesystemNameRegistry({"path": str(path)})

        with pytest.raises(NameRegistryError):
            await registry.lookup("abc")
        result = await registry.create("abc", "m", 60)
        assert result.status == RegistrationStatus.FAILED


class TestHttpNameRegistry:
    @pytest.mark.asyncio
    async def test_create_payload(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["json"] = json.loads(request.content)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(201, json={"recordId": "r-1"})

        registry = HttpNameRegistry({"url": "https://names.test", "token": "tkn"},
                                    transport=httpx.MockTransport(handler))
        async with registry:
            result = await registry.create("abc", "manifest-1", 60)

        assert result.status == RegistrationStatus.CREATED
        assert result.record_id == "r-1"
        assert seen["url"] == "https://names.test/records"
        assert seen["json"] == {"name": "abc", "transactionId": "manifest-1", "ttlSeconds": 60}
        assert seen["auth"] == "Bearer tkn"

    @pytest.mark.asyncio
    async def test_conflict_is_already_exists(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(409, json={"transactionId": "other"})
        )
        async with HttpNameRegistry({"url": "https://names.test"}, transport=transport) as registry:
            result = await registry.create("abc", "manifest-1", 60)

        assert result.status == RegistrationStatus.ALREADY_EXISTS
        assert result.existing_address == "other"

    @pytest.mark.asyncio
    async def test_timeout_reported(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with HttpNameRegistry({"url": "https://names.test"},
                                    transport=httpx.MockTransport(handler)) as registry:
            result = await registry.create("abc", "manifest-1", 60)

        assert result.status == RegistrationStatus.TIMEOUT

    @pytest.mark.asyncio
    async def test_server_error_is_failure(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="down"))
        async with HttpNameRegistry({"url": "https://names.test"}, transport=transport) as registry:
            result = await registry.create("abc", "manifest-1", 60)
        assert result.status == RegistrationStatus.FAILED

    @pytest.mark.asyncio
    async def test_lookup(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/records/abc":
                return httpx.Response(200, json={
                    "name": "abc", "transactionId": "manifest-1", "ttlSeconds": 60,
                })
            return httpx.Response(404)

        async with HttpNameRegistry({"url": "https://names.test"},
                                    transport=httpx.MockTransport(handler)) as registry:
            record = await registry.lookup("abc")
            missing = await registry.lookup("zzz")

        assert record.address == "manifest-1"
        assert missing is None

    @pytest.mark.asyncio
    async def test_lookup_error_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with HttpNameRegistry({"url": "https://names.test"}, transport=transport) as registry:
            with pytest.raises(NameRegistryError):
                await registry.lookup("abc")

    @pytest.mark.asyncio
    async def test_update(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            return httpx.Response(200, json={})

        async with HttpNameRegistry({"url": "https://names.test"},
                                    transport=httpx.MockTransport(handler)) as registry:
            result = await registry.update("abc", "manifest-2", 60)

        assert result.status == RegistrationStatus.UPDATED
        assert (seen["method"], seen["path"]) == ("PUT", "/records/abc")


class TestRegistryFactory:
    def test_filesystem(self, tmp_path: Path) -> None:
        registry = RegistryFactory.create(NameRegistryConfig(path=str(tmp_path / "r.json")))
        assert isinstance(registry, FilesystemNameRegistry)

    def test_http(self) -> None:
        registry = RegistryFactory.create(NameRegistryConfig(type="http", url="https://n.test"))
        assert isinstance(registry, HttpNameRegistry)

    def test_http_requires_url(self) -> None:
        with pytest.raises(ValueError):
            NameRegistryConfig(type="http")
