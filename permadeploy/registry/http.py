"""HTTP name registry client"""

import logging
from typing import Dict, Any, Optional

import httpx

from .base import NameRegistry, NameRecord, RegistrationResult, RegistrationStatus
from ..api.exceptions import NameRegistryError
from ..constants import DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)


class HttpNameRegistry(NameRegistry):
    """Name registry behind a small REST API

    - ``GET <url>/records/{name}``: 200 with the record, 404 if absent
    - ``POST <url>/records``: create, 409 if the name exists
    - ``PUT <url>/records/{name}``: update

    Records are JSON objects ``{"name", "transactionId", "ttlSeconds",
    "recordId"}``.
    """

    def __init__(self, config: Dict[str, Any] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize HTTP registry

        Args:
            config: Configuration including:
                - url: Registry base URL
                - token: Bearer token (optional)
                - timeout: Request timeout in seconds
            transport: Custom httpx transport
        """
        super().__init__(config)

        self.url = (self.config.get('url') or '').rstrip('/')
        if not self.url:
            raise ValueError("HTTP name registry requires 'url'")

        self.token = self.config.get('token')
        self.timeout = float(self.config.get('timeout') or DEFAULT_HTTP_TIMEOUT)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _do_initialize(self) -> None:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"

        self._client = httpx.AsyncClient(
            base_url=self.url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _do_close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _record_from_response(name: str, response: httpx.Response) -> NameRecord:
        data = response.json()
        return NameRecord(
            name=data.get('name', name),
            address=data['transactionId'],
            ttl=int(data.get('ttlSeconds', 0)),
            record_id=data.get('recordId'),
        )

    async def lookup(self, name: str) -> Optional[NameRecord]:
        await self.initialize()

        try:
            response = await self._client.get(f"/records/{name}")
        except httpx.HTTPError as e:
            raise NameRegistryError(f"Lookup of {name} failed: {e}", name) from e

        if response.status_code == 404:
            return None
        if response.is_error:
            raise NameRegistryError(
                f"Lookup of {name} failed: HTTP {response.status_code}", name
            )

        try:
            return self._record_from_response(name, response)
        except (ValueError, KeyError, TypeError) as e:
            raise NameRegistryError(f"Malformed record for {name}: {e}", name) from e

    async def create(self, name: str, address: str, ttl: int) -> RegistrationResult:
        await self.initialize()

        payload = {'name': name, 'transactionId': address, 'ttlSeconds': ttl}
        try:
            response = await self._client.post('/records', json=payload)
        except httpx.TimeoutException as e:
            return RegistrationResult(status=RegistrationStatus.TIMEOUT, name=name,
                                      message=f"Registry did not answer: {e}")
        except httpx.HTTPError as e:
            return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                      message=str(e))

        if response.status_code == 409:
            existing_address = None
            try:
                existing_address = response.json().get('transactionId')
            except ValueError:
                pass
            return RegistrationResult(status=RegistrationStatus.ALREADY_EXISTS, name=name,
                                      message=f"Name {name} already registered",
                                      existing_address=existing_address)
        if response.status_code in (408, 504):
            return RegistrationResult(status=RegistrationStatus.TIMEOUT, name=name,
                                      message=f"HTTP {response.status_code}")
        if response.is_error:
            return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                      message=f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            record_id = response.json().get('recordId')
        except ValueError:
            record_id = None
        return RegistrationResult(status=RegistrationStatus.CREATED, name=name,
                                  record_id=record_id)

    async def update(self, name: str, address: str, ttl: int) -> RegistrationResult:
        await self.initialize()

        payload = {'transactionId': address, 'ttlSeconds': ttl}
        try:
            response = await self._client.put(f"/records/{name}", json=payload)
        except httpx.TimeoutException as e:
            return RegistrationResult(status=RegistrationStatus.TIMEOUT, name=name,
                                      message=f"Registry did not answer: {e}")
        except httpx.HTTPError as e:
            return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                      message=str(e))

        if response.is_error:
            return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                      message=f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            record_id = response.json().get('recordId')
        except ValueError:
            record_id = None
        return RegistrationResult(status=RegistrationStatus.UPDATED, name=name,
                                  record_id=record_id)
