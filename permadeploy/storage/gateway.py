"""HTTP upload gateway content store"""

import json
import logging
from typing import Dict, Any, Optional

import httpx

from .base import ContentStore
from ..api.exceptions import UploadError
from ..constants import DEFAULT_HTTP_TIMEOUT, TRANSACTION_ID_PATTERN

logger = logging.getLogger(__name__)


class GatewayContentStore(ContentStore):
    """Uploads content through an HTTP gateway

    Protocol: ``POST <url>/upload`` with the raw bytes as body, the
    content type in ``Content-Type`` and the tags as a JSON object in
    ``X-Upload-Tags``. The gateway answers ``{"id": "<address>"}``.
    """

    def __init__(self, config: Dict[str, Any] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize gateway store

        Args:
            config: Configuration including:
                - url: Gateway base URL
                - token: Bearer token (optional)
                - timeout: Request timeout in seconds
            transport: Custom httpx transport
        """
        super().__init__(config)

        self.url = (self.config.get('url') or '').rstrip('/')
        if not self.url:
            raise ValueError("Gateway content store requires 'url'")

        self.token = self.config.get('token')
        self.timeout = float(self.config.get('timeout') or DEFAULT_HTTP_TIMEOUT)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _do_initialize(self) -> None:
        """Open the HTTP client"""
        headers = {}
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

    async def upload(self,
                     data: bytes,
                     content_type: str,
                     tags: Optional[Dict[str, str]] = None) -> str:
        """
        Upload content to the gateway

        Args:
            data: Content bytes
            content_type: MIME type
            tags: Metadata tags

        Returns:
            Address returned by the gateway

        Raises:
            UploadError: On transport failure, HTTP error or bad response
        """
        await self.initialize()

        headers = {
            'Content-Type': content_type,
            'X-Upload-Tags': json.dumps(tags or {}, sort_keys=True),
        }

        try:
            response = await self._client.post('/upload', content=data, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadError(
                f"Gateway rejected upload: HTTP {e.response.status_code} {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise UploadError(f"Gateway upload failed: {e}") from e

        try:
            address = response.json()['id']
        except (ValueError, KeyError, TypeError) as e:
            raise UploadError(f"Gateway response has no content id: {response.text[:200]}") from e

        if not isinstance(address, str) or not address:
            raise UploadError(f"Gateway returned an invalid content id: {address!r}")
        if not TRANSACTION_ID_PATTERN.match(address):
            logger.warning(f"Gateway returned a non-standard content id: {address}")

        logger.debug(f"Uploaded {len(data)} bytes as {address}")
        return address
