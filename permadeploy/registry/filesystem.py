"""Filesystem name registry implementation"""

import asyncio
import json
import logging
import uuid
from pathlib import Path
from typing import Dict, Any, Optional

from .base import NameRegistry, NameRecord, RegistrationResult, RegistrationStatus
from ..api.exceptions import NameRegistryError
from ..constants import DEFAULT_REGISTRY_FILE
from ..utils.file_utils import atomic_write, dump_json

logger = logging.getLogger(__name__)


class FilesystemNameRegistry(NameRegistry):
    """Name records kept in one JSON file

    The file maps each name to its record and is rewritten atomically
    on every change. Writes within one process are serialized.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize filesystem registry

        Args:
            config: Configuration including:
                - path: Records file (default: .permadeploy-registry.json)
        """
        super().__init__(config)
        self.records_path = Path(self.config.get('path') or DEFAULT_REGISTRY_FILE)
        self._lock: Optional[asyncio.Lock] = None

    async def _do_initialize(self) -> None:
        self.records_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.records_path.exists():
            return {}
        try:
            data = json.loads(self.records_path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise NameRegistryError(f"Cannot read registry file {self.records_path}: {e}") from e
        if not isinstance(data, dict):
            raise NameRegistryError(f"Registry file {self.records_path} is not a JSON object")
        return data

    def _save(self, records: Dict[str, Dict[str, Any]]) -> None:
        try:
            atomic_write(self.records_path, dump_json(dict(sorted(records.items()))))
        except OSError as e:
            raise NameRegistryError(f"Cannot write registry file {self.records_path}: {e}") from e

    async def lookup(self, name: str) -> Optional[NameRecord]:
        await self.initialize()
        entry = self._load().get(name)
        if entry is None:
            return None
        return NameRecord.from_dict({'name': name, **entry})

    async def create(self, name: str, address: str, ttl: int) -> RegistrationResult:
        await self.initialize()

        async with self._lock:
            try:
                records = self._load()
                existing = records.get(name)
                if existing is not None:
                    return RegistrationResult(
                        status=RegistrationStatus.ALREADY_EXISTS,
                        name=name,
                        record_id=existing.get('recordId'),
                        message=f"Name {name} already registered",
                        existing_address=existing.get('transactionId'),
                    )

                record = NameRecord(name=name, address=address, ttl=ttl,
                                    record_id=uuid.uuid4().hex)
                entry = record.to_dict()
                del entry['name']
                records[name] = entry
                self._save(records)
            except NameRegistryError as e:
                return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                          message=str(e))

        logger.debug(f"Registered {name} -> {address}")
        return RegistrationResult(status=RegistrationStatus.CREATED, name=name,
                                  record_id=record.record_id)

    async def update(self, name: str, address: str, ttl: int) -> RegistrationResult:
        await self.initialize()

        async with self._lock:
            try:
                records = self._load()
                existing = records.get(name)
                if existing is None:
                    return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                              message=f"Name {name} is not registered")

                existing.update({'transactionId': address, 'ttlSeconds': ttl})
                self._save(records)
            except NameRegistryError as e:
                return RegistrationResult(status=RegistrationStatus.FAILED, name=name,
                                          message=str(e))

        logger.debug(f"Updated {name} -> {address}")
        return RegistrationResult(status=RegistrationStatus.UPDATED, name=name,
                                  record_id=existing.get('recordId'))
