"""Dry-run content store"""

import logging
from typing import Dict, List, Optional, Tuple

from .base import ContentStore
from ..constants import DRY_RUN_ADDRESS_PREFIX
from ..utils.hash_utils import calculate_content_hash

logger = logging.getLogger(__name__)


def is_placeholder_address(address: str) -> bool:
    """Whether an address was produced by a dry run"""
    return address.startswith(DRY_RUN_ADDRESS_PREFIX)


class DryRunContentStore(ContentStore):
    """Simulates uploads without any I/O

    Addresses are ``dryrun:<git blob hash>``: deterministic for equal
    content and never valid as a real transaction id.
    """

    def __init__(self, config=None):
        super().__init__(config)
        self.uploads: List[Tuple[str, str, int]] = []

    @property
    def is_dry_run(self) -> bool:
        return True

    async def _do_initialize(self) -> None:
        pass

    async def upload(self,
                     data: bytes,
                     content_type: str,
                     tags: Optional[Dict[str, str]] = None) -> str:
        address = f"{DRY_RUN_ADDRESS_PREFIX}{calculate_content_hash(data)}"
        self.uploads.append((address, content_type, len(data)))
        logger.debug(f"[dry-run] Would upload {len(data)} bytes ({content_type})")
        return address
