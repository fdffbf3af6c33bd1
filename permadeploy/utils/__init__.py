# permadeploy/utils/__init__.py
"""Utility functions for permadeploy"""

from .file_utils import (
    format_size,
    get_mime_type,
    normalize_path,
    relative_key,
    atomic_write,
    dump_json,
)

from .hash_utils import (
    calculate_content_hash,
    calculate_git_blob_hash,
    calculate_git_blob_hash_async,
    calculate_sha256,
)

from .async_utils import (
    run_async,
    run_in_chunks,
)

__all__ = [
    # File utilities
    "format_size",
    "get_mime_type",
    "normalize_path",
    "relative_key",
    "atomic_write",
    "dump_json",

    # Hash utilities
    "calculate_content_hash",
    "calculate_git_blob_hash",
    "calculate_git_blob_hash_async",
    "calculate_sha256",

    # Async utilities
    "run_async",
    "run_in_chunks",
]
