"""Hash calculation utilities"""

import hashlib
from pathlib import Path

import aiofiles
import aiofiles.os

from ..constants import DEFAULT_CHUNK_SIZE


def _blob_header(size: int) -> bytes:
    return f"blob {size}\0".encode("ascii")


def calculate_content_hash(content: bytes) -> str:
    """
    Calculate git blob id of content bytes

    Args:
        content: Content bytes

    Returns:
        40 character hex digest, identical to `git hash-object --no-filters`
    """
    hash_func = hashlib.sha1()
    hash_func.update(_blob_header(len(content)))
    hash_func.update(content)
    return hash_func.hexdigest()


def calculate_git_blob_hash(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Calculate git blob id of a file

    Only the bytes are hashed; mtime, permissions and line ending
    settings play no part.

    Args:
        file_path: Path to file
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    hash_func = hashlib.sha1()

    with open(file_path, 'rb') as f:
        # Size is read from the open handle so header and body agree
        size = f.seek(0, 2)
        f.seek(0)
        hash_func.update(_blob_header(size))
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)

    return hash_func.hexdigest()


async def calculate_git_blob_hash_async(file_path: Path,
                                        chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Calculate git blob id of a file asynchronously

    Args:
        file_path: Path to file
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    hash_func = hashlib.sha1()
    size = (await aiofiles.os.stat(file_path)).st_size
    hash_func.update(_blob_header(size))

    read = 0
    async with aiofiles.open(file_path, 'rb') as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            read += len(chunk)
            hash_func.update(chunk)

    # Header and body must describe the same bytes
    if read != size:
        raise OSError(f"{file_path} changed size while hashing")

    return hash_func.hexdigest()


def calculate_sha256(content: bytes) -> str:
    """SHA256 hex digest of content bytes"""
    return hashlib.sha256(content).hexdigest()
