"""File operation utilities"""

import json
import mimetypes
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Any, Union

# Types the platform mimetypes table is known to miss or get wrong
_CONTENT_TYPES = {
    '.md': 'text/markdown',
    '.js': 'application/javascript',
    '.mjs': 'application/javascript',
    '.json': 'application/json',
    '.svg': 'image/svg+xml',
    '.wasm': 'application/wasm',
    '.webp': 'image/webp',
    '.woff2': 'font/woff2',
}


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


def get_mime_type(file_path: Union[str, Path]) -> str:
    """
    Get MIME type of file

    Args:
        file_path: File path

    Returns:
        MIME type string
    """
    suffix = Path(file_path).suffix.lower()
    if suffix in _CONTENT_TYPES:
        return _CONTENT_TYPES[suffix]

    mime_type, _ = mimetypes.guess_type(str(file_path))
    return mime_type or 'application/octet-stream'


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a relative path to forward slashes

    Args:
        path: Relative path using any separator

    Returns:
        Forward-slash path without leading './'
    """
    text = str(path).replace('\\', '/')
    return str(PurePosixPath(text))


def relative_key(file_path: Path, base_dir: Path) -> str:
    """Manifest/tracker key of a file below base_dir"""
    return normalize_path(file_path.relative_to(base_dir).as_posix())


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = 'w') -> None:
    """
    Write file atomically

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.")

    try:
        if 'b' in mode:
            with os.fdopen(temp_fd, mode) as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
        else:
            with os.fdopen(temp_fd, mode, encoding='utf-8', newline='\n') as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

        # Atomic rename
        os.replace(temp_path, file_path)

    except BaseException:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def dump_json(data: Any) -> str:
    """Serialize to the human-diffable JSON layout used for state files"""
    return json.dumps(data, indent=2, ensure_ascii=False) + '\n'
