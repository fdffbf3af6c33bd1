"""Exception definitions for permadeploy"""

from typing import Optional

from ..constants import ErrorCode


class PermadeployError(Exception):
    """Base exception for permadeploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigurationError(PermadeployError):
    """Pre-flight configuration error (nothing has been mutated)"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class VersionControlError(PermadeployError):
    """A git command failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.VERSION_CONTROL_ERROR)


class ContentHashError(PermadeployError):
    """File content could not be hashed"""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to hash {path}: {reason}", ErrorCode.CONTENT_HASH_ERROR)
        self.path = path


class UploadError(PermadeployError):
    """Content upload error"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.UPLOAD_FAILED)
        self.path = path


class ManifestIOError(PermadeployError):
    """Manifest or tracker file unreadable, corrupt or unwritable"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.MANIFEST_IO_ERROR)
        self.path = path


class NameRegistryError(PermadeployError):
    """Name registry operation error"""

    def __init__(self, message: str, name: Optional[str] = None,
                 error_code: str = ErrorCode.NAME_REGISTRY_ERROR):
        super().__init__(message, error_code)
        self.name = name


class NameClaimedError(NameRegistryError):
    """Deployment name already points at a different manifest"""

    def __init__(self, name: str, existing_address: str, address: str):
        message = (
            f"Name already claimed: {name} -> {existing_address} "
            f"(this deployment produced {address})"
        )
        super().__init__(message, name, ErrorCode.NAME_ALREADY_CLAIMED)
        self.existing_address = existing_address
        self.address = address
