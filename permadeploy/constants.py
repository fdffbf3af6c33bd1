"""Global constants for permadeploy"""

from enum import Enum
import re

from .__version__ import __version__

APP_NAME = "permadeploy"
LOG_FORMAT = "%(message)s"

# Manifest wire format (Arweave path manifest), never derived from deployment count
MANIFEST_TYPE = "arweave/paths"
MANIFEST_SPEC_VERSION = "0.2.0"
MANIFEST_CONTENT_TYPE = "application/x.arweave-manifest+json"

# Per-application bookkeeping files
MANIFEST_FILE = "manifest.json"
TRACKER_FILE = "deployment-tracker.json"
OVERRIDES_FILE = "manifest-overrides.json"
UPLOAD_TAGS_FILE = "upload-tags.json"
PROJECT_CONFIG_FILE = ".permadeploy.yaml"

BOOKKEEPING_FILES = frozenset([
    MANIFEST_FILE,
    TRACKER_FILE,
    OVERRIDES_FILE,
    UPLOAD_TAGS_FILE,
    PROJECT_CONFIG_FILE,
])

# Entry point search order
DEFAULT_ENTRY_POINTS = [
    "index.html",
    "main.html",
    "app.html",
    "index.js",
    "main.js",
    "app.js",
    "index.txt",
]

# Default configuration values
DEFAULT_APP_NAME = "PermaDeploy"
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB
DEFAULT_REGISTRY_TTL = 60  # seconds
DEFAULT_REGISTRY_TIMEOUT = 120.0  # seconds
DEFAULT_HTTP_TIMEOUT = 60.0  # seconds
DEFAULT_NAME_LENGTH = 16
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_UPLOAD_CONCURRENCY = 1
DEFAULT_STORE_DIR = ".permadeploy-store"
DEFAULT_REGISTRY_FILE = ".permadeploy-registry.json"

DEFAULT_UPLOAD_TAGS = {
    "App-Name": DEFAULT_APP_NAME,
    "App-Version": __version__,
}

# Dry-run placeholder addresses. ':' never occurs in a base64url transaction id.
DRY_RUN_ADDRESS_PREFIX = "dryrun:"
TRANSACTION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{43}$")

SKIP_REASON_NO_CHANGES = "no_changes"


class StorageType(Enum):
    FILESYSTEM = "filesystem"
    GATEWAY = "gateway"


class RegistryType(Enum):
    FILESYSTEM = "filesystem"
    HTTP = "http"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "PD001"
    VERSION_CONTROL_ERROR = "PD002"
    UPLOAD_FAILED = "PD004"
    MANIFEST_IO_ERROR = "PD007"
    CONTENT_HASH_ERROR = "PD015"
    NAME_REGISTRY_ERROR = "PD016"
    NAME_ALREADY_CLAIMED = "PD017"
    UNEXPECTED_ERROR = "PD099"


# Environment variables
ENV_CONFIG_PATH = "PERMADEPLOY_CONFIG"
ENV_LOG_LEVEL = "PERMADEPLOY_LOG_LEVEL"
ENV_APP_NAME = "PERMADEPLOY_APP_NAME"
ENV_STORE_URL = "PERMADEPLOY_STORE_URL"
ENV_STORE_TOKEN = "PERMADEPLOY_STORE_TOKEN"
ENV_REGISTRY_URL = "PERMADEPLOY_REGISTRY_URL"
ENV_REGISTRY_TOKEN = "PERMADEPLOY_REGISTRY_TOKEN"
ENV_REGISTRY_TTL = "PERMADEPLOY_REGISTRY_TTL"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_SKIP = "⏭"
EMOJI_ROCKET = "🚀"
EMOJI_LINK = "🔗"
