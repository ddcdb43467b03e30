"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 4


class MessageName(Enum):
    """Diagnostic codes attached to errors and report entries."""

    RESOLVER_NOT_FOUND = "RESOLVER_NOT_FOUND"
    FETCH_FAILED = "FETCH_FAILED"
    REMOTE_INVALID = "REMOTE_INVALID"
    REMOTE_NOT_FOUND = "REMOTE_NOT_FOUND"
    DEPRECATED_PACKAGE = "DEPRECATED_PACKAGE"
    CACHE_CHECKSUM_MISMATCH = "CACHE_CHECKSUM_MISMATCH"
    INVALID_RANGE = "INVALID_RANGE"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROTOCOL = "skypack:"
    API_URL = "https://api.skypack.dev"
    CDN_URL = "https://cdn.skypack.dev"
    PINNED_URL_HEADER = "x-pinned-url"

    MAIN_FILE = "index.mjs"
    MANIFEST_FILE = "package.json"
    VENDOR_DIR = "node_modules"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    COMPRESSION_LEVEL = 6  # 0 stores archive members uncompressed
    CACHE_DIR = ".skypack-cache"
    EXPAND_EXPORT_MAPS = False
    LOG_FORMAT = "[%(levelname)s] %(message)s"

    ENV_API_URL = "SKYPACK_PROXY_API_URL"
    ENV_CDN_URL = "SKYPACK_PROXY_CDN_URL"
    ENV_CACHE_DIR = "SKYPACK_PROXY_CACHE_DIR"
