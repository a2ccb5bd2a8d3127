"""Centralized constants module for ghbin.

This module serves as the single source of truth for all shared constants
across the ghbin codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from ghbin.constants import CHUNK_SIZE
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

CONFIG_VERSION: Final[str] = "1.0.0"

CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = ".config"
DEFAULT_CONFIG_SUBDIR: Final[str] = "ghbin"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_BACKUP_COUNT: Final[int] = 3

ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Config section names
SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_PUBLISH: Final[str] = "publish"
SECTION_INSTALL: Final[str] = "install"
# Per-repository overrides: [repo:owner/name]
REPO_SECTION_PREFIX: Final[str] = "repo:"

# DEFAULT keys
KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

# Network keys
KEY_RETRY_ATTEMPTS: Final[str] = "retry_attempts"
KEY_INITIAL_INTERVAL: Final[str] = "initial_interval"
KEY_MAX_INTERVAL: Final[str] = "max_interval"
KEY_MAX_ELAPSED: Final[str] = "max_elapsed"
KEY_TIMEOUT_SECONDS: Final[str] = "timeout_seconds"

# =============================================================================
# Network Constants
# =============================================================================

DEFAULT_RETRY_ATTEMPTS: Final[int] = 3
DEFAULT_INITIAL_INTERVAL: Final[float] = 1.0
DEFAULT_MAX_INTERVAL: Final[float] = 30.0
DEFAULT_BACKOFF_MULTIPLIER: Final[float] = 2.0
DEFAULT_MAX_ELAPSED: Final[float] = 60.0
DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
DEFAULT_CONNECTION_LIMIT: Final[int] = 10

GITHUB_API_URL: Final[str] = "https://api.github.com"
GITHUB_UPLOADS_URL: Final[str] = "https://uploads.github.com"
GITHUB_WEB_URL: Final[str] = "https://github.com"
GITHUB_API_VERSION: Final[str] = "2022-11-28"
USER_AGENT: Final[str] = "ghbin"

HTTP_NOT_FOUND: Final[int] = 404
HTTP_FORBIDDEN: Final[int] = 403
HTTP_TOO_MANY_REQUESTS: Final[int] = 429
HTTP_SERVER_ERROR: Final[int] = 500
HTTP_CLIENT_ERROR: Final[int] = 400

# Warn when the remaining API quota drops below this value
RATE_LIMIT_WARNING_THRESHOLD: Final[int] = 10

# Streaming chunk size for downloads, uploads and digests
CHUNK_SIZE: Final[int] = 8192

# =============================================================================
# Archive Constants
# =============================================================================

# Suffix -> archive kind, longest suffixes first
ARCHIVE_SUFFIXES: Final[tuple[tuple[str, str], ...]] = (
    (".tar.gz", "gz"),
    (".tgz", "gz"),
    (".tar.xz", "xz"),
    (".tar.bz2", "bz2"),
    (".zip", "zip"),
)

WINDOWS_EXECUTABLE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".exe", ".bat", ".cmd", ".ps1"}
)

EXECUTABLE_BITS: Final[int] = 0o111

# Suffix -> MIME type used when uploading assets
CONTENT_TYPES: Final[tuple[tuple[str, str], ...]] = (
    (".tar.gz", "application/gzip"),
    (".tgz", "application/gzip"),
    (".gz", "application/gzip"),
    (".zip", "application/zip"),
    (".xz", "application/x-xz"),
    (".bz2", "application/x-bzip2"),
    (".txt", "text/plain"),
)
DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"

# =============================================================================
# Integrity Constants
# =============================================================================

CHECKSUM_MANIFEST_NAME: Final[str] = "SHA256SUMS"

# Checksum manifests looked up on a release, in priority order
CHECKSUM_FILE_NAMES: Final[tuple[str, ...]] = (
    "SHA256SUMS",
    "checksums.txt",
    "sha256sums.txt",
)

SIGNATURE_SUFFIXES: Final[tuple[str, ...]] = (".sig", ".asc")

# =============================================================================
# Publish / Install Constants
# =============================================================================

DEFAULT_TARGETS: Final[tuple[str, ...]] = (
    "x86_64-unknown-linux-gnu",
    "aarch64-unknown-linux-gnu",
)
DEFAULT_PROFILE: Final[str] = "release"
DEFAULT_OUTPUT_DIR: Final[str] = "target/dist"
DEFAULT_FALLBACK_BRANCH: Final[str] = "main"
DEFAULT_MANIFEST: Final[str] = "Cargo.toml"
SHORT_SHA_LENGTH: Final[int] = 8

TOKEN_ENV_VAR: Final[str] = "GITHUB_TOKEN"
KEYRING_SERVICE: Final[str] = "ghbin-github-token"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_DIR_ENV_VAR: Final[str] = "GHBIN_LOG_DIR"
LOG_FILE_NAME: Final[str] = "ghbin.log"
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = DEFAULT_BACKUP_COUNT

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
