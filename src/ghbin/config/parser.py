"""INI parser utilities for ghbin configuration.

This module provides the parser factory, value converters that raise
ConfigurationError with the offending key, and the comment text written
into a freshly generated settings.conf.
"""

import configparser
from datetime import UTC, datetime

from ghbin.constants import (
    CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    KEY_CONFIG_VERSION,
    REPO_SECTION_PREFIX,
    SECTION_DEFAULT,
    SECTION_INSTALL,
    SECTION_NETWORK,
    SECTION_PUBLISH,
)
from ghbin.exceptions import ConfigurationError

_BOOLEAN_STATES = configparser.ConfigParser.BOOLEAN_STATES


def new_parser() -> configparser.ConfigParser:
    """Return a ConfigParser with ghbin's comment and interpolation rules."""
    return configparser.ConfigParser(
        inline_comment_prefixes=("#", ";"),
        interpolation=None,
    )


def parse_bool(section: str, key: str, value: str) -> bool:
    """Convert an INI boolean (yes/no, true/false, on/off, 1/0).

    Raises:
        ConfigurationError: If the value is not a recognised boolean

    """
    try:
        return _BOOLEAN_STATES[value.strip().lower()]
    except KeyError:
        msg = f"[{section}] {key} must be a boolean, got '{value}'"
        raise ConfigurationError(msg) from None


def parse_int(section: str, key: str, value: str) -> int:
    """Convert a non-negative integer value.

    Raises:
        ConfigurationError: If the value is not a non-negative integer

    """
    try:
        number = int(value.strip())
    except ValueError:
        msg = f"[{section}] {key} must be an integer, got '{value}'"
        raise ConfigurationError(msg) from None
    if number < 0:
        msg = f"[{section}] {key} must not be negative"
        raise ConfigurationError(msg)
    return number


def parse_float(section: str, key: str, value: str) -> float:
    """Convert a non-negative number of seconds.

    Raises:
        ConfigurationError: If the value is not a non-negative number

    """
    try:
        number = float(value.strip())
    except ValueError:
        msg = f"[{section}] {key} must be a number, got '{value}'"
        raise ConfigurationError(msg) from None
    if number < 0:
        msg = f"[{section}] {key} must not be negative"
        raise ConfigurationError(msg)
    return number


def parse_list(value: str) -> list[str]:
    """Split a comma separated value, dropping empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


class ConfigCommentManager:
    """Comment blocks written into a generated settings.conf."""

    @staticmethod
    def get_file_header() -> str:
        """Return the header comment with a generation timestamp."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# ghbin configuration
# Settings for publishing binaries to GitHub Releases and installing them.
# Command-line flags always take precedence over values in this file.
#
# Last updated: {timestamp}
# Configuration version: {CONFIG_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Return the comment block printed above each section."""
        return {
            SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# log_level: Detail level for the log file (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level

""",
            SECTION_NETWORK: """
# ========================================
# NETWORK CONFIGURATION
# ========================================
# retry_attempts: Retries after the first attempt (0 disables retrying)
# initial_interval: Seconds to wait before the first retry
# max_interval: Upper bound in seconds for a single backoff delay
# max_elapsed: Give up retrying after this many seconds (0 = no limit)
# timeout_seconds: Socket connect timeout; read timeouts scale from it

""",
            SECTION_PUBLISH: """
# ========================================
# PUBLISH DEFAULTS
# ========================================
# repository: owner/repo to publish to (empty = read from Cargo.toml)
# targets: Comma separated target triples to build
# format: Archive format, tgz or zip
# profile: Build profile (release, dev or a custom profile)
# draft: Create new releases as drafts
# checksum: Upload a SHA256SUMS manifest
# release_notes: Generate release notes from git metadata
# continue_on_error: Skip targets that fail to build
# publish_crate: Run cargo publish after the assets are uploaded
# output_dir: Where archives are written, one subdirectory per tag
# fallback_branch: Compare base for generated notes with fewer than 2 tags

""",
            SECTION_INSTALL: """
# ========================================
# INSTALL DEFAULTS
# ========================================
# install_dir: Directory that receives installed binaries
# verify_signature: Require a .sig or .asc next to the asset
# fallback: Build from source when no release can be fetched
#
# Per-repository overrides use sections named [repo:owner/name]
# with the keys: bin, verify_signature

""",
        }

    @staticmethod
    def get_key_comments() -> dict[str, dict[str, str]]:
        """Return inline comments keyed by section and option."""
        return {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: "# DO NOT MODIFY - Config format version",
            },
        }


def repo_section_name(owner: str, repo: str) -> str:
    """Return the section name holding overrides for ``owner/repo``."""
    return f"{REPO_SECTION_PREFIX}{owner}/{repo}"
