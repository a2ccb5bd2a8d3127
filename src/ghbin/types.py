"""Centralized type definitions for ghbin.

This module contains all TypedDict definitions used across the application
to ensure consistency and avoid duplication.
"""

from pathlib import Path
from typing import TypedDict

# =============================================================================
# Network and Configuration Types
# =============================================================================


class NetworkConfig(TypedDict):
    """Network configuration options."""

    retry_attempts: int
    initial_interval: float
    max_interval: float
    max_elapsed: float
    timeout_seconds: int


class PublishConfig(TypedDict):
    """Defaults for the publish command."""

    repository: str
    targets: list[str]
    format: str
    profile: str
    draft: bool
    checksum: bool
    release_notes: bool
    continue_on_error: bool
    publish_crate: bool
    output_dir: Path
    fallback_branch: str


class InstallConfig(TypedDict):
    """Defaults for the install command."""

    install_dir: Path
    verify_signature: bool
    fallback: bool


class RepoConfig(TypedDict, total=False):
    """Per-repository overrides from a ``[repo:owner/name]`` section."""

    bin: str
    verify_signature: bool


class GlobalConfig(TypedDict):
    """Global application configuration."""

    config_version: str
    log_level: str
    console_log_level: str
    network: NetworkConfig
    publish: PublishConfig
    install: InstallConfig
    repos: dict[str, RepoConfig]
