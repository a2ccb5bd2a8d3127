"""Reading package metadata from ``Cargo.toml``.

Supports ``version.workspace = true`` / ``repository.workspace = true``
inheritance by walking up to the nearest manifest that declares a
``[workspace]`` table.
"""

import tomllib
from pathlib import Path
from typing import Any

from ghbin.constants import GITHUB_WEB_URL
from ghbin.exceptions import ConfigurationError, InvalidRepositoryError
from ghbin.logger import get_logger

logger = get_logger(__name__)


def _load(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        msg = f"manifest not found: {path}"
        raise ConfigurationError(msg) from None
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"cannot parse {path}: {e}"
        raise ConfigurationError(msg) from e


def find_workspace_manifest(start: Path) -> Path | None:
    """Return the closest workspace ``Cargo.toml`` at or above ``start``."""
    directory = start.resolve()
    if directory.is_file():
        directory = directory.parent
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / "Cargo.toml"
        if not candidate.is_file():
            continue
        try:
            data = _load(candidate)
        except ConfigurationError:
            continue
        if "workspace" in data:
            return candidate
    return None


def _package_field(manifest_path: Path, key: str) -> str | None:
    """Return ``package.<key>``, following workspace inheritance."""
    package = _load(manifest_path).get("package", {})
    value = package.get(key)
    if isinstance(value, str):
        return value

    # Inherited ({ workspace = true }) or absent: consult the workspace
    workspace_manifest = find_workspace_manifest(manifest_path)
    if workspace_manifest is None:
        return None
    workspace = _load(workspace_manifest).get("workspace", {})
    inherited = workspace.get("package", {}).get(key)
    return inherited if isinstance(inherited, str) else None


def read_package_version(manifest_path: Path) -> str:
    """Return the crate version.

    Raises:
        ConfigurationError: If the manifest has no resolvable version

    """
    version = _package_field(manifest_path, "version")
    if not version:
        msg = f"no version field found in {manifest_path}"
        raise ConfigurationError(msg)
    return version


def parse_repository(spec: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its parts.

    Raises:
        InvalidRepositoryError: Unless there are exactly two non-empty parts

    """
    parts = spec.strip().split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004
        msg = "expected owner/repo"
        raise InvalidRepositoryError(msg, spec)
    return parts[0], parts[1]


def read_repository(manifest_path: Path) -> tuple[str, str]:
    """Return (owner, repo) from ``package.repository``.

    Only ``https://github.com/owner/repo[.git]`` URLs are understood.

    Raises:
        ConfigurationError: If the field is missing or not a GitHub URL

    """
    url = _package_field(manifest_path, "repository")
    if not url:
        msg = (
            f"no repository field in {manifest_path}; "
            "pass --repository owner/repo"
        )
        raise ConfigurationError(msg)

    trimmed = url.strip().rstrip("/").removesuffix(".git")
    prefix = f"{GITHUB_WEB_URL}/"
    if not trimmed.startswith(prefix):
        msg = f"repository URL is not on GitHub: {url}"
        raise ConfigurationError(msg)
    try:
        return parse_repository(trimmed.removeprefix(prefix))
    except InvalidRepositoryError:
        msg = f"cannot parse repository from {url}"
        raise ConfigurationError(msg) from None
