"""Tests for Cargo.toml metadata reading."""

from pathlib import Path

import pytest

from ghbin.core.manifest import (
    find_workspace_manifest,
    parse_repository,
    read_package_version,
    read_repository,
)
from ghbin.exceptions import ConfigurationError, InvalidRepositoryError


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_read_package_version(tmp_path: Path) -> None:
    """Test a plain package version is returned."""
    manifest = _write(
        tmp_path / "Cargo.toml", '[package]\nname = "t"\nversion = "1.2.3"\n'
    )

    assert read_package_version(manifest) == "1.2.3"


def test_version_inherited_from_workspace(tmp_path: Path) -> None:
    """Test ``version.workspace = true`` resolves to the workspace value."""
    _write(
        tmp_path / "Cargo.toml",
        '[workspace]\nmembers = ["crates/*"]\n\n'
        '[workspace.package]\nversion = "0.7.0"\n'
        'repository = "https://github.com/acme/tool"\n',
    )
    member = _write(
        tmp_path / "crates" / "cli" / "Cargo.toml",
        '[package]\nname = "cli"\nversion.workspace = true\n'
        "repository.workspace = true\n",
    )

    workspace = (tmp_path / "Cargo.toml").resolve()
    assert find_workspace_manifest(member) == workspace
    assert read_package_version(member) == "0.7.0"
    assert read_repository(member) == ("acme", "tool")


def test_missing_version(tmp_path: Path) -> None:
    """Test a manifest without a version is a configuration error."""
    manifest = _write(tmp_path / "Cargo.toml", '[package]\nname = "t"\n')

    with pytest.raises(ConfigurationError, match="no version"):
        read_package_version(manifest)


def test_missing_manifest(tmp_path: Path) -> None:
    """Test a missing file is a configuration error."""
    with pytest.raises(ConfigurationError, match="not found"):
        read_package_version(tmp_path / "Cargo.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    """Test unparsable TOML is a configuration error."""
    manifest = _write(tmp_path / "Cargo.toml", "[package\n")

    with pytest.raises(ConfigurationError, match="cannot parse"):
        read_package_version(manifest)


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/acme/tool",
        "https://github.com/acme/tool.git",
        "https://github.com/acme/tool/",
    ],
)
def test_read_repository(tmp_path: Path, url: str) -> None:
    """Test GitHub URLs are reduced to owner and repo."""
    manifest = _write(
        tmp_path / "Cargo.toml", f'[package]\nrepository = "{url}"\n'
    )

    assert read_repository(manifest) == ("acme", "tool")


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ('[package]\nname = "t"\n', "no repository"),
        ('[package]\nrepository = "https://gitlab.com/a/b"\n', "not on"),
        (
            '[package]\nrepository = "https://github.com/a/b/c"\n',
            "cannot parse",
        ),
    ],
)
def test_read_repository_errors(
    tmp_path: Path, text: str, match: str
) -> None:
    """Test missing or non-GitHub repository fields are rejected."""
    manifest = _write(tmp_path / "Cargo.toml", text)

    with pytest.raises(ConfigurationError, match=match):
        read_repository(manifest)


def test_parse_repository() -> None:
    """Test owner/repo strings are split and validated."""
    assert parse_repository(" acme/tool ") == ("acme", "tool")
    with pytest.raises(InvalidRepositoryError):
        parse_repository("acme")
