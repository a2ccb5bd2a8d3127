"""Tests for target triple detection."""

import pytest

from ghbin.core.platform import detect_target_triple, is_windows_target
from ghbin.exceptions import UnsupportedPlatformError


@pytest.mark.parametrize(
    ("machine", "system", "expected"),
    [
        ("x86_64", "Linux", "x86_64-unknown-linux-gnu"),
        ("AMD64", "Windows", "x86_64-pc-windows-msvc"),
        ("arm64", "Darwin", "aarch64-apple-darwin"),
        ("aarch64", "Linux", "aarch64-unknown-linux-gnu"),
    ],
)
def test_detect_target_triple(
    machine: str, system: str, expected: str
) -> None:
    """Test known machine and system names map to triples."""
    assert detect_target_triple(machine, system) == expected


@pytest.mark.parametrize(
    ("machine", "system"), [("riscv64", "Linux"), ("x86_64", "FreeBSD")]
)
def test_detect_target_triple_unsupported(machine: str, system: str) -> None:
    """Test unknown platforms ask for an explicit target."""
    with pytest.raises(UnsupportedPlatformError, match="--target"):
        detect_target_triple(machine, system)


def test_detect_target_triple_uses_platform_module(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test the running platform is consulted when nothing is passed."""
    monkeypatch.setattr("platform.machine", lambda: "x86_64")
    monkeypatch.setattr("platform.system", lambda: "Darwin")

    assert detect_target_triple() == "x86_64-apple-darwin"


def test_is_windows_target() -> None:
    """Test Windows triples are recognised."""
    assert is_windows_target("x86_64-pc-windows-msvc")
    assert not is_windows_target("x86_64-unknown-linux-gnu")
