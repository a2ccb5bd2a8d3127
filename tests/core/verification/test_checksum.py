"""Tests for SHA-256 manifest parsing and verification."""

import pytest

from ghbin.core.verification import (
    ChecksumStatus,
    find_checksum,
    parse_checksum_manifest,
    verify_checksum,
)

DIGEST_A = "a" * 64
DIGEST_B = "b" * 64
DIGEST_C = "C" * 64

MANIFEST = f"""# generated by ghbin
{DIGEST_A}  tool-x86_64-unknown-linux-gnu-v1.tar.gz
{DIGEST_B} *tool-aarch64-apple-darwin-v1.tar.gz

not-a-digest  ignored.zip
{DIGEST_C}  dist/tool-x86_64-pc-windows-msvc-v1.zip
"""


def test_parse_checksum_manifest_skips_noise() -> None:
    """Test comments, blanks and malformed lines are ignored."""
    entries = parse_checksum_manifest(MANIFEST)

    assert entries == [
        (DIGEST_A, "tool-x86_64-unknown-linux-gnu-v1.tar.gz"),
        (DIGEST_B, "tool-aarch64-apple-darwin-v1.tar.gz"),
        (DIGEST_C.lower(), "dist/tool-x86_64-pc-windows-msvc-v1.zip"),
    ]


def test_find_checksum_binary_marker_and_path_prefix() -> None:
    """Test ``*`` markers and directory prefixes do not prevent a match."""
    assert (
        find_checksum(MANIFEST, "tool-aarch64-apple-darwin-v1.tar.gz")
        == DIGEST_B
    )
    assert (
        find_checksum(MANIFEST, "tool-x86_64-pc-windows-msvc-v1.zip")
        == DIGEST_C.lower()
    )


def test_find_checksum_requires_whole_name() -> None:
    """Test a name that is only a suffix of an entry does not match."""
    assert find_checksum(MANIFEST, "v1.tar.gz") is None


def test_find_checksum_first_entry_wins() -> None:
    """Test the first line for a name is authoritative."""
    text = f"{DIGEST_A}  a.zip\n{DIGEST_B}  a.zip\n"

    assert find_checksum(text, "a.zip") == DIGEST_A


@pytest.mark.parametrize(
    ("actual", "status"),
    [
        (DIGEST_A, ChecksumStatus.OK),
        (DIGEST_A.upper(), ChecksumStatus.OK),
        (DIGEST_B, ChecksumStatus.MISMATCH),
    ],
)
def test_verify_checksum(actual: str, status: ChecksumStatus) -> None:
    """Test digests are compared case-insensitively."""
    result = verify_checksum(
        MANIFEST, "tool-x86_64-unknown-linux-gnu-v1.tar.gz", actual
    )

    assert result.status is status
    assert result.passed is (status is ChecksumStatus.OK)
    assert result.expected == DIGEST_A


def test_verify_checksum_not_in_manifest() -> None:
    """Test a missing entry is distinguished from a mismatch."""
    result = verify_checksum(MANIFEST, "other.tar.gz", DIGEST_A)

    assert result.status is ChecksumStatus.NOT_IN_MANIFEST
    assert result.expected is None
    assert not result.passed


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (f"{DIGEST_A}\tfile.tar.gz", DIGEST_A),
        ("abc123  ./dist/file.tar.gz", "abc123"),
        (f"SHA256 (file.tar.gz) = {DIGEST_C}", DIGEST_C.lower()),
        (f"SHA256 (./dist/file.tar.gz)={DIGEST_B}", DIGEST_B),
    ],
)
def test_find_checksum_line_layouts(line: str, expected: str) -> None:
    """Test tab, path-prefixed and BSD-style lines match the base name."""
    assert find_checksum(f"{line}\n", "file.tar.gz") == expected


def test_parse_checksum_manifest_skips_other_bsd_algorithms() -> None:
    """Test BSD lines for other hashes are not taken as SHA-256."""
    text = (
        f"MD5 (file.tar.gz) = {'d' * 32}\n"
        f"SHA512 (file.tar.gz) = {'e' * 128}\n"
    )

    assert parse_checksum_manifest(text) == []
    assert verify_checksum(text, "file.tar.gz", DIGEST_A).status is (
        ChecksumStatus.NOT_IN_MANIFEST
    )
