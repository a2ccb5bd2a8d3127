"""Tests for AssetSelector."""

from collections.abc import Callable

from ghbin.core.github import Asset, AssetSelector, Release

LINUX = "x86_64-unknown-linux-gnu"


def _release(names: list[str]) -> Release:
    return Release(
        id=1,
        tag_name="v1.0.0",
        assets=[
            Asset(i, name, 1, f"https://example.invalid/{name}")
            for i, name in enumerate(names, start=1)
        ],
    )


def test_find_asset_matches_triple_and_archive_suffix() -> None:
    """Test non-archive files are skipped even when the triple matches."""
    release = _release(
        [
            f"tool-{LINUX}-v1.0.0.tar.gz.sig",
            f"tool-{LINUX}-v1.0.0.tar.gz",
            "SHA256SUMS",
        ]
    )

    asset = AssetSelector.find_asset(release, LINUX)

    assert asset is not None
    assert asset.name == f"tool-{LINUX}-v1.0.0.tar.gz"


def test_find_asset_first_match_wins() -> None:
    """Test the first qualifying asset in listed order is chosen."""
    release = _release(
        [f"b-{LINUX}.zip", f"a-{LINUX}.tar.gz", f"c-{LINUX}.tar.xz"]
    )

    assert AssetSelector.find_asset(release, LINUX).name == f"b-{LINUX}.zip"


def test_find_asset_with_bin_name() -> None:
    """Test a bin name narrows the candidates."""
    release = _release([f"server-{LINUX}.tar.gz", f"client-{LINUX}.tar.gz"])

    asset = AssetSelector.find_asset(release, LINUX, "client")

    assert asset.name == f"client-{LINUX}.tar.gz"


def test_find_asset_no_match() -> None:
    """Test None is returned when nothing fits."""
    release = _release(["tool-aarch64-apple-darwin.tar.gz"])

    assert AssetSelector.find_asset(release, LINUX) is None
    assert AssetSelector.find_asset(_release([]), LINUX) is None


def test_find_checksum_asset_priority() -> None:
    """Test SHA256SUMS is preferred over the other known names."""
    release = _release(["checksums.txt", "SHA256SUMS", "sha256sums.txt"])

    assert AssetSelector.find_checksum_asset(release).name == "SHA256SUMS"


def test_find_checksum_asset_alternative_name() -> None:
    """Test checksums.txt is found when SHA256SUMS is absent."""
    release = _release(["tool.tar.gz", "checksums.txt"])

    assert AssetSelector.find_checksum_asset(release).name == "checksums.txt"
    assert AssetSelector.find_checksum_asset(_release(["x.zip"])) is None


def test_find_signature_asset(
    sample_release: Release, make_asset: Callable[..., Asset]
) -> None:
    """Test .sig and .asc siblings are recognised."""
    archive = sample_release.assets[0]
    assert AssetSelector.find_signature_asset(sample_release, archive) is None

    sample_release.assets.append(make_asset(f"{archive.name}.asc", 9))

    signature = AssetSelector.find_signature_asset(sample_release, archive)
    assert signature.name == f"{archive.name}.asc"
