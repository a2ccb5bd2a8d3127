"""Asset selection logic for GitHub releases.

Asset names are matched by substring only; they are never parsed into
name/target/version fields, since projects name their archives freely.
"""

from ghbin.constants import CHECKSUM_FILE_NAMES, SIGNATURE_SUFFIXES
from ghbin.core.archive import is_archive
from ghbin.core.github.models.asset import Asset
from ghbin.core.github.models.release import Release
from ghbin.logger import get_logger

logger = get_logger(__name__)


class AssetSelector:
    """Picks the install archive and its companion files from a release."""

    @staticmethod
    def find_asset(
        release: Release,
        target_triple: str,
        bin_name: str | None = None,
    ) -> Asset | None:
        """Return the first asset that fits ``target_triple``.

        An asset qualifies when its name contains the triple, ends in an
        archive suffix and, if ``bin_name`` is given, contains it too.
        Assets are scanned once in listed order; the first hit wins.

        Args:
            release: Release to search
            target_triple: e.g. ``x86_64-unknown-linux-gnu``
            bin_name: Optional binary name filter

        Returns:
            Matching asset or None

        """
        for asset in release.assets:
            if target_triple not in asset.name:
                continue
            if not is_archive(asset.name):
                continue
            if bin_name and bin_name not in asset.name:
                continue
            logger.debug("Selected asset %s for %s", asset.name, target_triple)
            return asset
        return None

    @staticmethod
    def find_checksum_asset(release: Release) -> Asset | None:
        """Return the checksum manifest, trying known names in order."""
        for name in CHECKSUM_FILE_NAMES:
            asset = release.get_asset(name)
            if asset is not None:
                return asset
        return None

    @staticmethod
    def find_signature_asset(release: Release, asset: Asset) -> Asset | None:
        """Return ``<asset>.sig`` or ``<asset>.asc`` when published."""
        for suffix in SIGNATURE_SUFFIXES:
            signature = release.get_asset(f"{asset.name}{suffix}")
            if signature is not None:
                return signature
        return None
