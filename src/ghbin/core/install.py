"""Install orchestrator: fetch, verify and install a prebuilt binary.

Everything is downloaded and extracted into a private work directory.
Binaries are copied into the install directory only after the checksum
(and, when requested, signature) checks have passed; the work directory is
removed whatever the outcome.
"""

import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from ghbin.config.paths import Paths
from ghbin.constants import CHECKSUM_FILE_NAMES
from ghbin.core.archive import (
    compute_digest,
    extract_archive,
    find_executables,
    make_executable,
)
from ghbin.core.fallback import CargoSourceInstaller
from ghbin.core.github import Asset, AssetSelector, Release, ReleaseClient
from ghbin.core.platform import detect_target_triple, is_windows_target
from ghbin.core.verification import (
    ChecksumStatus,
    SignatureStatus,
    verify_checksum,
)
from ghbin.exceptions import (
    AssetNotFoundError,
    BinaryNotFoundError,
    ChecksumEntryNotFoundError,
    ChecksumFileNotFoundError,
    ChecksumMismatchError,
    GhbinError,
    InstallationError,
    InvalidRepositoryError,
    NoExecutablesFoundError,
    SignatureNotFoundError,
)
from ghbin.logger import get_logger

logger = get_logger(__name__)


def parse_install_target(spec: str) -> tuple[str, str, str | None]:
    """Split ``owner/repo[@tag]`` into (owner, repo, tag).

    The tag is separated at the last ``@``.

    Raises:
        InvalidRepositoryError: Unless there are exactly two non-empty
            path parts (and a non-empty tag after ``@``)

    """
    repo_part, sep, tag = spec.strip().rpartition("@")
    if not sep:
        repo_part, tag = tag, ""
    elif not tag:
        msg = "empty tag after '@'"
        raise InvalidRepositoryError(msg, spec)

    parts = repo_part.split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004
        msg = "expected owner/repo[@tag]"
        raise InvalidRepositoryError(msg, spec)
    return parts[0], parts[1], tag or None


@dataclass(slots=True)
class InstallOptions:
    """What to install and where."""

    owner: str
    repo: str
    tag: str | None = None
    bin_name: str | None = None
    all_bins: bool = False
    target: str | None = None
    install_dir: Path = field(
        default_factory=lambda: Paths.DEFAULT_INSTALL_DIR
    )
    skip_checksum: bool = False
    verify_signature: bool = False
    fallback: bool = True
    show_notes: bool = False


@dataclass(slots=True)
class InstallResult:
    """Outcome of an install run.

    ``release`` and ``asset`` are None when the source fallback was used.
    """

    release: Release | None
    asset: Asset | None
    installed: list[Path] = field(default_factory=list)
    signature_status: SignatureStatus = SignatureStatus.NOT_CHECKED
    fallback_used: bool = False


class InstallOrchestrator:
    """Installs one release asset for the running (or given) platform."""

    def __init__(
        self,
        client: ReleaseClient,
        fallback_builder: CargoSourceInstaller,
        options: InstallOptions,
    ) -> None:
        """Initialize with injected collaborators."""
        self.client = client
        self.fallback_builder = fallback_builder
        self.options = options

    @property
    def slug(self) -> str:
        """Return ``owner/repo``."""
        return f"{self.options.owner}/{self.options.repo}"

    async def run(self) -> InstallResult:
        """Install and return what was written.

        Raises:
            AssetNotFoundError: If no asset fits the target
            IntegrityError: If checksum or signature checks fail
            NoExecutablesFoundError: If the archive holds no executables
            BinaryNotFoundError: If the requested binary is missing
            InstallationError: If copying fails, or the fallback fails

        """
        opts = self.options
        logger.info(
            "Installing %s (tag: %s)", self.slug, opts.tag or "latest"
        )

        try:
            release = await self.client.get_release(
                opts.owner, opts.repo, opts.tag
            )
        except GhbinError as e:
            if not opts.fallback:
                raise
            logger.warning(
                "⚠️  Failed to get release: %s; falling back to cargo",
                e,
            )
            await self.fallback_builder.install(
                opts.owner, opts.repo, opts.tag, opts.bin_name
            )
            return InstallResult(release=None, asset=None, fallback_used=True)

        if opts.show_notes and release.body:
            print(f"\n=== Release Notes ===\n{release.body}\n")

        target = opts.target or detect_target_triple()
        asset = AssetSelector.find_asset(release, target, opts.bin_name)
        if asset is None:
            raise AssetNotFoundError(
                target, release.tag_name, release.asset_names()
            )
        logger.info("Selected %s for %s", asset.name, target)

        workdir = Path(tempfile.mkdtemp(prefix="ghbin-install-"))
        try:
            archive = await self.client.download_asset(asset, workdir)

            if opts.skip_checksum:
                logger.warning(
                    "⚠️  Skipping checksum verification (--skip-checksum)"
                )
            else:
                await self.verify_archive(release, asset, archive)

            signature_status = SignatureStatus.NOT_CHECKED
            if opts.verify_signature:
                signature_status = await self.check_signature(
                    release, asset, workdir
                )

            extracted = extract_archive(archive, workdir / "extracted")
            installed = self.install_binaries(
                extracted, windows=is_windows_target(target)
            )
        finally:
            shutil.rmtree(workdir, ignore_errors=True)

        logger.info("✅ Installed %s", ", ".join(p.name for p in installed))
        return InstallResult(
            release=release,
            asset=asset,
            installed=installed,
            signature_status=signature_status,
        )

    async def verify_archive(
        self, release: Release, asset: Asset, archive: Path
    ) -> None:
        """Check the downloaded archive against the release manifest.

        Raises:
            ChecksumFileNotFoundError: If the release has no manifest
            ChecksumEntryNotFoundError: If the manifest omits the asset
            ChecksumMismatchError: If the digests differ

        """
        manifest = AssetSelector.find_checksum_asset(release)
        if manifest is None:
            raise ChecksumFileNotFoundError(
                release.tag_name, CHECKSUM_FILE_NAMES
            )
        logger.info("Found checksum file: %s", manifest.name)

        manifest_text = await self.client.download_text(manifest)
        result = verify_checksum(
            manifest_text, asset.name, compute_digest(archive)
        )
        if result.status is ChecksumStatus.NOT_IN_MANIFEST:
            raise ChecksumEntryNotFoundError(asset.name, manifest.name)
        if result.status is ChecksumStatus.MISMATCH:
            raise ChecksumMismatchError(
                asset.name, result.expected or "", result.actual
            )
        logger.info("Checksum verified for %s", asset.name)

    async def check_signature(
        self, release: Release, asset: Asset, workdir: Path
    ) -> SignatureStatus:
        """Require a published signature next to ``asset``.

        The signature is downloaded but not cryptographically verified.

        Raises:
            SignatureNotFoundError: If neither ``.sig`` nor ``.asc`` exists

        """
        signature = AssetSelector.find_signature_asset(release, asset)
        if signature is None:
            msg = f"no {asset.name}.sig or {asset.name}.asc in the release"
            raise SignatureNotFoundError(msg, asset.name)

        await self.client.download_asset(signature, workdir)
        logger.warning(
            "⚠️  Found %s but signature verification is not implemented",
            signature.name,
        )
        return SignatureStatus.PRESENT_UNVERIFIED

    def select_binaries(self, executables: list[Path]) -> list[Path]:
        """Pick the executables to install according to the options.

        Raises:
            BinaryNotFoundError: If ``bin_name`` matches no executable

        """
        opts = self.options
        if opts.all_bins:
            return executables

        if opts.bin_name:
            for path in executables:
                if opts.bin_name in path.name:
                    return [path]
            raise BinaryNotFoundError(
                opts.bin_name, [p.name for p in executables]
            )

        for path in executables:
            if opts.repo in path.name:
                return [path]
        return executables[:1]

    def install_binaries(
        self, extracted: Path, *, windows: bool
    ) -> list[Path]:
        """Copy the selected executables into the install directory.

        Raises:
            NoExecutablesFoundError: If the archive holds no executables
            BinaryNotFoundError: If the requested binary is missing
            InstallationError: If a copy fails

        """
        opts = self.options
        executables = find_executables(extracted, windows=windows)
        if not executables:
            msg = "the downloaded archive contains no executables"
            raise NoExecutablesFoundError(msg, self.slug)

        selected = self.select_binaries(executables)
        single_name = None
        if not opts.all_bins:
            single_name = opts.bin_name or opts.repo

        try:
            opts.install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"cannot create {opts.install_dir}: {e}"
            raise InstallationError(msg, self.slug) from e

        installed = []
        for source in selected:
            name = single_name or source.name
            if windows and not name.lower().endswith(".exe"):
                name = f"{name}.exe"
            dest = opts.install_dir / name

            logger.info("Installing %s to %s", source.name, dest)
            try:
                shutil.copy2(source, dest)
                make_executable(dest)
            except OSError as e:
                msg = f"cannot install {dest}: {e}"
                raise InstallationError(msg, self.slug) from e
            installed.append(dest)
        return installed
