"""Publish orchestrator: build, package, checksum and upload a release.

Targets are built one after another. Each produced archive (and the
checksum manifest) is uploaded under its file name; an asset that already
exists under that name is deleted first, so rerunning a publish for the
same tag replaces its assets instead of failing.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ghbin.constants import (
    CHECKSUM_MANIFEST_NAME,
    DEFAULT_FALLBACK_BRANCH,
    DEFAULT_MANIFEST,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROFILE,
    DEFAULT_TARGETS,
    SHORT_SHA_LENGTH,
)
from ghbin.core.archive import (
    ArchiveFormat,
    create_archive,
    generate_checksums,
)
from ghbin.core.build import CargoBuilder
from ghbin.core.git import GitRepository
from ghbin.core.github import Asset, Release, ReleaseClient
from ghbin.core.manifest import read_package_version
from ghbin.core.notes import (
    NotesContext,
    compose_release_notes,
    previous_tag,
)
from ghbin.exceptions import (
    ArchiveError,
    BuildFailedError,
    GhbinError,
    GitError,
    TagNotFoundError,
)
from ghbin.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class PublishOptions:
    """What to publish and how."""

    owner: str
    repo: str
    tag: str | None = None
    targets: Sequence[str] = DEFAULT_TARGETS
    profile: str = DEFAULT_PROFILE
    archive_format: ArchiveFormat = ArchiveFormat.TGZ
    draft: bool = False
    checksum: bool = True
    bins: Sequence[str] | None = None
    continue_on_error: bool = False
    use_hash: bool = False
    release_notes: bool = False
    target_commitish: str | None = None
    output_dir: Path = field(
        default_factory=lambda: Path(DEFAULT_OUTPUT_DIR)
    )
    fallback_branch: str = DEFAULT_FALLBACK_BRANCH
    manifest_path: Path = field(
        default_factory=lambda: Path(DEFAULT_MANIFEST)
    )
    publish_crate: bool = False


@dataclass(slots=True)
class PublishResult:
    """Outcome of a publish run.

    Attributes:
        tag: Tag the release was published under
        release: The created or reused release
        archives: Local files that were uploaded (archives, then manifest)
        uploaded: Assets as reported by GitHub after upload

    """

    tag: str
    release: Release
    archives: list[Path]
    uploaded: list[Asset]


class PublishOrchestrator:
    """Runs one publish from tag resolution to the last upload."""

    def __init__(
        self,
        client: ReleaseClient,
        builder: CargoBuilder,
        git: GitRepository,
        options: PublishOptions,
    ) -> None:
        """Initialize with injected collaborators."""
        self.client = client
        self.builder = builder
        self.git = git
        self.options = options

    @property
    def slug(self) -> str:
        """Return ``owner/repo``."""
        return f"{self.options.owner}/{self.options.repo}"

    async def run(self) -> PublishResult:
        """Publish every target and return what was uploaded.

        Raises:
            TagNotFoundError: If no tag can be determined
            BuildFailedError: If a target fails in strict mode, or every
                target fails
            RetryExhaustedError: If a release or asset request fails

        """
        opts = self.options
        tag, continuous = await self.resolve_tag()
        logger.info("Publishing %s at %s", self.slug, tag)

        out_dir = opts.output_dir / tag
        out_dir.mkdir(parents=True, exist_ok=True)

        archives, binaries = await self.build_archives(tag, out_dir)

        files = list(archives)
        if opts.checksum:
            files = [p for p in files if p.name != CHECKSUM_MANIFEST_NAME]
            files.append(generate_checksums(files, out_dir))

        notes = None
        if opts.release_notes:
            notes = await self.build_notes(
                tag, binaries, [p.name for p in files], continuous=continuous
            )

        release = await self.client.create_or_get_release(
            opts.owner,
            opts.repo,
            tag,
            draft=opts.draft,
            target_commitish=opts.target_commitish,
            notes=notes,
        )

        uploaded = [await self.replace_asset(release, path) for path in files]

        if opts.publish_crate:
            await self.builder.publish_crate()

        logger.info("✅ Published %d assets to %s", len(uploaded), tag)
        if release.html_url:
            logger.info("Release URL: %s", release.html_url)
        return PublishResult(
            tag=tag, release=release, archives=files, uploaded=uploaded
        )

    async def resolve_tag(self) -> tuple[str, bool]:
        """Return the tag to publish and whether it is a continuous build.

        Order: explicit tag, a tag pointing at HEAD, then (with
        ``use_hash``) ``{version}-{short sha}``.
        """
        opts = self.options
        if opts.tag:
            return opts.tag, False

        head_tag = await self.git.head_tag()
        if head_tag:
            logger.info("Using tag %s from HEAD", head_tag)
            return head_tag, False

        if opts.use_hash:
            version = read_package_version(opts.manifest_path)
            commit = await self.git.head_commit()
            tag = f"{version}-{commit.sha[:SHORT_SHA_LENGTH]}"
            logger.info("Using continuous tag %s", tag)
            return tag, True

        msg = "HEAD is not tagged; pass --tag or --hash"
        raise TagNotFoundError(msg, self.slug)

    async def build_archives(
        self, tag: str, out_dir: Path
    ) -> tuple[list[Path], list[str]]:
        """Build and package every target.

        Returns:
            Archive paths in target order, and the sorted binary names
            found across all targets

        """
        opts = self.options
        archives: list[Path] = []
        binary_names: set[str] = set()

        for target in opts.targets:
            try:
                binaries = await self.builder.build(
                    target, opts.profile, opts.bins
                )
                if not binaries:
                    raise BuildFailedError(target, "no binaries found")
                archive = create_archive(
                    binaries,
                    out_dir,
                    f"{opts.repo}-{target}-{tag}",
                    opts.archive_format,
                )
            except (BuildFailedError, ArchiveError) as e:
                if not opts.continue_on_error:
                    raise
                logger.warning("⚠️  Skipping %s: %s", target, e)
                continue

            logger.info("Packaged %s", archive.name)
            archives.append(archive)
            binary_names.update(path.stem for path in binaries)

        if not archives:
            raise BuildFailedError("all targets")
        return archives, sorted(binary_names)

    async def build_notes(
        self,
        tag: str,
        binaries: Sequence[str],
        assets: Sequence[str],
        *,
        continuous: bool,
    ) -> str:
        """Compose release notes, tolerating missing git or GitHub notes."""
        opts = self.options
        try:
            commit = await self.git.head_commit()
        except GitError as e:
            logger.warning("⚠️  Notes without commit details: %s", e)
            commit = None
        notes = compose_release_notes(
            NotesContext(
                owner=opts.owner,
                repo=opts.repo,
                tag=tag,
                commit=commit,
                binaries=binaries,
                assets=assets,
            )
        )
        if continuous:
            return notes

        try:
            tags = await self.git.list_tags()
            base = previous_tag(tags, opts.fallback_branch)
            generated = await self.client.generate_release_notes(
                opts.owner,
                opts.repo,
                tag,
                previous_tag=base,
                target_commitish=opts.target_commitish,
            )
        except GhbinError as e:
            logger.warning("⚠️  Could not fetch generated notes: %s", e)
            return notes

        if generated:
            notes = f"{notes}\n{generated.strip()}\n"
        return notes

    async def replace_asset(self, release: Release, path: Path) -> Asset:
        """Upload ``path``, deleting a same-named asset first."""
        opts = self.options
        existing = await self.client.find_existing_asset(
            opts.owner, opts.repo, release.id, path.name
        )
        if existing is not None:
            logger.info("Replacing existing asset %s", path.name)
            await self.client.delete_asset(opts.owner, opts.repo, existing.id)
        return await self.client.upload_asset(
            opts.owner, opts.repo, release.id, path
        )
