"""Publish command coordinator.

Merges command-line flags over the ``[publish]`` settings and delegates
to PublishOrchestrator.
"""

from argparse import Namespace
from pathlib import Path

from ghbin.constants import DEFAULT_MANIFEST
from ghbin.core.archive import ArchiveFormat
from ghbin.core.build import CargoBuilder
from ghbin.core.git import GitRepository
from ghbin.core.manifest import parse_repository, read_repository
from ghbin.core.publish import (
    PublishOptions,
    PublishOrchestrator,
    PublishResult,
)
from ghbin.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


def _flag(value: bool | None, default: bool) -> bool:  # noqa: FBT001
    """Return ``value`` unless the flag was not given."""
    return default if value is None else value


class PublishHandler(BaseCommandHandler):
    """Thin coordinator for the publish command."""

    async def execute(self, args: Namespace) -> None:
        """Execute publish command."""
        manifest_path = args.manifest_path or Path(DEFAULT_MANIFEST)
        project_dir = manifest_path.parent
        options = self.build_options(args, manifest_path)

        async with self.release_client() as client:
            orchestrator = PublishOrchestrator(
                client=client,
                builder=CargoBuilder(project_dir=project_dir),
                git=GitRepository(project_dir),
                options=options,
            )
            result = await orchestrator.run()

        self._print_summary(result)

    def build_options(
        self, args: Namespace, manifest_path: Path
    ) -> PublishOptions:
        """Combine flags and settings into PublishOptions."""
        settings = self.global_config["publish"]

        repository = args.repository or settings["repository"]
        if repository:
            owner, repo = parse_repository(repository)
        else:
            owner, repo = read_repository(manifest_path)

        return PublishOptions(
            owner=owner,
            repo=repo,
            tag=args.tag,
            targets=args.targets or settings["targets"],
            profile=args.profile or settings["profile"],
            archive_format=ArchiveFormat.from_name(
                args.format or settings["format"]
            ),
            draft=_flag(args.draft, settings["draft"]),
            checksum=settings["checksum"] and not args.no_checksum,
            bins=args.bins or None,
            continue_on_error=_flag(
                args.continue_on_error, settings["continue_on_error"]
            ),
            use_hash=args.use_hash,
            release_notes=_flag(
                args.release_notes, settings["release_notes"]
            ),
            target_commitish=args.target_commitish,
            output_dir=args.output_dir or settings["output_dir"],
            fallback_branch=settings["fallback_branch"],
            manifest_path=manifest_path,
            publish_crate=_flag(
                args.publish_crate, settings["publish_crate"]
            ),
        )

    @staticmethod
    def _print_summary(result: PublishResult) -> None:
        print(f"✅ Published {result.tag} ({len(result.uploaded)} assets)")
        for asset in result.uploaded:
            print(f"   📦 {asset.name}")
        if result.release.html_url:
            print(f"🔗 {result.release.html_url}")
