"""Install command coordinator.

Resolves ``owner/repo[@tag]``, applies ``[install]`` and per-repository
settings, and delegates to InstallOrchestrator.
"""

from argparse import Namespace

from ghbin.core.fallback import CargoSourceInstaller
from ghbin.core.install import (
    InstallOptions,
    InstallOrchestrator,
    InstallResult,
    parse_install_target,
)
from ghbin.core.verification import SignatureStatus
from ghbin.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class InstallHandler(BaseCommandHandler):
    """Thin coordinator for the install command."""

    async def execute(self, args: Namespace) -> None:
        """Execute install command."""
        options = self.build_options(args)

        async with self.release_client() as client:
            orchestrator = InstallOrchestrator(
                client=client,
                fallback_builder=CargoSourceInstaller(),
                options=options,
            )
            result = await orchestrator.run()

        self._print_summary(options, result)

    def build_options(self, args: Namespace) -> InstallOptions:
        """Combine flags, ``[install]`` and ``[repo:owner/name]`` settings."""
        owner, repo, tag = parse_install_target(args.repository)
        settings = self.global_config["install"]
        overrides = self.config_manager.get_repo_config(
            self.global_config, owner, repo
        )

        verify_signature = args.verify_signature
        if verify_signature is None:
            verify_signature = overrides.get(
                "verify_signature", settings["verify_signature"]
            )

        bin_name = args.bin_name
        if bin_name is None and not args.all_bins:
            bin_name = overrides.get("bin")

        return InstallOptions(
            owner=owner,
            repo=repo,
            tag=tag or args.tag,
            bin_name=bin_name,
            all_bins=args.all_bins,
            target=args.target,
            install_dir=args.install_dir or settings["install_dir"],
            skip_checksum=args.skip_checksum,
            verify_signature=verify_signature,
            fallback=settings["fallback"] and not args.no_fallback,
            show_notes=args.show_notes,
        )

    @staticmethod
    def _print_summary(options: InstallOptions, result: InstallResult) -> None:
        slug = f"{options.owner}/{options.repo}"
        if result.fallback_used:
            print(f"✅ Installed {slug} from source with cargo")
            return

        tag = result.release.tag_name if result.release else "?"
        print(f"✅ Installed {slug} {tag}")
        for path in result.installed:
            print(f"   {path}")
        if result.signature_status is SignatureStatus.PRESENT_UNVERIFIED:
            print("⚠️  Signature found but not cryptographically verified")
