"""CLI argument parser for ghbin.

Handles parsing of command-line arguments. Options that can also come
from the settings file default to None here; the command handlers fall
back to the loaded configuration when a flag was not given.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path


def non_negative_int(value: str) -> int:
    """Argparse type for counts such as ``--max-retries``."""
    try:
        number = int(value)
    except ValueError:
        msg = f"invalid integer: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None
    if number < 0:
        msg = f"must not be negative: {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def comma_list(value: str) -> list[str]:
    """Argparse type for comma-separated lists."""
    return [item.strip() for item in value.split(",") if item.strip()]


class CLIParser:
    """Command-line argument parser for ghbin."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse (default: ``sys.argv[1:]``)

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser.parse_args(argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="ghbin",
            description="Publish and install prebuilt binaries via "
            "GitHub releases",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Build, package and upload the tagged commit
  %(prog)s publish

  # Continuous build named after the crate version and commit
  %(prog)s publish --hash --targets x86_64-unknown-linux-gnu

  # Install the latest release for this machine
  %(prog)s install owner/repo

  # Install one binary from a specific tag
  %(prog)s install owner/repo@v1.2.3 --bin tool

  # Token management (stored in the system keyring)
  %(prog)s token --save
  %(prog)s token --status
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        """Add options shared by all subcommands.

        ``--version`` has no short form so it cannot collide with
        ``--verbose``.
        """
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show ghbin version and exit",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Settings file (default: ~/.config/ghbin/settings.conf)",
        )
        parser.add_argument(
            "--token",
            help="GitHub token (default: GITHUB_TOKEN, then the keyring)",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug output on the console",
        )
        retry_group = parser.add_mutually_exclusive_group()
        retry_group.add_argument(
            "--max-retries",
            type=non_negative_int,
            metavar="N",
            help="Retries per request after the first attempt",
        )
        retry_group.add_argument(
            "--no-retry",
            action="store_true",
            help="Make every request exactly once",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )

        self._add_publish_command(subparsers)
        self._add_install_command(subparsers)
        self._add_token_command(subparsers)

    def _add_publish_command(self, subparsers) -> None:
        """Add publish command parser.

        Args:
            subparsers: The subparsers object to add the publish command
                to.

        """
        publish_parser = subparsers.add_parser(
            "publish",
            help="Build, package and upload release archives",
        )
        publish_parser.add_argument(
            "--tag",
            help="Release tag (default: the tag on HEAD)",
        )
        publish_parser.add_argument(
            "--targets",
            type=comma_list,
            metavar="TRIPLES",
            help="Comma-separated target triples",
        )
        publish_parser.add_argument(
            "--format",
            choices=("tgz", "zip"),
            help="Archive format",
        )
        publish_parser.add_argument(
            "--draft",
            action="store_true",
            default=None,
            help="Create the release as a draft",
        )
        publish_parser.add_argument(
            "--no-checksum",
            action="store_true",
            help="Do not generate or upload SHA256SUMS",
        )
        publish_parser.add_argument(
            "--bins",
            type=comma_list,
            metavar="NAMES",
            help="Only build and package these binaries",
        )
        publish_parser.add_argument(
            "--profile",
            help="Cargo build profile",
        )
        publish_parser.add_argument(
            "--repository",
            metavar="OWNER/REPO",
            help="GitHub repository (default: from Cargo.toml)",
        )
        publish_parser.add_argument(
            "--hash",
            dest="use_hash",
            action="store_true",
            help="Without a tag on HEAD, publish as {version}-{short sha}",
        )
        publish_parser.add_argument(
            "--continue-on-error",
            action="store_true",
            default=None,
            help="Skip targets that fail to build",
        )
        publish_parser.add_argument(
            "--release-notes",
            action="store_true",
            default=None,
            help="Compose release notes from git metadata",
        )
        crate_group = publish_parser.add_mutually_exclusive_group()
        crate_group.add_argument(
            "--publish-crate",
            dest="publish_crate",
            action="store_true",
            default=None,
            help="Run cargo publish after uploading the assets",
        )
        crate_group.add_argument(
            "--skip-publish",
            dest="publish_crate",
            action="store_false",
            default=None,
            help="Do not run cargo publish (overrides the settings file)",
        )
        publish_parser.add_argument(
            "--target-commitish",
            metavar="REF",
            help="Commit or branch for a tag that does not exist yet",
        )
        publish_parser.add_argument(
            "--output-dir",
            type=Path,
            metavar="DIR",
            help="Where archives are written",
        )
        publish_parser.add_argument(
            "--manifest-path",
            type=Path,
            default=None,
            metavar="PATH",
            help="Path to Cargo.toml (default: ./Cargo.toml)",
        )

    def _add_install_command(self, subparsers) -> None:
        """Add install command parser.

        Args:
            subparsers: The subparsers object to add the install command
                to.

        """
        install_parser = subparsers.add_parser(
            "install",
            help="Install a prebuilt binary from a GitHub release",
        )
        install_parser.add_argument(
            "repository",
            metavar="OWNER/REPO[@TAG]",
            help="Repository to install from",
        )
        install_parser.add_argument(
            "--tag",
            help="Release tag (an @tag in the repository wins)",
        )
        bin_group = install_parser.add_mutually_exclusive_group()
        bin_group.add_argument(
            "--bin",
            dest="bin_name",
            metavar="NAME",
            help="Binary to install",
        )
        bin_group.add_argument(
            "--bins",
            dest="all_bins",
            action="store_true",
            help="Install every binary in the archive",
        )
        install_parser.add_argument(
            "--target",
            metavar="TRIPLE",
            help="Target triple (default: this machine)",
        )
        install_parser.add_argument(
            "--install-dir",
            type=Path,
            metavar="DIR",
            help="Installation directory (default: ~/.cargo/bin)",
        )
        install_parser.add_argument(
            "--show-notes",
            action="store_true",
            help="Print the release notes",
        )
        install_parser.add_argument(
            "--verify-signature",
            action="store_true",
            default=None,
            help="Require a .sig or .asc asset next to the archive",
        )
        install_parser.add_argument(
            "--no-fallback",
            action="store_true",
            help="Do not fall back to cargo install --git",
        )
        install_parser.add_argument(
            "--skip-checksum",
            action="store_true",
            help="Skip SHA-256 verification",
        )

    def _add_token_command(self, subparsers) -> None:
        """Add token command parser.

        Args:
            subparsers: The subparsers object to add the token command
                to.

        """
        token_parser = subparsers.add_parser(
            "token",
            help="Manage the GitHub token stored in the keyring",
        )
        action_group = token_parser.add_mutually_exclusive_group(
            required=True
        )
        action_group.add_argument(
            "--save",
            action="store_true",
            help="Prompt for a token and store it",
        )
        action_group.add_argument(
            "--remove",
            action="store_true",
            help="Delete the stored token",
        )
        action_group.add_argument(
            "--status",
            action="store_true",
            help="Show where the token would come from",
        )
