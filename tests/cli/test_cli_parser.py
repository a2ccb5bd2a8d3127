"""Tests for the ghbin argument parser."""

from pathlib import Path

import pytest

from ghbin.cli.parser import CLIParser


@pytest.fixture
def parser() -> CLIParser:
    """Parser instance."""
    return CLIParser()


def test_publish_defaults_leave_room_for_settings(parser: CLIParser) -> None:
    """Test unset publish flags stay None so settings can apply."""
    args = parser.parse_args(["publish"])

    assert args.command == "publish"
    assert args.tag is None
    assert args.targets is None
    assert args.format is None
    assert args.draft is None
    assert args.continue_on_error is None
    assert args.release_notes is None
    assert args.publish_crate is None
    assert args.no_checksum is False
    assert args.use_hash is False
    assert args.manifest_path is None


def test_publish_flags(parser: CLIParser) -> None:
    """Test publish options are parsed into their typed values."""
    args = parser.parse_args(
        [
            "publish",
            "--tag",
            "v1.0.0",
            "--targets",
            "a-b-c, x-y-z,",
            "--format",
            "zip",
            "--draft",
            "--no-checksum",
            "--bins",
            "tool",
            "--hash",
            "--output-dir",
            "out",
            "--manifest-path",
            "crates/cli/Cargo.toml",
        ]
    )

    assert args.targets == ["a-b-c", "x-y-z"]
    assert args.format == "zip"
    assert args.draft is True
    assert args.no_checksum is True
    assert args.bins == ["tool"]
    assert args.use_hash is True
    assert args.output_dir == Path("out")
    assert args.manifest_path == Path("crates/cli/Cargo.toml")


@pytest.mark.parametrize(
    ("flag", "expected"),
    [("--publish-crate", True), ("--skip-publish", False)],
)
def test_publish_crate_switch(
    parser: CLIParser, flag: str, expected: bool
) -> None:
    """Test both cargo publish flags set the same destination."""
    assert parser.parse_args(["publish", flag]).publish_crate is expected


def test_publish_crate_flags_are_exclusive(parser: CLIParser) -> None:
    """Test the two cargo publish flags cannot be combined."""
    with pytest.raises(SystemExit):
        parser.parse_args(["publish", "--publish-crate", "--skip-publish"])


def test_publish_rejects_unknown_format(parser: CLIParser) -> None:
    """Test only tgz and zip are accepted."""
    with pytest.raises(SystemExit):
        parser.parse_args(["publish", "--format", "rar"])


def test_install_arguments(parser: CLIParser) -> None:
    """Test install parses its positional and flags."""
    args = parser.parse_args(
        [
            "install",
            "acme/tool@v1",
            "--bin",
            "tool",
            "--target",
            "x86_64-unknown-linux-gnu",
            "--skip-checksum",
            "--no-fallback",
        ]
    )

    assert args.repository == "acme/tool@v1"
    assert args.bin_name == "tool"
    assert args.all_bins is False
    assert args.skip_checksum is True
    assert args.no_fallback is True
    assert args.verify_signature is None


def test_install_bin_and_bins_are_exclusive(parser: CLIParser) -> None:
    """Test --bin and --bins cannot be combined."""
    with pytest.raises(SystemExit):
        parser.parse_args(["install", "a/b", "--bin", "x", "--bins"])


def test_global_options(parser: CLIParser) -> None:
    """Test global options precede the subcommand."""
    args = parser.parse_args(
        ["--config", "s.conf", "--verbose", "--max-retries", "5", "install"]
        + ["a/b"]
    )

    assert args.config == Path("s.conf")
    assert args.verbose is True
    assert args.max_retries == 5
    assert args.no_retry is False


@pytest.mark.parametrize(
    "argv",
    [
        ["--max-retries", "-1", "install", "a/b"],
        ["--max-retries", "two", "install", "a/b"],
        ["--max-retries", "1", "--no-retry", "install", "a/b"],
    ],
)
def test_retry_options_validation(parser: CLIParser, argv: list[str]) -> None:
    """Test negative, non-numeric and conflicting retry flags fail."""
    with pytest.raises(SystemExit):
        parser.parse_args(argv)


def test_token_requires_an_action(parser: CLIParser) -> None:
    """Test the token command needs exactly one action."""
    assert parser.parse_args(["token", "--status"]).status is True
    with pytest.raises(SystemExit):
        parser.parse_args(["token"])
    with pytest.raises(SystemExit):
        parser.parse_args(["token", "--save", "--remove"])


def test_version_without_command(parser: CLIParser) -> None:
    """Test --version parses without a subcommand."""
    args = parser.parse_args(["--version"])

    assert args.version is True
    assert args.command is None
