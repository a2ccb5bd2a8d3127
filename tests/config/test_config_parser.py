"""Tests for INI value converters and generated comments."""

import pytest

from ghbin.config.parser import (
    ConfigCommentManager,
    parse_bool,
    parse_float,
    parse_int,
    parse_list,
    repo_section_name,
)
from ghbin.exceptions import ConfigurationError


@pytest.mark.parametrize(
    ("value", "expected"),
    [("yes", True), ("On", True), ("1", True), ("false", False), ("0", False)],
)
def test_parse_bool(value: str, expected: bool) -> None:
    """Test configparser's boolean spellings are accepted."""
    assert parse_bool("s", "k", value) is expected


def test_parse_numbers() -> None:
    """Test integers and floats are converted with whitespace trimmed."""
    assert parse_int("s", "k", " 5 ") == 5
    assert parse_float("s", "k", "0.5") == 0.5


def test_parse_error_names_section_and_key() -> None:
    """Test conversion errors point at the offending key."""
    with pytest.raises(ConfigurationError, match=r"\[network\] timeout"):
        parse_int("network", "timeout", "1.5")


def test_parse_list() -> None:
    """Test comma lists drop blanks."""
    assert parse_list("a, b,,c ,") == ["a", "b", "c"]
    assert parse_list("") == []


def test_comment_manager_covers_every_section() -> None:
    """Test every section gets a comment block."""
    comments = ConfigCommentManager.get_section_comments()

    assert set(comments) == {"DEFAULT", "network", "publish", "install"}
    assert "Configuration version" in ConfigCommentManager.get_file_header()


def test_repo_section_name() -> None:
    """Test override sections are prefixed with ``repo:``."""
    assert repo_section_name("acme", "tool") == "repo:acme/tool"
