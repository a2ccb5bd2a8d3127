"""Command-line interface for ghbin."""

from ghbin.cli.parser import CLIParser
from ghbin.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]
