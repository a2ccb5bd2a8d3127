"""ghbin - publish and install per-platform binaries via GitHub Releases."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ghbin")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = ["__version__"]
