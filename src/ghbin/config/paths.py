"""Path constants and utilities for ghbin configuration."""

from pathlib import Path

from ghbin.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / CONFIG_DIR_NAME / DEFAULT_CONFIG_SUBDIR
    LOGS_DIR = CONFIG_DIR / "logs"
    GLOBAL_CONFIG_FILE = CONFIG_DIR / CONFIG_FILE_NAME

    # Where installed binaries land unless configured otherwise
    DEFAULT_INSTALL_DIR = HOME_DIR / ".cargo" / "bin"

    @classmethod
    def expand_path(cls, path_str: str | Path) -> Path:
        """Expand ``~`` and make the path absolute.

        Args:
            path_str: Path string to expand (e.g., "~/bin" or "./dist")

        Returns:
            Expanded and resolved Path object

        Example:
            >>> Paths.expand_path("~/bin")
            PosixPath('/home/user/bin')

        """
        return Path(path_str).expanduser().resolve(strict=False)
