"""Source-build fallback for repositories without usable releases."""

import asyncio

from ghbin.constants import GITHUB_WEB_URL
from ghbin.exceptions import InstallationError
from ghbin.logger import get_logger

logger = get_logger(__name__)


class CargoSourceInstaller:
    """Installs a crate straight from its git repository with cargo."""

    def __init__(self, cargo: str = "cargo") -> None:
        """Initialize with the cargo executable to run."""
        self.cargo = cargo

    def install_command(
        self,
        owner: str,
        repo: str,
        tag: str | None = None,
        bin_name: str | None = None,
    ) -> list[str]:
        """Return the ``cargo install --git`` argv."""
        command = [
            self.cargo,
            "install",
            "--git",
            f"{GITHUB_WEB_URL}/{owner}/{repo}.git",
        ]
        if tag:
            command.extend(["--rev", tag])
        if bin_name:
            command.extend(["--bin", bin_name])
        return command

    async def install(
        self,
        owner: str,
        repo: str,
        tag: str | None = None,
        bin_name: str | None = None,
    ) -> None:
        """Build and install from source.

        Raises:
            InstallationError: If cargo cannot start or fails

        """
        command = self.install_command(owner, repo, tag, bin_name)
        target = f"{owner}/{repo}"
        logger.info("🔧 Building %s from source with cargo install", target)
        logger.debug("Running: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(*command)
            returncode = await process.wait()
        except OSError as e:
            msg = f"cannot run cargo: {e}"
            raise InstallationError(msg, target) from e

        if returncode != 0:
            msg = f"cargo install exited with {returncode}"
            raise InstallationError(msg, target)
