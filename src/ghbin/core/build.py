"""Cargo build collaborator for the publish pipeline.

Builds one target triple at a time with ``cargo build`` and collects the
executables it produced.
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path

from ghbin.core.archive import is_executable
from ghbin.core.platform import is_windows_target
from ghbin.exceptions import BuildFailedError
from ghbin.logger import get_logger

logger = get_logger(__name__)


def profile_directory(profile: str) -> str:
    """Return the ``target/<triple>/`` subdirectory used for ``profile``."""
    if profile == "dev":
        return "debug"
    return profile


class CargoBuilder:
    """Runs ``cargo build --target ...`` in a project directory."""

    def __init__(
        self,
        project_dir: Path | None = None,
        cargo: str = "cargo",
        target_dir: Path | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            project_dir: Directory containing Cargo.toml (default: cwd)
            cargo: Cargo executable
            target_dir: Cargo's target directory (default: project/target)

        """
        self.project_dir = project_dir or Path.cwd()
        self.cargo = cargo
        self.target_dir = target_dir or self.project_dir / "target"

    def build_command(
        self, target: str, profile: str, bins: Sequence[str] | None
    ) -> list[str]:
        """Return the argv for building ``target``."""
        command = [self.cargo, "build", "--target", target]
        if profile == "release":
            command.append("--release")
        else:
            command.extend(["--profile", profile])
        for name in bins or ():
            command.extend(["--bin", name])
        return command

    async def build(
        self,
        target: str,
        profile: str,
        bins: Sequence[str] | None = None,
    ) -> list[Path]:
        """Build ``target`` and return the produced executables.

        Args:
            target: Target triple
            profile: Cargo profile name
            bins: Restrict the build and the result to these binaries

        Returns:
            Executables found in the profile output directory

        Raises:
            BuildFailedError: If cargo cannot start, exits non-zero, or
                produces no matching executables

        """
        command = self.build_command(target, profile, bins)
        logger.info("🔨 Building %s (%s)", target, profile)
        logger.debug("Running: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command, cwd=self.project_dir
            )
            returncode = await process.wait()
        except OSError as e:
            raise BuildFailedError(target, f"cannot run cargo: {e}") from e

        if returncode != 0:
            raise BuildFailedError(target, f"cargo exited with {returncode}")

        binaries = self.find_binaries(target, profile, bins)
        if not binaries:
            raise BuildFailedError(target, "no binaries found")
        return binaries

    async def publish_crate(self) -> bool:
        """Run ``cargo publish`` for the project.

        Failure is logged and reported through the return value; it never
        aborts a publish whose assets are already uploaded.

        Returns:
            True if cargo exited successfully

        """
        logger.info("📤 Running cargo publish")
        try:
            process = await asyncio.create_subprocess_exec(
                self.cargo, "publish", cwd=self.project_dir
            )
            returncode = await process.wait()
        except OSError as e:
            logger.warning("⚠️  cargo publish could not start: %s", e)
            return False

        if returncode != 0:
            logger.warning("⚠️  cargo publish exited with %d", returncode)
            return False
        return True

    def find_binaries(
        self, target: str, profile: str, bins: Sequence[str] | None = None
    ) -> list[Path]:
        """Return executables directly inside the profile output directory.

        Args:
            target: Target triple
            profile: Cargo profile name
            bins: Keep only files whose stem is one of these names

        Returns:
            Sorted list of executables

        """
        output_dir = self.target_dir / target / profile_directory(profile)
        if not output_dir.is_dir():
            return []

        windows = is_windows_target(target)
        binaries = []
        for path in sorted(output_dir.iterdir()):
            if not is_executable(path, windows=windows):
                continue
            if windows and path.suffix.lower() != ".exe":
                continue
            if bins and path.stem not in bins:
                continue
            binaries.append(path)
        return binaries
