"""Archive creation, extraction and file digests.

Archives hold a flat set of files stored under their basenames. Unix
permission bits survive a round trip in both formats, so an executable
packed on Linux is executable again after extraction.
"""

import hashlib
import os
import sys
import tarfile
import tempfile
import zipfile
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from ghbin.constants import (
    ARCHIVE_SUFFIXES,
    CHECKSUM_MANIFEST_NAME,
    CHUNK_SIZE,
    EXECUTABLE_BITS,
    WINDOWS_EXECUTABLE_EXTENSIONS,
)
from ghbin.exceptions import ArchiveError, ConfigurationError
from ghbin.logger import get_logger

logger = get_logger(__name__)

# ZipInfo.create_system value for archives written on Unix
ZIP_UNIX_SYSTEM = 3


class ArchiveFormat(Enum):
    """Archive formats ghbin can produce."""

    TGZ = "tgz"
    ZIP = "zip"

    @property
    def extension(self) -> str:
        """File suffix including the leading dot."""
        return ".tar.gz" if self is ArchiveFormat.TGZ else ".zip"

    @classmethod
    def from_name(cls, name: str) -> "ArchiveFormat":
        """Parse a user-supplied format name.

        Raises:
            ConfigurationError: If the name is not ``tgz`` or ``zip``

        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            msg = f"unsupported archive format '{name}' (use tgz or zip)"
            raise ConfigurationError(msg) from None


def detect_archive_format(name: str) -> str | None:
    """Return the archive kind ("gz", "xz", "bz2", "zip") for a file name."""
    lowered = name.lower()
    for suffix, kind in ARCHIVE_SUFFIXES:
        if lowered.endswith(suffix):
            return kind
    return None


def is_archive(name: str) -> bool:
    """Return True if ``name`` has a recognised archive suffix."""
    return detect_archive_format(name) is not None


def archive_suffix(name: str) -> str:
    """Return the full archive suffix of ``name`` (e.g. ``.tar.gz``)."""
    lowered = name.lower()
    for suffix, _ in ARCHIVE_SUFFIXES:
        if lowered.endswith(suffix):
            return suffix
    return Path(name).suffix


def create_archive(
    files: Sequence[Path],
    destination_dir: Path,
    base_name: str,
    archive_format: ArchiveFormat,
) -> Path:
    """Pack ``files`` into ``{destination_dir}/{base_name}{extension}``.

    Each file is stored under its basename. An empty ``files`` list
    produces a valid, empty archive.

    Args:
        files: Files to include
        destination_dir: Output directory, created if missing
        base_name: Archive name without extension
        archive_format: TGZ or ZIP

    Returns:
        Path of the written archive

    Raises:
        ArchiveError: If an input is missing or the archive cannot be written

    """
    destination_dir.mkdir(parents=True, exist_ok=True)
    archive_path = destination_dir / f"{base_name}{archive_format.extension}"

    for path in files:
        if not path.is_file():
            msg = f"input file does not exist: {path}"
            raise ArchiveError(msg, archive_path.name)

    try:
        if archive_format is ArchiveFormat.TGZ:
            with tarfile.open(archive_path, "w:gz") as tar:
                for path in files:
                    tar.add(path, arcname=path.name, recursive=False)
        else:
            with zipfile.ZipFile(
                archive_path, "w", compression=zipfile.ZIP_DEFLATED
            ) as zf:
                for path in files:
                    # ZipInfo.from_file stores st_mode in external_attr
                    zf.write(path, arcname=path.name)
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        archive_path.unlink(missing_ok=True)
        raise ArchiveError(str(e), archive_path.name) from e

    logger.debug(
        "Created %s with %d file(s)", archive_path.name, len(files)
    )
    return archive_path


def extract_archive(path: Path, destination: Path | None = None) -> Path:
    """Extract ``path`` and return the directory holding its contents.

    The format is chosen from the file suffix. Tar members go through the
    ``data`` extraction filter; zip members are path-sanitised by
    :mod:`zipfile` and get their stored Unix mode re-applied.

    Args:
        path: Archive to extract
        destination: Target directory (default: a new temporary directory)

    Returns:
        The extraction directory

    Raises:
        ArchiveError: If the suffix is unsupported or the archive is corrupt

    """
    kind = detect_archive_format(path.name)
    if kind is None:
        msg = "unsupported archive format"
        raise ArchiveError(msg, path.name)

    if destination is None:
        destination = Path(tempfile.mkdtemp(prefix="ghbin-extract-"))
    else:
        destination.mkdir(parents=True, exist_ok=True)

    try:
        if kind == "zip":
            _extract_zip(path, destination)
        else:
            with tarfile.open(path, f"r:{kind}") as tar:
                tar.extractall(destination, filter="data")
    except (
        OSError,
        EOFError,
        tarfile.TarError,
        zipfile.BadZipFile,
    ) as e:
        raise ArchiveError(f"cannot extract: {e}", path.name) from e

    logger.debug("Extracted %s into %s", path.name, destination)
    return destination


def _extract_zip(path: Path, destination: Path) -> None:
    with zipfile.ZipFile(path) as zf:
        for info in zf.infolist():
            extracted = Path(zf.extract(info, destination))
            mode = info.external_attr >> 16
            if (
                mode
                and not info.is_dir()
                and info.create_system == ZIP_UNIX_SYSTEM
                and sys.platform != "win32"
            ):
                extracted.chmod(mode & 0o777)


def is_executable(
    path: Path, windows: bool | None = None  # noqa: FBT001
) -> bool:
    """Return True if ``path`` is an executable file.

    On Windows the extension decides; elsewhere any execute bit does.
    """
    if windows is None:
        windows = sys.platform == "win32"
    if not path.is_file():
        return False
    if windows:
        return path.suffix.lower() in WINDOWS_EXECUTABLE_EXTENSIONS
    return bool(path.stat().st_mode & EXECUTABLE_BITS)


def find_executables(
    directory: Path, windows: bool | None = None  # noqa: FBT001
) -> list[Path]:
    """Recursively collect executable files below ``directory``, sorted."""
    return sorted(
        path
        for path in directory.rglob("*")
        if is_executable(path, windows=windows)
    )


def make_executable(path: Path) -> None:
    """Add execute permission for user, group and others (no-op on Windows)."""
    if sys.platform == "win32":
        return
    mode = path.stat().st_mode
    os.chmod(path, mode | EXECUTABLE_BITS)


def compute_digest(path: Path) -> str:
    """Return the lowercase hex SHA-256 of ``path``, read in chunks."""
    sha256 = hashlib.sha256()
    with path.open("rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            sha256.update(chunk)
    return sha256.hexdigest()


def generate_checksums(files: Iterable[Path], output_dir: Path) -> Path:
    """Write ``SHA256SUMS`` for ``files`` into ``output_dir``.

    One ``<digest>  <basename>`` line per file, in input order.

    Returns:
        Path of the manifest

    """
    manifest = output_dir / CHECKSUM_MANIFEST_NAME
    lines = [f"{compute_digest(path)}  {path.name}\n" for path in files]
    manifest.write_text("".join(lines), encoding="utf-8")
    logger.debug("Wrote %s with %d entries", manifest, len(lines))
    return manifest
