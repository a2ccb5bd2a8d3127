"""SHA-256 manifest parsing and digest comparison.

Manifests use the ``sha256sum`` layout: one ``<hex-digest> <filename>``
entry per line, separated by spaces or a tab. The filename may carry a path
prefix and a leading ``*`` binary-mode marker. BSD-style lines
(``SHA256 (<filename>) = <hex-digest>``, as written by ``shasum --tag``)
are accepted too; BSD lines for other algorithms are skipped. An entry
matches a queried name when the recorded name equals it or ends with
``/<name>``.
"""

import re
from dataclasses import dataclass
from enum import Enum

from ghbin.logger import get_logger

logger = get_logger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_BSD_LINE = re.compile(
    r"(?P<algo>[A-Za-z0-9-]+)\s*\((?P<filename>.+)\)\s*=\s*"
    r"(?P<digest>[A-Fa-f0-9]+)"
)


class ChecksumStatus(Enum):
    """Outcome of comparing a file against a manifest."""

    OK = "ok"
    MISMATCH = "mismatch"
    NOT_IN_MANIFEST = "not_in_manifest"


@dataclass(slots=True, frozen=True)
class ChecksumResult:
    """Result of :func:`verify_checksum`.

    Attributes:
        filename: Name that was looked up
        status: Comparison outcome
        expected: Digest from the manifest (None when absent)
        actual: Digest of the local file

    """

    filename: str
    status: ChecksumStatus
    expected: str | None
    actual: str

    @property
    def passed(self) -> bool:
        """True when the digests match."""
        return self.status is ChecksumStatus.OK


def _parse_line(line: str) -> tuple[str, str] | None:
    bsd = _BSD_LINE.fullmatch(line)
    if bsd is not None:
        if bsd.group("algo").upper().replace("-", "") != "SHA256":
            return None
        return bsd.group("digest").lower(), bsd.group("filename")

    parts = line.split(None, 1)
    if len(parts) != 2:  # noqa: PLR2004
        return None
    digest, filename = parts
    if not set(digest) <= _HEX_DIGITS:
        return None
    return digest.lower(), filename.strip().removeprefix("*")


def _matches(recorded: str, filename: str) -> bool:
    return recorded == filename or recorded.endswith(f"/{filename}")


def parse_checksum_manifest(text: str) -> list[tuple[str, str]]:
    """Return ``(digest, filename)`` pairs in manifest order.

    Blank lines, ``#`` comments and malformed lines are skipped.
    """
    entries = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        parsed = _parse_line(line)
        if parsed is not None:
            entries.append(parsed)
    return entries


def find_checksum(text: str, filename: str) -> str | None:
    """Return the lowercase digest recorded for ``filename``, if any.

    The first matching line wins.
    """
    for digest, recorded in parse_checksum_manifest(text):
        if _matches(recorded, filename):
            return digest
    return None


def verify_checksum(
    manifest_text: str, filename: str, actual_digest: str
) -> ChecksumResult:
    """Compare ``actual_digest`` with the manifest entry for ``filename``.

    Comparison is case-insensitive.
    """
    actual = actual_digest.lower()
    expected = find_checksum(manifest_text, filename)

    if expected is None:
        status = ChecksumStatus.NOT_IN_MANIFEST
    elif expected == actual:
        status = ChecksumStatus.OK
    else:
        status = ChecksumStatus.MISMATCH

    logger.debug(
        "Checksum for %s: %s (expected %s, actual %s)",
        filename,
        status.value,
        expected,
        actual,
    )
    return ChecksumResult(filename, status, expected, actual)
