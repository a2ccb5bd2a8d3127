"""Content-integrity checks for downloaded release assets."""

from ghbin.core.verification.checksum import (
    ChecksumResult,
    ChecksumStatus,
    find_checksum,
    parse_checksum_manifest,
    verify_checksum,
)
from ghbin.core.verification.signature import SignatureStatus

__all__ = [
    "ChecksumResult",
    "ChecksumStatus",
    "SignatureStatus",
    "find_checksum",
    "parse_checksum_manifest",
    "verify_checksum",
]
