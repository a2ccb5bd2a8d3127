"""Detached signature presence checks.

ghbin only checks that a ``.sig``/``.asc`` file is published next to an
asset. It does not validate the signature cryptographically, and no status
value claims that it did: a present signature is reported as
``PRESENT_UNVERIFIED``.
"""

from enum import Enum


class SignatureStatus(Enum):
    """What is known about an asset's detached signature."""

    NOT_CHECKED = "not_checked"
    PRESENT_UNVERIFIED = "present_unverified"
