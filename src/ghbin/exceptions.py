"""Exception classes for ghbin operations.

Every error raised by ghbin derives from :class:`GhbinError`. Errors are
grouped by category so callers can react to a whole class of failures
(``except IntegrityError``) or to one precise condition
(``except ChecksumMismatchError``).
"""

from collections.abc import Sequence


class GhbinError(Exception):
    """Base exception for ghbin operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


# =============================================================================
# Environment
# =============================================================================


class EnvironmentSetupError(GhbinError):
    """Base class for problems with the local environment or inputs."""

    error_prefix = "Environment error"


class ConfigurationError(EnvironmentSetupError):
    """Raised when configuration is missing or invalid."""

    error_prefix = "Configuration error"


class InvalidRepositoryError(EnvironmentSetupError):
    """Raised when a repository spec is not ``owner/repo[@tag]``."""

    error_prefix = "Invalid repository"


class TagNotFoundError(EnvironmentSetupError):
    """Raised when no release tag can be determined."""

    error_prefix = "No tag found"


class AuthenticationRequiredError(EnvironmentSetupError):
    """Raised when a write operation is attempted without a token."""

    error_prefix = "Authentication required"


class GitError(EnvironmentSetupError):
    """Raised when git is unavailable or a git command fails."""

    error_prefix = "Git command failed"


class UnsupportedPlatformError(EnvironmentSetupError):
    """Raised when the running platform has no known target triple."""

    error_prefix = "Unsupported platform"


# =============================================================================
# Build
# =============================================================================


class BuildFailedError(GhbinError):
    """Raised when building one target (or every target) fails."""

    error_prefix = "Build failed"

    def __init__(self, target: str, message: str | None = None) -> None:
        """Initialize with the failing target.

        Args:
            target: Target triple, or "all targets".
            message: Optional detail such as the tool's exit status.

        """
        super().__init__(message or "build did not produce binaries", target)


# =============================================================================
# Transport
# =============================================================================


class TransportError(GhbinError):
    """A single failed HTTP exchange.

    Attributes:
        status: HTTP status code, or None when no response was received.
        retryable: Whether repeating the request may succeed.

    """

    error_prefix = "Request failed"

    def __init__(
        self,
        message: str,
        status: int | None = None,
        *,
        retryable: bool = False,
    ) -> None:
        """Initialize transport error.

        Args:
            message: Description of the failure.
            status: HTTP status code if a response was received.
            retryable: Whether the failure is transient.

        """
        super().__init__(message)
        self.status = status
        self.retryable = retryable


class RetryExhaustedError(GhbinError):
    """Raised when a request failed terminally or ran out of attempts."""

    error_prefix = "Request failed"

    def __init__(
        self, operation: str, cause: TransportError, attempts: int
    ) -> None:
        """Initialize with the operation name and the last failure.

        Args:
            operation: Human readable name of the operation.
            cause: The last transport error observed.
            attempts: Number of attempts that were made.

        """
        plural = "attempt" if attempts == 1 else "attempts"
        super().__init__(
            f"{cause.message} (after {attempts} {plural})", operation
        )
        self.operation = operation
        self.cause = cause
        self.attempts = attempts

    @property
    def status(self) -> int | None:
        """HTTP status of the last failure, if any."""
        return self.cause.status


# =============================================================================
# Not found
# =============================================================================


class NotFoundError(GhbinError):
    """Base class for missing remote or local entities."""

    error_prefix = "Not found"


class ReleaseNotFoundError(NotFoundError):
    """Raised when a release does not exist."""

    error_prefix = "Release not found"

    def __init__(self, owner: str, repo: str, tag: str) -> None:
        """Initialize with the repository and tag looked up."""
        super().__init__(f"no release '{tag}'", f"{owner}/{repo}")
        self.owner = owner
        self.repo = repo
        self.tag = tag


class AssetNotFoundError(NotFoundError):
    """Raised when no release asset matches the requested target."""

    error_prefix = "No matching asset"

    def __init__(
        self, target_triple: str, tag: str, available: Sequence[str]
    ) -> None:
        """Initialize with the target and the names that were available."""
        if available:
            listing = "available assets: " + ", ".join(available)
        else:
            listing = "No assets available"
        super().__init__(f"release {tag}; {listing}", target_triple)
        self.target_triple = target_triple
        self.tag = tag
        self.available = list(available)


class ChecksumEntryNotFoundError(NotFoundError):
    """Raised when the manifest has no line for the downloaded asset."""

    error_prefix = "Checksum entry not found"

    def __init__(self, filename: str, manifest: str) -> None:
        """Initialize with the asset name and the manifest consulted."""
        super().__init__(f"no entry in {manifest}", filename)
        self.filename = filename
        self.manifest = manifest


class BinaryNotFoundError(NotFoundError):
    """Raised when the requested binary is not in the archive."""

    error_prefix = "Binary not found"

    def __init__(self, name: str, available: Sequence[str]) -> None:
        """Initialize with the requested name and the executables found."""
        super().__init__(
            "available binaries: " + (", ".join(available) or "none"), name
        )
        self.name = name
        self.available = list(available)


# =============================================================================
# Integrity
# =============================================================================


class IntegrityError(GhbinError):
    """Base class for integrity verification failures."""

    error_prefix = "Integrity check failed"


class ChecksumFileNotFoundError(IntegrityError):
    """Raised when a release carries no checksum manifest."""

    error_prefix = "Checksum file not found"

    def __init__(self, tag: str, expected: Sequence[str]) -> None:
        """Initialize with the release tag and the names searched for."""
        super().__init__(
            "looked for " + ", ".join(expected) + f" in release {tag}"
        )
        self.tag = tag


class ChecksumMismatchError(IntegrityError):
    """Raised when a downloaded file's digest differs from the manifest."""

    error_prefix = "Checksum mismatch"

    def __init__(self, filename: str, expected: str, actual: str) -> None:
        """Initialize with both digests."""
        super().__init__(f"expected {expected}, got {actual}", filename)
        self.filename = filename
        self.expected = expected
        self.actual = actual


class SignatureNotFoundError(IntegrityError):
    """Raised when signature checking is requested but none is published."""

    error_prefix = "Signature not found"


# =============================================================================
# Archive / install
# =============================================================================


class ArchiveError(GhbinError):
    """Raised when an archive cannot be created or extracted."""

    error_prefix = "Archive error"


class InstallationError(GhbinError):
    """Raised when installation fails."""

    error_prefix = "Installation failed"


class NoExecutablesFoundError(InstallationError):
    """Raised when an extracted archive holds no executables."""

    error_prefix = "No executables found"
