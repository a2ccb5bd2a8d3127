"""Source-control queries used when publishing.

Runs the ``git`` command line tool; no git library is required.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from ghbin.exceptions import GitError
from ghbin.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class CommitInfo:
    """The commit at HEAD.

    Attributes:
        sha: Full commit hash
        author: Author name
        subject: First line of the commit message
        branch: Checked out branch, or None when HEAD is detached

    """

    sha: str
    author: str
    subject: str
    branch: str | None

    @property
    def short_sha(self) -> str:
        """First eight characters of the hash."""
        return self.sha[:8]


class GitRepository:
    """Thin async wrapper around ``git`` for one working tree."""

    def __init__(self, path: Path | None = None, git: str = "git") -> None:
        """Initialize for the working tree at ``path`` (default: cwd)."""
        self.path = path or Path.cwd()
        self.git = git

    async def _run(self, *args: str) -> str:
        """Run a git subcommand and return its stripped stdout.

        Raises:
            GitError: If git is missing or exits non-zero

        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.git,
                *args,
                cwd=self.path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            msg = f"cannot run git: {e}"
            raise GitError(msg) from e

        if process.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            msg = detail or f"exit status {process.returncode}"
            raise GitError(msg, f"git {args[0]}")
        return stdout.decode(errors="replace").strip()

    async def head_tag(self) -> str | None:
        """Return a tag pointing at HEAD (alphabetically first), if any."""
        output = await self._run("tag", "--points-at", "HEAD")
        tags = sorted(line for line in output.splitlines() if line.strip())
        return tags[0] if tags else None

    async def head_commit(self) -> CommitInfo:
        """Return hash, author, subject and branch of HEAD."""
        output = await self._run("log", "-1", "--format=%H%n%an%n%s", "HEAD")
        sha, author, subject = ([*output.splitlines(), "", ""])[:3]
        branch = await self._run("rev-parse", "--abbrev-ref", "HEAD")
        return CommitInfo(
            sha=sha,
            author=author,
            subject=subject,
            branch=None if branch == "HEAD" else branch,
        )

    async def list_tags(self) -> list[str]:
        """Return all tag names sorted lexicographically."""
        output = await self._run("tag", "--list")
        return sorted(line for line in output.splitlines() if line.strip())
