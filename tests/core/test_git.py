"""Tests for the git command wrapper."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from ghbin.core.git import CommitInfo, GitRepository
from ghbin.exceptions import GitError

SHA = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture
def repo(tmp_path: Path) -> GitRepository:
    """Repository wrapper for tmp_path."""
    return GitRepository(tmp_path)


@pytest.mark.asyncio
async def test_head_tag_picks_first(repo: GitRepository) -> None:
    """Test the alphabetically first tag at HEAD is returned."""
    with patch.object(
        repo, "_run", AsyncMock(return_value="v1.1.0\nv1.0.0\n")
    ):
        assert await repo.head_tag() == "v1.0.0"


@pytest.mark.asyncio
async def test_head_tag_none(repo: GitRepository) -> None:
    """Test an untagged HEAD yields None."""
    with patch.object(repo, "_run", AsyncMock(return_value="")):
        assert await repo.head_tag() is None


@pytest.mark.asyncio
async def test_head_commit(repo: GitRepository) -> None:
    """Test hash, author, subject and branch are read."""
    outputs = [f"{SHA}\nDana\nFix parser", "main"]

    with patch.object(repo, "_run", AsyncMock(side_effect=outputs)):
        commit = await repo.head_commit()

    assert commit == CommitInfo(
        sha=SHA, author="Dana", subject="Fix parser", branch="main"
    )
    assert commit.short_sha == "01234567"


@pytest.mark.asyncio
async def test_head_commit_detached(repo: GitRepository) -> None:
    """Test a detached HEAD has no branch."""
    outputs = [f"{SHA}\nDana\nx", "HEAD"]

    with patch.object(repo, "_run", AsyncMock(side_effect=outputs)):
        commit = await repo.head_commit()

    assert commit.branch is None


@pytest.mark.asyncio
async def test_list_tags_sorted(repo: GitRepository) -> None:
    """Test tags are returned sorted with blank lines dropped."""
    with patch.object(
        repo, "_run", AsyncMock(return_value="v2\n\nv1\nv10")
    ):
        assert await repo.list_tags() == ["v1", "v10", "v2"]


@pytest.mark.asyncio
async def test_run_failure_raises_git_error(repo: GitRepository) -> None:
    """Test a non-zero exit surfaces git's stderr."""
    process = AsyncMock()
    process.communicate.return_value = (b"", b"fatal: not a git repo\n")
    process.returncode = 128

    with (
        patch("asyncio.create_subprocess_exec", return_value=process),
        pytest.raises(GitError, match="not a git repo"),
    ):
        await repo.list_tags()


@pytest.mark.asyncio
async def test_run_git_missing(repo: GitRepository) -> None:
    """Test a missing git executable raises GitError."""
    with (
        patch(
            "asyncio.create_subprocess_exec",
            side_effect=FileNotFoundError("git"),
        ),
        pytest.raises(GitError, match="cannot run git"),
    ):
        await repo.head_tag()


@pytest.mark.asyncio
async def test_run_returns_stripped_stdout(repo: GitRepository) -> None:
    """Test stdout is decoded and stripped."""
    process = AsyncMock()
    process.communicate.return_value = (b"  v1.0.0\n", b"")
    process.returncode = 0

    with patch(
        "asyncio.create_subprocess_exec", return_value=process
    ) as mock_exec:
        assert await repo.head_tag() == "v1.0.0"

    assert mock_exec.call_args.args[:4] == (
        "git",
        "tag",
        "--points-at",
        "HEAD",
    )
