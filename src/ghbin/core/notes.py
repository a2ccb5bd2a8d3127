"""Release notes composed from git metadata."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from ghbin.constants import GITHUB_WEB_URL
from ghbin.core.git import CommitInfo


@dataclass(slots=True, frozen=True)
class NotesContext:
    """Everything the notes template needs.

    Attributes:
        owner: Repository owner
        repo: Repository name
        tag: Release tag
        commit: HEAD commit the release was built from, or None when the
            project is not a git checkout
        binaries: Binary names shipped in the archives
        assets: Asset file names, in upload order

    """

    owner: str
    repo: str
    tag: str
    commit: CommitInfo | None
    binaries: Sequence[str] = field(default_factory=tuple)
    assets: Sequence[str] = field(default_factory=tuple)


def previous_tag(tags: Sequence[str], fallback_branch: str) -> str:
    """Return the compare base for generated notes.

    The second-to-last tag in lexicographic order, or ``fallback_branch``
    when fewer than two tags exist.
    """
    ordered = sorted(tags)
    if len(ordered) < 2:  # noqa: PLR2004
        return fallback_branch
    return ordered[-2]


def compose_release_notes(context: NotesContext) -> str:
    """Render Markdown notes for a release.

    The output depends only on ``context``. Without a commit the commit
    details and the commit link are left out.
    """
    repo_url = f"{GITHUB_WEB_URL}/{context.owner}/{context.repo}"
    slug = f"{context.owner}/{context.repo}@{context.tag}"
    commit = context.commit

    lines = [f"## {context.tag}", ""]
    links = []
    if commit is not None:
        commit_url = f"{repo_url}/commit/{commit.sha}"
        if commit.branch:
            ref_line = f"**Branch:** `{commit.branch}`"
        else:
            ref_line = f"**Tag:** `{context.tag}`"
        lines.extend(
            [
                f"**Commit:** [`{commit.short_sha}`]({commit_url})  ",
                f"**Author:** {commit.author}  ",
                f"{ref_line}  ",
                f"**Message:** {commit.subject}",
                "",
            ]
        )
        links.append(f"- [Commit]({commit_url})")
        tree_ref = commit.sha
    else:
        tree_ref = context.tag

    lines.extend(["### Install", "", "```sh", f"ghbin install {slug}"])
    lines.extend(
        f"ghbin install {slug} --bin {name}" for name in context.binaries
    )
    lines.append("```")

    if context.assets:
        lines.extend(["", "### Assets", ""])
        lines.extend(f"- `{name}`" for name in context.assets)

    links.extend(
        [
            f"- [Source tree]({repo_url}/tree/{tree_ref})",
            f"- [Release]({repo_url}/releases/tag/{context.tag})",
        ]
    )
    lines.extend(["", "### Links", "", *links, ""])
    return "\n".join(lines)
