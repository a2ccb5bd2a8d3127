"""GitHub release model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ghbin.core.github.models.asset import Asset


@dataclass(slots=True, frozen=True)
class Release:
    """Represents a GitHub release with its metadata and assets.

    Attributes:
        id: Numeric release id, used for asset mutation
        tag_name: Git tag; unique within a repository
        name: Display name
        draft: Whether the release is an unpublished draft
        prerelease: Whether the release is marked as a prerelease
        target_commitish: Commit or branch the tag points at, if given
        body: Release notes
        html_url: Web page of the release
        assets: Assets in the order GitHub listed them

    """

    id: int
    tag_name: str
    name: str = ""
    draft: bool = False
    prerelease: bool = False
    target_commitish: str | None = None
    body: str | None = None
    html_url: str = ""
    assets: list[Asset] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, api_data: dict[str, Any]) -> Release:
        """Create Release from GitHub API response data.

        Assets missing a name or download URL are skipped.

        Args:
            api_data: Raw release data from GitHub API

        Returns:
            Release instance

        """
        assets = []
        for asset_data in api_data.get("assets") or []:
            asset = Asset.from_api_response(asset_data)
            if asset:
                assets.append(asset)

        tag_name = api_data.get("tag_name", "")
        return cls(
            id=int(api_data.get("id", 0)),
            tag_name=tag_name,
            name=api_data.get("name") or tag_name,
            draft=bool(api_data.get("draft", False)),
            prerelease=bool(api_data.get("prerelease", False)),
            target_commitish=api_data.get("target_commitish"),
            body=api_data.get("body"),
            html_url=api_data.get("html_url", ""),
            assets=assets,
        )

    def asset_names(self) -> list[str]:
        """Return asset names in listed order."""
        return [asset.name for asset in self.assets]

    def get_asset(self, name: str) -> Asset | None:
        """Return the asset called exactly ``name``, if present."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None
