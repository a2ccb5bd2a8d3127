"""GitHub release asset model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ghbin.constants import DEFAULT_CONTENT_TYPE


@dataclass(slots=True, frozen=True)
class Asset:
    """Represents a GitHub release asset.

    Attributes:
        id: Numeric asset id, used for deletion
        name: Asset filename, unique within its release
        size: Asset size in bytes
        browser_download_url: Public download URL
        url: API URL; serves the raw bytes with an octet-stream Accept header
        content_type: MIME type reported by GitHub

    """

    id: int
    name: str
    size: int
    browser_download_url: str
    url: str = ""
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_api_response(cls, asset_data: dict[str, Any]) -> Asset | None:
        """Create Asset from GitHub API response data.

        Args:
            asset_data: Raw asset data from GitHub API

        Returns:
            Asset instance or None if required fields are missing

        """
        try:
            name = asset_data.get("name", "")
            download_url = asset_data.get("browser_download_url", "")
            if not name or not download_url:
                return None

            return cls(
                id=int(asset_data.get("id", 0)),
                name=name,
                size=int(asset_data.get("size", 0)),
                browser_download_url=download_url,
                url=asset_data.get("url") or "",
                content_type=asset_data.get("content_type")
                or DEFAULT_CONTENT_TYPE,
            )
        except (TypeError, ValueError):
            return None
