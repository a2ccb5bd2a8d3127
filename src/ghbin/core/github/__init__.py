"""GitHub release access - REST client and release models."""

from ghbin.core.github.client import ReleaseClient, get_content_type
from ghbin.core.github.models import Asset, AssetSelector, Release

__all__ = [
    "Asset",
    "AssetSelector",
    "Release",
    "ReleaseClient",
    "get_content_type",
]
