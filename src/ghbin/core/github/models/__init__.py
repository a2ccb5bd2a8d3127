"""GitHub models package."""

from ghbin.core.github.models.asset import Asset
from ghbin.core.github.models.release import Release
from ghbin.core.github.models.selector import AssetSelector

__all__ = [
    "Asset",
    "AssetSelector",
    "Release",
]
