"""Shared fixtures for CLI tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ghbin.config import GlobalConfig, GlobalConfigManager
from ghbin.core.retry import RetryPolicy


@pytest.fixture
def config_manager(tmp_path: Path) -> GlobalConfigManager:
    """Config manager writing into a temporary directory."""
    return GlobalConfigManager(config_dir=tmp_path / "config")


@pytest.fixture
def global_config(config_manager: GlobalConfigManager) -> GlobalConfig:
    """Default configuration as loaded from a fresh settings file."""
    return config_manager.load_global_config()


@pytest.fixture
def token_store() -> MagicMock:
    """Keyring store double holding no token."""
    store = MagicMock()
    store.is_available.return_value = True
    store.get.return_value = None
    store.delete.return_value = True
    return store


@pytest.fixture
def handler_kwargs(
    config_manager: GlobalConfigManager,
    global_config: GlobalConfig,
    token_store: MagicMock,
) -> dict:
    """Keyword arguments shared by every command handler."""
    return {
        "config_manager": config_manager,
        "global_config": global_config,
        "token": None,
        "retry_policy": RetryPolicy.disabled(),
        "token_store": token_store,
    }
