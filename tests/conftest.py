"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path

import pytest

from easyslide.settings import DeliveryMode, Settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test reads settings afresh."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def static_settings(tmp_path: Path) -> Settings:
    return Settings(mode=DeliveryMode.STATIC, static_dir=tmp_path / "static")


@pytest.fixture
def proxy_settings(tmp_path: Path) -> Settings:
    return Settings(
        mode=DeliveryMode.PROXY,
        slides_dir=tmp_path / "slides",
        renderer_command="easyslide-no-such-renderer",
        restart_settle_seconds=0.0,
    )
