"""Pytest configuration and fixtures."""

import pytest

from episodeforge.config import EpisodeForgeSettings, set_settings
from episodeforge.models import Character, Episode

# Import CLI fixtures to make them available globally
from tests.cli_fixtures import clean_runner, cli_invoke  # noqa: F401
from tests.helpers import make_scenes


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test",
    )
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test",
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test with default settings and no user config files."""
    for name in (
        "EPISODEFORGE_BULK_ITEM_DELAY_SECONDS",
        "EPISODEFORGE_DEFAULT_SCENE_DURATION",
        "EPISODEFORGE_LOG_LEVEL",
        "EPISODEFORGE_DEBUG",
        "EPISODEFORGE_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    set_settings(EpisodeForgeSettings())

    yield

    import episodeforge.config.settings as settings_module

    settings_module._settings = None


@pytest.fixture
def four_scene_episode():
    """Episode with scenes S1..S4 in order."""
    return Episode(
        id="ep-1", title="Street Food", scenes=make_scenes("S1", "S2", "S3", "S4")
    )


@pytest.fixture
def host():
    """Main host character with clothing and appearance keywords."""
    return Character(
        id="char-1",
        name="Linh",
        role="host",
        is_main=True,
        clothing_keywords="red ao dai, white sneakers",
        appearance_keywords="long black hair, round glasses",
    )
