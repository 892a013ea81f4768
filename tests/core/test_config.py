# tests/core/test_config.py
import pytest

from libroresenas.core.config import Settings

@pytest.mark.parametrize("environment, expected", [
    ("development", True),
    ("Development", True),
    ("production", False),
    ("test", False),
])
def test_is_development(environment, expected):
    assert Settings(ENVIRONMENT=environment).is_development is expected

@pytest.mark.parametrize("limit, expected", [
    (None, 10),
    (0, 1),
    (-5, 1),
    (25, 25),
    (1000, 100),
])
def test_clamp_page_size(limit, expected):
    settings = Settings(DEFAULT_PAGE_SIZE=10, MAX_PAGE_SIZE=100)
    assert settings.clamp_page_size(limit) == expected
