"""Pytest configuration for tests."""

import pytest

from pentos_bot.config import EngineConfig
from pentos_bot.land import Land
from pentos_bot.player import Player


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--pentos-jar",
        action="store",
        default=None,
        help="Path to the Pentos simulator JAR; enables tests that start a JVM"
    )


@pytest.fixture
def pentos_jar(request):
    """Simulator JAR path, skipping the test when none was given."""
    path = request.config.getoption("--pentos-jar")
    if not path:
        pytest.skip("needs --pentos-jar")
    return path


@pytest.fixture
def board():
    """Factory for boards drawn as ASCII rows."""
    return Land.from_rows


@pytest.fixture
def empty_land():
    return Land(10)


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def player(config):
    p = Player(config)
    p.init()
    return p
