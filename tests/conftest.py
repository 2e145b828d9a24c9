import pytest

from placement_vikor.config import reset_config


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the built-in configuration."""
    reset_config()
    yield
    reset_config()
