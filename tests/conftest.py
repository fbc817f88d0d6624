import pytest

from dvec.config import DVecSettings, configure


@pytest.fixture(autouse=True)
def default_settings():
    """Pin settings so a dvec.toml in the working directory cannot leak in."""
    configure(DVecSettings())
    yield
    configure(None)
