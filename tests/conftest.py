import pytest

from doublecheck import contract
from doublecheck.config import Settings, configure


@pytest.fixture(autouse=True)
def default_settings():
    """Every test starts from default diagnostic settings."""
    configure(Settings())
    yield
    configure(Settings())


@pytest.fixture
def bar_contract():
    return contract({}, {
        "get_bar": [{"args": ["x"], "returns": "bar"}, {"args": ["y"], "returns": "foo"}],
    })
