import pytest

import cssforge
from cssforge import Engine


@pytest.fixture
def engine() -> Engine:
    return Engine()


@pytest.fixture(autouse=True)
def reset_default_engine():
    yield
    cssforge.configure(key="css", nonce=None, source_maps=True, plugins=[])
    cssforge.flush()
