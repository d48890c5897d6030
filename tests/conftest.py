from unittest.mock import Mock

import pytest

from laravel_router.router import Router


@pytest.fixture
def funct():
    """Mock function for testing purposes."""
    return Mock(__name__="Mock")


@pytest.fixture
def host():
    """Express-type app recording every registration."""
    return Mock(name="app")


@pytest.fixture
def router():
    """Router without host: routes are applied lazily."""
    return Router(configure_logs=False)


@pytest.fixture
def eager_router(host):
    """Router registering routes with the host as they are defined."""
    return Router(host, configure_logs=False)
