import os

import pytest

# Sin archivos de profiling durante los tests
os.environ.setdefault('STORE_CONSOLE_PROFILING', '0')

from store_console.app_container import AppContainer
from store_console.clock import ManualClock
from store_console.main import create_app


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def container(clock):
    return AppContainer(clock=clock, latency=0)


@pytest.fixture
def app(container):
    app = create_app(container)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
