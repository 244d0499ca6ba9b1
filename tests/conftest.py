# -*- coding: utf-8 -*-
"""
Fixtures compartidas: contenedor sobre una base temporal, reloj fijo y
cliente Flask.
"""
from datetime import datetime, timedelta

import pytest

from kiosquito.app_container import AppContainer
from kiosquito.config import Config
from kiosquito.main import create_app
from kiosquito.performance_logger import reset_stats, set_profiling_enabled

FIXED_NOW = datetime(2024, 5, 15, 10, 30, 0)


class FakeClock:
    """Reloj controlable para marcas de tiempo deterministas."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def set(self, value):
        self.now = value

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(FIXED_NOW)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "kiosquito_test.db")


@pytest.fixture
def config(db_path):
    return Config(db_path=db_path, enable_profiling=False)


@pytest.fixture
def make_container(clock):
    """Fábrica de contenedores; todos se cierran al terminar el test."""
    created = []

    def factory(cfg):
        c = AppContainer(cfg, clock=clock)
        c.init()
        created.append(c)
        return c

    yield factory
    for c in created:
        c.close()


@pytest.fixture
def container(make_container, config):
    return make_container(config)


@pytest.fixture
def cup(container):
    return container.currency_service.get_base_currency()


@pytest.fixture
def usd(container):
    return container.currency_repo.get_by_code("USD")


@pytest.fixture
def app(container):
    app = create_app(container=container)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def auth_client(client):
    r = client.post("/login", json={"username": "admin", "password": "admin123"})
    assert r.status_code == 200
    return client


@pytest.fixture(autouse=True)
def _profiling_state():
    # El profiling es global al proceso; cada test parte limpio
    reset_stats()
    yield
    set_profiling_enabled(True)
    reset_stats()
