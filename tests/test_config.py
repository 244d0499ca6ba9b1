# -*- coding: utf-8 -*-
"""
Tests de configuración por entorno y del profiling de operaciones.
"""
import pytest

from kiosquito.config import Config
from kiosquito.performance_logger import (
    get_function_stats,
    profile_function,
    set_profiling_enabled,
)


def test_config_defaults(monkeypatch):
    for name in ("KIOSQUITO_DB_PATH", "KIOSQUITO_ADMIN_PASSWORD",
                 "KIOSQUITO_SEED_EXAMPLE_PRODUCTS", "KIOSQUITO_SEED_EXAMPLE_CURRENCIES",
                 "FLASK_PORT"):
        monkeypatch.delenv(name, raising=False)

    config = Config.from_env()
    assert config.db_path == "kiosquito.db"
    assert config.admin_password == "admin123"
    assert config.seed_example_currencies is True
    assert config.seed_example_products is False
    assert config.port == 5000


def test_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("KIOSQUITO_PRODUCTION_MODE", raising=False)
    monkeypatch.setenv("KIOSQUITO_DB_PATH", str(tmp_path / "pos.db"))
    monkeypatch.setenv("KIOSQUITO_SEED_EXAMPLE_PRODUCTS", "si")
    monkeypatch.setenv("KIOSQUITO_LOG_LEVEL", "debug")
    monkeypatch.setenv("FLASK_PORT", "no-es-numero")

    config = Config.from_env()
    assert config.db_path == str(tmp_path / "pos.db")
    assert config.seed_example_products is True
    assert config.log_level == "DEBUG"
    assert config.port == 5000


def test_production_mode_disables_example_products_and_debug(monkeypatch):
    monkeypatch.setenv("KIOSQUITO_PRODUCTION_MODE", "1")
    monkeypatch.setenv("KIOSQUITO_SECRET_KEY", "clave-larga")
    monkeypatch.setenv("KIOSQUITO_SEED_EXAMPLE_PRODUCTS", "1")
    monkeypatch.setenv("KIOSQUITO_LOG_LEVEL", "debug")

    config = Config.from_env()
    assert config.production_mode is True
    assert config.seed_example_products is False
    assert config.log_level == "INFO"


def test_config_overrides(monkeypatch):
    monkeypatch.setenv("KIOSQUITO_ADMIN_USER", "root")
    config = Config.from_env(admin_username="dueño")
    assert config.admin_username == "dueño"

    with pytest.raises(TypeError):
        Config.from_env(no_existe=True)


def test_profile_function_records_stats():
    set_profiling_enabled(True)

    @profile_function(name="Operación de prueba")
    def operation(x):
        return x * 2

    assert operation(2) == 4
    assert operation(3) == 6
    assert get_function_stats()["Operación de prueba"]["calls"] == 2


def test_profile_function_disabled():
    set_profiling_enabled(False)

    @profile_function
    def quiet():
        return "ok"

    assert quiet() == "ok"
    assert get_function_stats() == {}


def test_service_calls_are_profiled(make_container, db_path):
    container = make_container(Config(db_path=db_path, enable_profiling=True))
    container.inventory_service.list_products()
    assert get_function_stats()["Listar productos"]["calls"] == 1
