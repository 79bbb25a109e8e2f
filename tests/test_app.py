"""Tests for the FastAPI application factory."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dbinit.config import AppConfig, DatabaseConfig, InitConfig, InitMode
from dbinit.errors import ResourceNotFound
from dbinit.main import create_app


def _config(db_url: str, **init) -> AppConfig:
    config = AppConfig()
    config.database = DatabaseConfig(url=db_url)
    config.init = InitConfig(**init)
    return config


class TestCreateApp:
    def test_database_initialized_before_serving(self, db_url, table_names):
        app = create_app(_config(db_url))
        assert "customer" in table_names()

        with TestClient(app) as client:
            resp = client.get("/api/customers")

        assert resp.status_code == 200
        customers = resp.json()
        assert len(customers) == 5
        assert customers[1] == {"id": 2, "first_name": "Chloe", "last_name": "O'Brian"}

    def test_health(self, db_url):
        with TestClient(create_app(_config(db_url))) as client:
            resp = client.get("/api/health")
        assert resp.json() == {"status": "ok"}

    def test_mode_never_leaves_database_empty(self, db_url, table_names):
        with TestClient(create_app(_config(db_url, mode=InitMode.NEVER))) as client:
            assert client.get("/api/health").status_code == 200
        assert "customer" not in table_names()

    def test_init_failure_aborts_startup(self, db_url):
        with pytest.raises(ResourceNotFound):
            create_app(_config(db_url, locations=["classpath:missing.sql"]))
