"""Shared fixtures for the Library API tests."""

import sys
from pathlib import Path

import pytest

# Make the project root importable when the package is not installed
root_path = Path(__file__).parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))

from library_api.app.core.config import Settings  # noqa: E402
from library_api.app.core.db import SQLiteGateway  # noqa: E402
from library_api.app.services.auth_service import AuthService  # noqa: E402
from library_api.app.services.catalog_service import CatalogService  # noqa: E402
from library_api.app.services.query_service import QueryService  # noqa: E402


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "library.db")


@pytest.fixture
def gateway(db_path) -> SQLiteGateway:
    gw = SQLiteGateway(db_path)
    gw.init_db()
    return gw


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(
        secret_key="test-secret",
        shared_password="secret",
        access_token_expire_minutes=0,
        require_token_for_mutations=True,
        database_url=db_path,
        log_level="WARNING",
    )


@pytest.fixture
def catalog(gateway) -> CatalogService:
    return CatalogService(gateway)


@pytest.fixture
def auth(gateway, settings) -> AuthService:
    return AuthService(gateway, settings)


@pytest.fixture
def queries(gateway, catalog) -> QueryService:
    return QueryService(gateway, catalog)
