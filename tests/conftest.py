import os
from typing import Iterator

import pytest

# Defaults applied before the app (and its cached Settings) is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from products_api import models  # noqa: E402,F401
from products_api.core.db import Base, get_engine  # noqa: E402
from products_api.main import app  # noqa: E402
from products_api.repositories import ProductStorageSQL  # noqa: E402


@pytest.fixture
def engine() -> Iterator[Engine]:
    """
    In-memory SQLite with the products table.

    StaticPool keeps one connection so every checkout sees the same database,
    including from the threadpool TestClient runs sync handlers in.
    """
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def storage(engine: Engine) -> ProductStorageSQL:
    return ProductStorageSQL(engine)


@pytest.fixture
def client(engine: Engine) -> Iterator[TestClient]:
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


# =========================
# Live service tests (optional)
# =========================
@pytest.fixture(scope="session")
def base_url() -> str:
    """
    Base URL of a running products-api, e.g. a docker compose service.
    Tests using it are skipped unless RUN_HTTP_TESTS=1.
    """
    if os.getenv("RUN_HTTP_TESTS", "0").strip() != "1":
        pytest.skip("live HTTP tests disabled; set RUN_HTTP_TESTS=1 to run them")
    url = os.getenv("PRODUCTS_BASE_URL", "http://localhost:8000").strip()
    return url.rstrip("/")
