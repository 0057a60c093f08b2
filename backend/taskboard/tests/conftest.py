import os
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest

TEST_DB_FILE = Path(tempfile.gettempdir()) / f"taskboard_test_{uuid4().hex}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_FILE.as_posix()}"
os.environ["API_PREFIX"] = "/api"
os.environ["FK_DELETE_POLICY"] = "restrict"
os.environ["DB_BOOTSTRAP_MODE"] = "off"
os.environ["DB_POOL_PREWARM"] = "false"
os.environ["MAX_REQUEST_BYTES"] = "4096"

from fastapi.testclient import TestClient  # noqa: E402

from taskboard.database.base import Base  # noqa: E402
from taskboard.database.pool import ConnectionPool  # noqa: E402
import taskboard.models  # noqa: E402,F401


def build_pool(**overrides) -> ConnectionPool:
    options = {"max_connections": 3, "timeout": 0.5, "connect_retries": 1, "retry_delay": 0}
    options.update(overrides)
    return ConnectionPool(os.environ["DATABASE_URL"], **options)


@pytest.fixture
def pool():
    pool = build_pool()
    Base.metadata.create_all(bind=pool.engine)
    try:
        yield pool
    finally:
        Base.metadata.drop_all(bind=pool.engine)
        pool.dispose()
        if TEST_DB_FILE.exists():
            TEST_DB_FILE.unlink()


@pytest.fixture
def db(pool):
    with pool.session() as session:
        yield session


@pytest.fixture
def client(pool):
    from taskboard.main import create_app

    with TestClient(create_app(pool)) as test_client:
        yield test_client


@pytest.fixture
def pool_factory():
    created = []

    def factory(**overrides):
        extra = build_pool(**overrides)
        created.append(extra)
        return extra

    yield factory
    for extra in created:
        extra.dispose()
