from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="unity-hands-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["SECRET_KEY"] = "unity-hands-test-secret-key-0123456789"
os.environ["DATABASE_URL"] = f"sqlite:///{(_TEST_DIR / 'test.db').as_posix()}"
os.environ["DATA_DIR"] = str(_TEST_DIR)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from unity_hands.api.app import create_app  # noqa: E402
from unity_hands.db import models  # noqa: E402,F401
from unity_hands.db.base import Base  # noqa: E402
from unity_hands.db.session import SessionLocal, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> Iterator[None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db() -> Iterator[Session]:
    with SessionLocal() as session:
        yield session


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture()
def login_as() -> Callable[[str], TestClient]:
    def _login(email: str) -> TestClient:
        client = TestClient(create_app())
        response = client.post("/jwt", json={"email": email})
        assert response.status_code == 200
        return client

    return _login
