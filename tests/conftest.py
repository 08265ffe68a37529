import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

test_db_path = PROJECT_ROOT / "test.db"
if test_db_path.exists():
    test_db_path.unlink()

os.environ["DATABASE_URL"] = f"sqlite:///{test_db_path}"
os.environ.pop("GOOGLE_PLACES_API_KEY", None)

from reviewdisplay.main import app  # noqa: E402
from reviewdisplay.db.base import Base  # noqa: E402
from reviewdisplay.api.dependencies import get_client, get_db  # noqa: E402
from tests.fakes import FakePlacesClient  # noqa: E402

engine = create_engine(
    f"sqlite:///{test_db_path}", connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def places():
    fake = FakePlacesClient()
    app.dependency_overrides[get_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_client, None)


@pytest.fixture
def client(places):
    with TestClient(app) as c:
        yield c
