"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest

# Settings are read at import time, so pin them before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["GRADE_SCALE"] = "detailed"
os.environ["AVERAGE_BY"] = "percentage"

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fastapi.testclient import TestClient  # noqa: E402

from database import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from seed import seed_data  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def seeded_client(db):
    seed_data(db)
    return TestClient(app)
