import os
import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# SQLite pour les tests, AVANT d'importer blockdb
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = SQLALCHEMY_TEST_DATABASE_URL

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database AVANT d'importer main
import blockdb.core.database
blockdb.core.database.engine = test_engine
blockdb.core.database.SessionLocal = TestingSessionLocal

from blockdb.core.database import Base, get_db
from blockdb.core.security import create_access_token
from blockdb.main import app

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

USER_ID = "11111111-1111-1111-1111-111111111111"
WORKSPACE_ID = "22222222-2222-2222-2222-222222222222"
SPACE_ID = "33333333-3333-3333-3333-333333333333"
PAGE_ID = "44444444-4444-4444-4444-444444444444"


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client():
    """Client de test FastAPI"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def auth_headers():
    """Header Authorization avec un token valide"""
    token = create_access_token(USER_ID, WORKSPACE_ID)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def database(db):
    """Database vide (une seule colonne Title)"""
    from blockdb.services.database_service import create_database
    return create_database(db, USER_ID, WORKSPACE_ID, page_id=PAGE_ID, space_id=SPACE_ID, title="Tasks")
