import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from expense_tracker.db.core import Base, CategoryDB, get_db, seed_categories
from expense_tracker.main import app

PASSWORD = "password123"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    database = factory()
    seed_categories(database)
    database.close()
    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    database = session_factory()
    yield database
    database.close()


@pytest.fixture
def category_ids(db_session):
    return {category.name: category.id for category in db_session.query(CategoryDB).all()}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        database = session_factory()
        try:
            yield database
        finally:
            database.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client: TestClient, name: str, email: str, password: str = PASSWORD):
    return client.post("/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "confirm_password": password,
    })


def login(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


@pytest.fixture
def auth_client(client):
    """Client with a registered and logged-in user"""
    assert register(client, "Alice", "alice@example.com").status_code == 201
    assert login(client, "alice@example.com").status_code == 200
    return client


@pytest.fixture
def other_client(client):
    """Second browser, logged in as a different user"""
    other = TestClient(app)
    assert register(other, "Bob", "bob@example.com").status_code == 201
    assert login(other, "bob@example.com").status_code == 200
    return other


def add_expense(client: TestClient, description: str, amount: str, expense_date: str, category_id=None):
    response = client.post("/expenses/", json={
        "description": description,
        "amount": amount,
        "expense_date": expense_date,
        "category_id": category_id,
    })
    assert response.status_code == 201, response.text
    return response.json()
