from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from expense_tracker.db.core import DEFAULT_CATEGORIES, CategoryDB, init_db, seed_categories


def test_init_db_seeds_default_categories_once():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(bind=engine)
    init_db(bind=engine)

    database = sessionmaker(bind=engine)()
    try:
        names = sorted(name for (name,) in database.query(CategoryDB.name).all())
        assert names == sorted(DEFAULT_CATEGORIES)
        assert seed_categories(database) == 0
    finally:
        database.close()
        engine.dispose()


def test_categories_endpoint(client):
    categories = client.get("/categories/").json()
    assert [c["name"] for c in categories] == sorted(DEFAULT_CATEGORIES)

    first = categories[0]
    assert client.get(f"/categories/{first['id']}").json() == first
    assert client.get("/categories/999").status_code == 404

