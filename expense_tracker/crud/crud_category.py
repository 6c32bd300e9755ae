from sqlalchemy.orm import Session
from typing import List, Optional

from expense_tracker.db.core import CategoryDB


def read_db_categories(db: Session) -> List[CategoryDB]:
    """Read all categories, alphabetically"""
    return db.query(CategoryDB).order_by(CategoryDB.name).all()


def read_db_category(db: Session, category_id: int) -> Optional[CategoryDB]:
    """Read a single category by its ID"""
    return db.query(CategoryDB).filter(CategoryDB.id == category_id).first()


def category_exists(db: Session, category_id: int) -> bool:
    return read_db_category(db, category_id) is not None
