from typing import Optional
from sqlalchemy import create_engine, ForeignKey, Index, UniqueConstraint, String, DECIMAL, DateTime, Date
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Mapped, Session, relationship, mapped_column
from datetime import datetime, date
from decimal import Decimal

from expense_tracker.config import DATABASE_URL, SQL_ECHO
from expense_tracker.logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_CATEGORIES = (
    "Food",
    "Transportation",
    "Housing",
    "Utilities",
    "Entertainment",
    "Healthcare",
    "Shopping",
    "Education",
    "Personal Care",
    "Other",
)


class NotFoundError(Exception):
    pass


class Base(DeclarativeBase):
    pass


class UserDB(Base):
    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
        Index("idx_users_email", "email"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Authentication
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Audit Trail
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    expenses = relationship("ExpenseDB", back_populates="user", cascade="all, delete-orphan")


class CategoryDB(Base):
    __tablename__ = "categories"

    __table_args__ = (
        UniqueConstraint("name", name="uq_category_name"),
        Index("idx_category_name", "name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    expenses = relationship("ExpenseDB", back_populates="category")


class ExpenseDB(Base):
    __tablename__ = "expenses"

    __table_args__ = (
        Index("idx_expenses_user_date", "user_id", "expense_date"),
        Index("idx_expenses_user_category", "user_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"))

    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(DECIMAL(10, 2), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Audit Trail
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserDB", back_populates="expenses")
    category = relationship("CategoryDB", back_populates="expenses")

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None


engine = create_engine(DATABASE_URL, echo=SQL_ECHO)
session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency to get the database session
def get_db():
    database = session_local()
    try:
        yield database
    finally:
        database.close()


def seed_categories(db: Session) -> int:
    """Insert any default category that is missing. Returns the number added."""
    existing = {name for (name,) in db.query(CategoryDB.name).all()}
    missing = [name for name in DEFAULT_CATEGORIES if name not in existing]
    for name in missing:
        db.add(CategoryDB(name=name))
    if missing:
        db.commit()
    return len(missing)


def init_db(bind=None) -> None:
    """Create all tables and seed the reference categories."""
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    factory = session_local if bind is engine else sessionmaker(autocommit=False, autoflush=False, bind=bind)
    database = factory()
    try:
        added = seed_categories(database)
        if added:
            logger.info(f"Seeded {added} default categories")
    finally:
        database.close()
