from sqlalchemy.orm import Session, Query, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, desc, asc
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from expense_tracker.db.core import ExpenseDB, UserDB, NotFoundError
from expense_tracker.crud.crud_category import category_exists
from expense_tracker.models.expense import ExpenseCreate, ExpenseUpdate, ExpenseFilter, ExpenseOrderField, ExpenseRecord
from expense_tracker.logging_config import get_logger

logger = get_logger(__name__)


# ===== UTILITY FUNCTIONS =====

def _apply_filters(query: Query, filters: Optional[ExpenseFilter]) -> Query:
    if filters:
        if filters.category_id:
            query = query.filter(ExpenseDB.category_id == filters.category_id)
        if filters.date_from:
            query = query.filter(ExpenseDB.expense_date >= filters.date_from)
        if filters.date_to:
            query = query.filter(ExpenseDB.expense_date <= filters.date_to)
    return query


def _user_expenses(db: Session, user_id: int) -> Query:
    return db.query(ExpenseDB).filter(ExpenseDB.user_id == user_id).options(joinedload(ExpenseDB.category))


def _to_records(rows: List[ExpenseDB]) -> List[ExpenseRecord]:
    return [ExpenseRecord.model_validate(row) for row in rows]


# ===== DATABASE OPERATIONS =====

def create_db_expense(db: Session, user_id: int, expense_data: ExpenseCreate) -> ExpenseDB:
    """Create a new expense owned by user_id"""

    user = db.query(UserDB).filter(UserDB.id == user_id).first()
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    if expense_data.category_id is not None and not category_exists(db, expense_data.category_id):
        raise ValueError(f"Category with id {expense_data.category_id} not found")

    db_expense = ExpenseDB(
        user_id=user_id,
        description=expense_data.description,
        amount=expense_data.amount,
        category_id=expense_data.category_id,
        expense_date=expense_data.expense_date,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_expense)
        db.commit()
        db.refresh(db_expense)
    except IntegrityError:
        db.rollback()
        raise ValueError("Expense creation failed due to database constraint")

    logger.info(f"Created expense {db_expense.id} for user {user_id}")
    return db_expense


def read_db_expense(db: Session, expense_id: int, user_id: Optional[int] = None) -> Optional[ExpenseDB]:
    """Read an expense by ID, optionally restricted to its owner"""

    query = db.query(ExpenseDB).filter(ExpenseDB.id == expense_id)

    if user_id:
        query = query.filter(ExpenseDB.user_id == user_id)

    return query.options(joinedload(ExpenseDB.category)).first()


def read_db_expenses(db: Session, user_id: int, filters: Optional[ExpenseFilter] = None,
                     skip: int = 0, limit: int = 100,
                     order_by: ExpenseOrderField = ExpenseOrderField.EXPENSE_DATE,
                     order_desc: bool = True) -> List[ExpenseDB]:
    """Read expenses with filtering, ordering and pagination"""

    query = _apply_filters(_user_expenses(db, user_id), filters)

    order_column = getattr(ExpenseDB, ExpenseOrderField(order_by).value)
    direction = desc if order_desc else asc
    query = query.order_by(direction(order_column), direction(ExpenseDB.id))

    return query.offset(skip).limit(limit).all()


def count_db_expenses(db: Session, user_id: int, filters: Optional[ExpenseFilter] = None) -> int:
    """Count expenses for pagination"""
    query = db.query(ExpenseDB).filter(ExpenseDB.user_id == user_id)
    return _apply_filters(query, filters).count()


def read_recent_expenses(db: Session, user_id: int, limit: int = 5) -> List[ExpenseDB]:
    return (
        _user_expenses(db, user_id)
        .order_by(desc(ExpenseDB.expense_date), desc(ExpenseDB.id))
        .limit(limit)
        .all()
    )


def update_db_expense(db: Session, expense_id: int, user_id: int,
                      expense_updates: ExpenseUpdate) -> ExpenseDB:
    """Update an existing expense"""

    db_expense = read_db_expense(db, expense_id, user_id=user_id)
    if not db_expense:
        raise NotFoundError(f"Expense with id {expense_id} not found")

    update_data = expense_updates.model_dump(exclude_unset=True)

    for field in ("description", "amount", "expense_date"):
        if field in update_data and update_data[field] is None:
            raise ValueError(f"{field} cannot be null")

    category_id = update_data.get("category_id")
    if category_id is not None and not category_exists(db, category_id):
        raise ValueError(f"Category with id {category_id} not found")

    for field, value in update_data.items():
        setattr(db_expense, field, value)

    db_expense.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(db_expense)
    except IntegrityError:
        db.rollback()
        raise ValueError("Expense update failed due to database constraint")

    logger.info(f"Updated expense {expense_id} for user {user_id}")
    return db_expense


def delete_db_expense(db: Session, expense_id: int, user_id: int) -> bool:
    """Delete an expense"""

    db_expense = db.query(ExpenseDB).filter(
        ExpenseDB.id == expense_id,
        ExpenseDB.user_id == user_id
    ).first()

    if not db_expense:
        raise NotFoundError(f"Expense with id {expense_id} not found")

    db.delete(db_expense)
    db.commit()
    logger.info(f"Deleted expense {expense_id} for user {user_id}")
    return True


# ===== RECORD STORE (aggregation inputs) =====

def get_records_by_date_range(db: Session, user_id: int, start_date: date, end_date: date) -> List[ExpenseRecord]:
    """Expenses with start_date <= expense_date <= end_date, newest first"""
    rows = (
        _user_expenses(db, user_id)
        .filter(ExpenseDB.expense_date.between(start_date, end_date))
        .order_by(desc(ExpenseDB.expense_date), asc(ExpenseDB.id))
        .all()
    )
    return _to_records(rows)


def get_records_by_year(db: Session, user_id: int, year: int) -> List[ExpenseRecord]:
    return get_records_by_date_range(db, user_id, date(year, 1, 1), date(year, 12, 31))


def get_all_records(db: Session, user_id: int) -> List[ExpenseRecord]:
    rows = (
        _user_expenses(db, user_id)
        .order_by(desc(ExpenseDB.expense_date), asc(ExpenseDB.id))
        .all()
    )
    return _to_records(rows)


def get_total_by_user(db: Session, user_id: int, date_from: Optional[date] = None,
                      date_to: Optional[date] = None) -> Decimal:
    """Sum of a user's expense amounts, optionally within a date range"""
    query = db.query(func.sum(ExpenseDB.amount)).filter(ExpenseDB.user_id == user_id)
    query = _apply_filters(query, ExpenseFilter(date_from=date_from, date_to=date_to))
    total = query.scalar()
    return Decimal(str(total)).quantize(Decimal("0.01")) if total is not None else Decimal("0.00")
